"""Wash-sale restriction repository protocol."""

from datetime import datetime
from typing import Protocol

from rebalancer.domain.models import RestrictedSecurity


class RestrictionRepository(Protocol):
    """Interface for append-only wash-sale restriction records."""

    def create(self, restriction: RestrictedSecurity) -> RestrictedSecurity:
        """Persist a new restriction."""
        ...

    def list_active(self, now: datetime) -> list[RestrictedSecurity]:
        """Restrictions with blocked_until > now."""
        ...

    def list_all(self) -> list[RestrictedSecurity]:
        ...
