"""Sleeve management with validation."""

import uuid
from dataclasses import dataclass, field
from typing import Optional

from rebalancer.core.exceptions import NotFoundError, ValidationError
from rebalancer.domain.models import Sleeve, SleeveMember
from rebalancer.repositories.protocols import (
    AllocationModelRepository,
    SecurityRepository,
    SleeveRepository,
)


@dataclass
class SleeveMemberInput:
    ticker: str
    rank: int
    is_active: bool = True
    is_legacy: bool = False


@dataclass
class SleeveCreate:
    """Input data for creating or replacing a sleeve."""

    name: str
    members: list[SleeveMemberInput] = field(default_factory=list)
    is_active: bool = True


class SleeveService:
    """
    Service for managing sleeves.

    Every member ticker must exist in the securities table, a ticker may
    appear only once per sleeve, and sleeve names are unique. Violations are
    rejected before anything is written.
    """

    def __init__(
        self,
        sleeve_repo: SleeveRepository,
        security_repo: SecurityRepository,
        model_repo: Optional[AllocationModelRepository] = None,
    ):
        self._sleeve_repo = sleeve_repo
        self._security_repo = security_repo
        self._model_repo = model_repo

    def create_sleeve(self, data: SleeveCreate) -> Sleeve:
        name = self._validate(data)
        if self._sleeve_repo.get_by_name(name):
            raise ValidationError(f"Sleeve with name '{name}' already exists")

        sleeve = Sleeve(
            sleeve_id=str(uuid.uuid4()),
            name=name,
            is_active=data.is_active,
            members=self._members(data),
        )
        return self._sleeve_repo.create(sleeve)

    def update_sleeve(self, sleeve_id: str, data: SleeveCreate) -> Sleeve:
        existing = self.get_sleeve(sleeve_id)
        name = self._validate(data)
        other = self._sleeve_repo.get_by_name(name)
        if other and other.sleeve_id != sleeve_id:
            raise ValidationError(f"Sleeve with name '{name}' already exists")

        existing.name = name
        existing.is_active = data.is_active
        existing.members = self._members(data)
        return self._sleeve_repo.update(existing)

    def get_sleeve(self, sleeve_id: str) -> Sleeve:
        sleeve = self._sleeve_repo.get_by_id(sleeve_id)
        if not sleeve:
            raise NotFoundError("Sleeve", sleeve_id)
        return sleeve

    def list_sleeves(self) -> list[Sleeve]:
        return self._sleeve_repo.list_all()

    def delete_sleeve(self, sleeve_id: str) -> None:
        """Delete a sleeve that no allocation model references."""
        self.get_sleeve(sleeve_id)
        if self._model_repo is not None:
            using = [
                m.name
                for m in self._model_repo.list_all()
                if any(member.sleeve_id == sleeve_id for member in m.members)
            ]
            if using:
                raise ValidationError(
                    f"Sleeve is used by allocation models: {', '.join(sorted(using))}"
                )
        self._sleeve_repo.delete(sleeve_id)

    def _validate(self, data: SleeveCreate) -> str:
        name = (data.name or "").strip()
        if not name:
            raise ValidationError("Sleeve name is required")
        if not data.members:
            raise ValidationError("Sleeve must have at least one member")

        tickers = [m.ticker.strip().upper() for m in data.members]
        if any(not t for t in tickers):
            raise ValidationError("Sleeve member ticker is required")

        seen: set[str] = set()
        duplicates: list[str] = []
        for ticker in tickers:
            if ticker in seen and ticker not in duplicates:
                duplicates.append(ticker)
            seen.add(ticker)
        if duplicates:
            raise ValidationError(f"Duplicate tickers within the sleeve: {', '.join(duplicates)}")

        bad_ranks = [m.ticker.upper() for m in data.members if m.rank < 1]
        if bad_ranks:
            raise ValidationError(f"Ranks must be positive: {', '.join(bad_ranks)}")

        known = self._security_repo.existing_tickers(tickers)
        unknown = [t for t in tickers if t not in known]
        if unknown:
            raise ValidationError(
                f"Invalid tickers (not found in securities): {', '.join(unknown)}"
            )
        return name

    @staticmethod
    def _members(data: SleeveCreate) -> list[SleeveMember]:
        return [
            SleeveMember(
                ticker=m.ticker.strip().upper(),
                rank=m.rank,
                is_active=m.is_active,
                is_legacy=m.is_legacy,
            )
            for m in data.members
        ]
