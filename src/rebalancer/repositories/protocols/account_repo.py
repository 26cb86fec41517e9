"""Account and holding repository protocols."""

from typing import Protocol, Optional

from rebalancer.domain.models import Account, Position


class AccountRepository(Protocol):
    """Interface for account data access."""

    def create(self, account: Account) -> Account:
        """Persist a new account."""
        ...

    def get_by_id(self, account_id: str) -> Optional[Account]:
        """Retrieve account by ID."""
        ...

    def list_all(self) -> list[Account]:
        """List all accounts."""
        ...


class HoldingRepository(Protocol):
    """Interface for position snapshots."""

    def create(self, position: Position) -> Position:
        """Persist a new position."""
        ...

    def list_positions(self, account_ids: Optional[list[str]] = None) -> list[Position]:
        """List positions (all accounts if account_ids is None), carrying account type."""
        ...

    def delete(self, position_id: str) -> None:
        """Delete a position."""
        ...
