"""Position domain model."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from rebalancer.domain.models.enums import AccountType


@dataclass
class Position:
    """
    Account-scoped holding of a single security.

    Market value and gain/loss are derived from a price at read time and are
    never stored on the position.
    """

    position_id: str
    account_id: str
    ticker: str
    qty: Decimal
    cost_basis_per_share: Decimal
    opened_at: datetime
    account_type: AccountType = AccountType.TAXABLE
    sleeve_id: Optional[str] = None

    def __post_init__(self) -> None:
        self.ticker = self.ticker.upper()
        if isinstance(self.account_type, str):
            self.account_type = AccountType(self.account_type)

    @property
    def cost_value(self) -> Decimal:
        return self.qty * self.cost_basis_per_share
