"""Account domain model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from rebalancer.domain.models.enums import AccountType


@dataclass
class Account:
    """
    Brokerage account holding positions.

    Only TAXABLE accounts take part in tax-loss harvesting; tax-deferred and
    tax-exempt accounts still count toward allocation drift.
    """

    account_id: str
    name: str
    account_type: AccountType = AccountType.TAXABLE
    created_at_est: Optional[datetime] = field(default=None)

    def __post_init__(self) -> None:
        if isinstance(self.account_type, str):
            self.account_type = AccountType(self.account_type)

    @property
    def is_taxable(self) -> bool:
        return self.account_type == AccountType.TAXABLE
