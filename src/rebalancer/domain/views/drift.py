"""View models for allocation drift."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

UNASSIGNED_SLEEVE_NAME = "Unassigned"
CASH_SLEEVE_NAME = "Cash"


@dataclass
class SecurityDrift:
    """Current vs. target for one security inside a sleeve row."""

    ticker: str
    qty: Decimal
    current_value: Decimal
    target_value: Decimal
    current_percent: Decimal
    target_percent: Decimal
    drift: Decimal
    drift_percent: Decimal
    rank: Optional[int] = None
    is_target: bool = False
    is_held: bool = False
    is_legacy: bool = False


@dataclass
class SleeveDriftReport:
    """Current vs. target for one sleeve of an allocation model."""

    sleeve_id: Optional[str]
    sleeve_name: str
    target_weight_bps: int
    current_value: Decimal
    target_value: Decimal
    current_percent: Decimal
    target_percent: Decimal
    drift: Decimal
    drift_percent: Decimal
    securities: list[SecurityDrift] = field(default_factory=list)

    @property
    def is_model_sleeve(self) -> bool:
        return self.sleeve_id is not None
