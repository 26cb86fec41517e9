"""Broker responses consumed by the order lifecycle."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional


@dataclass
class PreviewMessage:
    severity: str  # "REJECT", "WARN" or "INFO"
    text: str


@dataclass
class PreviewResult:
    """Broker preview of an order before submission."""

    messages: list[PreviewMessage] = field(default_factory=list)
    order_value: Optional[Decimal] = None
    commission: Optional[Decimal] = None

    @property
    def rejects(self) -> list[PreviewMessage]:
        return [m for m in self.messages if m.severity == "REJECT"]

    @property
    def warns(self) -> list[PreviewMessage]:
        return [m for m in self.messages if m.severity == "WARN"]


@dataclass
class PlacementResult:
    """Broker acknowledgement of a submitted order."""

    broker_order_id: str
    status: str
