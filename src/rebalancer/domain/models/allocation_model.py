"""Allocation model domain models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class ModelMember:
    """Target weight of one sleeve in a model, in basis points."""

    sleeve_id: str
    target_weight_bps: Optional[int] = None
    is_active: bool = True


@dataclass
class AllocationModel:
    """
    Target allocation across sleeves.

    Weights of active members sum to exactly 10000 basis points. A model whose
    members carry no weights at all is treated as equal-weighted.
    """

    model_id: str
    name: str
    members: list[ModelMember] = field(default_factory=list)
    description: str = ""
    updated_at_est: Optional[datetime] = None

    def active_members(self) -> list[ModelMember]:
        return [m for m in self.members if m.is_active]

    @property
    def has_explicit_weights(self) -> bool:
        return any(m.target_weight_bps is not None for m in self.active_members())

    @property
    def total_weight_bps(self) -> int:
        return sum(m.target_weight_bps or 0 for m in self.active_members())
