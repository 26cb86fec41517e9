"""Allocation model management with weight validation."""

import uuid
from dataclasses import dataclass, field
from typing import Optional

from rebalancer.core.exceptions import NotFoundError, ValidationError
from rebalancer.core.money import BASIS_POINTS_TOTAL, bps_to_percent
from rebalancer.core.timezone import now_eastern
from rebalancer.domain.models import AllocationModel, ModelMember
from rebalancer.repositories.protocols import AllocationModelRepository, SleeveRepository
from rebalancer.services.allocation_drift import equal_weight_distribution


@dataclass
class ModelMemberInput:
    sleeve_id: str
    target_weight_bps: Optional[int] = None
    is_active: bool = True


@dataclass
class ModelCreate:
    """Input data for creating or replacing an allocation model."""

    name: str
    members: list[ModelMemberInput] = field(default_factory=list)
    description: str = ""


class ModelService:
    """
    Service for allocation models.

    Active member weights must sum to exactly 10000 basis points. Members
    given without any weights are filled in with an equal-weight split
    before validation, so a stored model always carries explicit weights.
    """

    def __init__(
        self,
        model_repo: AllocationModelRepository,
        sleeve_repo: SleeveRepository,
    ):
        self._model_repo = model_repo
        self._sleeve_repo = sleeve_repo

    def create_model(self, data: ModelCreate) -> AllocationModel:
        name = (data.name or "").strip()
        if not name:
            raise ValidationError("Model name is required")
        if self._model_repo.get_by_name(name):
            raise ValidationError(f"Model with name '{name}' already exists")

        members = self._validated_members(data.members)
        model = AllocationModel(
            model_id=str(uuid.uuid4()),
            name=name,
            description=data.description,
            members=members,
            updated_at_est=now_eastern(),
        )
        return self._model_repo.create(model)

    def update_model(self, model_id: str, data: ModelCreate) -> AllocationModel:
        model = self.get_model(model_id)
        name = (data.name or "").strip()
        if not name:
            raise ValidationError("Model name is required")
        other = self._model_repo.get_by_name(name)
        if other and other.model_id != model_id:
            raise ValidationError(f"Model with name '{name}' already exists")

        model.name = name
        model.description = data.description
        model.members = self._validated_members(data.members)
        return self._model_repo.update(model)

    def equal_weight_model(
        self,
        name: str,
        sleeve_ids: list[str],
        description: str = "",
    ) -> AllocationModel:
        """Create a model splitting 10000 bps evenly over sleeve_ids."""
        return self.create_model(
            ModelCreate(
                name=name,
                description=description,
                members=[ModelMemberInput(sleeve_id=s) for s in sleeve_ids],
            )
        )

    def get_model(self, model_id: str) -> AllocationModel:
        model = self._model_repo.get_by_id(model_id)
        if not model:
            raise NotFoundError("Model", model_id)
        return model

    def list_models(self) -> list[AllocationModel]:
        return self._model_repo.list_all()

    def delete_model(self, model_id: str) -> None:
        self.get_model(model_id)
        self._model_repo.delete(model_id)

    def _validated_members(self, inputs: list[ModelMemberInput]) -> list[ModelMember]:
        if not inputs:
            raise ValidationError("Model must have at least one sleeve")

        sleeve_ids = [m.sleeve_id for m in inputs]
        duplicates = sorted({s for s in sleeve_ids if sleeve_ids.count(s) > 1})
        if duplicates:
            raise ValidationError(f"Duplicate sleeves within the model: {', '.join(duplicates)}")

        invalid = [s for s in sleeve_ids if self._sleeve_repo.get_by_id(s) is None]
        if invalid:
            raise ValidationError(f"Invalid sleeve IDs: {', '.join(invalid)}")

        active = [m for m in inputs if m.is_active]
        if all(m.target_weight_bps is None for m in inputs):
            weights = equal_weight_distribution([m.sleeve_id for m in active])
        else:
            missing = [m.sleeve_id for m in active if m.target_weight_bps is None]
            if missing:
                raise ValidationError(f"Missing target weights for sleeves: {', '.join(missing)}")
            weights = {m.sleeve_id: m.target_weight_bps for m in inputs if m.target_weight_bps is not None}

        negative = [s for s, w in weights.items() if w < 0]
        if negative:
            raise ValidationError(f"Target weights must not be negative: {', '.join(negative)}")

        total = sum(weights.get(m.sleeve_id, 0) for m in active)
        if total != BASIS_POINTS_TOTAL:
            raise ValidationError(
                f"Target weights must sum to 100% ({BASIS_POINTS_TOTAL} basis points), "
                f"got {bps_to_percent(total)}%"
            )

        return [
            ModelMember(
                sleeve_id=m.sleeve_id,
                target_weight_bps=weights.get(m.sleeve_id, 0),
                is_active=m.is_active,
            )
            for m in inputs
        ]
