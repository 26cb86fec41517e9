"""
Unit tests for ModelService.

Tests cover:
- Weight validation (exactly 10000 bps)
- Equal-weight models
- Sleeve reference validation
"""

import pytest

from rebalancer.core.exceptions import NotFoundError, ValidationError
from rebalancer.services import ModelCreate, ModelMemberInput, ModelService


@pytest.fixture
def sleeves(security_factory, sleeve_factory):
    for ticker in ("VTI", "ITOT", "BND", "AGG", "VXUS", "IXUS"):
        security_factory(ticker, "100")
    return [
        sleeve_factory("US", ["VTI", "ITOT"]),
        sleeve_factory("Bonds", ["BND", "AGG"]),
        sleeve_factory("Intl", ["VXUS", "IXUS"]),
    ]


class TestCreateModel:
    """Tests for model creation."""

    def test_weights_summing_to_full_allocation(self, model_service: ModelService, sleeves):
        us, bonds, _ = sleeves

        model = model_service.create_model(
            ModelCreate(
                name="60/40",
                members=[ModelMemberInput(us.sleeve_id, 6000), ModelMemberInput(bonds.sleeve_id, 4000)],
            )
        )

        assert model.total_weight_bps == 10000
        stored = model_service.get_model(model.model_id)
        assert [m.target_weight_bps for m in stored.members] == [6000, 4000]

    @pytest.mark.parametrize("weights", [(6000, 3999), (6000, 4001), (10000, 1)])
    def test_weights_not_summing_rejected(self, model_service, sleeves, weights):
        us, bonds, _ = sleeves

        with pytest.raises(ValidationError) as exc_info:
            model_service.create_model(
                ModelCreate(
                    name="Bad",
                    members=[
                        ModelMemberInput(us.sleeve_id, weights[0]),
                        ModelMemberInput(bonds.sleeve_id, weights[1]),
                    ],
                )
            )

        assert "must sum to 100% (10000 basis points)" in exc_info.value.message

    def test_inactive_member_excluded_from_sum(self, model_service, sleeves):
        us, bonds, intl = sleeves

        model = model_service.create_model(
            ModelCreate(
                name="Paused intl",
                members=[
                    ModelMemberInput(us.sleeve_id, 6000),
                    ModelMemberInput(bonds.sleeve_id, 4000),
                    ModelMemberInput(intl.sleeve_id, 2000, is_active=False),
                ],
            )
        )

        assert model.total_weight_bps == 10000

    def test_missing_weight_rejected(self, model_service, sleeves):
        us, bonds, _ = sleeves

        with pytest.raises(ValidationError):
            model_service.create_model(
                ModelCreate(
                    name="Partial",
                    members=[ModelMemberInput(us.sleeve_id, 10000), ModelMemberInput(bonds.sleeve_id)],
                )
            )

    def test_negative_weight_rejected(self, model_service, sleeves):
        us, bonds, _ = sleeves

        with pytest.raises(ValidationError):
            model_service.create_model(
                ModelCreate(
                    name="Negative",
                    members=[ModelMemberInput(us.sleeve_id, 11000), ModelMemberInput(bonds.sleeve_id, -1000)],
                )
            )

    def test_unknown_sleeve_rejected(self, model_service, sleeves):
        with pytest.raises(ValidationError) as exc_info:
            model_service.create_model(
                ModelCreate(name="Ghost", members=[ModelMemberInput("nope", 10000)])
            )

        assert exc_info.value.message == "Invalid sleeve IDs: nope"

    def test_duplicate_sleeve_rejected(self, model_service, sleeves):
        us = sleeves[0]

        with pytest.raises(ValidationError):
            model_service.create_model(
                ModelCreate(
                    name="Twice",
                    members=[ModelMemberInput(us.sleeve_id, 5000), ModelMemberInput(us.sleeve_id, 5000)],
                )
            )

    def test_duplicate_name_rejected(self, model_service, sleeves):
        ids = [s.sleeve_id for s in sleeves]
        model_service.equal_weight_model("Equal", ids)

        with pytest.raises(ValidationError):
            model_service.equal_weight_model("Equal", ids)


class TestEqualWeightModel:
    """Tests for equal weighting."""

    def test_three_sleeves(self, model_service, sleeves):
        """
        GIVEN three sleeves
        WHEN an equal-weight model is created
        THEN weights are 3334/3333/3333 in sleeve order
        """
        model = model_service.equal_weight_model("Thirds", [s.sleeve_id for s in sleeves])

        assert [m.target_weight_bps for m in model.members] == [3334, 3333, 3333]
        assert model.total_weight_bps == 10000

    def test_weights_omitted_on_create(self, model_service, sleeves):
        us, bonds, _ = sleeves

        model = model_service.create_model(
            ModelCreate(name="Halves", members=[ModelMemberInput(us.sleeve_id), ModelMemberInput(bonds.sleeve_id)])
        )

        assert [m.target_weight_bps for m in model.members] == [5000, 5000]


class TestUpdateAndDelete:
    """Tests for model updates and deletion."""

    def test_update_weights(self, model_service, sleeves):
        us, bonds, _ = sleeves
        model = model_service.equal_weight_model("Mix", [us.sleeve_id, bonds.sleeve_id])

        updated = model_service.update_model(
            model.model_id,
            ModelCreate(
                name="Mix",
                description="Tilted",
                members=[ModelMemberInput(us.sleeve_id, 7000), ModelMemberInput(bonds.sleeve_id, 3000)],
            ),
        )

        assert updated.description == "Tilted"
        assert [m.target_weight_bps for m in updated.members] == [7000, 3000]

    def test_delete(self, model_service, sleeves):
        model = model_service.equal_weight_model("Gone", [sleeves[0].sleeve_id])

        model_service.delete_model(model.model_id)

        with pytest.raises(NotFoundError):
            model_service.get_model(model.model_id)
