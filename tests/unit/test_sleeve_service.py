"""
Unit tests for SleeveService.

Tests cover:
- Create/update/delete sleeves
- Validation of tickers, ranks and names
- Deletion guard for sleeves used by models
"""

import pytest

from rebalancer.core.exceptions import NotFoundError, ValidationError
from rebalancer.services import ModelCreate, ModelMemberInput, SleeveCreate, SleeveMemberInput, SleeveService


@pytest.fixture
def securities(security_factory):
    for ticker, price in [("VTI", "200"), ("ITOT", "100"), ("SCHB", "50"), ("BND", "70")]:
        security_factory(ticker, price)


def _sleeve(name="US Total", tickers=("VTI", "ITOT", "SCHB"), ranks=None) -> SleeveCreate:
    ranks = ranks or range(1, len(tickers) + 1)
    return SleeveCreate(
        name=name,
        members=[SleeveMemberInput(ticker=t, rank=r) for t, r in zip(tickers, ranks)],
    )


class TestCreateSleeve:
    """Tests for sleeve creation."""

    def test_create_sleeve(self, sleeve_service: SleeveService, securities):
        """
        GIVEN securities VTI, ITOT, SCHB exist
        WHEN a sleeve is created with them (lowercase input)
        THEN members are stored uppercased and ranked
        """
        sleeve = sleeve_service.create_sleeve(_sleeve(tickers=("vti", "itot", "schb")))

        assert sleeve.name == "US Total"
        assert sleeve.tickers == ["VTI", "ITOT", "SCHB"]
        assert sleeve_service.get_sleeve(sleeve.sleeve_id).tickers == ["VTI", "ITOT", "SCHB"]

    def test_unknown_ticker_rejected(self, sleeve_service, securities):
        with pytest.raises(ValidationError) as exc_info:
            sleeve_service.create_sleeve(_sleeve(tickers=("VTI", "NOPE")))

        assert exc_info.value.message == "Invalid tickers (not found in securities): NOPE"

    def test_duplicate_ticker_rejected(self, sleeve_service, securities):
        with pytest.raises(ValidationError) as exc_info:
            sleeve_service.create_sleeve(_sleeve(tickers=("VTI", "ITOT", "vti")))

        assert exc_info.value.message == "Duplicate tickers within the sleeve: VTI"

    def test_non_positive_rank_rejected(self, sleeve_service, securities):
        with pytest.raises(ValidationError):
            sleeve_service.create_sleeve(_sleeve(tickers=("VTI", "ITOT"), ranks=(0, 1)))

    def test_empty_sleeve_rejected(self, sleeve_service, securities):
        with pytest.raises(ValidationError):
            sleeve_service.create_sleeve(SleeveCreate(name="Empty"))

    def test_blank_name_rejected(self, sleeve_service, securities):
        with pytest.raises(ValidationError):
            sleeve_service.create_sleeve(_sleeve(name="  "))

    def test_duplicate_name_rejected(self, sleeve_service, securities):
        sleeve_service.create_sleeve(_sleeve())

        with pytest.raises(ValidationError) as exc_info:
            sleeve_service.create_sleeve(_sleeve(tickers=("BND",)))

        assert "already exists" in exc_info.value.message


class TestUpdateSleeve:
    """Tests for replacing a sleeve."""

    def test_update_replaces_members(self, sleeve_service, securities):
        sleeve = sleeve_service.create_sleeve(_sleeve())

        updated = sleeve_service.update_sleeve(
            sleeve.sleeve_id,
            SleeveCreate(
                name="US Broad",
                members=[
                    SleeveMemberInput("SCHB", 1),
                    SleeveMemberInput("VTI", 2, is_legacy=True),
                ],
            ),
        )

        assert updated.name == "US Broad"
        assert updated.tickers == ["SCHB", "VTI"]
        assert updated.member_for("VTI").is_legacy
        assert len(sleeve_service.list_sleeves()) == 1

    def test_update_missing_sleeve(self, sleeve_service, securities):
        with pytest.raises(NotFoundError):
            sleeve_service.update_sleeve("missing", _sleeve())


class TestDeleteSleeve:
    """Tests for deletion."""

    def test_delete_unused_sleeve(self, sleeve_service, securities):
        sleeve = sleeve_service.create_sleeve(_sleeve())

        sleeve_service.delete_sleeve(sleeve.sleeve_id)

        assert sleeve_service.list_sleeves() == []

    def test_sleeve_used_by_model_cannot_be_deleted(self, sleeve_service, model_service, securities):
        sleeve = sleeve_service.create_sleeve(_sleeve())
        model_service.create_model(
            ModelCreate(name="All US", members=[ModelMemberInput(sleeve.sleeve_id, 10000)])
        )

        with pytest.raises(ValidationError) as exc_info:
            sleeve_service.delete_sleeve(sleeve.sleeve_id)

        assert exc_info.value.message == "Sleeve is used by allocation models: All US"
