"""
Unit tests for ReplacementResolver.

Tests cover:
- Rank-ordered selection
- Exclusion of inactive, legacy and restricted members
- Blocking reasons for each failure mode
"""

from datetime import timedelta
from decimal import Decimal

from rebalancer.domain.models import BlockingKind, Sleeve, SleeveMember
from rebalancer.domain.views import Blocked, Resolved
from rebalancer.services import ReplacementResolver, SleeveRegistry, WashSaleTracker

from tests.conftest import eastern_datetime, make_restriction, make_sleeve


def _resolver(sleeves, restrictions=(), now=None):
    now = now or eastern_datetime(2024, 6, 15, 14, 30)
    return ReplacementResolver(SleeveRegistry(sleeves), WashSaleTracker(restrictions, now=now))


class TestResolvedReplacement:
    """Tests for successful resolution."""

    def test_lowest_rank_other_member_wins(self):
        """
        GIVEN sleeve VTI(1), ITOT(2), SCHB(3)
        WHEN VTI is sold
        THEN ITOT is the replacement
        """
        resolver = _resolver([make_sleeve("s1", "US", ["VTI", "ITOT", "SCHB"])])

        outcome = resolver.resolve("VTI", "s1")

        assert isinstance(outcome, Resolved)
        assert outcome.ticker == "ITOT"
        assert outcome.sleeve.name == "US"

    def test_skips_restricted_inactive_and_legacy(self, fixed_now):
        """
        GIVEN ITOT restricted, SCHB inactive, SPTM legacy, VTHR eligible
        WHEN VTI is sold
        THEN VTHR is chosen
        """
        sleeve = make_sleeve(
            "s1", "US", ["VTI", "ITOT", "SCHB", "SPTM", "VTHR"], inactive=("SCHB",), legacy=("SPTM",)
        )
        resolver = _resolver(
            [sleeve],
            [make_restriction("ITOT", fixed_now - timedelta(days=3))],
            now=fixed_now,
        )

        outcome = resolver.resolve("VTI", "s1")

        assert isinstance(outcome, Resolved)
        assert outcome.ticker == "VTHR"

    def test_equal_ranks_break_by_ticker(self):
        sleeve = Sleeve(
            sleeve_id="s1",
            name="US",
            members=[
                SleeveMember("VTI", 1),
                SleeveMember("SCHB", 2),
                SleeveMember("ITOT", 2),
            ],
        )

        outcome = _resolver([sleeve]).resolve("VTI", "s1")

        assert outcome.ticker == "ITOT"

    def test_sold_ticker_is_case_insensitive(self):
        outcome = _resolver([make_sleeve("s1", "US", ["VTI", "ITOT"])]).resolve("vti", "s1")

        assert outcome.ticker == "ITOT"


class TestBlockedReplacement:
    """Tests for each blocking reason."""

    def test_sold_ticker_itself_restricted(self, fixed_now):
        resolver = _resolver(
            [make_sleeve("s1", "US", ["VTI", "ITOT"])],
            [make_restriction("VTI", fixed_now - timedelta(days=1))],
            now=fixed_now,
        )

        outcome = resolver.resolve("VTI", "s1")

        assert isinstance(outcome, Blocked)
        assert outcome.kind == BlockingKind.SELF_RESTRICTED
        assert outcome.message == "Wash sale restriction"

    def test_sleeve_not_found(self):
        outcome = _resolver([]).resolve("VTI", "missing")

        assert outcome.kind == BlockingKind.SLEEVE_NOT_FOUND
        assert outcome.message == "Sleeve not found: missing"

    def test_no_sleeve_names_ticker(self):
        outcome = _resolver([]).resolve("VTI", None)

        assert outcome.message == "Sleeve not found: VTI"

    def test_single_member_sleeve(self):
        outcome = _resolver([make_sleeve("s1", "Solo", ["VTI"])]).resolve("VTI", "s1")

        assert outcome.kind == BlockingKind.SINGLE_MEMBER
        assert outcome.message == "No replacement securities available in this sleeve"

    def test_all_replacements_restricted(self, fixed_now):
        """
        GIVEN ITOT and SCHB both sold at a loss recently
        WHEN VTI is harvested for $3000 (3%)
        THEN the message lists each blocking sale with its date and days left
        """
        resolver = _resolver(
            [make_sleeve("s1", "US", ["VTI", "ITOT", "SCHB"])],
            [
                make_restriction("ITOT", eastern_datetime(2024, 6, 10, 11)),
                make_restriction("SCHB", eastern_datetime(2024, 6, 1, 11)),
            ],
            now=fixed_now,
        )

        outcome = resolver.resolve("VTI", "s1", loss_amount=Decimal("-3000"), loss_percent=Decimal("-3"))

        assert outcome.kind == BlockingKind.ALL_RESTRICTED
        assert outcome.message == (
            "Unable to harvest $3,000.00 (3.00%) loss because of potential wash sales "
            "with all replacement securities:\n"
            "- ITOT sold on 06/10/2024 (26 days left)\n"
            "- SCHB sold on 06/01/2024 (17 days left)"
        )

    def test_all_replacements_inactive(self):
        sleeve = make_sleeve("s1", "US", ["VTI", "ITOT", "SCHB"], inactive=("ITOT", "SCHB"))

        outcome = _resolver([sleeve]).resolve("VTI", "s1")

        assert outcome.kind == BlockingKind.ALL_INACTIVE
        assert outcome.message == "All replacement securities in this sleeve are inactive: ITOT, SCHB"

    def test_mixed_blockers_enumerated(self, fixed_now):
        """
        GIVEN two restricted replacements and one inactive one
        WHEN VTI is sold
        THEN the message names each ticker with its own reason
        """
        sleeve = make_sleeve("s1", "US", ["VTI", "ITOT", "SCHB", "SPTM"], inactive=("SPTM",))
        resolver = _resolver(
            [sleeve],
            [
                make_restriction("ITOT", fixed_now - timedelta(days=1)),
                make_restriction("SCHB", fixed_now - timedelta(days=11)),
            ],
            now=fixed_now,
        )

        outcome = resolver.resolve("VTI", "s1")

        assert outcome.kind == BlockingKind.MIXED
        assert outcome.message == (
            "No available replacement securities: "
            "ITOT (restricted, 30 days left), "
            "SCHB (restricted, 20 days left), "
            "SPTM (inactive)"
        )

    def test_sold_legacy_holding_blocked(self):
        """
        GIVEN sleeve VTI(legacy), ITOT
        WHEN VTI is sold
        THEN the harvest is blocked as a legacy holding
        """
        sleeve = make_sleeve("s1", "US", ["VTI", "ITOT"], legacy=("VTI",))

        outcome = _resolver([sleeve]).resolve("vti", "s1")

        assert isinstance(outcome, Blocked)
        assert outcome.kind == BlockingKind.LEGACY_HOLDING
        assert outcome.message == "Legacy holding: VTI must not be sold"
        assert outcome.tickers == ("VTI",)
        assert outcome.sleeve is sleeve

    def test_legacy_only_replacement_reported(self):
        sleeve = make_sleeve("s1", "US", ["VTI", "ITOT", "SCHB"], inactive=("SCHB",), legacy=("ITOT",))

        outcome = _resolver([sleeve]).resolve("VTI", "s1")

        assert outcome.kind == BlockingKind.MIXED
        assert "ITOT (legacy)" in outcome.message
        assert "SCHB (inactive)" in outcome.message
