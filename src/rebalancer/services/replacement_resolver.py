"""Replacement security selection within a sleeve."""

import logging
from decimal import Decimal
from typing import Optional

from rebalancer.core.money import format_money
from rebalancer.core.timezone import format_trade_date
from rebalancer.domain.models import BlockingKind, Sleeve, SleeveMember
from rebalancer.domain.views import Blocked, Resolution, Resolved
from rebalancer.services.sleeve_registry import SleeveRegistry
from rebalancer.services.wash_sale_tracker import WashSaleTracker

logger = logging.getLogger(__name__)


class ReplacementResolver:
    """
    Picks the substitute to buy when a position is harvested.

    Eligible members differ from the sold ticker, are active, are not legacy
    holdings and are not under a wash-sale restriction. The lowest rank wins;
    equal ranks fall back to ticker order. When nothing is eligible the
    returned Blocked explains exactly which tickers are in the way. A sold
    ticker that is itself a legacy member is blocked outright.
    """

    def __init__(self, registry: SleeveRegistry, tracker: WashSaleTracker):
        self._registry = registry
        self._tracker = tracker

    def resolve(
        self,
        sold_ticker: str,
        sleeve_id: Optional[str],
        loss_amount: Decimal = Decimal("0"),
        loss_percent: Decimal = Decimal("0"),
    ) -> Resolution:
        """Resolve a replacement for sold_ticker in sleeve_id."""
        sold_ticker = sold_ticker.upper()
        sleeve = self._registry.get(sleeve_id) if sleeve_id else None

        held = sleeve.member_for(sold_ticker) if sleeve else None
        if held is not None and held.is_legacy:
            return Blocked(
                kind=BlockingKind.LEGACY_HOLDING,
                message=f"Legacy holding: {sold_ticker} must not be sold",
                sleeve=sleeve,
                tickers=(sold_ticker,),
            )

        if self._tracker.is_restricted(sold_ticker):
            return Blocked(
                kind=BlockingKind.SELF_RESTRICTED,
                message="Wash sale restriction",
                sleeve=sleeve,
                tickers=(sold_ticker,),
            )

        if sleeve is None:
            logger.warning(f"Sleeve not found for {sold_ticker}: {sleeve_id}")
            return Blocked(
                kind=BlockingKind.SLEEVE_NOT_FOUND,
                message=f"Sleeve not found: {sleeve_id or sold_ticker}",
                tickers=(sold_ticker,),
            )

        candidates = [m for m in sleeve.ranked_members() if self._is_eligible(m, sold_ticker)]
        if candidates:
            return Resolved(sleeve=sleeve, replacement=candidates[0])

        return self._classify_blocked(sleeve, sold_ticker, loss_amount, loss_percent)

    def _is_eligible(self, member: SleeveMember, sold_ticker: str) -> bool:
        return (
            member.ticker != sold_ticker
            and member.is_active
            and not member.is_legacy
            and not self._tracker.is_restricted(member.ticker)
        )

    def _classify_blocked(
        self,
        sleeve: Sleeve,
        sold_ticker: str,
        loss_amount: Decimal,
        loss_percent: Decimal,
    ) -> Blocked:
        others = [m for m in sleeve.ranked_members() if m.ticker != sold_ticker]
        if not others:
            return Blocked(
                kind=BlockingKind.SINGLE_MEMBER,
                message="No replacement securities available in this sleeve",
                sleeve=sleeve,
            )

        restricted = [m for m in others if self._tracker.is_restricted(m.ticker)]
        inactive = [m for m in others if not m.is_active]
        tickers = tuple(m.ticker for m in others)

        if len(restricted) == len(others):
            details = "\n".join(self._restriction_line(m.ticker) for m in restricted)
            return Blocked(
                kind=BlockingKind.ALL_RESTRICTED,
                message=(
                    f"Unable to harvest {format_money(abs(loss_amount))} "
                    f"({abs(loss_percent):.2f}%) loss because of potential wash sales "
                    f"with all replacement securities:\n{details}"
                ),
                sleeve=sleeve,
                tickers=tickers,
            )

        if len(inactive) == len(others):
            return Blocked(
                kind=BlockingKind.ALL_INACTIVE,
                message=(
                    "All replacement securities in this sleeve are inactive: "
                    + ", ".join(m.ticker for m in inactive)
                ),
                sleeve=sleeve,
                tickers=tickers,
            )

        reasons = [f"{m.ticker} ({self._blocking_reason(m)})" for m in others]
        return Blocked(
            kind=BlockingKind.MIXED,
            message="No available replacement securities: " + ", ".join(reasons),
            sleeve=sleeve,
            tickers=tickers,
        )

    def _blocking_reason(self, member: SleeveMember) -> str:
        parts = []
        if self._tracker.is_restricted(member.ticker):
            parts.append(f"restricted, {self._tracker.days_to_unblock(member.ticker)} days left")
        if not member.is_active:
            parts.append("inactive")
        if member.is_legacy:
            parts.append("legacy")
        return "; ".join(parts)

    def _restriction_line(self, ticker: str) -> str:
        restriction = self._tracker.restriction_for(ticker)
        if restriction is None:
            return f"- {ticker} (wash sale restriction)"
        return (
            f"- {ticker} sold on {format_trade_date(restriction.sold_at)} "
            f"({self._tracker.days_to_unblock(ticker)} days left)"
        )
