"""Allocation drift of holdings against a target model."""

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Iterable, Mapping, Optional, Sequence, TypeVar, Union

from rebalancer.core.exceptions import ValidationError
from rebalancer.core.money import (
    BASIS_POINTS_TOTAL,
    ZERO,
    HUNDRED,
    bps_to_percent,
    percent_of,
    round_money,
    round_percent,
)
from rebalancer.domain.models import AllocationModel, Position, Sleeve, is_cash_ticker
from rebalancer.domain.views import (
    CASH_SLEEVE_NAME,
    UNASSIGNED_SLEEVE_NAME,
    PriceTable,
    SecurityDrift,
    SleeveDriftReport,
    as_price_table,
)

logger = logging.getLogger(__name__)

K = TypeVar("K")


def equal_weight_distribution(keys: Sequence[K]) -> dict[K, int]:
    """
    Split 10000 basis points evenly over keys.

    Every key gets floor(10000 / N); the remainder goes one basis point at a
    time to the first keys, so the result always sums to exactly 10000.
    """
    count = len(keys)
    if count == 0:
        return {}
    if count > BASIS_POINTS_TOTAL:
        raise ValidationError(f"Cannot split {BASIS_POINTS_TOTAL} basis points over {count} members")

    base, remainder = divmod(BASIS_POINTS_TOTAL, count)
    return {key: base + (1 if index < remainder else 0) for index, key in enumerate(keys)}


def resolve_model_weights(model: AllocationModel) -> dict[str, int]:
    """Sleeve id -> target weight in basis points for the active members."""
    active = model.active_members()
    if not model.has_explicit_weights:
        return equal_weight_distribution([m.sleeve_id for m in active])
    return {m.sleeve_id: m.target_weight_bps or 0 for m in active}


def compute_allocation_drift(
    model: AllocationModel,
    holdings: Iterable[Position],
    prices: Union[PriceTable, Mapping[str, Optional[Decimal]]],
    sleeves: Optional[Iterable[Sleeve]] = None,
) -> list[SleeveDriftReport]:
    """
    Compare current holdings with the model's target weights.

    One row per active model sleeve in model order, then an Unassigned row
    for holdings outside the model and a Cash row (target 0) when either has
    value. Without sleeves no model row can be built and every holding lands
    in Unassigned or Cash. Wash-sale restrictions are not considered here:
    trades derived from these rows are not loss-harvesting safe.
    """
    prices = as_price_table(prices)
    sleeves_by_id = {s.sleeve_id: s for s in sleeves or ()}
    weights = resolve_model_weights(model)

    # Each ticker belongs to the first model sleeve that lists it
    ticker_sleeve: dict[str, str] = {}
    for sleeve_id in weights:
        sleeve = sleeves_by_id.get(sleeve_id)
        if sleeve is None:
            logger.warning(f"Sleeve not found for model {model.model_id}: {sleeve_id}")
            continue
        for member in sleeve.members:
            ticker_sleeve.setdefault(member.ticker, sleeve_id)

    qty_by_ticker: dict[str, Decimal] = defaultdict(lambda: ZERO)
    value_by_ticker: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for holding in holdings:
        price = prices.get(holding.ticker)
        if price is None:
            logger.info(f"No price for {holding.ticker}; valued at zero")
            price = ZERO
        qty_by_ticker[holding.ticker] += holding.qty
        value_by_ticker[holding.ticker] += holding.qty * price

    total_value = round_money(sum(value_by_ticker.values(), ZERO))

    reports: list[SleeveDriftReport] = []
    for sleeve_id, weight in weights.items():
        sleeve = sleeves_by_id.get(sleeve_id)
        if sleeve is None:
            continue
        reports.append(
            _sleeve_report(
                sleeve,
                weight,
                total_value,
                {t: q for t, q in qty_by_ticker.items() if ticker_sleeve.get(t) == sleeve_id},
                {t: v for t, v in value_by_ticker.items() if ticker_sleeve.get(t) == sleeve_id},
            )
        )

    unassigned = sorted(
        t for t in value_by_ticker if t not in ticker_sleeve and not is_cash_ticker(t)
    )
    if unassigned:
        reports.append(
            _untargeted_report(UNASSIGNED_SLEEVE_NAME, unassigned, total_value, qty_by_ticker, value_by_ticker)
        )

    cash = sorted(t for t in value_by_ticker if is_cash_ticker(t) and t not in ticker_sleeve)
    if cash:
        reports.append(
            _untargeted_report(CASH_SLEEVE_NAME, cash, total_value, qty_by_ticker, value_by_ticker)
        )

    return reports


def _sleeve_report(
    sleeve: Sleeve,
    weight_bps: int,
    total_value: Decimal,
    qty_by_ticker: Mapping[str, Decimal],
    value_by_ticker: Mapping[str, Decimal],
) -> SleeveDriftReport:
    target_value = round_money(total_value * weight_bps / BASIS_POINTS_TOTAL)
    target_percent = bps_to_percent(weight_bps)
    members = sleeve.ranked_members()
    target_ticker = _target_security(members, value_by_ticker)

    securities: list[SecurityDrift] = []
    for member in members:
        current = round_money(value_by_ticker.get(member.ticker, ZERO))
        is_target = member.ticker == target_ticker
        sec_target = target_value if is_target else ZERO
        sec_target_percent = target_percent if is_target else ZERO
        current_percent = round_percent(percent_of(current, total_value))
        securities.append(
            SecurityDrift(
                ticker=member.ticker,
                qty=qty_by_ticker.get(member.ticker, ZERO),
                current_value=current,
                target_value=sec_target,
                current_percent=current_percent,
                target_percent=sec_target_percent,
                drift=current - sec_target,
                drift_percent=current_percent - sec_target_percent,
                rank=member.rank,
                is_target=is_target,
                is_held=member.ticker in value_by_ticker,
                is_legacy=member.is_legacy,
            )
        )

    current_value = sum((s.current_value for s in securities), ZERO)
    current_percent = round_percent(percent_of(current_value, total_value))
    drift = current_value - target_value
    if target_value > ZERO:
        drift_percent = round_percent(drift / target_value * HUNDRED)
    else:
        drift_percent = current_percent

    return SleeveDriftReport(
        sleeve_id=sleeve.sleeve_id,
        sleeve_name=sleeve.name,
        target_weight_bps=weight_bps,
        current_value=current_value,
        target_value=target_value,
        current_percent=current_percent,
        target_percent=target_percent,
        drift=drift,
        drift_percent=drift_percent,
        securities=securities,
    )


def _target_security(members, value_by_ticker: Mapping[str, Decimal]) -> Optional[str]:
    """Lowest-ranked held member, else lowest-ranked buyable member."""
    for member in members:
        if member.ticker in value_by_ticker:
            return member.ticker
    for member in members:
        if member.is_active and not member.is_legacy:
            return member.ticker
    return None


def _untargeted_report(
    name: str,
    tickers: list[str],
    total_value: Decimal,
    qty_by_ticker: Mapping[str, Decimal],
    value_by_ticker: Mapping[str, Decimal],
) -> SleeveDriftReport:
    securities = []
    for ticker in tickers:
        current = round_money(value_by_ticker[ticker])
        current_percent = round_percent(percent_of(current, total_value))
        securities.append(
            SecurityDrift(
                ticker=ticker,
                qty=qty_by_ticker[ticker],
                current_value=current,
                target_value=ZERO,
                current_percent=current_percent,
                target_percent=ZERO,
                drift=current,
                drift_percent=current_percent,
                is_held=True,
            )
        )
    current_value = sum((s.current_value for s in securities), ZERO)
    current_percent = round_percent(percent_of(current_value, total_value))
    return SleeveDriftReport(
        sleeve_id=None,
        sleeve_name=name,
        target_weight_bps=0,
        current_value=current_value,
        target_value=ZERO,
        current_percent=current_percent,
        target_percent=ZERO,
        drift=current_value,
        drift_percent=current_percent,
        securities=securities,
    )
