"""Rebalancing service: loads snapshots and runs the pure computations."""

import logging
from datetime import datetime
from typing import Callable, Optional

from rebalancer.core.exceptions import NotFoundError
from rebalancer.core.timezone import now_eastern
from rebalancer.domain.views import HarvestSummary, PriceTable, SleeveDriftReport, TradeProposal
from rebalancer.providers.price_provider import PriceProvider
from rebalancer.repositories.protocols import (
    AllocationModelRepository,
    HoldingRepository,
    RestrictionRepository,
    SecurityRepository,
    SleeveRepository,
)
from rebalancer.services.allocation_drift import compute_allocation_drift
from rebalancer.services.cache_service import CacheKey, TTLCache
from rebalancer.services.candidate_selector import HarvestThresholds
from rebalancer.services.trade_proposals import compute_proposed_trades, summarize_harvestable_losses

logger = logging.getLogger(__name__)

PROPOSED_TRADES = "proposed_trades"
ALLOCATION_DRIFT = "allocation_drift"


def _scope(account_ids: Optional[list[str]]) -> tuple:
    return ("*",) if account_ids is None else tuple(sorted(set(account_ids)))


class RebalancingService:
    """
    Builds proposals and drift reports from the current snapshot.

    Results are memoized in an injected TTL cache keyed by operation and
    account scope; call invalidate() after anything that changes holdings,
    sleeves, models or restrictions. Prices come from the securities table
    unless a PriceProvider is injected.
    """

    def __init__(
        self,
        holding_repo: HoldingRepository,
        security_repo: SecurityRepository,
        sleeve_repo: SleeveRepository,
        model_repo: AllocationModelRepository,
        restriction_repo: RestrictionRepository,
        cache: Optional[TTLCache] = None,
        thresholds: Optional[HarvestThresholds] = None,
        clock: Optional[Callable[[], datetime]] = None,
        price_provider: Optional[PriceProvider] = None,
    ):
        self._holding_repo = holding_repo
        self._sleeve_repo = sleeve_repo
        self._model_repo = model_repo
        self._restriction_repo = restriction_repo
        self._cache = cache or TTLCache()
        self._thresholds = thresholds or HarvestThresholds.from_settings()
        self._clock = clock or now_eastern
        self._price_provider = price_provider or security_repo

    def get_proposed_trades(self, account_ids: Optional[list[str]] = None) -> list[TradeProposal]:
        """Tax-loss harvesting proposals for the given accounts (all if None)."""
        key = CacheKey(PROPOSED_TRADES, _scope(account_ids))
        return self._cache.get_or_compute(key, lambda: self._compute_trades(account_ids))

    def get_harvest_summary(self, account_ids: Optional[list[str]] = None) -> HarvestSummary:
        return summarize_harvestable_losses(self.get_proposed_trades(account_ids))

    def get_allocation_drift(
        self,
        model_id: str,
        account_ids: Optional[list[str]] = None,
    ) -> list[SleeveDriftReport]:
        """Drift of the given accounts' holdings against a model."""
        key = CacheKey(ALLOCATION_DRIFT, (model_id,) + _scope(account_ids))
        return self._cache.get_or_compute(key, lambda: self._compute_drift(model_id, account_ids))

    def invalidate(self) -> None:
        self._cache.clear()

    def _compute_trades(self, account_ids: Optional[list[str]]) -> list[TradeProposal]:
        now = self._clock()
        positions = self._holding_repo.list_positions(account_ids)
        prices = PriceTable(self._price_provider.get_prices([p.ticker for p in positions] + self._sleeve_tickers()))
        proposals = compute_proposed_trades(
            positions=positions,
            sleeves=self._sleeve_repo.list_all(),
            restricted_securities=self._restriction_repo.list_active(now),
            prices=prices,
            now=now,
            thresholds=self._thresholds,
        )
        logger.info(f"Computed {len(proposals)} trade proposals for {len(positions)} positions")
        return proposals

    def _compute_drift(self, model_id: str, account_ids: Optional[list[str]]) -> list[SleeveDriftReport]:
        model = self._model_repo.get_by_id(model_id)
        if not model:
            raise NotFoundError("Model", model_id)
        holdings = self._holding_repo.list_positions(account_ids)
        prices = PriceTable(self._price_provider.get_prices([h.ticker for h in holdings]))
        return compute_allocation_drift(
            model=model,
            holdings=holdings,
            prices=prices,
            sleeves=self._sleeve_repo.list_all(),
        )

    def _sleeve_tickers(self) -> list[str]:
        return [m.ticker for s in self._sleeve_repo.list_all() for m in s.members]
