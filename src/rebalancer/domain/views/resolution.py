"""Replacement resolution outcomes."""

from dataclasses import dataclass, field
from typing import Optional, Union

from rebalancer.domain.models import BlockingKind, Sleeve, SleeveMember


@dataclass(frozen=True)
class Resolved:
    """A replacement security was found."""

    sleeve: Sleeve
    replacement: SleeveMember

    @property
    def ticker(self) -> str:
        return self.replacement.ticker


@dataclass(frozen=True)
class Blocked:
    """No replacement is available; message explains which tickers block it."""

    kind: BlockingKind
    message: str
    sleeve: Optional[Sleeve] = None
    tickers: tuple[str, ...] = field(default_factory=tuple)


Resolution = Union[Resolved, Blocked]
