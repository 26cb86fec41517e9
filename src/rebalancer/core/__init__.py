"""Core utilities and shared functionality."""

from rebalancer.core.timezone import (
    now_eastern,
    to_eastern,
    parse_datetime_eastern,
    format_trade_date,
    EASTERN_TZ,
)
from rebalancer.core.exceptions import (
    AppError,
    ValidationError,
    NotFoundError,
    OrderStateError,
    DuplicateOrderError,
)

__all__ = [
    "now_eastern",
    "to_eastern",
    "parse_datetime_eastern",
    "format_trade_date",
    "EASTERN_TZ",
    "AppError",
    "ValidationError",
    "NotFoundError",
    "OrderStateError",
    "DuplicateOrderError",
]
