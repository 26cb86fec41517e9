"""Enumerations for domain models."""

from enum import Enum


class AccountType(str, Enum):
    """Tax treatment of an account."""

    TAXABLE = "TAXABLE"
    TAX_DEFERRED = "TAX_DEFERRED"  # Traditional IRA, 401(k)
    TAX_EXEMPT = "TAX_EXEMPT"  # Roth


class TradeSide(str, Enum):
    """Side of a proposed trade or order."""

    BUY = "BUY"
    SELL = "SELL"


class OrderStatus(str, Enum):
    """Order lifecycle states."""

    DRAFT = "DRAFT"
    PREVIEW_OK = "PREVIEW_OK"
    PREVIEW_WARN = "PREVIEW_WARN"
    PREVIEW_ERROR = "PREVIEW_ERROR"
    ACCEPTED = "ACCEPTED"
    WORKING = "WORKING"
    PARTIALLY_FILLED = "PARTIALLY_FILLED"
    REPLACED = "REPLACED"
    FILLED = "FILLED"
    CANCELED = "CANCELED"
    REJECTED = "REJECTED"
    EXPIRED = "EXPIRED"


class OrderType(str, Enum):
    """Broker order types (single-leg only)."""

    MARKET = "MARKET"
    LIMIT = "LIMIT"


class TimeInForce(str, Enum):
    DAY = "DAY"
    GOOD_TILL_CANCEL = "GOOD_TILL_CANCEL"


class TradingSession(str, Enum):
    NORMAL = "NORMAL"
    AM = "AM"
    PM = "PM"


class BlockingKind(str, Enum):
    """Why a harvest cannot be executed."""

    SELF_RESTRICTED = "SELF_RESTRICTED"
    SLEEVE_NOT_FOUND = "SLEEVE_NOT_FOUND"
    SINGLE_MEMBER = "SINGLE_MEMBER"
    ALL_RESTRICTED = "ALL_RESTRICTED"
    ALL_INACTIVE = "ALL_INACTIVE"
    MIXED = "MIXED"
    LEGACY_HOLDING = "LEGACY_HOLDING"


# States from which an order may be submitted
SUBMITTABLE_STATUSES = frozenset({OrderStatus.PREVIEW_OK, OrderStatus.PREVIEW_WARN})

# States that can still be edited, previewed or deleted
PRE_SUBMIT_STATUSES = frozenset({
    OrderStatus.DRAFT,
    OrderStatus.PREVIEW_OK,
    OrderStatus.PREVIEW_WARN,
    OrderStatus.PREVIEW_ERROR,
})

# States reported by the broker after submission
BROKER_STATUSES = frozenset({
    OrderStatus.ACCEPTED,
    OrderStatus.WORKING,
    OrderStatus.PARTIALLY_FILLED,
    OrderStatus.REPLACED,
    OrderStatus.FILLED,
    OrderStatus.CANCELED,
    OrderStatus.REJECTED,
    OrderStatus.EXPIRED,
})

TERMINAL_STATUSES = frozenset({
    OrderStatus.FILLED,
    OrderStatus.CANCELED,
    OrderStatus.REJECTED,
    OrderStatus.EXPIRED,
})
