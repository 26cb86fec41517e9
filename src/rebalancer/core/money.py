"""Decimal helpers for currency, percentages and basis points."""

from decimal import Decimal, ROUND_FLOOR, ROUND_HALF_UP

ZERO = Decimal("0")
CENT = Decimal("0.01")
HUNDRED = Decimal("100")

# Target weights are integer basis points; a full allocation is exactly this
BASIS_POINTS_TOTAL = 10000


def round_money(value: Decimal) -> Decimal:
    """Round a currency amount to cents."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def round_percent(value: Decimal) -> Decimal:
    """Round a percentage to two decimal places."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def to_cents(amount: Decimal) -> int:
    """Convert a currency amount to integer cents."""
    return int((amount * HUNDRED).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def floor_shares(amount: Decimal, price: Decimal) -> int:
    """Whole shares purchasable for amount at price (no fractional shares)."""
    if price <= ZERO:
        return 0
    return int((amount / price).to_integral_value(rounding=ROUND_FLOOR))


def percent_of(part: Decimal, whole: Decimal) -> Decimal:
    """part / whole * 100, or zero when whole is not positive."""
    if whole <= ZERO:
        return ZERO
    return part / whole * HUNDRED


def bps_to_percent(bps: int) -> Decimal:
    return Decimal(bps) / HUNDRED


def format_money(value: Decimal) -> str:
    """Format as $1,234.56."""
    return f"${round_money(value):,.2f}"
