from decimal import Decimal, ROUND_HALF_UP
from typing import Union


def dollars_to_cents(amount: Union[Decimal, int, str]) -> int:
    """Decimal dollars to integer cents, rounding half-up past the second decimal."""
    cents = Decimal(amount) * 100
    return int(cents.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def cents_to_dollars(cents: int) -> Decimal:
    return Decimal(cents) / 100


def format_currency(cents: int) -> str:
    """Format an amount in cents the way the dashboard shows it, e.g. $1,234.56."""
    dollars = cents_to_dollars(cents or 0)
    return f"${dollars:,.2f}"
