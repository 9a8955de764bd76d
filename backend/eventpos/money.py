from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CURRENCY_SYMBOL = "R$"


def round_cents(value: float) -> int:
    """Nearest-cent rounding, half away from zero."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def parse_money_to_cents(raw) -> int:
    """
    Parse an operator-typed amount into cents.

    Accepts ints/floats and strings using either "." or "," as the decimal
    separator ("12,50" -> 1250). Raises ValueError for anything non-numeric.
    """
    if isinstance(raw, bool):
        raise ValueError("not a number")
    if isinstance(raw, (int, float)):
        amount = Decimal(str(raw))
    elif isinstance(raw, str):
        s = raw.strip().replace(",", ".")
        if not s:
            raise ValueError("not a number")
        try:
            amount = Decimal(s)
        except InvalidOperation:
            raise ValueError("not a number")
    else:
        raise ValueError("not a number")

    if not amount.is_finite():
        raise ValueError("not a number")
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_money(cents: int | float) -> str:
    """Brazilian currency format: 123456 -> 'R$ 1.234,56'."""
    negative = cents < 0
    whole, frac = divmod(abs(round_cents(cents)), 100)
    grouped = f"{whole:,}".replace(",", ".")
    text = f"{CURRENCY_SYMBOL} {grouped},{frac:02d}"
    return f"-{text}" if negative else text
