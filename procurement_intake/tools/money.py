"""
Coercion of loosely formatted monetary values into floats.

LLM output and form input arrive as numbers, as plain numeric strings, or
as display strings such as "1.234,50 €", "EUR 1,234.50" or "-20,00%".
"""
import math
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Any

_NON_NUMERIC = re.compile(r"[^\d.,+-]")
CENT = Decimal("0.01")

def _normalize_separators(text: str) -> str:
    dots = text.count(".")
    commas = text.count(",")

    if dots and commas:
        # The separator that comes last is the decimal one
        if text.rfind(",") > text.rfind("."):
            return text.replace(".", "").replace(",", ".")
        return text.replace(",", "")
    if commas > 1:
        return text.replace(",", "")
    if commas == 1:
        return text.replace(",", ".")
    if dots > 1:
        return text.replace(".", "")
    return text

def to_number(value: Any) -> float:
    """
    Coerce value to a finite float, defaulting to 0.0 when it cannot be read.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else 0.0
    if isinstance(value, Decimal):
        return to_number(float(value))
    if not isinstance(value, str):
        return 0.0

    cleaned = _normalize_separators(_NON_NUMERIC.sub("", value))
    if not cleaned:
        return 0.0
    try:
        number = float(cleaned)
    except ValueError:
        return 0.0
    return number if math.isfinite(number) else 0.0

def round_cents(value: float) -> float:
    """Round half-up to two decimal places."""
    if not math.isfinite(value):
        return 0.0
    # Enough digits for any finite float, up to ~1.8e308, at cent precision
    with localcontext() as ctx:
        ctx.prec = 400
        try:
            return float(Decimal(repr(value)).quantize(CENT, rounding=ROUND_HALF_UP))
        except InvalidOperation:
            return 0.0
