import logging
from typing import Any, Iterable, Mapping, Optional, Tuple, Union

from procurement_intake.models.request import DiscountType, OrderLine
from procurement_intake.tools.money import round_cents, to_number

logger = logging.getLogger(__name__)

Discount = Tuple[DiscountType, Optional[float]]
NO_DISCOUNT: Discount = (DiscountType.NONE, None)

def _magnitude(value: Any, discount_type: DiscountType) -> Discount:
    magnitude = abs(to_number(value))
    if magnitude > 0:
        return discount_type, magnitude
    return NO_DISCOUNT

def parse_discount(line: Mapping[str, Any]) -> Discount:
    """
    Read the discount of a line as a positive reduction magnitude.

    "discount" wins when present: "10%" / "-20,00%" is a percent discount,
    any other string or number an absolute one. Otherwise the stored
    discount_type / discount_value pair is used.
    """
    raw = line.get("discount")
    if isinstance(raw, str):
        text = raw.strip()
        if text.endswith("%"):
            return _magnitude(text[:-1], DiscountType.PERCENT)
        return _magnitude(text, DiscountType.ABSOLUTE)
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return _magnitude(raw, DiscountType.ABSOLUTE)

    stored_type = line.get("discount_type")
    if isinstance(stored_type, DiscountType):
        stored_type = stored_type.value
    if stored_type in (DiscountType.PERCENT.value, DiscountType.ABSOLUTE.value):
        return _magnitude(line.get("discount_value"), DiscountType(stored_type))
    return NO_DISCOUNT

def line_total(unit_price: float, amount: float, discount_type: DiscountType, discount_value: Optional[float]) -> float:
    """Discounted line total, clamped at zero and rounded to cents."""
    total = unit_price * amount
    if discount_type == DiscountType.PERCENT and discount_value is not None:
        total = total * (1 - discount_value / 100)
    elif discount_type == DiscountType.ABSOLUTE and discount_value is not None:
        total = total - discount_value

    if total < 0:
        total = 0.0
    return round_cents(total)

def normalize_order_line(raw: Union[Mapping[str, Any], OrderLine]) -> OrderLine:
    """
    Build a consistent OrderLine from raw LLM or form input.

    The incoming total_price is ignored and recomputed, so running an
    already normalized line through here again yields the same line.
    """
    if isinstance(raw, OrderLine):
        raw = raw.model_dump()

    unit_price = to_number(raw.get("unit_price"))
    amount = to_number(raw.get("amount"))
    discount_type, discount_value = parse_discount(raw)

    return OrderLine(
        position_description=str(raw.get("position_description") or ""),
        unit_price=unit_price,
        amount=amount,
        unit=str(raw.get("unit") or ""),
        discount_type=discount_type,
        discount_value=discount_value,
        total_price=line_total(unit_price, amount, discount_type, discount_value),
    )

def display_discount(line: OrderLine) -> Union[str, float, None]:
    """Discount in the "N%" / N shape used by the extraction payload."""
    if line.discount_type == DiscountType.PERCENT.value:
        value = line.discount_value
        return f"{int(value) if float(value).is_integer() else value}%"
    if line.discount_type == DiscountType.ABSOLUTE.value:
        return line.discount_value
    return None

def reconcile_totals(
    lines: Iterable[OrderLine],
    total_cost: Optional[float],
    extras: Optional[float],
) -> Tuple[float, float]:
    """
    Fill in whichever of total_cost / extras is missing from the line sum.

    Returns (total_cost, extras), both rounded to cents.
    """
    lines_sum = round_cents(sum(line.total_price for line in lines))

    if total_cost is None and extras is None:
        return lines_sum, 0.0
    if total_cost is None:
        return round_cents(lines_sum + extras), round_cents(extras)
    if extras is None:
        return round_cents(total_cost), round_cents(total_cost - lines_sum)

    if abs(round_cents(lines_sum + extras) - round_cents(total_cost)) > 0.01:
        logger.warning(
            f"Totals do not add up: lines {lines_sum} + extras {extras} != total {total_cost}"
        )
    return round_cents(total_cost), round_cents(extras)
