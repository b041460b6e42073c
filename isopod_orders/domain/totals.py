"""Derived order totals.

Both values are plain float sums. Rounding to two places happens only when
orders are displayed or exported.
"""
from typing import Any, Iterable, NamedTuple, Optional


class Totals(NamedTuple):
    quantity_total: int
    payment_amount: float


def _field(item: Any, name: str):
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def line_total(item: Any) -> float:
    return (_field(item, "quantity") or 0) * (_field(item, "price") or 0)


def items_subtotal(items: Iterable[Any]) -> float:
    return sum(line_total(item) for item in items or [])


def recompute(items: Iterable[Any], shipping_charges: Optional[float] = 0) -> Totals:
    """Recalculate ``quantity_total`` and ``payment_amount`` from the items.

    Missing quantities or prices count as zero so a half-filled form row
    never raises.
    """
    items = list(items or [])
    quantity_total = sum(_field(item, "quantity") or 0 for item in items)
    payment_amount = items_subtotal(items) + (shipping_charges or 0)
    return Totals(quantity_total=quantity_total, payment_amount=payment_amount)
