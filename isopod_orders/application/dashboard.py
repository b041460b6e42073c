"""Filtering and summary figures for the order list view."""
from typing import Iterable, List, Optional

from isopod_orders.domain.models import Order
from isopod_orders.domain.status import OrderStatus, parse_status
from isopod_orders.domain.totals import items_subtotal


def _matches(order: Order, query: str) -> bool:
    haystacks = [
        order.customer_name.lower(),
        order.phone,
        (order.email or "").lower(),
        (order.courier_receipt or "").lower(),
    ]
    if any(query in text for text in haystacks):
        return True
    return any(query in (item.get("name") or "").lower() for item in order.items or [])


def filter_orders(orders: Iterable[Order], status: Optional[str] = None, q: Optional[str] = None) -> List[Order]:
    """Apply the status filter and free-text search used by the dashboard.

    ``status`` of None or "all" keeps every order; the search is
    case-insensitive over customer name, phone, email, tracking number and
    item names.
    """
    selected = list(orders)
    if status and status != "all":
        wanted = parse_status(status).value
        selected = [o for o in selected if o.status == wanted]
    if q:
        query = q.strip().lower()
        selected = [o for o in selected if _matches(o, query)]
    return selected


def order_stats(orders: Iterable[Order]) -> dict:
    orders = list(orders)
    counts = {s.value: 0 for s in OrderStatus}
    for order in orders:
        counts[order.status] = counts.get(order.status, 0) + 1
    return {
        "total": len(orders),
        **counts,
        # Revenue counts goods only; shipping is passed through to the courier
        "revenue": sum(items_subtotal(order.items) for order in orders),
    }
