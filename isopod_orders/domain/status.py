from datetime import datetime, tzinfo
from enum import Enum
from typing import Any, Optional

from .errors import ValidationError


class OrderStatus(str, Enum):
    PENDING = "pending"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


VALID_STATUSES = [s.value for s in OrderStatus]


def parse_status(value: Any) -> OrderStatus:
    """Turn a raw status literal into an OrderStatus or raise ValidationError."""
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(value)
    except ValueError:
        raise ValidationError(
            {"status": f"Status must be one of: {', '.join(VALID_STATUSES)}"},
            message="Invalid status",
            code="invalid_status",
        )


def apply_status_transition(order, new_status: OrderStatus, now: datetime, shop_tz: Optional[tzinfo] = None):
    """Move ``order`` to ``new_status`` in place.

    Any state may move to any other state. Moving to ``shipped`` stamps
    ``sent_date`` with today's date only when none is recorded yet, so a
    repeated transition leaves the first ship date alone. The date is read
    on the shop's wall clock when ``shop_tz`` is given.
    """
    order.status = new_status.value
    order.updated_at = now
    if new_status is OrderStatus.SHIPPED and order.sent_date is None:
        order.sent_date = (now.astimezone(shop_tz) if shop_tz else now).date()
    return order
