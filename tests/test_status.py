from datetime import date, datetime, timezone
from types import SimpleNamespace
from zoneinfo import ZoneInfo

import pytest

from isopod_orders.domain.errors import ValidationError
from isopod_orders.domain.status import OrderStatus, apply_status_transition, parse_status

NOW = datetime(2025, 3, 4, 15, 30, tzinfo=timezone.utc)


def order(**fields):
    data = {"status": "pending", "sent_date": None, "updated_at": None}
    data.update(fields)
    return SimpleNamespace(**data)


def test_parse_status_accepts_the_four_literals():
    assert [parse_status(s) for s in ["pending", "shipped", "delivered", "cancelled"]] == list(OrderStatus)


def test_parse_status_rejects_anything_else():
    for value in ["Shipped", "lost", "", None]:
        with pytest.raises(ValidationError) as excinfo:
            parse_status(value)
        assert excinfo.value.code == "invalid_status"
        assert excinfo.value.errors["status"] == "Status must be one of: pending, shipped, delivered, cancelled"


def test_shipping_stamps_sent_date_once():
    o = order()
    apply_status_transition(o, OrderStatus.SHIPPED, NOW)
    assert o.status == "shipped"
    assert o.sent_date == date(2025, 3, 4)
    assert o.updated_at == NOW

    later = datetime(2025, 3, 9, 8, 0, tzinfo=timezone.utc)
    apply_status_transition(o, OrderStatus.SHIPPED, later)
    assert o.sent_date == date(2025, 3, 4)
    assert o.updated_at == later


def test_existing_sent_date_is_kept():
    o = order(sent_date=date(2025, 2, 27))
    apply_status_transition(o, OrderStatus.SHIPPED, NOW)
    assert o.sent_date == date(2025, 2, 27)


def test_any_state_can_move_to_any_other():
    o = order(status="delivered", sent_date=date(2025, 2, 27))
    apply_status_transition(o, OrderStatus.PENDING, NOW)
    assert o.status == "pending"
    assert o.sent_date == date(2025, 2, 27)
    apply_status_transition(o, OrderStatus.CANCELLED, NOW)
    assert o.status == "cancelled"


def test_sent_date_uses_the_shop_calendar_day():
    late_evening_utc = datetime(2025, 3, 4, 19, 0, tzinfo=timezone.utc)
    o = order()
    apply_status_transition(o, OrderStatus.SHIPPED, late_evening_utc, ZoneInfo("Asia/Kolkata"))
    assert o.sent_date == date(2025, 3, 5)
    assert o.updated_at == late_evening_utc
