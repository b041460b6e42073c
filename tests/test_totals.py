from itertools import permutations
from types import SimpleNamespace

import pytest

from isopod_orders.domain.totals import line_total, items_subtotal, recompute


def test_recompute_sums_quantities_and_adds_shipping():
    totals = recompute([{"name": "Isopod Culture", "quantity": 3, "price": 250}], 50)
    assert totals.quantity_total == 3
    assert totals.payment_amount == 800


def test_recompute_ignores_item_order():
    items = [
        {"name": "Dairy Cow Isopods", "quantity": 2, "price": 399.5},
        {"name": "Springtails", "quantity": 5, "price": 120},
        {"name": "Leaf litter", "quantity": 1, "price": 49.99},
    ]
    expected = recompute(items, 60)
    assert expected.quantity_total == 8
    assert expected.payment_amount == pytest.approx(2 * 399.5 + 5 * 120 + 49.99 + 60)
    for ordering in permutations(items):
        totals = recompute(list(ordering), 60)
        assert totals.quantity_total == expected.quantity_total
        assert totals.payment_amount == pytest.approx(expected.payment_amount)


def test_missing_values_count_as_zero():
    items = [{"name": "half filled"}, {"name": "priced", "quantity": 2}, {"quantity": 1, "price": 10}]
    totals = recompute(items, None)
    assert totals.quantity_total == 3
    assert totals.payment_amount == 10


def test_accepts_objects_with_attributes():
    item = SimpleNamespace(name="Moss", quantity=4, price=25)
    assert line_total(item) == 100
    assert items_subtotal([item, item]) == 200


def test_empty_items():
    assert recompute([], 40) == (0, 40)
