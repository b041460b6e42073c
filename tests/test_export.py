import io
from datetime import date, datetime

import openpyxl
import pytest

from isopod_orders.application.export import (
    EXPORT_COLUMNS,
    build_workbook,
    export_filename,
    export_row,
    items_details,
)
from isopod_orders.domain.errors import ValidationError
from isopod_orders.domain.models import Order


def make_order(**fields):
    data = dict(
        id="5f1c2a9e-0000-4000-8000-000000000001",
        created_at=datetime(2025, 3, 1, 9, 5),
        updated_at=datetime(2025, 3, 1, 9, 5),
        customer_name="Asha Rao",
        phone="9876543210",
        email=None,
        social_media_handle=None,
        address="12 Fern Lane, Pune",
        items=[
            {"name": "Isopod Culture", "quantity": 3, "price": 250.0},
            {"name": "Springtails", "quantity": 1, "price": 99.5},
        ],
        quantity_total=4,
        courier_service="",
        courier_receipt=None,
        sent_date=None,
        shipping_charges=50.0,
        payment_amount=899.5,
        status="pending",
        notes=None,
    )
    data.update(fields)
    return Order(**data)


def test_row_uses_placeholders_for_missing_values():
    row = export_row(make_order())
    assert list(row) == EXPORT_COLUMNS
    assert row["Email Address"] == "N/A"
    assert row["Social Media"] == "N/A"
    assert row["Courier Service"] == "N/A"
    assert row["Tracking Number"] == "N/A"
    assert row["Notes"] == "N/A"
    assert row["Sent Date"] == "Not Sent"
    assert row["Status"] == "Pending"
    assert row["Order Date"] == "2025-03-01 09:05"


def test_row_amounts_and_item_details():
    row = export_row(make_order(status="shipped", sent_date=date(2025, 3, 2), courier_receipt="DT123"))
    assert row["Items Details"] == "Isopod Culture (Qty: 3, ₹250); Springtails (Qty: 1, ₹99.5)"
    assert row["Items Total"] == 849.5
    assert row["Shipping Charges"] == 50
    assert row["Total Amount"] == 899.5
    assert row["Sent Date"] == "2025-03-02"
    assert row["Status"] == "Shipped"
    assert row["Tracking Number"] == "DT123"


def test_items_details_empty():
    assert items_details([]) == ""


def test_workbook_has_header_and_one_row_per_order():
    content = build_workbook([make_order(), make_order(id="second", customer_name="Vikram Shah")])
    ws = openpyxl.load_workbook(io.BytesIO(content)).active
    assert ws.title == "Orders"
    rows = list(ws.iter_rows(values_only=True))
    assert list(rows[0]) == EXPORT_COLUMNS
    assert len(rows) == 3
    assert rows[2][1] == "Vikram Shah"
    assert ws.column_dimensions["A"].width <= 50


def test_export_filename():
    assert export_filename("isopod_orders", date(2025, 3, 1)) == "isopod_orders_2025-03-01.xlsx"


def test_service_export_of_nothing_is_rejected(service):
    with pytest.raises(ValidationError) as excinfo:
        service.export()
    assert excinfo.value.code == "empty_export"


def test_service_export_applies_filters(service, make_payload):
    service.create(make_payload())
    filename, content = service.export(status="pending")
    assert filename.endswith(".xlsx")
    ws = openpyxl.load_workbook(io.BytesIO(content)).active
    assert ws.max_row == 2
    with pytest.raises(ValidationError) as excinfo:
        service.export(status="delivered")
    assert excinfo.value.errors["orders"] == "No orders to export with current filters"
