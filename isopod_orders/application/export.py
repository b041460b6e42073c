"""Spreadsheet export of orders.

One row per order with the columns the shop keeps in its ledger; optional
fields fall back to "N/A" and unsent orders read "Not Sent".
"""
import io
from datetime import date, datetime
from typing import Any, Dict, Iterable, List

import openpyxl
from openpyxl.utils import get_column_letter

from isopod_orders.domain.models import Order
from isopod_orders.domain.totals import items_subtotal

SHEET_TITLE = "Orders"
MAX_COLUMN_WIDTH = 50
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

EXPORT_COLUMNS = [
    "Order ID",
    "Customer Name",
    "Phone Number",
    "Email Address",
    "Social Media",
    "Shipping Address",
    "Order Date",
    "Sent Date",
    "Status",
    "Courier Service",
    "Tracking Number",
    "Items Details",
    "Items Total",
    "Shipping Charges",
    "Total Amount",
    "Notes",
]


def _or_na(value: Any) -> Any:
    return value if value else "N/A"


def _format_price(price: Any) -> str:
    price = price or 0
    if isinstance(price, float) and price.is_integer():
        return str(int(price))
    return str(price)


def items_details(items: Iterable[Dict[str, Any]]) -> str:
    return "; ".join(
        f"{item.get('name')} (Qty: {item.get('quantity')}, ₹{_format_price(item.get('price'))})"
        for item in items or []
    )


def format_sent_date(sent_date: Any) -> str:
    if not sent_date:
        return "Not Sent"
    if isinstance(sent_date, (date, datetime)):
        return sent_date.strftime("%Y-%m-%d")
    return str(sent_date)[:10]


def export_row(order: Order) -> Dict[str, Any]:
    return {
        "Order ID": order.id,
        "Customer Name": order.customer_name,
        "Phone Number": order.phone,
        "Email Address": _or_na(order.email),
        "Social Media": _or_na(order.social_media_handle),
        "Shipping Address": order.address,
        "Order Date": order.created_at.strftime("%Y-%m-%d %H:%M"),
        "Sent Date": format_sent_date(order.sent_date),
        "Status": order.status.capitalize(),
        "Courier Service": _or_na(order.courier_service),
        "Tracking Number": _or_na(order.courier_receipt),
        "Items Details": items_details(order.items),
        "Items Total": round(items_subtotal(order.items), 2),
        "Shipping Charges": round(order.shipping_charges or 0, 2),
        "Total Amount": round(order.payment_amount or 0, 2),
        "Notes": _or_na(order.notes),
    }


def export_filename(prefix: str, today: date) -> str:
    return f"{prefix}_{today.strftime('%Y-%m-%d')}.xlsx"


def build_workbook(orders: Iterable[Order]) -> bytes:
    rows: List[Dict[str, Any]] = [export_row(order) for order in orders]

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE
    ws.append(EXPORT_COLUMNS)
    for row in rows:
        ws.append([row[column] for column in EXPORT_COLUMNS])

    # One width for every column, wide enough for the longest cell
    width = 10
    for row in rows:
        for value in row.values():
            width = max(width, len(str(value)))
    for col_idx in range(1, len(EXPORT_COLUMNS) + 1):
        ws.column_dimensions[get_column_letter(col_idx)].width = min(width, MAX_COLUMN_WIDTH)

    bio = io.BytesIO()
    wb.save(bio)
    return bio.getvalue()
