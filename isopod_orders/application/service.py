from sqlalchemy.orm import Session
from isopod_orders.core.logging_config import get_logger
from isopod_orders.core_settings import get_settings
from isopod_orders.domain.errors import ValidationError
from isopod_orders.domain.models import Order
from isopod_orders.domain.payment import PaymentAmount
from isopod_orders.domain.status import OrderStatus, parse_status, apply_status_transition
from isopod_orders.domain.totals import recompute
from isopod_orders.domain.validation import (
    validate_customer_section,
    validate_items_section,
    validate_required_fields_for_create,
    is_amount,
)
from isopod_orders.infrastructure.repository import OrderRepository
from .dashboard import filter_orders, order_stats
from .export import build_workbook, export_filename
from .schemas import OrderWrite
from datetime import datetime, date, timezone, tzinfo
from zoneinfo import ZoneInfo
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

logger = get_logger(__name__)

OPTIONAL_FIELDS = ("email", "social_media_handle", "courier_receipt", "sent_date", "notes")

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)

def normalize_optional_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    """Replace empty strings in the optional fields with None.

    Applying it again to its own output changes nothing.
    """
    cleaned = dict(data)
    for name in OPTIONAL_FIELDS:
        if cleaned.get(name) == "":
            cleaned[name] = None
    return cleaned

def parse_sent_date(value: Any) -> Optional[date]:
    if value is None or isinstance(value, date) and not isinstance(value, datetime):
        return value
    if isinstance(value, datetime):
        return value.date()
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        raise ValidationError({"sent_date": "Enter a valid date (YYYY-MM-DD)"})

def _as_dict(data: Union[OrderWrite, Dict[str, Any]]) -> Dict[str, Any]:
    if isinstance(data, OrderWrite):
        return data.model_dump()
    return dict(data)

def _validate(data: Dict[str, Any]) -> None:
    boundary = validate_required_fields_for_create(data)
    if boundary:
        [(code, message)] = boundary.items()
        raise ValidationError(boundary, message=message, code=code)

    errors = {**validate_customer_section(data), **validate_items_section(data["items"])}
    shipping_charges = data.get("shipping_charges")
    if shipping_charges is not None and not is_amount(shipping_charges):
        errors["shipping_charges"] = "Shipping charges must be 0 or positive"
    payment_amount = data.get("payment_amount")
    if payment_amount is not None and not is_amount(payment_amount):
        errors["payment_amount"] = "Payment amount must be 0 or positive"
    if errors:
        raise ValidationError(errors)

class OrderService:
    def __init__(self, db: Session, clock: Optional[Callable[[], datetime]] = None,
                 shop_tz: Optional[tzinfo] = None):
        self.repo = OrderRepository(db)
        self.clock = clock or _utcnow
        self.shop_tz = shop_tz or ZoneInfo(get_settings().SHOP_TIMEZONE)

    def _prepare_row(self, data: Dict[str, Any], default_status: Optional[str] = None) -> Dict[str, Any]:
        """Validate, normalize and derive the stored columns for a write."""
        _validate(data)
        data = normalize_optional_fields(data)

        items = [
            {"name": item["name"].strip(), "quantity": int(item["quantity"]), "price": item["price"]}
            for item in data["items"]
        ]
        shipping_charges = data.get("shipping_charges") or 0
        totals = recompute(items, shipping_charges)
        payment = PaymentAmount.resolve(totals.payment_amount, data.get("payment_amount"))
        if payment.is_overridden:
            logger.info(
                "Payment amount overridden by operator",
                extra={'extra_fields': {'computed': totals.payment_amount, 'overridden': payment.value}}
            )

        row = {
            "customer_name": data["customer_name"].strip(),
            "phone": data["phone"].strip(),
            "email": data.get("email"),
            "social_media_handle": data.get("social_media_handle"),
            "address": data["address"].strip(),
            "items": items,
            "quantity_total": totals.quantity_total,
            "courier_service": data.get("courier_service") or "",
            "courier_receipt": data.get("courier_receipt"),
            "sent_date": parse_sent_date(data.get("sent_date")),
            "shipping_charges": shipping_charges,
            "payment_amount": payment.value,
            "notes": data.get("notes"),
        }
        # A replace without a status keeps the stored one
        status = data.get("status") or default_status
        if status:
            row["status"] = parse_status(status).value
        return row

    def list(self, status: Optional[str] = None, q: Optional[str] = None) -> List[Order]:
        return filter_orders(self.repo.list_all(), status=status, q=q)

    def get(self, order_id: str) -> Order:
        return self.repo.get(order_id)

    def create(self, data: Union[OrderWrite, Dict[str, Any]]) -> Order:
        row = self._prepare_row(_as_dict(data), OrderStatus.PENDING.value)
        now = self.clock()
        row.update(created_at=now, updated_at=now)
        order = self.repo.insert_one(row)
        logger.info(f"Order created: {order.id}", extra={'extra_fields': {'order_id': order.id}})
        return order

    def replace(self, order_id: str, data: Union[OrderWrite, Dict[str, Any]]) -> Order:
        row = self._prepare_row(_as_dict(data))
        row["updated_at"] = self.clock()
        order = self.repo.update_by_id(order_id, row)
        logger.info(f"Order replaced: {order_id}", extra={'extra_fields': {'order_id': order_id}})
        return order

    def update_status(self, order_id: str, new_status: Any) -> Order:
        status = parse_status(new_status)
        order = self.repo.get(order_id)
        previous = order.status
        apply_status_transition(order, status, self.clock(), self.shop_tz)
        order = self.repo.save(order, "update order status")
        logger.info(
            f"Order status updated: {order_id}",
            extra={'extra_fields': {'order_id': order_id, 'from': previous, 'to': status.value}}
        )
        return order

    def delete(self, order_id: str) -> Order:
        order = self.repo.delete_by_id(order_id)
        logger.info(f"Order deleted: {order_id}", extra={'extra_fields': {'order_id': order_id}})
        return order

    def stats(self) -> dict:
        return order_stats(self.repo.list_all())

    def export(self, status: Optional[str] = None, q: Optional[str] = None,
               filename_prefix: str = "isopod_orders") -> Tuple[str, bytes]:
        orders = self.list(status=status, q=q)
        if not orders:
            filtered = bool(q) or (status not in (None, "all"))
            raise ValidationError(
                {"orders": "No orders to export" + (" with current filters" if filtered else "")},
                message="No orders to export",
                code="empty_export",
            )
        today = self.clock().astimezone(self.shop_tz).date()
        return export_filename(filename_prefix, today), build_workbook(orders)
