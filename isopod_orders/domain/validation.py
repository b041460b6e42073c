"""Field and step validators for orders.

Each validator returns a mapping of field key to operator-facing message and
collects every failure instead of stopping at the first. An empty mapping
means the input is valid.
"""
import math
import re
from typing import Any, Dict, Iterable, Mapping

ValidationResult = Dict[str, str]

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")
NON_DIGITS = re.compile(r"\D")
PHONE_DIGITS = 10

REQUIRED_CREATE_FIELDS = ("customer_name", "phone", "address")


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _get(source: Any, name: str):
    if isinstance(source, Mapping):
        return source.get(name)
    return getattr(source, name, None)


def is_whole_quantity(value: Any) -> bool:
    """True for an integer of at least one; ``2.0`` counts, ``1.5`` and ``True`` do not."""
    if isinstance(value, bool):
        return False
    if isinstance(value, float):
        return math.isfinite(value) and value.is_integer() and value >= 1
    return isinstance(value, int) and value >= 1


def is_amount(value: Any) -> bool:
    """True for a finite, non-negative number of rupees."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value >= 0


def normalize_phone(phone: Any) -> str:
    """Strip every non-digit character, e.g. ``987-654-3210`` -> ``9876543210``."""
    return NON_DIGITS.sub("", phone if isinstance(phone, str) else "")


def validate_customer_section(data: Any) -> ValidationResult:
    errors: ValidationResult = {}

    if not _text(_get(data, "customer_name")):
        errors["customer_name"] = "Customer name is required"

    phone = _get(data, "phone")
    if not _text(phone):
        errors["phone"] = "Phone number is required"
    elif len(normalize_phone(phone)) != PHONE_DIGITS:
        errors["phone"] = "Enter a valid 10-digit phone number"

    email = _get(data, "email")
    if email and not (isinstance(email, str) and EMAIL_PATTERN.search(email)):
        errors["email"] = "Enter a valid email address"

    if not _text(_get(data, "address")):
        errors["address"] = "Address is required"

    return errors


def item_error_key(index: int, field: str) -> str:
    return f"items[{index}].{field}"


def validate_items_section(items: Iterable[Any]) -> ValidationResult:
    """Check every item independently.

    An empty sequence passes here; refusing zero items is up to whoever
    aggregates the list (the wizard and the create boundary both do).
    """
    errors: ValidationResult = {}
    for index, item in enumerate(items or []):
        if not _text(_get(item, "name")):
            errors[item_error_key(index, "name")] = "Item name is required"

        quantity = _get(item, "quantity")
        if not is_whole_quantity(quantity):
            errors[item_error_key(index, "quantity")] = "Quantity must be at least 1"

        price = _get(item, "price")
        if not is_amount(price):
            errors[item_error_key(index, "price")] = "Price must be 0 or positive"
    return errors


def validate_required_fields_for_create(data: Any) -> ValidationResult:
    missing = [name for name in REQUIRED_CREATE_FIELDS if not _text(_get(data, name))]
    if missing:
        return {
            "missing_required_fields": "Missing required fields: " + ", ".join(REQUIRED_CREATE_FIELDS),
        }
    if not _get(data, "items"):
        return {"no_items": "At least one item is required"}
    return {}
