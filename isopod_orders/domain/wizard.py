"""Three-step order creation wizard.

The form walks Customer -> Items -> Shipping. Moving forward is gated by the
validator for the current step; moving back is always allowed. The draft
keeps the derived totals in step with the items and shipping charges, and
only an explicit override changes the payment amount by hand.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from .payment import PaymentAmount
from .status import OrderStatus
from .totals import recompute
from .validation import (
    ValidationResult,
    validate_customer_section,
    validate_items_section,
    is_amount,
)


class WizardStep(int, Enum):
    CUSTOMER = 1
    ITEMS = 2
    SHIPPING = 3


NEXT_STEP = {
    WizardStep.CUSTOMER: WizardStep.ITEMS,
    WizardStep.ITEMS: WizardStep.SHIPPING,
}

PREVIOUS_STEP = {
    WizardStep.ITEMS: WizardStep.CUSTOMER,
    WizardStep.SHIPPING: WizardStep.ITEMS,
}


def _blank_item() -> Dict[str, Any]:
    return {"name": "", "quantity": 1, "price": 0}


@dataclass
class OrderDraft:
    customer_name: str = ""
    phone: str = ""
    email: str = ""
    social_media_handle: str = ""
    address: str = ""
    items: List[Dict[str, Any]] = field(default_factory=lambda: [_blank_item()])
    courier_service: str = ""
    courier_receipt: str = ""
    sent_date: str = ""
    shipping_charges: float = 0
    status: str = OrderStatus.PENDING.value
    notes: str = ""
    quantity_total: int = 0
    payment: PaymentAmount = field(default_factory=lambda: PaymentAmount.computed(0))

    def __post_init__(self):
        self._recompute()

    @classmethod
    def from_order(cls, order: Any) -> "OrderDraft":
        """Seed an edit session from a stored order."""
        sent_date = getattr(order, "sent_date", None)
        draft = cls(
            customer_name=order.customer_name,
            phone=order.phone,
            email=order.email or "",
            social_media_handle=order.social_media_handle or "",
            address=order.address,
            items=[dict(item) for item in order.items],
            courier_service=order.courier_service or "",
            courier_receipt=order.courier_receipt or "",
            sent_date=sent_date.isoformat() if sent_date else "",
            shipping_charges=order.shipping_charges or 0,
            status=order.status,
            notes=order.notes or "",
        )
        # A stored amount that disagrees with the items was typed by hand
        draft.payment = PaymentAmount.resolve(draft.payment.value, order.payment_amount)
        return draft

    def _recompute(self):
        totals = recompute(self.items, self.shipping_charges)
        self.quantity_total = totals.quantity_total
        self.payment = PaymentAmount.computed(totals.payment_amount)

    @property
    def payment_amount(self) -> float:
        return self.payment.value

    def add_item(self, name: str = "", quantity: int = 1, price: float = 0):
        self.items.append({"name": name, "quantity": quantity, "price": price})
        self._recompute()

    def remove_item(self, index: int):
        # The last remaining row stays so the form always has one to fill in
        if len(self.items) > 1:
            del self.items[index]
            self._recompute()

    def update_item(self, index: int, **changes):
        unknown = set(changes) - {"name", "quantity", "price"}
        if unknown:
            raise KeyError(f"Unknown item field(s): {', '.join(sorted(unknown))}")
        self.items[index] = {**self.items[index], **changes}
        self._recompute()

    def set_shipping_charges(self, amount: float):
        self.shipping_charges = amount
        self._recompute()

    def override_payment_amount(self, amount: float):
        self.payment = PaymentAmount.overridden(amount)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "customer_name": self.customer_name,
            "phone": self.phone,
            "email": self.email,
            "social_media_handle": self.social_media_handle,
            "address": self.address,
            "items": [dict(item) for item in self.items],
            "quantity_total": self.quantity_total,
            "courier_service": self.courier_service,
            "courier_receipt": self.courier_receipt,
            "sent_date": self.sent_date,
            "shipping_charges": self.shipping_charges,
            "payment_amount": self.payment.value,
            "status": self.status,
            "notes": self.notes,
        }


def _validate_items_step(draft: OrderDraft) -> ValidationResult:
    if not draft.items:
        return {"items": "At least one item is required"}
    return validate_items_section(draft.items)


def _validate_shipping_step(draft: OrderDraft) -> ValidationResult:
    errors: ValidationResult = {}
    if draft.shipping_charges is not None and not is_amount(draft.shipping_charges):
        errors["shipping_charges"] = "Shipping charges must be 0 or positive"
    if not is_amount(draft.payment.value):
        errors["payment_amount"] = "Payment amount must be 0 or positive"
    return errors


STEP_VALIDATORS: Dict[WizardStep, Callable[[OrderDraft], ValidationResult]] = {
    WizardStep.CUSTOMER: validate_customer_section,
    WizardStep.ITEMS: _validate_items_step,
    WizardStep.SHIPPING: _validate_shipping_step,
}


class OrderWizard:
    def __init__(self, draft: Optional[OrderDraft] = None):
        self.draft = draft if draft is not None else OrderDraft()
        self.step = WizardStep.CUSTOMER
        self.errors: ValidationResult = {}

    def validate_current_step(self) -> ValidationResult:
        self.errors = STEP_VALIDATORS[self.step](self.draft)
        return self.errors

    def advance(self) -> bool:
        """Move to the next step if the current one validates."""
        if self.validate_current_step():
            return False
        self.step = NEXT_STEP.get(self.step, self.step)
        return True

    def back(self) -> WizardStep:
        self.errors = {}
        self.step = PREVIOUS_STEP.get(self.step, self.step)
        return self.step

    @property
    def is_last_step(self) -> bool:
        return self.step not in NEXT_STEP

    def submit(self) -> Optional[Dict[str, Any]]:
        """Return the create/replace payload, or None while not submittable.

        Submitting before the last step behaves like pressing "next".
        """
        if not self.is_last_step:
            self.advance()
            return None
        if self.validate_current_step():
            return None
        return self.draft.to_payload()
