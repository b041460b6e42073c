from datetime import date
from types import SimpleNamespace

from isopod_orders.domain.payment import PaymentAmount, PaymentKind
from isopod_orders.domain.wizard import OrderDraft, OrderWizard, WizardStep


def filled_wizard():
    wizard = OrderWizard()
    draft = wizard.draft
    draft.customer_name = "Asha Rao"
    draft.phone = "987-654-3210"
    draft.address = "12 Fern Lane, Pune"
    return wizard


def test_customer_step_gates_advance():
    wizard = OrderWizard()
    assert wizard.advance() is False
    assert wizard.step is WizardStep.CUSTOMER
    assert set(wizard.errors) == {"customer_name", "phone", "address"}


def test_walks_forward_when_each_step_validates():
    wizard = filled_wizard()
    assert wizard.advance() is True
    assert wizard.step is WizardStep.ITEMS

    # The fresh placeholder row has no name yet
    assert wizard.advance() is False
    assert wizard.errors == {"items[0].name": "Item name is required"}

    wizard.draft.update_item(0, name="Isopod Culture", quantity=3, price=250)
    assert wizard.advance() is True
    assert wizard.step is WizardStep.SHIPPING
    assert wizard.is_last_step


def test_items_step_refuses_zero_items():
    wizard = filled_wizard()
    wizard.advance()
    wizard.draft.items = []
    assert wizard.advance() is False
    assert wizard.errors == {"items": "At least one item is required"}
    assert wizard.step is WizardStep.ITEMS


def test_back_is_always_allowed():
    wizard = filled_wizard()
    assert wizard.back() is WizardStep.CUSTOMER
    wizard.advance()
    wizard.draft.items[0]["name"] = ""
    wizard.advance()
    assert wizard.errors
    assert wizard.back() is WizardStep.CUSTOMER
    assert wizard.errors == {}


def test_remove_item_keeps_the_last_row():
    draft = OrderDraft()
    draft.remove_item(0)
    assert len(draft.items) == 1
    draft.add_item("Springtails", 2, 120)
    draft.remove_item(0)
    assert draft.items == [{"name": "Springtails", "quantity": 2, "price": 120}]


def test_totals_follow_items_and_shipping():
    draft = OrderDraft()
    draft.update_item(0, name="Isopod Culture", quantity=3, price=250)
    assert (draft.quantity_total, draft.payment_amount) == (3, 750)
    draft.add_item("Springtails", 2, 100)
    assert (draft.quantity_total, draft.payment_amount) == (5, 950)
    draft.set_shipping_charges(50)
    assert draft.payment_amount == 1000
    assert draft.payment.kind is PaymentKind.COMPUTED


def test_override_lasts_until_next_recompute():
    draft = OrderDraft()
    draft.update_item(0, name="Isopod Culture", quantity=3, price=250)
    draft.override_payment_amount(700)
    assert draft.payment == PaymentAmount.overridden(700)
    assert draft.to_payload()["payment_amount"] == 700

    draft.set_shipping_charges(50)
    assert draft.payment == PaymentAmount.computed(800)


def test_submit_before_last_step_acts_as_next():
    wizard = filled_wizard()
    assert wizard.submit() is None
    assert wizard.step is WizardStep.ITEMS


def test_submit_returns_payload_on_last_step():
    wizard = filled_wizard()
    wizard.advance()
    wizard.draft.update_item(0, name="Isopod Culture", quantity=3, price=250)
    wizard.advance()
    wizard.draft.set_shipping_charges(50)
    payload = wizard.submit()
    assert payload["items"] == [{"name": "Isopod Culture", "quantity": 3, "price": 250}]
    assert payload["quantity_total"] == 3
    assert payload["payment_amount"] == 800
    assert payload["status"] == "pending"


def test_submit_rejects_negative_shipping():
    wizard = filled_wizard()
    wizard.advance()
    wizard.draft.update_item(0, name="Moss", quantity=1, price=10)
    wizard.advance()
    wizard.draft.set_shipping_charges(-5)
    assert wizard.submit() is None
    assert "shipping_charges" in wizard.errors


def test_edit_session_detects_stored_override():
    stored = SimpleNamespace(
        customer_name="Asha Rao", phone="9876543210", email=None, social_media_handle=None,
        address="Pune", items=[{"name": "Isopod Culture", "quantity": 3, "price": 250}],
        courier_service="DTDC", courier_receipt=None, sent_date=date(2025, 3, 2),
        shipping_charges=50, status="shipped", notes=None, payment_amount=780,
    )
    draft = OrderDraft.from_order(stored)
    assert draft.sent_date == "2025-03-02"
    assert draft.email == ""
    assert draft.payment == PaymentAmount.overridden(780)

    stored.payment_amount = 800
    assert OrderDraft.from_order(stored).payment.kind is PaymentKind.COMPUTED


def test_resolve_treats_sub_paisa_difference_as_computed():
    assert PaymentAmount.resolve(800.0, 800.001).kind is PaymentKind.COMPUTED
    assert PaymentAmount.resolve(800.0, None) == PaymentAmount.computed(800.0)
    assert PaymentAmount.resolve(800.0, 750).is_overridden


def test_items_step_rejects_fractional_quantity():
    wizard = filled_wizard()
    wizard.advance()
    wizard.draft.update_item(0, name="Dwarf Whites", quantity=1.5, price=100)
    assert wizard.advance() is False
    assert wizard.errors == {"items[0].quantity": "Quantity must be at least 1"}
    assert wizard.step is WizardStep.ITEMS


def test_submit_rejects_nan_shipping():
    wizard = filled_wizard()
    wizard.advance()
    wizard.draft.update_item(0, name="Moss", quantity=1, price=10)
    wizard.advance()
    wizard.draft.set_shipping_charges(float("nan"))
    assert wizard.submit() is None
    assert "shipping_charges" in wizard.errors
