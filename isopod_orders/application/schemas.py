from pydantic import BaseModel
from datetime import datetime, date
from typing import Any, Optional

# Request bodies are deliberately loose: numbers are checked by the domain
# validators so every failing field is reported at once, keyed by position.

class OrderItemIn(BaseModel):
    name: Any = ""
    quantity: Any = None
    price: Any = None

class OrderWrite(BaseModel):
    customer_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    social_media_handle: Optional[str] = None
    address: Optional[str] = None
    items: Optional[list[OrderItemIn]] = None
    courier_service: Optional[str] = None
    courier_receipt: Optional[str] = None
    sent_date: Optional[str] = None  # ISO date; "" means not sent
    shipping_charges: Any = None
    payment_amount: Any = None  # differs from the computed total only when overridden
    status: Optional[str] = None
    notes: Optional[str] = None

class StatusPatch(BaseModel):
    status: Optional[str] = None

class AccessKeyIn(BaseModel):
    key: Optional[str] = None

class OrderItemRead(BaseModel):
    name: str
    quantity: int
    price: float

class OrderRead(BaseModel):
    id: str
    created_at: datetime
    updated_at: datetime
    customer_name: str
    phone: str
    email: Optional[str] = None
    social_media_handle: Optional[str] = None
    address: str
    items: list[OrderItemRead]
    quantity_total: int
    courier_service: str
    courier_receipt: Optional[str] = None
    sent_date: Optional[date] = None
    shipping_charges: float
    payment_amount: float
    status: str
    notes: Optional[str] = None
    class Config:
        from_attributes = True

class OrderEnvelope(BaseModel):
    message: str
    order: OrderRead

class OrderList(BaseModel):
    orders: list[OrderRead]

class OrderDeleted(BaseModel):
    message: str
    deleted_order_id: str
    deleted_customer: Optional[str] = None

class OrderStats(BaseModel):
    total: int
    pending: int
    shipped: int
    delivered: int
    cancelled: int
    revenue: float

class SessionToken(BaseModel):
    success: bool
    message: str
    access_token: Optional[str] = None
    token_type: str = "bearer"
    expires_at: Optional[datetime] = None
