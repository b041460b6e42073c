from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import String, Text, Numeric, DateTime, Date, Integer, JSON, Index
from datetime import datetime, date, timezone
from typing import Optional
import uuid

def _new_id() -> str:
    return str(uuid.uuid4())

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)

class Base(DeclarativeBase):
    pass

class Order(Base):
    __tablename__ = "orders"
    __table_args__ = (
        Index("idx_orders_created_at", "created_at"),
        Index("idx_orders_status", "status"),
    )
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)
    # Customer
    customer_name: Mapped[str] = mapped_column(String(200))
    phone: Mapped[str] = mapped_column(String(50))
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    social_media_handle: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    address: Mapped[str] = mapped_column(Text)
    # Stored as a list of {name, quantity, price} objects
    items: Mapped[list] = mapped_column(JSON, default=list)
    quantity_total: Mapped[int] = mapped_column(Integer, default=0)
    # Shipping
    courier_service: Mapped[str] = mapped_column(String(100), default="")
    courier_receipt: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    sent_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    shipping_charges: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), default=0)
    # Payment
    payment_amount: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), default=0)
    status: Mapped[str] = mapped_column(String(20), default="pending")
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
