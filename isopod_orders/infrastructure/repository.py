"""SQLAlchemy-backed persistence for orders.

Each public method is one round trip inside the request's session and either
commits or rolls back before returning. A missing row is reported through
SQLAlchemy's ``NoResultFound`` and turned into ``NotFoundError``; every other
driver failure becomes ``PersistenceError`` with the backend's message.
"""
from typing import Any, Dict, List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, NoResultFound, SQLAlchemyError
from sqlalchemy.orm import Session

from isopod_orders.core.logging_config import get_logger
from isopod_orders.domain.errors import NotFoundError, PersistenceError
from isopod_orders.domain.models import Order

logger = get_logger(__name__)


def _backend_detail(exc: SQLAlchemyError) -> str:
    return str(getattr(exc, "orig", None) or exc)


def _backend_code(exc: SQLAlchemyError) -> str:
    if isinstance(exc, IntegrityError):
        return "conflict"
    pgcode = getattr(getattr(exc, "orig", None), "pgcode", None)
    return pgcode or getattr(exc, "code", None) or "database_error"


class OrderRepository:
    def __init__(self, db: Session):
        self.db = db

    def _persistence_error(self, action: str, exc: SQLAlchemyError) -> PersistenceError:
        self.db.rollback()
        logger.error(f"Failed to {action}", exc_info=True)
        return PersistenceError(f"Failed to {action}", details=_backend_detail(exc), code=_backend_code(exc))

    def list_all(self) -> List[Order]:
        try:
            stmt = select(Order).order_by(Order.created_at.desc())
            return list(self.db.execute(stmt).scalars().all())
        except SQLAlchemyError as exc:
            raise self._persistence_error("fetch orders", exc)

    def get(self, order_id: str) -> Order:
        try:
            return self.db.execute(select(Order).where(Order.id == order_id)).scalar_one()
        except NoResultFound:
            raise NotFoundError(order_id)
        except SQLAlchemyError as exc:
            raise self._persistence_error("fetch order", exc)

    def insert_one(self, row: Dict[str, Any]) -> Order:
        order = Order(**row)
        try:
            self.db.add(order)
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._persistence_error("create order", exc)
        self.db.refresh(order)
        return order

    def update_by_id(self, order_id: str, changes: Dict[str, Any]) -> Order:
        order = self.get(order_id)
        for key, value in changes.items():
            setattr(order, key, value)
        return self.save(order, "update order")

    def save(self, order: Order, action: str = "update order") -> Order:
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._persistence_error(action, exc)
        self.db.refresh(order)
        return order

    def delete_by_id(self, order_id: str) -> Order:
        order = self.get(order_id)
        try:
            self.db.delete(order)
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._persistence_error("delete order", exc)
        return order
