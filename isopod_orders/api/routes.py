from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session
from typing import Optional
from isopod_orders.infrastructure.db import get_db
from isopod_orders.application.service import OrderService
from isopod_orders.application.export import XLSX_MEDIA_TYPE
from isopod_orders.application.schemas import (
    OrderWrite, StatusPatch, OrderEnvelope, OrderList, OrderDeleted, OrderStats,
)
from isopod_orders.core_settings import Settings, get_settings
from isopod_orders.domain.errors import OrderEngineError, ValidationError, NotFoundError, PersistenceError
from .auth import OperatorContext, require_operator

router = APIRouter(prefix="/orders", tags=["orders"])

def _http_error(exc: OrderEngineError) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail={"error": "Order not found", "message": exc.message})
    if isinstance(exc, ValidationError):
        detail = {"error": exc.message, "code": exc.code, "fields": exc.errors}
        if exc.code == "invalid_status":
            detail["message"] = exc.errors["status"]
        return HTTPException(status_code=400, detail=detail)
    if isinstance(exc, PersistenceError):
        return HTTPException(status_code=500, detail=exc.to_dict())
    return HTTPException(status_code=500, detail={"error": "Internal server error", "message": exc.message})

@router.get("/", response_model=OrderList)
def list_orders(
    status: Optional[str] = Query(None, description="pending, shipped, delivered, cancelled or all"),
    q: Optional[str] = Query(None, description="Search name, phone, email, tracking number, items"),
    db: Session = Depends(get_db),
    operator: OperatorContext = Depends(require_operator),
):
    """List orders, newest first."""
    try:
        return {"orders": OrderService(db).list(status=status, q=q)}
    except OrderEngineError as exc:
        raise _http_error(exc)

@router.get("/stats", response_model=OrderStats)
def order_stats(db: Session = Depends(get_db), operator: OperatorContext = Depends(require_operator)):
    try:
        return OrderService(db).stats()
    except OrderEngineError as exc:
        raise _http_error(exc)

@router.get("/export")
def export_orders(
    status: Optional[str] = None,
    q: Optional[str] = None,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    operator: OperatorContext = Depends(require_operator),
):
    """Download the (optionally filtered) orders as an Excel workbook."""
    try:
        filename, content = OrderService(db).export(
            status=status, q=q, filename_prefix=settings.EXPORT_FILENAME_PREFIX
        )
    except OrderEngineError as exc:
        raise _http_error(exc)
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )

@router.get("/{order_id}", response_model=OrderEnvelope)
def get_order(order_id: str, db: Session = Depends(get_db), operator: OperatorContext = Depends(require_operator)):
    try:
        return {"message": "Order fetched successfully", "order": OrderService(db).get(order_id)}
    except OrderEngineError as exc:
        raise _http_error(exc)

@router.post("/", response_model=OrderEnvelope, status_code=201)
def create_order(payload: OrderWrite, db: Session = Depends(get_db), operator: OperatorContext = Depends(require_operator)):
    try:
        order = OrderService(db).create(payload)
    except OrderEngineError as exc:
        raise _http_error(exc)
    return {"message": "Order created successfully", "order": order}

@router.put("/{order_id}", response_model=OrderEnvelope)
def replace_order(order_id: str, payload: OrderWrite, db: Session = Depends(get_db),
                  operator: OperatorContext = Depends(require_operator)):
    try:
        order = OrderService(db).replace(order_id, payload)
    except OrderEngineError as exc:
        raise _http_error(exc)
    return {"message": "Order updated successfully", "order": order}

@router.patch("/{order_id}", response_model=OrderEnvelope)
def update_order_status(order_id: str, payload: StatusPatch, db: Session = Depends(get_db),
                        operator: OperatorContext = Depends(require_operator)):
    """Quick status change; moving to shipped stamps the sent date if missing."""
    try:
        order = OrderService(db).update_status(order_id, payload.status)
    except OrderEngineError as exc:
        raise _http_error(exc)
    return {"message": "Order status updated successfully", "order": order}

@router.delete("/{order_id}", response_model=OrderDeleted)
def delete_order(order_id: str, db: Session = Depends(get_db), operator: OperatorContext = Depends(require_operator)):
    try:
        order = OrderService(db).delete(order_id)
    except OrderEngineError as exc:
        raise _http_error(exc)
    return {
        "message": "Order deleted successfully",
        "deleted_order_id": order.id,
        "deleted_customer": order.customer_name,
    }
