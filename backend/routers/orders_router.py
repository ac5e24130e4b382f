# backend/routers/orders_router.py
from typing import List, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from database.session import get_db
from models.order_model import Order
from queries.order_queries import OrderQueries
from routers.deps import get_session_context
from schemas.orders import (
    ApprovalPayload, OrderCreate, OrderResponse, OrderStatus, RejectionPayload,
)
from schemas.users import Role
from services.export_service import CSV_MEDIA_TYPE, export_filename, export_order_csv
from services.order_workflow import OrderWorkflow, allowed_actions
from services.session_context import SessionContext, require_role

router = APIRouter(prefix="/orders", tags=["orders"])


def _to_response(o: Order, ctx: SessionContext) -> OrderResponse:
    out = OrderResponse.model_validate(o)
    out.allowed_actions = allowed_actions(OrderStatus(o.status), ctx.role)
    return out


@router.get("/", response_model=List[OrderResponse])
def list_orders(
    status: Optional[OrderStatus] = Query(default=None),
    search: Optional[str] = Query(default=None),
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    orders = OrderQueries(db).list_orders(ctx, status=status, search_term=search)
    return [_to_response(o, ctx) for o in orders]


@router.post("/", response_model=OrderResponse, status_code=201)
def create_order(
    body: OrderCreate,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    o = OrderWorkflow(db).create_order(ctx, body.client_id, body.items, note=body.note)
    return _to_response(o, ctx)


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: str,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    return _to_response(OrderQueries(db).get_order(ctx, order_id), ctx)


@router.post("/{order_id}/approve", response_model=OrderResponse)
def approve_order(
    order_id: str,
    body: Optional[ApprovalPayload] = None,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    quantities = body.approved_quantities if body else {}
    return _to_response(OrderWorkflow(db).approve(ctx, order_id, quantities), ctx)


@router.post("/{order_id}/reject", response_model=OrderResponse)
def reject_order(
    order_id: str,
    body: Optional[RejectionPayload] = None,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    note = body.note if body else None
    return _to_response(OrderWorkflow(db).reject(ctx, order_id, note=note), ctx)


@router.post("/{order_id}/complete", response_model=OrderResponse)
def complete_order(
    order_id: str,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    return _to_response(OrderWorkflow(db).complete(ctx, order_id), ctx)


@router.get("/{order_id}/export")
def export_order(
    order_id: str,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    require_role(ctx, Role.PURCHASING, Role.ADMIN)
    o = OrderQueries(db).get_order(ctx, order_id)
    content = export_order_csv(o)
    filename = export_filename(o)
    ascii_name = filename.encode("ascii", "ignore").decode() or "pedido.csv"
    return Response(
        content=content.encode("utf-8"),
        media_type=CSV_MEDIA_TYPE,
        headers={
            "Content-Disposition": f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename)}"
        },
    )


@router.delete("/{order_id}", status_code=204)
def delete_order(
    order_id: str,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    """Maintenance only; the workflow itself never deletes orders."""
    require_role(ctx, Role.ADMIN)
    o = OrderQueries(db).get_order(ctx, order_id)
    db.delete(o)
    db.commit()
