# backend/queries/order_queries.py
"""Role-scoped reads over the orders collection."""
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from models.order_model import Order
from schemas.orders import OrderStatus
from schemas.users import Role
from services.errors import AuthorizationDenied, NotFound
from services.session_context import SessionContext

# statuses each role may observe; admin sees everything
VISIBLE_STATUSES = {
    Role.APPROVER: (OrderStatus.PENDING,),
    Role.PURCHASING: (OrderStatus.APPROVED, OrderStatus.COMPLETED),
}

DEFAULT_STATUS = {
    Role.APPROVER: OrderStatus.PENDING,
    Role.PURCHASING: OrderStatus.APPROVED,
}


class OrderQueries:
    def __init__(self, db: Session):
        self.db = db

    def list_orders(
        self,
        ctx: SessionContext,
        status: Optional[OrderStatus] = None,
        search_term: Optional[str] = None,
    ) -> List[Order]:
        """Orders visible to ``ctx``, newest first.

        Approvers only get pending orders. Purchasing gets approved orders by
        default and completed ones when asked. Admin gets all of them and may
        filter by status and search by client, supervisor or order id.
        Supervisors have no order listing.
        """
        q = self.db.query(Order)

        if ctx.role == Role.ADMIN:
            if status is not None:
                q = q.filter(Order.status == status.value)
            if search_term:
                like = f"%{search_term.strip()}%"
                q = q.filter(or_(
                    Order.client_name.ilike(like),
                    Order.supervisor_name.ilike(like),
                    Order.id.ilike(like),
                ))
        elif ctx.role in VISIBLE_STATUSES:
            if status is None:
                status = DEFAULT_STATUS[ctx.role]
            if status not in VISIBLE_STATUSES[ctx.role]:
                raise AuthorizationDenied(f"Pedidos com status {status.value} não estão disponíveis.")
            q = q.filter(Order.status == status.value)
        else:
            raise AuthorizationDenied("Sem acesso à lista de pedidos.")

        return q.order_by(Order.created_at.desc()).all()

    def get_order(self, ctx: SessionContext, order_id: str) -> Order:
        order = self.db.get(Order, order_id)
        if order is None or not can_view(ctx, order):
            raise NotFound("Pedido não encontrado.")
        return order

    def count_by_status(self) -> dict:
        counts = {s.value: 0 for s in OrderStatus}
        for (st,) in self.db.query(Order.status):
            counts[st] = counts.get(st, 0) + 1
        return counts


def can_view(ctx: SessionContext, order: Order) -> bool:
    if ctx.role == Role.ADMIN:
        return True
    visible = VISIBLE_STATUSES.get(ctx.role, ())
    return order.status in {s.value for s in visible}
