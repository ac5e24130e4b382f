# backend/services/order_workflow.py
r"""
Order status workflow.

    (none) --supervisor--> pending --approver--> approved --purchasing--> completed
                                   \--approver--> rejected

``rejected`` and ``completed`` are terminal. Every transition is written as a
conditional UPDATE on the status the actor expects, so two actors working
from the same stale read cannot both win: the second one gets
``InvalidTransition`` and the stored order is left untouched.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.client_model import Client
from models.order_model import Order
from models.product_model import Product
from schemas.orders import OrderItemIn, OrderStatus
from schemas.users import Role
from services.errors import (
    InvalidTransition, NotFound, PersistenceFailure, ValidationError, WorkflowError,
)
from services.session_context import SessionContext, require_role

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Transition:
    source: OrderStatus
    target: OrderStatus
    actor: Role


TRANSITIONS: Dict[str, Transition] = {
    "approve": Transition(OrderStatus.PENDING, OrderStatus.APPROVED, Role.APPROVER),
    "reject": Transition(OrderStatus.PENDING, OrderStatus.REJECTED, Role.APPROVER),
    "complete": Transition(OrderStatus.APPROVED, OrderStatus.COMPLETED, Role.PURCHASING),
}


def allowed_actions(status: OrderStatus, role: Role) -> List[str]:
    """Transitions ``role`` may fire on an order in ``status``."""
    return [name for name, t in TRANSITIONS.items() if t.source == status and t.actor == role]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class OrderWorkflow:
    """Creates orders and moves them through their lifecycle."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _store(self, action: str):
        try:
            yield
        except WorkflowError:
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Store failure during {action}: {e}")
            raise PersistenceFailure("Erro de comunicação com o banco de dados. Tente novamente.") from e

    # ---------- creation ----------

    def create_order(
        self,
        ctx: SessionContext,
        client_id: Optional[str],
        items: Iterable[OrderItemIn],
        note: Optional[str] = None,
    ) -> Order:
        require_role(ctx, Role.SUPERVISOR)

        if not client_id:
            raise ValidationError("Selecione um cliente.")
        items = list(items)
        if not items:
            raise ValidationError("Adicione produtos ao carrinho.")

        seen = set()
        for item in items:
            if not _is_int(item.quantity) or item.quantity <= 0:
                raise ValidationError(f"Quantidade inválida para o produto {item.product_id}.")
            if item.product_id in seen:
                raise ValidationError(f"Produto {item.product_id} repetido no pedido.")
            seen.add(item.product_id)

        with self._store("create_order"):
            client = self.db.get(Client, client_id)
            # sectors of other supervisors are reported as missing, not forbidden
            if client is None or client.supervisor_id != ctx.uid:
                raise NotFound("Cliente não encontrado.")
            if not client.active:
                raise ValidationError("Cliente inativo.")

            lines = []
            for item in items:
                product = self.db.get(Product, item.product_id)
                if product is None:
                    raise NotFound(f"Produto {item.product_id} não encontrado.")
                if not product.active:
                    raise ValidationError(f"Produto {product.name} está inativo.")
                lines.append({
                    "productId": product.id,
                    "name": product.name,
                    "quantity": item.quantity,
                })

            order = Order(
                supervisor_id=ctx.uid,
                supervisor_name=ctx.display_name,
                client_id=client.id,
                client_name=client.sector_name,
                status=OrderStatus.PENDING.value,
                products=lines,
                note=note or None,
                created_at=_now(),
            )
            self.db.add(order)
            self.db.commit()
            self.db.refresh(order)

        logger.info(f"Order {order.id} created by {ctx.uid} for client {client_id} ({len(lines)} items)")
        return order

    # ---------- transitions ----------

    def approve(
        self,
        ctx: SessionContext,
        order_id: str,
        approved_quantities: Optional[Dict[str, int]] = None,
    ) -> Order:
        transition = TRANSITIONS["approve"]
        require_role(ctx, transition.actor)
        with self._store("approve"):
            order = self._load(order_id)
            self._expect(order, transition)
            products = apply_approved_quantities(order.products, approved_quantities or {})
            return self._transition(
                ctx, order_id, transition,
                products=products,
                approved_at=_now(),
            )

    def reject(self, ctx: SessionContext, order_id: str, note: Optional[str] = None) -> Order:
        transition = TRANSITIONS["reject"]
        require_role(ctx, transition.actor)
        with self._store("reject"):
            order = self._load(order_id)
            self._expect(order, transition)
            values = {}
            if note:
                values["note"] = f"{order.note}\n{note}" if order.note else note
            return self._transition(ctx, order_id, transition, **values)

    def complete(self, ctx: SessionContext, order_id: str) -> Order:
        transition = TRANSITIONS["complete"]
        require_role(ctx, transition.actor)
        with self._store("complete"):
            order = self._load(order_id)
            self._expect(order, transition)
            return self._transition(ctx, order_id, transition, completed_at=_now())

    # ---------- helpers ----------

    def _load(self, order_id: str) -> Order:
        order = self.db.get(Order, order_id)
        if order is None:
            raise NotFound("Pedido não encontrado.")
        return order

    def _expect(self, order: Order, transition: Transition) -> None:
        if order.status != transition.source.value:
            logger.warning(
                f"Refused {transition.source.value}->{transition.target.value} on order {order.id}: "
                f"status is {order.status}"
            )
            raise InvalidTransition(
                "Este pedido já foi processado por outra pessoa.",
                current_status=order.status,
            )

    def _transition(self, ctx: SessionContext, order_id: str, transition: Transition, **values) -> Order:
        stmt = (
            update(Order)
            .where(Order.id == order_id, Order.status == transition.source.value)
            .values(status=transition.target.value, **values)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        if result.rowcount != 1:
            self.db.rollback()
            current = self.db.execute(
                select(Order.status).where(Order.id == order_id)
            ).scalar_one_or_none()
            if current is None:
                raise NotFound("Pedido não encontrado.")
            logger.warning(
                f"Lost race on order {order_id}: expected {transition.source.value}, found {current}"
            )
            raise InvalidTransition(
                "Este pedido já foi processado por outra pessoa.",
                current_status=current,
            )
        self.db.commit()
        logger.info(f"Order {order_id} {transition.source.value} -> {transition.target.value} by {ctx.uid}")
        # commit expired the identity map, so this reloads the stored row
        return self._load(order_id)


def apply_approved_quantities(items: List[dict], approved: Dict[str, int]) -> List[dict]:
    """Return a copy of ``items`` with ``approvedQuantity`` filled in.

    Items missing from ``approved`` are approved in full. Quantities must be
    integers between 0 and the requested quantity.
    """
    by_product = {item["productId"]: item for item in items}
    unknown = set(approved) - set(by_product)
    if unknown:
        raise ValidationError(f"Produtos fora do pedido: {', '.join(sorted(unknown))}.")

    out = []
    for item in items:
        requested = item["quantity"]
        if item["productId"] in approved:
            qty = approved[item["productId"]]
        elif item.get("approvedQuantity") is not None:
            qty = item["approvedQuantity"]
        else:
            qty = requested
        if not _is_int(qty) or qty < 0:
            raise ValidationError(f"Quantidade aprovada inválida para {item['name']}.")
        if qty > requested:
            raise ValidationError(
                f"Quantidade aprovada para {item['name']} ({qty}) maior que a solicitada ({requested})."
            )
        out.append({**item, "approvedQuantity": qty})
    return out
