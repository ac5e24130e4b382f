# backend/services/cart_service.py
"""
Supervisor cart: a transient, per-user collection of line items that turns
into a pending order on submission.
"""

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass, replace
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from models.order_model import Order
from models.product_model import Product
from schemas.orders import OrderItemIn
from services.errors import NotFound, ValidationError
from services.order_workflow import OrderWorkflow
from services.session_context import SessionContext

logger = logging.getLogger(__name__)


@dataclass
class CartItem:
    product_id: str
    name: str
    quantity: int


class Cart:
    def __init__(self):
        self._items: "OrderedDict[str, CartItem]" = OrderedDict()
        self._lock = threading.RLock()

    def add(self, product: Product) -> CartItem:
        """Add one unit of ``product``; a new line starts at quantity 1."""
        if not product.active:
            raise ValidationError(f"Produto {product.name} está inativo.")
        with self._lock:
            item = self._items.get(product.id)
            if item is None:
                item = CartItem(product_id=product.id, name=product.name, quantity=1)
                self._items[product.id] = item
            else:
                item.quantity += 1
            return item

    def set_quantity(self, product_id: str, quantity: int) -> Optional[CartItem]:
        """Replace the quantity of a line. Zero or below removes the line."""
        with self._lock:
            if product_id not in self._items:
                raise NotFound("Produto não está no carrinho.")
            if quantity <= 0:
                del self._items[product_id]
                return None
            self._items[product_id].quantity = quantity
            return self._items[product_id]

    def remove(self, product_id: str) -> None:
        self.set_quantity(product_id, 0)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def items(self) -> List[CartItem]:
        with self._lock:
            return [replace(i) for i in self._items.values()]

    def get(self, product_id: str) -> Optional[CartItem]:
        return self._items.get(product_id)

    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)

    @property
    def total_quantity(self) -> int:
        with self._lock:
            return sum(i.quantity for i in self._items.values())

    def to_order_items(self) -> List[OrderItemIn]:
        return [OrderItemIn(product_id=i.product_id, quantity=i.quantity) for i in self.items()]

    def _take(self, submitted: List[OrderItemIn]) -> None:
        # only what went into the order leaves the cart; adds made meanwhile stay
        with self._lock:
            for line in submitted:
                item = self._items.get(line.product_id)
                if item is None:
                    continue
                item.quantity -= line.quantity
                if item.quantity <= 0:
                    del self._items[line.product_id]

    def submit(
        self,
        db: Session,
        ctx: SessionContext,
        client_id: Optional[str],
        note: Optional[str] = None,
    ) -> Order:
        """Create a pending order from the cart. The lines leave the cart only if the write succeeds."""
        lines = self.to_order_items()
        if not client_id or not lines:
            raise ValidationError("Selecione um cliente e adicione produtos ao carrinho.")
        order = OrderWorkflow(db).create_order(ctx, client_id, lines, note=note)
        self._take(lines)
        return order


class CartStore:
    """One cart per user, held in process memory."""

    def __init__(self):
        self._carts: Dict[str, Cart] = {}
        self._lock = threading.Lock()

    def get(self, uid: str) -> Cart:
        with self._lock:
            cart = self._carts.get(uid)
            if cart is None:
                cart = self._carts[uid] = Cart()
            return cart
