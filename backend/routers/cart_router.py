# backend/routers/cart_router.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.session import get_db
from queries.catalog_queries import ProductQueries
from routers.deps import get_cart_store, get_session_context
from schemas.orders import CartItemOut, CartOut, CartQuantityUpdate, CartSubmit, OrderResponse
from schemas.users import Role
from services.cart_service import Cart, CartStore
from services.session_context import SessionContext, require_role

router = APIRouter(prefix="/cart", tags=["cart"])


def _supervisor_cart(ctx: SessionContext, store: CartStore) -> Cart:
    require_role(ctx, Role.SUPERVISOR)
    return store.get(ctx.uid)


def _to_out(cart: Cart) -> CartOut:
    return CartOut(
        items=[CartItemOut(productId=i.product_id, name=i.name, quantity=i.quantity) for i in cart.items()],
        total_quantity=cart.total_quantity,
    )


@router.get("/", response_model=CartOut)
def get_cart(
    ctx: SessionContext = Depends(get_session_context),
    store: CartStore = Depends(get_cart_store),
):
    return _to_out(_supervisor_cart(ctx, store))


@router.post("/items/{product_id}", response_model=CartOut)
def add_to_cart(
    product_id: str,
    ctx: SessionContext = Depends(get_session_context),
    store: CartStore = Depends(get_cart_store),
    db: Session = Depends(get_db),
):
    cart = _supervisor_cart(ctx, store)
    cart.add(ProductQueries(db).get_product(ctx, product_id))
    return _to_out(cart)


@router.put("/items/{product_id}", response_model=CartOut)
def set_cart_quantity(
    product_id: str,
    body: CartQuantityUpdate,
    ctx: SessionContext = Depends(get_session_context),
    store: CartStore = Depends(get_cart_store),
):
    cart = _supervisor_cart(ctx, store)
    cart.set_quantity(product_id, body.quantity)
    return _to_out(cart)


@router.delete("/items/{product_id}", response_model=CartOut)
def remove_from_cart(
    product_id: str,
    ctx: SessionContext = Depends(get_session_context),
    store: CartStore = Depends(get_cart_store),
):
    cart = _supervisor_cart(ctx, store)
    cart.remove(product_id)
    return _to_out(cart)


@router.delete("/", response_model=CartOut)
def clear_cart(
    ctx: SessionContext = Depends(get_session_context),
    store: CartStore = Depends(get_cart_store),
):
    cart = _supervisor_cart(ctx, store)
    cart.clear()
    return _to_out(cart)


@router.post("/submit", response_model=OrderResponse, status_code=201)
def submit_cart(
    body: CartSubmit,
    ctx: SessionContext = Depends(get_session_context),
    store: CartStore = Depends(get_cart_store),
    db: Session = Depends(get_db),
):
    cart = _supervisor_cart(ctx, store)
    order = cart.submit(db, ctx, body.client_id, note=body.note)
    return OrderResponse.model_validate(order)
