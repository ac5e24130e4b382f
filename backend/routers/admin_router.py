# backend/routers/admin_router.py
from fastapi import APIRouter, Depends
from sqlalchemy import func, true
from sqlalchemy.orm import Session

from database.session import get_db
from models.client_model import Client
from models.order_model import Order
from models.product_model import Product
from models.user_model import User
from queries.order_queries import OrderQueries
from routers.deps import get_session_context
from schemas.users import Role
from services.session_context import SessionContext, require_role

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/stats")
def get_stats(
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    """Counters for the admin dashboard cards."""
    require_role(ctx, Role.ADMIN)
    return {
        "products": db.query(func.count(Product.id)).scalar(),
        "clients": db.query(func.count(Client.id)).scalar(),
        "active_clients": db.query(func.count(Client.id)).filter(Client.active == true()).scalar(),
        "orders": db.query(func.count(Order.id)).scalar(),
        "users": db.query(func.count(User.id)).scalar(),
        "orders_by_status": OrderQueries(db).count_by_status(),
    }
