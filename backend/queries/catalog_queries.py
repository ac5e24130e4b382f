# backend/queries/catalog_queries.py
from typing import List, Optional

from sqlalchemy import or_, true, false
from sqlalchemy.orm import Session

from models.client_model import Client
from models.product_model import Product
from schemas.users import Role
from services.errors import AuthorizationDenied, NotFound
from services.session_context import SessionContext


def _status_filter(column, status: Optional[str]):
    if status == "active":
        return column == true()
    if status == "inactive":
        return column == false()
    return None


class ClientQueries:
    def __init__(self, db: Session):
        self.db = db

    def list_clients(
        self,
        ctx: SessionContext,
        search_term: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[Client]:
        if ctx.role == Role.SUPERVISOR:
            # only own, active sectors
            return (
                self.db.query(Client)
                .filter(Client.supervisor_id == ctx.uid, Client.active == true())
                .order_by(Client.sector_name)
                .all()
            )
        if ctx.role != Role.ADMIN:
            raise AuthorizationDenied("Sem acesso à lista de clientes.")

        q = self.db.query(Client)
        if search_term:
            like = f"%{search_term.strip()}%"
            q = q.filter(or_(
                Client.sector_name.ilike(like),
                Client.client_code.ilike(like),
                Client.supervisor_name.ilike(like),
                Client.email.ilike(like),
                Client.phone.ilike(like),
            ))
        cond = _status_filter(Client.active, status)
        if cond is not None:
            q = q.filter(cond)
        return q.order_by(Client.sector_name).all()

    def get_client(self, ctx: SessionContext, client_id: str) -> Client:
        c = self.db.get(Client, client_id)
        if c is None:
            raise NotFound("Cliente não encontrado.")
        if ctx.role == Role.ADMIN:
            return c
        if ctx.role == Role.SUPERVISOR and c.supervisor_id == ctx.uid and c.active:
            return c
        raise NotFound("Cliente não encontrado.")


class ProductQueries:
    def __init__(self, db: Session):
        self.db = db

    def list_products(
        self,
        ctx: SessionContext,
        search_term: Optional[str] = None,
        category: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[Product]:
        q = self.db.query(Product)
        if ctx.role != Role.ADMIN:
            q = q.filter(Product.active == true())
        else:
            cond = _status_filter(Product.active, status)
            if cond is not None:
                q = q.filter(cond)
        if search_term:
            like = f"%{search_term.strip()}%"
            q = q.filter(or_(
                Product.name.ilike(like),
                Product.product_code.ilike(like),
                Product.description.ilike(like),
            ))
        if category:
            q = q.filter(Product.category == category)
        return q.order_by(Product.name).all()

    def get_product(self, ctx: SessionContext, product_id: str) -> Product:
        p = self.db.get(Product, product_id)
        if p is None or (not p.active and ctx.role != Role.ADMIN):
            raise NotFound("Produto não encontrado.")
        return p

    def categories(self) -> List[str]:
        rows = self.db.query(Product.category).filter(Product.category.isnot(None)).distinct()
        return sorted(c for (c,) in rows if c)
