# backend/routers/clients_router.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database.session import get_db
from models.client_model import Client
from models.user_model import User
from queries.catalog_queries import ClientQueries
from routers.deps import apply_changes, get_session_context
from schemas.clients import ClientCreate, ClientOut, ClientUpdate
from schemas.users import Role
from services.errors import ValidationError
from services.session_context import SessionContext, require_role

router = APIRouter(prefix="/clients", tags=["clients"])


def _supervisor_name(db: Session, supervisor_id: Optional[str]) -> Optional[str]:
    """Denormalised name of the owning supervisor; None when the sector is unassigned."""
    if not supervisor_id:
        return None
    u = db.get(User, supervisor_id)
    if u is None:
        raise ValidationError("Supervisor não encontrado.")
    try:
        role = Role.parse(u.role)
    except ValueError:
        role = None
    if role != Role.SUPERVISOR:
        raise ValidationError("O responsável pelo setor precisa ser um supervisor.")
    return u.display_name or u.email


@router.get("/", response_model=List[ClientOut])
def list_clients(
    search: Optional[str] = Query(default=None),
    status: Optional[str] = Query(default=None, pattern="^(active|inactive|all)$"),
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    return ClientQueries(db).list_clients(ctx, search_term=search, status=status)


@router.get("/{client_id}", response_model=ClientOut)
def get_client(
    client_id: str,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    return ClientQueries(db).get_client(ctx, client_id)


@router.post("/", response_model=ClientOut, status_code=201)
def create_client(
    body: ClientCreate,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    require_role(ctx, Role.ADMIN)
    data = body.model_dump()
    data["supervisor_id"] = data.get("supervisor_id") or None
    c = Client(**data, supervisor_name=_supervisor_name(db, data["supervisor_id"]))
    db.add(c)
    db.commit()
    db.refresh(c)
    return c


@router.put("/{client_id}", response_model=ClientOut)
def update_client(
    client_id: str,
    body: ClientUpdate,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    require_role(ctx, Role.ADMIN)
    c = ClientQueries(db).get_client(ctx, client_id)

    # only fields that came in the request
    changes = body.model_dump(exclude_unset=True)
    if "supervisor_id" in changes:
        changes["supervisor_id"] = changes["supervisor_id"] or None
        changes["supervisor_name"] = _supervisor_name(db, changes["supervisor_id"])
    apply_changes(c, changes)
    db.commit()
    db.refresh(c)
    return c


@router.put("/{client_id}/toggle-active", response_model=ClientOut)
def toggle_client_active(
    client_id: str,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    require_role(ctx, Role.ADMIN)
    c = ClientQueries(db).get_client(ctx, client_id)
    c.active = not c.active
    db.commit()
    db.refresh(c)
    return c


@router.delete("/{client_id}", status_code=204)
def delete_client(
    client_id: str,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    # orders keep their client name snapshot, so nothing else is touched
    require_role(ctx, Role.ADMIN)
    c = ClientQueries(db).get_client(ctx, client_id)
    db.delete(c)
    db.commit()
