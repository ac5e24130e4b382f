# backend/routers/users_router.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session

from database.session import get_db
from models.client_model import Client
from models.user_model import User
from routers.deps import get_session_context
from schemas.users import Role, RoleUpdate, SessionOut, UserOut, UserUpdate
from services.errors import NotFound
from services.session_context import SessionContext, require_role

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


def _to_out(u: User) -> UserOut:
    return UserOut(uid=u.id, email=u.email, display_name=u.display_name, role=_parse_or_none(u.role))


@router.get("/me", response_model=SessionOut)
def get_me(ctx: SessionContext = Depends(get_session_context)):
    """Resolved profile of the caller and the dashboard it lands on."""
    return SessionOut(
        uid=ctx.uid,
        email=ctx.email,
        display_name=ctx.display_name,
        role=ctx.role,
        dashboard=ctx.dashboard,
    )


@router.get("/", response_model=List[UserOut])
def list_users(
    search: Optional[str] = Query(default=None),
    role: Optional[Role] = Query(default=None),
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    require_role(ctx, Role.ADMIN)
    q = db.query(User)
    if search:
        like = f"%{search.strip()}%"
        q = q.filter(or_(User.display_name.ilike(like), User.email.ilike(like)))
    users = q.order_by(User.display_name).all()
    if role is not None:
        # stored roles may carry legacy casing, so filter after normalising
        users = [u for u in users if _parse_or_none(u.role) == role]
    return [_to_out(u) for u in users]


def _parse_or_none(value) -> Optional[Role]:
    try:
        return Role.parse(value)
    except ValueError:
        return None


def _load_user(db: Session, uid: str) -> User:
    u = db.get(User, uid)
    if u is None:
        raise NotFound("Usuário não encontrado.")
    return u


@router.put("/{uid}/role", response_model=UserOut)
def change_role(
    uid: str,
    body: RoleUpdate,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    require_role(ctx, Role.ADMIN)
    u = _load_user(db, uid)
    u.role = body.role.value
    db.commit()
    db.refresh(u)
    logger.info(f"Role of user {uid} set to {body.role.value} by {ctx.uid}")
    return _to_out(u)


@router.put("/{uid}", response_model=UserOut)
def update_user(
    uid: str,
    body: UserUpdate,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    require_role(ctx, Role.ADMIN)
    u = _load_user(db, uid)
    if body.display_name is not None:
        u.display_name = body.display_name
        # keep the sector owner label in sync; order snapshots stay as they are
        for c in db.query(Client).filter(Client.supervisor_id == uid):
            c.supervisor_name = body.display_name
    if body.role is not None:
        u.role = body.role.value
    db.commit()
    db.refresh(u)
    return _to_out(u)
