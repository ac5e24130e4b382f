# backend/routers/deps.py
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session

from database.session import get_db
from services.cart_service import CartStore
from services.errors import ValidationError
from services.session_context import SessionContext, resolve_session


def get_session_context(
    x_user_id: Optional[str] = Header(default=None),
    x_user_email: Optional[str] = Header(default=None),
    db: Session = Depends(get_db),
) -> SessionContext:
    """Identity comes from the auth provider headers; role from the users collection."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Usuário não autenticado")
    return resolve_session(db, x_user_id.strip(), x_user_email)


def get_cart_store(request: Request) -> CartStore:
    return request.app.state.cart_store


def apply_changes(obj, changes: dict) -> None:
    """Copy a partial update onto ``obj``; an explicit null on a NOT NULL column is refused."""
    columns = obj.__table__.columns
    for field, value in changes.items():
        if value is None and field in columns and not columns[field].nullable:
            raise ValidationError(f"O campo {field} não pode ficar vazio.")
    for field, value in changes.items():
        setattr(obj, field, value)
