# backend/services/session_context.py
"""Per-request session context.

The identity provider only knows who the caller is (uid + email). The role
comes from the ``users`` collection and is looked up once, when the
context is built; afterwards the context is passed explicitly to every
service call and never mutated.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.user_model import User
from schemas.users import Role
from services.errors import AuthorizationDenied, PersistenceFailure

logger = logging.getLogger(__name__)

DEFAULT_ROLE = Role.SUPERVISOR


@dataclass(frozen=True)
class SessionContext:
    uid: str
    email: Optional[str]
    display_name: str
    role: Role

    @property
    def dashboard(self) -> str:
        return f"/dashboard/{self.role.value}"

    def has_role(self, *roles: Role) -> bool:
        return self.role in roles


def display_name_from_email(email: Optional[str]) -> str:
    if not email:
        return "Usuário"
    return email.split("@")[0] or email


def resolve_session(db: Session, uid: str, email: Optional[str] = None) -> SessionContext:
    """Build the context for ``uid``, creating a supervisor profile on first sight."""
    try:
        user = db.get(User, uid)
        if user is None:
            user = User(
                id=uid,
                email=email,
                display_name=display_name_from_email(email),
                role=DEFAULT_ROLE.value,
            )
            db.add(user)
            db.commit()
            logger.info(f"Created default {DEFAULT_ROLE.value} profile for user {uid}")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Could not load profile for user {uid}: {e}")
        raise PersistenceFailure("Erro ao carregar o perfil do usuário") from e

    try:
        role = Role.parse(user.role)
    except ValueError:
        logger.warning(f"User {uid} has unknown role {user.role!r}")
        raise AuthorizationDenied("Função de usuário desconhecida") from None

    return SessionContext(
        uid=user.id,
        email=user.email or email,
        display_name=user.display_name or display_name_from_email(email),
        role=role,
    )


def require_role(ctx: SessionContext, *roles: Role) -> None:
    if not ctx.has_role(*roles):
        allowed = ", ".join(r.value for r in roles)
        raise AuthorizationDenied(f"Ação restrita a: {allowed}")
