# backend/schemas/users.py
from enum import Enum
from typing import Optional, NewType

from pydantic import BaseModel, constr

DisplayName = NewType("DisplayName", constr(strip_whitespace=True, min_length=1, max_length=255))


class Role(str, Enum):
    ADMIN = "admin"
    SUPERVISOR = "supervisor"
    APPROVER = "approver"
    PURCHASING = "purchasing"

    @classmethod
    def parse(cls, value) -> "Role":
        """Normalise a stored role ("ADMIN", " Supervisor ") and reject anything unknown."""
        if isinstance(value, Role):
            return value
        if not isinstance(value, str):
            raise ValueError(f"unknown role: {value!r}")
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(f"unknown role: {value!r}") from None


class UserOut(BaseModel):
    uid: str
    email: Optional[str] = None
    display_name: str
    role: Optional[Role] = None  # None for legacy records with an unknown role


class SessionOut(UserOut):
    dashboard: str


class RoleUpdate(BaseModel):
    role: Role


class UserUpdate(BaseModel):
    display_name: Optional[DisplayName] = None
    role: Optional[Role] = None
