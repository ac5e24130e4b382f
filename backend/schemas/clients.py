# backend/schemas/clients.py
from typing import Optional, NewType

from pydantic import BaseModel, constr

SectorName = NewType("SectorName", constr(strip_whitespace=True, min_length=1, max_length=255))


class ClientCreate(BaseModel):
    sector_name: SectorName
    client_code: Optional[str] = None
    supervisor_id: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    neighborhood: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    active: bool = True


class ClientUpdate(BaseModel):
    sector_name: Optional[SectorName] = None
    client_code: Optional[str] = None
    supervisor_id: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    neighborhood: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    active: Optional[bool] = None


class ClientOut(BaseModel):
    id: str
    sector_name: str
    client_code: Optional[str] = None
    supervisor_id: Optional[str] = None
    supervisor_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    neighborhood: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    active: bool

    model_config = {"from_attributes": True}
