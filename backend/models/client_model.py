# backend/models/client_model.py
import uuid

from sqlalchemy import Column, String, Boolean
from sqlalchemy.types import Unicode

from database.session import Base


class Client(Base):
    """A sector that places orders. Owned by at most one supervisor."""
    __tablename__ = "clients"
    id              = Column(String(36), primary_key=True, default=lambda: uuid.uuid4().hex)
    client_code     = Column(Unicode(50))
    sector_name     = Column(Unicode(255), nullable=False)
    supervisor_id   = Column(String(128), index=True, nullable=True)  # None = unassigned
    supervisor_name = Column(Unicode(255))
    phone           = Column(Unicode(32))
    email           = Column(Unicode(255))
    address         = Column(Unicode(255))
    neighborhood    = Column(Unicode(120))
    city            = Column(Unicode(120))
    state           = Column(Unicode(60))
    zip_code        = Column(Unicode(20))
    active          = Column(Boolean, nullable=False, default=True)
