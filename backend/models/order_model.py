# backend/models/order_model.py
import uuid

from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.types import Unicode, UnicodeText

from database.session import Base


class Order(Base):
    __tablename__ = "orders"
    id              = Column(String(36), primary_key=True, default=lambda: uuid.uuid4().hex)
    supervisor_id   = Column(String(128), index=True, nullable=False)
    supervisor_name = Column(Unicode(255), nullable=False)  # snapshot at creation
    client_id       = Column(String(36), index=True, nullable=False)
    client_name     = Column(Unicode(255), nullable=False)  # snapshot at creation
    status          = Column(String(20), index=True, nullable=False)  # pending / approved / rejected / completed
    # embedded line items: [{"productId", "name", "quantity", "approvedQuantity"?}]
    products        = Column(JSON, nullable=False, default=list)
    note            = Column(UnicodeText, nullable=True)
    created_at      = Column(DateTime(timezone=True), nullable=False, index=True)
    approved_at     = Column(DateTime(timezone=True), nullable=True)
    completed_at    = Column(DateTime(timezone=True), nullable=True)
