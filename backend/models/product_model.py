# backend/models/product_model.py
import uuid

from sqlalchemy import Column, String, Integer, Float, Boolean
from sqlalchemy.types import Unicode, UnicodeText

from database.session import Base


class Product(Base):
    __tablename__ = "products"

    id            = Column(String(36), primary_key=True, default=lambda: uuid.uuid4().hex)
    name          = Column(Unicode(255), nullable=False)
    product_code  = Column(Unicode(64))   # SKU
    description   = Column(UnicodeText)
    category      = Column(Unicode(120), index=True)
    unit          = Column(Unicode(32), nullable=False, default="UN")
    stock         = Column(Integer, nullable=False, default=0)
    price         = Column(Float, nullable=False, default=0.0)
    is_contracted = Column(Boolean, nullable=False, default=False)
    image_url     = Column(Unicode(512), nullable=True)
    active        = Column(Boolean, nullable=False, default=True)
