# backend/models/user_model.py
from sqlalchemy import Column, String
from sqlalchemy.types import Unicode

from database.session import Base


class User(Base):
    __tablename__ = "users"
    id           = Column(String(128), primary_key=True, index=True)  # uid from the identity provider
    email        = Column(Unicode(255), index=True)
    display_name = Column(Unicode(255), nullable=False)
    role         = Column(String(20), nullable=False, default="supervisor")  # admin / supervisor / approver / purchasing
