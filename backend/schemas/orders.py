# backend/schemas/orders.py
from enum import Enum
from typing import Dict, List, Optional
from datetime import datetime

from pydantic import BaseModel, Field


class OrderStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"


# line item as stored inside the order document
class OrderItem(BaseModel):
    productId: str
    name: str
    quantity: int = Field(gt=0)
    approvedQuantity: Optional[int] = Field(default=None, ge=0)


# no name field: line names are snapshotted from the catalog
class OrderItemIn(BaseModel):
    product_id: str
    quantity: int


class OrderCreate(BaseModel):
    client_id: str
    items: List[OrderItemIn]
    note: Optional[str] = None


class ApprovalPayload(BaseModel):
    # productId -> approved quantity; products left out are approved in full
    approved_quantities: Dict[str, int] = Field(default_factory=dict)


class RejectionPayload(BaseModel):
    note: Optional[str] = None


class OrderResponse(BaseModel):
    id: str
    supervisor_id: str
    supervisor_name: str
    client_id: str
    client_name: str
    status: OrderStatus
    products: List[OrderItem] = []
    note: Optional[str] = None
    created_at: datetime
    approved_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    # workflow actions the caller may take on this order
    allowed_actions: List[str] = []

    model_config = {"from_attributes": True}


class CartItemOut(BaseModel):
    productId: str
    name: str
    quantity: int


class CartOut(BaseModel):
    items: List[CartItemOut] = []
    total_quantity: int = 0


class CartQuantityUpdate(BaseModel):
    quantity: int


class CartSubmit(BaseModel):
    client_id: Optional[str] = None
    note: Optional[str] = None
