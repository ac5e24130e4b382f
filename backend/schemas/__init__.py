# backend/schemas/__init__.py

# users
from .users import Role, UserOut, SessionOut, RoleUpdate, UserUpdate

# clients
from .clients import ClientCreate, ClientUpdate, ClientOut

# products
from .products import ProductCreate, ProductUpdate, ProductOut, ImageUploadResponse

# orders + cart
from .orders import (
    OrderStatus, OrderItem, OrderItemIn, OrderCreate, ApprovalPayload,
    RejectionPayload, OrderResponse, CartItemOut, CartOut, CartQuantityUpdate, CartSubmit,
)

__all__ = [
    # users
    "Role", "UserOut", "SessionOut", "RoleUpdate", "UserUpdate",
    # clients
    "ClientCreate", "ClientUpdate", "ClientOut",
    # products
    "ProductCreate", "ProductUpdate", "ProductOut", "ImageUploadResponse",
    # orders + cart
    "OrderStatus", "OrderItem", "OrderItemIn", "OrderCreate", "ApprovalPayload",
    "RejectionPayload", "OrderResponse", "CartItemOut", "CartOut", "CartQuantityUpdate", "CartSubmit",
]
