# backend/gateway/gateway_router.py
from fastapi import APIRouter

# business routers, all exposed under /gateway/*
from routers.users_router import router as users_router
from routers.clients_router import router as clients_router
from routers.products_router import router as products_router
from routers.cart_router import router as cart_router
from routers.orders_router import router as orders_router
from routers.admin_router import router as admin_router

# external services
from routers.images_gateway_router import router as images_gateway_router

gateway_router = APIRouter(prefix="/gateway", tags=["gateway"])

gateway_router.include_router(users_router)      # /gateway/users/...
gateway_router.include_router(clients_router)    # /gateway/clients/...
gateway_router.include_router(products_router)   # /gateway/products/...
gateway_router.include_router(cart_router)       # /gateway/cart/...
gateway_router.include_router(orders_router)     # /gateway/orders/...
gateway_router.include_router(admin_router)      # /gateway/admin/...

gateway_router.include_router(images_gateway_router)  # /gateway/images/...
