# backend/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from config import settings
from database.session import engine, init_db
from gateway.gateway_router import gateway_router
from services.cart_service import CartStore
from services.cloudinary_service import get_cloudinary_service
from services.errors import PersistenceFailure, WorkflowError

logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL, logging.INFO), format=settings.LOG_FORMAT)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 Purchase order API is starting…")
    try:
        init_db()
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("✅ Database connected")
    except SQLAlchemyError as e:
        logger.error(f"❌ Database connection failed: {e}")

    if get_cloudinary_service() is not None:
        logger.info("☁️ Cloudinary configured")
    else:
        logger.warning("⚠️ Cloudinary not configured, image endpoints will answer 503")

    yield
    logger.info("🛑 Shutting down…")


def _error_body(exc: WorkflowError) -> dict:
    body = {"detail": exc.message, "error": exc.__class__.__name__}
    current = getattr(exc, "current_status", None)
    if current is not None:
        body["current_status"] = current
    return body


def create_app() -> FastAPI:
    app = FastAPI(
        title="Purchase Order Workflow",
        description="Pedidos de suprimentos: supervisor → aprovador → compras",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.cart_store = CartStore()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(WorkflowError)
    async def workflow_error_handler(request: Request, exc: WorkflowError):
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc))

    @app.exception_handler(SQLAlchemyError)
    async def store_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error(f"Store failure on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=PersistenceFailure.status_code,
            content=_error_body(PersistenceFailure("Erro de comunicação com o banco de dados. Tente novamente.")),
        )

    @app.get("/health")
    def health():
        status = {"status": "healthy", "service": "purchase-order-api", "version": VERSION}
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            status["database"] = "connected"
        except SQLAlchemyError as e:
            status["database"] = f"error: {e.__class__.__name__}"
            status["status"] = "degraded"
        status["cloudinary"] = "configured" if get_cloudinary_service() is not None else "not configured"
        return status

    @app.get("/")
    def root():
        return {
            "message": "Purchase Order Workflow API",
            "version": VERSION,
            "gateway_base": "/api/v1/gateway",
            "docs": "/docs",
        }

    app.include_router(gateway_router, prefix="/api/v1")

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.RELOAD,
        log_level=settings.LOG_LEVEL.lower(),
    )
