# backend/routers/products_router.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session

from database.session import get_db
from models.product_model import Product
from queries.catalog_queries import ProductQueries
from routers.deps import apply_changes, get_session_context
from schemas.products import ProductCreate, ProductOut, ProductUpdate
from schemas.users import Role
from services.cloudinary_service import (
    CloudinaryService, get_cloudinary_service, public_id_from_url,
)
from services.session_context import SessionContext, require_role

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["products"])


def _blob_store() -> CloudinaryService:
    service = get_cloudinary_service()
    if service is None:
        raise HTTPException(status_code=503, detail="Cloudinary not available")
    return service


def _drop_image(url: Optional[str]) -> None:
    public_id = public_id_from_url(url)
    service = get_cloudinary_service() if public_id else None
    if service is None:
        return
    try:
        service.delete_image(public_id)
    except Exception as e:
        # the product change goes through even if the old image stays behind
        logger.warning(f"Could not delete image {public_id}: {e}")


@router.get("/", response_model=List[ProductOut])
def list_products(
    search: Optional[str] = Query(default=None),
    category: Optional[str] = Query(default=None),
    status: Optional[str] = Query(default=None, pattern="^(active|inactive|all)$"),
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    return ProductQueries(db).list_products(ctx, search_term=search, category=category, status=status)


@router.get("/categories", response_model=List[str])
def list_categories(
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    return ProductQueries(db).categories()


@router.get("/{product_id}", response_model=ProductOut)
def get_product(
    product_id: str,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    return ProductQueries(db).get_product(ctx, product_id)


@router.post("/", response_model=ProductOut, status_code=201)
def create_product(
    body: ProductCreate,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    require_role(ctx, Role.ADMIN)
    p = Product(**body.model_dump())
    db.add(p)
    db.commit()
    db.refresh(p)
    return p


@router.post("/with-image", response_model=ProductOut, status_code=201)
def create_product_with_image(
    name: str = Form(...),
    unit: str = Form("UN"),
    stock: int = Form(0, ge=0),
    price: float = Form(0.0, ge=0),
    category: Optional[str] = Form(None),
    product_code: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    """Create a product and upload its image in the same request."""
    require_role(ctx, Role.ADMIN)
    image_url = None
    if image is not None:
        upload = _blob_store().upload_product_image(image.file.read(), image.filename)
        image_url = upload["url"]

    p = Product(
        name=name,
        unit=unit,
        stock=stock,
        price=price,
        category=category,
        product_code=product_code,
        description=description,
        image_url=image_url,
        active=True,
    )
    db.add(p)
    db.commit()
    db.refresh(p)
    return p


@router.put("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: str,
    body: ProductUpdate,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    require_role(ctx, Role.ADMIN)
    p = ProductQueries(db).get_product(ctx, product_id)
    apply_changes(p, body.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(p)
    return p


@router.put("/{product_id}/image", response_model=ProductOut)
def update_product_image(
    product_id: str,
    image: UploadFile = File(...),
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    require_role(ctx, Role.ADMIN)
    p = ProductQueries(db).get_product(ctx, product_id)
    upload = _blob_store().upload_product_image(image.file.read(), image.filename, product_id=p.id)
    old_url = p.image_url
    p.image_url = upload["url"]
    db.commit()
    db.refresh(p)
    _drop_image(old_url)
    return p


@router.delete("/{product_id}/image", response_model=ProductOut)
def delete_product_image(
    product_id: str,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    require_role(ctx, Role.ADMIN)
    p = ProductQueries(db).get_product(ctx, product_id)
    old_url = p.image_url
    p.image_url = None
    db.commit()
    db.refresh(p)
    _drop_image(old_url)
    return p


@router.put("/{product_id}/toggle-active", response_model=ProductOut)
def toggle_product_active(
    product_id: str,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    require_role(ctx, Role.ADMIN)
    p = ProductQueries(db).get_product(ctx, product_id)
    p.active = not p.active
    db.commit()
    db.refresh(p)
    return p


@router.delete("/{product_id}", status_code=204)
def delete_product(
    product_id: str,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    # existing orders keep the product name snapshot
    require_role(ctx, Role.ADMIN)
    p = ProductQueries(db).get_product(ctx, product_id)
    image_url = p.image_url
    db.delete(p)
    db.commit()
    _drop_image(image_url)
