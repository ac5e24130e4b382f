# backend/routers/images_gateway_router.py
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from routers.deps import get_session_context
from schemas.products import ImageUploadResponse
from schemas.users import Role
from services.cloudinary_service import get_cloudinary_service
from services.session_context import SessionContext, require_role

router = APIRouter(prefix="/images", tags=["images-gateway"])


def _service():
    service = get_cloudinary_service()
    if service is None:
        raise HTTPException(status_code=503, detail="Cloudinary service not available")
    return service


@router.post("/products/upload", response_model=ImageUploadResponse)
def upload_product_image(
    product_id: Optional[str] = Form(None, description="id do produto (opcional)"),
    file: UploadFile = File(..., description="arquivo de imagem"),
    ctx: SessionContext = Depends(get_session_context),
):
    require_role(ctx, Role.ADMIN)
    upload = _service().upload_product_image(file.file.read(), file.filename, product_id=product_id)
    return ImageUploadResponse(success=True, message="Imagem enviada com sucesso", image_data=upload)


@router.delete("/products/{public_id:path}", response_model=ImageUploadResponse)
def delete_product_image(
    public_id: str,
    ctx: SessionContext = Depends(get_session_context),
):
    require_role(ctx, Role.ADMIN)
    if not _service().delete_image(public_id):
        raise HTTPException(status_code=400, detail="Não foi possível excluir a imagem")
    return ImageUploadResponse(success=True, message="Imagem excluída com sucesso")
