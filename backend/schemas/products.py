# backend/schemas/products.py
from typing import Optional, NewType

from pydantic import BaseModel, Field, constr

NameStr = NewType("NameStr", constr(strip_whitespace=True, min_length=1, max_length=255))


class ProductCreate(BaseModel):
    name: NameStr
    product_code: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    unit: str = "UN"
    stock: int = Field(default=0, ge=0)
    price: float = Field(default=0.0, ge=0)
    is_contracted: bool = False
    image_url: Optional[str] = None
    active: bool = True


class ProductUpdate(BaseModel):
    name: Optional[NameStr] = None
    product_code: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    unit: Optional[str] = None
    stock: Optional[int] = Field(default=None, ge=0)
    price: Optional[float] = Field(default=None, ge=0)
    is_contracted: Optional[bool] = None
    image_url: Optional[str] = None
    active: Optional[bool] = None


class ProductOut(BaseModel):
    id: str
    name: str
    product_code: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    unit: str
    stock: int
    price: float
    is_contracted: bool
    image_url: Optional[str] = None
    active: bool

    model_config = {"from_attributes": True}


class ImageUploadResponse(BaseModel):
    success: bool
    message: str
    image_data: Optional[dict] = None
