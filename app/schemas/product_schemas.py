from pydantic import BaseModel, Field
from typing import List, Optional


class ImageIn(BaseModel):
    url: str
    alt: Optional[str] = None
    is_main: bool = False


class ProductCreate(BaseModel):
    title: str
    sku: Optional[str] = None
    description: Optional[str] = None
    brand_id: Optional[int] = None
    category_id: Optional[int] = None
    color_id: Optional[int] = None
    size_id: Optional[int] = None
    mrp: float = Field(ge=0)
    selling_price: float = Field(ge=0)
    stock: Optional[int] = None
    status: bool = True
    images: List[ImageIn] = []


class ProductUpdate(BaseModel):
    title: Optional[str] = None
    sku: Optional[str] = None
    description: Optional[str] = None
    brand_id: Optional[int] = None
    category_id: Optional[int] = None
    color_id: Optional[int] = None
    size_id: Optional[int] = None
    mrp: Optional[float] = Field(default=None, ge=0)
    selling_price: Optional[float] = Field(default=None, ge=0)
    stock: Optional[int] = None
    status: Optional[bool] = None


class VariantCreate(BaseModel):
    sku: Optional[str] = None
    mrp: Optional[float] = Field(default=None, ge=0)
    selling_price: Optional[float] = Field(default=None, ge=0)
    stock: Optional[int] = None
    color_id: Optional[int] = None
    size_id: Optional[int] = None
    images: List[ImageIn] = []


class VariantUpdate(BaseModel):
    sku: Optional[str] = None
    mrp: Optional[float] = Field(default=None, ge=0)
    selling_price: Optional[float] = Field(default=None, ge=0)
    stock: Optional[int] = None
    color_id: Optional[int] = None
    size_id: Optional[int] = None


class ProductDetailsUpsert(BaseModel):
    sla: Optional[int] = Field(default=None, ge=0)
    delivery_charges: Optional[float] = None
    warranty: Optional[str] = None
