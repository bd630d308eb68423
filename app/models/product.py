from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime


class Product(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    sku: Optional[str] = Field(default=None, index=True)
    description: Optional[str] = None

    brand_id: Optional[int] = Field(default=None, foreign_key="brand.id")
    category_id: Optional[int] = Field(default=None, foreign_key="category.id", index=True)
    color_id: Optional[int] = Field(default=None, foreign_key="color.id")
    size_id: Optional[int] = Field(default=None, foreign_key="size.id")

    #Shop Details
    mrp: float
    selling_price: float
    stock: Optional[int] = None   # None = not tracked
    status: bool = Field(default=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def in_stock(self) -> bool:
         return self.stock is None or self.stock > 0


class Variant(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    product_id: int = Field(foreign_key="product.id", index=True)
    sku: Optional[str] = None

    # None falls back to the product value
    mrp: Optional[float] = None
    selling_price: Optional[float] = None
    stock: Optional[int] = None

    color_id: Optional[int] = Field(default=None, foreign_key="color.id")
    size_id: Optional[int] = Field(default=None, foreign_key="size.id")

    created_at: datetime = Field(default_factory=datetime.utcnow)


class ProductImage(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    product_id: Optional[int] = Field(default=None, foreign_key="product.id", index=True)
    variant_id: Optional[int] = Field(default=None, foreign_key="variant.id", index=True)
    url: str
    alt: Optional[str] = None
    is_main: bool = Field(default=False)


class ProductDetails(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    product_id: int = Field(foreign_key="product.id", unique=True)

    sla: Optional[int] = None                   # business days
    delivery_charges: Optional[float] = None    # None = ignored, 0 = free, >0 = paid
    warranty: Optional[str] = None
