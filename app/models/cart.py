from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

class CartItem(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    product_id: int = Field(foreign_key="product.id")
    variant_id: Optional[int] = Field(default=None, foreign_key="variant.id")
    quantity: int = 1
    created_at: datetime = Field(default_factory=datetime.utcnow)


class BuyNowItem(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", unique=True)
    product_id: int = Field(foreign_key="product.id")
    variant_id: Optional[int] = Field(default=None, foreign_key="variant.id")
    quantity: int = 1
    created_at: datetime = Field(default_factory=datetime.utcnow)
