from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from sqlalchemy import UniqueConstraint


class Wishlist(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("user_id", "product_id", "variant_id", name="uq_wishlist_user_product_variant"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    product_id: int = Field(foreign_key="product.id")
    variant_id: int = Field(default=0)   # 0 = no variant
    quantity: int = 1
    size: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
