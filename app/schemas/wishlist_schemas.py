from pydantic import BaseModel
from typing import Optional


class WishlistAddRequest(BaseModel):
    product_id: int
    variant_id: Optional[int] = None
    quantity: int = 1
    size: Optional[str] = None
