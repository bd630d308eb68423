from typing import Optional
from pydantic import BaseModel


class BuyNowRequest(BaseModel):
    product_id: int
    variant_id: Optional[int] = None
    quantity: int = 1


class BuyNowUpdateRequest(BaseModel):
    quantity: int
