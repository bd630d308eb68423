from typing import List, Optional
from pydantic import BaseModel


class CartAddRequest(BaseModel):
    product_id: int
    variant_id: Optional[int] = None
    quantity: int = 1


class CartUpdateRequest(BaseModel):
    cart_id: int
    quantity: int


class CartSyncItem(BaseModel):
    product_id: int
    variant_id: Optional[int] = None
    quantity: int = 1


class CartSyncRequest(BaseModel):
    items: List[CartSyncItem]
