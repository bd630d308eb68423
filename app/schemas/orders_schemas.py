from pydantic import BaseModel
from typing import Optional


class PlaceOrderRequest(BaseModel):
    address_id: int
    note: Optional[str] = None


class OrderUpdateRequest(BaseModel):
    status: Optional[str] = None
    payment_status: Optional[str] = None
    note: Optional[str] = None


class RequestCancelItem(BaseModel):
    order_id: int
    note: Optional[str] = None


class UpdateOrderItem(BaseModel):
    status: str   # APPROVED | CANCELLED
    order_id: int
    note: Optional[str] = None
