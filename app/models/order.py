from sqlmodel import SQLModel, Field, Relationship
from typing import List, Optional
from datetime import datetime
from enum import Enum

from app.models.order_item import OrderItem


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


ORDER_FINAL_STATES = {OrderStatus.DELIVERED.value, OrderStatus.CANCELLED.value}


class Order(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    address_id: int = Field(foreign_key="address.id")
    coupon_id: Optional[int] = Field(default=None, foreign_key="coupon.id")

    subtotal: float
    coupon_discount: float = 0
    platform_fee: float = 0
    shipping_fee: float = 0
    gst: float = 0
    total_amount: float

    payment_method: str = Field(default="COD")
    status: str = Field(default=OrderStatus.PENDING.value, index=True)
    note: Optional[str] = None
    order_from: str = Field(default="web")

    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    items: List["OrderItem"] = Relationship(back_populates="order")
