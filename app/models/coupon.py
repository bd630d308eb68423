from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum


class PriceType(str, Enum):
    PERCENTAGE = "PERCENTAGE"
    FIXED = "FIXED"


class AppliedCouponState(str, Enum):
    PENDING = "PENDING"
    CONSUMED = "CONSUMED"


class Coupon(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    code: str = Field(index=True, unique=True)
    price_type: str = Field(default=PriceType.PERCENTAGE.value)
    value: float
    min_order_amount: float = 0
    from_date: Optional[datetime] = None
    to_date: Optional[datetime] = None
    status: bool = Field(default=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)


class AppliedCoupon(SQLModel, table=True):
    """A coupon attached to a user's cart, consumed once an order is placed."""

    __tablename__ = "applied_coupon"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    coupon_id: int = Field(foreign_key="coupon.id")
    order_id: Optional[int] = Field(default=None, foreign_key="order.id")
    state: str = Field(default=AppliedCouponState.PENDING.value, index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
