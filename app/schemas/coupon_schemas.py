from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from app.models.coupon import PriceType


class CouponCreate(BaseModel):
    code: str
    price_type: PriceType
    value: float = Field(ge=0)
    min_order_amount: float = Field(default=0, ge=0)
    from_date: Optional[datetime] = None
    to_date: Optional[datetime] = None
    status: bool = True


class CouponUpdate(BaseModel):
    code: Optional[str] = None
    price_type: Optional[PriceType] = None
    value: Optional[float] = Field(default=None, ge=0)
    min_order_amount: Optional[float] = Field(default=None, ge=0)
    from_date: Optional[datetime] = None
    to_date: Optional[datetime] = None
    status: Optional[bool] = None


class ApplyCouponRequest(BaseModel):
    code: str
