from sqlmodel import SQLModel, Field , Relationship
from typing import Optional , TYPE_CHECKING
from enum import Enum

if TYPE_CHECKING:
    from app.models.order import Order


class OrderItemStatus(str, Enum):
    PLACED = "PLACED"
    CANCEL_REQUESTED = "CANCEL_REQUESTED"
    APPROVED = "APPROVED"
    CANCELLED = "CANCELLED"


class OrderItem(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="order.id", index=True)
    product_id: Optional[int] = Field(default=None, foreign_key="product.id")
    variant_id: Optional[int] = Field(default=None, foreign_key="variant.id")

    title: str
    price: float      # per unit, at placement time
    quantity: int
    total: float

    status: str = Field(default=OrderItemStatus.PLACED.value)
    moderation_note: Optional[str] = None

    order: Optional["Order"] = Relationship(back_populates="items")
