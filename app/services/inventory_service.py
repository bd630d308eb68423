import logging
from typing import Iterable, Optional, Tuple

from fastapi import HTTPException
from sqlmodel import Session

from app.models.order_item import OrderItem
from app.models.product import Product, Variant

logger = logging.getLogger(__name__)


def _stock_holder(session: Session, product_id: int, variant_id: Optional[int]):
    """The row whose stock is tracked for a line: the variant when it tracks stock, else the product."""
    if variant_id:
        variant = session.get(Variant, variant_id)
        if variant and variant.stock is not None:
            return variant
    return session.get(Product, product_id)


def reduce_inventory(session: Session, lines: Iterable[Tuple[int, Optional[int], int, str]]):
    """
    Checks and decrements stock for (product_id, variant_id, quantity, title) lines.
    Untracked stock (None) is left alone. Nothing is committed here; the caller
    owns the transaction.
    """
    for product_id, variant_id, quantity, title in lines:
        holder = _stock_holder(session, product_id, variant_id)
        if holder is None or holder.stock is None:
            continue

        if holder.stock < quantity:
            logger.warning(f"Insufficient stock for {title}. Available: {holder.stock}, Requested: {quantity}")
            raise HTTPException(400, f"Insufficient stock for {title}. Available: {holder.stock}")

        holder.stock -= quantity
        session.add(holder)
        logger.info(f"Stock for {title} reduced to {holder.stock}")


def restock_item(session: Session, item: OrderItem):
    """Puts a cancelled item's quantity back. Caller commits."""
    if item.product_id is None:
        return
    holder = _stock_holder(session, item.product_id, item.variant_id)
    if holder is None or holder.stock is None:
        return
    holder.stock += item.quantity
    session.add(holder)

