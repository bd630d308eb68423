"""
Priced views of a user's cart and buy-now slot.

Every read recomputes prices from the catalog; nothing is cached. Lines whose
product has been deleted are dropped from the view (not an error). A missing
variant at read time falls back to the product fields.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from sqlmodel import Session, select

from app.config import settings
from app.models.cart import BuyNowItem, CartItem
from app.models.catalog import Brand, Color, Size
from app.models.coupon import AppliedCoupon, AppliedCouponState, Coupon
from app.models.product import Product, ProductDetails, ProductImage, Variant
from app.services.delivery_eta import EtaConfig, estimate_delivery
from app.services.pricing import (
    DeliveryRow,
    PricingConfig,
    build_price_summary,
    resolve_coupon_discount,
    resolve_display_field,
)

logger = logging.getLogger(__name__)


def format_image_url(file_name: Optional[str]) -> Optional[str]:
    return f"{settings.product_image_path}{file_name}" if file_name else None


@dataclass
class LineRef:
    """Minimal shape shared by CartItem and BuyNowItem rows."""
    id: int
    product_id: int
    variant_id: Optional[int]
    quantity: int


def main_image(session: Session, *, product_id: int = None, variant_id: int = None) -> Optional[ProductImage]:
    query = select(ProductImage).where(ProductImage.is_main == True)  # noqa: E712
    if variant_id is not None:
        query = query.where(ProductImage.variant_id == variant_id)
    else:
        query = query.where(
            ProductImage.product_id == product_id,
            ProductImage.variant_id == None,  # noqa: E711
        )
    return session.exec(query.order_by(ProductImage.id)).first()


def _label(session: Session, model, pk: Optional[int], attr: str) -> Optional[str]:
    if pk is None:
        return None
    row = session.get(model, pk)
    return getattr(row, attr) if row else None


def resolve_line_display(
    session: Session,
    product: Product,
    variant: Optional[Variant],
) -> dict:
    """Display fields for one line, variant first, product as fallback."""
    product_image = main_image(session, product_id=product.id)
    variant_image = main_image(session, variant_id=variant.id) if variant else None

    image_url = resolve_display_field(
        variant_image.url if variant_image else None,
        product_image.url if product_image else None,
    )
    image_alt = resolve_display_field(
        variant_image.alt if variant_image else None,
        product_image.alt if product_image else None,
    )

    return {
        "title": product.title,
        "brand": _label(session, Brand, product.brand_id, "name"),
        "price": resolve_display_field(variant.selling_price if variant else None, product.selling_price),
        "mrp": resolve_display_field(variant.mrp if variant else None, product.mrp),
        "color": resolve_display_field(
            _label(session, Color, variant.color_id, "label") if variant else None,
            _label(session, Color, product.color_id, "label"),
        ),
        "size": resolve_display_field(
            _label(session, Size, variant.size_id, "title") if variant else None,
            _label(session, Size, product.size_id, "title"),
        ),
        "image_url": format_image_url(image_url),
        "image_alt": image_alt or "",
    }


def get_pending_coupon(session: Session, user_id: int) -> Optional[Tuple[AppliedCoupon, Coupon]]:
    return session.exec(
        select(AppliedCoupon, Coupon)
        .join(Coupon, AppliedCoupon.coupon_id == Coupon.id)
        .where(
            AppliedCoupon.user_id == user_id,
            AppliedCoupon.state == AppliedCouponState.PENDING.value,
        )
        .order_by(AppliedCoupon.id.desc())
    ).first()


def price_lines(
    session: Session,
    user_id: int,
    lines: Iterable[LineRef],
    *,
    is_cod: bool = False,
    now: Optional[datetime] = None,
    eta_now: Optional[datetime] = None,
    config: Optional[PricingConfig] = None,
    eta_config: Optional[EtaConfig] = None,
) -> dict:
    config = config or PricingConfig.from_settings()
    eta_config = eta_config or EtaConfig.from_settings()
    now = now or datetime.utcnow()

    items: List[dict] = []
    delivery_rows: List[DeliveryRow] = []
    total_mrp = 0.0
    total_selling_price = 0.0

    for line in lines:
        product = session.get(Product, line.product_id)
        if not product:
            # product deleted after it was carted
            continue

        variant = session.get(Variant, line.variant_id) if line.variant_id else None
        display = resolve_line_display(session, product, variant)

        details = session.exec(
            select(ProductDetails).where(ProductDetails.product_id == product.id)
        ).first()
        eta_iso, eta_text = estimate_delivery(details.sla if details else None, eta_config, eta_now)
        display["estimated_delivery_date"] = eta_iso
        display["estimated_date_text"] = eta_text

        price = display["price"] or 0
        mrp = display["mrp"] or 0
        total_mrp += mrp * line.quantity
        total_selling_price += price * line.quantity

        delivery_charge = details.delivery_charges if details else None
        delivery_rows.append(DeliveryRow(quantity=line.quantity, delivery_charge=delivery_charge))

        items.append({
            "id": line.id,
            "product_id": line.product_id,
            "variant_id": line.variant_id,
            "quantity": line.quantity,
            "variant" if line.variant_id is not None else "product": display,
            "line_total": round(price * line.quantity, 2),
        })

    pending = get_pending_coupon(session, user_id)
    coupon = pending[1] if pending else None
    coupon_discount = resolve_coupon_discount(coupon, total_selling_price, now)

    summary = build_price_summary(
        total_mrp,
        total_selling_price,
        coupon_discount,
        delivery_rows,
        config,
        is_cod=is_cod,
    )

    return {
        "items": items,
        "coupon": {"code": coupon.code, "discount": coupon_discount} if coupon else None,
        "price_summary": summary.model_dump(),
    }


def _as_refs(rows) -> List[LineRef]:
    return [
        LineRef(id=r.id, product_id=r.product_id, variant_id=r.variant_id, quantity=r.quantity)
        for r in rows
    ]


def get_cart_lines(session: Session, user_id: int) -> List[CartItem]:
    return session.exec(
        select(CartItem).where(CartItem.user_id == user_id).order_by(CartItem.id)
    ).all()


def get_priced_cart(session: Session, user_id: int, **kwargs) -> dict:
    return price_lines(session, user_id, _as_refs(get_cart_lines(session, user_id)), **kwargs)


def get_priced_buy_now(session: Session, user_id: int, **kwargs) -> dict:
    item = session.exec(select(BuyNowItem).where(BuyNowItem.user_id == user_id)).first()
    return price_lines(session, user_id, _as_refs([item] if item else []), **kwargs)


def clear_cart(session: Session, user_id: int):
    """Removes every cart line and the pending coupon in one commit."""
    try:
        for item in get_cart_lines(session, user_id):
            session.delete(item)

        pending = session.exec(
            select(AppliedCoupon).where(
                AppliedCoupon.user_id == user_id,
                AppliedCoupon.state == AppliedCouponState.PENDING.value,
            )
        ).all()
        for applied in pending:
            session.delete(applied)

        session.commit()
    except Exception:
        logger.exception(f"Clearing cart failed for user {user_id}")
        session.rollback()
        raise

    logger.info(f"Cart cleared for user {user_id}")
