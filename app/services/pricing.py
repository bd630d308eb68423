"""
Cart pricing: delivery fee, coupon discount and the final price summary.

Everything here is pure. Callers pass a ``PricingConfig`` (usually built with
``PricingConfig.from_settings()``) so tests can run any fee policy.

Delivery charge policy per product (ProductDetails.delivery_charges):
    None  -> ignored by delivery math
    0     -> free, ships but adds nothing
    > 0   -> paid, one charge per unit
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, TypeVar

from pydantic import BaseModel

from app.config import settings
from app.models.coupon import Coupon, PriceType

T = TypeVar("T")

SUM = "SUM"
MAX_PLUS_ADDON = "MAX_PLUS_ADDON"


class PricingConfig(BaseModel):
    platform_fee: float = 30
    combine_mode: str = SUM
    per_additional_paid_item_fee: float = 149
    free_shipping_threshold: float = 25000
    max_cap: float = 2499
    cod_fee: float = 0
    cod_fee_on_free_shipping: bool = True

    @classmethod
    def from_settings(cls, s=settings) -> "PricingConfig":
        return cls(
            platform_fee=s.platform_fee,
            combine_mode=s.delivery_combine_mode,
            per_additional_paid_item_fee=s.per_additional_paid_item_fee,
            free_shipping_threshold=s.free_shipping_threshold,
            max_cap=s.max_delivery_cap,
            cod_fee=s.cod_fee,
            cod_fee_on_free_shipping=s.cod_fee_on_free_shipping,
        )


@dataclass
class DeliveryRow:
    quantity: int
    delivery_charge: Optional[float]


@dataclass
class DeliveryQuote:
    fee: int
    formula: str


class PriceSummary(BaseModel):
    total_mrp: float
    discount_on_mrp: float
    coupon_discount: float
    total_after_discount: float
    platform_fee: float
    shipping_fee: int
    shipping_formula: str
    final_payable: float


def resolve_display_field(variant_value: Optional[T], product_value: Optional[T]) -> Optional[T]:
    """Variant value wins when present, else the product value."""
    if variant_value is not None and variant_value != "":
        return variant_value
    return product_value


def _fmt(amount: float) -> str:
    return f"{amount:g}"


def calculate_delivery_fee(
    rows: Iterable[DeliveryRow],
    subtotal_after_coupon: float,
    config: PricingConfig,
    is_cod: bool = False,
) -> DeliveryQuote:
    paid_charges: List[float] = []
    breakdown: List[str] = []

    for row in rows:
        charge = row.delivery_charge
        if charge is None or charge <= 0:
            continue
        if row.quantity > 1:
            breakdown.append(f"{_fmt(charge)} × {row.quantity}")
        else:
            breakdown.append(_fmt(charge))
        paid_charges.extend([charge] * row.quantity)

    if not paid_charges:
        base = 0.0
        formula = "No paid delivery items → Delivery = 0"
    elif config.combine_mode == SUM:
        base = sum(paid_charges)
        formula = f"SUM: {' + '.join(breakdown)} = {_fmt(base)}"
    else:
        paid_charges.sort(reverse=True)
        highest = paid_charges[0]
        remaining = len(paid_charges) - 1
        base = highest + remaining * config.per_additional_paid_item_fee
        formula = (
            f"MAX_PLUS_ADDON: max={_fmt(highest)} + "
            f"({remaining} × {_fmt(config.per_additional_paid_item_fee)}) = {_fmt(base)}"
        )

    free_shipping = bool(config.free_shipping_threshold) and (
        subtotal_after_coupon >= config.free_shipping_threshold
    )
    if free_shipping:
        formula += f" → free (subtotal ≥ {_fmt(config.free_shipping_threshold)})"
        base = 0.0

    if base > config.max_cap:
        formula += f" → capped at {_fmt(config.max_cap)}"
        base = config.max_cap

    cod_fee = config.cod_fee if is_cod else 0
    if free_shipping and not config.cod_fee_on_free_shipping:
        cod_fee = 0
    if cod_fee > 0:
        base += cod_fee
        formula += f" + COD {_fmt(cod_fee)} = {_fmt(base)}"

    # round half up, fees are never negative
    fee = max(0, int(base + 0.5))
    return DeliveryQuote(fee=fee, formula=formula)


def coupon_is_live(coupon: Coupon, now: datetime) -> bool:
    if not coupon.status:
        return False
    if coupon.from_date and coupon.from_date > now:
        return False
    if coupon.to_date and coupon.to_date < now:
        return False
    return True


def resolve_coupon_discount(
    coupon: Optional[Coupon],
    subtotal: float,
    now: datetime,
) -> float:
    """Discount for the pending coupon; 0 when absent, inactive, expired or below minimum."""
    if coupon is None or not coupon_is_live(coupon, now):
        return 0.0
    if subtotal < (coupon.min_order_amount or 0):
        return 0.0

    if coupon.price_type == PriceType.PERCENTAGE.value:
        discount = (coupon.value / 100) * subtotal
    else:
        discount = min(coupon.value, subtotal)

    return round(max(0.0, min(discount, subtotal)), 2)


def build_price_summary(
    total_mrp: float,
    total_selling_price: float,
    coupon_discount: float,
    rows: Iterable[DeliveryRow],
    config: PricingConfig,
    is_cod: bool = False,
) -> PriceSummary:
    total_after_discount = round(max(0.0, total_selling_price - coupon_discount), 2)
    quote = calculate_delivery_fee(rows, total_after_discount, config, is_cod=is_cod)

    return PriceSummary(
        total_mrp=round(total_mrp, 2),
        discount_on_mrp=round(total_mrp - total_selling_price, 2),
        coupon_discount=coupon_discount,
        total_after_discount=total_after_discount,
        platform_fee=config.platform_fee,
        shipping_fee=quote.fee,
        shipping_formula=quote.formula,
        final_payable=round(total_after_discount + config.platform_fee + quote.fee, 2),
    )
