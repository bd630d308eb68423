from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional
from sqlmodel import Session, select
from app.database import get_session
from app.models.product import Product, ProductDetails, Variant
from app.services.cart_service import format_image_url, main_image, resolve_line_display
from app.services.delivery_eta import EtaConfig, estimate_delivery
from app.utils.category_slug import build_slug_from_id
from app.utils.pagination import paginate

router = APIRouter()


def _card(session: Session, product: Product) -> dict:
    image = main_image(session, product_id=product.id)
    return {
        "id": product.id,
        "title": product.title,
        "price": product.selling_price,
        "mrp": product.mrp,
        "in_stock": product.in_stock,
        "image_url": format_image_url(image.url) if image else None,
    }


# ---------- LIST ACTIVE PRODUCTS ----------
@router.get("/", summary="List active products")
def list_products(
    page: int = 1,
    page_size: int = 12,
    q: Optional[str] = Query(None, description="Search term for title"),
    category_id: Optional[int] = None,
    brand_id: Optional[int] = None,
    session: Session = Depends(get_session)
):
    query = select(Product).where(Product.status == True)  # noqa: E712

    if q:
        query = query.where(Product.title.ilike(f"%{q}%"))
    if category_id is not None:
        query = query.where(Product.category_id == category_id)
    if brand_id is not None:
        query = query.where(Product.brand_id == brand_id)

    result = paginate(
        session=session,
        query=query.order_by(Product.created_at.desc(), Product.id.desc()),
        page=page,
        page_size=page_size,
    )
    result["data"] = [_card(session, p) for p in result["data"]]
    return result


# ---------- PRODUCT DETAIL ----------
@router.get("/{product_id}", summary="Product with variants, main images and delivery estimate")
def get_product(product_id: int, session: Session = Depends(get_session)):
    product = session.get(Product, product_id)
    if not product or not product.status:
        raise HTTPException(404, "Product not found")

    details = session.exec(select(ProductDetails).where(ProductDetails.product_id == product.id)).first()
    eta_iso, eta_text = estimate_delivery(details.sla if details else None, EtaConfig.from_settings())

    variants = session.exec(select(Variant).where(Variant.product_id == product.id).order_by(Variant.id)).all()

    return {
        **resolve_line_display(session, product, None),
        "id": product.id,
        "sku": product.sku,
        "description": product.description,
        "in_stock": product.in_stock,
        "category_slug": build_slug_from_id(session, product.category_id) if product.category_id else None,
        "delivery_charges": details.delivery_charges if details else None,
        "warranty": details.warranty if details else None,
        "estimated_delivery_date": eta_iso,
        "estimated_date_text": eta_text,
        "variants": [
            {
                "id": v.id,
                "sku": v.sku,
                "in_stock": v.stock is None or v.stock > 0,
                **resolve_line_display(session, product, v),
            }
            for v in variants
        ],
    }
