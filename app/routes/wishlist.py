import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select
from app.database import get_session
from app.models.cart import CartItem
from app.models.wishlist import Wishlist
from app.models.product import Product, Variant
from app.models.user import User
from app.schemas.wishlist_schemas import WishlistAddRequest
from app.services.cart_service import format_image_url, main_image
from app.utils.db_errors import commit_or_400
from app.utils.token import get_current_user
from sqlalchemy import func

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/")
def add_to_wishlist(
    data: WishlistAddRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    if not session.get(Product, data.product_id):
        raise HTTPException(404, "Product not found")
    if data.variant_id and not session.get(Variant, data.variant_id):
        raise HTTPException(404, f"Variant ID {data.variant_id} not found.")

    variant_id = data.variant_id or 0
    item = session.exec(
        select(Wishlist).where(
            Wishlist.user_id == current_user.id,
            Wishlist.product_id == data.product_id,
            Wishlist.variant_id == variant_id,
        )
    ).first()

    if item:
        item.quantity = data.quantity or 1
        item.size = data.size
    else:
        item = Wishlist(
            user_id=current_user.id,
            product_id=data.product_id,
            variant_id=variant_id,
            quantity=data.quantity or 1,
            size=data.size,
        )

    session.add(item)
    commit_or_400(session)
    session.refresh(item)

    return {"message": "Added to wishlist", "item": item}


@router.get("/")
def get_wishlist(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    wishlist_items = session.exec(
        select(Wishlist).where(Wishlist.user_id == current_user.id).order_by(Wishlist.id)
    ).all()

    response = []

    for w in wishlist_items:
        product = session.get(Product, w.product_id)
        if not product:
            continue

        image = main_image(session, product_id=product.id)
        response.append({
            "wishlist_id": w.id,
            "product_id": product.id,
            "variant_id": w.variant_id or None,
            "quantity": w.quantity,
            "size": w.size,
            "product": {
                "title": product.title,
                "price": product.selling_price,
                "mrp": product.mrp,
                "image_url": format_image_url(image.url) if image else None,
                "in_stock": product.in_stock,
            },
        })

    return response


@router.get("/count")
def wishlist_count(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    count = session.exec(
        select(func.count()).select_from(Wishlist).where(
            Wishlist.user_id == current_user.id
        )
    ).first()

    return {"count": count or 0}


@router.delete("/{product_id}")
def remove_from_wishlist(
    product_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    items = session.exec(
        select(Wishlist).where(Wishlist.user_id == current_user.id, Wishlist.product_id == product_id)
    ).all()

    for item in items:
        session.delete(item)
    session.commit()

    return {"message": "Removed from wishlist", "count": len(items)}


@router.post("/move-to-cart/{product_id}")
def move_to_cart(
    product_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    items = session.exec(
        select(Wishlist).where(Wishlist.user_id == current_user.id, Wishlist.product_id == product_id)
    ).all()

    if not items:
        raise HTTPException(404, "Wishlist item not found")

    try:
        for w in items:
            variant_id = w.variant_id or None
            line = session.exec(
                select(CartItem).where(
                    CartItem.user_id == current_user.id,
                    CartItem.product_id == product_id,
                    CartItem.variant_id == variant_id,
                )
            ).first()

            if line:
                line.quantity += w.quantity
            else:
                line = CartItem(
                    user_id=current_user.id,
                    product_id=product_id,
                    variant_id=variant_id,
                    quantity=w.quantity,
                )
            session.add(line)
            session.delete(w)

        commit_or_400(session)
    except HTTPException:
        raise
    except Exception:
        session.rollback()
        logger.exception(f"Moving product {product_id} to cart failed for user {current_user.id}")
        raise

    return {"message": "Moved to cart successfully"}
