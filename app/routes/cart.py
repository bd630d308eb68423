import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select
from app.database import get_session
from app.models.cart import CartItem
from app.models.product import Product, Variant
from app.models.user import User
from app.schemas.cart_schemas import CartAddRequest, CartUpdateRequest, CartSyncRequest
from app.services.cart_service import clear_cart, get_priced_cart
from app.utils.db_errors import commit_or_400
from app.utils.token import get_current_user  # JWT dependency


router = APIRouter()
logger = logging.getLogger(__name__)


def _check_quantity(quantity: int):
    if quantity < 1:
        raise HTTPException(400, "Quantity must be at least 1")


def _owned_line(session: Session, cart_id: int, user: User) -> CartItem:
    item = session.get(CartItem, cart_id)
    if not item:
        raise HTTPException(404, "Cart item not found")
    if item.user_id != user.id:
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Cart item belongs to another user")
    return item


def _find_line(session: Session, user_id: int, product_id: int, variant_id):
    return session.exec(
        select(CartItem).where(
            CartItem.user_id == user_id,
            CartItem.product_id == product_id,
            CartItem.variant_id == variant_id,
        )
    ).first()


# View Cart

@router.get("/")
def get_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    return get_priced_cart(session, current_user.id)


# Add to Cart

@router.post("/")
def add_to_cart(
    data: CartAddRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    _check_quantity(data.quantity)

    product = session.get(Product, data.product_id)
    if not product:
        raise HTTPException(404, "Product not found")

    variant_id = None
    if data.variant_id and data.variant_id > 0:
        variant = session.get(Variant, data.variant_id)
        if not variant:
            raise HTTPException(404, f"Variant ID {data.variant_id} not found.")
        if variant.product_id != product.id:
            raise HTTPException(400, "Variant does not belong to this product")
        variant_id = variant.id

    existing_item = _find_line(session, current_user.id, product.id, variant_id)

    if existing_item:
        # Increase quantity
        existing_item.quantity += data.quantity
        session.add(existing_item)
    else:
        session.add(CartItem(
            user_id=current_user.id,
            product_id=product.id,
            variant_id=variant_id,
            quantity=data.quantity,
        ))

    commit_or_400(session)

    return {
        "message": "Added to cart successfully.",
        "data": get_priced_cart(session, current_user.id),
    }


# Update Cart

@router.patch("/")
def update_cart_item(
    data: CartUpdateRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    item = _owned_line(session, data.cart_id, current_user)
    _check_quantity(data.quantity)

    item.quantity = data.quantity
    session.add(item)
    session.commit()

    return {
        "message": "Cart updated successfully.",
        "data": get_priced_cart(session, current_user.id),
    }


# Clear Cart (declared before /{cart_id})

@router.delete("/clear")
def clear_cart_endpoint(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    clear_cart(session, current_user.id)
    return {
        "message": "Cart cleared",
        "data": get_priced_cart(session, current_user.id),
    }


# Remove Cart

@router.delete("/{cart_id}")
def remove_item(
    cart_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    item = _owned_line(session, cart_id, current_user)

    session.delete(item)
    session.commit()

    return {
        "message": "Removed from cart successfully.",
        "data": get_priced_cart(session, current_user.id),
    }


# Sync guest cart after login

@router.post("/sync")
def sync_cart(
    data: CartSyncRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    # resolve and validate everything before touching the cart
    merged = {}
    for item in data.items:
        _check_quantity(item.quantity)
        product_id = item.product_id
        variant_id = item.variant_id or None

        if variant_id:
            variant = session.get(Variant, variant_id)
            if not variant:
                raise HTTPException(404, f"Invalid variant ID: {variant_id} in sync data")
            product_id = variant.product_id
        elif not session.get(Product, product_id):
            raise HTTPException(404, f"Invalid product ID: {product_id} in sync data")

        key = (product_id, variant_id)
        merged[key] = merged.get(key, 0) + item.quantity

    try:
        for (product_id, variant_id), quantity in merged.items():
            existing = _find_line(session, current_user.id, product_id, variant_id)
            if existing:
                existing.quantity += quantity
                session.add(existing)
            else:
                session.add(CartItem(
                    user_id=current_user.id,
                    product_id=product_id,
                    variant_id=variant_id,
                    quantity=quantity,
                ))
        commit_or_400(session)
    except HTTPException:
        raise
    except Exception:
        session.rollback()
        logger.exception(f"Cart sync failed for user {current_user.id}")
        raise

    logger.info(f"Synced {len(merged)} guest cart lines for user {current_user.id}")
    return {
        "message": "Cart synced successfully.",
        "data": get_priced_cart(session, current_user.id),
    }
