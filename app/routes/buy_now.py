from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select
from app.database import get_session
from app.models.cart import BuyNowItem
from app.models.product import Product, Variant
from app.models.user import User
from app.schemas.buynow_schemas import BuyNowRequest, BuyNowUpdateRequest
from app.services.cart_service import get_priced_buy_now
from app.utils.db_errors import commit_or_400
from app.utils.token import get_current_user

router = APIRouter()


def _current_item(session: Session, user_id: int):
    return session.exec(select(BuyNowItem).where(BuyNowItem.user_id == user_id)).first()


@router.get("/")
def get_buy_now(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    return get_priced_buy_now(session, current_user.id)


# Set / replace the single Buy Now item
@router.post("/")
def set_buy_now(
    data: BuyNowRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    if data.quantity < 1:
        raise HTTPException(400, "Quantity must be at least 1")

    if not session.get(Product, data.product_id):
        raise HTTPException(404, "Product not found")

    if data.variant_id:
        variant = session.get(Variant, data.variant_id)
        if not variant or variant.product_id != data.product_id:
            raise HTTPException(400, "Variant does not belong to the provided product")

    item = _current_item(session, current_user.id) or BuyNowItem(user_id=current_user.id, product_id=data.product_id)
    item.product_id = data.product_id
    item.variant_id = data.variant_id or None
    item.quantity = data.quantity

    session.add(item)
    commit_or_400(session)

    return {
        "message": "Buy now item saved.",
        "data": get_priced_buy_now(session, current_user.id),
    }


@router.patch("/")
def update_buy_now(
    data: BuyNowUpdateRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    item = _current_item(session, current_user.id)
    if not item:
        raise HTTPException(404, "No buy now item")
    if data.quantity < 1:
        raise HTTPException(400, "Quantity must be at least 1")

    item.quantity = data.quantity
    session.add(item)
    session.commit()

    return {
        "message": "Buy now item updated.",
        "data": get_priced_buy_now(session, current_user.id),
    }


@router.delete("/")
def clear_buy_now(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    item = _current_item(session, current_user.id)
    if item:
        session.delete(item)
        session.commit()

    return {
        "message": "Buy now item cleared.",
        "data": get_priced_buy_now(session, current_user.id),
    }
