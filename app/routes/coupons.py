from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select
from app.database import get_session
from app.dependencies.admin import require_admin
from app.models.coupon import Coupon
from app.models.user import User
from app.schemas.coupon_schemas import ApplyCouponRequest, CouponCreate, CouponUpdate
from app.services.cart_service import get_priced_buy_now, get_priced_cart
from app.services.coupon_service import (
    apply_coupon,
    clear_pending_coupon,
    find_by_code,
    normalize_code,
)
from app.utils.db_errors import commit_or_400
from app.utils.token import get_current_user

router = APIRouter()


def _get_or_404(session: Session, coupon_id: int) -> Coupon:
    coupon = session.get(Coupon, coupon_id)
    if not coupon:
        raise HTTPException(404, "Coupon not found")
    return coupon


@router.post("/")
def create_coupon(
    data: CouponCreate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin)
):
    code = normalize_code(data.code)
    if find_by_code(session, code):
        raise HTTPException(400, "Coupon code already exists")

    coupon = Coupon(**data.model_dump(exclude={"code", "price_type"}), code=code, price_type=data.price_type.value)
    session.add(coupon)
    commit_or_400(session)
    session.refresh(coupon)
    return coupon


@router.get("/")
def list_coupons(
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin)
):
    return session.exec(select(Coupon).order_by(Coupon.created_at.desc(), Coupon.id.desc())).all()


# Specific routes FIRST

@router.get("/code/{code}")
def get_by_code(code: str, session: Session = Depends(get_session)):
    coupon = find_by_code(session, normalize_code(code))
    if not coupon:
        raise HTTPException(404, "Coupon not found")
    return coupon


@router.post("/apply")
def apply_to_cart(
    data: ApplyCouponRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    coupon = apply_coupon(session, current_user.id, data.code)
    return {
        "message": f"Coupon {coupon.code} applied",
        "data": get_priced_cart(session, current_user.id),
    }


@router.post("/apply-buy-now")
def apply_to_buy_now(
    data: ApplyCouponRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    coupon = apply_coupon(session, current_user.id, data.code)
    return {
        "message": f"Coupon {coupon.code} applied",
        "data": get_priced_buy_now(session, current_user.id),
    }


@router.post("/clear")
def clear_cart_coupon(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    clear_pending_coupon(session, current_user.id)
    return {"message": "Coupon removed", "data": get_priced_cart(session, current_user.id)}


@router.post("/clear-buy-now")
def clear_buy_now_coupon(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    clear_pending_coupon(session, current_user.id)
    return {"message": "Coupon removed", "data": get_priced_buy_now(session, current_user.id)}


@router.get("/{coupon_id}")
def get_coupon(coupon_id: int, session: Session = Depends(get_session)):
    return _get_or_404(session, coupon_id)


@router.put("/{coupon_id}")
def update_coupon(
    coupon_id: int,
    data: CouponUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin)
):
    coupon = _get_or_404(session, coupon_id)

    updates = data.model_dump(exclude_unset=True)
    if "code" in updates:
        updates["code"] = normalize_code(updates["code"])
    if updates.get("price_type"):
        updates["price_type"] = updates["price_type"].value

    for key, value in updates.items():
        setattr(coupon, key, value)

    session.add(coupon)
    commit_or_400(session)
    session.refresh(coupon)
    return coupon


@router.delete("/{coupon_id}")
def delete_coupon(
    coupon_id: int,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin)
):
    coupon = _get_or_404(session, coupon_id)
    session.delete(coupon)
    commit_or_400(session)
    return {"message": "Coupon deleted"}
