import logging
import re
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlmodel import Session, select

from app.models.coupon import AppliedCoupon, AppliedCouponState, Coupon
from app.services.pricing import coupon_is_live

logger = logging.getLogger(__name__)

COUPON_CODE = re.compile(r"^[A-Za-z0-9_-]{1,32}$")


def normalize_code(raw: Optional[str]) -> str:
    code = (raw or "").strip()
    if not COUPON_CODE.match(code):
        raise HTTPException(400, "Invalid coupon code format")
    return code.upper()


def find_by_code(session: Session, code: str) -> Optional[Coupon]:
    return session.exec(select(Coupon).where(Coupon.code == code)).first()


def _pending_rows(session: Session, user_id: int):
    return session.exec(
        select(AppliedCoupon).where(
            AppliedCoupon.user_id == user_id,
            AppliedCoupon.state == AppliedCouponState.PENDING.value,
        )
    ).all()


def apply_coupon(session: Session, user_id: int, raw_code: str, now: Optional[datetime] = None) -> Coupon:
    """Puts the coupon into the user's single pending slot, replacing whatever was there."""
    code = normalize_code(raw_code)
    coupon = find_by_code(session, code)
    if not coupon:
        raise HTTPException(404, "Coupon not found")

    if not coupon_is_live(coupon, now or datetime.utcnow()):
        logger.warning(f"User {user_id} tried inactive or expired coupon {code}")
        raise HTTPException(400, "Coupon is inactive or expired")

    try:
        for row in _pending_rows(session, user_id):
            session.delete(row)
        session.add(AppliedCoupon(user_id=user_id, coupon_id=coupon.id))
        session.commit()
    except Exception:
        session.rollback()
        raise

    logger.info(f"Coupon {code} applied for user {user_id}")
    return coupon


def clear_pending_coupon(session: Session, user_id: int) -> int:
    rows = _pending_rows(session, user_id)
    for row in rows:
        session.delete(row)
    session.commit()
    return len(rows)
