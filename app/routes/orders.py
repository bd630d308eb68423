from datetime import date, timedelta
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse
from typing import Optional
from sqlalchemy import func
from sqlmodel import Session, select
from app.database import get_session
from app.dependencies.admin import is_admin, require_admin
from app.models.order import ORDER_FINAL_STATES, Order
from app.models.order_item import OrderItem
from app.models.payment import Payment
from app.models.user import User
from app.schemas.orders_schemas import (
    OrderUpdateRequest,
    PlaceOrderRequest,
    RequestCancelItem,
    UpdateOrderItem,
)
from app.services.order_service import (
    SOURCE_BUY_NOW,
    SOURCE_CART,
    get_order_for,
    invoice_data,
    moderate_item,
    order_detail_view,
    order_number,
    order_summary_view,
    parse_order_number,
    place_order,
    render_invoice_pdf,
    request_item_cancel,
    update_order,
)
from app.utils.pagination import paginate
from app.utils.token import get_current_user

router = APIRouter()


# ---------- PLACE ----------
@router.post("/place")
def place_cart_order(
    data: PlaceOrderRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    order = place_order(session, current_user, data.address_id, data.note, source=SOURCE_CART)
    return {
        "message": "Order placed successfully",
        "order_id": order.id,
        "order_no": order_number(order.id),
        "total_amount": order.total_amount,
    }


@router.post("/buy-now")
def place_buy_now_order(
    data: PlaceOrderRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    order = place_order(session, current_user, data.address_id, data.note, source=SOURCE_BUY_NOW)
    return {
        "message": "Order placed successfully",
        "order_id": order.id,
        "order_no": order_number(order.id),
        "total_amount": order.total_amount,
    }


# ---------- USER ORDERS ----------
def _user_orders(session: Session, user_id: int):
    return session.exec(
        select(Order).where(Order.user_id == user_id).order_by(Order.created_at.desc(), Order.id.desc())
    ).all()


@router.get("/user")
def my_orders(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    return [order_summary_view(session, o) for o in _user_orders(session, current_user.id)]


@router.get("/user/details")
def my_orders_detailed(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    return [order_detail_view(session, o) for o in _user_orders(session, current_user.id)]


# ---------- INVOICE ----------
@router.get("/invoice/{order_id}")
def get_invoice(
    order_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    order = get_order_for(session, order_id, current_user, is_admin(current_user))
    return invoice_data(session, order)


@router.get("/invoice/{order_id}/pdf")
def download_invoice(
    order_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    order = get_order_for(session, order_id, current_user, is_admin(current_user))
    buffer = render_invoice_pdf(invoice_data(session, order))

    return StreamingResponse(
        buffer,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="invoice_{order.id}.pdf"'},
    )


# ---------- ITEM CANCELLATION ----------
@router.patch("/items/{item_id}/request-cancel")
def request_cancel(
    item_id: int,
    data: RequestCancelItem,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    item = request_item_cancel(session, current_user, item_id, data.order_id, data.note)
    return {"message": "Cancellation requested", "item": item}


@router.patch("/items/{item_id}")
def moderate_order_item(
    item_id: int,
    data: UpdateOrderItem,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin)
):
    item = moderate_item(session, item_id, data.order_id, data.status, data.note)
    order = session.get(Order, item.order_id)
    return {"message": f"Item {item.status.lower()}", "item": item, "order_status": order.status}


# ---------- ADMIN ORDERS ----------
@router.get("/")
def list_orders(
    page: int = 1,
    page_size: int = 10,
    status: Optional[str] = None,
    payment_status: Optional[str] = None,
    order_id: Optional[str] = Query(None, description="123 or ORD00000123"),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    active: Optional[bool] = None,
    order_from: Optional[str] = None,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin)
):
    query = select(Order).outerjoin(Payment, Payment.order_id == Order.id)

    if status:
        query = query.where(Order.status == status.strip().upper())
    if payment_status:
        query = query.where(Payment.status == payment_status.strip().upper())
    if order_id:
        query = query.where(Order.id == parse_order_number(order_id))
    if start_date:
        query = query.where(Order.created_at >= start_date)
    if end_date:
        # inclusive end day
        query = query.where(Order.created_at < end_date + timedelta(days=1))
    if active is True:
        query = query.where(Order.status.notin_(ORDER_FINAL_STATES))
    elif active is False:
        query = query.where(Order.status.in_(ORDER_FINAL_STATES))
    if order_from:
        query = query.where(Order.order_from == order_from)

    result = paginate(
        session=session,
        query=query.order_by(Order.created_at.desc(), Order.id.desc()),
        page=page,
        page_size=page_size,
    )

    rows = []
    for order in result["data"]:
        payment = session.exec(select(Payment).where(Payment.order_id == order.id)).first()
        qty = session.exec(
            select(func.coalesce(func.sum(OrderItem.quantity), 0)).where(OrderItem.order_id == order.id)
        ).one()
        rows.append({
            "order_id": order.id,
            "order_no": order_number(order.id),
            "user_id": order.user_id,
            "date": order.created_at,
            "qty": qty,
            "total_amount": order.total_amount,
            "status": order.status,
            "payment_status": payment.status if payment else None,
            "order_from": order.order_from,
        })
    result["data"] = rows
    return result


@router.get("/{order_id}")
def get_order(
    order_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    order = get_order_for(session, order_id, current_user, is_admin(current_user))
    return order_detail_view(session, order)


@router.patch("/{order_id}")
def admin_update_order(
    order_id: int,
    data: OrderUpdateRequest,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin)
):
    order = session.get(Order, order_id)
    if not order:
        raise HTTPException(404, "Order not found")

    order = update_order(session, order, data.status, data.payment_status, data.note)
    return {"message": "Order updated", "order": order_detail_view(session, order)}
