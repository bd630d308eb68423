"""
Order placement, detail views, invoices and status moderation.

Placement is one transaction: stock, order, items, payment, coupon
consumption and clearing the source (cart or buy-now) commit together or not
at all.
"""
import io
import logging
from datetime import datetime
from typing import List, Optional

from fastapi import HTTPException
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas
from sqlmodel import Session, select

from app.config import settings
from app.models.address import Address
from app.models.cart import BuyNowItem
from app.models.coupon import AppliedCouponState, Coupon
from app.models.order import ORDER_FINAL_STATES, Order, OrderStatus
from app.models.order_item import OrderItem, OrderItemStatus
from app.models.payment import Payment, PaymentStatus
from app.models.product import Product, Variant
from app.models.user import User
from app.services.cart_service import (
    LineRef,
    get_cart_lines,
    get_pending_coupon,
    price_lines,
    resolve_line_display,
)
from app.services.inventory_service import reduce_inventory, restock_item

logger = logging.getLogger(__name__)

SOURCE_CART = "cart"
SOURCE_BUY_NOW = "buy_now"


def order_number(order_id: int) -> str:
    return f"ORD{order_id:08d}"


def parse_order_number(value: str) -> int:
    """Accepts `123` or `ORD00000123`."""
    raw = value.strip().upper()
    if raw.startswith("ORD"):
        raw = raw[3:]
    if not raw.isdigit():
        raise HTTPException(400, "Invalid order id")
    return int(raw)


def _source_rows(session: Session, user_id: int, source: str) -> list:
    if source == SOURCE_BUY_NOW:
        item = session.exec(select(BuyNowItem).where(BuyNowItem.user_id == user_id)).first()
        return [item] if item else []
    return list(get_cart_lines(session, user_id))


def place_order(
    session: Session,
    user: User,
    address_id: int,
    note: Optional[str] = None,
    source: str = SOURCE_CART,
) -> Order:
    address = session.get(Address, address_id)
    if not address or address.user_id != user.id:
        raise HTTPException(400, "Invalid address")

    rows = _source_rows(session, user.id, source)
    if not rows:
        raise HTTPException(400, "Cart is empty" if source == SOURCE_CART else "No buy-now item")

    refs = [LineRef(id=r.id, product_id=r.product_id, variant_id=r.variant_id, quantity=r.quantity) for r in rows]
    priced = price_lines(session, user.id, refs, is_cod=True)
    if not priced["items"]:
        raise HTTPException(400, "None of the selected products are available")

    summary = priced["price_summary"]
    pending = get_pending_coupon(session, user.id)

    try:
        lines = []
        for item in priced["items"]:
            display = item.get("variant") or item.get("product")
            lines.append((item["product_id"], item["variant_id"], item["quantity"], display["title"]))
        reduce_inventory(session, lines)

        order = Order(
            user_id=user.id,
            address_id=address.id,
            subtotal=round(summary["total_mrp"] - summary["discount_on_mrp"], 2),
            coupon_discount=summary["coupon_discount"],
            platform_fee=summary["platform_fee"],
            shipping_fee=summary["shipping_fee"],
            gst=round(summary["total_after_discount"] * settings.gst_rate, 2),
            total_amount=summary["final_payable"],
            payment_method="COD",
            status=OrderStatus.PENDING.value,
            note=note,
        )
        session.add(order)
        session.flush()

        for item in priced["items"]:
            display = item.get("variant") or item.get("product")
            session.add(OrderItem(
                order_id=order.id,
                product_id=item["product_id"],
                variant_id=item["variant_id"],
                title=display["title"],
                price=display["price"] or 0,
                quantity=item["quantity"],
                total=item["line_total"],
            ))

        session.add(Payment(order_id=order.id, method="COD", status=PaymentStatus.PENDING.value))

        # a coupon that gave nothing stays pending for the next order
        if pending and summary["coupon_discount"] > 0:
            applied, coupon = pending
            applied.state = AppliedCouponState.CONSUMED.value
            applied.order_id = order.id
            session.add(applied)
            order.coupon_id = coupon.id
            session.add(order)

        for row in rows:
            session.delete(row)

        session.commit()
    except HTTPException:
        session.rollback()
        raise
    except Exception:
        session.rollback()
        logger.exception(f"Order placement failed for user {user.id}")
        raise

    session.refresh(order)
    logger.info(f"Order {order_number(order.id)} placed by user {user.id} from {source}, total {order.total_amount}")
    return order


def get_order_for(session: Session, order_id: int, user: User, is_admin: bool = False) -> Order:
    order = session.get(Order, order_id)
    if not order:
        raise HTTPException(404, "Order not found")
    if order.user_id != user.id and not is_admin:
        raise HTTPException(403, "Access denied")
    return order


def order_items(session: Session, order_id: int) -> List[OrderItem]:
    return session.exec(select(OrderItem).where(OrderItem.order_id == order_id).order_by(OrderItem.id)).all()


def _item_view(session: Session, item: OrderItem) -> dict:
    product = session.get(Product, item.product_id) if item.product_id else None
    variant = session.get(Variant, item.variant_id) if item.variant_id else None

    display = resolve_line_display(session, product, variant) if product else {"title": item.title, "mrp": None}
    # placement-time title and price win over the live catalog
    display["title"] = item.title
    display["price"] = item.price

    return {
        "id": item.id,
        "product_id": item.product_id,
        "variant_id": item.variant_id,
        "quantity": item.quantity,
        "total": item.total,
        "status": item.status,
        "moderation_note": item.moderation_note,
        "variant" if item.variant_id is not None else "product": display,
    }


def order_summary_view(session: Session, order: Order) -> dict:
    items = order_items(session, order.id)
    return {
        "id": order.id,
        "order_no": order_number(order.id),
        "status": order.status,
        "total_amount": order.total_amount,
        "created_at": order.created_at,
        "items": [
            {"id": i.id, "title": i.title, "price": i.price, "quantity": i.quantity, "status": i.status}
            for i in items
        ],
    }


def order_detail_view(session: Session, order: Order) -> dict:
    items = [_item_view(session, i) for i in order_items(session, order.id)]

    total_mrp = 0.0
    for view in items:
        display = view.get("variant") or view.get("product")
        unit_mrp = display.get("mrp") or display["price"]
        total_mrp += unit_mrp * view["quantity"]
    total_mrp = round(total_mrp, 2)

    user = session.get(User, order.user_id)
    address = session.get(Address, order.address_id)
    payment = session.exec(select(Payment).where(Payment.order_id == order.id)).first()
    coupon = session.get(Coupon, order.coupon_id) if order.coupon_id else None

    return {
        "id": order.id,
        "order_no": order_number(order.id),
        "status": order.status,
        "order_from": order.order_from,
        "note": order.note,
        "created_at": order.created_at,
        "updated_at": order.updated_at,
        "user": {"id": user.id, "name": user.name, "email": user.email, "phone": user.phone} if user else None,
        "address": address,
        "payment": payment,
        "coupon": {"code": coupon.code, "discount": order.coupon_discount} if coupon else None,
        "items": items,
        "price_summary": {
            "total_mrp": total_mrp,
            "discount_on_mrp": round(max(total_mrp - order.subtotal, 0), 2),
            "coupon_discount": order.coupon_discount,
            "total_after_discount": round(order.subtotal - order.coupon_discount, 2),
            "platform_fee": order.platform_fee,
            "shipping_fee": order.shipping_fee,
            "gst": order.gst,
            "final_payable": order.total_amount,
        },
    }


# ---------- INVOICE ----------
def invoice_data(session: Session, order: Order) -> dict:
    items = order_items(session, order.id)
    user = session.get(User, order.user_id)
    address = session.get(Address, order.address_id)
    total_after_discount = round(order.subtotal - order.coupon_discount, 2)

    return {
        "invoice_id": f"INV-{order.id}",
        "order_no": order_number(order.id),
        "date": order.created_at,
        "status": order.status,
        "customer": {"name": user.name, "email": user.email} if user else None,
        "shipping_address": {
            "name": address.name,
            "address": address.address,
            "city": address.city,
            "state": address.state,
            "pincode": address.pincode,
            "phone_number": address.phone_number,
        } if address else None,
        "items": [
            {"title": i.title, "price": i.price, "quantity": i.quantity, "line_total": i.total}
            for i in items
        ],
        "subtotal": order.subtotal,
        "coupon_discount": order.coupon_discount,
        "total_after_discount": total_after_discount,
        "platform_fee": order.platform_fee,
        "shipping": order.shipping_fee,
        "gst": round(total_after_discount * settings.gst_rate, 2),
        "total": order.total_amount,
    }


def render_invoice_pdf(invoice: dict) -> io.BytesIO:
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    width, height = A4

    y = height - 60
    c.setFont("Helvetica-Bold", 16)
    c.drawString(50, y, f"Invoice {invoice['invoice_id']}")
    c.setFont("Helvetica", 10)
    y -= 20
    c.drawString(50, y, f"Order: {invoice['order_no']}")
    y -= 15
    c.drawString(50, y, f"Date: {invoice['date'].strftime('%Y-%m-%d')}")

    customer = invoice["customer"]
    if customer:
        y -= 15
        c.drawString(50, y, f"Customer: {customer['name'] or ''} <{customer['email']}>")

    address = invoice["shipping_address"]
    if address:
        y -= 15
        c.drawString(50, y, f"Ship to: {address['name']}, {address['address']}, {address['city']} {address['pincode']}")

    y -= 30
    c.setFont("Helvetica-Bold", 10)
    c.drawString(50, y, "Item")
    c.drawString(330, y, "Price")
    c.drawString(400, y, "Qty")
    c.drawString(460, y, "Total")
    c.setFont("Helvetica", 10)

    for item in invoice["items"]:
        y -= 18
        if y < 120:
            c.showPage()
            c.setFont("Helvetica", 10)
            y = height - 60
        c.drawString(50, y, item["title"][:50])
        c.drawRightString(380, y, f"{item['price']:.2f}")
        c.drawRightString(420, y, str(item["quantity"]))
        c.drawRightString(520, y, f"{item['line_total']:.2f}")

    y -= 30
    for label, key in (
        ("Subtotal", "subtotal"),
        ("Coupon discount", "coupon_discount"),
        ("Platform fee", "platform_fee"),
        ("Shipping", "shipping"),
        ("GST (incl.)", "gst"),
        ("Total", "total"),
    ):
        c.drawString(330, y, label)
        c.drawRightString(520, y, f"{invoice[key]:.2f}")
        y -= 15

    c.showPage()
    c.save()
    buffer.seek(0)
    return buffer


# ---------- ADMIN STATUS CHANGES ----------
def _parse_enum(enum_cls, value: str, label: str):
    try:
        return enum_cls(value.strip().upper())
    except ValueError:
        allowed = ", ".join(e.value for e in enum_cls)
        raise HTTPException(400, f"Invalid {label}. Allowed: {allowed}")


def update_order(
    session: Session,
    order: Order,
    status: Optional[str] = None,
    payment_status: Optional[str] = None,
    note: Optional[str] = None,
) -> Order:
    new_status = _parse_enum(OrderStatus, status, "status") if status else None
    new_payment_status = _parse_enum(PaymentStatus, payment_status, "payment_status") if payment_status else None

    payment = session.exec(select(Payment).where(Payment.order_id == order.id)).first()
    if new_payment_status and not payment:
        raise HTTPException(400, "Payment record not found for this order")

    if new_status and order.status in ORDER_FINAL_STATES and new_status.value != order.status:
        raise HTTPException(400, f"Order is already {order.status}")

    now = datetime.utcnow()
    try:
        if new_status:
            if new_status == OrderStatus.CANCELLED and order.status != OrderStatus.CANCELLED.value:
                for item in order_items(session, order.id):
                    if item.status != OrderItemStatus.CANCELLED.value:
                        restock_item(session, item)
                        item.status = OrderItemStatus.CANCELLED.value
                        session.add(item)
            order.status = new_status.value

        if new_payment_status:
            payment.status = new_payment_status.value
            if new_payment_status == PaymentStatus.SUCCESS and not payment.paid_at:
                payment.paid_at = now
            session.add(payment)

        # cash collected on delivery
        if new_status == OrderStatus.DELIVERED and payment and payment.status == PaymentStatus.PENDING.value:
            payment.status = PaymentStatus.SUCCESS.value
            payment.paid_at = now
            session.add(payment)

        if note is not None:
            order.note = note
        order.updated_at = now
        session.add(order)
        session.commit()
    except Exception:
        session.rollback()
        logger.exception(f"Updating order {order.id} failed")
        raise

    session.refresh(order)
    logger.info(f"Order {order_number(order.id)} updated: status={order.status}")
    return order


def _checked_item(session: Session, item_id: int, order_id: int) -> OrderItem:
    item = session.get(OrderItem, item_id)
    if not item:
        raise HTTPException(404, "Order item not found")
    if item.order_id != order_id:
        raise HTTPException(400, "Item does not belong to this order")
    return item


def _ensure_open(order: Order):
    if order.status in ORDER_FINAL_STATES:
        raise HTTPException(400, f"Order is already {order.status}")


def request_item_cancel(session: Session, user: User, item_id: int, order_id: int, note: Optional[str] = None) -> OrderItem:
    item = session.get(OrderItem, item_id)
    if not item:
        raise HTTPException(404, "Order item not found")
    order = session.get(Order, item.order_id)
    if order.user_id != user.id:
        raise HTTPException(403, "Access denied")
    if item.order_id != order_id:
        raise HTTPException(400, "Item does not belong to this order")
    _ensure_open(order)

    if item.status in (OrderItemStatus.CANCEL_REQUESTED.value, OrderItemStatus.CANCELLED.value):
        return item

    item.status = OrderItemStatus.CANCEL_REQUESTED.value
    item.moderation_note = note
    session.add(item)
    session.commit()
    session.refresh(item)

    logger.info(f"Cancellation requested for item {item.id} of order {order_number(order.id)}")
    return item


def moderate_item(session: Session, item_id: int, order_id: int, status: str, note: Optional[str] = None) -> OrderItem:
    new_status = _parse_enum(OrderItemStatus, status, "status")
    if new_status not in (OrderItemStatus.APPROVED, OrderItemStatus.CANCELLED):
        raise HTTPException(400, "Invalid status. Allowed: APPROVED, CANCELLED")

    item = _checked_item(session, item_id, order_id)
    order = session.get(Order, item.order_id)
    _ensure_open(order)

    if item.status == new_status.value:
        return item
    if item.status == OrderItemStatus.CANCELLED.value:
        raise HTTPException(400, "Item is already cancelled")

    try:
        if new_status == OrderItemStatus.CANCELLED:
            restock_item(session, item)
        item.status = new_status.value
        if note is not None:
            item.moderation_note = note
        session.add(item)

        # autoflush makes the pending item visible here
        remaining = [i for i in order_items(session, order.id) if i.status != OrderItemStatus.CANCELLED.value]
        if not remaining:
            order.status = OrderStatus.CANCELLED.value
            order.updated_at = datetime.utcnow()
            session.add(order)

        session.commit()
    except Exception:
        session.rollback()
        logger.exception(f"Moderating item {item_id} failed")
        raise

    session.refresh(item)
    logger.info(f"Item {item.id} of order {order_number(order.id)} set to {item.status}")
    return item
