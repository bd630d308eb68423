from sqlmodel import select

from app.models.cart import BuyNowItem, CartItem
from app.models.coupon import AppliedCoupon, AppliedCouponState, Coupon
from app.models.order import Order
from app.models.order_item import OrderItem
from app.models.payment import Payment
from app.models.product import Product, Variant
from conftest import auth_headers


def _add(client, headers, product_id, quantity=1, variant_id=None):
    client.post("/cart/", json={"product_id": product_id, "variant_id": variant_id, "quantity": quantity}, headers=headers)


def _place(client, headers, address):
    return client.post("/orders/place", json={"address_id": address.id}, headers=headers)


def test_place_order_is_one_transaction(client, headers, catalog, address, session, user):
    session.add(Coupon(code="SAVE10", value=10))
    session.commit()
    _add(client, headers, catalog.sofa.id, 2)
    _add(client, headers, catalog.chair.id, 1, variant_id=catalog.blue_chair.id)
    client.post("/coupons/apply", json={"code": "SAVE10"}, headers=headers)

    res = _place(client, headers, address)

    assert res.status_code == 200
    body = res.json()
    assert body["order_no"] == f"ORD{body['order_id']:08d}"

    order = session.get(Order, body["order_id"])
    # 2550 selling, 10% off, sofa 2x100 + chair 50 delivery
    assert order.subtotal == 2550
    assert order.coupon_discount == 255
    assert order.shipping_fee == 250
    assert order.total_amount == 2295 + 30 + 250
    assert order.payment_method == "COD"

    items = session.exec(select(OrderItem).where(OrderItem.order_id == order.id)).all()
    assert sorted((i.title, i.price, i.quantity) for i in items) == [("Chair", 550, 1), ("Sofa", 1000, 2)]

    payment = session.exec(select(Payment).where(Payment.order_id == order.id)).one()
    assert (payment.method, payment.status) == ("COD", "PENDING")

    applied = session.exec(select(AppliedCoupon).where(AppliedCoupon.user_id == user.id)).one()
    assert applied.state == AppliedCouponState.CONSUMED.value
    assert applied.order_id == order.id
    assert order.coupon_id == applied.coupon_id

    assert session.exec(select(CartItem).where(CartItem.user_id == user.id)).all() == []
    assert session.get(Product, catalog.sofa.id).stock == 3
    assert session.get(Variant, catalog.blue_chair.id).stock == 1


def test_empty_cart_and_foreign_address_are_rejected(client, headers, catalog, address, other_user):
    assert _place(client, headers, address).status_code == 400

    other = auth_headers(other_user)
    _add(client, other, catalog.sofa.id)
    assert _place(client, other, address).status_code == 400


def test_insufficient_stock_rolls_everything_back(client, headers, catalog, address, session, user):
    _add(client, headers, catalog.lamp.id, 1)
    _add(client, headers, catalog.chair.id, 3, variant_id=catalog.blue_chair.id)

    res = _place(client, headers, address)

    assert res.status_code == 400
    assert session.exec(select(Order)).all() == []
    assert len(session.exec(select(CartItem).where(CartItem.user_id == user.id)).all()) == 2
    assert session.get(Product, catalog.lamp.id).stock == 10


def test_buy_now_order_clears_the_slot(client, headers, catalog, address, session, user):
    client.post("/buy-now/", json={"product_id": catalog.sofa.id, "quantity": 1}, headers=headers)
    _add(client, headers, catalog.lamp.id)

    res = client.post("/orders/buy-now", json={"address_id": address.id}, headers=headers)

    assert res.status_code == 200
    assert session.exec(select(BuyNowItem).where(BuyNowItem.user_id == user.id)).first() is None
    # the cart is untouched
    assert len(session.exec(select(CartItem).where(CartItem.user_id == user.id)).all()) == 1


def test_order_detail_and_access(client, headers, admin_headers, catalog, address, other_user):
    _add(client, headers, catalog.sofa.id)
    order_id = _place(client, headers, address).json()["order_id"]

    detail = client.get(f"/orders/{order_id}", headers=headers).json()
    assert detail["order_no"] == f"ORD{order_id:08d}"
    assert detail["payment"]["status"] == "PENDING"
    assert detail["items"][0]["product"]["title"] == "Sofa"
    assert detail["price_summary"]["total_mrp"] == 1200
    assert detail["price_summary"]["discount_on_mrp"] == 200

    assert client.get(f"/orders/{order_id}", headers=admin_headers).status_code == 200
    assert client.get(f"/orders/{order_id}", headers=auth_headers(other_user)).status_code == 403
    assert client.get("/orders/9999", headers=headers).status_code == 404


def test_user_order_lists(client, headers, catalog, address):
    _add(client, headers, catalog.sofa.id)
    _place(client, headers, address)
    _add(client, headers, catalog.lamp.id)
    _place(client, headers, address)

    orders = client.get("/orders/user", headers=headers).json()
    assert [o["items"][0]["title"] for o in orders] == ["Lamp", "Sofa"]
    assert len(client.get("/orders/user/details", headers=headers).json()) == 2


def test_invoice_json_and_pdf(client, headers, catalog, address):
    _add(client, headers, catalog.sofa.id)
    order_id = _place(client, headers, address).json()["order_id"]

    invoice = client.get(f"/orders/invoice/{order_id}", headers=headers).json()
    assert invoice["invoice_id"] == f"INV-{order_id}"
    assert invoice["gst"] == round(1000 * 0.18, 2)

    pdf = client.get(f"/orders/invoice/{order_id}/pdf", headers=headers)
    assert pdf.headers["content-type"] == "application/pdf"
    assert pdf.content.startswith(b"%PDF")


def test_admin_list_filters(client, headers, admin_headers, catalog, address):
    _add(client, headers, catalog.sofa.id, 2)
    order_id = _place(client, headers, address).json()["order_id"]

    res = client.get("/orders/", params={"order_id": f"ORD{order_id:08d}"}, headers=admin_headers).json()
    assert res["pagination"]["total"] == 1
    assert res["data"][0]["qty"] == 2
    assert res["data"][0]["payment_status"] == "PENDING"

    res = client.get("/orders/", params={"status": "delivered"}, headers=admin_headers).json()
    assert res["pagination"]["total"] == 0
    assert client.get("/orders/", params={"order_id": "ORDX"}, headers=admin_headers).status_code == 400
    assert client.get("/orders/", headers=headers).status_code == 403


def test_delivery_marks_cod_payment_paid(client, headers, admin_headers, catalog, address, session):
    _add(client, headers, catalog.sofa.id)
    order_id = _place(client, headers, address).json()["order_id"]

    assert client.patch(f"/orders/{order_id}", json={"status": "bogus"}, headers=admin_headers).status_code == 400

    res = client.patch(f"/orders/{order_id}", json={"status": "delivered"}, headers=admin_headers)

    assert res.status_code == 200
    payment = session.exec(select(Payment).where(Payment.order_id == order_id)).one()
    assert payment.status == "SUCCESS"
    assert payment.paid_at is not None


def test_item_cancellation_flow(client, headers, admin_headers, catalog, address, session):
    _add(client, headers, catalog.sofa.id, 1)
    _add(client, headers, catalog.lamp.id, 1)
    order_id = _place(client, headers, address).json()["order_id"]
    items = session.exec(select(OrderItem).where(OrderItem.order_id == order_id).order_by(OrderItem.id)).all()
    sofa_item, lamp_item = items

    res = client.patch(f"/orders/items/{sofa_item.id}/request-cancel", json={"order_id": order_id + 1}, headers=headers)
    assert res.status_code == 400

    res = client.patch(f"/orders/items/{sofa_item.id}/request-cancel", json={"order_id": order_id}, headers=headers)
    assert res.json()["item"]["status"] == "CANCEL_REQUESTED"
    # asking twice is harmless
    res = client.patch(f"/orders/items/{sofa_item.id}/request-cancel", json={"order_id": order_id}, headers=headers)
    assert res.status_code == 200

    for item in (sofa_item, lamp_item):
        res = client.patch(f"/orders/items/{item.id}", json={"status": "cancelled", "order_id": order_id}, headers=admin_headers)
        assert res.status_code == 200

    assert res.json()["order_status"] == "CANCELLED"
    assert session.get(Product, catalog.sofa.id).stock == 5

    # final state blocks further requests
    res = client.patch(f"/orders/items/{lamp_item.id}/request-cancel", json={"order_id": order_id}, headers=headers)
    assert res.status_code == 400


def test_item_moderation_rejects_unknown_status(client, headers, admin_headers, catalog, address, session):
    _add(client, headers, catalog.sofa.id)
    order_id = _place(client, headers, address).json()["order_id"]
    item = session.exec(select(OrderItem).where(OrderItem.order_id == order_id)).one()

    res = client.patch(f"/orders/items/{item.id}", json={"status": "PLACED", "order_id": order_id}, headers=admin_headers)
    assert res.status_code == 400
    assert client.patch("/orders/items/9999", json={"status": "APPROVED", "order_id": order_id}, headers=admin_headers).status_code == 404


def test_cancelled_item_cannot_be_approved(client, headers, admin_headers, catalog, address, session):
    _add(client, headers, catalog.sofa.id, 2)
    _add(client, headers, catalog.lamp.id, 1)
    order_id = _place(client, headers, address).json()["order_id"]
    sofa_item = session.exec(
        select(OrderItem).where(OrderItem.order_id == order_id, OrderItem.title == "Sofa")
    ).one()

    res = client.patch(f"/orders/items/{sofa_item.id}", json={"status": "CANCELLED", "order_id": order_id}, headers=admin_headers)
    assert res.status_code == 200
    assert session.get(Product, catalog.sofa.id).stock == 5

    res = client.patch(f"/orders/items/{sofa_item.id}", json={"status": "APPROVED", "order_id": order_id}, headers=admin_headers)

    assert res.status_code == 400
    session.refresh(sofa_item)
    assert sofa_item.status == "CANCELLED"
    assert session.get(Product, catalog.sofa.id).stock == 5


def test_cancelled_order_cannot_be_reopened(client, headers, admin_headers, catalog, address, session):
    _add(client, headers, catalog.sofa.id)
    order_id = _place(client, headers, address).json()["order_id"]
    client.patch(f"/orders/{order_id}", json={"status": "CANCELLED"}, headers=admin_headers)

    for status in ("DELIVERED", "PENDING"):
        res = client.patch(f"/orders/{order_id}", json={"status": status}, headers=admin_headers)
        assert res.status_code == 400

    order = session.get(Order, order_id)
    session.refresh(order)
    assert order.status == "CANCELLED"
    payment = session.exec(select(Payment).where(Payment.order_id == order_id)).one()
    assert payment.status == "PENDING"
    assert session.get(Product, catalog.sofa.id).stock == 5


def test_coupon_without_discount_stays_pending(client, headers, catalog, address, session, user):
    session.add(Coupon(code="BIGSPEND", value=10, min_order_amount=5000))
    session.commit()
    _add(client, headers, catalog.sofa.id)
    client.post("/coupons/apply", json={"code": "BIGSPEND"}, headers=headers)

    order_id = _place(client, headers, address).json()["order_id"]

    order = session.get(Order, order_id)
    assert order.coupon_id is None
    assert order.coupon_discount == 0
    applied = session.exec(select(AppliedCoupon).where(AppliedCoupon.user_id == user.id)).one()
    assert applied.state == AppliedCouponState.PENDING.value
    assert applied.order_id is None
