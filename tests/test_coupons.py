from datetime import datetime, timedelta

from sqlmodel import select

from app.models.coupon import AppliedCoupon, AppliedCouponState, Coupon


def _coupon(session, code, **kwargs):
    coupon = Coupon(code=code, price_type=kwargs.pop("price_type", "PERCENTAGE"), value=kwargs.pop("value", 10), **kwargs)
    session.add(coupon)
    session.commit()
    session.refresh(coupon)
    return coupon


def test_admin_creates_coupon(client, admin_headers):
    res = client.post("/coupons/", json={
        "code": " summer10 ",
        "price_type": "PERCENTAGE",
        "value": 10,
        "min_order_amount": 500,
    }, headers=admin_headers)

    assert res.status_code == 200
    assert res.json()["code"] == "SUMMER10"


def test_duplicate_code_is_rejected(client, admin_headers, session):
    _coupon(session, "SUMMER10")
    res = client.post("/coupons/", json={"code": "summer10", "price_type": "FIXED", "value": 100}, headers=admin_headers)
    assert res.status_code == 400


def test_coupon_admin_routes_need_admin(client, headers):
    res = client.post("/coupons/", json={"code": "X1", "price_type": "FIXED", "value": 1}, headers=headers)
    assert res.status_code == 403
    assert client.get("/coupons/", headers=headers).status_code == 403


def test_update_and_delete_missing_coupon(client, admin_headers):
    assert client.put("/coupons/9999", json={"value": 5}, headers=admin_headers).status_code == 404
    assert client.delete("/coupons/9999", headers=admin_headers).status_code == 404


def test_lookup_by_code(client, session):
    _coupon(session, "FLAT200", price_type="FIXED", value=200)
    assert client.get("/coupons/code/flat200").json()["value"] == 200
    assert client.get("/coupons/code/NOPE").status_code == 404


def test_apply_rejects_bad_codes(client, headers, session):
    _coupon(session, "OLD", to_date=datetime.utcnow() - timedelta(days=1))
    _coupon(session, "OFF", status=False)

    assert client.post("/coupons/apply", json={"code": "   "}, headers=headers).status_code == 400
    assert client.post("/coupons/apply", json={"code": "bad code!"}, headers=headers).status_code == 400
    assert client.post("/coupons/apply", json={"code": "MISSING"}, headers=headers).status_code == 404
    assert client.post("/coupons/apply", json={"code": "old"}, headers=headers).status_code == 400
    assert client.post("/coupons/apply", json={"code": "off"}, headers=headers).status_code == 400


def test_applied_coupon_discounts_the_cart(client, headers, catalog, session):
    _coupon(session, "SAVE10", value=10, min_order_amount=500)
    client.post("/cart/", json={"product_id": catalog.sofa.id, "quantity": 1}, headers=headers)

    res = client.post("/coupons/apply", json={"code": "save10"}, headers=headers)

    assert res.status_code == 200
    data = res.json()["data"]
    assert data["coupon"] == {"code": "SAVE10", "discount": 100}
    summary = data["price_summary"]
    assert summary["coupon_discount"] == 100
    assert summary["total_after_discount"] == 900
    assert summary["final_payable"] == 900 + 30 + 100


def test_below_minimum_gives_no_discount(client, headers, catalog, session):
    _coupon(session, "SAVE10", value=10, min_order_amount=500)
    client.post("/cart/", json={"product_id": catalog.lamp.id, "quantity": 1}, headers=headers)

    data = client.post("/coupons/apply", json={"code": "SAVE10"}, headers=headers).json()["data"]
    assert data["price_summary"]["coupon_discount"] == 0


def test_fixed_coupon_is_capped_at_subtotal(client, headers, catalog, session):
    _coupon(session, "BIG", price_type="FIXED", value=1000)
    client.post("/cart/", json={"product_id": catalog.chair.id, "quantity": 1}, headers=headers)

    data = client.post("/coupons/apply", json={"code": "BIG"}, headers=headers).json()["data"]
    assert data["price_summary"]["coupon_discount"] == 500
    assert data["price_summary"]["total_after_discount"] == 0


def test_one_pending_slot_per_user(client, headers, session, user):
    _coupon(session, "FIRST")
    _coupon(session, "SECOND")

    client.post("/coupons/apply", json={"code": "FIRST"}, headers=headers)
    client.post("/coupons/apply", json={"code": "SECOND"}, headers=headers)

    pending = session.exec(
        select(AppliedCoupon).where(
            AppliedCoupon.user_id == user.id,
            AppliedCoupon.state == AppliedCouponState.PENDING.value,
        )
    ).all()
    assert len(pending) == 1
    assert session.get(Coupon, pending[0].coupon_id).code == "SECOND"


def test_clear_coupon(client, headers, catalog, session):
    _coupon(session, "SAVE10")
    client.post("/cart/", json={"product_id": catalog.sofa.id, "quantity": 1}, headers=headers)
    client.post("/coupons/apply", json={"code": "SAVE10"}, headers=headers)

    data = client.post("/coupons/clear", headers=headers).json()["data"]
    assert data["coupon"] is None
    assert data["price_summary"]["coupon_discount"] == 0


def test_buy_now_shares_the_pending_slot(client, headers, catalog, session):
    _coupon(session, "SAVE10")
    client.post("/buy-now/", json={"product_id": catalog.sofa.id, "quantity": 2}, headers=headers)

    data = client.post("/coupons/apply-buy-now", json={"code": "SAVE10"}, headers=headers).json()["data"]
    assert data["price_summary"]["coupon_discount"] == 200

    cart = client.get("/cart/", headers=headers).json()
    assert cart["coupon"]["code"] == "SAVE10"
