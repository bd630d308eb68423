from sqlmodel import select

from app.models.cart import CartItem
from app.models.wishlist import Wishlist


def test_add_is_an_upsert(client, headers, catalog, session):
    client.post("/wishlist/", json={"product_id": catalog.sofa.id}, headers=headers)
    client.post("/wishlist/", json={"product_id": catalog.sofa.id, "quantity": 2}, headers=headers)

    rows = session.exec(select(Wishlist)).all()
    assert len(rows) == 1
    assert rows[0].quantity == 2
    assert client.get("/wishlist/count", headers=headers).json() == {"count": 1}


def test_list_shows_product(client, headers, catalog):
    client.post("/wishlist/", json={"product_id": catalog.sofa.id}, headers=headers)

    items = client.get("/wishlist/", headers=headers).json()
    assert items[0]["product"]["title"] == "Sofa"
    assert items[0]["product"]["image_url"] == "/uploads/products/sofa.jpg"
    assert items[0]["variant_id"] is None


def test_add_unknown_product(client, headers):
    assert client.post("/wishlist/", json={"product_id": 9999}, headers=headers).status_code == 404


def test_remove_every_entry_for_product(client, headers, catalog):
    client.post("/wishlist/", json={"product_id": catalog.chair.id}, headers=headers)
    client.post("/wishlist/", json={"product_id": catalog.chair.id, "variant_id": catalog.blue_chair.id}, headers=headers)

    res = client.delete(f"/wishlist/{catalog.chair.id}", headers=headers)
    assert res.json()["count"] == 2


def test_move_to_cart_merges_quantity(client, headers, catalog, session):
    client.post("/cart/", json={"product_id": catalog.sofa.id, "quantity": 1}, headers=headers)
    client.post("/wishlist/", json={"product_id": catalog.sofa.id, "quantity": 2}, headers=headers)

    res = client.post(f"/wishlist/move-to-cart/{catalog.sofa.id}", headers=headers)

    assert res.status_code == 200
    lines = session.exec(select(CartItem)).all()
    assert [(l.product_id, l.quantity) for l in lines] == [(catalog.sofa.id, 3)]
    assert session.exec(select(Wishlist)).all() == []


def test_move_to_cart_needs_wishlisted_product(client, headers, catalog):
    assert client.post(f"/wishlist/move-to-cart/{catalog.sofa.id}", headers=headers).status_code == 404
