from sqlmodel import select

from app.models.product import ProductImage


def test_admin_creates_product_with_images(client, admin_headers, catalog, session):
    res = client.post("/admin/products/", json={
        "title": "Bookshelf",
        "category_id": catalog.living.id,
        "mrp": 4000,
        "selling_price": 3500,
        "stock": 3,
        "images": [{"url": "shelf.jpg", "alt": "Shelf", "is_main": True}],
    }, headers=admin_headers)

    assert res.status_code == 200
    product_id = res.json()["id"]
    images = session.exec(select(ProductImage).where(ProductImage.product_id == product_id)).all()
    assert [i.url for i in images] == ["shelf.jpg"]


def test_create_with_unknown_category(client, admin_headers):
    res = client.post("/admin/products/", json={
        "title": "Bookshelf", "category_id": 9999, "mrp": 10, "selling_price": 10,
    }, headers=admin_headers)
    assert res.status_code == 400


def test_admin_list_filters(client, admin_headers, catalog):
    res = client.get("/admin/products/", params={"search": "cha"}, headers=admin_headers).json()
    assert [p["title"] for p in res["data"]] == ["Chair"]

    res = client.get("/admin/products/", params={"category_id": catalog.seating.id}, headers=admin_headers).json()
    assert res["pagination"]["total"] == 2


def test_public_detail_with_variants(client, catalog):
    data = client.get(f"/products/{catalog.chair.id}").json()

    assert data["title"] == "Chair"
    assert data["image_url"] == "/uploads/products/chair.jpg"
    assert data["category_slug"] == f"/living-room/seating-{catalog.seating.id}"
    assert data["delivery_charges"] == 50
    assert data["estimated_delivery_date"] is not None

    variant = data["variants"][0]
    assert variant["price"] == 550
    assert variant["color"] == "Blue"
    assert variant["image_url"] == "/uploads/products/chair-blue.jpg"
    # size falls back to the product, which has none
    assert variant["size"] is None


def test_product_without_sla_has_no_eta(client, catalog):
    data = client.get(f"/products/{catalog.lamp.id}").json()
    assert data["estimated_delivery_date"] is None
    assert data["estimated_date_text"] is None


def test_inactive_product_is_hidden(client, admin_headers, catalog):
    client.put(f"/admin/products/{catalog.lamp.id}", json={"status": False}, headers=admin_headers)

    assert client.get(f"/products/{catalog.lamp.id}").status_code == 404
    titles = [p["title"] for p in client.get("/products/").json()["data"]]
    assert "Lamp" not in titles


def test_variant_of_another_product(client, admin_headers, catalog):
    res = client.put(
        f"/admin/products/{catalog.sofa.id}/variants/{catalog.blue_chair.id}",
        json={"stock": 9},
        headers=admin_headers,
    )
    assert res.status_code == 400
    assert client.delete(f"/admin/products/{catalog.sofa.id}/variants/9999", headers=admin_headers).status_code == 404


def test_details_upsert(client, admin_headers, catalog):
    res = client.put(f"/admin/products/{catalog.lamp.id}/details", json={"sla": 4, "warranty": "1 year"}, headers=admin_headers)
    assert res.json()["sla"] == 4

    res = client.put(f"/admin/products/{catalog.lamp.id}/details", json={"delivery_charges": 0}, headers=admin_headers)
    assert res.json()["sla"] == 4
    assert res.json()["delivery_charges"] == 0


def test_delete_product_removes_children(client, admin_headers, catalog, session):
    res = client.delete(f"/admin/products/{catalog.chair.id}", headers=admin_headers)

    assert res.status_code == 200
    assert client.get(f"/products/{catalog.chair.id}").status_code == 404
    remaining = session.exec(select(ProductImage.url)).all()
    assert sorted(remaining) == ["sofa.jpg"]
