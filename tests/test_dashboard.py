from io import BytesIO

from openpyxl import load_workbook


def _order_sofa(client, headers, address, catalog, quantity=2):
    client.post("/cart/", json={"product_id": catalog.sofa.id, "quantity": quantity}, headers=headers)
    return client.post("/orders/place", json={"address_id": address.id}, headers=headers).json()["order_id"]


def test_summary_counts(client, headers, admin_headers, catalog, address):
    _order_sofa(client, headers, address, catalog)

    data = client.get("/admin/dashboard/summary", headers=admin_headers).json()

    assert data["products"] == {"total": 3, "in_stock": 2, "out_of_stock": 0, "new": 3}
    assert data["categories"]["total"] == 2
    assert data["categories"]["top"][0] == {"id": catalog.seating.id, "title": "Seating", "products": 2}
    assert data["orders"]["total"] == 1
    assert data["orders"]["by_status"]["PENDING"] == 1
    assert data["orders"]["by_status"]["CANCELLED"] == 0
    assert data["top_selling"] == [
        {"product_id": catalog.sofa.id, "title": "Sofa", "sold": 2, "revenue": 2000},
    ]


def test_cancelled_items_do_not_count_as_sold(client, headers, admin_headers, catalog, address):
    order_id = _order_sofa(client, headers, address, catalog)
    client.patch(f"/orders/{order_id}", json={"status": "cancelled"}, headers=admin_headers)

    data = client.get("/admin/dashboard/summary", headers=admin_headers).json()
    assert data["top_selling"] == []
    assert data["orders"]["by_status"]["CANCELLED"] == 1


def test_summary_window_is_validated(client, admin_headers, headers):
    assert client.get("/admin/dashboard/summary", params={"days": 0}, headers=admin_headers).status_code == 422
    assert client.get("/admin/dashboard/summary", headers=headers).status_code == 403


def test_export_workbook(client, headers, admin_headers, catalog, address):
    _order_sofa(client, headers, address, catalog, quantity=1)

    res = client.get("/admin/dashboard/export", headers=admin_headers)

    assert res.status_code == 200
    assert res.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )
    wb = load_workbook(BytesIO(res.content))
    assert wb.sheetnames == ["Overview", "Orders", "Top Categories", "Top Selling"]
    assert wb["Top Selling"]["B2"].value == "Sofa"
