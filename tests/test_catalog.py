import pytest


@pytest.mark.parametrize("resource,field", [("brands", "name"), ("colors", "label"), ("sizes", "title")])
def test_duplicate_names_are_rejected(client, admin_headers, resource, field):
    assert client.post(f"/admin/{resource}", json={field: "Oak"}, headers=admin_headers).status_code == 200

    res = client.post(f"/admin/{resource}", json={field: "Oak"}, headers=admin_headers)
    assert res.status_code == 400
    assert "already exists" in res.json()["detail"]


def test_rename_to_existing_brand(client, admin_headers):
    client.post("/admin/brands", json={"name": "Oak"}, headers=admin_headers)
    teak = client.post("/admin/brands", json={"name": "Teak"}, headers=admin_headers).json()

    assert client.put(f"/admin/brands/{teak['id']}", json={"name": "Oak"}, headers=admin_headers).status_code == 400
    # keeping its own name is fine
    assert client.put(f"/admin/brands/{teak['id']}", json={"name": "Teak"}, headers=admin_headers).status_code == 200


def test_bulk_status_and_public_list(client, admin_headers):
    oak = client.post("/admin/brands", json={"name": "Oak"}, headers=admin_headers).json()
    client.post("/admin/brands", json={"name": "Teak"}, headers=admin_headers)

    assert client.patch("/admin/brands/status", json={"ids": [], "status": False}, headers=admin_headers).status_code == 400

    res = client.patch("/admin/brands/status", json={"ids": [oak["id"]], "status": False}, headers=admin_headers)
    assert res.json()["updated"] == 1

    assert [b["name"] for b in client.get("/brands").json()] == ["Teak"]
    assert len(client.get("/admin/brands", headers=admin_headers).json()) == 2


def test_missing_rows_and_admin_only(client, admin_headers, headers):
    assert client.get("/admin/sizes/9999", headers=admin_headers).status_code == 404
    assert client.delete("/admin/colors/9999", headers=admin_headers).status_code == 404
    assert client.post("/admin/brands", json={"name": "Oak"}, headers=headers).status_code == 403
