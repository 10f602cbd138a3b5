SUPPLIER = {"name": "AgriFeeds", "phone": "+63 2 8123 4567", "contactPerson": "Ana Reyes"}


def create_supplier(client, headers, **overrides):
    response = client.post("/suppliers", json={**SUPPLIER, **overrides}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def create_item(client, headers, name, supplier):
    response = client.post(
        "/inventory",
        json={"name": name, "category": "Feed", "currentStock": 10, "minStock": 5, "unit": "kg", "supplier": supplier},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


def test_create_starts_with_zero_counts(client, admin_headers):
    supplier = create_supplier(client, admin_headers)
    assert supplier["itemsSupplied"] == 0
    assert supplier["totalOrders"] == 0
    assert supplier["contactPerson"] == "Ana Reyes"
    assert "email" not in supplier


def test_missing_phone_is_rejected(client, admin_headers):
    response = client.post("/suppliers", json={"name": "AgriFeeds"}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_REQUEST"


def test_counts_follow_inventory_and_restocks(client, admin_headers):
    supplier = create_supplier(client, admin_headers)
    feed = create_item(client, admin_headers, "Feed", "AgriFeeds")
    create_item(client, admin_headers, "Grit", "AgriFeeds")
    create_item(client, admin_headers, "Vitamins", "VetCo")
    client.post(f"/inventory/{feed['id']}/restock", json={"amount": 5}, headers=admin_headers)
    client.post(f"/inventory/{feed['id']}/restock", json={"amount": 5, "reason": "Purchase Order"}, headers=admin_headers)
    client.post(f"/inventory/{feed['id']}/consume", json={"amount": 1, "reason": "Broken"}, headers=admin_headers)

    fetched = client.get(f"/suppliers/{supplier['id']}", headers=admin_headers).json()["data"]

    assert fetched["itemsSupplied"] == 2
    assert fetched["totalOrders"] == 2


def test_list_is_ordered_by_name(client, admin_headers, staff_headers):
    for name in ("VetCo", "AgriFeeds", "Manila Grains"):
        create_supplier(client, admin_headers, name=name)

    names = [s["name"] for s in client.get("/suppliers", headers=staff_headers).json()["data"]]

    assert names == ["AgriFeeds", "Manila Grains", "VetCo"]


def test_stats(client, admin_headers):
    create_supplier(client, admin_headers)
    create_supplier(client, admin_headers, name="VetCo")
    create_item(client, admin_headers, "Feed", "AgriFeeds")

    stats = client.get("/suppliers/stats", headers=admin_headers).json()["data"]

    assert stats == {"totalSuppliers": 2, "activeSuppliers": 1, "totalItemsSupplied": 1}


def test_update_ignores_null_required_fields(client, admin_headers):
    supplier = create_supplier(client, admin_headers, email="sales@agrifeeds.ph")

    response = client.put(
        f"/suppliers/{supplier['id']}",
        json={"name": None, "phone": "0917 555 0000", "email": None},
        headers=admin_headers,
    )

    updated = response.json()["data"]
    assert updated["name"] == "AgriFeeds"
    assert updated["phone"] == "0917 555 0000"
    assert "email" not in updated


def test_rename_recounts_items(client, admin_headers):
    supplier = create_supplier(client, admin_headers, name="Agri Feeds")
    create_item(client, admin_headers, "Feed", "AgriFeeds")

    renamed = client.put(f"/suppliers/{supplier['id']}", json={"name": "AgriFeeds"}, headers=admin_headers).json()["data"]

    assert renamed["itemsSupplied"] == 1


def test_delete(client, admin_headers):
    supplier = create_supplier(client, admin_headers)

    assert client.delete(f"/suppliers/{supplier['id']}", headers=admin_headers).json()["data"] == {"deleted": True}
    assert client.get(f"/suppliers/{supplier['id']}", headers=admin_headers).status_code == 404
    assert client.delete(f"/suppliers/{supplier['id']}", headers=admin_headers).status_code == 404


def test_staff_may_read_but_not_write(client, admin_headers, staff_headers):
    supplier = create_supplier(client, admin_headers)

    assert client.get("/suppliers/stats", headers=staff_headers).status_code == 200
    assert client.post("/suppliers", json=SUPPLIER, headers=staff_headers).status_code == 403
    assert client.put(f"/suppliers/{supplier['id']}", json={"notes": "x"}, headers=staff_headers).status_code == 403
    assert client.delete(f"/suppliers/{supplier['id']}", headers=staff_headers).status_code == 403
