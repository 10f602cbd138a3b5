from sqlalchemy.exc import OperationalError

from crud import notifications as crud_notifications


def seed(client, admin_headers):
    client.post(
        "/inventory",
        json={"name": "Feed", "category": "Feed", "currentStock": 0, "minStock": 20, "unit": "kg", "supplier": "AgriFeeds"},
        headers=admin_headers,
    )
    client.post(
        "/sales/transactions",
        json={
            "roosterId": "R-001",
            "breed": "Kelso",
            "customerName": "Juan",
            "customerContact": "0917",
            "amount": 15000,
            "paymentMethod": "cash",
        },
        headers=admin_headers,
    )
    client.post("/public/reviews", json={"customer": "Pedro", "rating": 4, "rooster": "Kelso", "comment": "Good"})
    client.post(
        "/roosters",
        json={
            "id": "R-009",
            "breedId": "b1",
            "breed": "Sweater",
            "age": "8 months",
            "weight": "2 kg",
            "price": "9000",
            "status": "Quarantine",
            "health": "fair",
            "images": [],
        },
        headers=admin_headers,
    )


def test_feed_collects_every_source(client, admin_headers, staff_headers):
    seed(client, admin_headers)

    response = client.get("/notifications", headers=staff_headers)

    assert response.status_code == 200
    feed = response.json()["data"]
    assert sorted(n["type"] for n in feed) == ["feedback", "health", "inventory", "sales"]
    by_type = {n["type"]: n for n in feed}
    assert by_type["inventory"]["title"] == "Critical Stock Alert"
    assert by_type["inventory"]["description"] == "Feed running low. Only 0 kg remaining."
    assert by_type["sales"]["description"].endswith("sold for ₱15,000.00")
    assert by_type["feedback"]["description"] == "4-star rating from Pedro on Kelso"
    assert by_type["health"]["id"] == "health-R-009"
    assert all(n["read"] is False for n in feed)
    timestamps = [n["timestamp"] for n in feed]
    assert timestamps == sorted(timestamps, reverse=True)


def test_failing_source_is_skipped(client, admin_headers, staff_headers, monkeypatch):
    seed(client, admin_headers)

    def broken(db, reference):
        raise OperationalError("SELECT 1", {}, Exception("connection lost"))

    monkeypatch.setitem(crud_notifications.SOURCES, "sales", broken)

    feed = client.get("/notifications", headers=staff_headers).json()["data"]

    assert "sales" not in {n["type"] for n in feed}
    assert len(feed) == 3


def test_feed_is_capped(client, admin_headers, staff_headers, monkeypatch):
    def many(db, reference):
        return [
            crud_notifications._notification("sales", f"sale-{i}", "New Sale Completed", "", reference, reference)
            for i in range(30)
        ]

    monkeypatch.setitem(crud_notifications.SOURCES, "sales", many)

    feed = client.get("/notifications", headers=staff_headers).json()["data"]

    assert len(feed) == crud_notifications.FEED_LIMIT


def test_viewer_cannot_read_notifications(client, viewer_headers):
    assert client.get("/notifications", headers=viewer_headers).status_code == 403
