import pytest

from crud.reviews import clamp_testimonial_limit

REVIEW = {"customer": "Pedro", "rating": 5, "rooster": "Kelso R-001", "comment": "Strong and healthy bird."}


def submit(client, **overrides):
    response = client.post("/public/reviews", json={**REVIEW, **overrides})
    assert response.status_code == 201, response.text
    return response.json()["data"]


def moderate(client, headers, review_id, status):
    return client.put("/feedback/reviews", json={"id": review_id, "status": status}, headers=headers)


def test_public_submission_is_pending(client):
    review = submit(client)
    assert review["status"] == "pending"
    assert review["rating"] == 5
    assert review["date"]


@pytest.mark.parametrize("rating", [6, -1])
def test_out_of_range_rating(client, rating):
    response = client.post("/public/reviews", json={**REVIEW, "rating": rating})
    assert response.status_code == 400
    assert response.json()["error"] == {"code": "INVALID_RATING", "message": "Rating must be between 1 and 5"}


@pytest.mark.parametrize("override", [{"rating": 0}, {"comment": "   "}, {"customer": ""}])
def test_missing_fields(client, override):
    response = client.post("/public/reviews", json={**REVIEW, **override})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_REQUEST"


def test_signed_in_submission_is_pending_too(client, viewer_headers):
    response = client.post("/feedback/reviews", json=REVIEW, headers=viewer_headers)
    assert response.status_code == 201
    assert response.json()["data"]["status"] == "pending"


def test_list_and_filter(client, staff_headers):
    first = submit(client)
    submit(client, customer="Maria", rating=4)
    moderate(client, staff_headers, first["id"], "published")

    everything = client.get("/feedback/reviews", headers=staff_headers).json()["data"]
    published = client.get("/feedback/reviews?status=published", headers=staff_headers).json()["data"]

    assert len(everything) == 2
    assert [r["id"] for r in published] == [first["id"]]


def test_viewer_cannot_list(client, viewer_headers):
    assert client.get("/feedback/reviews", headers=viewer_headers).status_code == 403


def test_update_status(client, staff_headers):
    review = submit(client)

    response = moderate(client, staff_headers, review["id"], "hidden")

    assert response.json() == {
        "success": True,
        "data": {"id": review["id"], "status": "hidden", "message": "Review status updated successfully"},
    }


def test_update_status_rejects_unknown_status(client, staff_headers):
    review = submit(client)
    response = moderate(client, staff_headers, review["id"], "archived")
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_STATUS"


def test_update_status_of_missing_review(client, staff_headers):
    response = moderate(client, staff_headers, "ghost", "published")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "REVIEW_NOT_FOUND"


def test_delete_is_admin_only(client, admin_headers, staff_headers):
    review = submit(client)

    assert client.delete(f"/feedback/reviews?id={review['id']}", headers=staff_headers).status_code == 403
    assert client.delete(f"/feedback/reviews?id={review['id']}", headers=admin_headers).status_code == 200
    assert client.delete(f"/feedback/reviews?id={review['id']}", headers=admin_headers).status_code == 404
    assert client.delete("/feedback/reviews", headers=admin_headers).status_code == 400


def test_testimonials_show_published_only(client, staff_headers):
    shown = submit(client)
    submit(client, customer="Hidden")
    moderate(client, staff_headers, shown["id"], "published")

    testimonials = client.get("/public/testimonials").json()["data"]

    assert [t["id"] for t in testimonials] == [shown["id"]]
    assert "status" not in testimonials[0]


def test_testimonials_limit(client, staff_headers):
    for i in range(3):
        review = submit(client, customer=f"Customer {i}")
        moderate(client, staff_headers, review["id"], "published")

    assert len(client.get("/public/testimonials?limit=2").json()["data"]) == 2


@pytest.mark.parametrize("raw, expected", [
    (None, 10),
    ("", 10),
    ("abc", 10),
    ("0", 10),
    ("-4", 1),
    ("7", 7),
    ("500", 50),
])
def test_clamp_testimonial_limit(raw, expected):
    assert clamp_testimonial_limit(raw) == expected
