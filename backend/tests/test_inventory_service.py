import math

import pytest
from sqlalchemy.exc import SQLAlchemyError

from crud import inventory_items as crud
from models.inventory_activity import InventoryActivity
from models.inventory_meta import INVENTORY_STATS_DOC_ID, InventoryMeta
from schemas.inventory_items import InventoryItemCreate, InventoryItemUpdate
from utils.errors import ServiceError
from utils.formatting import calculate_inventory_status
from utils.time_utils import today


def feed(**overrides):
    data = {
        "name": "Feed",
        "category": "Feed",
        "current_stock": 10,
        "min_stock": 20,
        "unit": "kg",
        "supplier": "AgriFeeds",
    }
    data.update(overrides)
    return InventoryItemCreate(**data)


def assert_stats_consistent(db, admin):
    stats = crud.get_inventory_stats(db, admin)
    items = crud.get_inventory_items(db, admin)
    assert stats.total_items == len(items)
    assert stats.low_stock_alerts + stats.critical_items <= stats.total_items
    return stats


def test_create_sets_derived_fields(db_session, admin):
    item = crud.create_inventory_item(db_session, admin, feed())

    assert len(item.id) == 20
    assert item.status == "critical"
    assert item.created_at == today()
    assert item.last_restocked == today()
    assert item.display_id == f"#{item.id[:4].upper()}-{today().strftime('%m%d')}"
    assert item.updated_by == "admin@example.com"


def test_create_then_get_round_trip(db_session, admin):
    created = crud.create_inventory_item(db_session, admin, feed(current_stock=40, min_stock=20, price=12.5))
    fetched = crud.get_inventory_item(db_session, admin, created.id)

    assert fetched.status == calculate_inventory_status(fetched.current_stock, fetched.min_stock)
    assert fetched.price == 12.5


def test_create_writes_stats_singleton(db_session, admin):
    crud.create_inventory_item(db_session, admin, feed(price=2.0))
    crud.create_inventory_item(db_session, admin, feed(name="Grit", current_stock=100, price=1.5))

    meta = db_session.get(InventoryMeta, INVENTORY_STATS_DOC_ID)
    assert meta.total_items == 2
    assert meta.low_stock_alerts == 0
    assert meta.critical_items == 1
    assert math.isclose(meta.monthly_spend, 10 * 2.0 + 100 * 1.5)


def test_get_missing_item_is_not_found(db_session, admin):
    with pytest.raises(ServiceError) as exc_info:
        crud.get_inventory_item(db_session, admin, "missing")
    assert exc_info.value.code == "NOT_FOUND"


def test_feed_scenario(db_session, admin, staff):
    item = crud.create_inventory_item(db_session, admin, feed(current_stock=15))
    assert item.status == "low"

    # Exactly half the threshold is already critical
    item = crud.consume_inventory_item(db_session, staff, item.id, 5, "Used in Operations")
    assert item.current_stock == 10
    assert item.status == "critical"

    item = crud.restock_inventory_item(db_session, staff, item.id, 50, "Supplier Delivery")
    assert item.current_stock == 60
    assert item.status == "adequate"

    assert_stats_consistent(db_session, admin)


@pytest.mark.parametrize("amount", [0, -1, float("nan"), float("inf"), True, 1e300])
def test_invalid_restock_changes_nothing(db_session, admin, amount):
    item = crud.create_inventory_item(db_session, admin, feed(price=3.0))
    stats_before = crud.get_inventory_stats(db_session, admin)

    with pytest.raises(ServiceError) as exc_info:
        crud.restock_inventory_item(db_session, admin, item.id, amount, "Supplier Delivery")
    assert exc_info.value.code == "INVALID_RESTOCK_AMOUNT"

    unchanged = crud.get_inventory_item(db_session, admin, item.id)
    assert unchanged.current_stock == 10
    assert crud.get_inventory_stats(db_session, admin) == stats_before
    assert db_session.query(InventoryActivity).count() == 0


def test_consume_requires_reason(db_session, admin):
    item = crud.create_inventory_item(db_session, admin, feed())
    with pytest.raises(ServiceError) as exc_info:
        crud.consume_inventory_item(db_session, admin, item.id, 1, "   ")
    assert exc_info.value.code == "REASON_REQUIRED"


def test_consume_rejects_non_positive_amount(db_session, admin):
    item = crud.create_inventory_item(db_session, admin, feed())
    with pytest.raises(ServiceError) as exc_info:
        crud.consume_inventory_item(db_session, admin, item.id, 0, "Broken")
    assert exc_info.value.code == "INVALID_CONSUME_AMOUNT"


def test_over_consumption_goes_negative_and_critical(db_session, admin):
    item = crud.create_inventory_item(db_session, admin, feed(current_stock=3, min_stock=0))
    item = crud.consume_inventory_item(db_session, admin, item.id, 5, "Lost")

    assert item.current_stock == -2
    assert item.status == "critical"
    stats = assert_stats_consistent(db_session, admin)
    assert stats.critical_items == 1


def test_restock_and_consume_append_activity(db_session, admin, staff):
    item = crud.create_inventory_item(db_session, admin, feed())
    crud.restock_inventory_item(db_session, staff, item.id, 15, "  Purchase Order  ")
    crud.consume_inventory_item(db_session, staff, item.id, 4, "Broken")

    activity = crud.get_inventory_activity(db_session, staff, item_id=item.id)
    assert [a.type for a in activity] == ["consume", "restock"]
    consume, restock = activity
    assert (restock.previous_stock, restock.new_stock, restock.reason) == (10, 25, "Purchase Order")
    assert (consume.previous_stock, consume.new_stock) == (25, 21)
    assert consume.performed_by == "staff@example.com"
    assert consume.item_name == "Feed"


def test_activity_failure_does_not_undo_stock_change(db_session, admin, monkeypatch):
    item = crud.create_inventory_item(db_session, admin, feed())

    def broken_commit():
        raise SQLAlchemyError("activity store unavailable")

    original_record = crud._record_activity

    def record_with_failing_commit(db, *args, **kwargs):
        with monkeypatch.context() as m:
            m.setattr(db, "commit", broken_commit)
            original_record(db, *args, **kwargs)

    monkeypatch.setattr(crud, "_record_activity", record_with_failing_commit)
    restocked = crud.restock_inventory_item(db_session, admin, item.id, 5, "Supplier Delivery")

    assert restocked.current_stock == 15
    db_session.expire_all()
    assert crud.get_inventory_item(db_session, admin, item.id).current_stock == 15
    assert db_session.query(InventoryActivity).count() == 0


def test_update_merges_only_present_fields(db_session, admin):
    item = crud.create_inventory_item(db_session, admin, feed(price=4.0, location="Shed A"))

    updated = crud.update_inventory_item(db_session, admin, item.id, InventoryItemUpdate(min_stock=5))

    assert updated.min_stock == 5
    assert updated.status == "adequate"
    assert updated.price == 4.0
    assert updated.location == "Shed A"
    assert updated.name == "Feed"


def test_update_null_removes_optional_field(db_session, admin):
    item = crud.create_inventory_item(db_session, admin, feed(price=4.0))

    updated = crud.update_inventory_item(db_session, admin, item.id, InventoryItemUpdate(price=None))

    assert updated.price is None
    stats = crud.get_inventory_stats(db_session, admin)
    assert stats.monthly_spend == 0


def test_update_null_on_required_field_is_ignored(db_session, admin):
    item = crud.create_inventory_item(db_session, admin, feed())
    updated = crud.update_inventory_item(db_session, admin, item.id, InventoryItemUpdate(name=None))
    assert updated.name == "Feed"


def test_update_missing_item(db_session, admin):
    with pytest.raises(ServiceError) as exc_info:
        crud.update_inventory_item(db_session, admin, "nope", InventoryItemUpdate(min_stock=1))
    assert exc_info.value.code == "NOT_FOUND"


def test_delete_recomputes_stats(db_session, admin):
    keep = crud.create_inventory_item(db_session, admin, feed(name="Grit", current_stock=100))
    gone = crud.create_inventory_item(db_session, admin, feed())

    crud.delete_inventory_item(db_session, admin, gone.id)

    assert [i.id for i in crud.get_inventory_items(db_session, admin)] == [keep.id]
    meta = db_session.get(InventoryMeta, INVENTORY_STATS_DOC_ID)
    assert meta.total_items == 1
    assert meta.low_stock_alerts == 0


def test_delete_missing_item(db_session, admin):
    with pytest.raises(ServiceError) as exc_info:
        crud.delete_inventory_item(db_session, admin, "nope")
    assert exc_info.value.code == "NOT_FOUND"


def test_stats_invariant_after_mixed_operations(db_session, admin):
    a = crud.create_inventory_item(db_session, admin, feed(name="A", current_stock=0, min_stock=5))
    b = crud.create_inventory_item(db_session, admin, feed(name="B", current_stock=8, min_stock=10))
    c = crud.create_inventory_item(db_session, admin, feed(name="C", current_stock=50, min_stock=10))

    crud.restock_inventory_item(db_session, admin, a.id, 100, "Supplier Delivery")
    crud.consume_inventory_item(db_session, admin, c.id, 46, "Used in Operations")
    crud.update_inventory_item(db_session, admin, b.id, InventoryItemUpdate(min_stock=2))
    crud.delete_inventory_item(db_session, admin, a.id)

    stats = assert_stats_consistent(db_session, admin)
    assert stats.total_items == 2
    assert stats.critical_items == 1
    assert stats.low_stock_alerts == 0


@pytest.mark.parametrize("action", [
    lambda db, user: crud.create_inventory_item(db, user, feed()),
    lambda db, user: crud.update_inventory_item(db, user, "x", InventoryItemUpdate(min_stock=1)),
    lambda db, user: crud.delete_inventory_item(db, user, "x"),
])
def test_staff_cannot_change_catalogue(db_session, staff, action):
    with pytest.raises(ServiceError) as exc_info:
        action(db_session, staff)
    assert exc_info.value.code == "FORBIDDEN"


def test_viewer_cannot_read(db_session, viewer):
    with pytest.raises(ServiceError) as exc_info:
        crud.get_inventory_items(db_session, viewer)
    assert exc_info.value.code == "FORBIDDEN"
