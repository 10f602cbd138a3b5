import logging
from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session

from models.inventory_activity import InventoryActivity
from models.inventory_items import InventoryItem
from models.suppliers import Supplier
from schemas.suppliers import SupplierCreate, SupplierStats, SupplierUpdate
from utils.errors import ServiceError
from utils.permissions import SUPPLIER_POLICY, assert_permission
from utils.retry import run_in_transaction

logger = logging.getLogger(__name__)

RESOURCE = "suppliers"

REQUIRED_FIELDS = {"name", "phone"}


def _count_supplied(db: Session, supplier_name: str):
    """(items supplied, restock orders) for one supplier, matched by name text."""
    item_ids = [
        row.id for row in db.query(InventoryItem.id).filter(InventoryItem.supplier == supplier_name)
    ]
    if not item_ids:
        return 0, 0
    total_orders = (
        db.query(func.count(InventoryActivity.id))
        .filter(InventoryActivity.type == "restock", InventoryActivity.item_id.in_(item_ids))
        .scalar()
    )
    return len(item_ids), total_orders or 0


def refresh_supplier_counts(db: Session, suppliers: List[Supplier]) -> List[Supplier]:
    """Recount every supplier against inventory and persist the figures that changed."""
    changed = False
    for supplier in suppliers:
        items_supplied, total_orders = _count_supplied(db, supplier.name)
        if (supplier.items_supplied, supplier.total_orders) != (items_supplied, total_orders):
            supplier.items_supplied = items_supplied
            supplier.total_orders = total_orders
            changed = True
    if changed:
        db.commit()
    return suppliers


def get_suppliers(db: Session, user) -> List[Supplier]:
    assert_permission(user, "read", SUPPLIER_POLICY, RESOURCE)
    suppliers = db.query(Supplier).order_by(Supplier.name.asc()).all()
    return refresh_supplier_counts(db, suppliers)


def get_supplier(db: Session, user, supplier_id: str) -> Supplier:
    assert_permission(user, "read", SUPPLIER_POLICY, RESOURCE)
    db_supplier = db.get(Supplier, supplier_id)
    if db_supplier is None:
        raise ServiceError("NOT_FOUND", "Supplier not found.")
    return refresh_supplier_counts(db, [db_supplier])[0]


def create_supplier(db: Session, user, supplier: SupplierCreate) -> Supplier:
    assert_permission(user, "create", SUPPLIER_POLICY, RESOURCE)

    def work(session: Session) -> Supplier:
        db_supplier = Supplier(**supplier.model_dump(), created_by=user.identifier)
        session.add(db_supplier)
        session.flush()
        db_supplier.items_supplied, db_supplier.total_orders = _count_supplied(session, db_supplier.name)
        return db_supplier

    db_supplier = run_in_transaction(db, work)
    logger.info(f"Supplier '{db_supplier.name}' (ID: {db_supplier.id}) created by {user.identifier}")
    return db_supplier


def update_supplier(db: Session, user, supplier_id: str, supplier: SupplierUpdate) -> Supplier:
    assert_permission(user, "update", SUPPLIER_POLICY, RESOURCE)
    update_data = supplier.model_dump(exclude_unset=True)

    def work(session: Session) -> Supplier:
        db_supplier = session.query(Supplier).filter(Supplier.id == supplier_id).with_for_update().first()
        if db_supplier is None:
            raise ServiceError("NOT_FOUND", "Supplier not found.")
        for key, value in update_data.items():
            if value is None and key in REQUIRED_FIELDS:
                continue
            setattr(db_supplier, key, value)
        db_supplier.updated_by = user.identifier
        db_supplier.items_supplied, db_supplier.total_orders = _count_supplied(session, db_supplier.name)
        return db_supplier

    db_supplier = run_in_transaction(db, work)
    logger.info(f"Supplier '{db_supplier.name}' (ID: {supplier_id}) updated by {user.identifier}")
    return db_supplier


def delete_supplier(db: Session, user, supplier_id: str) -> None:
    assert_permission(user, "delete", SUPPLIER_POLICY, RESOURCE)

    def work(session: Session) -> str:
        db_supplier = session.query(Supplier).filter(Supplier.id == supplier_id).with_for_update().first()
        if db_supplier is None:
            raise ServiceError("NOT_FOUND", "Supplier not found.")
        name = db_supplier.name
        session.delete(db_supplier)
        return name

    name = run_in_transaction(db, work)
    logger.info(f"Supplier '{name}' (ID: {supplier_id}) deleted by {user.identifier}")


def get_supplier_stats(db: Session, user) -> SupplierStats:
    assert_permission(user, "readStats", SUPPLIER_POLICY, RESOURCE)
    suppliers = refresh_supplier_counts(db, db.query(Supplier).all())
    return SupplierStats(
        total_suppliers=len(suppliers),
        active_suppliers=sum(1 for s in suppliers if s.items_supplied > 0),
        total_items_supplied=sum(s.items_supplied for s in suppliers),
    )
