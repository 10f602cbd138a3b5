from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Optional
import logging

from database import get_db
from schemas.suppliers import Supplier, SupplierCreate, SupplierUpdate
from utils.auth_utils import SessionUser, get_session_user
from utils.responses import json_success, serialize, serialize_many
from crud import suppliers as crud_suppliers

router = APIRouter(prefix="/suppliers", tags=["Suppliers"])
logger = logging.getLogger("suppliers")


@router.get("")
def read_suppliers(
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    """Suppliers ordered by name, with their item and order counts refreshed."""
    suppliers = crud_suppliers.get_suppliers(db, user)
    return json_success(serialize_many(Supplier, suppliers))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_supplier(
    supplier: SupplierCreate,
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    db_supplier = crud_suppliers.create_supplier(db, user, supplier)
    return json_success(serialize(Supplier, db_supplier), status_code=status.HTTP_201_CREATED)


@router.get("/stats")
def read_supplier_stats(
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    stats = crud_suppliers.get_supplier_stats(db, user)
    return json_success(stats.model_dump(mode="json", by_alias=True))


@router.get("/{supplier_id}")
def read_supplier(
    supplier_id: str,
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    db_supplier = crud_suppliers.get_supplier(db, user, supplier_id)
    return json_success(serialize(Supplier, db_supplier))


@router.put("/{supplier_id}")
def update_supplier(
    supplier_id: str,
    supplier: SupplierUpdate,
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    db_supplier = crud_suppliers.update_supplier(db, user, supplier_id, supplier)
    return json_success(serialize(Supplier, db_supplier))


@router.delete("/{supplier_id}")
def delete_supplier(
    supplier_id: str,
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    crud_suppliers.delete_supplier(db, user, supplier_id)
    return json_success({"deleted": True})
