from datetime import datetime
from typing import Optional

from schemas.base import CamelModel, NonEmptyStr


class SupplierCreate(CamelModel):
    name: NonEmptyStr
    phone: NonEmptyStr
    contact_person: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None


class SupplierUpdate(CamelModel):
    name: Optional[NonEmptyStr] = None
    phone: Optional[NonEmptyStr] = None
    contact_person: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None


class Supplier(CamelModel):
    id: str
    name: str
    contact_person: Optional[str] = None
    phone: str
    email: Optional[str] = None
    address: Optional[str] = None
    items_supplied: int = 0
    total_orders: int = 0
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SupplierStats(CamelModel):
    total_suppliers: int
    active_suppliers: int
    total_items_supplied: int
