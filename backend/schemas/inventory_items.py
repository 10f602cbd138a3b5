from datetime import date, datetime
from typing import Literal, Optional

from schemas.base import CamelModel, NonEmptyStr, NonNegativeNumber, Number

InventoryStatus = Literal["adequate", "low", "critical"]

RESTOCK_REASONS = (
    "Purchase Order",
    "Supplier Delivery",
    "Stock Transfer",
    "Return from Use",
    "Inventory Adjustment",
    "Other",
)

CONSUME_REASONS = (
    "Broken",
    "Lost",
    "Sold",
    "Used in Operations",
    "Expired",
    "Damaged",
    "Other",
)

DEFAULT_RESTOCK_REASON = "Supplier Delivery"


class InventoryItemCreate(CamelModel):
    name: NonEmptyStr
    category: NonEmptyStr
    current_stock: NonNegativeNumber
    min_stock: NonNegativeNumber
    unit: NonEmptyStr
    supplier: NonEmptyStr
    price: Optional[NonNegativeNumber] = None
    location: Optional[str] = None
    description: Optional[str] = None
    last_restocked: Optional[date] = None
    expiry_date: Optional[date] = None


class InventoryItemUpdate(CamelModel):
    # Absent fields are left alone; an explicit null removes optional fields
    # (price, location, description, expiryDate) and is ignored for the rest.
    name: Optional[NonEmptyStr] = None
    category: Optional[NonEmptyStr] = None
    current_stock: Optional[NonNegativeNumber] = None
    min_stock: Optional[NonNegativeNumber] = None
    unit: Optional[NonEmptyStr] = None
    supplier: Optional[NonEmptyStr] = None
    price: Optional[NonNegativeNumber] = None
    location: Optional[str] = None
    description: Optional[str] = None
    last_restocked: Optional[date] = None
    expiry_date: Optional[date] = None


class RestockRequest(CamelModel):
    amount: Number
    reason: Optional[str] = None


class ConsumeRequest(CamelModel):
    amount: Number
    reason: str


class InventoryItem(CamelModel):
    id: str
    display_id: Optional[str] = None
    created_at: Optional[date] = None
    name: str
    category: str
    current_stock: float
    min_stock: float
    unit: str
    last_restocked: Optional[date] = None
    supplier: str
    status: InventoryStatus
    description: Optional[str] = None
    price: Optional[float] = None
    location: Optional[str] = None
    expiry_date: Optional[date] = None


class InventoryStats(CamelModel):
    total_items: int = 0
    low_stock_alerts: int = 0
    critical_items: int = 0
    monthly_spend: float = 0.0


class InventoryActivity(CamelModel):
    id: str
    item_id: str
    item_name: str
    type: Literal["restock", "consume"]
    amount: float
    unit: str
    reason: str
    previous_stock: float
    new_stock: float
    performed_by: str
    performed_at: datetime
