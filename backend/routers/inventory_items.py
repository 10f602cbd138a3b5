from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session
from typing import Optional
import logging

from database import get_db
from schemas.inventory_items import (
    DEFAULT_RESTOCK_REASON,
    ConsumeRequest,
    InventoryActivity,
    InventoryItem,
    InventoryItemCreate,
    InventoryItemUpdate,
    RestockRequest,
)
from utils.auth_utils import SessionUser, get_session_user
from utils.excel_export import XLSX_MEDIA_TYPE, build_inventory_workbook
from utils.responses import build_headers, json_success, serialize, serialize_many
from utils.time_utils import now
from crud import inventory_items as crud_inventory_items

router = APIRouter(prefix="/inventory", tags=["Inventory"])
logger = logging.getLogger("inventory_items")


@router.get("")
def read_inventory_items(
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    """Every inventory item, unpaginated."""
    items = crud_inventory_items.get_inventory_items(db, user)
    return json_success(serialize_many(InventoryItem, items))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_inventory_item(
    item: InventoryItemCreate,
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    new_item = crud_inventory_items.create_inventory_item(db, user, item)
    return json_success(serialize(InventoryItem, new_item), status_code=status.HTTP_201_CREATED)


# Fixed paths are registered before /{item_id} so they are not captured by it

@router.get("/stats")
def read_inventory_stats(
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    stats = crud_inventory_items.get_inventory_stats(db, user)
    return json_success(stats.model_dump(mode="json", by_alias=True))


@router.get("/activity")
def read_recent_activity(
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    """Restock and consume events across all items, newest first."""
    activity = crud_inventory_items.get_inventory_activity(db, user, limit=limit)
    return json_success(serialize_many(InventoryActivity, activity))


@router.get("/reasons")
def read_reason_options(user: Optional[SessionUser] = Depends(get_session_user)):
    return json_success(crud_inventory_items.get_reason_options(user))


@router.get("/export")
def export_inventory(
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    """Download the whole inventory as an Excel workbook."""
    items = crud_inventory_items.get_inventory_items(db, user)
    stats = crud_inventory_items.get_inventory_stats(db, user)
    output = build_inventory_workbook(items, stats, exported_by=user.identifier)

    filename = f"inventory_{now().strftime('%Y%m%d')}.xlsx"
    logger.info(f"Inventory export of {len(items)} items by {user.identifier}")
    return StreamingResponse(
        output,
        media_type=XLSX_MEDIA_TYPE,
        headers=build_headers({"Content-Disposition": f"attachment; filename={filename}"}),
    )


@router.get("/{item_id}")
def read_inventory_item(
    item_id: str,
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    db_item = crud_inventory_items.get_inventory_item(db, user, item_id)
    return json_success(serialize(InventoryItem, db_item))


@router.patch("/{item_id}")
def update_inventory_item(
    item_id: str,
    item: InventoryItemUpdate,
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    """Partial update: absent fields are kept, null removes optional fields."""
    db_item = crud_inventory_items.update_inventory_item(db, user, item_id, item)
    return json_success(serialize(InventoryItem, db_item))


@router.delete("/{item_id}")
def delete_inventory_item(
    item_id: str,
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    crud_inventory_items.delete_inventory_item(db, user, item_id)
    return json_success({"deleted": True})


@router.post("/{item_id}/restock")
def restock_inventory_item(
    item_id: str,
    body: RestockRequest,
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    reason = body.reason if body.reason and body.reason.strip() else DEFAULT_RESTOCK_REASON
    db_item = crud_inventory_items.restock_inventory_item(db, user, item_id, body.amount, reason)
    return json_success(serialize(InventoryItem, db_item))


@router.post("/{item_id}/consume")
def consume_inventory_item(
    item_id: str,
    body: ConsumeRequest,
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    db_item = crud_inventory_items.consume_inventory_item(db, user, item_id, body.amount, body.reason)
    return json_success(serialize(InventoryItem, db_item))


@router.get("/{item_id}/activity")
def read_item_activity(
    item_id: str,
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    activity = crud_inventory_items.get_inventory_activity(db, user, item_id=item_id, limit=limit)
    return json_success(serialize_many(InventoryActivity, activity))
