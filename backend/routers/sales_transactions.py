from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
import logging

from database import get_db
from schemas.sales_transactions import SalesTransaction, SalesTransactionCreate, SalesTransactionUpdate
from utils.auth_utils import SessionUser, get_session_user
from utils.responses import json_success, serialize, serialize_many
from crud import sales_transactions as crud_sales

router = APIRouter(prefix="/sales", tags=["Sales"])
logger = logging.getLogger("sales_transactions")


@router.get("/transactions")
def read_sales_transactions(
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    """All sales, newest first."""
    sales = crud_sales.get_sales_transactions(db, user)
    return json_success(serialize_many(SalesTransaction, sales))


@router.post("/transactions", status_code=status.HTTP_201_CREATED)
def create_sales_transaction(
    sale: SalesTransactionCreate,
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    db_sale = crud_sales.create_sales_transaction(db, user, sale)
    return json_success(serialize(SalesTransaction, db_sale), status_code=status.HTTP_201_CREATED)


@router.get("/transactions/{sale_id}")
def read_sales_transaction(
    sale_id: str,
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    db_sale = crud_sales.get_sales_transaction(db, user, sale_id)
    return json_success(serialize(SalesTransaction, db_sale))


@router.patch("/transactions/{sale_id}")
def update_sales_transaction(
    sale_id: str,
    sale: SalesTransactionUpdate,
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    db_sale = crud_sales.update_sales_transaction(db, user, sale_id, sale)
    return json_success(serialize(SalesTransaction, db_sale))


@router.delete("/transactions/{sale_id}")
def delete_sales_transaction(
    sale_id: str,
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    crud_sales.delete_sales_transaction(db, user, sale_id)
    return json_success({"deleted": True})


@router.get("/analytics")
def read_sales_analytics(
    days: int = Query(30, ge=1, le=366),
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    """Headline sales figures plus a daily revenue series for the last `days` days."""
    analytics = crud_sales.get_sales_analytics(db, user, days)
    return json_success(analytics.model_dump(mode="json", by_alias=True))
