import logging
from collections import Counter
from datetime import date, timedelta
from typing import List

from sqlalchemy.orm import Session

from models.sales_transactions import SalesTransaction
from schemas.sales_transactions import (
    RevenueTrend,
    SalesAnalytics,
    SalesStats,
    SalesTransactionCreate,
    SalesTransactionUpdate,
)
from utils import generate_document_id
from utils.errors import ServiceError
from utils.formatting import format_sales_transaction_id
from utils.permissions import SALES_POLICY, assert_permission
from utils.retry import run_in_transaction
from utils.time_utils import today

logger = logging.getLogger(__name__)

RESOURCE = "sales transactions"
DEFAULT_COMMISSION_RATE = 0.1


def _previous_month(reference: date) -> date:
    return (reference.replace(day=1) - timedelta(days=1)).replace(day=1)


def get_sales_transactions(db: Session, user) -> List[SalesTransaction]:
    assert_permission(user, "read", SALES_POLICY, RESOURCE)
    return db.query(SalesTransaction).order_by(SalesTransaction.date.desc(), SalesTransaction.created_at.desc()).all()


def get_sales_transaction(db: Session, user, sale_id: str) -> SalesTransaction:
    assert_permission(user, "read", SALES_POLICY, RESOURCE)
    db_sale = db.get(SalesTransaction, sale_id)
    if db_sale is None:
        raise ServiceError("NOT_FOUND", "Sales transaction not found.")
    return db_sale


def create_sales_transaction(db: Session, user, sale: SalesTransactionCreate) -> SalesTransaction:
    """Record a sale dated today; commission defaults to 10% of the amount."""
    assert_permission(user, "create", SALES_POLICY, RESOURCE)

    sale_id = generate_document_id()
    sale_date = today()
    data = sale.model_dump(exclude={"commission"})

    def work(session: Session) -> SalesTransaction:
        db_sale = SalesTransaction(
            id=sale_id,
            transaction_id=format_sales_transaction_id(sale_id, sale_date),
            date=sale_date,
            commission=sale.commission or sale.amount * DEFAULT_COMMISSION_RATE,
            created_by=user.identifier,
            **data,
        )
        session.add(db_sale)
        session.flush()
        return db_sale

    db_sale = run_in_transaction(db, work)
    logger.info(f"Sale {db_sale.transaction_id} of {sale.amount} ({sale.breed}) recorded by {user.identifier}")
    return db_sale


def update_sales_transaction(db: Session, user, sale_id: str, sale: SalesTransactionUpdate) -> SalesTransaction:
    """Only the notes of a recorded sale may change."""
    assert_permission(user, "update", SALES_POLICY, RESOURCE)
    update_data = sale.model_dump(exclude_unset=True)

    def work(session: Session) -> SalesTransaction:
        db_sale = session.query(SalesTransaction).filter(SalesTransaction.id == sale_id).with_for_update().first()
        if db_sale is None:
            raise ServiceError("NOT_FOUND", "Sales transaction not found.")
        if "notes" in update_data:
            db_sale.notes = update_data["notes"]
        db_sale.updated_by = user.identifier
        return db_sale

    db_sale = run_in_transaction(db, work)
    logger.info(f"Sale {sale_id} updated by {user.identifier}")
    return db_sale


def delete_sales_transaction(db: Session, user, sale_id: str) -> None:
    assert_permission(user, "delete", SALES_POLICY, RESOURCE)

    def work(session: Session) -> None:
        db_sale = session.query(SalesTransaction).filter(SalesTransaction.id == sale_id).with_for_update().first()
        if db_sale is None:
            raise ServiceError("NOT_FOUND", "Sales transaction not found.")
        session.delete(db_sale)

    run_in_transaction(db, work)
    logger.info(f"Sale {sale_id} deleted by {user.identifier}")


def calculate_sales_stats(sales: List[SalesTransaction], reference: date) -> SalesStats:
    total_revenue = sum(s.amount for s in sales)
    total_transactions = len(sales)

    last_month = _previous_month(reference)
    current_month_revenue = sum(
        s.amount for s in sales if (s.date.year, s.date.month) == (reference.year, reference.month)
    )
    last_month_revenue = sum(
        s.amount for s in sales if (s.date.year, s.date.month) == (last_month.year, last_month.month)
    )
    if last_month_revenue > 0:
        monthly_growth = (current_month_revenue - last_month_revenue) / last_month_revenue * 100
    else:
        monthly_growth = 0.0

    breed_counts = Counter(s.breed for s in sales)

    return SalesStats(
        total_revenue=total_revenue,
        total_transactions=total_transactions,
        average_sale_amount=total_revenue / total_transactions if total_transactions else 0.0,
        monthly_growth=monthly_growth,
        top_breed=breed_counts.most_common(1)[0][0] if breed_counts else "",
    )


def calculate_revenue_trend(sales: List[SalesTransaction], reference: date, days: int = 30) -> List[RevenueTrend]:
    """One entry per calendar day, oldest first, ending at `reference`."""
    revenue_by_day = {}
    count_by_day = Counter()
    for s in sales:
        revenue_by_day[s.date] = revenue_by_day.get(s.date, 0.0) + s.amount
        count_by_day[s.date] += 1

    trend = []
    for offset in range(days - 1, -1, -1):
        day = reference - timedelta(days=offset)
        trend.append(RevenueTrend(date=day, revenue=revenue_by_day.get(day, 0.0), transactions=count_by_day[day]))
    return trend


def get_sales_analytics(db: Session, user, days: int = 30) -> SalesAnalytics:
    assert_permission(user, "readStats", SALES_POLICY, RESOURCE)
    sales = db.query(SalesTransaction).all()
    reference = today()
    return SalesAnalytics(
        stats=calculate_sales_stats(sales, reference),
        trend=calculate_revenue_trend(sales, reference, days),
    )
