import datetime as dt
from typing import List, Literal, Optional

from pydantic import Field, model_validator

from schemas.base import MAX_NUMBER, CamelModel, NonEmptyStr
from utils.formatting import format_sales_transaction_id

PaymentMethod = Literal["cash", "gcash", "bank_transfer", "paypal"]


class SalesTransactionCreate(CamelModel):
    rooster_id: NonEmptyStr
    breed: NonEmptyStr
    customer_name: NonEmptyStr
    customer_contact: NonEmptyStr
    amount: float = Field(strict=True, gt=0, le=MAX_NUMBER, allow_inf_nan=False)
    payment_method: PaymentMethod
    notes: Optional[str] = None
    commission: Optional[float] = Field(default=None, strict=True, ge=0, le=MAX_NUMBER, allow_inf_nan=False)
    agent_name: Optional[str] = None


class SalesTransactionUpdate(CamelModel):
    notes: Optional[str] = None


class SalesTransaction(CamelModel):
    id: str
    transaction_id: Optional[str] = None
    date: dt.date
    rooster_id: str
    breed: str
    customer_name: str
    customer_contact: str
    amount: float
    payment_method: PaymentMethod
    notes: Optional[str] = None
    commission: Optional[float] = None
    agent_name: Optional[str] = None

    @model_validator(mode="after")
    def derive_transaction_id(self):
        # Rows recorded before transaction ids existed
        if not self.transaction_id:
            self.transaction_id = format_sales_transaction_id(self.id, self.date)
        return self


class SalesStats(CamelModel):
    total_revenue: float
    total_transactions: int
    average_sale_amount: float
    monthly_growth: float
    top_breed: str


class RevenueTrend(CamelModel):
    date: dt.date
    revenue: float
    transactions: int


class SalesAnalytics(CamelModel):
    stats: SalesStats
    trend: List[RevenueTrend]
