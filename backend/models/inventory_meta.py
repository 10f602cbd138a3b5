from sqlalchemy import Column, DateTime, Float, Integer, String

from database import Base

INVENTORY_STATS_DOC_ID = "stats"


class InventoryMeta(Base):
    """Denormalised inventory aggregates; a single row keyed INVENTORY_STATS_DOC_ID."""
    __tablename__ = "inventory_meta"

    id = Column(String(32), primary_key=True)
    total_items = Column(Integer, nullable=False, default=0)
    low_stock_alerts = Column(Integer, nullable=False, default=0)
    critical_items = Column(Integer, nullable=False, default=0)
    monthly_spend = Column(Float, nullable=False, default=0.0)
    updated_at = Column(DateTime(timezone=True), nullable=True)
