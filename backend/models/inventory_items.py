from sqlalchemy import Column, Date, DateTime, Float, String, Text

from database import Base
from utils import generate_document_id


class InventoryItem(Base):
    __tablename__ = "inventory_items"

    id = Column(String(32), primary_key=True, default=generate_document_id)
    display_id = Column(String(16), nullable=True)  # e.g. "#3F9A-0510"
    created_at = Column(Date, nullable=True)  # date only
    name = Column(String, nullable=False)
    category = Column(String, nullable=False)  # e.g. "Feed", "Medicine", "Equipment"
    current_stock = Column(Float, nullable=False, default=0.0)
    min_stock = Column(Float, nullable=False, default=0.0)
    unit = Column(String, nullable=False)  # e.g. "kg", "sacks", "bottles"
    supplier = Column(String, nullable=False, index=True)  # free text, matched to suppliers by name
    status = Column(String(16), nullable=False)  # adequate / low / critical, derived from stock
    price = Column(Float, nullable=True)
    location = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    last_restocked = Column(Date, nullable=True)
    expiry_date = Column(Date, nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=True)
    updated_by = Column(String, nullable=True)
