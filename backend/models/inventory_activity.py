from sqlalchemy import Column, DateTime, Float, String

from database import Base
from utils import generate_document_id
from utils.time_utils import now


class InventoryActivity(Base):
    """Append-only record of one restock or consume event."""
    __tablename__ = "inventory_activity"

    id = Column(String(32), primary_key=True, default=generate_document_id)
    # Plain id, not a foreign key: the feed outlives deleted items
    item_id = Column(String(32), nullable=False, index=True)
    item_name = Column(String, nullable=False)
    type = Column(String(16), nullable=False)  # restock / consume
    amount = Column(Float, nullable=False)
    unit = Column(String, nullable=False)
    reason = Column(String, nullable=False)
    previous_stock = Column(Float, nullable=False)
    new_stock = Column(Float, nullable=False)
    performed_by = Column(String, nullable=False)
    performed_at = Column(DateTime(timezone=True), nullable=False, default=now, index=True)
