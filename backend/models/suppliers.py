from sqlalchemy import Column, Integer, String, Text

from database import Base
from models.audit_mixin import TimestampMixin
from utils import generate_document_id


class Supplier(Base, TimestampMixin):
    __tablename__ = "suppliers"

    id = Column(String(32), primary_key=True, default=generate_document_id)
    name = Column(String, nullable=False, index=True)
    contact_person = Column(String, nullable=True)
    phone = Column(String, nullable=False)
    email = Column(String, nullable=True)
    address = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    # Recomputed from inventory by supplier name on every read
    items_supplied = Column(Integer, nullable=False, default=0)
    total_orders = Column(Integer, nullable=False, default=0)
