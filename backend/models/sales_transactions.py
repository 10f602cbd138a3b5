from sqlalchemy import Column, Date, Float, String, Text

from database import Base
from models.audit_mixin import TimestampMixin
from utils import generate_document_id


class SalesTransaction(Base, TimestampMixin):
    __tablename__ = "sales"

    id = Column(String(32), primary_key=True, default=generate_document_id)
    transaction_id = Column(String(16), nullable=True)  # "#XXXX-MMDD"
    date = Column(Date, nullable=False, index=True)
    rooster_id = Column(String, nullable=False)  # informational link, not enforced
    breed = Column(String, nullable=False)
    customer_name = Column(String, nullable=False)
    customer_contact = Column(String, nullable=False)
    amount = Column(Float, nullable=False)
    payment_method = Column(String(32), nullable=False)
    notes = Column(Text, nullable=True)
    commission = Column(Float, nullable=True)
    agent_name = Column(String, nullable=True)
