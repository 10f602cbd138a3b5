from sqlalchemy import Column, Date, Integer, String, Text

from database import Base
from models.audit_mixin import TimestampMixin
from utils import generate_document_id


class Review(Base, TimestampMixin):
    __tablename__ = "reviews"

    id = Column(String(32), primary_key=True, default=generate_document_id)
    date = Column(Date, nullable=False, index=True)
    customer = Column(String, nullable=False)
    rating = Column(Integer, nullable=False)
    rooster = Column(String, nullable=False)
    comment = Column(Text, nullable=False)
    status = Column(String(16), nullable=False, default="pending", index=True)  # published / pending / hidden
    customer_id = Column(String, nullable=True)
    transaction_id = Column(String, nullable=True)
