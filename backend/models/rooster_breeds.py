from sqlalchemy import Column, JSON, String, Text

from database import Base
from models.audit_mixin import TimestampMixin
from utils import generate_document_id


class RoosterBreed(Base, TimestampMixin):
    __tablename__ = "rooster_breeds"

    id = Column(String(32), primary_key=True, default=generate_document_id)
    name = Column(String, nullable=False, unique=True)
    description = Column(Text, nullable=False, default="")
    characteristics = Column(JSON, nullable=False, default=list)
    origin = Column(String, nullable=False, default="")
