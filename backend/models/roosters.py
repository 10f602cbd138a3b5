from sqlalchemy import Column, Date, JSON, String

from database import Base
from models.audit_mixin import TimestampMixin


class Rooster(Base, TimestampMixin):
    __tablename__ = "roosters"

    id = Column(String(64), primary_key=True)  # farm tag, chosen by the caller
    breed_id = Column(String, nullable=False, default="")
    breed = Column(String, nullable=False, default="", index=True)
    age = Column(String, nullable=False, default="")
    weight = Column(String, nullable=False, default="")
    price = Column(String, nullable=False, default="")  # kept as entered, parsed for stats
    status = Column(String(16), nullable=False, default="Available", index=True)
    health = Column(String(16), nullable=False, default="good")
    images = Column(JSON, nullable=False, default=list)
    date_added = Column(Date, nullable=False)
    owner = Column(String, nullable=True)
    image = Column(String, nullable=True)
