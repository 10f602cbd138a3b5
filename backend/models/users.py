from sqlalchemy import Boolean, Column, DateTime, JSON, String

from database import Base
from models.audit_mixin import TimestampMixin
from utils import generate_document_id


class User(Base, TimestampMixin):
    __tablename__ = 'users'

    id = Column(String(32), primary_key=True, default=generate_document_id)
    email = Column(String, unique=True, index=True, nullable=False)
    display_name = Column(String, nullable=True)
    hashed_password = Column(String, nullable=False)
    roles = Column(JSON, nullable=False, default=list)  # subset of admin / staff / viewer
    is_active = Column(Boolean, default=True, nullable=False)
    last_login = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, roles={self.roles}, is_active={self.is_active})>"
