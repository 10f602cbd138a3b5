from sqlalchemy import Column, DateTime, String

from utils.time_utils import now


class TimestampMixin:
    """Mixin that provides created/updated timestamps and the acting user.

    Every record in this service is hard-deleted, so there is no soft-delete
    counterpart. Timestamps are timezone aware in APP_TIMEZONE.
    """
    created_at = Column(DateTime(timezone=True), default=now)
    updated_at = Column(DateTime(timezone=True), onupdate=now)
    created_by = Column(String, nullable=True)
    updated_by = Column(String, nullable=True)
