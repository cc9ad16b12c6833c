"""
Common mixins for per-user models
"""
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Column, DateTime, String


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid4())


class IdMixin:
    """Primary key as string, so fixture ids ("invoice_1") and UUIDs coexist"""

    id = Column(String(64), primary_key=True, default=new_id)


class OwnedMixin:
    """Mixin for records owned by the authenticated user"""

    user_id = Column(String(64), nullable=False, index=True)


class TimestampMixin:
    """Mixin for models that need timestamp tracking"""

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


class BaseMixin(IdMixin, OwnedMixin, TimestampMixin):
    """Combines id, owner and timestamp columns for most business models"""
