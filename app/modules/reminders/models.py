from app.database.database import Base
from sqlalchemy import Column, Boolean, Enum, ForeignKey, Integer, String, UniqueConstraint
from app.common.mixins import BaseMixin
import enum


class ReminderKind(str, enum.Enum):
    BEFORE_DUE = "before_due"    # Antes del vencimiento
    AFTER_DUE = "after_due"      # Después del vencimiento
    THANK_YOU = "thank_you"      # Después del pago


class ReminderSetting(Base, BaseMixin):
    __tablename__ = "reminder_settings"

    reminder_type = Column(
        Enum(ReminderKind, name="reminder_kind", values_callable=lambda e: [m.value for m in e]),
        nullable=False
    )
    days_offset = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    email_template_id = Column(String(64), ForeignKey("email_templates.id", ondelete="SET NULL"), nullable=True)

    __table_args__ = (
        # Una configuración por tipo y usuario
        UniqueConstraint("user_id", "reminder_type", name="uq_reminder_user_type"),
    )
