from app.database.database import Base
from sqlalchemy import Column, Boolean, Enum, String, Text, UniqueConstraint
from app.common.mixins import BaseMixin
import enum


class TemplateType(str, enum.Enum):
    INVOICE = "invoice"        # Envío de la factura
    REMINDER = "reminder"      # Recordatorio de pago
    THANK_YOU = "thank_you"    # Agradecimiento tras el pago
    UPCOMING = "upcoming"      # Aviso antes del vencimiento


class EmailTemplate(Base, BaseMixin):
    __tablename__ = "email_templates"

    template_type = Column(
        Enum(TemplateType, name="template_type", values_callable=lambda e: [m.value for m in e]),
        nullable=False
    )
    subject = Column(String(300), nullable=False)
    body = Column(Text, nullable=False)
    is_default = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        UniqueConstraint("user_id", "template_type", name="uq_template_user_type"),
    )
