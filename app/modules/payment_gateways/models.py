from app.database.database import Base
from sqlalchemy import Column, Boolean, Enum, JSON, UniqueConstraint
from app.common.mixins import BaseMixin
import enum


class GatewayType(str, enum.Enum):
    STRIPE = "stripe"
    PAYPAL = "paypal"
    PAYONEER = "payoneer"
    LEMONSQUEEZY = "lemonsqueezy"
    XOOM = "xoom"
    WISE = "wise"


class PaymentGateway(Base, BaseMixin):
    __tablename__ = "payment_gateways"

    gateway_type = Column(
        Enum(GatewayType, name="gateway_type", values_callable=lambda e: [m.value for m in e]),
        nullable=False
    )
    is_active = Column(Boolean, nullable=False, default=False)
    config = Column(JSON, nullable=True)  # Credenciales propias de cada pasarela

    __table_args__ = (
        UniqueConstraint("user_id", "gateway_type", name="uq_gateway_user_type"),
    )
