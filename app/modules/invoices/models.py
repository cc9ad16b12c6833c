from app.database.database import Base
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Numeric, Enum, Date, Text
from sqlalchemy.orm import relationship
from datetime import date
from app.common.mixins import BaseMixin, IdMixin, utcnow
import enum


class InvoiceStatus(str, enum.Enum):
    DRAFT = "draft"          # Borrador, editable
    SENT = "sent"            # Enviada al cliente, pendiente de pago
    PAID = "paid"            # Pagada (terminal)
    CANCELLED = "cancelled"  # Cancelada (terminal)


class Invoice(Base, BaseMixin):
    __tablename__ = "invoices"

    client_id = Column(String(64), ForeignKey("clients.id"), nullable=False, index=True)

    # Invoice data
    invoice_number = Column(String(50), nullable=False)
    title = Column(String(200), nullable=True)
    description = Column(Text, nullable=True)
    status = Column(
        Enum(InvoiceStatus, name="invoice_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=InvoiceStatus.DRAFT
    )
    currency = Column(String(3), nullable=False, default="USD")

    # Totals (calculated, full precision)
    subtotal = Column(Numeric, nullable=False, default=0)
    tax_rate = Column(Numeric(5, 2), nullable=False, default=0)
    tax_amount = Column(Numeric, nullable=False, default=0)
    total_amount = Column(Numeric, nullable=False, default=0)

    # Dates
    issue_date = Column(Date, nullable=False, default=date.today)
    due_date = Column(Date, nullable=True)
    sent_at = Column(DateTime(timezone=True), nullable=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)

    # Payment
    payment_gateway = Column(String(30), nullable=True)
    payment_link = Column(String(500), nullable=True)

    # Content
    notes = Column(Text, nullable=True)
    terms = Column(Text, nullable=True)

    items = relationship(
        "InvoiceItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="InvoiceItem.position"
    )


class InvoiceItem(Base, IdMixin):
    __tablename__ = "invoice_items"

    invoice_id = Column(String(64), ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    description = Column(String(500), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    unit_price = Column(Numeric, nullable=False, default=0)
    total = Column(Numeric, nullable=False, default=0)  # quantity * unit_price

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    invoice = relationship("Invoice", back_populates="items")
