from app.database.database import Base
from sqlalchemy import Column, Boolean, Date, ForeignKey, Numeric, String, Text, UniqueConstraint
from datetime import date
from app.common.mixins import BaseMixin


class Expense(Base, BaseMixin):
    __tablename__ = "expenses"

    category = Column(String(100), nullable=False)
    description = Column(String(500), nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    expense_date = Column(Date, nullable=False, default=date.today)
    receipt_url = Column(String(500), nullable=True)

    # Gastos facturables a un cliente
    is_billable = Column(Boolean, nullable=False, default=False)
    client_id = Column(String(64), ForeignKey("clients.id", ondelete="SET NULL"), nullable=True)
    project_name = Column(String(200), nullable=True)

    payment_method = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)


class ExpenseCategory(Base, BaseMixin):
    __tablename__ = "expense_categories"

    name = Column(String(100), nullable=False)
    color = Column(String(7), nullable=False, default="#64748B")
    is_default = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_expense_category_user_name"),
    )
