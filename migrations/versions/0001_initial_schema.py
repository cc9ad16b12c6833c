"""initial schema

Revision ID: 0001
Revises:
Create Date: 2024-02-15 00:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

invoice_status = sa.Enum("draft", "sent", "paid", "cancelled", name="invoice_status")
gateway_type = sa.Enum("stripe", "paypal", "payoneer", "lemonsqueezy", "xoom", "wise", name="gateway_type")
template_type = sa.Enum("invoice", "reminder", "thank_you", "upcoming", name="template_type")
reminder_kind = sa.Enum("before_due", "after_due", "thank_you", name="reminder_kind")


def _owned_columns():
    return [
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False, index=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade():
    op.create_table(
        "clients",
        *_owned_columns(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(200), nullable=False),
        sa.Column("company", sa.String(200)),
        sa.Column("address", sa.Text()),
        sa.Column("phone", sa.String(50)),
        sa.Column("tax_id", sa.String(50)),
    )
    op.create_table(
        "invoices",
        *_owned_columns(),
        sa.Column("client_id", sa.String(64), sa.ForeignKey("clients.id"), nullable=False, index=True),
        sa.Column("invoice_number", sa.String(50), nullable=False),
        sa.Column("title", sa.String(200)),
        sa.Column("description", sa.Text()),
        sa.Column("status", invoice_status, nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("subtotal", sa.Numeric(), nullable=False),
        sa.Column("tax_rate", sa.Numeric(5, 2), nullable=False),
        sa.Column("tax_amount", sa.Numeric(), nullable=False),
        sa.Column("total_amount", sa.Numeric(), nullable=False),
        sa.Column("issue_date", sa.Date(), nullable=False),
        sa.Column("due_date", sa.Date()),
        sa.Column("sent_at", sa.DateTime(timezone=True)),
        sa.Column("paid_at", sa.DateTime(timezone=True)),
        sa.Column("payment_gateway", sa.String(30)),
        sa.Column("payment_link", sa.String(500)),
        sa.Column("notes", sa.Text()),
        sa.Column("terms", sa.Text()),
    )
    op.create_table(
        "invoice_items",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("invoice_id", sa.String(64), sa.ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("description", sa.String(500), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Numeric(), nullable=False),
        sa.Column("total", sa.Numeric(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_table(
        "payment_gateways",
        *_owned_columns(),
        sa.Column("gateway_type", gateway_type, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("config", sa.JSON()),
        sa.UniqueConstraint("user_id", "gateway_type", name="uq_gateway_user_type"),
    )
    op.create_table(
        "email_templates",
        *_owned_columns(),
        sa.Column("template_type", template_type, nullable=False),
        sa.Column("subject", sa.String(300), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("is_default", sa.Boolean(), nullable=False),
        sa.UniqueConstraint("user_id", "template_type", name="uq_template_user_type"),
    )
    op.create_table(
        "reminder_settings",
        *_owned_columns(),
        sa.Column("reminder_type", reminder_kind, nullable=False),
        sa.Column("days_offset", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("email_template_id", sa.String(64), sa.ForeignKey("email_templates.id", ondelete="SET NULL")),
        sa.UniqueConstraint("user_id", "reminder_type", name="uq_reminder_user_type"),
    )
    op.create_table(
        "expenses",
        *_owned_columns(),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("description", sa.String(500), nullable=False),
        sa.Column("amount", sa.Numeric(15, 2), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("expense_date", sa.Date(), nullable=False),
        sa.Column("receipt_url", sa.String(500)),
        sa.Column("is_billable", sa.Boolean(), nullable=False),
        sa.Column("client_id", sa.String(64), sa.ForeignKey("clients.id", ondelete="SET NULL")),
        sa.Column("project_name", sa.String(200)),
        sa.Column("payment_method", sa.String(50)),
        sa.Column("notes", sa.Text()),
    )
    op.create_table(
        "expense_categories",
        *_owned_columns(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("color", sa.String(7), nullable=False),
        sa.Column("is_default", sa.Boolean(), nullable=False),
        sa.UniqueConstraint("user_id", "name", name="uq_expense_category_user_name"),
    )


def downgrade():
    for table in (
        "expense_categories", "expenses", "reminder_settings", "email_templates",
        "payment_gateways", "invoice_items", "invoices", "clients",
    ):
        op.drop_table(table)
    for enum_type in (reminder_kind, template_type, gateway_type, invoice_status):
        enum_type.drop(op.get_bind(), checkfirst=True)
