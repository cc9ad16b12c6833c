"""
Dataset de demostración para el almacenamiento en memoria

build_fixture_dataset() devuelve copias nuevas en cada llamada: cada
InMemoryStorage es dueño de su propio estado.
"""
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Dict, List

from app.common.storage import InMemoryStorage, Record
from app.modules.email_templates.defaults import DEFAULT_TEMPLATES
from app.modules.email_templates.models import TemplateType
from app.modules.expenses.defaults import DEFAULT_CATEGORIES
from app.modules.invoices.models import InvoiceStatus
from app.modules.payment_gateways.models import GatewayType
from app.modules.reminders.models import ReminderKind

DEMO_USER_ID = "user_1"


def _ts(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00")).astimezone(timezone.utc)


def _clients(user_id: str) -> List[Record]:
    rows = [
        ("client_1", "John Smith", "john.smith@example.com", "Smith Consulting LLC",
         "123 Business St, New York, NY 10001", "+1 (555) 123-4567", "EIN-12-3456789", "2024-01-15T10:00:00Z"),
        ("client_2", "Sarah Johnson", "sarah@techstartup.com", "TechStartup Inc.",
         "456 Innovation Ave, San Francisco, CA 94105", "+1 (555) 987-6543", "EIN-98-7654321", "2024-01-20T14:30:00Z"),
        ("client_3", "Michael Brown", "mike.brown@designstudio.com", "Creative Design Studio",
         "789 Creative Blvd, Los Angeles, CA 90210", "+1 (555) 456-7890", "EIN-45-6789012", "2024-02-01T09:15:00Z"),
    ]
    return [
        {
            "id": client_id, "user_id": user_id, "name": name, "email": email,
            "company": company, "address": address, "phone": phone, "tax_id": tax_id,
            "created_at": _ts(created), "updated_at": _ts(created),
        }
        for client_id, name, email, company, address, phone, tax_id, created in rows
    ]


def _invoice(user_id: str, **fields) -> Record:
    record = {
        "user_id": user_id,
        "currency": "USD",
        "tax_rate": Decimal("8.5"),
        "description": None,
        "payment_link": None,
        "sent_at": None,
        "paid_at": None,
        "terms": "Payment due within 30 days",
    }
    record.update(fields)
    record["tax_amount"] = record["subtotal"] * record["tax_rate"] / 100
    record["total_amount"] = record["subtotal"] + record["tax_amount"]
    return record


def _invoices(user_id: str) -> List[Record]:
    return [
        _invoice(
            user_id, id="invoice_1", client_id="client_1", invoice_number="INV-2024-001",
            title="Website Development Services", description="Complete website redesign and development",
            status=InvoiceStatus.PAID, subtotal=Decimal("2500.00"),
            issue_date=date(2024, 1, 15), due_date=date(2024, 2, 15),
            payment_gateway="stripe", payment_link="https://pay.stripe.com/invoice/123",
            notes="Thank you for your business!",
            sent_at=_ts("2024-01-15T10:00:00Z"), paid_at=_ts("2024-02-10T16:30:00Z"),
            created_at=_ts("2024-01-15T10:00:00Z"), updated_at=_ts("2024-02-10T16:30:00Z"),
        ),
        _invoice(
            user_id, id="invoice_2", client_id="client_2", invoice_number="INV-2024-002",
            title="Mobile App Development", description="iOS and Android app development",
            status=InvoiceStatus.SENT, subtotal=Decimal("5000.00"),
            issue_date=date(2024, 2, 1), due_date=date(2024, 3, 1),
            payment_gateway="stripe", payment_link="https://pay.stripe.com/invoice/456",
            notes="Please review the app specifications attached.",
            sent_at=_ts("2024-02-01T14:30:00Z"),
            created_at=_ts("2024-02-01T14:30:00Z"), updated_at=_ts("2024-02-01T14:30:00Z"),
        ),
        # Vencida: se guarda como "sent", el estado overdue se deriva al leer
        _invoice(
            user_id, id="invoice_3", client_id="client_3", invoice_number="INV-2024-003",
            title="Brand Identity Design", description="Logo design and brand guidelines",
            status=InvoiceStatus.SENT, subtotal=Decimal("1200.00"),
            issue_date=date(2024, 1, 1), due_date=date(2024, 1, 30),
            payment_gateway="paypal", payment_link="https://paypal.me/invoice/789",
            notes="Includes 3 logo concepts and final files.",
            sent_at=_ts("2024-01-01T09:15:00Z"),
            created_at=_ts("2024-01-01T09:15:00Z"), updated_at=_ts("2024-01-01T09:15:00Z"),
        ),
        _invoice(
            user_id, id="invoice_4", client_id="client_1", invoice_number="INV-2024-004",
            title="SEO Optimization Services", description="Monthly SEO and content optimization",
            status=InvoiceStatus.DRAFT, subtotal=Decimal("800.00"),
            issue_date=date(2024, 2, 15), due_date=date(2024, 3, 15),
            payment_gateway="stripe", notes="Monthly retainer for SEO services.",
            terms="Payment due within 15 days",
            created_at=_ts("2024-02-15T11:00:00Z"), updated_at=_ts("2024-02-15T11:00:00Z"),
        ),
    ]


def _invoice_items() -> List[Record]:
    rows = [
        ("item_1", "invoice_1", "Website Design & UI/UX", 1, "1500.00", "2024-01-15T10:00:00Z"),
        ("item_2", "invoice_1", "Frontend Development", 40, "15.00", "2024-01-15T10:00:00Z"),
        ("item_3", "invoice_1", "Backend Integration", 20, "20.00", "2024-01-15T10:00:00Z"),
        ("item_4", "invoice_2", "iOS App Development", 1, "2500.00", "2024-02-01T14:30:00Z"),
        ("item_5", "invoice_2", "Android App Development", 1, "2500.00", "2024-02-01T14:30:00Z"),
        ("item_6", "invoice_3", "Logo Design Concepts", 3, "200.00", "2024-01-01T09:15:00Z"),
        ("item_7", "invoice_3", "Brand Guidelines Document", 1, "600.00", "2024-01-01T09:15:00Z"),
        ("item_8", "invoice_4", "SEO Audit & Strategy", 1, "300.00", "2024-02-15T11:00:00Z"),
        ("item_9", "invoice_4", "Content Optimization", 10, "50.00", "2024-02-15T11:00:00Z"),
    ]
    items = []
    positions: Dict[str, int] = {}
    for item_id, invoice_id, description, quantity, unit_price, created in rows:
        position = positions.get(invoice_id, 0)
        positions[invoice_id] = position + 1
        items.append({
            "id": item_id, "invoice_id": invoice_id, "position": position,
            "description": description, "quantity": quantity,
            "unit_price": Decimal(unit_price), "total": quantity * Decimal(unit_price),
            "created_at": _ts(created),
        })
    return items


def _payment_gateways(user_id: str) -> List[Record]:
    created = _ts("2024-01-10T08:00:00Z")
    return [
        {
            "id": "gateway_1", "user_id": user_id, "gateway_type": GatewayType.STRIPE, "is_active": True,
            "config": {"publishableKey": "pk_test_...", "secretKey": "sk_test_...", "webhookSecret": "whsec_..."},
            "created_at": created, "updated_at": created,
        },
        {
            "id": "gateway_2", "user_id": user_id, "gateway_type": GatewayType.PAYPAL, "is_active": True,
            "config": {"clientId": "paypal_client_id", "clientSecret": "paypal_client_secret", "environment": "sandbox"},
            "created_at": created, "updated_at": created,
        },
    ]


def _email_templates(user_id: str) -> List[Record]:
    created = _ts("2024-01-10T08:00:00Z")
    default = DEFAULT_TEMPLATES[TemplateType.INVOICE]
    return [{
        "id": "template_1", "user_id": user_id, "template_type": TemplateType.INVOICE,
        "subject": default["subject"], "body": default["body"], "is_default": True,
        "created_at": created, "updated_at": created,
    }]


def _reminder_settings(user_id: str) -> List[Record]:
    created = _ts("2024-01-10T08:00:00Z")
    return [
        {
            "id": "reminder_1", "user_id": user_id, "reminder_type": ReminderKind.BEFORE_DUE,
            "days_offset": 3, "is_active": True, "email_template_id": "template_1",
            "created_at": created, "updated_at": created,
        },
        {
            "id": "reminder_2", "user_id": user_id, "reminder_type": ReminderKind.AFTER_DUE,
            "days_offset": 1, "is_active": True, "email_template_id": None,
            "created_at": created, "updated_at": created,
        },
    ]


def _expenses(user_id: str) -> List[Record]:
    rows = [
        ("exp_1", "Office Supplies", "Laptop for development work", "1299.99", date(2024, 1, 15),
         False, None, None, "Credit Card", "MacBook Pro 14-inch", "2024-01-15T10:00:00Z"),
        ("exp_2", "Travel & Transportation", "Client meeting travel", "245.50", date(2024, 1, 20),
         True, "client_1", "Website Redesign", "Company Card", "Flight to NYC for client presentation",
         "2024-01-20T14:30:00Z"),
        ("exp_3", "Software & Subscriptions", "Adobe Creative Suite", "52.99", date(2024, 2, 1),
         False, None, None, "Credit Card", "Monthly subscription", "2024-02-01T09:15:00Z"),
    ]
    return [
        {
            "id": expense_id, "user_id": user_id, "category": category, "description": description,
            "amount": Decimal(amount), "currency": "USD", "expense_date": expense_date, "receipt_url": None,
            "is_billable": billable, "client_id": client_id, "project_name": project,
            "payment_method": method, "notes": notes,
            "created_at": _ts(created), "updated_at": _ts(created),
        }
        for expense_id, category, description, amount, expense_date, billable, client_id,
        project, method, notes, created in rows
    ]


def _expense_categories(user_id: str) -> List[Record]:
    created = _ts("2024-01-10T08:00:00Z")
    return [
        {
            "id": f"cat_{index}", "user_id": user_id, "name": name, "color": color,
            "is_default": True, "created_at": created, "updated_at": created,
        }
        for index, (name, color) in enumerate(DEFAULT_CATEGORIES)
    ]


def build_fixture_dataset(user_id: str = DEMO_USER_ID) -> Dict[str, List[Record]]:
    """Dataset completo de demostración para un usuario"""
    return {
        "clients": _clients(user_id),
        "invoices": _invoices(user_id),
        "invoice_items": _invoice_items(),
        "payment_gateways": _payment_gateways(user_id),
        "email_templates": _email_templates(user_id),
        "reminder_settings": _reminder_settings(user_id),
        "expenses": _expenses(user_id),
        "expense_categories": _expense_categories(user_id),
    }


def build_fixture_storage(user_id: str = DEMO_USER_ID) -> InMemoryStorage:
    return InMemoryStorage(build_fixture_dataset(user_id))
