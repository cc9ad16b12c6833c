"""
Plantillas de correo por defecto y variables permitidas por tipo
"""
from app.modules.email_templates.models import TemplateType

TEMPLATE_VARIABLES = {
    TemplateType.INVOICE: [
        "client_name", "invoice_number", "total_amount", "due_date",
        "payment_link", "company_name", "invoice_date", "currency",
    ],
    TemplateType.REMINDER: [
        "client_name", "invoice_number", "total_amount", "due_date",
        "days_overdue", "payment_link", "company_name", "currency",
    ],
    TemplateType.THANK_YOU: [
        "client_name", "invoice_number", "total_amount", "payment_date",
        "company_name", "currency", "payment_method",
    ],
    TemplateType.UPCOMING: [
        "client_name", "invoice_number", "total_amount", "due_date",
        "days_until_due", "payment_link", "company_name", "currency",
    ],
}

DEFAULT_TEMPLATES = {
    TemplateType.INVOICE: {
        "subject": "Invoice #{invoice_number} from {company_name}",
        "body": """Dear {client_name},

I hope this email finds you well. Please find attached your invoice #{invoice_number} for {total_amount} {currency}.

Invoice Details:
- Invoice Number: #{invoice_number}
- Amount: {total_amount} {currency}
- Due Date: {due_date}

You can pay online using the following secure link:
{payment_link}

If you have any questions about this invoice, please don't hesitate to contact us.

Thank you for your business!

Best regards,
{company_name}""",
    },
    TemplateType.REMINDER: {
        "subject": "Payment Reminder: Invoice #{invoice_number} - {days_overdue} days overdue",
        "body": """Dear {client_name},

This is a friendly reminder that invoice #{invoice_number} for {total_amount} {currency} was due on {due_date} and is now {days_overdue} days overdue.

To avoid any late fees or service interruptions, please process your payment as soon as possible.

You can pay online using the following secure link:
{payment_link}

If you have already made this payment, please disregard this message. If you have any questions or concerns, please contact us immediately.

Thank you for your prompt attention to this matter.

Best regards,
{company_name}""",
    },
    TemplateType.THANK_YOU: {
        "subject": "Payment Received - Thank You! Invoice #{invoice_number}",
        "body": """Dear {client_name},

Thank you for your payment of {total_amount} {currency} for invoice #{invoice_number}.

Payment Details:
- Invoice Number: #{invoice_number}
- Amount Paid: {total_amount} {currency}
- Payment Date: {payment_date}
- Payment Method: {payment_method}

Your payment has been successfully processed and your account is now up to date.

We truly appreciate your business and look forward to continuing our partnership.

If you need a receipt or have any questions, please don't hesitate to contact us.

Best regards,
{company_name}""",
    },
    TemplateType.UPCOMING: {
        "subject": "Upcoming Payment: Invoice #{invoice_number} is due on {due_date}",
        "body": """Dear {client_name},

This is a courtesy reminder that invoice #{invoice_number} for {total_amount} {currency} is due on {due_date}, in {days_until_due} days.

You can pay online using the following secure link:
{payment_link}

If you have already scheduled this payment, please disregard this message.

Thank you for your business!

Best regards,
{company_name}""",
    },
}

# Datos de ejemplo para la vista previa
SAMPLE_CONTEXT = {
    "client_name": "John Smith",
    "invoice_number": "INV-2024-001",
    "total_amount": "$1,250.00",
    "due_date": "January 31, 2024",
    "payment_link": "https://pay.example.com/invoice/123",
    "company_name": "Your Company Name",
    "invoice_date": "January 15, 2024",
    "currency": "USD",
    "days_overdue": "5",
    "days_until_due": "3",
    "payment_date": "January 30, 2024",
    "payment_method": "Credit Card",
}
