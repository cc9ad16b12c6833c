"""
Tests para el módulo de Plantillas de correo
"""

import pytest

from app.common.exceptions import ValidationError
from app.modules.email_templates.defaults import DEFAULT_TEMPLATES
from app.modules.email_templates.models import TemplateType
from app.modules.email_templates.schemas import EmailTemplateIn
from app.modules.email_templates.service import EmailTemplateService, placeholders, render


class TestRender:
    """Tests para la sustitución de variables"""

    def test_render_replaces_known_values(self):
        text = "Invoice #{invoice_number} for {client_name}"
        assert render(text, {"invoice_number": "INV-2024-001", "client_name": "John"}) == "Invoice #INV-2024-001 for John"

    def test_missing_values_stay_as_placeholders(self):
        assert render("Hi {client_name}, {unknown}", {"client_name": "Ana", "unknown": None}) == "Hi Ana, {unknown}"

    def test_non_string_values(self):
        assert render("{days_overdue} days", {"days_overdue": 5}) == "5 days"

    def test_placeholders(self):
        assert placeholders("{a} and {b_c} but not { d }") == ["a", "b_c"]


class TestEmailTemplateService:
    """Tests del servicio de plantillas"""

    def test_effective_template_prefers_saved(self, storage):
        template = EmailTemplateService(storage).get_effective_template("user_1", TemplateType.INVOICE)
        assert template.id == "template_1"
        assert template.customized

    def test_effective_template_falls_back_to_default(self, storage):
        template = EmailTemplateService(storage).get_effective_template("user_1", TemplateType.REMINDER)
        assert template.id is None
        assert template.is_default
        assert template.subject == DEFAULT_TEMPLATES[TemplateType.REMINDER]["subject"]
        assert "days_overdue" in template.variables

    def test_list_templates_one_per_type(self, storage):
        templates = EmailTemplateService(storage).list_templates("user_2")
        assert [t.template_type for t in templates] == list(TemplateType)
        assert all(t.is_default for t in templates)

    def test_save_template_upserts(self, storage):
        service = EmailTemplateService(storage)
        data = EmailTemplateIn(subject="Invoice {invoice_number}", body="Hello {client_name}")
        result = service.save_template(TemplateType.INVOICE, data, "user_1")

        assert result.id == "template_1"
        assert not result.is_default
        assert len(storage.email_templates) == 1

    def test_save_template_rejects_unknown_variable(self, storage):
        data = EmailTemplateIn(subject="Reminder", body="Paid on {payment_date}")
        with pytest.raises(ValidationError) as exc:
            EmailTemplateService(storage).save_template(TemplateType.REMINDER, data, "user_1")
        assert "payment_date" in exc.value.detail

    def test_reset_template(self, storage):
        result = EmailTemplateService(storage).reset_template(TemplateType.INVOICE, "user_1")
        assert result.is_default
        assert len(storage.email_templates) == 0

    def test_render_template_with_wrong_type_id_uses_effective(self, storage):
        email = EmailTemplateService(storage).render_template(
            "user_1", TemplateType.THANK_YOU, {"invoice_number": "INV-1"}, template_id="template_1"
        )
        assert email.subject == "Payment Received - Thank You! Invoice #INV-1"


class TestEmailTemplateEndpoints:
    """Tests de la API de plantillas"""

    def test_list(self, client):
        response = client.get("/email-templates/")
        assert response.status_code == 200
        assert len(response.json()) == 4
        assert "upcoming" in {row["template_type"] for row in response.json()}

    def test_variables(self, client):
        response = client.get("/email-templates/variables")
        assert response.status_code == 200
        by_type = {row["template_type"]: row["variables"] for row in response.json()}
        assert "payment_method" in by_type["thank_you"]

    def test_save_and_get(self, client):
        payload = {"subject": "Thanks {client_name}", "body": "We received {total_amount} {currency}"}
        assert client.put("/email-templates/thank_you", json=payload).status_code == 200
        response = client.get("/email-templates/thank_you")
        assert response.json()["subject"] == "Thanks {client_name}"
        assert response.json()["customized"] is True

    def test_save_invalid_variable(self, client):
        payload = {"subject": "Hi", "body": "{secret_field}"}
        response = client.put("/email-templates/invoice", json=payload)
        assert response.status_code == 400
        assert response.json()["error"] == "ValidationError"

    def test_reset(self, client):
        response = client.delete("/email-templates/invoice")
        assert response.status_code == 200
        assert response.json()["is_default"] is True

    def test_preview_uses_sample_data(self, client):
        response = client.post("/email-templates/reminder/preview", json={})
        assert response.status_code == 200
        data = response.json()
        assert data["subject"] == "Payment Reminder: Invoice #INV-2024-001 - 5 days overdue"

    def test_preview_with_draft_text(self, client):
        response = client.post("/email-templates/invoice/preview", json={
            "subject": "Invoice for {client_name}",
            "body": "{missing}",
            "context": {"client_name": "Acme"},
        })
        data = response.json()
        assert data["subject"] == "Invoice for Acme"
        assert data["body"] == "{missing}"

    def test_unknown_template_type(self, client):
        assert client.get("/email-templates/newsletter").status_code == 422
