"""
Tests para el módulo de Recordatorios

Cubren:
- Cálculo de fechas por tipo (before_due, after_due, thank_you)
- Configuraciones inactivas y facturas sin vencimiento
- Servicio de configuración (valores por defecto, upsert)
- Envío diario con una cola falsa
- Endpoints REST
"""

import pytest
from datetime import date, datetime, timezone

from app.common.exceptions import NotFound, PersistenceFailure
from app.modules.invoices.models import InvoiceStatus
from app.modules.reminders import tasks
from app.modules.reminders.models import ReminderKind
from app.modules.reminders.resolver import due_reminders, resolve_reminders
from app.modules.reminders.schemas import ReminderSettingIn
from app.modules.reminders.service import (
    ReminderDispatchService, ReminderSettingsService, build_email_context
)


# ===== FIXTURES =====

def _setting(kind, offset, is_active=True, template_id=None):
    return {
        "reminder_type": kind,
        "days_offset": offset,
        "is_active": is_active,
        "email_template_id": template_id,
    }


@pytest.fixture
def sent_invoice():
    return {
        "id": "inv_a",
        "invoice_number": "INV-2024-010",
        "client_id": "client_1",
        "status": InvoiceStatus.SENT,
        "issue_date": date(2024, 1, 20),
        "due_date": date(2024, 2, 15),
        "paid_at": None,
        "updated_at": datetime(2024, 1, 20, 9, 0, tzinfo=timezone.utc),
    }


class FakeQueue:
    """Reemplaza send_template_email_task.delay"""

    def __init__(self, fail_for=None):
        self.calls = []
        self.fail_for = fail_for

    def __call__(self, **kwargs):
        if self.fail_for and self.fail_for in kwargs["to_emails"]:
            raise ConnectionError("broker unavailable")
        self.calls.append(kwargs)


# ===== TESTS DEL RESOLVER =====

class TestResolveReminders:
    """Tests para el cálculo de eventos"""

    def test_before_due(self, sent_invoice):
        events = list(resolve_reminders(sent_invoice, [_setting(ReminderKind.BEFORE_DUE, 3)]))
        assert len(events) == 1
        assert events[0].reminder_type == ReminderKind.BEFORE_DUE
        assert events[0].scheduled_for == date(2024, 2, 12)
        assert events[0].invoice_number == "INV-2024-010"

    def test_after_due(self, sent_invoice):
        events = list(resolve_reminders(sent_invoice, [_setting(ReminderKind.AFTER_DUE, 7)]))
        assert [e.scheduled_for for e in events] == [date(2024, 2, 22)]

    def test_no_due_date_no_events(self, sent_invoice):
        sent_invoice["due_date"] = None
        settings = [_setting(ReminderKind.BEFORE_DUE, 3), _setting(ReminderKind.AFTER_DUE, 1)]
        assert list(resolve_reminders(sent_invoice, settings)) == []

    def test_inactive_setting_ignored(self, sent_invoice):
        settings = [_setting(ReminderKind.BEFORE_DUE, 3, is_active=False)]
        assert list(resolve_reminders(sent_invoice, settings)) == []

    def test_draft_has_no_events(self, sent_invoice):
        sent_invoice["status"] = InvoiceStatus.DRAFT
        assert list(resolve_reminders(sent_invoice, [_setting(ReminderKind.AFTER_DUE, 1)])) == []

    def test_before_due_earlier_than_issue_date_skipped(self, sent_invoice):
        events = list(resolve_reminders(sent_invoice, [_setting(ReminderKind.BEFORE_DUE, 40)]))
        assert events == []

    def test_thank_you_uses_paid_at(self, sent_invoice):
        sent_invoice["status"] = InvoiceStatus.PAID
        sent_invoice["paid_at"] = datetime(2024, 2, 10, 16, 30, tzinfo=timezone.utc)
        events = list(resolve_reminders(sent_invoice, [_setting(ReminderKind.THANK_YOU, 0)]))
        assert [e.scheduled_for for e in events] == [date(2024, 2, 10)]

    def test_thank_you_falls_back_to_updated_at(self, sent_invoice):
        sent_invoice["status"] = InvoiceStatus.PAID
        events = list(resolve_reminders(sent_invoice, [_setting(ReminderKind.THANK_YOU, 2)]))
        assert [e.scheduled_for for e in events] == [date(2024, 1, 22)]

    def test_paid_invoice_has_no_due_reminders(self, sent_invoice):
        sent_invoice["status"] = InvoiceStatus.PAID
        settings = [_setting(ReminderKind.BEFORE_DUE, 3), _setting(ReminderKind.AFTER_DUE, 1)]
        assert list(resolve_reminders(sent_invoice, settings)) == []

    def test_legacy_overdue_status(self, sent_invoice):
        sent_invoice["status"] = "overdue"
        events = list(resolve_reminders(sent_invoice, [_setting(ReminderKind.AFTER_DUE, 1)]))
        assert [e.scheduled_for for e in events] == [date(2024, 2, 16)]

    def test_template_id_is_carried(self, sent_invoice):
        events = list(resolve_reminders(sent_invoice, [_setting(ReminderKind.BEFORE_DUE, 3, template_id="tpl")]))
        assert events[0].email_template_id == "tpl"

    def test_due_reminders_filters_by_date(self, sent_invoice):
        other = {**sent_invoice, "id": "inv_b", "due_date": date(2024, 2, 20)}
        settings = [_setting(ReminderKind.BEFORE_DUE, 3), _setting(ReminderKind.AFTER_DUE, 1)]
        events = list(due_reminders([sent_invoice, other], settings, date(2024, 2, 17)))
        assert [(e.invoice_id, e.reminder_type) for e in events] == [("inv_b", ReminderKind.BEFORE_DUE)]


# ===== TESTS DEL SERVICIO =====

class TestReminderSettingsService:
    """Tests del servicio de configuración"""

    def test_list_settings_fills_defaults(self, storage):
        settings = ReminderSettingsService(storage).list_settings("user_1")
        by_kind = {s.reminder_type: s for s in settings}
        assert by_kind[ReminderKind.BEFORE_DUE].configured
        assert by_kind[ReminderKind.BEFORE_DUE].days_offset == 3
        thank_you = by_kind[ReminderKind.THANK_YOU]
        assert not thank_you.configured
        assert not thank_you.is_active
        assert thank_you.days_offset == 0

    def test_save_setting_updates_existing(self, storage):
        service = ReminderSettingsService(storage)
        result = service.save_setting(ReminderKind.BEFORE_DUE, ReminderSettingIn(days_offset=5), "user_1")
        assert result.id == "reminder_1"
        assert result.days_offset == 5
        assert len(storage.reminder_settings) == 2

    def test_save_setting_creates_new(self, storage):
        service = ReminderSettingsService(storage)
        result = service.save_setting(ReminderKind.THANK_YOU, ReminderSettingIn(days_offset=1), "user_1")
        assert result.configured
        assert len(storage.reminder_settings) == 3

    def test_save_setting_with_unknown_template(self, storage):
        data = ReminderSettingIn(days_offset=2, email_template_id="template_404")
        with pytest.raises(NotFound):
            ReminderSettingsService(storage).save_setting(ReminderKind.AFTER_DUE, data, "user_1")

    def test_upcoming_events_sorted_and_filtered(self, storage):
        events = ReminderSettingsService(storage).upcoming_events("user_1", date_from=date(2024, 2, 1))
        assert [(e.invoice_id, e.scheduled_for) for e in events] == [
            ("invoice_2", date(2024, 2, 27)),
            ("invoice_2", date(2024, 3, 2)),
        ]

    def test_upcoming_events_include_overdue_invoice(self, storage):
        events = ReminderSettingsService(storage).upcoming_events("user_1", date_to=date(2024, 1, 31))
        assert [e.scheduled_for for e in events] == [date(2024, 1, 27), date(2024, 1, 31)]

    def test_build_email_context(self, storage):
        invoice = storage.invoices.get("invoice_3")
        client = storage.clients.get("client_3")
        context = build_email_context(invoice, client, date(2024, 2, 20))
        assert context["client_name"] == "Michael Brown"
        assert context["due_date"] == "January 30, 2024"
        assert context["days_overdue"] == 21
        assert context["total_amount"] == "1,302.00"
        assert context["days_until_due"] == 0


class TestReminderDispatchService:
    """Tests del envío diario"""

    def test_dispatch_before_due(self, storage):
        queue = FakeQueue()
        result = ReminderDispatchService(storage, queue).dispatch(date(2024, 2, 27))

        assert result == {"queued": 1, "failed": 0}
        call = queue.calls[0]
        assert call["to_emails"] == ["sarah@techstartup.com"]
        assert "INV-2024-002" in call["subject"]
        assert call["template_name"] == "notification_email.html"
        assert call["context"]["payment_link"] == "https://pay.stripe.com/invoice/456"
        assert call["context"]["paragraphs"][0] == "Dear Sarah Johnson,"

    def test_dispatch_before_due_uses_upcoming_template(self, storage):
        queue = FakeQueue()
        ReminderDispatchService(storage, queue).dispatch(date(2024, 2, 27))

        call = queue.calls[0]
        assert call["subject"] == "Upcoming Payment: Invoice #INV-2024-002 is due on March 01, 2024"
        assert "overdue" not in call["subject"]
        assert "in 3 days" in call["context"]["paragraphs"][1]

    def test_dispatch_thank_you_uses_thank_you_template(self, storage):
        ReminderSettingsService(storage).save_setting(ReminderKind.THANK_YOU, ReminderSettingIn(days_offset=0), "user_1")
        queue = FakeQueue()
        result = ReminderDispatchService(storage, queue).dispatch(date(2024, 2, 10))

        assert result["queued"] == 1
        assert queue.calls[0]["subject"] == "Payment Received - Thank You! Invoice #INV-2024-001"

    def test_dispatch_nothing_due(self, storage):
        queue = FakeQueue()
        assert ReminderDispatchService(storage, queue).dispatch(date(2024, 2, 28)) == {"queued": 0, "failed": 0}
        assert queue.calls == []

    def test_dispatch_failure_is_counted(self, storage):
        queue = FakeQueue(fail_for="sarah@techstartup.com")
        result = ReminderDispatchService(storage, queue).dispatch(date(2024, 2, 27))
        assert result == {"queued": 0, "failed": 1}

    def test_dispatch_continues_when_a_user_cannot_be_resolved(self, storage, monkeypatch):
        storage.reminder_settings.create({
            "user_id": "user_2", "reminder_type": ReminderKind.BEFORE_DUE,
            "days_offset": 3, "is_active": True, "email_template_id": None,
        })
        original_list = storage.invoices.list

        def unavailable_for_user_2(filters=None, **kwargs):
            if filters and filters.get("user_id") == "user_2":
                raise PersistenceFailure("No se pudo leer invoices")
            return original_list(filters=filters, **kwargs)

        monkeypatch.setattr(storage.invoices, "list", unavailable_for_user_2)
        queue = FakeQueue()
        result = ReminderDispatchService(storage, queue).dispatch(date(2024, 2, 27))

        assert result == {"queued": 1, "failed": 1}
        assert [c["to_emails"] for c in queue.calls] == [["sarah@techstartup.com"]]


class TestDispatchTask:
    """Tests de la tarea programada"""

    def test_skips_without_sql_storage(self, storage, monkeypatch):
        queue = FakeQueue()
        monkeypatch.setattr(tasks, "get_storage", lambda: storage)
        monkeypatch.setattr(tasks.send_template_email_task, "delay", queue)

        result = tasks.dispatch_due_reminders(on_date="2024-02-27")

        assert result == {"status": "skipped", "date": "2024-02-27", "backend": "memory"}
        assert queue.calls == []

    def test_dispatches_with_sql_storage(self, storage, monkeypatch):
        queue = FakeQueue()
        monkeypatch.setattr(storage, "backend", "sql")
        monkeypatch.setattr(tasks, "get_storage", lambda: storage)
        monkeypatch.setattr(tasks.send_template_email_task, "delay", queue)

        result = tasks.dispatch_due_reminders(on_date="2024-02-27")

        assert result == {"status": "success", "date": "2024-02-27", "queued": 1, "failed": 0}
        assert len(queue.calls) == 1


# ===== TESTS DE ENDPOINTS =====

class TestReminderEndpoints:
    """Tests de la API de recordatorios"""

    def test_list_settings(self, client):
        response = client.get("/reminders/settings")
        assert response.status_code == 200
        assert [s["reminder_type"] for s in response.json()] == ["before_due", "after_due", "thank_you"]

    def test_save_setting(self, client):
        response = client.put("/reminders/settings/after_due", json={"days_offset": 7, "is_active": False})
        assert response.status_code == 200
        data = response.json()
        assert data["days_offset"] == 7
        assert data["is_active"] is False

    def test_negative_offset_rejected(self, client):
        response = client.put("/reminders/settings/before_due", json={"days_offset": -1})
        assert response.status_code == 422

    def test_unknown_kind_rejected(self, client):
        response = client.put("/reminders/settings/weekly", json={"days_offset": 1})
        assert response.status_code == 422

    def test_upcoming(self, client):
        response = client.get("/reminders/upcoming", params={"date_from": "2024-02-01", "date_to": "2024-02-28"})
        assert response.status_code == 200
        assert [e["scheduled_for"] for e in response.json()] == ["2024-02-27"]

    def test_other_user_has_no_events(self, other_user_client):
        response = other_user_client.get("/reminders/upcoming")
        assert response.status_code == 200
        assert response.json() == []
