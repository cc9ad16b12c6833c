"""
Tests para el panel principal (estadísticas y calendario)
"""

import pytest
from datetime import date
from decimal import Decimal

from app.modules.dashboard.schemas import CalendarEventType
from app.modules.dashboard.service import DashboardService


@pytest.fixture
def service(storage):
    return DashboardService(storage, today=date(2024, 2, 20))


class TestDashboardStats:

    def test_stats(self, service):
        stats = service.get_stats("user_1")
        assert stats.total_invoices == 4
        assert stats.total_clients == 3
        assert stats.total_revenue == Decimal("2712.5")
        assert stats.monthly_revenue == Decimal("0")
        assert stats.pending_amount == Decimal("6727")
        assert stats.overdue_count == 1
        assert stats.overdue_amount == Decimal("1302")
        assert stats.total_expenses == Decimal("1598.48")
        assert stats.monthly_expenses == Decimal("52.99")
        assert stats.billable_expenses == Decimal("245.50")
        assert stats.net_profit == Decimal("1114.02")

    def test_recent_invoices(self, service):
        recent = service.get_stats("user_1").recent_invoices
        assert [i.id for i in recent] == ["invoice_4", "invoice_2", "invoice_1", "invoice_3"]
        assert recent[3].display_status.value == "overdue"

    def test_empty_user(self, service):
        stats = service.get_stats("user_2")
        assert stats.total_invoices == 0
        assert stats.net_profit == 0
        assert stats.recent_invoices == []


class TestDashboardCalendar:

    def test_calendar_events(self, service):
        calendar = service.get_calendar("user_1")
        assert calendar.total == 6
        assert [e.event_date for e in calendar.events] == sorted(e.event_date for e in calendar.events)
        due = [e for e in calendar.events if e.event_type == CalendarEventType.PAYMENT_DUE]
        assert {e.related_id for e in due} == {"invoice_2", "invoice_3"}

    def test_past_reminders_completed(self, service):
        first = service.get_calendar("user_1").events[0]
        assert first.event_date == date(2024, 1, 27)
        assert first.is_completed

    def test_calendar_single_day(self, service):
        calendar = service.get_calendar("user_1", on_date=date(2024, 2, 27))
        assert calendar.total == 1
        event = calendar.events[0]
        assert event.title == "Send Reminder: INV-2024-002"
        assert event.description == "Reminder for Sarah Johnson"
        assert not event.is_completed


class TestDashboardEndpoints:

    def test_stats(self, client):
        response = client.get("/dashboard/stats")
        assert response.status_code == 200
        data = response.json()
        # Con la fecha actual las dos facturas enviadas están vencidas
        assert data["overdue_count"] == 2
        assert len(data["recent_invoices"]) == 4

    def test_calendar_by_date(self, client):
        response = client.get("/dashboard/calendar", params={"date": "2024-03-01"})
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["events"][0]["event_type"] == "payment_due"
        assert data["events"][0]["description"] == "Sarah Johnson - 5425.00 USD"
