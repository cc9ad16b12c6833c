"""
Tests para el módulo de Facturas

Cubren:
- Ledger de ítems (agregar, eliminar, actualizar, coerción de valores)
- Cálculo de subtotal, impuesto y total sin redondeo intermedio
- Ciclo de vida de estados y estado vencido derivado
- Servicio de facturas sobre el almacenamiento en memoria
- Endpoints REST y traducción de errores de dominio a HTTP
"""

import pytest
from datetime import date, datetime, timezone
from decimal import Decimal

from app.common.exceptions import InvalidTransition, NotFound, OutOfRange, PersistenceFailure, ValidationError
from app.modules.invoices import calculator, lifecycle
from app.modules.invoices.ledger import LineItemLedger, coerce_quantity, coerce_unit_price
from app.modules.invoices.lifecycle import DisplayStatus, InvoiceAction
from app.modules.invoices.models import InvoiceStatus
from app.modules.invoices.schemas import InvoiceCreate, InvoiceFilters, InvoiceItemIn, InvoiceUpdate
from app.modules.invoices.service import InvoiceService


TODAY = date(2024, 2, 20)


# ===== FIXTURES =====

@pytest.fixture
def service(storage):
    return InvoiceService(storage, today=TODAY)


@pytest.fixture
def website_items():
    """Ítems de la factura de desarrollo web: subtotal 2500"""
    return [
        {"description": "Website Design & UI/UX", "quantity": 1, "unit_price": 1500},
        {"description": "Frontend Development", "quantity": 40, "unit_price": 15},
        {"description": "Backend Integration", "quantity": 20, "unit_price": 20},
    ]


@pytest.fixture
def invoice_payload(website_items):
    return {
        "client_id": "client_2",
        "title": "New website",
        "issue_date": "2024-02-01",
        "due_date": "2024-03-01",
        "tax_rate": 8.5,
        "items": website_items,
    }


# ===== TESTS DEL LEDGER =====

class TestLineItemLedger:
    """Tests para el ledger de ítems"""

    def test_starts_with_one_blank_item(self):
        ledger = LineItemLedger()
        assert len(ledger) == 1
        item = ledger.items[0]
        assert item.description == ""
        assert item.quantity == 1
        assert item.unit_price == Decimal("0")
        assert item.total == Decimal("0")

    def test_add_item_appends_blank_item(self):
        ledger = LineItemLedger()
        ledger.add_item()
        assert len(ledger) == 2
        assert ledger.items[1].quantity == 1

    def test_remove_last_item_is_noop(self):
        ledger = LineItemLedger()
        assert ledger.remove_item(0) is False
        assert len(ledger) == 1

    def test_remove_item(self):
        ledger = LineItemLedger()
        ledger.add_item()
        ledger.update_item(1, "description", "Second")
        assert ledger.remove_item(0) is True
        assert [i.description for i in ledger.items] == ["Second"]

    def test_remove_invalid_index(self):
        ledger = LineItemLedger()
        with pytest.raises(OutOfRange):
            ledger.remove_item(3)

    def test_update_invalid_index(self):
        ledger = LineItemLedger()
        with pytest.raises(OutOfRange):
            ledger.update_item(1, "quantity", 2)
        with pytest.raises(OutOfRange):
            ledger.update_item(-1, "quantity", 2)

    def test_update_unknown_field(self):
        ledger = LineItemLedger()
        with pytest.raises(ValidationError):
            ledger.update_item(0, "total", 100)

    def test_update_recomputes_total(self):
        ledger = LineItemLedger()
        ledger.update_item(0, "quantity", 3)
        item = ledger.update_item(0, "unit_price", "12.50")
        assert item.total == Decimal("37.50")
        assert ledger.items[0].total == Decimal("37.50")

    def test_update_description_keeps_total(self):
        ledger = LineItemLedger.from_items([{"description": "A", "quantity": 2, "unit_price": 5}])
        ledger.update_item(0, "description", "B")
        assert ledger.items[0].total == Decimal("10")

    @pytest.mark.parametrize("value, expected", [
        ("abc", 1), (None, 1), (0, 1), (-5, 1), ("3", 3), (2.7, 2), ("Infinity", 1), (12, 12),
    ])
    def test_coerce_quantity(self, value, expected):
        assert coerce_quantity(value) == expected

    @pytest.mark.parametrize("value, expected", [
        ("abc", Decimal("0")), (None, Decimal("0")), (-10, Decimal("0")),
        ("12.50", Decimal("12.50")), ("NaN", Decimal("0")), (99, Decimal("99")),
    ])
    def test_coerce_unit_price(self, value, expected):
        assert coerce_unit_price(value) == expected

    def test_line_total_is_quantity_times_price(self):
        ledger = LineItemLedger()
        for quantity, price in [(1, "0"), (7, "3.33"), (250, "0.01"), (3, "1999.99")]:
            ledger.update_item(0, "quantity", quantity)
            ledger.update_item(0, "unit_price", price)
            item = ledger.items[0]
            assert item.total == item.quantity * item.unit_price

    def test_items_are_copies(self):
        ledger = LineItemLedger()
        items = ledger.items
        items[0].description = "changed"
        assert ledger.items[0].description == ""

    def test_validate_requires_descriptions(self):
        ledger = LineItemLedger.from_items([
            {"description": "Design", "quantity": 1, "unit_price": 10},
            {"description": "  ", "quantity": 1, "unit_price": 10},
        ])
        with pytest.raises(ValidationError) as exc:
            ledger.validate()
        assert "2" in exc.value.detail


# ===== TESTS DEL CALCULADOR =====

class TestCalculator:
    """Tests para el cálculo de totales"""

    def test_website_invoice_example(self, website_items):
        items = LineItemLedger.from_items(website_items).items
        totals = calculator.calculate_totals(items, Decimal("8.5"))
        assert totals.subtotal == Decimal("2500.00")
        assert totals.tax_amount == Decimal("212.50")
        assert totals.total_amount == Decimal("2712.50")

    def test_individual_functions(self):
        items = [{"total": Decimal("100")}, {"total": Decimal("50.50")}]
        assert calculator.subtotal(items) == Decimal("150.50")
        assert calculator.tax_amount(items, 10) == Decimal("15.05")
        assert calculator.total(items, 10) == Decimal("165.55")

    def test_empty_items(self):
        totals = calculator.calculate_totals([], 8.5)
        assert totals.subtotal == 0
        assert totals.tax_amount == 0
        assert totals.total_amount == 0

    def test_zero_tax_rate(self):
        items = [{"total": Decimal("80")}]
        assert calculator.tax_amount(items, 0) == 0
        assert calculator.total(items, 0) == Decimal("80")

    @pytest.mark.parametrize("rate", [-1, 100.01, "abc"])
    def test_invalid_tax_rate(self, rate):
        with pytest.raises(ValidationError):
            calculator.calculate_totals([{"total": 1}], rate)

    def test_total_never_below_subtotal(self):
        items = [{"total": Decimal("19.99")}, {"total": Decimal("0.01")}]
        for rate in (0, 0.5, 8.25, 50, 100):
            totals = calculator.calculate_totals(items, rate)
            assert totals.total_amount == totals.subtotal + totals.subtotal * Decimal(str(rate)) / 100
            assert totals.total_amount >= totals.subtotal

    def test_no_intermediate_rounding(self):
        items = [{"total": Decimal("3") * Decimal("0.3333")}]
        totals = calculator.calculate_totals(items, 10)
        assert totals.tax_amount == Decimal("0.09999")
        assert totals.total_amount == Decimal("1.09989")
        assert calculator.round_money(totals.total_amount) == Decimal("1.10")

    def test_round_money_half_up(self):
        assert calculator.round_money(Decimal("0.125")) == Decimal("0.13")
        assert calculator.round_money("2.675") == Decimal("2.68")
        assert calculator.round_money(212.5) == Decimal("212.50")


# ===== TESTS DEL CICLO DE VIDA =====

class TestLifecycle:
    """Tests para estados y transiciones"""

    def _invoice(self, status, due_date=None):
        return {"status": status, "due_date": due_date, "updated_at": None}

    def test_initial_status_is_draft(self):
        assert lifecycle.initial_status() == InvoiceStatus.DRAFT

    def test_send_from_draft(self):
        now = datetime(2024, 2, 1, 12, 0, tzinfo=timezone.utc)
        invoice = self._invoice(InvoiceStatus.DRAFT)
        patch = lifecycle.send(invoice, now)
        assert patch == {"status": InvoiceStatus.SENT, "updated_at": now, "sent_at": now}
        # La factura original no se modifica
        assert invoice["status"] == InvoiceStatus.DRAFT

    def test_send_on_paid_fails(self):
        with pytest.raises(InvalidTransition):
            lifecycle.send(self._invoice(InvoiceStatus.PAID))

    def test_mark_paid_on_draft_fails(self):
        with pytest.raises(InvalidTransition):
            lifecycle.mark_paid(self._invoice(InvoiceStatus.DRAFT))

    def test_mark_paid_on_overdue(self):
        invoice = self._invoice("sent", date(2024, 1, 1))
        assert lifecycle.display_status(invoice, TODAY) == DisplayStatus.OVERDUE
        patch = lifecycle.mark_paid(invoice)
        assert patch["status"] == InvoiceStatus.PAID
        assert "paid_at" in patch

    def test_cancel_from_draft_and_sent(self):
        for status in (InvoiceStatus.DRAFT, InvoiceStatus.SENT):
            assert lifecycle.cancel(self._invoice(status))["status"] == InvoiceStatus.CANCELLED

    @pytest.mark.parametrize("status", [InvoiceStatus.PAID, InvoiceStatus.CANCELLED])
    @pytest.mark.parametrize("action", list(InvoiceAction))
    def test_terminal_states(self, status, action):
        invoice = self._invoice(status)
        assert not lifecycle.can_transition(invoice, action)
        with pytest.raises(InvalidTransition):
            lifecycle.transition(invoice, action)

    def test_is_overdue(self):
        assert lifecycle.is_overdue("sent", date(2024, 2, 19), TODAY)
        assert not lifecycle.is_overdue("sent", TODAY, TODAY)
        assert not lifecycle.is_overdue("sent", None, TODAY)
        assert not lifecycle.is_overdue("paid", date(2024, 1, 1), TODAY)
        assert not lifecycle.is_overdue("draft", date(2024, 1, 1), TODAY)

    def test_legacy_overdue_status_reads_as_sent(self):
        assert lifecycle.normalize_status("overdue") == InvoiceStatus.SENT
        invoice = self._invoice("overdue", date(2024, 1, 1))
        assert lifecycle.display_status(invoice, TODAY) == DisplayStatus.OVERDUE
        assert lifecycle.mark_paid(invoice)["status"] == InvoiceStatus.PAID

    def test_days_overdue(self):
        assert lifecycle.days_overdue(date(2024, 2, 10), TODAY) == 10
        assert lifecycle.days_overdue(date(2024, 3, 10), TODAY) == 0
        assert lifecycle.days_overdue(None, TODAY) == 0


# ===== TESTS DEL SERVICIO =====

class TestInvoiceService:
    """Tests del servicio sobre el almacenamiento en memoria"""

    def test_create_invoice(self, service, storage, invoice_payload):
        invoice = service.create_invoice(InvoiceCreate(**invoice_payload), "user_1")

        assert invoice.status == InvoiceStatus.DRAFT
        assert invoice.invoice_number == "INV-2024-005"
        assert invoice.subtotal == Decimal("2500")
        assert invoice.tax_amount == Decimal("212.5")
        assert invoice.total_amount == Decimal("2712.5")
        assert invoice.total_amount_display == Decimal("2712.50")
        assert invoice.client_name == "Sarah Johnson"
        assert [i.position for i in invoice.items] == [0, 1, 2]
        assert len(storage.invoice_items.list(filters={"invoice_id": invoice.id})) == 3

    def test_create_and_send(self, service, invoice_payload):
        invoice = service.create_invoice(InvoiceCreate(**invoice_payload), "user_1", send=True)
        assert invoice.status == InvoiceStatus.SENT
        assert invoice.sent_at is not None

    def test_create_requires_client(self, service, storage, invoice_payload):
        invoice_payload.pop("client_id")
        with pytest.raises(ValidationError):
            service.create_invoice(InvoiceCreate(**invoice_payload), "user_1")
        assert len(storage.invoices) == 4

    def test_create_unknown_client(self, service, invoice_payload):
        invoice_payload["client_id"] = "client_404"
        with pytest.raises(NotFound):
            service.create_invoice(InvoiceCreate(**invoice_payload), "user_1")

    def test_create_blank_invoice_number(self, service, invoice_payload):
        invoice_payload["invoice_number"] = "   "
        with pytest.raises(ValidationError):
            service.create_invoice(InvoiceCreate(**invoice_payload), "user_1")

    def test_create_duplicate_invoice_number(self, service, invoice_payload):
        invoice_payload["invoice_number"] = "INV-2024-001"
        with pytest.raises(ValidationError):
            service.create_invoice(InvoiceCreate(**invoice_payload), "user_1")

    def test_create_item_without_description_writes_nothing(self, service, storage, invoice_payload):
        invoice_payload["items"][1]["description"] = ""
        with pytest.raises(ValidationError):
            service.create_invoice(InvoiceCreate(**invoice_payload), "user_1")
        assert len(storage.invoices) == 4
        assert len(storage.invoice_items) == 9

    def test_create_without_items_fails(self, service, invoice_payload):
        invoice_payload["items"] = []
        with pytest.raises(ValidationError):
            service.create_invoice(InvoiceCreate(**invoice_payload), "user_1")

    def test_create_with_inactive_gateway(self, service, invoice_payload):
        invoice_payload["payment_gateway"] = "wise"
        with pytest.raises(ValidationError):
            service.create_invoice(InvoiceCreate(**invoice_payload), "user_1")

    def test_create_with_active_gateway(self, service, invoice_payload):
        invoice_payload["payment_gateway"] = "paypal"
        invoice = service.create_invoice(InvoiceCreate(**invoice_payload), "user_1")
        assert invoice.payment_gateway == "paypal"

    def test_update_draft_replaces_items(self, service, storage):
        data = InvoiceUpdate(
            tax_rate=Decimal("10"),
            items=[InvoiceItemIn(description="Keyword research", quantity=2, unit_price=100)],
        )
        invoice = service.update_invoice("invoice_4", data, "user_1")

        assert invoice.subtotal == Decimal("200")
        assert invoice.tax_amount == Decimal("20")
        assert invoice.total_amount == Decimal("220")
        assert [i.description for i in invoice.items] == ["Keyword research"]
        assert len(storage.invoice_items.list(filters={"invoice_id": "invoice_4"})) == 1

    def test_update_tax_rate_keeps_items(self, service):
        invoice = service.update_invoice("invoice_4", InvoiceUpdate(tax_rate=Decimal("0")), "user_1")
        assert invoice.subtotal == Decimal("800")
        assert invoice.total_amount == Decimal("800")
        assert len(invoice.items) == 2

    def test_update_item_write_failure_restores_items(self, service, storage, monkeypatch):
        original_create = storage.invoice_items.create
        calls = []

        def fail_on_second(record):
            calls.append(record)
            if len(calls) == 2:
                raise PersistenceFailure("No se pudo guardar en invoice_items")
            return original_create(record)

        monkeypatch.setattr(storage.invoice_items, "create", fail_on_second)
        data = InvoiceUpdate(items=[
            InvoiceItemIn(description="Audit", quantity=1, unit_price=100),
            InvoiceItemIn(description="Copywriting", quantity=1, unit_price=200),
        ])
        with pytest.raises(PersistenceFailure):
            service.update_invoice("invoice_4", data, "user_1")

        items = storage.invoice_items.list(filters={"invoice_id": "invoice_4"}, order_by="position")
        assert [i["id"] for i in items] == ["item_8", "item_9"]
        record = storage.invoices.get("invoice_4")
        assert record["subtotal"] == Decimal("800")
        assert record["subtotal"] == sum(Decimal(str(i["total"])) for i in items)

    def test_update_invoice_write_failure_restores_items(self, service, storage, monkeypatch):
        def refuse(record_id, patch):
            raise PersistenceFailure("No se pudo guardar en invoices")

        monkeypatch.setattr(storage.invoices, "update", refuse)
        data = InvoiceUpdate(items=[InvoiceItemIn(description="Audit", quantity=1, unit_price=100)])
        with pytest.raises(PersistenceFailure):
            service.update_invoice("invoice_4", data, "user_1")

        items = storage.invoice_items.list(filters={"invoice_id": "invoice_4"}, order_by="position")
        assert [i["description"] for i in items] == ["SEO Audit & Strategy", "Content Optimization"]
        assert storage.invoices.get("invoice_4")["subtotal"] == Decimal("800")

    def test_update_sent_invoice_fails(self, service, storage):
        before = storage.invoices.get("invoice_2")
        with pytest.raises(InvalidTransition):
            service.update_invoice("invoice_2", InvoiceUpdate(title="Changed"), "user_1")
        assert storage.invoices.get("invoice_2") == before

    def test_update_due_date_before_issue_date(self, service):
        with pytest.raises(ValidationError):
            service.update_invoice("invoice_4", InvoiceUpdate(due_date=date(2024, 1, 1)), "user_1")

    def test_list_counts_use_derived_overdue(self, service):
        result = service.list_invoices("user_1", InvoiceFilters())
        assert result.total == 4
        counts = result.counts_by_status
        assert (counts.all, counts.draft, counts.sent, counts.paid, counts.overdue, counts.cancelled) == (4, 1, 1, 1, 1, 0)

    def test_list_filter_overdue(self, service):
        result = service.list_invoices("user_1", InvoiceFilters(status=DisplayStatus.OVERDUE))
        assert [i.id for i in result.invoices] == ["invoice_3"]
        invoice = result.invoices[0]
        assert invoice.status == InvoiceStatus.SENT
        assert invoice.is_overdue
        assert invoice.days_overdue == 21

    def test_list_filter_sent_excludes_overdue(self, service):
        result = service.list_invoices("user_1", InvoiceFilters(status=DisplayStatus.SENT))
        assert [i.id for i in result.invoices] == ["invoice_2"]

    def test_list_search(self, service):
        assert [i.id for i in service.list_invoices("user_1", InvoiceFilters(search="brand")).invoices] == ["invoice_3"]
        assert [i.id for i in service.list_invoices("user_1", InvoiceFilters(search="sarah")).invoices] == ["invoice_2"]
        assert service.list_invoices("user_1", InvoiceFilters(search="INV-2024")).total == 4

    def test_list_ordered_by_created_at_desc(self, service):
        result = service.list_invoices("user_1", InvoiceFilters(), limit=2)
        assert [i.id for i in result.invoices] == ["invoice_4", "invoice_2"]
        assert result.total == 4

    def test_list_other_user_is_empty(self, service):
        assert service.list_invoices("user_2", InvoiceFilters()).total == 0

    def test_next_invoice_number(self, service):
        result = service.next_invoice_number("user_1")
        assert result.next_number == "INV-2024-005"
        assert result.current_sequence == 4

    def test_mark_paid_overdue_invoice(self, service):
        result = service.mark_paid("invoice_3", "user_1")
        assert result.previous_status == InvoiceStatus.SENT
        assert result.invoice.status == InvoiceStatus.PAID
        assert result.invoice.paid_at is not None
        assert not result.invoice.is_overdue

    def test_send_paid_invoice_fails(self, service, storage):
        before = storage.invoices.get("invoice_1")
        with pytest.raises(InvalidTransition):
            service.send_invoice("invoice_1", "user_1")
        assert storage.invoices.get("invoice_1") == before

    def test_cancel_with_reason(self, service):
        result = service.cancel_invoice("invoice_2", "user_1", reason="Project cancelled")
        assert result.invoice.status == InvoiceStatus.CANCELLED
        assert result.invoice.notes.endswith("[CANCELLED] Project cancelled")

    def test_delete_invoice_removes_items(self, service, storage):
        service.delete_invoice("invoice_1", "user_1")
        assert len(storage.invoices) == 3
        assert storage.invoice_items.list(filters={"invoice_id": "invoice_1"}) == []

    def test_delete_missing_invoice(self, service):
        with pytest.raises(NotFound):
            service.delete_invoice("invoice_404", "user_1")

    def test_other_user_cannot_read(self, service):
        with pytest.raises(NotFound):
            service.get_invoice("invoice_1", "user_2")

    def test_invoice_reminders(self, service):
        events = service.get_invoice_reminders("invoice_2", "user_1")
        assert {(e.reminder_type.value, e.scheduled_for) for e in events} == {
            ("before_due", date(2024, 2, 27)),
            ("after_due", date(2024, 3, 2)),
        }

    def test_draft_invoice_has_no_reminders(self, service):
        assert service.get_invoice_reminders("invoice_4", "user_1") == []


# ===== TESTS DE ENDPOINTS =====

class TestInvoiceEndpoints:
    """Tests de la API de facturas"""

    def test_list_invoices(self, client):
        response = client.get("/invoices/")
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 4
        # Con la fecha actual las dos facturas enviadas ya vencieron
        assert data["counts_by_status"]["overdue"] == 2
        assert data["counts_by_status"]["sent"] == 0

    def test_list_filter_by_status(self, client):
        response = client.get("/invoices/", params={"status": "overdue"})
        assert response.status_code == 200
        assert {i["id"] for i in response.json()["invoices"]} == {"invoice_2", "invoice_3"}

    def test_list_invalid_status(self, client):
        response = client.get("/invoices/", params={"status": "archived"})
        assert response.status_code == 422

    def test_create_invoice(self, client, invoice_payload):
        response = client.post("/invoices/", json=invoice_payload)
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "draft"
        assert Decimal(data["subtotal"]) == Decimal("2500.00")
        assert Decimal(data["tax_amount"]) == Decimal("212.50")
        assert Decimal(data["total_amount"]) == Decimal("2712.50")
        assert len(data["items"]) == 3

    def test_create_and_send(self, client, invoice_payload):
        response = client.post("/invoices/", params={"send": True}, json=invoice_payload)
        assert response.status_code == 201
        assert response.json()["status"] == "sent"

    def test_create_without_client(self, client, invoice_payload):
        invoice_payload.pop("client_id")
        response = client.post("/invoices/", json=invoice_payload)
        assert response.status_code == 400
        assert response.json()["error"] == "ValidationError"

    def test_create_tax_rate_out_of_range(self, client, invoice_payload):
        invoice_payload["tax_rate"] = 150
        response = client.post("/invoices/", json=invoice_payload)
        assert response.status_code == 422

    def test_get_invoice(self, client):
        response = client.get("/invoices/invoice_1")
        assert response.status_code == 200
        data = response.json()
        assert data["client_name"] == "John Smith"
        assert Decimal(data["total_amount_display"]) == Decimal("2712.50")
        assert [i["description"] for i in data["items"]] == [
            "Website Design & UI/UX", "Frontend Development", "Backend Integration",
        ]

    def test_get_missing_invoice(self, client):
        response = client.get("/invoices/invoice_404")
        assert response.status_code == 404
        assert response.json()["error"] == "NotFound"

    def test_other_user_gets_404(self, other_user_client):
        assert other_user_client.get("/invoices/invoice_1").status_code == 404

    def test_next_number(self, client):
        response = client.get("/invoices/next-number")
        assert response.status_code == 200
        assert response.json()["next_number"] == f"INV-{date.today().year}-005"

    def test_update_draft(self, client):
        response = client.patch("/invoices/invoice_4", json={"title": "SEO retainer"})
        assert response.status_code == 200
        assert response.json()["title"] == "SEO retainer"

    def test_update_paid_invoice_conflict(self, client):
        response = client.patch("/invoices/invoice_1", json={"title": "Changed"})
        assert response.status_code == 409
        assert response.json()["error"] == "InvalidTransition"

    def test_send_draft(self, client):
        response = client.post("/invoices/invoice_4/send")
        assert response.status_code == 200
        data = response.json()
        assert data["previous_status"] == "draft"
        assert data["invoice"]["status"] == "sent"
        assert data["invoice"]["sent_at"] is not None

    def test_send_paid_invoice_conflict(self, client):
        response = client.post("/invoices/invoice_1/send")
        assert response.status_code == 409
        assert response.json()["error"] == "InvalidTransition"

    def test_pay_draft_conflict(self, client):
        response = client.post("/invoices/invoice_4/pay")
        assert response.status_code == 409

    def test_pay_overdue(self, client):
        response = client.post("/invoices/invoice_3/pay")
        assert response.status_code == 200
        assert response.json()["invoice"]["display_status"] == "paid"

    def test_cancel(self, client):
        response = client.post("/invoices/invoice_4/cancel", json={"reason": "Duplicate"})
        assert response.status_code == 200
        assert response.json()["invoice"]["status"] == "cancelled"

    def test_cancel_without_body(self, client):
        response = client.post("/invoices/invoice_2/cancel")
        assert response.status_code == 200

    def test_delete(self, client, storage):
        response = client.delete("/invoices/invoice_4")
        assert response.status_code == 204
        assert client.get("/invoices/invoice_4").status_code == 404
        assert storage.invoice_items.list(filters={"invoice_id": "invoice_4"}) == []

    def test_delete_missing(self, client):
        assert client.delete("/invoices/invoice_404").status_code == 404

    def test_reminders(self, client):
        response = client.get("/invoices/invoice_2/reminders")
        assert response.status_code == 200
        assert sorted(e["scheduled_for"] for e in response.json()) == ["2024-02-27", "2024-03-02"]

    def test_preview_totals_coerces_values(self, client):
        response = client.post("/invoices/preview-totals", json={
            "items": [
                {"description": "A", "quantity": "abc", "unit_price": "10"},
                {"description": "B", "quantity": 2, "unit_price": "not a price"},
            ],
            "tax_rate": 8.5,
        })
        assert response.status_code == 200
        data = response.json()
        assert [i["quantity"] for i in data["items"]] == [1, 2]
        assert Decimal(data["subtotal"]) == Decimal("10")
        assert Decimal(data["total_amount_display"]) == Decimal("10.85")
