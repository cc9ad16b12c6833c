"""
Servicio de facturas

Orquesta el ledger de ítems, el cálculo de totales y el ciclo de vida sobre
el almacenamiento. Las validaciones y los cambios de estado inválidos se
rechazan antes de escribir.
"""
from datetime import date
from typing import Dict, List, Optional
import logging

from app.core.config import settings
from app.common.exceptions import InvalidTransition, NotFound, PersistenceFailure, ValidationError
from app.common.mixins import utcnow
from app.common.storage import Storage
from app.modules.invoices import calculator, lifecycle
from app.modules.invoices.ledger import LineItemLedger
from app.modules.invoices.lifecycle import InvoiceAction
from app.modules.invoices.models import InvoiceStatus
from app.modules.invoices.schemas import (
    InvoiceActionResult, InvoiceCreate, InvoiceDetail, InvoiceFilters, InvoiceItemOut,
    InvoiceList, InvoiceOut, InvoiceStatusCounts, InvoiceUpdate, NextInvoiceNumber,
    TotalsPreview, TotalsPreviewRequest
)
from app.modules.payment_gateways.service import PaymentGatewayService
from app.modules.reminders.schemas import ReminderEvent
from app.modules.reminders.service import ReminderSettingsService

logger = logging.getLogger(__name__)

ACTION_MESSAGES = {
    InvoiceAction.SEND: "Factura enviada",
    InvoiceAction.MARK_PAID: "Factura marcada como pagada",
    InvoiceAction.CANCEL: "Factura cancelada",
}


class InvoiceService:
    """Servicio principal para gestión de facturas"""

    def __init__(self, storage: Storage, today: Optional[date] = None):
        self.storage = storage
        self._today = today

    @property
    def today(self) -> date:
        return self._today or date.today()

    # ===== LECTURA =====

    def _get_owned(self, invoice_id: str, user_id: str) -> dict:
        record = self.storage.invoices.get(invoice_id)
        if record["user_id"] != user_id:
            raise NotFound("invoices", invoice_id)
        return record

    def _items_for(self, invoice_id: str) -> List[dict]:
        return self.storage.invoice_items.list(filters={"invoice_id": invoice_id}, order_by="position")

    def _clients_by_id(self, user_id: str) -> Dict[str, dict]:
        return {c["id"]: c for c in self.storage.clients.list(filters={"user_id": user_id})}

    def to_out(self, record: dict, clients: Dict[str, dict]) -> InvoiceOut:
        status = lifecycle.normalize_status(record["status"])
        overdue = lifecycle.is_overdue(status, record.get("due_date"), self.today)
        client = clients.get(record["client_id"]) or {}
        data = {**record, "status": status}
        return InvoiceOut(
            **data,
            client_name=client.get("name"),
            client_email=client.get("email"),
            display_status=lifecycle.display_status(data, self.today),
            is_overdue=overdue,
            days_overdue=lifecycle.days_overdue(record.get("due_date"), self.today) if overdue else 0,
            subtotal_display=calculator.round_money(record["subtotal"]),
            tax_amount_display=calculator.round_money(record["tax_amount"]),
            total_amount_display=calculator.round_money(record["total_amount"]),
        )

    def _to_detail(self, record: dict, clients: Dict[str, dict]) -> InvoiceDetail:
        out = self.to_out(record, clients)
        items = [InvoiceItemOut(**item) for item in self._items_for(record["id"])]
        return InvoiceDetail(**out.model_dump(), items=items)

    def get_invoice(self, invoice_id: str, user_id: str) -> InvoiceDetail:
        """Obtener factura con sus ítems"""
        record = self._get_owned(invoice_id, user_id)
        return self._to_detail(record, self._clients_by_id(user_id))

    def counts_by_status(self, records: List[dict]) -> InvoiceStatusCounts:
        """Conteo por estado visible (overdue derivado, no guardado)"""
        counts = InvoiceStatusCounts(all=len(records))
        for record in records:
            key = lifecycle.display_status(record, self.today).value
            setattr(counts, key, getattr(counts, key) + 1)
        return counts

    def list_invoices(self, user_id: str, filters: InvoiceFilters, limit: Optional[int] = None) -> InvoiceList:
        """
        Listar facturas del usuario

        Args:
            user_id: Usuario autenticado
            filters: Estado (incluye overdue), cliente, rango de emisión y búsqueda
            limit: Máximo de facturas a retornar

        Returns:
            Facturas más recientes primero, con conteos por estado sobre todas las del usuario
        """
        records = self.storage.invoices.list(filters={"user_id": user_id}, order_by="-created_at")
        clients = self._clients_by_id(user_id)
        counts = self.counts_by_status(records)

        if filters.status:
            records = [r for r in records if lifecycle.display_status(r, self.today) == filters.status]
        if filters.client_id:
            records = [r for r in records if r["client_id"] == filters.client_id]
        if filters.date_from:
            records = [r for r in records if r["issue_date"] >= filters.date_from]
        if filters.date_to:
            records = [r for r in records if r["issue_date"] <= filters.date_to]
        if filters.search:
            term = filters.search.lower()
            records = [
                r for r in records
                if term in (r.get("invoice_number") or "").lower()
                or term in (r.get("title") or "").lower()
                or term in (clients.get(r["client_id"], {}).get("name") or "").lower()
            ]

        total = len(records)
        if limit:
            records = records[:limit]

        return InvoiceList(
            invoices=[self.to_out(r, clients) for r in records],
            total=total,
            limit=limit,
            applied_filters=filters,
            counts_by_status=counts,
        )

    def next_invoice_number(self, user_id: str) -> NextInvoiceNumber:
        """Siguiente número con formato INV-AAAA-NNN"""
        existing = {r["invoice_number"] for r in self.storage.invoices.list(filters={"user_id": user_id})}
        sequence = len(existing) + 1
        prefix = f"{settings.INVOICE_NUMBER_PREFIX}-{self.today.year}-"
        while f"{prefix}{sequence:03d}" in existing:
            sequence += 1
        return NextInvoiceNumber(
            next_number=f"{prefix}{sequence:03d}",
            prefix=prefix,
            current_sequence=sequence - 1,
        )

    # ===== VALIDACIÓN =====

    def _check_client(self, client_id: Optional[str], user_id: str):
        if not client_id:
            raise ValidationError("Debe seleccionar un cliente")
        client = self.storage.clients.get(client_id)
        if client["user_id"] != user_id:
            raise NotFound("clients", client_id)

    def _check_invoice_number(self, number: Optional[str], user_id: str, invoice_id: Optional[str] = None) -> str:
        if not (number or "").strip():
            raise ValidationError("El número de factura es obligatorio")
        number = number.strip()
        duplicate = self.storage.invoices.first({"user_id": user_id, "invoice_number": number})
        if duplicate and duplicate["id"] != invoice_id:
            raise ValidationError(f"Ya existe una factura con el número {number}")
        return number

    def _check_gateway(self, gateway: Optional[str], user_id: str):
        if gateway and not PaymentGatewayService(self.storage).is_active_gateway(user_id, gateway):
            raise ValidationError(f"La pasarela de pago '{gateway}' no está activa")

    @staticmethod
    def _build_ledger(items) -> LineItemLedger:
        ledger = LineItemLedger.from_items(items)
        ledger.validate()
        return ledger

    # ===== ESCRITURA =====

    def _write_items(self, invoice_id: str, ledger: LineItemLedger) -> None:
        now = utcnow()
        for position, item in enumerate(ledger.items):
            self.storage.invoice_items.create({
                "invoice_id": invoice_id,
                "position": position,
                "description": item.description,
                "quantity": item.quantity,
                "unit_price": item.unit_price,
                "total": item.total,
                "created_at": now,
            })

    def _delete_items(self, invoice_id: str) -> None:
        for item in self._items_for(invoice_id):
            self.storage.invoice_items.delete(item["id"])

    def _restore_items(self, invoice_id: str, previous_items: List[dict]) -> None:
        self._delete_items(invoice_id)
        for item in previous_items:
            self.storage.invoice_items.create(item)

    def _replace_items(self, invoice_id: str, ledger: LineItemLedger, previous_items: List[dict]) -> None:
        """Reemplazar los ítems guardados; si falla la escritura vuelven los anteriores"""
        self._delete_items(invoice_id)
        try:
            self._write_items(invoice_id, ledger)
        except PersistenceFailure:
            logger.error(f"Could not save items of invoice {invoice_id}, restoring previous items")
            self._restore_items(invoice_id, previous_items)
            raise

    def create_invoice(self, data: InvoiceCreate, user_id: str, send: bool = False) -> InvoiceDetail:
        """
        Crear una factura en borrador

        Args:
            data: Datos de la factura; sin invoice_number se genera el siguiente
            user_id: Usuario autenticado
            send: Enviar inmediatamente (borrador -> enviada)

        Raises:
            ValidationError: cliente, número o descripción de ítems faltantes
            NotFound: el cliente no existe
        """
        self._check_client(data.client_id, user_id)
        if data.invoice_number is None:
            number = self.next_invoice_number(user_id).next_number
        else:
            number = self._check_invoice_number(data.invoice_number, user_id)
        ledger = self._build_ledger(data.items)
        self._check_gateway(data.payment_gateway, user_id)

        totals = calculator.calculate_totals(ledger.items, data.tax_rate)
        now = utcnow()
        record = self.storage.invoices.create({
            **data.model_dump(exclude={"items", "invoice_number"}),
            **totals.model_dump(),
            "user_id": user_id,
            "invoice_number": number,
            "status": lifecycle.initial_status(),
            "created_at": now,
            "updated_at": now,
        })

        try:
            self._write_items(record["id"], ledger)
        except PersistenceFailure:
            logger.error(f"Could not save items of invoice {record['id']}, removing it")
            self._delete_items(record["id"])
            self.storage.invoices.delete(record["id"])
            raise

        logger.info(f"Invoice {number} created for user {user_id} (total={totals.total_amount})")

        if send:
            return self.apply_action(record["id"], InvoiceAction.SEND, user_id).invoice
        return self._to_detail(record, self._clients_by_id(user_id))

    def update_invoice(self, invoice_id: str, data: InvoiceUpdate, user_id: str) -> InvoiceDetail:
        """
        Actualizar una factura en borrador; si se envían ítems reemplazan a los actuales

        Raises:
            InvalidTransition: la factura ya no está en borrador
        """
        record = self._get_owned(invoice_id, user_id)
        status = lifecycle.normalize_status(record["status"])
        if status != InvoiceStatus.DRAFT:
            raise InvalidTransition(
                f"Solo se pueden editar facturas en borrador (estado actual: {status.value})",
                current=status,
            )

        patch = data.model_dump(exclude_unset=True, exclude={"items"})
        for field in ("issue_date", "currency", "tax_rate"):
            if field in patch and patch[field] is None:
                del patch[field]
        if "client_id" in patch:
            self._check_client(patch["client_id"], user_id)
        if "invoice_number" in patch:
            patch["invoice_number"] = self._check_invoice_number(patch["invoice_number"], user_id, invoice_id)
        if "payment_gateway" in patch:
            self._check_gateway(patch["payment_gateway"], user_id)

        issue_date = patch.get("issue_date") or record["issue_date"]
        due_date = patch["due_date"] if "due_date" in patch else record.get("due_date")
        if due_date and due_date < issue_date:
            raise ValidationError("La fecha de vencimiento no puede ser anterior a la fecha de emisión")

        source_items = data.items if data.items is not None else self._items_for(invoice_id)
        ledger = self._build_ledger(source_items)
        tax_rate = patch.get("tax_rate", record["tax_rate"])
        totals = calculator.calculate_totals(ledger.items, tax_rate)

        patch.update(totals.model_dump())
        patch["updated_at"] = utcnow()

        # Ítems primero y la factura al final; ante un fallo se restauran los ítems anteriores
        previous_items = self._items_for(invoice_id) if data.items is not None else None
        if previous_items is not None:
            self._replace_items(invoice_id, ledger, previous_items)
        try:
            record = self.storage.invoices.update(invoice_id, patch)
        except PersistenceFailure:
            if previous_items is not None:
                logger.error(f"Could not update invoice {invoice_id}, restoring its items")
                self._restore_items(invoice_id, previous_items)
            raise

        logger.info(f"Invoice {record['invoice_number']} updated (total={totals.total_amount})")
        return self._to_detail(record, self._clients_by_id(user_id))

    def apply_action(
        self,
        invoice_id: str,
        action: InvoiceAction,
        user_id: str,
        reason: Optional[str] = None
    ) -> InvoiceActionResult:
        """Aplicar una transición de estado (send, mark_paid, cancel)"""
        record = self._get_owned(invoice_id, user_id)
        previous = lifecycle.normalize_status(record["status"])
        patch = lifecycle.transition(record, action)

        if action == InvoiceAction.CANCEL and reason:
            notes = record.get("notes")
            patch["notes"] = f"{notes}\n\n[CANCELLED] {reason}" if notes else f"[CANCELLED] {reason}"

        record = self.storage.invoices.update(invoice_id, patch)
        logger.info(f"Invoice {record['invoice_number']} status changed from {previous.value} to {patch['status'].value}")

        return InvoiceActionResult(
            invoice=self._to_detail(record, self._clients_by_id(user_id)),
            previous_status=previous,
            message=ACTION_MESSAGES[action],
        )

    def send_invoice(self, invoice_id: str, user_id: str) -> InvoiceActionResult:
        return self.apply_action(invoice_id, InvoiceAction.SEND, user_id)

    def mark_paid(self, invoice_id: str, user_id: str) -> InvoiceActionResult:
        return self.apply_action(invoice_id, InvoiceAction.MARK_PAID, user_id)

    def cancel_invoice(self, invoice_id: str, user_id: str, reason: Optional[str] = None) -> InvoiceActionResult:
        return self.apply_action(invoice_id, InvoiceAction.CANCEL, user_id, reason)

    def delete_invoice(self, invoice_id: str, user_id: str) -> None:
        """Eliminar la factura y sus ítems"""
        record = self._get_owned(invoice_id, user_id)
        self._delete_items(invoice_id)
        self.storage.invoices.delete(invoice_id)
        logger.info(f"Invoice {record['invoice_number']} deleted")

    # ===== DERIVADOS =====

    def get_invoice_reminders(self, invoice_id: str, user_id: str) -> List[ReminderEvent]:
        record = self._get_owned(invoice_id, user_id)
        return ReminderSettingsService(self.storage).events_for_invoice(record)

    @staticmethod
    def preview_totals(data: TotalsPreviewRequest) -> TotalsPreview:
        """Totales de un borrador sin guardarlo"""
        ledger = LineItemLedger.from_items(data.items)
        items = ledger.items
        totals = calculator.calculate_totals(items, data.tax_rate)
        return TotalsPreview(
            **totals.model_dump(),
            items=items,
            subtotal_display=calculator.round_money(totals.subtotal),
            tax_amount_display=calculator.round_money(totals.tax_amount),
            total_amount_display=calculator.round_money(totals.total_amount),
        )
