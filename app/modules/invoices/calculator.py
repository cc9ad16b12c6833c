"""
Helper para cálculo de totales de factura

Funciones puras: no guardan estado ni redondean entre pasos. El redondeo a
2 decimales (round_money) solo se usa para mostrar valores.
"""

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Any, Iterable

from app.common.exceptions import ValidationError
from app.modules.invoices.schemas import InvoiceTotals

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"Valor numérico inválido: {value!r}")


def _item_total(item) -> Decimal:
    total = item["total"] if isinstance(item, dict) else item.total
    return to_decimal(total)


def validate_tax_rate(tax_rate: Any) -> Decimal:
    rate = to_decimal(tax_rate)
    if rate < ZERO or rate > HUNDRED:
        raise ValidationError("La tasa de impuesto debe estar entre 0 y 100")
    return rate


def subtotal(items: Iterable) -> Decimal:
    """Suma de los totales de línea antes de impuestos"""
    return sum((_item_total(item) for item in items), ZERO)


def tax_amount(items: Iterable, tax_rate: Any) -> Decimal:
    """
    Calcular el impuesto sobre el subtotal

    Args:
        items: Ítems de la factura (objetos o dicts con "total")
        tax_rate: Porcentaje entre 0 y 100 (ej. 8.5)

    Returns:
        subtotal * tax_rate / 100, sin redondear
    """
    rate = validate_tax_rate(tax_rate)
    return subtotal(items) * rate / HUNDRED


def total(items: Iterable, tax_rate: Any) -> Decimal:
    items = list(items)
    return subtotal(items) + tax_amount(items, tax_rate)


def calculate_totals(items: Iterable, tax_rate: Any) -> InvoiceTotals:
    """Calcular subtotal, impuesto y total en una sola pasada"""
    items = list(items)
    rate = validate_tax_rate(tax_rate)
    sub = subtotal(items)
    tax = sub * rate / HUNDRED
    return InvoiceTotals(
        subtotal=sub,
        tax_rate=rate,
        tax_amount=tax,
        total_amount=sub + tax
    )


def round_money(value: Any) -> Decimal:
    """Redondeo comercial a 2 decimales (solo para mostrar)"""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
