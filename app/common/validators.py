"""
Validadores compartidos por los esquemas
"""
import re
from datetime import date
from typing import Optional, Tuple


def validate_currency_code(code: str) -> bool:
    """Código ISO 4217: tres letras (USD, EUR, COP)"""
    return bool(code) and re.match(r'^[A-Za-z]{3}$', code) is not None


def validate_phone(phone: str) -> bool:
    """
    Valida un teléfono internacional de forma laxa.
    Formatos válidos:
    - +1 (555) 123-4567
    - 555-123-4567
    - +573001234567
    """
    # Limpiar espacios y caracteres especiales
    cleaned = re.sub(r'[\s\-\(\)\.]', '', phone)
    return re.match(r'^\+?[0-9]{7,15}$', cleaned) is not None


def validate_hex_color(color: str) -> bool:
    """Color en formato #RRGGBB"""
    return re.match(r'^#[0-9A-Fa-f]{6}$', color) is not None


def parse_month(value: Optional[str]) -> Optional[Tuple[int, int]]:
    """
    Convierte 'AAAA-MM' en (año, mes).

    Returns:
        None si value es vacío

    Raises:
        ValueError si el formato o el mes son inválidos
    """
    if not value:
        return None
    match = re.match(r'^(\d{4})-(\d{2})$', value)
    if not match:
        raise ValueError("El mes debe tener formato AAAA-MM")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValueError("Mes inválido. Debe estar entre 1 y 12")
    return year, month


def in_month(value: date, month: Tuple[int, int]) -> bool:
    return (value.year, value.month) == month
