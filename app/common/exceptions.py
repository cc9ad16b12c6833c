"""
Errores de dominio de la aplicación

Los servicios lanzan estas excepciones; los handlers registrados en
app.main las traducen a respuestas JSON para que el frontend muestre
la notificación correspondiente.
"""
from fastapi import status


class AppError(Exception):
    """Base de todos los errores de dominio"""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    @property
    def error(self) -> str:
        return type(self).__name__


class ValidationError(AppError):
    """Falta un campo requerido o un valor es inválido"""

    status_code = status.HTTP_400_BAD_REQUEST


class InvalidTransition(AppError):
    """Cambio de estado no permitido"""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, detail: str, current=None, target=None):
        super().__init__(detail)
        self.current = current
        self.target = target


class OutOfRange(AppError):
    """Índice de ítem fuera de rango"""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, index: int, size: int):
        super().__init__(f"Índice de ítem {index} fuera de rango (la factura tiene {size} ítems)")
        self.index = index
        self.size = size


class NotFound(AppError):
    """El registro referenciado no existe"""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, collection: str, record_id: str):
        super().__init__(f"Registro {record_id} no encontrado en {collection}")
        self.collection = collection
        self.record_id = record_id


class PersistenceFailure(AppError):
    """El almacenamiento no está disponible"""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
