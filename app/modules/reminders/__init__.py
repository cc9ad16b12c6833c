"""
Recordatorios de pago: configuración por usuario, cálculo de fechas y envío diario.
"""
