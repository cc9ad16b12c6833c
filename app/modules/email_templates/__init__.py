"""
Plantillas de correo para facturas, recordatorios y agradecimientos.
"""
