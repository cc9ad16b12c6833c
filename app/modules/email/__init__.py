"""
Envío de correos (SMTP + Jinja2) y sus tareas de Celery.
"""
