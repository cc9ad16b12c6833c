"""
Tests del servicio SMTP (sin conexión real)
"""

import smtplib

from app.modules.email.service import EmailService


class FakeSMTP:
    def __init__(self):
        self.sent = []

    def __enter__(self):
        return self

    def __exit__(self, *args):
        return False

    def sendmail(self, from_email, recipients, message):
        self.sent.append((from_email, recipients, message))


class TestEmailService:

    def test_render_notification_template(self):
        html = EmailService().render_template("notification_email.html", {
            "subject": "Invoice #INV-2024-001",
            "paragraphs": ["Dear <John>,", "Thanks"],
            "payment_link": "https://pay.example.org/1",
            "company_name": "Acme",
        })
        assert "Invoice #INV-2024-001" in html
        assert "Dear &lt;John&gt;," in html
        assert 'href="https://pay.example.org/1"' in html

    def test_render_without_payment_link(self):
        html = EmailService().render_template("notification_email.html", {"subject": "Hi", "paragraphs": []})
        assert "Pay invoice" not in html

    def test_send_template_email(self, monkeypatch):
        service = EmailService()
        server = FakeSMTP()
        monkeypatch.setattr(service, "_create_smtp_connection", lambda: server)

        assert service.send_template_email(
            ["sarah@techstartup.com"], "Reminder", "notification_email.html",
            {"paragraphs": ["First", "Second"], "company_name": "Acme"},
            cc_emails=["owner@acmestudio.io"],
        )
        _, recipients, message = server.sent[0]
        assert recipients == ["sarah@techstartup.com", "owner@acmestudio.io"]
        assert "Subject: Reminder" in message

    def test_send_failure_returns_false(self, monkeypatch):
        service = EmailService()

        def refuse():
            raise smtplib.SMTPAuthenticationError(535, b"bad credentials")

        monkeypatch.setattr(service, "_create_smtp_connection", refuse)
        assert service.send_email(["a@acmestudio.io"], "Hi", text_content="Hello") is False


class TestEmailTasks:

    def test_registered_email_tasks(self):
        from app.core.celery import celery_app
        from app.modules.email import tasks  # noqa: F401

        names = {name for name in celery_app.tasks.keys() if name.startswith("app.modules.email.tasks.")}
        assert names == {"app.modules.email.tasks.send_template_email_task"}
