import smtplib
import ssl
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import List, Optional, Dict, Any
from pathlib import Path
import logging
from jinja2 import Environment, FileSystemLoader, select_autoescape
from app.core.config import settings

logger = logging.getLogger(__name__)


class EmailService:
    """
    Servicio SMTP para facturas y recordatorios.

    El texto de las plantillas del usuario se envía como texto plano y dentro
    de un envoltorio HTML (templates/notification_email.html).
    """

    def __init__(self):
        self.smtp_server = settings.EMAIL_SMTP_SERVER
        self.smtp_port = settings.EMAIL_SMTP_PORT
        self.username = settings.EMAIL_USERNAME
        self.password = settings.EMAIL_PASSWORD
        self.use_tls = settings.EMAIL_USE_TLS
        self.from_email = settings.EMAIL_FROM
        self.from_name = settings.EMAIL_FROM_NAME

        template_dir = Path(__file__).parent / "templates"
        self.jinja_env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=select_autoescape(['html', 'xml'])
        )

    def _create_smtp_connection(self):
        """Crear conexión SMTP segura."""
        try:
            if self.use_tls:
                context = ssl.create_default_context()
                server = smtplib.SMTP(self.smtp_server, self.smtp_port)
                server.starttls(context=context)
            else:
                server = smtplib.SMTP_SSL(self.smtp_server, self.smtp_port)

            server.login(self.username, self.password)
            return server
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Error creating SMTP connection: {e}")
            raise

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Renderizar un template HTML con contexto.

        Args:
            template_name: Nombre del archivo de template
            context: Variables para el template
        """
        template = self.jinja_env.get_template(template_name)
        return template.render(**context)

    def send_email(
        self,
        to_emails: List[str],
        subject: str,
        html_content: Optional[str] = None,
        text_content: Optional[str] = None,
        cc_emails: Optional[List[str]] = None
    ) -> bool:
        """
        Enviar correo electrónico.

        Returns:
            True si se envió correctamente, False en caso contrario
        """
        msg = MIMEMultipart('alternative')
        msg['Subject'] = subject
        msg['From'] = f"{self.from_name} <{self.from_email}>"
        msg['To'] = ', '.join(to_emails)
        if cc_emails:
            msg['Cc'] = ', '.join(cc_emails)

        if text_content:
            msg.attach(MIMEText(text_content, 'plain', 'utf-8'))
        if html_content:
            msg.attach(MIMEText(html_content, 'html', 'utf-8'))

        try:
            with self._create_smtp_connection() as server:
                server.sendmail(self.from_email, to_emails + (cc_emails or []), msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Error sending email: {e}")
            return False

        logger.info(f"Email sent successfully to {', '.join(to_emails)}")
        return True

    def send_template_email(
        self,
        to_emails: List[str],
        subject: str,
        template_name: str,
        context: Dict[str, Any],
        cc_emails: Optional[List[str]] = None
    ) -> bool:
        """
        Enviar correo usando un template HTML; los párrafos del contexto
        también se envían como texto plano.
        """
        html_content = self.render_template(template_name, {"subject": subject, **context})
        text_content = "\n\n".join(context.get("paragraphs", [])) or None
        return self.send_email(
            to_emails=to_emails,
            subject=subject,
            html_content=html_content,
            text_content=text_content,
            cc_emails=cc_emails
        )


# Singleton instance
email_service = EmailService()
