import logging
import emails # Library for composing and sending emails
from emails.template import JinjaTemplate # For HTML templating
from typing import Dict, Any
import os

from certadmin.core.config import settings
from certadmin.models.certificate_model import Certificate

logger = logging.getLogger(__name__)

CERTIFICATE_READY_TEMPLATE = "certificate_ready.html"
SMTP_SUCCESS_CODES = (250, 252)


class TemplateRenderError(Exception):
    pass


def smtp_configured() -> bool:
    return bool(settings.EMAIL_HOST and settings.EMAIL_FROM_ADDRESS)


def smtp_options() -> Dict[str, Any]:
    """Connection options for `emails.Message.send`. Credentials are only passed when a username is set."""
    options: Dict[str, Any] = {
        "host": settings.EMAIL_HOST,
        "port": settings.EMAIL_PORT,
        "tls": settings.EMAIL_USE_TLS,
        "ssl": settings.EMAIL_USE_SSL,
    }
    if settings.EMAIL_USERNAME:
        options["user"] = settings.EMAIL_USERNAME
        if settings.EMAIL_PASSWORD:
            options["password"] = settings.EMAIL_PASSWORD
    return options


def send_email(to_email: str, subject: str, html_content: str) -> bool:
    """
    Delivers one HTML notice to a certificate holder.

    Without SMTP settings (local development) the notice is logged and counted as delivered,
    so staff can still mark certificates as notified.
    """
    if not smtp_configured():
        logger.warning(f"SMTP not configured, notice to {to_email} only logged. Subject: '{subject}'")
        logger.debug(f"Notice body:\n{html_content[:500]}")
        return True

    message = emails.Message(
        subject=subject,
        html=html_content,
        mail_from=(settings.EMAIL_FROM_NAME, settings.EMAIL_FROM_ADDRESS),
    )
    try:
        response = message.send(to=to_email, smtp=smtp_options())
    except Exception as e:
        logger.error(f"SMTP error while sending notice to {to_email}: {e}", exc_info=True)
        return False

    status_code = getattr(response, "status_code", None)
    if status_code in SMTP_SUCCESS_CODES:
        logger.info(f"Notice sent to {to_email} ('{subject}'), SMTP {status_code}")
        return True
    logger.error(f"SMTP rejected notice to {to_email}: status {status_code}, error {getattr(response, 'error', None)}")
    return False


def render_email_template(template_name: str, context: Dict[str, Any]) -> str:
    """Renders an email template from EMAILS_TEMPLATES_DIR with Jinja2."""
    template_file_path = os.path.join(settings.EMAILS_TEMPLATES_DIR, template_name)

    try:
        with open(template_file_path, "r", encoding="utf-8") as f:
            template_str = f.read()
    except FileNotFoundError as e:
        logger.error(f"Email template not found: {template_file_path}")
        raise TemplateRenderError(f"Email template '{template_name}' not found.") from e

    return JinjaTemplate(template_str).render(**context)


def send_templated_email(
    to_email: str,
    subject: str,
    html_template_name: str,
    context: Dict[str, Any]
) -> bool:
    """
    Renders an HTML email template and sends it.
    """
    logger.info(f"Preparing templated email. To: {to_email}, Subject: '{subject}', Template: {html_template_name}")

    context.setdefault("APP_NAME", settings.PROJECT_NAME)
    context.setdefault("APP_FRONTEND_URL", settings.APP_FRONTEND_URL)

    try:
        html_content = render_email_template(template_name=html_template_name, context=context)
    except TemplateRenderError:
        logger.error(f"Aborting email to {to_email} due to template rendering error for '{html_template_name}'.")
        return False

    return send_email(to_email=to_email, subject=subject, html_content=html_content)


def send_certificate_ready_email(certificate: Certificate) -> bool:
    """Tells the holder their certificate is ready for pickup or was sent digitally."""
    context = {
        "full_name": certificate.full_name,
        "course_name": certificate.course_name,
        "course_id": certificate.course_id,
        "year": certificate.year,
        "delivery_status": certificate.delivery_status,
        "physical_location": certificate.physical_location,
    }
    return send_templated_email(
        to_email=certificate.email,
        subject=f"Tu certificado de {certificate.course_name} está listo",
        html_template_name=CERTIFICATE_READY_TEMPLATE,
        context=context,
    )
