from certadmin.core.config import settings
from certadmin.models.certificate_model import Certificate
from certadmin.services import email_service


def make_certificate(**overrides):
    data = dict(
        id="c1", full_name="Ana Pérez", course_name="Liderazgo", course_id="LM-2025-01",
        course_type="Curso", year=2025, email="ana@example.com",
        delivery_status="listo_para_entrega", physical_location="Caja 3",
    )
    data.update(overrides)
    return Certificate(**data)


def test_send_email_is_skipped_without_smtp(monkeypatch):
    monkeypatch.setattr(settings, "EMAIL_HOST", None)

    assert email_service.send_email("ana@example.com", "Asunto", "<p>Hola</p>") is True


def test_certificate_ready_email_renders_template(monkeypatch):
    sent = {}

    def fake_send(to_email, subject, html_content):
        sent.update(to=to_email, subject=subject, html=html_content)
        return True

    monkeypatch.setattr(email_service, "send_email", fake_send)

    assert email_service.send_certificate_ready_email(make_certificate()) is True
    assert sent["to"] == "ana@example.com"
    assert "Liderazgo" in sent["subject"]
    assert "Ana Pérez" in sent["html"]
    assert "Caja 3" in sent["html"]
    assert "listo para ser retirado" in sent["html"]


def test_digital_delivery_uses_digital_wording(monkeypatch):
    sent = {}
    monkeypatch.setattr(email_service, "send_email", lambda to_email, subject, html_content: sent.update(html=html_content) or True)

    email_service.send_certificate_ready_email(make_certificate(delivery_status="digital_enviado"))

    assert "formato digital" in sent["html"]


def test_missing_template_returns_false(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "EMAILS_TEMPLATES_DIR", str(tmp_path))

    assert email_service.send_certificate_ready_email(make_certificate()) is False


class FakeMessage:
    """Stands in for `emails.Message` and records what would go over SMTP."""

    def __init__(self, status_code=250, error=None, **kwargs):
        self.kwargs = kwargs
        self.status_code = status_code
        self.error = error
        self.sent = None

    def send(self, to, smtp):
        self.sent = {"to": to, "smtp": smtp}
        return self


def configure_smtp(monkeypatch, username=None, password=None):
    monkeypatch.setattr(settings, "EMAIL_HOST", "smtp.example.com")
    monkeypatch.setattr(settings, "EMAIL_PORT", 2525)
    monkeypatch.setattr(settings, "EMAIL_FROM_ADDRESS", "certificados@example.com")
    monkeypatch.setattr(settings, "EMAIL_USERNAME", username)
    monkeypatch.setattr(settings, "EMAIL_PASSWORD", password)


def install_fake_message(monkeypatch, **response):
    messages = []

    def factory(**kwargs):
        message = FakeMessage(**response, **kwargs)
        messages.append(message)
        return message

    monkeypatch.setattr(email_service.emails, "Message", factory)
    return messages


def test_smtp_options_omit_credentials_without_username(monkeypatch):
    configure_smtp(monkeypatch, username=None, password="ignored")

    options = email_service.smtp_options()

    assert options["host"] == "smtp.example.com"
    assert options["port"] == 2525
    assert "user" not in options
    assert "password" not in options


def test_smtp_options_include_credentials(monkeypatch):
    configure_smtp(monkeypatch, username="mailer", password="secret")

    options = email_service.smtp_options()

    assert options["user"] == "mailer"
    assert options["password"] == "secret"


def test_send_email_goes_through_smtp(monkeypatch):
    configure_smtp(monkeypatch, username="mailer", password="secret")
    messages = install_fake_message(monkeypatch)

    assert email_service.send_email("ana@example.com", "Asunto", "<p>Hola</p>") is True

    message = messages[0]
    assert message.kwargs["subject"] == "Asunto"
    assert message.kwargs["mail_from"][1] == "certificados@example.com"
    assert message.sent["to"] == "ana@example.com"
    assert message.sent["smtp"]["user"] == "mailer"


def test_send_email_returns_false_when_smtp_rejects(monkeypatch):
    configure_smtp(monkeypatch)
    install_fake_message(monkeypatch, status_code=550, error="mailbox unavailable")

    assert email_service.send_email("ana@example.com", "Asunto", "<p>Hola</p>") is False
