import smtplib
from email.message import EmailMessage

from ocrmerge.config.settings import Settings
from ocrmerge.notification.base import BaseNotifier
from ocrmerge.notification.exceptions import NotificationError


class SmtpNotifier(BaseNotifier):
    """Sends operator notices through an SMTP relay."""

    def __init__(
        self,
        *,
        host: str,
        port: int,
        sender: str,
        recipient: str,
        username: str = "",
        password: str = "",
        use_tls: bool = True,
        timeout_seconds: int = 30,
    ) -> None:
        self._host = host
        self._port = port
        self._sender = sender
        self._recipient = recipient
        self._username = username
        self._password = password
        self._use_tls = use_tls
        self._timeout_seconds = timeout_seconds

    @classmethod
    def from_settings(cls, settings: Settings) -> "SmtpNotifier":
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            sender=settings.notification_sender or settings.smtp_username,
            recipient=settings.notification_recipient,
            username=settings.smtp_username,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
            timeout_seconds=settings.smtp_timeout_seconds,
        )

    def send(self, subject: str, body: str) -> None:
        if not self._host or not self._recipient:
            raise NotificationError("SMTP host or recipient is not configured")

        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = self._sender
        message["To"] = self._recipient
        message.set_content(body)

        try:
            with smtplib.SMTP(self._host, self._port, timeout=self._timeout_seconds) as client:
                if self._use_tls:
                    client.starttls()
                if self._username:
                    client.login(self._username, self._password)
                client.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            raise NotificationError(f"SMTP send to {self._host} failed: {exc}") from exc
