import logging
import smtplib
import ssl
from contextlib import contextmanager
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import Iterator

from storefront_config.settings import Settings

logger = logging.getLogger(__name__)

PASSWORD_RESET_SUBJECT = "Reset your password - {app_name}"

PASSWORD_RESET_TEXT = """Hello,

We received a request to reset the password for your {app_name} account.

Open the link below to choose a new password (valid for {valid_hours} hours):
{reset_link}

The link works once. If you didn't request this, you can safely ignore this email.

-- {app_name}
"""

PASSWORD_RESET_HTML = """
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; background-color: #f9fafb; margin: 0; padding: 20px;">
    <div style="max-width: 600px; margin: 0 auto; background-color: #ffffff; border-radius: 8px; padding: 40px;">
        <h2 style="color: #111827; margin-top: 0;">Reset your password</h2>
        <p style="color: #374151; line-height: 1.6;">We received a request to reset the password for your {app_name} account.</p>
        <p style="color: #374151; line-height: 1.6;">The button below is valid for {valid_hours} hours and works once.</p>
        <p style="margin: 30px 0; text-align: center;">
            <a href="{reset_link}" style="display: inline-block; padding: 14px 28px; background-color: #111827; color: #ffffff !important; text-decoration: none; border-radius: 6px; font-weight: 600;">Reset Password</a>
        </p>
        <p style="color: #6b7280; font-size: 14px;">Or copy and paste this link into your browser:</p>
        <p style="word-break: break-all; color: #2563eb; font-size: 14px;">{reset_link}</p>
        <p style="color: #9ca3af; font-size: 13px; margin-top: 40px;">If you didn't request this, you can safely ignore this email.</p>
    </div>
</body>
</html>
"""


class EmailService:
    """Sends the storefront's transactional email over SMTP."""

    def __init__(self, settings: Settings):
        self._settings = settings

    def _build_message(
        self,
        to_email: str,
        subject: str,
        text_body: str,
        html_body: str,
    ) -> MIMEMultipart:
        message = MIMEMultipart("alternative")
        message["Subject"] = subject
        message["From"] = formataddr(
            (self._settings.smtp_from_name, self._settings.smtp_from_email)
        )
        message["To"] = to_email
        # Clients render the last alternative they support
        message.attach(MIMEText(text_body, "plain"))
        message.attach(MIMEText(html_body, "html"))
        return message

    @contextmanager
    def _connect(self) -> Iterator[smtplib.SMTP]:
        """Open an encrypted, authenticated SMTP connection.

        ``smtp_use_tls`` without ``smtp_starttls`` means implicit TLS
        (usually port 465); otherwise the connection starts in plain text
        and is upgraded with STARTTLS when enabled (usually port 587).
        """
        settings = self._settings
        context = ssl.create_default_context()
        if settings.smtp_use_tls and not settings.smtp_starttls:
            connection = smtplib.SMTP_SSL(
                settings.smtp_host,
                settings.smtp_port,
                context=context,
            )
        else:
            connection = smtplib.SMTP(settings.smtp_host, settings.smtp_port)

        with connection as server:
            if settings.smtp_starttls:
                server.starttls(context=context)
            if settings.smtp_user:
                password = (
                    settings.smtp_password.get_secret_value()
                    if settings.smtp_password
                    else ""
                )
                server.login(settings.smtp_user, password)
            yield server

    def _send(self, message: MIMEMultipart) -> None:
        if not self._settings.smtp_host:
            logger.error("SMTP host not configured")
            return

        try:
            with self._connect() as server:
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send email to %s: %s", message["To"], e)
            raise
        logger.info("Email sent to %s", message["To"])

    def send_password_reset_email(self, to_email: str, reset_link: str) -> None:
        if not self._settings.smtp_enabled:
            # The link is a bearer credential; never write it to the log
            logger.warning("SMTP disabled, skipping password reset email to %s", to_email)
            return

        params = {
            "app_name": self._settings.app_name,
            "valid_hours": self._settings.password_reset_expire_hours,
            "reset_link": reset_link,
        }
        self._send(
            self._build_message(
                to_email,
                subject=PASSWORD_RESET_SUBJECT.format(**params),
                text_body=PASSWORD_RESET_TEXT.format(**params),
                html_body=PASSWORD_RESET_HTML.format(**params),
            )
        )
