import logging
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import aiosmtplib

from accounts.core.config import settings
from accounts.errors import EmailDeliveryError

logger = logging.getLogger(__name__)


def _build_link(path: str, token: str) -> str | None:
    if not settings.frontend_url:
        return None
    return f"{settings.frontend_url.rstrip('/')}/{path}?token={token}"


async def _send(email: str, subject: str, text: str, html: str) -> None:
    """
    Send a text + HTML message through the configured SMTP server.

    Raises:
        EmailDeliveryError: If SMTP is not configured or the server rejects the message.
    """
    if not all([settings.smtp_host, settings.smtp_port, settings.smtp_from_email]):
        logger.warning("SMTP not configured - cannot send %r to %s", subject, email)
        raise EmailDeliveryError()

    message = MIMEMultipart("alternative")
    message["Subject"] = subject
    message["From"] = settings.smtp_from_email
    message["To"] = email
    message.attach(MIMEText(text, "plain"))
    message.attach(MIMEText(html, "html"))

    send_kwargs = {
        "hostname": settings.smtp_host,
        "port": settings.smtp_port,
        "timeout": settings.smtp_timeout,
    }
    if settings.smtp_user and settings.smtp_password:
        send_kwargs["username"] = settings.smtp_user
        send_kwargs["password"] = settings.smtp_password

    # Handle TLS based on smtp_use_tls configuration
    if settings.smtp_use_tls:
        # Port 465 uses direct TLS, everything else STARTTLS
        if settings.smtp_port == 465:
            send_kwargs["use_tls"] = True
        else:
            send_kwargs["start_tls"] = True

    try:
        await aiosmtplib.send(message, **send_kwargs)
    except (aiosmtplib.SMTPException, OSError) as e:
        logger.error("Failed to send %r to %s: %s", subject, email, e)
        raise EmailDeliveryError() from e


async def send_account_activation(email: str, token: str) -> None:
    """
    Send the account activation email.

    Args:
        email: User's email address
        token: Activation token stored on the user
    """
    link = _build_link("activate", token)
    if link:
        text = f"""
Please click the following link to activate your account:
{link}
        """
        html = f"""
<html>
  <body>
    <p><b>Please click the link below to activate your account</b></p>
    <p><a href="{link}">Activate</a></p>
  </body>
</html>
        """
    else:
        text = f"""
Your account activation token is:
{token}
        """
        html = f"""
<html>
  <body>
    <p>Your account activation token is:</p>
    <p><code>{token}</code></p>
  </body>
</html>
        """
    await _send(email, "Account Activation", text, html)


async def send_password_reset(email: str, token: str) -> None:
    """
    Send the password reset email.

    Args:
        email: User's email address
        token: Password reset token stored on the user
    """
    link = _build_link("password-reset", token)
    if link:
        text = f"""
You requested a password reset for your account.

Please click the following link to reset your password:
{link}

If you did not request this, please ignore this email.
        """
        html = f"""
<html>
  <body>
    <p>You requested a password reset for your account.</p>
    <p>Please click the following link to reset your password:</p>
    <p><a href="{link}">Reset</a></p>
    <p>If you did not request this, please ignore this email.</p>
  </body>
</html>
        """
    else:
        text = f"""
You requested a password reset for your account.

Your password reset token is:
{token}

If you did not request this, please ignore this email.
        """
        html = f"""
<html>
  <body>
    <p>You requested a password reset for your account.</p>
    <p>Your password reset token is:</p>
    <p><code>{token}</code></p>
    <p>If you did not request this, please ignore this email.</p>
  </body>
</html>
        """
    await _send(email, "Password Reset", text, html)
