"""
Notify module for the Release Notifier.

This module renders and sends the "new release" email. The HTML body comes
from a Jinja2 template (a user template directory is searched before the
packaged default) and is delivered over SMTP with TLS.

Unlike fetch and parse, every failure here is fatal: a notification that
cannot be built or delivered raises, so the caller never records the new
version as handled.
"""

import smtplib
import socket
import ssl
from dataclasses import dataclass
from datetime import datetime, timezone
from email.message import EmailMessage
from email.utils import format_datetime
from typing import List, Optional, Tuple

from jinja2 import (
    BaseLoader,
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    PackageLoader,
    TemplateError,
    TemplateNotFound,
    select_autoescape,
)

from release_notifier.errors import ReleaseNotifierError, TemplateRenderError
from release_notifier.utils import get_env_var, get_logger, split_addresses


# Module logger
logger = get_logger("notify")

DEFAULT_TEMPLATE_NAME = "release_notification.html.j2"
SMTP_TIMEOUT = 30  # seconds
SMTP_SSL_PORT = 465

EMAIL_ENV_VARS = [
    "SMTP_HOST", "SMTP_PORT", "SMTP_USER",
    "SMTP_PASSWORD", "EMAIL_FROM", "EMAIL_TO"
]


class EmailNotificationError(ReleaseNotifierError):
    """Raised when the notification email cannot be delivered."""


@dataclass(frozen=True)
class NotificationPayload:
    """
    Data rendered into a release notification.

    Attributes:
        new_version: The newly published version.
        contextual_version: The version the consumer is currently aligned to.
    """
    new_version: str
    contextual_version: str


def get_email_credentials() -> Tuple[str, int, str, str, str, List[str]]:
    """
    Get email credentials from environment variables.

    Returns:
        Tuple of (smtp_host, smtp_port, smtp_user, smtp_password, email_from, recipients).

    Raises:
        ValueError: If any required environment variable is missing or invalid.
    """
    smtp_host = get_env_var("SMTP_HOST", required=True)
    smtp_port_str = get_env_var("SMTP_PORT", required=True)
    smtp_user = get_env_var("SMTP_USER", required=True)
    smtp_password = get_env_var("SMTP_PASSWORD", required=True)
    email_from = get_env_var("EMAIL_FROM", required=True)
    email_to = get_env_var("EMAIL_TO", required=True)

    assert smtp_host is not None
    assert smtp_port_str is not None
    assert smtp_user is not None
    assert smtp_password is not None
    assert email_from is not None
    assert email_to is not None

    try:
        smtp_port = int(smtp_port_str)
    except ValueError:
        raise ValueError(f"SMTP_PORT must be a valid integer, got: {smtp_port_str}")

    recipients = split_addresses(email_to)
    if not recipients:
        raise ValueError("EMAIL_TO must contain at least one address")

    return smtp_host, smtp_port, smtp_user, smtp_password, email_from, recipients


def missing_email_settings() -> List[str]:
    """Return the names of unset email environment variables."""
    missing = []
    for var in EMAIL_ENV_VARS:
        if get_env_var(var, required=False) is None:
            missing.append(var)
    return missing


def build_template_environment(template_dir: Optional[str] = None) -> Environment:
    """
    Build a Jinja2 environment with user overrides before packaged defaults.

    Args:
        template_dir: Optional directory searched before the packaged templates.

    Returns:
        Configured Jinja2 environment.
    """
    loaders: List[BaseLoader] = []
    if template_dir:
        loaders.append(FileSystemLoader(template_dir))

    loaders.append(PackageLoader("release_notifier", "templates"))
    return Environment(
        loader=ChoiceLoader(loaders),
        autoescape=select_autoescape(["html", "j2"]),
        keep_trailing_newline=True,
    )


def format_subject(product_name: str, new_version: str) -> str:
    """Format the notification subject line."""
    return f"Action Required: {product_name} New Release ({new_version})"


def render_notification(
    payload: NotificationPayload,
    product_name: str,
    template_dir: Optional[str] = None,
    template_name: str = DEFAULT_TEMPLATE_NAME
) -> str:
    """
    Render the HTML notification body.

    Args:
        payload: Versions to render.
        product_name: Human-readable name of the watched project.
        template_dir: Optional directory with an overriding template.
        template_name: Template file name.

    Returns:
        Rendered HTML document.

    Raises:
        TemplateRenderError: If the template is missing or fails to render.
    """
    environment = build_template_environment(template_dir)

    try:
        template = environment.get_template(template_name)
        return template.render(
            product_name=product_name,
            new_version=payload.new_version,
            contextual_version=payload.contextual_version,
        )
    except TemplateNotFound as e:
        logger.error(f"Notification template not found: {template_name}")
        raise TemplateRenderError(f"Template not found: {template_name}", original_error=e) from e
    except TemplateError as e:
        logger.error(f"Failed to render notification template {template_name}: {e}")
        raise TemplateRenderError(f"Cannot render template {template_name}: {e}", original_error=e) from e


def format_notification_plain(payload: NotificationPayload, product_name: str) -> str:
    """
    Format the plain text alternative of the notification.

    Args:
        payload: Versions to render.
        product_name: Human-readable name of the watched project.

    Returns:
        Plain text body.
    """
    lines = [
        f"A new {product_name} release has been published: {payload.new_version}",
        "",
        f"Currently aligned version: {payload.contextual_version}",
        "",
        "Please review the release notes and plan the alignment.",
        "",
        "-" * 50,
        "This email was automatically sent by the Release Notifier.",
    ]
    return "\n".join(lines)


def build_notification_message(
    payload: NotificationPayload,
    product_name: str,
    html_body: str,
    email_from: str,
    recipients: List[str]
) -> EmailMessage:
    """
    Assemble the notification email.

    Args:
        payload: Versions being announced.
        product_name: Human-readable name of the watched project.
        html_body: Rendered HTML body.
        email_from: Sender address.
        recipients: Recipient addresses.

    Returns:
        EmailMessage with a plain text part and an HTML alternative.
    """
    msg = EmailMessage()
    msg["Subject"] = format_subject(product_name, payload.new_version)
    msg["From"] = email_from
    msg["To"] = ", ".join(recipients)
    msg["Date"] = format_datetime(datetime.now(timezone.utc))

    msg.set_content(format_notification_plain(payload, product_name))
    msg.add_alternative(html_body, subtype="html")

    return msg


def send_email(
    msg: EmailMessage,
    smtp_host: str,
    smtp_port: int,
    smtp_user: str,
    smtp_password: str,
    recipients: List[str]
) -> None:
    """
    Send a message via SMTP with TLS.

    Port 465 uses SMTP_SSL (implicit TLS); every other port uses STARTTLS.

    Raises:
        EmailNotificationError: If the message could not be delivered.
    """
    ssl_context = ssl.create_default_context()

    logger.info(f"Connecting to SMTP server: {smtp_host}:{smtp_port}")

    try:
        if smtp_port == SMTP_SSL_PORT:
            logger.debug("Using SMTP_SSL (implicit TLS) for port 465")
            with smtplib.SMTP_SSL(smtp_host, smtp_port, timeout=SMTP_TIMEOUT, context=ssl_context) as server:
                server.login(smtp_user, smtp_password)
                server.send_message(msg, to_addrs=recipients)
        else:
            logger.debug(f"Using SMTP with STARTTLS for port {smtp_port}")
            with smtplib.SMTP(smtp_host, smtp_port, timeout=SMTP_TIMEOUT) as server:
                server.starttls(context=ssl_context)
                server.login(smtp_user, smtp_password)
                server.send_message(msg, to_addrs=recipients)

    except smtplib.SMTPAuthenticationError as e:
        logger.error(f"SMTP authentication failed: {e}")
        raise EmailNotificationError("SMTP authentication failed", original_error=e) from e

    except smtplib.SMTPException as e:
        logger.error(f"SMTP error while sending email: {e}")
        raise EmailNotificationError(f"SMTP error: {e}", original_error=e) from e

    except ssl.SSLError as e:
        logger.error(f"SSL/TLS error while sending email: {e}")
        raise EmailNotificationError(f"SSL/TLS error: {e}", original_error=e) from e

    except (socket.timeout, TimeoutError) as e:
        logger.error(f"Timeout while sending email: {e}")
        raise EmailNotificationError("Timeout while sending email", original_error=e) from e

    except OSError as e:
        logger.error(f"Failed to connect to SMTP server: {e}")
        raise EmailNotificationError(f"Connection error: {e}", original_error=e) from e

    logger.info(f"Email notification sent successfully to {', '.join(recipients)}")


def notify_new_release(
    payload: NotificationPayload,
    product_name: str,
    template_dir: Optional[str] = None,
    dry_run: bool = False
) -> bool:
    """
    Render and send the notification for a new release.

    Args:
        payload: Versions to announce.
        product_name: Human-readable name of the watched project.
        template_dir: Optional directory with an overriding template.
        dry_run: If True, render and log the message without sending it.

    Returns:
        True if the email was sent, False in dry run mode.

    Raises:
        TemplateRenderError: If the template cannot be rendered.
        EmailNotificationError: If delivery fails.
        ValueError: If email settings are missing or invalid.
    """
    logger.info(f"Preparing notification for {product_name} {payload.new_version}")

    html_body = render_notification(payload, product_name, template_dir=template_dir)

    if dry_run:
        logger.info(f"[DRY RUN] Subject: {format_subject(product_name, payload.new_version)}")
        logger.debug(f"[DRY RUN] HTML body:\n{html_body}")
        return False

    smtp_host, smtp_port, smtp_user, smtp_password, email_from, recipients = get_email_credentials()

    msg = build_notification_message(payload, product_name, html_body, email_from, recipients)
    send_email(msg, smtp_host, smtp_port, smtp_user, smtp_password, recipients)

    return True
