import logging
import smtplib
from email.message import EmailMessage
from typing import List

from ..schemas.config import EmailConfig, MonitorConfig

logger = logging.getLogger(__name__)


class NotificationError(Exception):
    """Raised when an email cannot be built or delivered."""


def build_failure_email_body(failures: List[dict]) -> str:
    """Plain-text report listing each failed site."""
    body = "Site Check Report\n"
    body += "=" * 50 + "\n\n"
    body += "The following sites failed the check:\n\n"

    for index, failure in enumerate(failures, start=1):
        body += f"{index}. {failure['name']}\n"
        body += f"   URL: {failure['url']}\n"
        body += f"   Expected String: '{failure['expected_string']}'\n"
        body += f"   Reason: {failure['reason']}\n\n"

    body += "\nPlease investigate these issues.\n"
    return body


def build_test_email_body(config: MonitorConfig) -> str:
    email = config.email
    body = "Site Checker Test Email\n"
    body += "=" * 50 + "\n\n"
    body += "This is a test email from the Site Checker script.\n\n"
    body += "Email configuration is working correctly!\n\n"
    body += "Configuration details:\n"
    body += f"  SMTP Server: {email.smtp_server}\n"
    body += f"  SMTP Port: {email.smtp_port}\n"
    body += f"  From: {email.sender}\n"
    body += f"  To: {email.to}\n\n"
    body += f"Monitored sites ({len(config.sites)}):\n"
    for index, site in enumerate(config.sites, start=1):
        body += f"  {index}. {site.display_name}\n"
    body += "\nYou can now use this script to monitor your sites.\n"
    return body


def send_email(email_config: EmailConfig, subject: str, body: str) -> None:
    """Deliver one plain-text email. Raises NotificationError on any SMTP failure."""
    message = EmailMessage()
    message["From"] = email_config.sender
    message["To"] = email_config.to
    message["Subject"] = subject
    message.set_content(body)

    try:
        with smtplib.SMTP(email_config.smtp_server, email_config.smtp_port, timeout=30) as smtp:
            if email_config.smtp_port == 587:
                smtp.starttls()
            if email_config.username:
                smtp.login(email_config.username, email_config.password or "")
            smtp.send_message(message)
    except (smtplib.SMTPException, OSError) as e:
        raise NotificationError(str(e)) from e

    logger.info(f"📧 Email sent to {email_config.to}: {subject}")


def send_failure_notification(email_config: EmailConfig, failures: List[dict]) -> bool:
    """
    Send the failure report for one check run.

    Delivery problems are logged and reported through the return value; a
    broken mail server must not abort the check run.
    """
    if email_config is None:
        logger.info("No email configuration found. Skipping notification.")
        return False
    if not failures:
        return False

    subject = f"Site Check Alert: {len(failures)} site(s) failed"
    try:
        send_email(email_config, subject, build_failure_email_body(failures))
    except NotificationError as e:
        logger.error(f"❌ Failed to send email: {e}")
        return False

    logger.info("Notification email sent successfully")
    return True


def send_test_email(config: MonitorConfig) -> None:
    if config.email is None:
        raise NotificationError("No email configuration found in config file")
    send_email(config.email, "Site Checker Test Email", build_test_email_body(config))
