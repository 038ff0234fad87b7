# natheme/notifications.py

import smtplib
from email.mime.text import MIMEText
import logging, time
from natheme import settings

logger = logging.getLogger(__name__)


def is_email_configured() -> bool:
    return bool(settings.USER_EMAIL and str(settings.USER_PASSWORD))

def send_email(to_email: str, subject: str, body: str, retries: int = settings.EMAIL_SEND_RETRIES) -> bool:
    """
    Sends an email to the specified recipient.

    Args:
        to_email (str): Recipient's email address.
        subject (str): Email subject.
        body (str): Email body.
        retries (int): Attempts before giving up.

    Returns:
        bool: True if email sent successfully, False otherwise.
    """

    attempt = 0
    while attempt < retries:
        try:
            msg = MIMEText(body)
            msg['Subject'] = subject
            msg['From'] = f"Natheme Contact <{settings.USER_EMAIL}>"
            msg['To'] = to_email

            with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT) as server:
                server.starttls()
                server.login(settings.USER_EMAIL, str(settings.USER_PASSWORD))
                server.send_message(msg)

            logger.info(f"Email sent to {to_email}")
            return True
        except (smtplib.SMTPException, OSError) as e:
            attempt += 1
            logger.error(f"Failed to send email to {to_email}: {e}")
            if attempt < retries:
                time.sleep(2 ** attempt)  # Exponential backoff
    return False

def format_contact_email(name: str, email: str, message: str) -> tuple[str, str]:
    subject = f"New Contact Message from {name}"
    body = (
        "You received a new message from the Natheme contact form.\n\n"
        f"Name: {name}\n"
        f"Email: {email}\n"
        "Message:\n"
        f"{message}\n"
    )
    return subject, body
