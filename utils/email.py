import logging
from smtplib import SMTPException

from flask_mail import Message
from extensions import mail

logger = logging.getLogger(__name__)


def send_email(to, subject, body):
    """Sends an email using Flask-Mail. Returns False when delivery fails."""
    msg = Message(subject=subject, recipients=[to], body=body)
    try:
        mail.send(msg)
        return True
    except (SMTPException, OSError) as e:
        logger.warning("Failed to send email to %s: %s", to, e)
        return False


def notify_contact_submission(submission, recipient):
    body = (
        f"New contact form submission #{submission.id}\n\n"
        f"From: {submission.name} <{submission.email}>\n"
        f"Subject: {submission.subject}\n"
        f"Category: {submission.category or '-'}\n\n"
        f"{submission.message}\n"
    )
    return send_email(recipient, f"[Contact] {submission.subject}", body)
