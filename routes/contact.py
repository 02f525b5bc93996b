import logging

import bleach
from flask import Blueprint, current_app, jsonify, request

from classes.validators import require_fields, validate_email, validate_length
from models import db, ContactSubmission
from utils.email import notify_contact_submission

logger = logging.getLogger(__name__)

contact_bp = Blueprint("contact", __name__)


@contact_bp.route("", methods=["POST"])
def submit_contact():
    data = request.get_json(silent=True) or {}
    require_fields(data, "name", "email", "message", message="Name, email, and message are required")

    # Sanitize text input
    name = bleach.clean(str(data["name"]), tags=[], strip=True).strip()
    subject = bleach.clean(str(data.get("subject") or "General Inquiry"), tags=[], strip=True).strip()
    message = bleach.clean(str(data["message"]), tags=[], strip=True)
    validate_length("Name", name, 200)
    validate_length("Subject", subject, 200)
    validate_length("Message", message, 5000)

    submission = ContactSubmission(
        name=name,
        email=validate_email(data["email"]),
        subject=subject,
        message=message,
        category=str(data["category"])[:50] if data.get("category") else None,
        status="pending",
    )
    db.session.add(submission)
    db.session.commit()
    logger.info("Contact submission %s received", submission.id)

    recipient = current_app.config.get("CONTACT_NOTIFY_EMAIL")
    if recipient:
        notify_contact_submission(submission, recipient)

    return jsonify({"message": "Message sent successfully", "id": submission.id}), 201
