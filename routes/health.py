from flask import Blueprint, current_app, jsonify
from sqlalchemy.exc import SQLAlchemyError

from models import db
from utils.db import check_database
from utils.helpers import format_datetime, utcnow

health_bp = Blueprint("health", __name__)

REQUIRED_SETTINGS = ("SECRET_KEY", "SQLALCHEMY_DATABASE_URI")


def _database_health():
    try:
        return {"status": "healthy", "responseTime": check_database()}
    except SQLAlchemyError as e:
        db.session.rollback()
        return {"status": "unhealthy", "error": str(e.__class__.__name__)}


def _environment_health():
    missing = [name for name in REQUIRED_SETTINGS if not current_app.config.get(name)]
    if missing:
        return {"status": "unhealthy", "error": f"Missing settings: {', '.join(missing)}"}
    return {"status": "healthy"}


@health_bp.route("", methods=["GET"])
def health():
    services = {
        "database": _database_health(),
        "environment": _environment_health(),
    }
    errors = [
        f"{name}: {service['error']}"
        for name, service in services.items()
        if service["status"] == "unhealthy"
    ]

    body = {
        "status": "unhealthy" if errors else "healthy",
        "timestamp": format_datetime(utcnow()),
        "services": services,
    }
    if errors:
        body["errors"] = errors

    response = jsonify(body)
    response.status_code = 503 if errors else 200
    response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
    response.headers["Pragma"] = "no-cache"
    response.headers["Expires"] = "0"
    return response
