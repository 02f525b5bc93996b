"""
Application exceptions and the JSON error envelope.

Every error leaves the API as
``{"success": false, "error": {"code": ..., "message": ...}}``.
"""
import logging

from flask import current_app, jsonify
from sqlalchemy.exc import (
    DisconnectionError,
    IntegrityError,
    OperationalError,
    SQLAlchemyError,
)
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class ErrorCodes:
    # Database errors
    DATABASE_CONNECTION_FAILED = "DB_CONNECTION_FAILED"
    DATABASE_QUERY_FAILED = "DB_QUERY_FAILED"
    RECORD_NOT_FOUND = "RECORD_NOT_FOUND"
    DUPLICATE_RECORD = "DUPLICATE_RECORD"

    # Authentication errors
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"

    # Validation errors
    INVALID_INPUT = "INVALID_INPUT"

    # Application errors
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"


class AppError(Exception):
    """Base exception for all application errors."""
    status_code = 500
    code = ErrorCodes.INTERNAL_SERVER_ERROR

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(AppError):
    """Raised when request input fails validation."""
    status_code = 400
    code = ErrorCodes.INVALID_INPUT


class AuthenticationError(AppError):
    status_code = 401
    code = ErrorCodes.UNAUTHORIZED


class AuthorizationError(AppError):
    status_code = 403
    code = ErrorCodes.FORBIDDEN


class NotFoundError(AppError):
    status_code = 404
    code = ErrorCodes.RECORD_NOT_FOUND

    def __init__(self, resource, details=None):
        super().__init__(f"{resource} not found", details)


class ConflictError(AppError):
    """Raised when a record already exists."""
    status_code = 409
    code = ErrorCodes.DUPLICATE_RECORD


class ServiceUnavailableError(AppError):
    status_code = 503
    code = ErrorCodes.SERVICE_UNAVAILABLE


def error_response(code, message, status_code, details=None):
    error = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return jsonify({"success": False, "error": error}), status_code


def register_error_handlers(app):
    from models import db

    @app.errorhandler(AppError)
    def handle_app_error(exc):
        if exc.status_code >= 500:
            logger.error("%s: %s", type(exc).__name__, exc.message)
        else:
            logger.info("%s: %s", type(exc).__name__, exc.message)
        return error_response(exc.code, exc.message, exc.status_code, exc.details)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(exc):
        db.session.rollback()
        logger.warning("Integrity error: %s", exc.orig)
        return error_response(
            ErrorCodes.DUPLICATE_RECORD,
            "A record with this information already exists",
            409,
        )

    @app.errorhandler(OperationalError)
    @app.errorhandler(DisconnectionError)
    def handle_connection_error(exc):
        db.session.rollback()
        logger.error("Database connection failed: %s", exc)
        return error_response(
            ErrorCodes.DATABASE_CONNECTION_FAILED,
            "Service temporarily unavailable. Please try again.",
            503,
        )

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(exc):
        db.session.rollback()
        logger.exception("Database operation failed")
        return error_response(ErrorCodes.DATABASE_QUERY_FAILED, "Database operation failed", 500)

    @app.errorhandler(HTTPException)
    def handle_http_exception(exc):
        code = (exc.name or "error").upper().replace(" ", "_")
        return error_response(code, exc.description, exc.code)

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc):
        db.session.rollback()
        logger.exception("Unhandled exception")
        message = str(exc) if current_app.debug else "An unexpected error occurred"
        return error_response(ErrorCodes.INTERNAL_SERVER_ERROR, message, 500)
