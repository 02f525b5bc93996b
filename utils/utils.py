from functools import wraps
from flask import current_app, request, jsonify, g
from models import db, User
from models.enums import UserRole
from utils.errors import AuthorizationError, NotFoundError
from utils.tokens import decode_jwt


def current_user_payload():
    token = request.cookies.get(current_app.config.get("AUTH_COOKIE_NAME", "access_token"))
    if not token:
        return None
    return decode_jwt(token)


def login_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        decoded = current_user_payload()
        if not decoded or not decoded.get("user_id"):
            return jsonify({"error": "Unauthorized"}), 401

        g.user = decoded
        return f(*args, **kwargs)

    return decorated_function


def instructor_required(f):
    @wraps(f)
    @login_required
    def decorated_function(*args, **kwargs):
        if g.user.get("role") != UserRole.INSTRUCTOR.value:
            raise AuthorizationError("Instructor access required")
        return f(*args, **kwargs)

    return decorated_function


def get_current_user():
    """Load the logged-in user's row; the token may outlive the account."""
    user = db.session.get(User, g.user.get("user_id"))
    if not user:
        raise NotFoundError("User")
    return user
