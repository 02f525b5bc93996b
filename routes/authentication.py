import logging

from flask import Blueprint, current_app, request, jsonify, make_response, g

from classes.validators import require_fields, validate_email, validate_length, validate_password
from models import db, User
from models.enums import UserRole
from utils.db import with_retry
from utils.errors import AuthenticationError, ConflictError, ValidationError
from utils.tokens import get_jwt_token
from utils.utils import current_user_payload, get_current_user, instructor_required

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth_bp', __name__)


def _create_user(data, role):
    require_fields(data, "firstName", "lastName", "email", "password", message="All fields are required")

    email = validate_email(data["email"])
    validate_password(data["password"])
    first_name = str(data["firstName"]).strip()
    last_name = str(data["lastName"]).strip()
    validate_length("First name", first_name, 100)
    validate_length("Last name", last_name, 100)

    existing_user = with_retry(lambda: User.query.filter_by(email=email).first())
    if existing_user:
        raise ConflictError("User already exists with this email")

    user = User(
        email=email,
        first_name=first_name,
        last_name=last_name,
        name=f"{first_name} {last_name}",
        role=role,
    )
    user.set_password(data["password"])

    db.session.add(user)
    db.session.commit()
    return user


def _set_auth_cookie(response, token, max_age):
    response.set_cookie(
        current_app.config["AUTH_COOKIE_NAME"], token,
        httponly=True,
        secure=current_app.config["AUTH_COOKIE_SECURE"],
        samesite=current_app.config["AUTH_COOKIE_SAMESITE"],
        path="/",
        max_age=max_age
    )
    return response


# Signup
@auth_bp.route('/signup', methods=['POST'])
def signup():
    data = request.get_json(silent=True) or {}

    if data.get("password") and data.get("password") != data.get("confirmPassword"):
        raise ValidationError("Passwords do not match")

    user = _create_user(data, UserRole.STUDENT.value)
    logger.info("New student account %s", user.email)

    return jsonify({"message": "User created successfully", "userId": user.id}), 201


# Login
@auth_bp.route('/auth/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    require_fields(data, "email", "password", message="Email and password are required")

    email = data["email"].strip().lower() if isinstance(data["email"], str) else ""
    user = with_retry(lambda: User.query.filter_by(email=email).first())

    if not user or not user.check_password(data["password"]):
        raise AuthenticationError("Invalid credentials")

    token = get_jwt_token({
        "user_id": user.id,
        "email": user.email,
        "role": user.role,
    })

    response = make_response(jsonify({
        "message": "Login successful",
        "user": user.to_dict()
    }))
    max_age = current_app.config["JWT_EXPIRATION_HOURS"] * 3600
    return _set_auth_cookie(response, token, max_age)


# Logout
@auth_bp.route('/auth/logout', methods=['POST'])
def logout():
    response = make_response(jsonify({"message": "Logout successful"}))
    return _set_auth_cookie(response, "", 0)


# Auth Check
@auth_bp.route('/auth/session', methods=['GET'])
def check_auth():
    decoded_token = current_user_payload()
    if not decoded_token:
        return jsonify({"error": "Unauthorized"}), 401

    g.user = decoded_token
    user = get_current_user()
    return jsonify({"message": "Authenticated", "user": user.to_dict()}), 200


# Instructor accounts are created by other instructors
@auth_bp.route('/create-instructor', methods=['POST'])
@instructor_required
def create_instructor():
    data = request.get_json(silent=True) or {}

    instructor = _create_user(data, UserRole.INSTRUCTOR.value)
    logger.info("Created instructor %s (%s)", instructor.name, instructor.email)

    return jsonify({
        "message": "Instructor created successfully",
        "instructor": instructor.to_dict()
    }), 201
