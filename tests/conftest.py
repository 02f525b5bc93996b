import json
from datetime import datetime

import pytest

from app import create_app
from models import db, Badge, LearningModule, ModuleProgress, User
from models.enums import BadgeType, ProgressStatus, UserRole
from utils.tokens import get_jwt_token

PASSWORD = "correct-horse-battery"


@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    counter = {"n": 0}

    def _make_user(email=None, role=UserRole.STUDENT.value, first_name="Ada", last_name="Lovelace"):
        counter["n"] += 1
        user = User(
            email=email or f"user{counter['n']}@example.com",
            first_name=first_name,
            last_name=last_name,
            name=f"{first_name} {last_name}",
            role=role,
        )
        user.set_password(PASSWORD)
        db.session.add(user)
        db.session.commit()
        return user

    return _make_user


@pytest.fixture
def make_module(app):
    def _make_module(slug, order=1, title=None, is_active=True):
        module = LearningModule(
            slug=slug,
            title=title or slug.replace("-", " ").title(),
            description=f"About {slug}",
            order=order,
            objectives=["Understand " + slug],
            topics=[slug],
            is_active=is_active,
        )
        db.session.add(module)
        db.session.commit()
        return module

    return _make_module


@pytest.fixture
def make_badge(app):
    def _make_badge(title, badge_type, requirements, points=10, module=None):
        badge = Badge(
            title=title,
            description=f"{title} description",
            image_url=f"https://img.example.com/{title.lower().replace(' ', '-')}.png",
            badge_type=BadgeType(badge_type),
            requirements=requirements if isinstance(requirements, str) else json.dumps(requirements),
            points=points,
            module=module,
        )
        db.session.add(badge)
        db.session.commit()
        return badge

    return _make_badge


@pytest.fixture
def make_progress(app):
    def _make_progress(user, module, status=ProgressStatus.COMPLETED, score=90.0, time_spent=30, last_accessed=None):
        row = ModuleProgress(
            user_id=user.id,
            module_id=module.id,
            status=status,
            score=score,
            time_spent=time_spent,
            last_accessed=last_accessed or datetime.utcnow(),
        )
        db.session.add(row)
        db.session.commit()
        return row

    return _make_progress


@pytest.fixture
def login(app, client):
    """Put a valid auth cookie for ``user`` on the test client."""
    def _login(user):
        token = get_jwt_token({"user_id": user.id, "email": user.email, "role": user.role})
        client.set_cookie(app.config["AUTH_COOKIE_NAME"], token)
        return client

    return _login
