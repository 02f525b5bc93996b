"""
Command line tasks, registered on the app's ``flask`` CLI.

    flask --app app db upgrade
    flask --app app seed
    flask --app app create-instructor admin@example.com
    flask --app app recalculate-difficulty --module linear-equations
"""
import logging

import click
from sqlalchemy import func

from models import db, Badge, LearningModule, ProblemAttempt, User
from models.enums import BadgeType, UserRole
from utils.analytics_service import recalculate_problem_difficulty
from utils.seed_data import badge_rows, module_rows

logger = logging.getLogger(__name__)


def seed_catalog():
    """Upsert the learning modules and badge set. Returns (modules, badges) touched."""
    modules_by_slug = {}
    for data in module_rows():
        module = LearningModule.query.filter_by(slug=data["slug"]).first()
        if not module:
            module = LearningModule(slug=data["slug"])
            db.session.add(module)
        for key, value in data.items():
            setattr(module, key, value)
        module.is_active = True
        modules_by_slug[module.slug] = module
    db.session.flush()

    badge_count = 0
    for data in badge_rows():
        badge = Badge.query.filter_by(title=data["title"]).first()
        if not badge:
            badge = Badge(title=data["title"])
            db.session.add(badge)
        for key, value in data.items():
            setattr(badge, key, value)
        badge.badge_type = BadgeType(data["badge_type"])
        slug = badge.requirement_object.get("moduleSlug")
        badge.module = modules_by_slug.get(slug) if slug else None
        badge_count += 1

    db.session.commit()
    return len(modules_by_slug), badge_count


def register_commands(app):
    @app.cli.command("seed")
    def seed():
        """Load the course modules and badges."""
        modules, badges = seed_catalog()
        click.echo(f"Seeded {modules} learning modules and {badges} badges")

    @app.cli.command("create-instructor")
    @click.argument("email")
    @click.option("--first-name", default="Course", show_default=True)
    @click.option("--last-name", default="Instructor", show_default=True)
    @click.password_option()
    def create_instructor(email, first_name, last_name, password):
        """Create an instructor account, or promote an existing user."""
        email = email.strip().lower()
        user = User.query.filter_by(email=email).first()
        if user:
            user.role = UserRole.INSTRUCTOR.value
            click.echo(f"Promoted {email} to instructor")
        else:
            user = User(
                email=email,
                first_name=first_name,
                last_name=last_name,
                name=f"{first_name} {last_name}",
                role=UserRole.INSTRUCTOR.value,
            )
            db.session.add(user)
            click.echo(f"Created instructor {email}")
        user.set_password(password)
        db.session.commit()
        logger.info("Instructor account ready: %s", email)

    @app.cli.command("recalculate-difficulty")
    @click.option("--module", "module_slug", default=None, help="Only problems from this module.")
    def recalculate_difficulty(module_slug):
        """Recompute difficulty metrics from recorded problem attempts."""
        query = db.session.query(ProblemAttempt.problem_id, func.count(ProblemAttempt.id))
        if module_slug:
            query = query.filter(ProblemAttempt.module_slug == module_slug)
        problem_ids = [problem_id for problem_id, _ in query.group_by(ProblemAttempt.problem_id).all()]

        for problem_id in problem_ids:
            result = recalculate_problem_difficulty(problem_id)
            click.echo(f"{problem_id}: {result.get('metrics', {}).get('calculatedDiff', result['status'])}")
        db.session.commit()
        click.echo(f"Recalculated {len(problem_ids)} problem(s)")
