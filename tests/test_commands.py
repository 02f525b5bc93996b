from models import Badge, LearningModule, User
from models.enums import BadgeType, UserRole


def test_seed_loads_catalog_idempotently(app):
    runner = app.test_cli_runner()

    first = runner.invoke(args=["seed"])
    second = runner.invoke(args=["seed"])

    assert first.exit_code == 0, first.output
    assert "Seeded 6 learning modules" in second.output
    assert LearningModule.query.count() == 6
    assert Badge.query.count() == 10
    linear = Badge.query.filter_by(title="Linear Equations Master").one()
    assert linear.module.slug == "linear-equations"
    assert Badge.query.filter_by(badge_type=BadgeType.STREAK).count() == 1


def test_create_instructor_command(app, make_user):
    runner = app.test_cli_runner()

    created = runner.invoke(args=["create-instructor", "Teach@Example.com", "--password", "teaching-pass"])
    assert created.exit_code == 0, created.output
    teacher = User.query.filter_by(email="teach@example.com").one()
    assert teacher.role == UserRole.INSTRUCTOR.value
    assert teacher.check_password("teaching-pass")

    student = make_user(email="promote@example.com")
    promoted = runner.invoke(args=["create-instructor", "promote@example.com", "--password", "new-password"])
    assert "Promoted" in promoted.output
    assert User.query.filter_by(email=student.email).one().role == UserRole.INSTRUCTOR.value
