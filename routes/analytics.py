import logging
import random
from datetime import datetime

from flask import Blueprint, current_app, jsonify, request
from sqlalchemy import func
from sqlalchemy.orm import joinedload

from classes.validators import (
    require_fields,
    validate_boolean,
    validate_non_negative_int,
    validate_slug,
)
from models import (
    db,
    HintUsage,
    LearningModule,
    ModuleProgress,
    ProblemAttempt,
    ProblemDifficultyMetrics,
    User,
    UserBadge,
)
from models.enums import UserRole
from utils import analytics_placeholders as placeholders
from utils import analytics_service as analytics
from utils.db import with_retry
from utils.errors import ValidationError
from utils.helpers import subtract_time_range
from utils.utils import get_current_user, instructor_required, login_required

logger = logging.getLogger(__name__)

analytics_bp = Blueprint("analytics", __name__)

LEARNING_TIME_RANGES = ("7d", "30d", "90d", "1y")
ENGAGEMENT_TIME_RANGES = ("1d", "7d", "30d", "90d")


def _respond(payload, build_placeholders):
    """Attach demo placeholders when enabled, keeping them apart from real metrics."""
    demo = current_app.config.get("ANALYTICS_DEMO_PLACEHOLDERS", False)
    payload["demo"] = demo
    if demo:
        rng = random.Random(current_app.config.get("ANALYTICS_DEMO_SEED"))
        payload["placeholders"] = build_placeholders(rng)
    return jsonify(payload)


def _window_start(allowed, default):
    time_range = request.args.get("timeRange", default)
    if time_range not in allowed:
        raise ValidationError(
            f"timeRange must be one of: {', '.join(allowed)}",
            details={"timeRange": time_range},
        )
    now = datetime.utcnow()
    return time_range, now, subtract_time_range(now, time_range)


def _problem_id(value):
    if not isinstance(value, str) or not value.strip() or len(value) > 100:
        raise ValidationError("problemId must be a non-empty string")
    return value.strip()


def _progress_since(start, module_slug=None):
    def query():
        q = (
            ModuleProgress.query
            .options(joinedload(ModuleProgress.module), joinedload(ModuleProgress.user))
            .join(User)
            .filter(User.role == UserRole.STUDENT.value, ModuleProgress.last_accessed >= start)
        )
        if module_slug:
            q = q.join(LearningModule).filter(LearningModule.slug == module_slug)
        return q.all()

    return with_retry(query)


def _students():
    return with_retry(lambda: User.query.filter_by(role=UserRole.STUDENT.value).order_by(User.id).all())


def _badge_counts():
    rows = with_retry(lambda: (
        db.session.query(UserBadge.user_id, func.count(UserBadge.id))
        .group_by(UserBadge.user_id)
        .all()
    ))
    return {user_id: count for user_id, count in rows}


# Problem attempts
@analytics_bp.route("/problem-attempt", methods=["POST"])
@login_required
def record_problem_attempt():
    user = get_current_user()
    data = request.get_json(silent=True) or {}
    require_fields(data, "problemId", "moduleSlug", message="problemId, moduleSlug and isCorrect are required")
    if data.get("isCorrect") is None:
        raise ValidationError("problemId, moduleSlug and isCorrect are required", details={"missing": ["isCorrect"]})

    problem_id = _problem_id(data["problemId"])
    module_slug = validate_slug(data["moduleSlug"])
    is_correct = validate_boolean("isCorrect", data["isCorrect"])
    hints_used = validate_non_negative_int("hintsUsedCount", data.get("hintsUsedCount", 0))
    time_spent = data.get("timeSpent")
    if time_spent is not None:
        time_spent = validate_non_negative_int("timeSpent", time_spent)
    answer = data.get("answer")

    previous_attempts = with_retry(lambda: ProblemAttempt.query.filter_by(
        user_id=user.id, problem_id=problem_id
    ).count())

    attempt = ProblemAttempt(
        user_id=user.id,
        problem_id=problem_id,
        module_slug=module_slug,
        is_correct=is_correct,
        attempt_number=previous_attempts + 1,
        hints_used_count=hints_used,
        time_spent=time_spent,
        answer=str(answer) if answer is not None else None,
    )
    db.session.add(attempt)

    if is_correct and hints_used > 0:
        solved = analytics.mark_hints_as_solved(user.id, problem_id, time_spent)
        if solved:
            logger.debug("Marked %d hint(s) solved for user %s on %s", solved, user.id, problem_id)

    db.session.commit()

    return jsonify({
        "success": True,
        "attemptId": attempt.id,
        "attemptNumber": attempt.attempt_number,
    }), 201


@analytics_bp.route("/problem-attempt", methods=["GET"])
@login_required
def get_problem_attempts():
    user = get_current_user()
    problem_id = request.args.get("problemId")
    module_slug = request.args.get("moduleSlug")

    def query():
        q = ProblemAttempt.query.filter_by(user_id=user.id)
        if problem_id:
            q = q.filter_by(problem_id=problem_id)
        if module_slug:
            q = q.filter_by(module_slug=module_slug)
        return q.order_by(ProblemAttempt.timestamp.desc()).limit(analytics.RECENT_ATTEMPTS_LIMIT).all()

    attempts = with_retry(query)

    return jsonify({
        "attempts": [attempt.to_dict() for attempt in attempts],
        "stats": analytics.summarize_attempts(attempts),
    })


# Hint usage
@analytics_bp.route("/hint-usage", methods=["POST"])
@login_required
def record_hint_usage():
    user = get_current_user()
    data = request.get_json(silent=True) or {}
    require_fields(data, "problemId", "moduleSlug", message="problemId, moduleSlug and hintIndex are required")
    if data.get("hintIndex") is None:
        raise ValidationError("problemId, moduleSlug and hintIndex are required", details={"missing": ["hintIndex"]})

    problem_id = _problem_id(data["problemId"])
    usage = HintUsage(
        user_id=user.id,
        problem_id=problem_id,
        module_slug=validate_slug(data["moduleSlug"]),
        hint_index=validate_non_negative_int("hintIndex", data["hintIndex"]),
        solved_after=validate_boolean("solvedAfter", data.get("solvedAfter", False)),
    )
    if data.get("timeToSolve") is not None:
        usage.time_to_solve = validate_non_negative_int("timeToSolve", data["timeToSolve"])
    if data.get("wasHelpful") is not None:
        usage.was_helpful = validate_boolean("wasHelpful", data["wasHelpful"])

    db.session.add(usage)
    db.session.flush()
    analytics.recalculate_problem_difficulty(problem_id)
    db.session.commit()

    return jsonify({"success": True, "hintUsageId": usage.id}), 201


@analytics_bp.route("/hint-usage", methods=["GET"])
@login_required
def get_hint_usage():
    problem_id = request.args.get("problemId")
    module_slug = request.args.get("moduleSlug")
    if not problem_id and not module_slug:
        raise ValidationError("problemId or moduleSlug is required")

    def query():
        q = HintUsage.query
        if problem_id:
            q = q.filter_by(problem_id=problem_id)
        else:
            q = q.filter_by(module_slug=module_slug)
        return q.order_by(HintUsage.timestamp.asc()).all()

    usages = with_retry(query)
    return jsonify({"hintStats": analytics.aggregate_hint_stats(usages)})


# Difficulty metrics
@analytics_bp.route("/difficulty-metrics", methods=["GET"])
@login_required
def get_difficulty_metrics():
    problem_id = request.args.get("problemId")
    module_slug = request.args.get("moduleSlug")

    def query():
        q = ProblemDifficultyMetrics.query
        if problem_id:
            q = q.filter_by(problem_id=problem_id)
        elif module_slug:
            q = q.filter_by(module_slug=module_slug)
        return q.order_by(ProblemDifficultyMetrics.success_rate.asc()).all()

    metrics = with_retry(query)

    payload = {"metrics": [m.to_dict() for m in metrics]}
    if module_slug and not problem_id:
        payload["moduleStats"] = analytics.summarize_difficulty(metrics)
    return jsonify(payload)


@analytics_bp.route("/difficulty-metrics", methods=["POST"])
@login_required
def recalculate_difficulty_metrics():
    data = request.get_json(silent=True) or {}

    if data.get("problemId"):
        problem_ids = [_problem_id(data["problemId"])]
    elif data.get("moduleSlug"):
        module_slug = validate_slug(data["moduleSlug"])
        rows = with_retry(lambda: (
            db.session.query(ProblemAttempt.problem_id)
            .filter_by(module_slug=module_slug)
            .distinct()
            .all()
        ))
        problem_ids = [row.problem_id for row in rows]
    else:
        raise ValidationError("problemId or moduleSlug is required")

    results = [analytics.recalculate_problem_difficulty(pid) for pid in problem_ids]
    db.session.commit()
    logger.info("Recalculated difficulty for %d problem(s)", len(results))

    return jsonify({"success": True, "recalculated": len(results), "results": results})


# Dashboards
@analytics_bp.route("/learning-data", methods=["GET"])
@instructor_required
def get_learning_data():
    time_range, now, start = _window_start(LEARNING_TIME_RANGES, "30d")
    module_slug = request.args.get("module") or None

    rows = _progress_since(start, module_slug)
    total_students = with_retry(lambda: User.query.filter_by(role=UserRole.STUDENT.value).count())

    payload = analytics.learning_dashboard(rows, total_students, now)
    payload["timeRange"] = time_range
    return _respond(payload, placeholders.learning_placeholders)


@analytics_bp.route("/engagement-data", methods=["GET"])
@instructor_required
def get_engagement_data():
    time_range, now, start = _window_start(ENGAGEMENT_TIME_RANGES, "7d")
    module_slug = request.args.get("module") or None

    rows = _progress_since(start, module_slug)
    payload = analytics.engagement_dashboard(rows, now)
    payload["timeRange"] = time_range

    module_titles = [row["module"] for row in payload["successMetrics"]["moduleEngagement"]]
    total_sessions = payload["overview"]["totalSessions"]
    return _respond(
        payload,
        lambda rng: placeholders.engagement_placeholders(rng, total_sessions, module_titles),
    )


@analytics_bp.route("/predictive-data", methods=["GET"])
@instructor_required
def get_predictive_data():
    now = datetime.utcnow()
    students = _students()
    rows = with_retry(lambda: (
        ModuleProgress.query
        .options(joinedload(ModuleProgress.module))
        .join(User)
        .filter(User.role == UserRole.STUDENT.value)
        .all()
    ))

    rows_by_user = {}
    for row in rows:
        rows_by_user.setdefault(row.user_id, []).append(row)

    at_risk = analytics.at_risk_students(students, rows_by_user, _badge_counts(), now)
    return _respond({
        "atRiskStudents": at_risk,
        "summary": {
            "totalStudents": len(students),
            "atRiskCount": len(at_risk),
            "byRiskLevel": {
                level: sum(1 for s in at_risk if s["riskLevel"] == level)
                for level in ("critical", "high", "medium", "low")
            },
        },
    }, placeholders.predictive_placeholders)


@analytics_bp.route("/instructor-data", methods=["GET"])
@instructor_required
def get_instructor_data():
    now = datetime.utcnow()
    students = _students()
    rows = with_retry(lambda: (
        ModuleProgress.query
        .options(joinedload(ModuleProgress.module), joinedload(ModuleProgress.user))
        .join(User)
        .filter(User.role == UserRole.STUDENT.value)
        .all()
    ))
    modules = with_retry(lambda: (
        LearningModule.query.filter_by(is_active=True).order_by(LearningModule.order).all()
    ))

    payload = analytics.instructor_dashboard(students, rows, _badge_counts(), modules, now)
    return _respond(payload, placeholders.instructor_placeholders)
