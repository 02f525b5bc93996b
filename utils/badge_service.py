"""
Badge awarding and badge progress.

Badges carry a JSON requirement object such as
``{"moduleSlug": "linear-equations", "minScore": 80}`` that is interpreted
according to the badge type. The predicates and the progress calculation
are pure functions over a user's progress rows so they can be used without
a database; the functions at the bottom of the module load the snapshot and
write awards.
"""
import logging
import random
from datetime import datetime, timedelta

from sqlalchemy.orm import joinedload

from models import db, Badge, UserBadge, ModuleProgress, ProblemAttempt, User
from models.enums import BadgeType, ProgressStatus
from utils.db import insert_ignore, with_retry
from utils.errors import NotFoundError
from utils.helpers import format_datetime, is_number, parse_json_object

logger = logging.getLogger(__name__)

# The course has six modules; course completion is measured against this.
TOTAL_COURSE_MODULES = 6

# Activity older than this can't contribute to a current streak worth checking.
STREAK_LOOKBACK_DAYS = 366

ACHIEVEMENT_MESSAGES = [
    'Congratulations! You\'ve earned the "{title}" badge and {points} points!',
    'Amazing work! You\'ve unlocked "{title}" worth {points} points!',
    'Fantastic! The "{title}" badge is yours, plus {points} points added to your score!',
    'Outstanding! You\'ve achieved the "{title}" badge and earned {points} points!',
    'Excellent progress! "{title}" badge unlocked with {points} points earned!',
]


def _number(requirements, key):
    value = requirements.get(key)
    return value if is_number(value) else None


def _is_completed(row):
    return row.status == ProgressStatus.COMPLETED


def _score(row):
    return row.score or 0


def find_module_progress(progress, module_slug):
    for row in progress:
        if row.module_slug == module_slug:
            return row
    return None


def completed_modules(progress, min_score=None):
    return [
        row for row in progress
        if _is_completed(row) and (min_score is None or _score(row) >= min_score)
    ]


def current_streak(activity_days, today=None):
    """
    Length of the run of consecutive active days ending today.

    A streak that was last extended yesterday is still alive, so counting
    starts from yesterday when there's no activity yet today.
    """
    days = set(activity_days)
    if not days:
        return 0

    today = today or datetime.utcnow().date()
    if today in days:
        cursor = today
    elif today - timedelta(days=1) in days:
        cursor = today - timedelta(days=1)
    else:
        return 0

    streak = 0
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def check_module_completion(requirements, progress):
    module_slug = requirements.get("moduleSlug")
    min_score = _number(requirements, "minScore")
    if not module_slug or min_score is None:
        return False

    row = find_module_progress(progress, module_slug)
    if not row:
        return False
    return _is_completed(row) and _score(row) >= min_score


def check_quiz_pass(requirements, progress):
    min_score = _number(requirements, "minScore")
    if min_score is None:
        return False

    required = _number(requirements, "problemsCompleted") or 1
    return len(completed_modules(progress, min_score)) >= required


def check_course_completion(requirements, progress):
    min_score = _number(requirements, "minScore")
    return len(completed_modules(progress, min_score)) >= TOTAL_COURSE_MODULES


def check_streak(requirements, activity_days, today=None):
    streak_days = _number(requirements, "streakDays")
    if streak_days is None or streak_days <= 0:
        return False
    return current_streak(activity_days, today) >= streak_days


def _badge_type(badge_type):
    try:
        return BadgeType(badge_type)
    except (TypeError, ValueError):
        return None


def check_badge_requirements(badge_type, requirements, progress, activity_days=(), today=None):
    """
    Evaluate one badge requirement against a user's progress.

    Malformed requirements (bad JSON, missing keys, wrong types) and unknown
    badge types are never satisfied.
    """
    requirements = parse_json_object(requirements)
    badge_type = _badge_type(badge_type)

    if badge_type == BadgeType.MODULE_COMPLETION:
        return check_module_completion(requirements, progress)
    if badge_type == BadgeType.QUIZ_PASS:
        return check_quiz_pass(requirements, progress)
    if badge_type == BadgeType.COURSE_COMPLETION:
        return check_course_completion(requirements, progress)
    if badge_type == BadgeType.STREAK:
        return check_streak(requirements, activity_days, today)
    return False


def progress_triple(current, target):
    """Clamp a (current, target) pair into a progress-bar triple."""
    current = max(current or 0, 0)
    if target <= 0:
        return {"current": 0, "target": 0, "percentage": 100.0}

    percentage = min(max((current / target) * 100, 0), 100)
    return {
        "current": min(current, target),
        "target": target,
        "percentage": round(percentage, 1),
    }


NO_PROGRESS = {"current": 0, "target": 1, "percentage": 0.0}


def calculate_badge_progress(badge_type, requirements, progress, activity_days=(), today=None):
    """Progress toward a badge as {current, target, percentage}."""
    requirements = parse_json_object(requirements)
    badge_type = _badge_type(badge_type)

    if badge_type == BadgeType.MODULE_COMPLETION:
        module_slug = requirements.get("moduleSlug")
        min_score = _number(requirements, "minScore")
        if not module_slug or min_score is None:
            return dict(NO_PROGRESS)
        row = find_module_progress(progress, module_slug)
        return progress_triple(_score(row) if row else 0, min_score)

    if badge_type == BadgeType.QUIZ_PASS:
        min_score = _number(requirements, "minScore")
        if min_score is None:
            return dict(NO_PROGRESS)
        target = _number(requirements, "problemsCompleted") or 1
        return progress_triple(len(completed_modules(progress, min_score)), target)

    if badge_type == BadgeType.COURSE_COMPLETION:
        min_score = _number(requirements, "minScore")
        return progress_triple(len(completed_modules(progress, min_score)), TOTAL_COURSE_MODULES)

    if badge_type == BadgeType.STREAK:
        streak_days = _number(requirements, "streakDays")
        if streak_days is None or streak_days <= 0:
            return dict(NO_PROGRESS)
        return progress_triple(current_streak(activity_days, today), streak_days)

    return dict(NO_PROGRESS)


def generate_achievement_message(title, points):
    return random.choice(ACHIEVEMENT_MESSAGES).format(title=title, points=points)


def build_achievement(badge):
    return {
        "badgeId": badge.id,
        "title": badge.title,
        "description": badge.description,
        "imageUrl": badge.image_url,
        "points": badge.points,
        "message": generate_achievement_message(badge.title, badge.points),
    }


class ProgressSnapshot:
    """A user's progress rows, activity days and earned badges at one moment."""

    def __init__(self, user, progress, activity_days, earned):
        self.user = user
        self.progress = progress
        self.activity_days = activity_days
        self.earned = earned

    @property
    def earned_badge_ids(self):
        return set(self.earned)


def load_snapshot(user_id):
    user = with_retry(lambda: db.session.get(User, user_id))
    if not user:
        raise NotFoundError("User")

    progress = with_retry(lambda: (
        ModuleProgress.query
        .options(joinedload(ModuleProgress.module))
        .filter_by(user_id=user_id)
        .all()
    ))

    since = datetime.utcnow() - timedelta(days=STREAK_LOOKBACK_DAYS)
    attempt_times = with_retry(lambda: (
        db.session.query(ProblemAttempt.timestamp)
        .filter(ProblemAttempt.user_id == user_id, ProblemAttempt.timestamp >= since)
        .all()
    ))
    activity_days = {row.timestamp.date() for row in attempt_times}
    activity_days.update(row.last_accessed.date() for row in progress if row.last_accessed)

    earned_rows = with_retry(lambda: (
        UserBadge.query
        .options(joinedload(UserBadge.badge))
        .filter_by(user_id=user_id)
        .order_by(UserBadge.earned_at.desc())
        .all()
    ))
    earned = {ub.badge_id: ub for ub in earned_rows}

    return ProgressSnapshot(user, progress, activity_days, earned)


def _all_badges():
    return with_retry(lambda: (
        Badge.query.options(joinedload(Badge.module)).order_by(Badge.id).all()
    ))


def award_badge(user_id, badge):
    """
    Award ``badge`` unless the user already holds it. Returns the
    achievement for a fresh award and None otherwise. Does not commit.
    """
    if not insert_ignore(UserBadge, user_id=user_id, badge_id=badge.id):
        return None
    logger.info("Badge awarded to user %s: %s", user_id, badge.title)
    return build_achievement(badge)


def check_and_award_badges(user_id):
    """
    Evaluate every badge the user hasn't earned yet and award the ones whose
    requirements are met. Returns the list of new achievements.
    """
    snapshot = load_snapshot(user_id)
    earned_ids = snapshot.earned_badge_ids

    new_achievements = []
    for badge in _all_badges():
        if badge.id in earned_ids:
            continue

        qualifies = check_badge_requirements(
            badge.badge_type, badge.requirements, snapshot.progress, snapshot.activity_days
        )
        if not qualifies:
            continue

        achievement = award_badge(user_id, badge)
        if achievement:
            new_achievements.append(achievement)

    db.session.commit()
    return new_achievements


def award_specific_badge(user_id, badge_id):
    """Manually award one badge. Returns None when it was already earned."""
    badge = with_retry(lambda: db.session.get(Badge, badge_id))
    if not badge:
        raise NotFoundError("Badge")
    if not with_retry(lambda: db.session.get(User, user_id)):
        raise NotFoundError("User")

    achievement = award_badge(user_id, badge)
    db.session.commit()
    return achievement


def _badge_progress(badge, snapshot):
    return calculate_badge_progress(
        badge.badge_type, badge.requirements, snapshot.progress, snapshot.activity_days
    )


def get_next_achievable_badge(snapshot, badges):
    """The unearned badge the user is closest to, or None."""
    best = None
    best_percentage = -1
    for badge in badges:
        if badge.id in snapshot.earned:
            continue
        progress = _badge_progress(badge, snapshot)
        if progress["percentage"] > best_percentage:
            best_percentage = progress["percentage"]
            best = (badge, progress)

    if not best:
        return None

    badge, progress = best
    return {
        "title": badge.title,
        "description": badge.description,
        "imageUrl": badge.image_url,
        "progress": progress,
    }


def get_user_badge_stats(user_id):
    snapshot = load_snapshot(user_id)
    badges = _all_badges()
    earned = list(snapshot.earned.values())

    recent_badges = [
        {
            "id": ub.badge.id,
            "title": ub.badge.title,
            "imageUrl": ub.badge.image_url,
            "earnedAt": format_datetime(ub.earned_at),
            "points": ub.badge.points,
        }
        for ub in earned[:5]
    ]

    return {
        "totalBadges": len(badges),
        "earnedBadges": len(earned),
        "totalPoints": sum(ub.badge.points for ub in earned),
        "recentBadges": recent_badges,
        "nextBadge": get_next_achievable_badge(snapshot, badges),
    }


def get_user_badges_with_progress(user_id):
    snapshot = load_snapshot(user_id)

    results = []
    for badge in _all_badges():
        earned = snapshot.earned.get(badge.id)
        results.append({
            **badge.to_dict(),
            "isEarned": earned is not None,
            "earnedAt": format_datetime(earned.earned_at) if earned else None,
            "progress": _badge_progress(badge, snapshot),
            "module": {"title": badge.module.title, "slug": badge.module.slug} if badge.module else None,
        })
    return results
