"""
In-memory aggregation behind the analytics endpoints.

Each dashboard fetches the relevant rows once and the functions here group
them by key, then compute rates and averages. Rates are percentages rounded
to one decimal. Buckets with no rows report zero counts and ``None``
averages; nothing here invents data (see ``analytics_placeholders`` for the
demo values).
"""
import logging
from collections import OrderedDict
from datetime import datetime, timedelta

from models import db, HintUsage, ProblemAttempt, ProblemDifficultyMetrics
from models.enums import ProgressStatus
from classes.progress_manager import ProgressManager
from utils.helpers import average, days_between, percentage, round1, start_of_day

logger = logging.getLogger(__name__)

HINT_SOLVE_WINDOW = timedelta(minutes=30)
RECENT_ATTEMPTS_LIMIT = 50
AT_RISK_THRESHOLD = 0.3
AT_RISK_LIMIT = 50
RECENT_ACTIVITY_LIMIT = 20
WEEKS_OF_HISTORY = 6
DAYS_OF_HISTORY = 7


def _is_completed(row):
    return row.status == ProgressStatus.COMPLETED


def _scores(rows):
    return [row.score or 0 for row in rows]


def _minutes(rows):
    return [row.time_spent or 0 for row in rows]


# Problem attempts and hints

def summarize_attempts(attempts):
    total = len(attempts)
    correct = sum(1 for a in attempts if a.is_correct)
    timed = [a.time_spent for a in attempts if a.time_spent is not None]
    return {
        "totalAttempts": total,
        "correctAttempts": correct,
        "successRate": round1(percentage(correct, total)),
        "avgHintsUsed": round1(average(a.hints_used_count or 0 for a in attempts)),
        "avgTimeSpent": round(average(timed)),
    }


def aggregate_hint_stats(usages):
    """Per-problem hint statistics keyed by problem id."""
    by_problem = OrderedDict()

    for usage in usages:
        problem = by_problem.setdefault(usage.problem_id, {
            "problemId": usage.problem_id,
            "totalUsages": 0,
            "solvedAfterHint": 0,
            "avgTimeToSolve": 0,
            "_times": [],
            "_hints": OrderedDict(),
        })
        problem["totalUsages"] += 1

        hint = problem["_hints"].setdefault(usage.hint_index, {
            "hintIndex": usage.hint_index,
            "usageCount": 0,
            "solvedAfter": 0,
            "helpfulCount": 0,
            "helpfulVotes": 0,
        })
        hint["usageCount"] += 1

        if usage.solved_after:
            hint["solvedAfter"] += 1
            problem["solvedAfterHint"] += 1

        if usage.was_helpful is not None:
            hint["helpfulVotes"] += 1
            if usage.was_helpful:
                hint["helpfulCount"] += 1

        if usage.time_to_solve is not None:
            problem["_times"].append(usage.time_to_solve)

    for problem in by_problem.values():
        times = problem.pop("_times")
        if times:
            problem["avgTimeToSolve"] = round(average(times))

        hints = list(problem.pop("_hints").values())
        for hint in hints:
            hint["effectiveness"] = round1(percentage(hint["solvedAfter"], hint["usageCount"]))
            hint["helpfulPercent"] = (
                round1(percentage(hint["helpfulCount"], hint["helpfulVotes"]))
                if hint["helpfulVotes"] else None
            )
        problem["hints"] = hints

    return dict(by_problem)


def mark_hints_as_solved(user_id, problem_id, time_spent=None, now=None):
    """
    Flag the user's recent unsolved hints on a problem as having led to a
    solution. Returns how many hint usages were updated. Does not commit.
    """
    now = now or datetime.utcnow()
    recent_hints = (
        HintUsage.query
        .filter(
            HintUsage.user_id == user_id,
            HintUsage.problem_id == problem_id,
            HintUsage.timestamp >= now - HINT_SOLVE_WINDOW,
            HintUsage.solved_after.is_(False),
        )
        .order_by(HintUsage.timestamp.asc())
        .all()
    )
    if not recent_hints:
        return 0

    time_to_solve = time_spent or int((now - recent_hints[0].timestamp).total_seconds())
    for hint in recent_hints:
        hint.solved_after = True
        hint.time_to_solve = time_to_solve
    return len(recent_hints)


# Difficulty

def difficulty_score(success_rate, avg_hints_used, avg_time_to_solve):
    """Weighted 0..1 score: failures 40%, hints (of 5) 30%, time (capped at 10 min) 30%."""
    return (
        (1 - success_rate) * 0.4
        + (avg_hints_used / 5) * 0.3
        + min(avg_time_to_solve / 600, 1) * 0.3
    )


def classify_difficulty(success_rate, avg_hints_used, avg_time_to_solve):
    score = difficulty_score(success_rate, avg_hints_used, avg_time_to_solve)
    if score < 0.25:
        return "easy"
    if score < 0.5:
        return "medium"
    if score < 0.75:
        return "hard"
    return "expert"


def compute_difficulty_metrics(attempts):
    """Difficulty metrics for one problem's attempts, or None without data."""
    if not attempts:
        return None

    total = len(attempts)
    completions = sum(1 for a in attempts if a.is_correct)
    unique_users = len({a.user_id for a in attempts})
    avg_hints = average(a.hints_used_count or 0 for a in attempts)
    avg_time = average(a.time_spent for a in attempts if a.time_spent is not None)
    success_rate = completions / total

    return {
        "module_slug": attempts[0].module_slug,
        "total_attempts": total,
        "total_completions": completions,
        "avg_attempts": total / unique_users,
        "avg_time_to_solve": round(avg_time),
        "avg_hints_used": round(avg_hints, 1),
        "success_rate": round(success_rate, 2),
        "calculated_diff": classify_difficulty(success_rate, avg_hints, avg_time),
        "sample_size": unique_users,
    }


def recalculate_problem_difficulty(problem_id):
    """Recompute and upsert one problem's difficulty metrics. Does not commit."""
    attempts = ProblemAttempt.query.filter_by(problem_id=problem_id).all()
    values = compute_difficulty_metrics(attempts)
    if values is None:
        return {"problemId": problem_id, "status": "no_data"}

    metrics = ProblemDifficultyMetrics.query.filter_by(problem_id=problem_id).first()
    if not metrics:
        metrics = ProblemDifficultyMetrics(problem_id=problem_id)
        db.session.add(metrics)
    for key, value in values.items():
        setattr(metrics, key, value)
    metrics.last_calculated = datetime.utcnow()

    return {
        "problemId": problem_id,
        "status": "success",
        "metrics": {
            "calculatedDiff": values["calculated_diff"],
            "successRate": values["success_rate"],
            "totalAttempts": values["total_attempts"],
            "sampleSize": values["sample_size"],
        },
    }


def summarize_difficulty(metrics):
    """Module-wide statistics over a list of ProblemDifficultyMetrics."""
    if not metrics:
        return None

    distribution = {"easy": 0, "medium": 0, "hard": 0, "expert": 0}
    for m in metrics:
        distribution[m.calculated_diff] = distribution.get(m.calculated_diff, 0) + 1

    return {
        "totalProblems": len(metrics),
        "avgSuccessRate": round(average(m.success_rate for m in metrics), 2),
        "avgHintsUsed": round1(average(m.avg_hints_used for m in metrics)),
        "avgTimeToSolve": round(average(m.avg_time_to_solve for m in metrics)),
        "difficultyDistribution": distribution,
        "totalAttempts": sum(m.total_attempts for m in metrics),
        "totalCompletions": sum(m.total_completions for m in metrics),
    }


# Time buckets

def weekly_windows(now, weeks=WEEKS_OF_HISTORY):
    """(label, start, end) for the last ``weeks`` weeks, oldest first."""
    windows = []
    for i in range(weeks - 1, -1, -1):
        end = now - timedelta(days=i * 7)
        windows.append((f"Week {weeks - i}", end - timedelta(days=7), end))
    return windows


def rows_between(rows, start, end):
    return [row for row in rows if row.last_accessed and start <= row.last_accessed < end]


def group_by_module(rows):
    groups = OrderedDict()
    for row in rows:
        groups.setdefault(row.module.slug, []).append(row)
    return groups


# Learning dashboard

def student_score_averages(rows):
    scores = OrderedDict()
    for row in rows:
        scores.setdefault(row.user_id, []).append(row.score or 0)
    return {user_id: average(values) for user_id, values in scores.items()}


def segment_students(averages):
    """Count students per performance band from their average scores."""
    values = list(averages.values())
    return [
        {"segment": "High Performers", "count": sum(1 for v in values if v >= 85), "riskLevel": "low"},
        {"segment": "Steady Learners", "count": sum(1 for v in values if 65 <= v < 85), "riskLevel": "low"},
        {"segment": "Struggling Students", "count": sum(1 for v in values if 40 <= v < 65), "riskLevel": "medium"},
        {"segment": "At-Risk Students", "count": sum(1 for v in values if v < 50), "riskLevel": "high"},
    ]


def learning_overview(rows, total_students):
    averages = student_score_averages(rows)
    return {
        "totalStudents": total_students,
        "activeStudents": len({row.user_id for row in rows}),
        "completionRate": round1(percentage(sum(1 for r in rows if _is_completed(r)), len(rows))),
        "averageScore": round1(average(_scores(rows))),
        "totalTimeSpent": round(sum(_minutes(rows)) / 60),
        "riskStudents": sum(1 for v in averages.values() if v < 50),
    }


def module_performance(rows):
    performance = []
    for group in group_by_module(rows).values():
        avg_score = average(_scores(group))
        performance.append({
            "module": group[0].module.title,
            "slug": group[0].module.slug,
            "avgScore": round1(avg_score),
            "completionRate": round1(percentage(sum(1 for r in group if _is_completed(r)), len(group))),
            "timeSpent": round1(average(_minutes(group))),
            "difficulty": round1(max(1, 5 - avg_score / 20)),
        })
    return performance


def learning_velocity(rows, now):
    velocity = []
    for label, start, end in weekly_windows(now):
        week = rows_between(rows, start, end)
        velocity.append({
            "week": label,
            "completedLessons": sum(1 for r in week if _is_completed(r)),
            "timeSpent": sum(_minutes(week)),
            "avgScore": round1(average(_scores(week))) if week else None,
        })
    return velocity


def learning_dashboard(rows, total_students, now):
    return {
        "overview": learning_overview(rows, total_students),
        "performanceMetrics": {
            "modulePerformance": module_performance(rows),
            "learningVelocity": learning_velocity(rows, now),
        },
        "studentSegments": segment_students(student_score_averages(rows)),
    }


# Engagement dashboard

def engagement_overview(rows):
    # Each progress row stands in for one study session.
    sessions = len(rows)
    total_minutes = sum(_minutes(rows))
    return {
        "totalSessions": sessions,
        "avgSessionDuration": round1(total_minutes / sessions) if sessions else 0,
        "totalTimeSpent": round(total_minutes),
        "uniqueUsers": len({row.user_id for row in rows}),
        "interactionRate": round1(percentage(sum(1 for r in rows if (r.time_spent or 0) > 0), sessions)),
        "completionRate": round1(percentage(sum(1 for r in rows if _is_completed(r)), sessions)),
    }


def daily_activity(rows, now, days=DAYS_OF_HISTORY):
    activity = []
    today = start_of_day(now)
    for i in range(days - 1, -1, -1):
        day_start = today - timedelta(days=i)
        day = rows_between(rows, day_start, day_start + timedelta(days=1))
        activity.append({
            "date": day_start.date().isoformat(),
            "sessions": len(day),
            "avgDuration": round1(average(_minutes(day))) if day else None,
            "uniqueUsers": len({row.user_id for row in day}),
        })
    return activity


def module_engagement(rows):
    engagement = []
    for group in group_by_module(rows).values():
        engagement.append({
            "module": group[0].module.title,
            "slug": group[0].module.slug,
            "avgTimeSpent": round1(average(_minutes(group))),
            "completionRate": round1(percentage(sum(1 for r in group if _is_completed(r)), len(group))),
            "retryRate": round1(percentage(sum(1 for r in group if (r.score or 0) < 70), len(group))),
        })
    return engagement


def engagement_velocity(rows, now):
    velocity = []
    for label, start, end in weekly_windows(now):
        week = rows_between(rows, start, end)
        velocity.append({
            "week": label,
            "conceptsMastered": sum(1 for r in week if _is_completed(r)),
            "practiceProblems": len(week),
            "averageAccuracy": round1(average(_scores(week))) if week else None,
        })
    return velocity


def engagement_dashboard(rows, now):
    return {
        "overview": engagement_overview(rows),
        "timeMetrics": {"dailyActivity": daily_activity(rows, now)},
        "successMetrics": {
            "moduleEngagement": module_engagement(rows),
            "learningVelocity": engagement_velocity(rows, now),
        },
    }


# Predictive risk

def assess_risk(average_score, avg_minutes_per_module, completion_rate, inactive_days, badge_count):
    """Weighted risk score in [0, 1] with the factors that contributed to it."""
    factors = []
    score = 0.0

    if average_score < 60:
        factors.append("Low academic performance")
        score += 0.3
    elif average_score < 70:
        factors.append("Below average performance")
        score += 0.15

    if avg_minutes_per_module < 5:
        factors.append("Low engagement")
        score += 0.25
    elif avg_minutes_per_module < 10:
        factors.append("Moderate engagement concerns")
        score += 0.1

    if completion_rate < 30:
        factors.append("Low completion rate")
        score += 0.2
    elif completion_rate < 60:
        factors.append("Moderate completion concerns")
        score += 0.1

    if inactive_days > 14:
        factors.append("Inactive for 2+ weeks")
        score += 0.15
    elif inactive_days > 7:
        factors.append("Inactive for 1+ week")
        score += 0.08

    if badge_count == 0:
        factors.append("No achievements earned")
        score += 0.1

    return round(score, 2), factors


def risk_level(score):
    if score >= 0.8:
        return "critical"
    if score >= 0.6:
        return "high"
    if score >= 0.4:
        return "medium"
    return "low"


def predicted_outcome(score):
    if score >= 0.8:
        return f"{round(score * 100)}% chance of not completing course"
    if score >= 0.6:
        return f"{round(score * 90)}% chance of struggling with advanced modules"
    if score >= 0.4:
        return f"{round(score * 80)}% chance of taking longer than average to complete"
    return "Low risk of academic difficulties"


INTERVENTIONS = [
    (("Low academic performance", "Below average performance"),
     ["Schedule one-on-one tutoring session", "Recommend prerequisite review materials"]),
    (("Low engagement", "Moderate engagement concerns"),
     ["Increase interactive content engagement", "Set up study group participation"]),
    (("Low completion rate",),
     ["Provide time management resources", "Offer extended deadlines if needed"]),
    (("Inactive for 2+ weeks", "Inactive for 1+ week"),
     ["Send re-engagement email campaign", "Set up daily check-ins for 2 weeks"]),
    (("No achievements earned",),
     ["Connect with peer mentor", "Focus on achievable short-term goals"]),
]


def intervention_recommendations(factors, score):
    recommendations = []
    for triggers, actions in INTERVENTIONS:
        if any(trigger in factors for trigger in triggers):
            recommendations.extend(actions)
    if score >= 0.6:
        recommendations.extend(["Consider academic counseling referral", "Monitor progress more closely"])
    return recommendations


def student_risk_profile(user, rows, badge_count, now):
    """Risk profile for one student with at least one progress row."""
    total_minutes = sum(_minutes(rows))
    average_score = average(_scores(rows))
    completion_rate = percentage(sum(1 for r in rows if _is_completed(r)), len(rows))
    last_activity = max(row.last_accessed for row in rows)
    inactive_days = days_between(last_activity, now)

    score, factors = assess_risk(
        average_score, total_minutes / len(rows), completion_rate, inactive_days, badge_count
    )
    latest = max(rows, key=lambda r: r.last_accessed)

    return {
        "id": user.id,
        "name": user.name or "Unknown",
        "email": user.email,
        "riskScore": score,
        "riskLevel": risk_level(score),
        "riskFactors": factors,
        "currentModule": latest.module.title,
        "moduleProgress": round(ProgressManager.estimate_module_progress(latest.status, latest.score)),
        "avgScore": round(average_score),
        "timeSpent": round1(total_minutes / 60),
        "lastActivity": last_activity.isoformat(),
        "inactiveDays": inactive_days,
        "completionRate": round1(completion_rate),
        "predictedOutcome": predicted_outcome(score),
        "interventionRecommendations": intervention_recommendations(factors, score),
    }


def at_risk_students(users, rows_by_user, badges_by_user, now):
    profiles = []
    for user in users:
        rows = rows_by_user.get(user.id)
        if not rows:
            continue
        profiles.append(student_risk_profile(user, rows, badges_by_user.get(user.id, 0), now))

    flagged = [p for p in profiles if p["riskScore"] > AT_RISK_THRESHOLD]
    flagged.sort(key=lambda p: p["riskScore"], reverse=True)
    return flagged[:AT_RISK_LIMIT]


# Instructor dashboard

def action_description(status):
    return {
        ProgressStatus.COMPLETED: "Completed Module",
        ProgressStatus.IN_PROGRESS: "Continued Module",
        ProgressStatus.NOT_STARTED: "Started Module",
    }.get(status, "Accessed Module")


def instructor_student_summary(user, rows, badge_count, total_modules, now):
    base = {
        "id": user.id,
        "name": user.name or "Unknown",
        "email": user.email,
        "enrollmentDate": user.date_created.isoformat() if user.date_created else None,
        "badgesEarned": badge_count,
    }
    if not rows:
        return {
            **base,
            "overallProgress": 0,
            "averageScore": 0,
            "timeSpent": 0,
            "lastActivity": base["enrollmentDate"],
            "status": "inactive",
            "currentModule": "Not Started",
            "moduleProgress": 0,
            "riskFactors": ["No activity", "Not started"],
        }

    total_minutes = sum(_minutes(rows))
    average_score = average(_scores(rows))
    # Deactivated modules are not part of total_modules
    completed = sum(1 for r in rows if _is_completed(r) and r.module.is_active)
    all_done = total_modules > 0 and completed >= total_modules
    last_activity = max(row.last_accessed for row in rows)
    inactive_days = days_between(last_activity, now)

    unfinished = sorted(
        (r for r in rows if not _is_completed(r)),
        key=lambda r: r.module.order or 0,
    )
    if unfinished:
        current_module = unfinished[0].module.title
        module_progress = ProgressManager.estimate_module_progress(unfinished[0].status, unfinished[0].score)
    else:
        current_module = "Course Completed" if all_done else "Not Started"
        module_progress = 100 if all_done else 0

    status = "active"
    risk_factors = []
    if all_done:
        status = "completed"
    elif inactive_days > 7:
        status = "inactive"
        risk_factors.append("No recent activity")
    elif average_score < 60:
        status = "at-risk"
        risk_factors.append("Low academic performance")
    elif inactive_days > 3:
        risk_factors.append("Infrequent activity")

    if 60 <= average_score < 70:
        risk_factors.append("Below average performance")
    if total_minutes / len(rows) < 10:
        risk_factors.append("Low engagement")
    if len(risk_factors) >= 2 and status == "active":
        status = "at-risk"

    return {
        **base,
        "overallProgress": round(percentage(completed, total_modules)),
        "averageScore": round(average_score),
        "timeSpent": round1(total_minutes / 60),
        "lastActivity": last_activity.isoformat(),
        "status": status,
        "currentModule": current_module,
        "moduleProgress": round(module_progress),
        "riskFactors": risk_factors or None,
    }


def class_overview(students):
    total = len(students)
    completed = sum(1 for s in students if s["status"] == "completed")
    return {
        "totalStudents": total,
        "activeStudents": sum(1 for s in students if s["status"] == "active"),
        "completedStudents": completed,
        "atRiskStudents": sum(1 for s in students if s["status"] in ("at-risk", "inactive")),
        "averageProgress": round1(average(s["overallProgress"] for s in students)),
        "averageScore": round1(average(s["averageScore"] for s in students)),
        "classCompletionRate": round1(percentage(completed, total)),
    }


def module_overview(modules, rows):
    by_module = {}
    for row in rows:
        by_module.setdefault(row.module_id, []).append(row)

    overview = []
    for module in modules:
        group = by_module.get(module.id, [])
        started = len({r.user_id for r in group})
        completed = sum(1 for r in group if _is_completed(r))
        avg_score = average(_scores(group))
        completion = completed / started if started else 0
        overview.append({
            "module": module.title,
            "slug": module.slug,
            "studentsStarted": started,
            "studentsCompleted": completed,
            "averageScore": round1(avg_score),
            "averageTimeSpent": round1(average(_minutes(group)) / 60),
            "difficulty": round1(max(1, 5 - avg_score / 20 - completion)),
        })
    return overview


def recent_activity(rows, limit=RECENT_ACTIVITY_LIMIT):
    latest = sorted(rows, key=lambda r: r.last_accessed, reverse=True)[:limit]
    return [
        {
            "studentName": row.user.name or "Unknown",
            "action": action_description(row.status),
            "module": row.module.title,
            "timestamp": row.last_accessed.isoformat(),
            "score": row.score if _is_completed(row) else None,
        }
        for row in latest
    ]


def performance_trends(rows, now):
    trends = []
    for label, start, end in weekly_windows(now):
        week = rows_between(rows, start, end)
        trends.append({
            "week": label,
            "activeRecords": len(week),
            "averageScore": round1(average(_scores(week))) if week else None,
            "completionRate": (
                round1(percentage(sum(1 for r in week if _is_completed(r)), len(week))) if week else None
            ),
        })
    return trends


def instructor_dashboard(users, rows, badges_by_user, modules, now):
    rows_by_user = {}
    for row in rows:
        rows_by_user.setdefault(row.user_id, []).append(row)

    students = [
        instructor_student_summary(
            user, rows_by_user.get(user.id, []), badges_by_user.get(user.id, 0), len(modules), now
        )
        for user in users
    ]
    return {
        "classData": {
            "overview": class_overview(students),
            "moduleProgress": module_overview(modules, rows),
            "recentActivity": recent_activity(rows),
            "performanceTrends": performance_trends(rows, now),
        },
        "students": students,
    }
