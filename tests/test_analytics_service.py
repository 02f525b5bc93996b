from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest

from models.enums import ProgressStatus
from utils import analytics_service as analytics

NOW = datetime(2026, 3, 10, 12, 0, 0)


def progress_row(user_id, slug="linear-equations", status=ProgressStatus.COMPLETED, score=80,
                 time_spent=30, days_ago=1, order=1, is_active=True):
    module = SimpleNamespace(slug=slug, title=slug.replace("-", " ").title(), order=order, is_active=is_active)
    return SimpleNamespace(
        user_id=user_id, module=module, module_id=order, status=status, score=score,
        time_spent=time_spent, last_accessed=NOW - timedelta(days=days_ago),
        user=SimpleNamespace(name=f"Student {user_id}"),
    )


def attempt(user_id, is_correct, hints=0, time_spent=None):
    return SimpleNamespace(
        user_id=user_id, module_slug="linear-equations", is_correct=is_correct,
        hints_used_count=hints, time_spent=time_spent,
    )


@pytest.mark.parametrize("success_rate,hints,seconds,expected", [
    (1.0, 0, 0, "easy"),
    (0.5, 1, 120, "medium"),
    (0.2, 3, 400, "hard"),
    (0.0, 5, 900, "expert"),
])
def test_classify_difficulty(success_rate, hints, seconds, expected):
    assert analytics.classify_difficulty(success_rate, hints, seconds) == expected


def test_difficulty_score_caps_time_component():
    assert analytics.difficulty_score(1.0, 0, 6000) == pytest.approx(0.3)


def test_compute_difficulty_metrics():
    attempts = [
        attempt(1, False, hints=2, time_spent=100),
        attempt(1, True, hints=2, time_spent=200),
        attempt(2, True, hints=0),
        attempt(3, False, hints=1, time_spent=300),
    ]

    metrics = analytics.compute_difficulty_metrics(attempts)

    assert metrics["total_attempts"] == 4
    assert metrics["total_completions"] == 2
    assert metrics["sample_size"] == 3
    assert metrics["avg_attempts"] == pytest.approx(4 / 3)
    assert metrics["avg_time_to_solve"] == 200
    assert metrics["avg_hints_used"] == pytest.approx(1.2)
    assert metrics["success_rate"] == 0.5
    assert metrics["calculated_diff"] == "medium"


def test_compute_difficulty_metrics_without_attempts():
    assert analytics.compute_difficulty_metrics([]) is None


def test_summarize_attempts_uses_timed_attempts_for_average():
    stats = analytics.summarize_attempts([attempt(1, True, 1, 60), attempt(1, False, 0, None), attempt(1, True, 2, 120)])

    assert stats == {
        "totalAttempts": 3,
        "correctAttempts": 2,
        "successRate": 66.7,
        "avgHintsUsed": 1.0,
        "avgTimeSpent": 90,
    }


def test_aggregate_hint_stats():
    usages = [
        SimpleNamespace(problem_id="p1", hint_index=0, solved_after=True, was_helpful=True, time_to_solve=60),
        SimpleNamespace(problem_id="p1", hint_index=0, solved_after=False, was_helpful=False, time_to_solve=None),
        SimpleNamespace(problem_id="p1", hint_index=1, solved_after=True, was_helpful=None, time_to_solve=120),
    ]

    stats = analytics.aggregate_hint_stats(usages)["p1"]

    assert stats["totalUsages"] == 3
    assert stats["solvedAfterHint"] == 2
    assert stats["avgTimeToSolve"] == 90
    first, second = stats["hints"]
    assert first["effectiveness"] == 50.0
    assert first["helpfulPercent"] == 50.0
    assert second["helpfulPercent"] is None


def test_weekly_windows_are_contiguous():
    windows = analytics.weekly_windows(NOW)

    assert len(windows) == 6
    assert windows[-1][2] == NOW
    for (_, _, end), (_, start, _) in zip(windows, windows[1:]):
        assert end == start


def test_empty_weeks_have_null_averages():
    velocity = analytics.learning_velocity([progress_row(1, days_ago=1, score=70)], NOW)

    assert velocity[-1] == {"week": "Week 6", "completedLessons": 1, "timeSpent": 30, "avgScore": 70.0}
    assert velocity[0] == {"week": "Week 1", "completedLessons": 0, "timeSpent": 0, "avgScore": None}


def test_learning_overview_and_segments():
    rows = [
        progress_row(1, score=90),
        progress_row(2, score=45, status=ProgressStatus.IN_PROGRESS),
        progress_row(3, score=70),
    ]

    overview = analytics.learning_overview(rows, total_students=5)
    segments = {s["segment"]: s["count"] for s in analytics.segment_students(analytics.student_score_averages(rows))}

    assert overview["totalStudents"] == 5
    assert overview["activeStudents"] == 3
    assert overview["completionRate"] == 66.7
    assert overview["riskStudents"] == 1
    assert segments == {
        "High Performers": 1, "Steady Learners": 1, "Struggling Students": 1, "At-Risk Students": 1,
    }


def test_daily_activity_covers_seven_days():
    activity = analytics.daily_activity([progress_row(1, days_ago=0), progress_row(2, days_ago=0)], NOW)

    assert len(activity) == 7
    assert activity[-1]["date"] == "2026-03-10"
    assert activity[-1]["sessions"] == 2
    assert activity[0]["avgDuration"] is None


@pytest.mark.parametrize("kwargs,expected_score,expected_factors", [
    (dict(average_score=90, avg_minutes_per_module=30, completion_rate=100, inactive_days=0, badge_count=2), 0, []),
    (dict(average_score=65, avg_minutes_per_module=8, completion_rate=50, inactive_days=8, badge_count=1), 0.43,
     ["Below average performance", "Moderate engagement concerns", "Moderate completion concerns",
      "Inactive for 1+ week"]),
    (dict(average_score=40, avg_minutes_per_module=2, completion_rate=0, inactive_days=20, badge_count=0), 1.0,
     ["Low academic performance", "Low engagement", "Low completion rate", "Inactive for 2+ weeks",
      "No achievements earned"]),
])
def test_assess_risk(kwargs, expected_score, expected_factors):
    score, factors = analytics.assess_risk(**kwargs)
    assert score == pytest.approx(expected_score)
    assert factors == expected_factors


@pytest.mark.parametrize("score,level", [(0.85, "critical"), (0.6, "high"), (0.45, "medium"), (0.2, "low")])
def test_risk_level(score, level):
    assert analytics.risk_level(score) == level


def test_at_risk_students_filters_and_sorts():
    users = [SimpleNamespace(id=i, name=f"S{i}", email=f"s{i}@example.com") for i in (1, 2, 3)]
    rows_by_user = {
        1: [progress_row(1, score=95, time_spent=60)],
        2: [progress_row(2, score=30, time_spent=1, status=ProgressStatus.IN_PROGRESS, days_ago=20)],
        3: [progress_row(3, score=65, time_spent=8, status=ProgressStatus.IN_PROGRESS, days_ago=2)],
    }

    flagged = analytics.at_risk_students(users, rows_by_user, {1: 1}, NOW)

    assert [s["id"] for s in flagged] == [2, 3]
    assert flagged[0]["riskLevel"] == "critical"
    assert "Send re-engagement email campaign" in flagged[0]["interventionRecommendations"]


def test_instructor_summary_statuses():
    user = SimpleNamespace(id=1, name="S1", email="s1@example.com", date_created=NOW - timedelta(days=30))

    idle = analytics.instructor_student_summary(user, [], 0, 6, NOW)
    assert idle["status"] == "inactive"
    assert idle["currentModule"] == "Not Started"

    rows = [progress_row(1, slug=f"m-{i}", order=i, score=90) for i in range(6)]
    done = analytics.instructor_student_summary(user, rows, 6, 6, NOW)
    assert done["status"] == "completed"
    assert done["overallProgress"] == 100
    assert done["currentModule"] == "Course Completed"

    stale = analytics.instructor_student_summary(user, [progress_row(1, days_ago=10, status=ProgressStatus.IN_PROGRESS)],
                                                 0, 6, NOW)
    assert stale["status"] == "inactive"
    assert "No recent activity" in stale["riskFactors"]


def test_instructor_summary_ignores_deactivated_modules():
    user = SimpleNamespace(id=1, name="S1", email="s1@example.com", date_created=NOW - timedelta(days=30))
    active = [progress_row(1, slug=f"m-{i}", order=i, score=90) for i in range(5)]
    retired = progress_row(1, slug="retired", order=9, score=90, is_active=False)

    summary = analytics.instructor_student_summary(user, active + [retired], 0, 6, NOW)

    assert summary["overallProgress"] == 83
    assert summary["status"] != "completed"

    finished = analytics.instructor_student_summary(
        user, active + [progress_row(1, slug="m-5", order=5, score=90), retired], 0, 6, NOW
    )
    assert finished["overallProgress"] == 100
    assert finished["status"] == "completed"
