import pytest

from models import ModuleProgress, UserBadge
from models.enums import ProgressStatus


def test_progress_requires_login(client):
    assert client.get("/api/progress").get_json() == {"error": "Unauthorized"}
    assert client.post("/api/progress", json={"moduleSlug": "x"}).status_code == 401


def test_first_update_creates_row(client, login, make_user, make_module):
    user = make_user()
    make_module("linear-equations")
    login(user)

    response = client.post("/api/progress", json={"moduleSlug": "linear-equations", "score": 40, "timeSpent": 10})

    assert response.status_code == 200
    progress = response.get_json()["progress"]
    assert progress["status"] == "IN_PROGRESS"
    assert progress["score"] == 40
    assert progress["timeSpent"] == 10
    assert response.get_json()["newBadges"] == []


def test_updates_accumulate_time_and_overwrite_score(client, login, make_user, make_module):
    user = make_user()
    make_module("linear-equations")
    login(user)

    client.post("/api/progress", json={"moduleSlug": "linear-equations", "score": 40, "timeSpent": 10})
    client.post("/api/progress", json={"moduleSlug": "linear-equations", "score": 75, "timeSpent": 5})

    row = ModuleProgress.query.filter_by(user_id=user.id).one()
    assert row.score == 75
    assert row.time_spent == 15
    assert row.completed_at is None


def test_completion_stamps_completed_at_and_awards_badge(client, login, make_user, make_module, make_badge):
    user = make_user()
    module = make_module("linear-equations")
    badge = make_badge("Linear Master", "MODULE_COMPLETION", {"moduleSlug": "linear-equations", "minScore": 80},
                       module=module)
    login(user)

    response = client.post("/api/progress", json={
        "moduleSlug": "linear-equations", "status": "COMPLETED", "score": 85,
    })

    body = response.get_json()
    assert [b["badgeId"] for b in body["newBadges"]] == [badge.id]
    assert body["progress"]["completedAt"] is not None

    again = client.post("/api/progress", json={"moduleSlug": "linear-equations", "score": 90})
    assert again.get_json()["newBadges"] == []
    assert UserBadge.query.filter_by(user_id=user.id).count() == 1


def test_problem_level_completion_does_not_stamp_module(client, login, make_user, make_module):
    user = make_user()
    make_module("linear-equations")
    login(user)

    client.post("/api/progress", json={
        "moduleSlug": "linear-equations", "status": "COMPLETED", "score": 100, "problemId": "le-1",
    })

    assert ModuleProgress.query.filter_by(user_id=user.id).one().completed_at is None


def test_unknown_module_is_not_found(client, login, make_user):
    login(make_user())

    response = client.post("/api/progress", json={"moduleSlug": "no-such-module"})

    assert response.status_code == 404
    assert response.get_json()["error"]["code"] == "RECORD_NOT_FOUND"


def test_invalid_updates_are_rejected(client, login, make_user, make_module):
    login(make_user())
    make_module("linear-equations")

    assert client.post("/api/progress", json={}).status_code == 400
    assert client.post("/api/progress", json={"moduleSlug": "linear-equations", "status": "DONE"}).status_code == 400
    assert client.post("/api/progress", json={"moduleSlug": "linear-equations", "score": 101}).status_code == 400
    assert client.post("/api/progress", json={"moduleSlug": "linear-equations", "timeSpent": -1}).status_code == 400


def test_get_progress_filters_by_module(client, login, make_user, make_module, make_progress):
    user = make_user()
    first = make_module("linear-equations", order=1)
    second = make_module("functions-graphs", order=2)
    make_progress(user, first, status=ProgressStatus.COMPLETED)
    make_progress(user, second, status=ProgressStatus.IN_PROGRESS, score=20)
    login(user)

    everything = client.get("/api/progress").get_json()["progress"]
    assert [p["moduleSlug"] for p in everything] == ["linear-equations", "functions-graphs"]

    one = client.get("/api/progress?module=functions-graphs").get_json()["progress"]
    assert [p["moduleSlug"] for p in one] == ["functions-graphs"]


@pytest.mark.parametrize("field,raw", [
    ("timeSpent", "NaN"),
    ("timeSpent", "Infinity"),
    ("timeSpent", "-Infinity"),
    ("score", "NaN"),
    ("score", "Infinity"),
])
def test_non_finite_numbers_are_rejected(client, login, make_user, make_module, field, raw):
    login(make_user())
    make_module("linear-equations")

    response = client.post(
        "/api/progress",
        data=f'{{"moduleSlug": "linear-equations", "{field}": {raw}}}',
        content_type="application/json",
    )

    assert response.status_code == 400
    assert response.get_json()["error"]["code"] == "INVALID_INPUT"
