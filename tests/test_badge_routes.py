from models import UserBadge
from models.enums import ProgressStatus


def seed_badges(make_module, make_badge):
    module = make_module("linear-equations")
    module_badge = make_badge("Linear Master", "MODULE_COMPLETION",
                              {"moduleSlug": "linear-equations", "minScore": 80}, points=100, module=module)
    course_badge = make_badge("Course Completion", "COURSE_COMPLETION", {}, points=100)
    return module, module_badge, course_badge


def test_badges_require_login(client):
    assert client.get("/api/badges").status_code == 401
    assert client.post("/api/badges", json={"action": "check_and_award"}).status_code == 401


def test_get_badges_returns_stats_and_progress(client, login, make_user, make_module, make_badge, make_progress):
    user = make_user()
    module, module_badge, course_badge = seed_badges(make_module, make_badge)
    make_progress(user, module, status=ProgressStatus.IN_PROGRESS, score=40)
    login(user)

    body = client.get("/api/badges").get_json()

    assert body["stats"]["totalBadges"] == 2
    assert body["stats"]["earnedBadges"] == 0
    assert body["stats"]["nextBadge"]["title"] == "Linear Master"
    by_title = {b["title"]: b for b in body["badges"]}
    assert by_title["Linear Master"]["progress"] == {"current": 40, "target": 80, "percentage": 50.0}
    assert by_title["Linear Master"]["module"] == {"title": module.title, "slug": "linear-equations"}
    assert by_title["Course Completion"]["isEarned"] is False


def test_get_badges_views(client, login, make_user, make_module, make_badge, make_progress):
    user = make_user()
    module, module_badge, _ = seed_badges(make_module, make_badge)
    make_progress(user, module, score=95)
    login(user)

    assert set(client.get("/api/badges?type=stats").get_json()) == {"stats"}
    assert set(client.get("/api/badges?type=progress").get_json()) == {"badges"}

    checked = client.get("/api/badges?type=check").get_json()
    assert [b["badgeId"] for b in checked["newBadges"]] == [module_badge.id]
    assert checked["message"] == "Congratulations! You earned 1 new badge(s)!"

    stats = client.get("/api/badges?type=stats").get_json()["stats"]
    assert stats["earnedBadges"] == 1
    assert stats["totalPoints"] == 100
    assert stats["recentBadges"][0]["title"] == "Linear Master"


def test_check_and_award_action(client, login, make_user, make_module, make_badge, make_progress):
    user = make_user()
    module, _, _ = seed_badges(make_module, make_badge)
    make_progress(user, module, score=95)
    login(user)

    first = client.post("/api/badges", json={"action": "check_and_award"}).get_json()
    second = client.post("/api/badges", json={"action": "check_and_award"}).get_json()

    assert first["count"] == 1
    assert second["count"] == 0
    assert second["message"] == "No new badges earned at this time."


def test_award_specific_action(client, login, make_user, make_module, make_badge):
    user = make_user()
    _, _, course_badge = seed_badges(make_module, make_badge)
    login(user)

    awarded = client.post("/api/badges", json={"action": "award_specific", "badgeId": course_badge.id}).get_json()
    assert awarded["success"] is True
    assert awarded["badge"]["badgeId"] == course_badge.id

    repeated = client.post("/api/badges", json={"action": "award_specific", "badgeId": course_badge.id}).get_json()
    assert repeated == {"success": False, "message": "Badge already earned"}
    assert UserBadge.query.filter_by(user_id=user.id).count() == 1


def test_award_specific_unknown_badge_is_not_found(client, login, make_user):
    login(make_user())

    response = client.post("/api/badges", json={"action": "award_specific", "badgeId": 999})

    assert response.status_code == 404


def test_invalid_actions_are_rejected(client, login, make_user):
    login(make_user())

    assert client.post("/api/badges", json={"action": "explode"}).status_code == 400
    assert client.post("/api/badges", json={"action": "award_specific"}).status_code == 400
    assert client.post("/api/badges", json={"action": "award_specific", "badgeId": "1"}).status_code == 400
