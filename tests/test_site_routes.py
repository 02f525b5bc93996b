from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from models import ContactSubmission


def test_modules_are_listed_in_order(client, make_module):
    make_module("functions-graphs", order=2)
    make_module("linear-equations", order=1)
    make_module("retired", order=3, is_active=False)

    modules = client.get("/api/modules").get_json()["modules"]

    assert [m["slug"] for m in modules] == ["linear-equations", "functions-graphs"]
    assert modules[0]["objectives"] == ["Understand linear-equations"]


def test_module_detail(client, make_module):
    make_module("linear-equations")

    assert client.get("/api/modules/linear-equations").get_json()["module"]["slug"] == "linear-equations"
    assert client.get("/api/modules/unknown").status_code == 404


def test_contact_submission_is_stored(client):
    response = client.post("/api/contact", json={
        "name": "Sam Student",
        "email": "Sam@Example.com",
        "message": "<b>Hello</b> there",
        "category": "support",
    })

    assert response.status_code == 201
    submission = ContactSubmission.query.one()
    assert response.get_json()["id"] == submission.id
    assert submission.email == "sam@example.com"
    assert submission.subject == "General Inquiry"
    assert submission.message == "Hello there"
    assert submission.status == "pending"


def test_contact_requires_fields(client):
    response = client.post("/api/contact", json={"name": "Sam"})

    assert response.status_code == 400
    assert set(response.get_json()["error"]["details"]["missing"]) == {"email", "message"}


def test_contact_notification_failure_does_not_fail_request(app, client):
    app.config["CONTACT_NOTIFY_EMAIL"] = "staff@example.com"

    with patch("utils.email.mail.send", side_effect=OSError("smtp down")) as send:
        response = client.post("/api/contact", json={
            "name": "Sam", "email": "sam@example.com", "message": "Hi",
        })

    assert response.status_code == 201
    send.assert_called_once()


def test_health_reports_healthy(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    body = response.get_json()
    assert body["status"] == "healthy"
    assert body["services"]["database"]["status"] == "healthy"
    assert response.headers["Cache-Control"] == "no-cache, no-store, must-revalidate"


def test_health_reports_database_failure(client):
    error = OperationalError("SELECT 1", {}, Exception("connection refused"))
    with patch("routes.health.check_database", side_effect=error):
        response = client.get("/api/health")

    assert response.status_code == 503
    body = response.get_json()
    assert body["status"] == "unhealthy"
    assert body["errors"] == ["database: OperationalError"]
