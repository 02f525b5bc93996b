from unittest.mock import MagicMock, patch

import pytest
from flask import Blueprint
from sqlalchemy.exc import IntegrityError, OperationalError

from utils.db import with_retry
from utils.errors import NotFoundError, ServiceUnavailableError, ValidationError


def operational_error():
    return OperationalError("SELECT 1", {}, Exception("server has gone away"))


def test_with_retry_returns_result_after_transient_failures(app):
    operation = MagicMock(side_effect=[operational_error(), operational_error(), "ok"])

    with patch("utils.db.time.sleep") as sleep:
        assert with_retry(operation, max_retries=3, base_delay=10) == "ok"

    assert operation.call_count == 3
    assert sleep.call_count == 2
    first_delay, second_delay = (call.args[0] for call in sleep.call_args_list)
    assert 0.01 <= first_delay <= 0.02
    assert 0.02 <= second_delay <= 0.03


def test_with_retry_gives_up_after_max_retries(app):
    operation = MagicMock(side_effect=operational_error())

    with pytest.raises(OperationalError):
        with_retry(operation, max_retries=2, base_delay=0)

    assert operation.call_count == 3


def test_with_retry_does_not_retry_other_errors(app):
    operation = MagicMock(side_effect=IntegrityError("INSERT", {}, Exception("duplicate")))

    with pytest.raises(IntegrityError):
        with_retry(operation)

    assert operation.call_count == 1


def test_with_retry_reads_configured_attempts(app):
    operation = MagicMock(side_effect=operational_error())

    with pytest.raises(OperationalError):
        with_retry(operation)

    assert operation.call_count == app.config["DATABASE_RETRY_ATTEMPTS"] + 1


@pytest.fixture
def failing_client(app):
    bp = Blueprint("failing", __name__)

    @bp.route("/validation")
    def validation():
        raise ValidationError("Bad input", details={"field": "x"})

    @bp.route("/missing")
    def missing():
        raise NotFoundError("Widget")

    @bp.route("/duplicate")
    def duplicate():
        raise IntegrityError("INSERT", {}, Exception("duplicate"))

    @bp.route("/offline")
    def offline():
        raise operational_error()

    @bp.route("/maintenance")
    def maintenance():
        raise ServiceUnavailableError("Down for maintenance")

    @bp.route("/boom")
    def boom():
        raise RuntimeError("secret internals")

    app.register_blueprint(bp, url_prefix="/fail")
    return app.test_client()


@pytest.mark.parametrize("path,status,code", [
    ("/fail/validation", 400, "INVALID_INPUT"),
    ("/fail/missing", 404, "RECORD_NOT_FOUND"),
    ("/fail/duplicate", 409, "DUPLICATE_RECORD"),
    ("/fail/offline", 503, "DB_CONNECTION_FAILED"),
    ("/fail/maintenance", 503, "SERVICE_UNAVAILABLE"),
    ("/fail/boom", 500, "INTERNAL_SERVER_ERROR"),
])
def test_errors_use_the_envelope(failing_client, path, status, code):
    response = failing_client.get(path)

    assert response.status_code == status
    body = response.get_json()
    assert body["success"] is False
    assert body["error"]["code"] == code


def test_error_details_and_messages(failing_client):
    validation = failing_client.get("/fail/validation").get_json()["error"]
    assert validation == {"code": "INVALID_INPUT", "message": "Bad input", "details": {"field": "x"}}

    assert failing_client.get("/fail/missing").get_json()["error"]["message"] == "Widget not found"
    assert "secret" not in failing_client.get("/fail/boom").get_json()["error"]["message"]


def test_unknown_route_uses_the_envelope(client):
    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.get_json()["error"]["code"] == "NOT_FOUND"
