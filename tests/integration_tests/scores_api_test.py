import uuid

import pytest
from sqlalchemy import event
from sqlalchemy.exc import OperationalError
from sqlmodel import select

from tourney.api.routers import scores as score_routes
from tourney.models import Notification, Score
from tourney.models.score import MAX_SCORE

from tests.factories import fetch, make_score, make_user, sign_in, writes


@pytest.fixture
def score(session, tournament, player):
    return make_score(session, tournament, player, value=900_000)


def test_organizer_can_set_score_to_maximum(client, caller, engine, organizer, score):
    sign_in(caller, organizer)

    response = client.patch(f"/scores/{score.id}", json={"score": MAX_SCORE})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["score"]["score"] == MAX_SCORE
    assert fetch(engine, Score, score.id).score == MAX_SCORE


@pytest.mark.parametrize("value", [MAX_SCORE + 1, -1, "1000", 99.5, True, None])
def test_score_outside_range_or_type_is_rejected(
    client, caller, engine, statements, organizer, score, value
):
    sign_in(caller, organizer)
    statements.clear()

    response = client.patch(f"/scores/{score.id}", json={"score": value})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_INVALID_SCORE"
    assert writes(statements) == []
    assert fetch(engine, Score, score.id).score == 900_000


def test_unknown_fields_are_rejected(client, caller, organizer, score):
    sign_in(caller, organizer)

    response = client.patch(f"/scores/{score.id}", json={"score": 10, "status": "approved"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_INVALID_SCORE"


def test_non_organizer_cannot_update_score(client, caller, engine, statements, player, score):
    sign_in(caller, player)
    statements.clear()

    response = client.patch(f"/scores/{score.id}", json={"score": 1})

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "AUTHZ_NOT_ORGANIZER"
    assert writes(statements) == []
    assert fetch(engine, Score, score.id).score == 900_000


def test_organizer_of_another_tournament_is_not_an_organizer_here(
    client, caller, session, score
):
    other = make_user(session, "other@example.com", "Other")
    sign_in(caller, other)

    response = client.patch(f"/scores/{score.id}", json={"score": 1})

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "AUTHZ_NOT_ORGANIZER"


@pytest.mark.parametrize("content", ["[1]", "5", "null", "{not json"])
def test_non_organizer_with_bad_body_is_refused_before_validation(
    client, caller, statements, player, score, content
):
    sign_in(caller, player)
    statements.clear()

    response = client.patch(
        f"/scores/{score.id}", content=content, headers={"content-type": "application/json"}
    )

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "AUTHZ_NOT_ORGANIZER"
    assert writes(statements) == []


@pytest.mark.parametrize("content", ["[1]", "5", "null", "{not json"])
def test_organizer_bad_body_is_an_invalid_score(client, caller, engine, organizer, score, content):
    sign_in(caller, organizer)

    response = client.patch(
        f"/scores/{score.id}", content=content, headers={"content-type": "application/json"}
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_INVALID_SCORE"
    assert fetch(engine, Score, score.id).score == 900_000


def test_missing_score_with_bad_body_is_not_found(client, caller, organizer):
    sign_in(caller, organizer)

    response = client.patch(
        f"/scores/{uuid.uuid4()}", content="[1]", headers={"content-type": "application/json"}
    )

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


@pytest.mark.parametrize("score_id", [str(uuid.uuid4()), "not-a-uuid"])
def test_update_missing_score_is_not_found(client, caller, organizer, score_id):
    sign_in(caller, organizer)

    response = client.patch(f"/scores/{score_id}", json={"score": 1})

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


def test_delete_score_twice(client, caller, engine, organizer, score):
    sign_in(caller, organizer)

    first = client.delete(f"/scores/{score.id}")
    second = client.delete(f"/scores/{score.id}")

    assert first.status_code == 200
    assert first.json()["success"] is True
    assert second.status_code == 404
    assert second.json()["error"]["code"] == "NOT_FOUND"
    assert fetch(engine, Score, score.id) is None


def test_non_organizer_cannot_delete_score(client, caller, engine, statements, player, score):
    sign_in(caller, player)
    statements.clear()

    response = client.delete(f"/scores/{score.id}")

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "AUTHZ_NOT_ORGANIZER"
    assert writes(statements) == []
    assert fetch(engine, Score, score.id) is not None


def test_approve_score_notifies_submitter(client, caller, session, engine, organizer, player, score):
    sign_in(caller, organizer)

    response = client.patch(
        f"/scores/{score.id}/approve", json={"status": "approved", "score": 950_000}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["score"]["status"] == "approved"
    assert body["score"]["score"] == 950_000
    assert body["score"]["approved_by"] == str(organizer.id)

    stored = fetch(engine, Score, score.id)
    assert stored.status == "approved"
    assert stored.approved_at is not None

    session.expire_all()
    notifications = session.exec(
        select(Notification).where(Notification.user_id == player.id)
    ).all()
    assert len(notifications) == 1
    assert "承認" in notifications[0].message
    assert notifications[0].link_url == f"/tournaments/{score.tournament_id}"


def test_reject_score_keeps_value(client, caller, engine, organizer, score):
    sign_in(caller, organizer)

    response = client.patch(f"/scores/{score.id}/approve", json={"status": "rejected"})

    assert response.status_code == 200
    stored = fetch(engine, Score, score.id)
    assert stored.status == "rejected"
    assert stored.score == 900_000


@pytest.mark.parametrize(
    "body",
    [
        {"status": "approved"},
        {"status": "maybe"},
        {"status": "approved", "score": MAX_SCORE + 1},
        {},
    ],
)
def test_review_payload_is_validated(client, caller, statements, organizer, score, body):
    sign_in(caller, organizer)
    statements.clear()

    response = client.patch(f"/scores/{score.id}/approve", json=body)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_INVALID_FORMAT"
    assert writes(statements) == []


def test_store_failure_returns_generic_error(client, caller, engine, organizer, score):
    def _fail_updates(conn, cursor, statement, parameters, context, executemany):
        if statement.lstrip().upper().startswith("UPDATE"):
            raise OperationalError(statement, parameters, Exception("disk I/O error"))

    event.listen(engine, "before_cursor_execute", _fail_updates)
    try:
        sign_in(caller, organizer)
        response = client.patch(f"/scores/{score.id}", json={"score": 5})
    finally:
        event.remove(engine, "before_cursor_execute", _fail_updates)

    assert response.status_code == 500
    error = response.json()["error"]
    assert error["code"] == "SYSTEM_DATABASE_ERROR"
    assert "disk" not in error["message"]
    assert fetch(engine, Score, score.id).score == 900_000


def test_unexpected_failure_is_internal_error(client, caller, organizer, score, monkeypatch):
    def broken(_):
        raise RuntimeError("serializer exploded")

    monkeypatch.setattr(score_routes, "score_to_dict", broken)
    sign_in(caller, organizer)

    response = client.patch(f"/scores/{score.id}", json={"score": 5})

    assert response.status_code == 500
    error = response.json()["error"]
    assert error["code"] == "SYSTEM_INTERNAL_ERROR"
    assert "exploded" not in error["message"]
