import pytest
from pydantic import ValidationError

from tourney.api.schemas import NotificationUpdate, ProfileUpdate, ScoreReview, ScoreUpdate
from tourney.core.errors import VALIDATION_INVALID_SCORE, ValidationFailed
from tourney.services.gateway import parse_payload


def test_score_update_accepts_bounds() -> None:
    assert ScoreUpdate.model_validate({"score": 0}).score == 0
    assert ScoreUpdate.model_validate({"score": 1_010_000}).score == 1_010_000


@pytest.mark.parametrize("body", [{"score": 1_010_001}, {"score": "5"}, {"score": False}, {}])
def test_score_update_rejects(body: dict) -> None:
    with pytest.raises(ValidationError):
        ScoreUpdate.model_validate(body)


def test_review_requires_score_only_when_approving() -> None:
    assert ScoreReview.model_validate({"status": "rejected"}).score is None
    with pytest.raises(ValidationError):
        ScoreReview.model_validate({"status": "approved"})


def test_notification_flag_is_strict() -> None:
    assert NotificationUpdate.model_validate({"is_read": False}).is_read is False
    with pytest.raises(ValidationError):
        NotificationUpdate.model_validate({"is_read": "false"})


def test_profile_update_stores_sanitized_value() -> None:
    assert ProfileUpdate.model_validate({"display_name": " <b>Rin</b> "}).display_name == "Rin"


def test_parse_payload_uses_endpoint_code_and_message() -> None:
    with pytest.raises(ValidationFailed) as exc_info:
        parse_payload(ScoreUpdate, {"score": -5}, code=VALIDATION_INVALID_SCORE, message="範囲外")

    assert exc_info.value.status_code == 400
    assert exc_info.value.code == VALIDATION_INVALID_SCORE
    assert exc_info.value.message == "範囲外"


def test_parse_payload_surfaces_validator_reason() -> None:
    with pytest.raises(ValidationFailed) as exc_info:
        parse_payload(ProfileUpdate, {"display_name": "x" * 60}, message="generic")

    assert "50" in exc_info.value.message
