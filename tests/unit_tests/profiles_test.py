import pytest

from tourney.services.profiles import (
    DISPLAY_NAME_MAX_LENGTH,
    display_name_problem,
    sanitize_display_name,
)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("  Rin  ", "Rin"),
        ("DJ\t\tRin", "DJ Rin"),
        ('<img src="x" onerror=alert(1)>Rin', "Rin"),
        ("<b>DJ</b>  <i>Rin</i>", "DJ Rin"),
        ("<script>alert(1)</script>Rin", "Rin"),
        ("Tom &amp; Jerry", "Tom Jerry"),
        ("Rin\u200b\u202e", "Rin"),
        ("a&b`c'd\\e", "abcde"),
        ("東方 プレイヤー", "東方 プレイヤー"),
    ],
)
def test_sanitize_display_name(raw: str, expected: str) -> None:
    assert sanitize_display_name(raw) == expected


def test_display_name_problem_bounds() -> None:
    assert display_name_problem("") is not None
    assert display_name_problem("a" * DISPLAY_NAME_MAX_LENGTH) is None
    assert display_name_problem("a" * (DISPLAY_NAME_MAX_LENGTH + 1)) is not None
