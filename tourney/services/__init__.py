"""Service layer helpers."""

from .notifications import add_notification, notification_to_dict, tournament_link
from .profiles import display_name_problem, profile_to_dict, sanitize_display_name
from .ranking import RankingUnavailable, calculate_ranking
from .scores import score_to_dict

__all__ = [
    "RankingUnavailable",
    "add_notification",
    "calculate_ranking",
    "display_name_problem",
    "notification_to_dict",
    "profile_to_dict",
    "sanitize_display_name",
    "score_to_dict",
    "tournament_link",
]
