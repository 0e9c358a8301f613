"""Database model exports."""

from .notification import Notification
from .oauth import OAuthUser
from .profile import Profile
from .score import Score
from .tournament import Participant, Tournament

__all__ = [
    "Notification",
    "OAuthUser",
    "Participant",
    "Profile",
    "Score",
    "Tournament",
]
