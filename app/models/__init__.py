from app.models.base import Base, get_db
from app.models.game_session import GameSession
from app.models.group import Group
from app.models.location import City, Country, State
from app.models.profile import Profile
from app.models.quiz import Quiz
from app.models.report import Report
from app.models.social import Follow, Friendship

__all__ = [
    "Base",
    "Profile",
    "Country",
    "State",
    "City",
    "Follow",
    "Friendship",
    "Quiz",
    "GameSession",
    "Group",
    "Report",
    "get_db",
]
