from app.services.dashboard_service import get_game_dashboard_stats
from app.services.game_service import get_game_detail, get_player_demographics, list_game_applications
from app.services.game_session_service import (
    clear_sessions,
    get_game_session_detail,
    get_stale_sessions,
    list_game_sessions,
)
from app.services.group_service import get_group_detail, list_groups
from app.services.profile_service import get_profile_detail, list_profiles
from app.services.quiz_service import get_quiz_detail, list_quizzes
from app.services.report_service import get_report_detail, list_reports

__all__ = [
    "list_quizzes",
    "get_quiz_detail",
    "list_game_sessions",
    "get_game_session_detail",
    "get_stale_sessions",
    "clear_sessions",
    "get_game_dashboard_stats",
    "list_game_applications",
    "get_game_detail",
    "get_player_demographics",
    "list_groups",
    "get_group_detail",
    "list_reports",
    "get_report_detail",
    "list_profiles",
    "get_profile_detail",
]
