from app.crud.common import compare_and_swap, delete_by_id, purge, restore, soft_delete, update_by_id
from app.crud.game_session import get_game_session_by_id, list_game_sessions
from app.crud.group import get_group_by_id, list_groups
from app.crud.profile import get_profile_by_id, list_profiles
from app.crud.quiz import get_quiz_by_id, list_quizzes
from app.crud.report import get_report_by_id, list_reports

__all__ = [
    "update_by_id",
    "soft_delete",
    "restore",
    "purge",
    "delete_by_id",
    "compare_and_swap",
    "list_quizzes",
    "get_quiz_by_id",
    "list_game_sessions",
    "get_game_session_by_id",
    "list_groups",
    "get_group_by_id",
    "list_reports",
    "get_report_by_id",
    "list_profiles",
    "get_profile_by_id",
]
