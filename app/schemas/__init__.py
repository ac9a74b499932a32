from app.schemas.common import (
    ConfirmRequest,
    CountItem,
    ListParams,
    MutationResponse,
    Page,
    ProfileSummary,
)
from app.schemas.game import (
    GameApplicationListResponse,
    GameDateRange,
    GameDetailResponse,
    PlayerDemographics,
)
from app.schemas.game_session import (
    GameDashboardResponse,
    GameSessionDetailResponse,
    GameSessionListParams,
    GameSessionResponse,
)
from app.schemas.group import (
    GroupDetailResponse,
    GroupListParams,
    GroupMember,
    GroupResponse,
)
from app.schemas.profile import (
    ProfileDetailResponse,
    ProfileListParams,
    ProfileResponse,
)
from app.schemas.quiz import (
    QuizDetailResponse,
    QuizListParams,
    QuizListResponse,
    QuizResponse,
)
from app.schemas.report import (
    ReportDetailResponse,
    ReportListParams,
    ReportListResponse,
    ReportResponse,
)

__all__ = [
    "ListParams",
    "Page",
    "MutationResponse",
    "ConfirmRequest",
    "ProfileSummary",
    "CountItem",
    "QuizListParams",
    "QuizResponse",
    "QuizDetailResponse",
    "QuizListResponse",
    "GameSessionListParams",
    "GameSessionResponse",
    "GameSessionDetailResponse",
    "GameDashboardResponse",
    "GameDateRange",
    "GameApplicationListResponse",
    "GameDetailResponse",
    "PlayerDemographics",
    "GroupListParams",
    "GroupResponse",
    "GroupDetailResponse",
    "GroupMember",
    "ReportListParams",
    "ReportResponse",
    "ReportDetailResponse",
    "ReportListResponse",
    "ProfileListParams",
    "ProfileResponse",
    "ProfileDetailResponse",
]
