import logging

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.crud import common as common_crud, game_session as game_session_crud, quiz as quiz_crud
from app.exceptions import DataFetchError, QuizNotFoundError
from app.models.profile import Profile
from app.models.quiz import Quiz
from app.schemas import quiz as quiz_schema
from app.schemas.common import MutationResponse
from app.schemas.game_session import Participant
from app.services import aggregation, enrichment
from app.services.decoding import decode_list, decode_rows
from app.services.mutations import run_mutation
from app.services.table import empty_page, page_fields

logger = logging.getLogger(__name__)


def question_count(quiz: Quiz) -> int:
    return len(quiz.questions) if isinstance(quiz.questions, list) else 0


def to_quiz_response(quiz: Quiz, creator: Profile | None) -> quiz_schema.QuizResponse:
    """퀴즈 행 → 목록 응답"""
    return quiz_schema.QuizResponse(
        id=quiz.id,
        title=quiz.title,
        description=quiz.description,
        category=quiz.category,
        language=quiz.language,
        question_count=question_count(quiz),
        is_hidden=quiz.is_hidden,
        is_public=quiz.is_public,
        status=quiz.status,
        request=quiz.request,
        created_at=quiz.created_at,
        creator=enrichment.profile_summary(creator),
    )


async def list_quizzes(
    session: AsyncSession,
    params: quiz_schema.QuizListParams,
) -> quiz_schema.QuizListResponse:
    """퀴즈 목록 조회 (작성자 보강, 카테고리 목록 포함)"""
    try:
        rows, total_count = await quiz_crud.list_quizzes(session, params)
        categories = await quiz_crud.get_quiz_categories(session)
    except SQLAlchemyError as e:
        logger.error(f"퀴즈 목록 조회 실패: {e.__class__.__name__}", exc_info=True)
        return quiz_schema.QuizListResponse(**empty_page(params, "Failed to fetch quizzes"))

    creators = await enrichment.profiles_by_id(session, (quiz.creator_id for quiz in rows))
    data = decode_rows(rows, lambda quiz: to_quiz_response(quiz, creators.value.get(quiz.creator_id)), "quizzes")
    return quiz_schema.QuizListResponse(**page_fields(params, data, total_count), categories=categories)


async def get_all_quizzes(session: AsyncSession) -> list[quiz_schema.QuizResponse]:
    """클라이언트 측 테이블용 퀴즈 일괄 조회 (실패 시 빈 목록)"""
    try:
        rows = await quiz_crud.get_active_quizzes(session, settings.bulk_fetch_limit)
    except SQLAlchemyError as e:
        logger.error(f"퀴즈 일괄 조회 실패: {e.__class__.__name__}", exc_info=True)
        return []
    creators = await enrichment.profiles_by_id(session, (quiz.creator_id for quiz in rows))
    return decode_rows(rows, lambda quiz: to_quiz_response(quiz, creators.value.get(quiz.creator_id)), "quizzes")


async def get_quiz_detail(session: AsyncSession, quiz_id: str) -> quiz_schema.QuizDetailResponse:
    """퀴즈 상세 조회 (없거나 휴지통에 있으면 QuizNotFoundError)"""
    try:
        quiz = await quiz_crud.get_quiz_by_id(session, quiz_id)
    except SQLAlchemyError as e:
        logger.error(f"퀴즈 상세 조회 실패: quiz_id={quiz_id}, {e.__class__.__name__}", exc_info=True)
        raise DataFetchError("quiz") from e
    if quiz is None:
        raise QuizNotFoundError(quiz_id)

    base = to_quiz_response(quiz, quiz.creator)
    try:
        questions = decode_list(quiz_schema.QuizQuestion, quiz.questions)
    except (ValidationError, ValueError) as e:
        logger.warning(f"퀴즈 문항 형식 오류: quiz_id={quiz_id}, error={e.__class__.__name__}")
        questions = []
    return quiz_schema.QuizDetailResponse(**base.model_dump(), questions=questions)


async def get_quiz_sessions(session: AsyncSession, quiz_id: str) -> list[quiz_schema.QuizSessionResponse]:
    """퀴즈를 사용한 게임 세션과 참가자 통계"""
    try:
        rows = await game_session_crud.get_sessions_by_quiz(session, quiz_id)
    except SQLAlchemyError as e:
        logger.error(f"퀴즈 세션 조회 실패: quiz_id={quiz_id}, {e.__class__.__name__}", exc_info=True)
        return []

    def build(row) -> quiz_schema.QuizSessionResponse:
        stats = aggregation.participant_stats(decode_list(Participant, row.participants))
        return quiz_schema.QuizSessionResponse(
            id=row.id,
            game_pin=row.game_pin,
            status=row.status or "waiting",
            application=row.application,
            created_at=row.created_at,
            started_at=row.started_at,
            ended_at=row.ended_at,
            participant_count=stats.count,
            avg_score=stats.avg_score,
            max_score=stats.max_score,
            duration_minutes=aggregation.session_duration(row.started_at, row.ended_at, row.total_time_minutes),
        )

    return decode_rows(rows, build, "game_sessions")


async def update_visibility(
    session: AsyncSession,
    quiz_id: str,
    request: quiz_schema.QuizVisibilityUpdateRequest,
) -> MutationResponse:
    """퀴즈 공개 여부 변경"""
    return await run_mutation(
        session,
        "update quiz visibility",
        lambda: common_crud.update_by_id(session, Quiz, quiz_id, {"is_public": request.is_public}, active_only=True),
        not_found="Quiz not found",
    )


async def block_quiz(session: AsyncSession, quiz_id: str) -> MutationResponse:
    """퀴즈 차단"""
    return await run_mutation(
        session,
        "block quiz",
        lambda: common_crud.update_by_id(session, Quiz, quiz_id, {"status": "block"}, active_only=True),
        not_found="Quiz not found",
    )


async def unblock_quiz(session: AsyncSession, quiz_id: str) -> MutationResponse:
    """퀴즈 차단 해제"""
    return await run_mutation(
        session,
        "unblock quiz",
        lambda: common_crud.update_by_id(session, Quiz, quiz_id, {"status": None}, active_only=True),
        not_found="Quiz not found",
    )


async def soft_delete_quiz(session: AsyncSession, quiz_id: str) -> MutationResponse:
    """퀴즈를 휴지통으로 이동"""
    return await run_mutation(
        session,
        "move quiz to trash",
        lambda: common_crud.soft_delete(session, Quiz, quiz_id),
        not_found="Quiz not found",
    )
