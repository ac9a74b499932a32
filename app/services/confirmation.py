"""파괴적 작업의 확인 문구 입력 게이트와 확인 대화상자 상태"""
import logging
from collections.abc import Awaitable, Callable
from enum import Enum

from app.exceptions import ConfirmationMismatchError
from app.schemas.common import MutationResponse

logger = logging.getLogger(__name__)


class ConfirmAction(str, Enum):
    SOFT_DELETE = "soft_delete"
    PERMANENT_DELETE = "permanent_delete"
    BLOCK = "block"
    VISIBILITY = "visibility"
    ROLE_CHANGE = "role_change"


# 입력해야 하는 확인 문구 (None이면 문구 입력 없이 확인만)
CONFIRMATION_PHRASES: dict[ConfirmAction, str | None] = {
    ConfirmAction.SOFT_DELETE: "Move to Trash",
    ConfirmAction.PERMANENT_DELETE: "Delete Permanently",
    ConfirmAction.BLOCK: "Block",
    ConfirmAction.VISIBILITY: None,
    ConfirmAction.ROLE_CHANGE: None,
}


def is_confirmed(required: str | None, typed: str | None) -> bool:
    """입력 문구가 요구 문구와 정확히 같은지 (대소문자 구분, 공백 제거 없음)"""
    if required is None:
        return True
    return typed == required


def require_confirmation(action: ConfirmAction, typed: str | None) -> None:
    """확인 문구가 틀리면 ConfirmationMismatchError"""
    required = CONFIRMATION_PHRASES[action]
    if not is_confirmed(required, typed):
        raise ConfirmationMismatchError(required)


class DialogState(str, Enum):
    IDLE = "idle"
    CONFIRMING = "confirming"
    COMMITTING = "committing"


Mutation = Callable[[str], Awaitable[MutationResponse]]
Refetch = Callable[[], Awaitable[object]]


class ConfirmationDialog:
    """idle → confirming → (문구 일치) → committing → idle"""

    def __init__(self, action: ConfirmAction, on_success: Refetch | None = None):
        self.action = action
        self.required_text = CONFIRMATION_PHRASES[action]
        self.on_success = on_success
        self.state = DialogState.IDLE
        self.target_id: str | None = None
        self.typed_text = ""

    def open(self, target_id: str) -> None:
        self.target_id = target_id
        self.typed_text = ""
        self.state = DialogState.CONFIRMING

    def type(self, text: str) -> None:
        if self.state is DialogState.CONFIRMING:
            self.typed_text = text

    def cancel(self) -> None:
        self.target_id = None
        self.typed_text = ""
        self.state = DialogState.IDLE

    @property
    def can_commit(self) -> bool:
        return self.state is DialogState.CONFIRMING and is_confirmed(self.required_text, self.typed_text)

    async def commit(self, mutation: Mutation) -> MutationResponse | None:
        """확인 조건을 만족하면 변경 작업 실행, 성공 시 재조회 (None이면 실행 안 함)"""
        if not self.can_commit or self.target_id is None:
            return None
        self.state = DialogState.COMMITTING
        try:
            result = await mutation(self.target_id)
        finally:
            self.cancel()
        if result.error:
            logger.warning(f"{self.action.value} 실패: {result.error}")
        elif self.on_success is not None:
            await self.on_success()
        return result
