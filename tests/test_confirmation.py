"""확인 문구 게이트 테스트"""
import pytest
from unittest.mock import AsyncMock

from app.exceptions import ConfirmationMismatchError
from app.schemas.common import MutationResponse
from app.services.confirmation import (
    ConfirmAction,
    ConfirmationDialog,
    DialogState,
    is_confirmed,
    require_confirmation,
)


@pytest.mark.parametrize("typed", ["Move to Trash ", "move to trash", " Move to Trash", "Move  to Trash", ""])
def test_is_confirmed_requires_exact_text(typed):
    """확인 문구는 정확히 일치해야 함"""
    assert is_confirmed("Move to Trash", typed) is False


def test_is_confirmed_exact_match():
    """정확한 문구는 확인됨"""
    assert is_confirmed("Delete Permanently", "Delete Permanently") is True


def test_non_destructive_action_needs_no_text():
    """되돌릴 수 있는 작업은 문구 불필요"""
    assert is_confirmed(None, "") is True


def test_require_confirmation_raises_with_required_text():
    """문구가 틀리면 필요한 문구와 함께 예외"""
    with pytest.raises(ConfirmationMismatchError) as exc_info:
        require_confirmation(ConfirmAction.BLOCK, "block")

    assert exc_info.value.status_code == 400
    assert '"Block"' in exc_info.value.message


def test_dialog_commit_enabled_only_after_exact_text():
    """정확한 문구 입력 후에만 실행 가능"""
    dialog = ConfirmationDialog(ConfirmAction.SOFT_DELETE)
    dialog.open("quiz-1")
    assert dialog.state is DialogState.CONFIRMING
    assert dialog.can_commit is False

    dialog.type("Move to Trash ")
    assert dialog.can_commit is False

    dialog.type("Move to Trash")
    assert dialog.can_commit is True


@pytest.mark.asyncio
async def test_dialog_commit_runs_mutation_and_refetches():
    """실행 시 변경 후 목록 재조회"""
    on_success = AsyncMock()
    mutation = AsyncMock(return_value=MutationResponse())
    dialog = ConfirmationDialog(ConfirmAction.PERMANENT_DELETE, on_success=on_success)
    dialog.open("quiz-1")
    dialog.type("Delete Permanently")

    result = await dialog.commit(mutation)

    assert result.error is None
    mutation.assert_awaited_once_with("quiz-1")
    on_success.assert_awaited_once()
    assert dialog.state is DialogState.IDLE


@pytest.mark.asyncio
async def test_dialog_commit_failure_does_not_refetch():
    """실패 시 재조회하지 않음"""
    on_success = AsyncMock()
    dialog = ConfirmationDialog(ConfirmAction.BLOCK, on_success=on_success)
    dialog.open("user-1")
    dialog.type("Block")

    result = await dialog.commit(AsyncMock(return_value=MutationResponse(error="Failed to block user")))

    assert result.error == "Failed to block user"
    on_success.assert_not_awaited()
    assert dialog.state is DialogState.IDLE


@pytest.mark.asyncio
async def test_dialog_commit_without_confirmation_is_noop():
    """확인 없이 실행하면 아무 일도 없음"""
    mutation = AsyncMock()
    dialog = ConfirmationDialog(ConfirmAction.BLOCK)
    dialog.open("user-1")
    dialog.type("Blok")

    assert await dialog.commit(mutation) is None
    mutation.assert_not_awaited()
    assert dialog.state is DialogState.CONFIRMING
