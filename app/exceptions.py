"""커스텀 예외 클래스 정의"""


class BaseAppError(Exception):
    """애플리케이션 기본 예외 클래스"""

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class QuizNotFoundError(BaseAppError):
    """퀴즈를 찾을 수 없을 때 발생하는 예외 (404)"""

    def __init__(self, quiz_id: str):
        super().__init__(f"Quiz not found: {quiz_id}", status_code=404)


class GameSessionNotFoundError(BaseAppError):
    """게임 세션을 찾을 수 없을 때 발생하는 예외 (404)"""

    def __init__(self, session_id: str):
        super().__init__(f"Game session not found: {session_id}", status_code=404)


class GroupNotFoundError(BaseAppError):
    """그룹을 찾을 수 없을 때 발생하는 예외 (404)"""

    def __init__(self, group_id: str):
        super().__init__(f"Group not found: {group_id}", status_code=404)


class ReportNotFoundError(BaseAppError):
    """신고를 찾을 수 없을 때 발생하는 예외 (404)"""

    def __init__(self, report_id: str):
        super().__init__(f"Report not found: {report_id}", status_code=404)


class ProfileNotFoundError(BaseAppError):
    """사용자 프로필을 찾을 수 없을 때 발생하는 예외 (404)"""

    def __init__(self, profile_id: str):
        super().__init__(f"Profile not found: {profile_id}", status_code=404)


class InvalidRequestError(BaseAppError):
    """잘못된 요청일 때 발생하는 예외 (400)"""

    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class ConfirmationMismatchError(BaseAppError):
    """확인 문구가 일치하지 않을 때 발생하는 예외 (400)"""

    def __init__(self, required: str):
        super().__init__(f'Type "{required}" to confirm this action', status_code=400)


class DataFetchError(BaseAppError):
    """저장소 조회 실패 (500, 내부 오류 내용은 응답에 넣지 않음)"""

    def __init__(self, resource: str):
        super().__init__(f"Failed to fetch {resource}", status_code=500)
