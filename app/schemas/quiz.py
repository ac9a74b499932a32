from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, model_validator

from app.schemas.common import ListParams, Page, ProfileSummary


class QuizOption(BaseModel):
    """퀴즈 선택지"""
    id: str | None = None
    text: str
    is_correct: bool = False


class QuizQuestion(BaseModel):
    """퀴즈 문항 (레거시 키 이름 혼용을 정규화)"""
    question: str = "-"
    image_url: str | None = None
    options: list[QuizOption] = Field(default_factory=list)
    correct_answer: int | str | None = None

    @model_validator(mode="before")
    @classmethod
    def normalize_keys(cls, data: Any) -> Any:
        """question/text, options/answers, correct_answer/correctAnswer/correct 통합"""
        if not isinstance(data, dict):
            return data
        raw_options = data.get("options") or data.get("answers") or []
        options = []
        for index, option in enumerate(raw_options):
            if isinstance(option, str):
                options.append({"id": str(index), "text": option})
            elif isinstance(option, dict):
                options.append({
                    "id": option.get("id"),
                    "text": option.get("answer") or option.get("text") or "-",
                })
        correct = data.get("correct_answer")
        if correct is None:
            correct = data.get("correctAnswer", data.get("correct"))
        return {
            "question": data.get("question") or data.get("text") or "-",
            "image_url": data.get("image") or data.get("image_url") or data.get("img"),
            "options": options,
            "correct_answer": correct,
        }

    def is_correct(self, option_index: int) -> bool:
        """선택지가 정답인지 (인덱스 또는 선택지 id 비교)"""
        if self.correct_answer is None:
            return False
        if self.correct_answer == option_index:
            return True
        option = self.options[option_index] if option_index < len(self.options) else None
        return option is not None and option.id is not None and str(self.correct_answer) == option.id

    @model_validator(mode="after")
    def mark_correct_options(self) -> "QuizQuestion":
        for index, option in enumerate(self.options):
            option.is_correct = self.is_correct(index)
        return self


class QuizListParams(ListParams):
    """퀴즈 목록 필터"""
    category: str = "all"
    visibility: str = "all"  # 'public', 'private' ('publik' 허용)
    status: str = "all"  # 'active', 'block'


class QuizResponse(BaseModel):
    """퀴즈 목록 행 응답 스키마"""
    id: str
    title: str
    description: str | None = None
    category: str | None = None
    language: str | None = None
    question_count: int = 0
    is_hidden: bool | None = None
    is_public: bool | None = None
    status: str | None = None
    request: bool | None = None
    created_at: datetime | None = None
    creator: ProfileSummary | None = None


class QuizDetailResponse(QuizResponse):
    """퀴즈 상세 응답 스키마"""
    questions: list[QuizQuestion] = Field(default_factory=list)


class QuizListResponse(Page[QuizResponse]):
    """퀴즈 목록 응답 스키마 (카테고리 목록 포함)"""
    categories: list[str] = Field(default_factory=list)


class QuizVisibilityUpdateRequest(BaseModel):
    """공개 여부 변경 요청 스키마"""
    is_public: bool
    note: str | None = None


class QuizSessionResponse(BaseModel):
    """퀴즈를 사용한 게임 세션 요약"""
    id: str
    game_pin: str
    status: str
    application: str | None = None
    created_at: datetime | None = None
    started_at: datetime | None = None
    ended_at: datetime | None = None
    participant_count: int = 0
    avg_score: int = 0
    max_score: int | float = 0
    duration_minutes: int | None = None
