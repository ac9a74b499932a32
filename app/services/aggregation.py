"""조회 결과에 대한 순수 집계 함수 (I/O 없음)"""
import math
from collections.abc import Hashable, Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import TypeVar

from app.schemas.game_session import LeaderboardEntry, Participant

K = TypeVar("K", bound=Hashable)

DEFAULT_RETENTION_DAYS = 7


@dataclass(frozen=True)
class ParticipantStats:
    count: int
    avg_score: int
    max_score: int | float


def as_utc(value: datetime) -> datetime:
    """naive datetime은 UTC로 간주"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def js_round(value: float) -> int:
    """0.5는 올림 (Math.round와 동일, 파이썬 round의 banker's rounding 회피)"""
    return math.floor(value + 0.5)


def participant_stats(participants: Iterable[Participant]) -> ParticipantStats:
    """참가자 수, 평균 점수, 최고 점수 (점수 없음은 0으로 계산)"""
    scores = [p.score or 0 for p in participants]
    if not scores:
        return ParticipantStats(count=0, avg_score=0, max_score=0)
    return ParticipantStats(
        count=len(scores),
        avg_score=js_round(sum(scores) / len(scores)),
        max_score=max(scores),
    )


def session_duration(
    started_at: datetime | None,
    ended_at: datetime | None,
    total_time_minutes: int | None = None,
) -> int | None:
    """세션 진행 시간(분)

    명시된 total_time_minutes가 우선이며, 없으면 시작/종료 시각 차이를 반올림한다.
    계산 결과가 0분이면 1분으로 보정한다.
    """
    if total_time_minutes:
        return total_time_minutes
    if started_at is None or ended_at is None:
        return None
    elapsed = (as_utc(ended_at) - as_utc(started_at)).total_seconds()
    minutes = js_round(elapsed / 60)
    if minutes == 0:
        minutes = 1
    return minutes


def waiting_minutes(created_at: datetime, now: datetime) -> int:
    """생성 이후 대기 시간(분)"""
    return js_round((as_utc(now) - as_utc(created_at)).total_seconds() / 60)


def top_n(counts: Mapping[K, int], n: int) -> list[tuple[K, int]]:
    """개수 내림차순 상위 n개 (동률은 입력 순서 유지)"""
    return sorted(counts.items(), key=lambda item: item[1], reverse=True)[:n]


def days_until_purge(
    deleted_at: datetime,
    now: datetime | None = None,
    retention_days: int = DEFAULT_RETENTION_DAYS,
) -> int:
    """휴지통 항목이 영구 삭제되기까지 남은 일수 (음수 없음)"""
    now = as_utc(now) if now is not None else datetime.now(timezone.utc)
    purge_at = as_utc(deleted_at) + timedelta(days=retention_days)
    remaining = (purge_at - now) / timedelta(days=1)
    return max(0, math.ceil(remaining))


def total_pages(total_count: int, page_size: int) -> int:
    return math.ceil(total_count / page_size) if total_count > 0 else 0


def _participant_duration_ms(participant: Participant) -> int | None:
    if participant.started is None or participant.ended is None:
        return None
    delta = as_utc(participant.ended) - as_utc(participant.started)
    return int(delta.total_seconds() * 1000)


def leaderboard(participants: Iterable[Participant]) -> list[LeaderboardEntry]:
    """점수 내림차순, 동점이면 소요 시간이 짧은 순 (소요 시간 없음은 뒤로)"""
    entries = [(p, _participant_duration_ms(p)) for p in participants]
    entries.sort(
        key=lambda item: (
            -(item[0].score or 0),
            item[1] is None or item[1] == 0,
            item[1] or 0,
        )
    )
    return [
        LeaderboardEntry(**participant.model_dump(), rank=rank, duration_ms=duration_ms)
        for rank, (participant, duration_ms) in enumerate(entries, start=1)
    ]
