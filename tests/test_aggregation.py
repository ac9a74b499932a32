"""집계 함수 테스트"""
from datetime import datetime, timedelta, timezone

from app.schemas.game_session import Participant
from app.services import aggregation

NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)


def test_participant_stats():
    """평균은 반올림, 최고 점수는 최댓값"""
    participants = [Participant(score=80), Participant(score=60), Participant(score=100)]

    stats = aggregation.participant_stats(participants)

    assert stats.count == 3
    assert stats.avg_score == 80
    assert stats.max_score == 100


def test_participant_stats_missing_score_counts_as_zero():
    """점수 없는 참가자는 0점으로 계산"""
    stats = aggregation.participant_stats([Participant(score=None), Participant(score=5)])
    assert stats.avg_score == 3  # 2.5 → 3
    assert stats.max_score == 5


def test_participant_stats_empty():
    """참가자가 없으면 모두 0"""
    stats = aggregation.participant_stats([])
    assert (stats.count, stats.avg_score, stats.max_score) == (0, 0, 0)


def test_session_duration_short_session_is_one_minute():
    """30초 진행한 세션은 1분"""
    started = NOW
    assert aggregation.session_duration(started, started + timedelta(seconds=30)) == 1


def test_session_duration_rounds_minutes():
    """시작/종료 시각 차이를 분 단위로 반올림"""
    started = NOW
    assert aggregation.session_duration(started, started + timedelta(minutes=12, seconds=31)) == 13
    assert aggregation.session_duration(started, started + timedelta(minutes=12, seconds=29)) == 12


def test_session_duration_prefers_stored_minutes():
    """저장된 total_time_minutes 우선"""
    assert aggregation.session_duration(NOW, NOW + timedelta(minutes=3), total_time_minutes=25) == 25


def test_session_duration_missing_timestamp():
    """시각이 없으면 진행 시간 없음"""
    assert aggregation.session_duration(NOW, None) is None
    assert aggregation.session_duration(None, NOW) is None


def test_session_duration_naive_datetimes_are_utc():
    """타임존 없는 시각은 UTC로 간주"""
    naive_start = datetime(2026, 10, 17, 12, 0)
    assert aggregation.session_duration(naive_start, NOW + timedelta(minutes=5)) == 5


def test_days_until_purge_counts_down():
    """휴지통 남은 일수 계산"""
    deleted_at = NOW - timedelta(days=2, hours=1)
    assert aggregation.days_until_purge(deleted_at, NOW) == 5


def test_days_until_purge_never_negative():
    """보관 기간이 지나도 음수가 되지 않음"""
    assert aggregation.days_until_purge(NOW - timedelta(days=30), NOW) == 0


def test_days_until_purge_non_increasing_over_time():
    """시간이 지나면 남은 일수는 늘지 않음"""
    deleted_at = NOW - timedelta(days=1)
    remaining = [
        aggregation.days_until_purge(deleted_at, NOW + timedelta(hours=hours))
        for hours in range(0, 24 * 10, 7)
    ]
    assert all(later <= earlier for earlier, later in zip(remaining, remaining[1:]))
    assert min(remaining) == 0


def test_top_n_keeps_insertion_order_for_ties():
    """동률은 입력 순서 유지"""
    counts = {"quizizz": 2, "kahoot": 5, "wayground": 2, "other": 1}
    assert aggregation.top_n(counts, 3) == [("kahoot", 5), ("quizizz", 2), ("wayground", 2)]


def test_total_pages():
    """전체 페이지 수 계산"""
    assert aggregation.total_pages(0, 15) == 0
    assert aggregation.total_pages(20, 15) == 2
    assert aggregation.total_pages(15, 15) == 1


def test_waiting_minutes():
    """대기 시간(분) 계산"""
    assert aggregation.waiting_minutes(NOW - timedelta(minutes=90), NOW) == 90


def test_leaderboard_orders_by_score_then_duration():
    """동점이면 빨리 끝낸 참가자가 먼저, 소요 시간이 없으면 뒤로"""
    participants = [
        Participant(nickname="slow", score=90, started=NOW, ended=NOW + timedelta(seconds=50)),
        Participant(nickname="unknown", score=90),
        Participant(nickname="fast", score=90, started=NOW, ended=NOW + timedelta(seconds=20)),
        Participant(nickname="top", score=100),
    ]

    board = aggregation.leaderboard(participants)

    assert [entry.nickname for entry in board] == ["top", "fast", "slow", "unknown"]
    assert [entry.rank for entry in board] == [1, 2, 3, 4]
    assert board[1].duration_ms == 20000


def test_participant_stats_fractional_scores():
    """소수 점수: 평균 72.75 → 73, 최고 점수 85.5 유지"""
    stats = aggregation.participant_stats([Participant(score=85.5), Participant(score=60)])
    assert stats.avg_score == 73
    assert stats.max_score == 85.5
    assert isinstance(Participant(score=60).score, int)
