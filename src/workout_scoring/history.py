"""Read-only access to an athlete's past sessions.

The engine never stores history itself. Storage collaborators implement
`HistoryProvider`; the engine asks it for sessions inside two windows:
- the trend window (7-14 days ago) for volume/intensity comparison
- the frequency window (last 3 days) for the overtraining warning

The lookup is best effort: a failing provider degrades to empty history.
"""

import inspect
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Awaitable, Dict, List, Optional, Sequence, Tuple, Union

from .exceptions import HistoryUnavailableError
from .models.report import WorkoutReport
from .scoring.common import round_half_up

logger = logging.getLogger(__name__)

TREND_WINDOW_START_DAYS = 14
TREND_WINDOW_END_DAYS = 7
FREQUENCY_WINDOW_DAYS = 3
AVERAGE_SCORES_DAYS = 30


@dataclass(frozen=True)
class SessionSummary:
    """What history keeps of one analyzed session."""
    athlete_id: str
    logged_at: datetime
    total_volume_kg: float = 0
    avg_rpe: float = 5.0
    intensity_score: Optional[int] = None
    work_capacity_score: Optional[int] = None
    athletic_quality_score: Optional[int] = None
    position_relevance_score: Optional[int] = None

    @classmethod
    def from_report(cls, athlete_id: str, report: WorkoutReport, logged_at: datetime) -> "SessionSummary":
        return cls(
            athlete_id=athlete_id,
            logged_at=logged_at,
            total_volume_kg=report.total_volume_kg,
            avg_rpe=report.avg_rpe,
            intensity_score=report.intensity_score,
            work_capacity_score=report.work_capacity_score,
            athletic_quality_score=report.athletic_quality_score,
            position_relevance_score=report.position_relevance_score,
        )


@dataclass(frozen=True)
class HistoryWindow:
    """Inclusive datetime range."""
    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


def trend_window(now: datetime) -> HistoryWindow:
    """Prior period compared against for trends: 14 to 7 days ago."""
    return HistoryWindow(
        start=now - timedelta(days=TREND_WINDOW_START_DAYS),
        end=now - timedelta(days=TREND_WINDOW_END_DAYS),
    )


def frequency_window(now: datetime) -> HistoryWindow:
    """Trailing window checked for too-frequent training."""
    return HistoryWindow(start=now - timedelta(days=FREQUENCY_WINDOW_DAYS), end=now)


SessionList = List[SessionSummary]


class HistoryProvider(ABC):
    """
    Abstract read-only source of past sessions.

    Implementations may be synchronous or return an awaitable; the async
    report generator awaits it, the synchronous engine requires a list.
    """

    @abstractmethod
    def recent_sessions(
        self,
        athlete_id: str,
        window: HistoryWindow,
    ) -> Union[SessionList, Awaitable[SessionList]]:
        """
        Sessions logged by the athlete inside the window.

        Args:
            athlete_id: Athlete identifier
            window: Inclusive time range

        Returns:
            Matching sessions, empty when there are none
        """
        pass


class EmptyHistoryProvider(HistoryProvider):
    """Provider for callers without storage: no athlete has history."""

    def recent_sessions(self, athlete_id: str, window: HistoryWindow) -> SessionList:
        return []


class InMemoryHistoryProvider(HistoryProvider):
    """Process-local history, mostly for tests and single-process tools."""

    def __init__(self, sessions: Optional[Sequence[SessionSummary]] = None) -> None:
        self._sessions: Dict[str, SessionList] = {}
        for session in sessions or []:
            self.add(session)

    def add(self, session: SessionSummary) -> None:
        self._sessions.setdefault(session.athlete_id, []).append(session)

    def record(self, athlete_id: str, report: WorkoutReport, logged_at: datetime) -> SessionSummary:
        """Keep a finished report so future analyses can compare against it."""
        summary = SessionSummary.from_report(athlete_id, report, logged_at)
        self.add(summary)
        return summary

    def recent_sessions(self, athlete_id: str, window: HistoryWindow) -> SessionList:
        sessions = self._sessions.get(athlete_id, [])
        return sorted(
            (s for s in sessions if window.contains(s.logged_at)),
            key=lambda s: s.logged_at,
        )


# ============================================================================
# Snapshot fetching
# ============================================================================

@dataclass(frozen=True)
class HistorySnapshot:
    """History already fetched for one analysis."""
    prior_sessions: Tuple[SessionSummary, ...] = ()
    recent_sessions: Tuple[SessionSummary, ...] = ()

    @property
    def recent_session_count(self) -> int:
        return len(self.recent_sessions)


EMPTY_HISTORY = HistorySnapshot()


def _as_list(result: Optional[SessionList]) -> Tuple[SessionSummary, ...]:
    return tuple(result or [])


def fetch_history(provider: Optional[HistoryProvider], athlete_id: str, now: datetime) -> HistorySnapshot:
    """
    Fetch both windows from a synchronous provider.

    An asynchronous provider cannot be awaited here and yields empty history.
    """
    if provider is None:
        return EMPTY_HISTORY

    results = []
    for window in (trend_window(now), frequency_window(now)):
        try:
            result = provider.recent_sessions(athlete_id, window)
        except Exception as e:
            logger.warning(f"History lookup failed for athlete {athlete_id}, using empty history: {e}")
            return EMPTY_HISTORY
        if inspect.isawaitable(result):
            if inspect.iscoroutine(result):
                result.close()
            logger.warning(
                f"History provider for athlete {athlete_id} is asynchronous; "
                "synchronous analysis uses empty history (await it via LocalReportGenerator)"
            )
            return EMPTY_HISTORY
        results.append(_as_list(result))

    return HistorySnapshot(prior_sessions=results[0], recent_sessions=results[1])


async def fetch_history_async(
    provider: Optional[HistoryProvider],
    athlete_id: str,
    now: datetime,
) -> HistorySnapshot:
    """Fetch both windows from a synchronous or asynchronous provider."""
    if provider is None:
        return EMPTY_HISTORY

    results = []
    for window in (trend_window(now), frequency_window(now)):
        try:
            result = provider.recent_sessions(athlete_id, window)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            logger.warning(f"History lookup failed for athlete {athlete_id}, using empty history: {e}")
            return EMPTY_HISTORY
        results.append(_as_list(result))

    return HistorySnapshot(prior_sessions=results[0], recent_sessions=results[1])


# ============================================================================
# Trends and averages
# ============================================================================

def percent_change(current: float, baseline: float) -> Optional[float]:
    """Percentage change from baseline, None when the baseline is zero."""
    if not baseline:
        return None
    return round_half_up((current - baseline) / baseline * 100, 1)


def compare_trends(
    current_volume: float,
    current_rpe: float,
    prior_sessions: Sequence[SessionSummary],
) -> Tuple[Optional[float], Optional[float]]:
    """
    Compare this session with the prior period's average session.

    Returns:
        (volume_change_pct, intensity_change_pct), where intensity is
        measured by average RPE; both None without prior sessions
    """
    if not prior_sessions:
        return None, None

    count = len(prior_sessions)
    avg_volume = sum(s.total_volume_kg for s in prior_sessions) / count
    avg_rpe = sum(s.avg_rpe for s in prior_sessions) / count
    return percent_change(current_volume, avg_volume), percent_change(current_rpe, avg_rpe)


@dataclass(frozen=True)
class AverageScores:
    intensity: int
    work_capacity: int
    athletic_quality: int
    position_relevance: int

    def to_dict(self) -> dict:
        return {
            "intensity": self.intensity,
            "work_capacity": self.work_capacity,
            "athletic_quality": self.athletic_quality,
            "position_relevance": self.position_relevance,
        }


def _mean(values: List[Optional[int]]) -> int:
    present = [v for v in values if v is not None]
    if not present:
        return 0
    return int(round_half_up(sum(present) / len(present)))


def average_scores(sessions: Sequence[SessionSummary]) -> Optional[AverageScores]:
    """Mean of each sub-score over the sessions, None when there are none."""
    if not sessions:
        return None
    return AverageScores(
        intensity=_mean([s.intensity_score for s in sessions]),
        work_capacity=_mean([s.work_capacity_score for s in sessions]),
        athletic_quality=_mean([s.athletic_quality_score for s in sessions]),
        position_relevance=_mean([s.position_relevance_score for s in sessions]),
    )


def recent_average_scores(
    provider: HistoryProvider,
    athlete_id: str,
    now: Optional[datetime] = None,
    days: int = AVERAGE_SCORES_DAYS,
) -> Optional[AverageScores]:
    """Average sub-scores over the athlete's last `days` days."""
    now = now or datetime.now()
    window = HistoryWindow(start=now - timedelta(days=days), end=now)
    result = provider.recent_sessions(athlete_id, window)
    if inspect.isawaitable(result):
        if inspect.iscoroutine(result):
            result.close()
        raise HistoryUnavailableError(
            "History provider is asynchronous; await its sessions and call average_scores",
            athlete_id=athlete_id,
        )
    return average_scores(result or [])
