"""
Report generators.

A generator turns a `ReportRequest` into a `ReportOutcome`. The local one
wraps the rule-based engine, the remote one wraps `RemoteScorer`, and the
fallback generator tries one and falls back to the other:

    generator = FallbackReportGenerator(
        primary=RemoteReportGenerator(RemoteScorer()),
        fallback=LocalReportGenerator(history),
    )
    outcome = await generator.generate(request)
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .engine import build_report
from .history import HistoryProvider, fetch_history_async
from .models.report import WorkoutReport
from .models.request import ReportRequest
from .remote_scorer import RemoteFailure, RemoteScorer

logger = logging.getLogger(__name__)

__all__ = [
    "FallbackReportGenerator",
    "LocalReportGenerator",
    "RemoteReportGenerator",
    "ReportGenerator",
    "ReportOutcome",
    "ReportRequest",
]


@dataclass(frozen=True)
class ReportOutcome:
    """Result of one generation attempt."""
    success: bool
    report: Optional[WorkoutReport] = None
    failure: Optional[RemoteFailure] = None
    error: Optional[str] = None


class ReportGenerator(ABC):
    """Abstract report generator."""

    @abstractmethod
    async def generate(self, request: ReportRequest) -> ReportOutcome:
        """
        Generate a report for the request.

        Failures are returned in the outcome, not raised.
        """
        pass


class LocalReportGenerator(ReportGenerator):
    """Rule-based generator; always succeeds."""

    def __init__(self, history: Optional[HistoryProvider] = None):
        self.history = history

    async def generate(self, request: ReportRequest) -> ReportOutcome:
        snapshot = await fetch_history_async(
            self.history,
            request.athlete_id,
            request.logged_at or datetime.now(),
        )
        report = build_report(request.entries, request.duration_min, request.position, snapshot)
        return ReportOutcome(success=True, report=report)


class RemoteReportGenerator(ReportGenerator):
    """Generator backed by the remote scorer."""

    def __init__(self, scorer: Optional[RemoteScorer] = None):
        self.scorer = scorer or RemoteScorer()

    async def generate(self, request: ReportRequest) -> ReportOutcome:
        result = await self.scorer.score(request)
        return ReportOutcome(
            success=result.success,
            report=result.report,
            failure=result.failure,
            error=result.error,
        )


class FallbackReportGenerator(ReportGenerator):
    """Use the primary generator, and the fallback whenever it fails."""

    def __init__(self, primary: ReportGenerator, fallback: ReportGenerator):
        self.primary = primary
        self.fallback = fallback

    async def generate(self, request: ReportRequest) -> ReportOutcome:
        outcome = await self.primary.generate(request)
        if outcome.success:
            return outcome

        failure = outcome.failure.value if outcome.failure else "unknown"
        logger.warning(
            f"{type(self.primary).__name__} failed for athlete {request.athlete_id} "
            f"({failure}): {outcome.error}. Falling back to {type(self.fallback).__name__}"
        )
        return await self.fallback.generate(request)
