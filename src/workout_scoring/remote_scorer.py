"""
Remote workout scorer using LangGraph.

Sends the session to a text-generation model and turns its JSON reply
into the same `WorkoutReport` the rule-based engine produces:

    prepare_request -> generate_report -> parse_response -> build_report

A failed step routes to handle_error instead of the next step.

Nothing raises past `score()`: every failure comes back as a
`RemoteScoreResult` carrying a `RemoteFailure` so the caller can fall back
to the local engine.
"""

import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, TypedDict

from langgraph.graph import END, StateGraph
from pydantic import ValidationError as PydanticValidationError

from .config import Settings, get_settings
from .exceptions import (
    LLMAuthenticationError,
    LLMError,
    LLMRateLimitError,
    LLMResponseInvalidError,
)
from .llm.prompts import (
    COACH_FEEDBACK_SYSTEM,
    COACH_FEEDBACK_USER,
    REPORT_GENERATION_SYSTEM,
    REPORT_GENERATION_USER,
    SEASON_PHASE_MULTIPLIERS,
    TEAM_LEVEL_MULTIPLIERS,
    dose_thresholds,
    format_multiplier_table,
)
from .llm.providers import LLMClient, get_llm_client
from .models.exercise import LoggedExercise
from .models.remote import RemoteExercise, RemoteReportRequest, RemoteReportResponse
from .models.report import RecoveryDemand, ReportSource, SessionMetrics, WorkoutReport
from .models.request import ReportRequest
from .models.team import SeasonPhase, TeamLevel
from .scoring.aggregation import aggregate_metrics
from .scoring.common import clamp, round_half_up, to_score
from .scoring.focus import calculate_athletic_focus
from .scoring.recovery import estimate_recovery
from .scoring.validation import DoseAssessment, assess_minimum_dose
from .utils.log_sanitizer import install_log_sanitizer

logger = logging.getLogger(__name__)
install_log_sanitizer(__name__)

# Score ceilings for a session below the minimum effective dose
INSUFFICIENT_CAPS = {
    "intensity_score": 35,
    "work_capacity_score": 25,
    "athletic_quality_score": 40,
    "position_relevance_score": 40,
}
MAX_REST_HOURS = 72


class RemoteFailure(str, Enum):
    """Why a remote request produced no report."""
    AUTH_INVALID = "auth-invalid"
    RATE_LIMITED = "rate-limited"
    MALFORMED_RESPONSE = "malformed-response"
    NETWORK_ERROR = "network-error"


def classify_failure(error: Exception) -> RemoteFailure:
    """Map an exception to the failure kind reported to callers."""
    if isinstance(error, LLMAuthenticationError):
        return RemoteFailure.AUTH_INVALID
    if isinstance(error, LLMRateLimitError):
        return RemoteFailure.RATE_LIMITED
    if isinstance(error, (LLMResponseInvalidError, PydanticValidationError)):
        return RemoteFailure.MALFORMED_RESPONSE
    # Timeouts, outages and anything else on the wire
    return RemoteFailure.NETWORK_ERROR


@dataclass(frozen=True)
class RemoteScoreResult:
    success: bool
    report: Optional[WorkoutReport] = None
    failure: Optional[RemoteFailure] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class CoachFeedbackResult:
    success: bool
    insight: Optional[str] = None
    failure: Optional[RemoteFailure] = None
    error: Optional[str] = None


# ============================================================================
# State Definition
# ============================================================================

class ScoringState(TypedDict):
    """State for the scoring workflow."""
    # Input
    request: ReportRequest

    # Processing state
    request_id: str
    status: str
    error: Optional[str]
    failure: Optional[str]

    # Set by prepare_request
    metrics: Optional[SessionMetrics]
    dose: Optional[DoseAssessment]
    system_prompt: Optional[str]
    user_prompt: Optional[str]

    # LLM output
    raw_response: Optional[Dict[str, Any]]
    parsed_response: Optional[RemoteReportResponse]

    # Final result
    report: Optional[WorkoutReport]


def _failed(state: ScoringState, error: Exception, stage: str) -> Dict[str, Any]:
    return {
        **state,
        "error": f"{stage}: {error}",
        "failure": classify_failure(error).value,
        "status": "failed",
    }


def build_wire_request(
    request: ReportRequest,
    metrics: SessionMetrics,
    season_phase: SeasonPhase,
    team_level: TeamLevel,
) -> RemoteReportRequest:
    """Describe the session in the remote scorer's request schema."""
    return RemoteReportRequest(
        athlete_name=request.athlete_name,
        position=request.position,
        body_weight_kg=request.body_weight_kg,
        height_cm=request.height_cm,
        season_phase=season_phase,
        team_level=team_level,
        title=request.title,
        exercises=[_wire_exercise(entry) for entry in request.entries],
        total_sets=metrics.sets_completed,
        sets_planned=metrics.sets_planned,
        total_reps=metrics.total_reps,
        total_volume_kg=metrics.total_volume_kg,
        total_distance_km=metrics.total_distance_km or 0.0,
        avg_rpe=metrics.avg_rpe,
        duration_min=request.duration_min,
        notes=request.notes,
    )


def _wire_exercise(entry: LoggedExercise) -> RemoteExercise:
    return RemoteExercise(
        name=entry.name,
        category=entry.category.value,
        sets_summary=entry.sets_summary(),
        rpe=entry.rpe,
        notes=entry.notes,
    )


def render_report_prompt(wire: RemoteReportRequest) -> str:
    """Fill the report-generation template from a wire request."""
    return REPORT_GENERATION_USER.format(
        athlete_name=wire.athlete_name,
        position=wire.position.value,
        body_weight=f"{wire.body_weight_kg:g}" if wire.body_weight_kg is not None else "Unknown",
        height=f"{wire.height_cm:g}" if wire.height_cm is not None else "Unknown",
        season_phase=wire.season_phase.value,
        team_level=wire.team_level.value,
        title=wire.title,
        duration_min=wire.duration_min,
        exercise_list="\n".join(e.to_prompt_line() for e in wire.exercises) or "- none logged",
        total_sets=wire.total_sets,
        sets_planned=wire.sets_planned,
        total_reps=wire.total_reps,
        total_volume_kg=wire.total_volume_kg,
        total_distance_km=wire.total_distance_km,
        avg_rpe=wire.avg_rpe,
        notes_line=f"\n- Notes: {wire.notes}" if wire.notes else "",
        season_table=format_multiplier_table("Phase", SEASON_PHASE_MULTIPLIERS),
        team_table=format_multiplier_table("Level", TEAM_LEVEL_MULTIPLIERS),
        **dose_thresholds(),
    )


def _percent(value: Optional[float], fallback: int) -> int:
    return fallback if value is None else to_score(value)


def _intent(value: Optional[str]) -> Optional[str]:
    if not value or value.strip().lower() == "none":
        return None
    return value.strip().lower()


def assemble_remote_report(
    parsed: RemoteReportResponse,
    request: ReportRequest,
    metrics: SessionMetrics,
    dose: DoseAssessment,
) -> WorkoutReport:
    """
    Turn a validated reply into a report.

    Session totals come from the local aggregation, not from the reply's
    echo of them. A session is insufficient when either the local
    minimum-dose check or the reply says so; insufficient sessions get
    capped scores, no strengths, the dose reasons as warnings and no rest.
    """
    session_valid = dose.valid and parsed.session_valid is not False

    scores = {
        "intensity_score": to_score(parsed.intensity_score),
        "work_capacity_score": to_score(parsed.work_capacity_score),
        "athletic_quality_score": to_score(parsed.athletic_quality_score),
        "position_relevance_score": to_score(parsed.position_relevance_score),
    }

    focus = calculate_athletic_focus(request.entries)
    strengths = list(parsed.strengths)
    warnings = list(parsed.warnings)

    if session_valid:
        local = estimate_recovery(scores["intensity_score"], metrics.total_volume_kg, request.duration_min)
        demand = _recovery_demand(parsed.recovery_demand) or local.demand
        if parsed.recommended_rest_hours is None:
            rest_hours = local.rest_hours
        else:
            rest_hours = int(clamp(round_half_up(parsed.recommended_rest_hours), 0, MAX_REST_HOURS))
    else:
        scores = {name: min(value, INSUFFICIENT_CAPS[name]) for name, value in scores.items()}
        strengths = []
        warnings.extend(f"Session insufficient: {reason}" for reason in dose.reasons)
        demand = RecoveryDemand.INSUFFICIENT
        rest_hours = 0

    return WorkoutReport(
        session_valid=session_valid,
        total_volume_kg=metrics.total_volume_kg,
        total_distance_km=metrics.total_distance_km,
        duration_min=request.duration_min,
        avg_rpe=metrics.avg_rpe,
        sets_completed=metrics.sets_completed,
        sets_planned=metrics.sets_planned,
        power_work=_percent(parsed.power_work, focus.power),
        strength_work=_percent(parsed.strength_work, focus.strength),
        speed_work=_percent(parsed.speed_work, focus.speed),
        strengths=strengths,
        warnings=warnings,
        # The remote path has no history lookup
        volume_change_pct=None,
        intensity_change_pct=None,
        recovery_demand=demand,
        recommended_rest_hours=rest_hours,
        coach_insight=(parsed.coach_insights or "").strip(),
        source=ReportSource.REMOTE,
        session_primary_intent=_intent(parsed.session_primary_intent),
        session_secondary_intent=_intent(parsed.session_secondary_intent),
        **scores,
    )


def _recovery_demand(value: Optional[str]) -> Optional[RecoveryDemand]:
    """Reply's demand tier, None when absent or not usable for a valid session."""
    if not value:
        return None
    try:
        demand = RecoveryDemand(value.strip().lower())
    except ValueError:
        logger.debug(f"Ignoring unknown recovery demand from remote scorer: {value!r}")
        return None
    return None if demand == RecoveryDemand.INSUFFICIENT else demand


# ============================================================================
# Remote Scorer
# ============================================================================

class RemoteScorer:
    """
    LangGraph-based remote report scorer.

    This scorer:
    1. Aggregates the session and checks the minimum dose locally
    2. Asks the model for a JSON report
    3. Validates the reply against `RemoteReportResponse`
    4. Builds a `WorkoutReport`, enforcing the insufficient-session rules
    """

    def __init__(
        self,
        llm_client: Optional[LLMClient] = None,
        api_key: Optional[str] = None,
        season_phase: Optional[SeasonPhase] = None,
        team_level: Optional[TeamLevel] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize the remote scorer.

        Args:
            llm_client: Optional LLM client (shared client unless api_key or settings is given)
            api_key: OpenAI API key overriding settings
            season_phase: Team context overriding settings
            team_level: Team context overriding settings
            settings: Settings instance (defaults to cached settings)
        """
        self.settings = settings or get_settings()
        self._llm_client = llm_client
        self._api_key = api_key
        self._own_settings = settings is not None
        self.season_phase = SeasonPhase(season_phase or self.settings.season_phase)
        self.team_level = TeamLevel(team_level or self.settings.team_level)
        self._graph = self._build_graph()

    @property
    def llm_client(self) -> LLMClient:
        """Lazy-load LLM client; raises LLMAuthenticationError for a bad key."""
        if self._llm_client is None:
            if self._api_key or self._own_settings:
                self._llm_client = LLMClient(
                    api_key=self._api_key or self.settings.openai_api_key,
                    model=self.settings.llm_model,
                    timeout=self.settings.llm_timeout_seconds,
                )
            else:
                self._llm_client = get_llm_client()
        return self._llm_client

    def _build_graph(self):
        """Build the LangGraph workflow."""
        workflow = StateGraph(ScoringState)

        workflow.add_node("prepare_request", self._prepare_request)
        workflow.add_node("generate_report", self._generate_report)
        workflow.add_node("parse_response", self._parse_response)
        workflow.add_node("build_report", self._build_report)
        workflow.add_node("handle_error", self._handle_error)

        workflow.set_entry_point("prepare_request")
        for node, next_node in (
            ("prepare_request", "generate_report"),
            ("generate_report", "parse_response"),
            ("parse_response", "build_report"),
            ("build_report", END),
        ):
            workflow.add_conditional_edges(
                node,
                self._check_success,
                {
                    "success": next_node,
                    "error": "handle_error",
                },
            )
        workflow.add_edge("handle_error", END)

        return workflow.compile()

    def _check_success(self, state: ScoringState) -> str:
        return "error" if state.get("error") else "success"

    async def _prepare_request(self, state: ScoringState) -> Dict[str, Any]:
        """Aggregate the session, run the dose check and render prompts."""
        request = state["request"]
        try:
            # Fail on a bad credential before doing any work
            _ = self.llm_client
        except LLMAuthenticationError as e:
            return _failed(state, e, "Credential check failed")

        metrics = aggregate_metrics(request.entries)
        dose = assess_minimum_dose(request.entries, request.duration_min)
        wire = build_wire_request(request, metrics, self.season_phase, self.team_level)

        if not dose.valid:
            logger.info(
                f"[{state['request_id']}] Session below minimum dose: {'; '.join(dose.reasons)}"
            )

        return {
            **state,
            "metrics": metrics,
            "dose": dose,
            "system_prompt": REPORT_GENERATION_SYSTEM,
            "user_prompt": render_report_prompt(wire),
            "status": "prepared",
        }

    async def _generate_report(self, state: ScoringState) -> Dict[str, Any]:
        """Ask the model for a JSON report."""
        try:
            raw = await self.llm_client.completion_json(
                system=state["system_prompt"],
                user=state["user_prompt"],
                max_tokens=self.settings.llm_max_tokens,
                temperature=self.settings.llm_temperature,
            )
        except LLMError as e:
            return _failed(state, e, "Failed to generate report")
        except Exception as e:
            logger.exception(f"[{state['request_id']}] Unexpected error from LLM client")
            return _failed(state, e, "Failed to generate report")

        return {**state, "raw_response": raw, "status": "generated"}

    async def _parse_response(self, state: ScoringState) -> Dict[str, Any]:
        """Validate the reply against the response schema."""
        try:
            parsed = RemoteReportResponse.model_validate(state["raw_response"])
        except PydanticValidationError as e:
            missing = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
            return _failed(
                state,
                LLMResponseInvalidError(
                    message=f"Remote report failed validation on: {', '.join(missing)}",
                ),
                "Failed to parse response",
            )
        return {**state, "parsed_response": parsed, "status": "parsed"}

    async def _build_report(self, state: ScoringState) -> Dict[str, Any]:
        try:
            report = assemble_remote_report(
                state["parsed_response"],
                state["request"],
                state["metrics"],
                state["dose"],
            )
        except Exception as e:
            logger.exception(f"[{state['request_id']}] Could not build report from remote reply")
            return _failed(
                state,
                LLMResponseInvalidError(message=f"Reply could not be turned into a report: {e}"),
                "Failed to build report",
            )
        return {**state, "report": report, "status": "completed"}

    async def _handle_error(self, state: ScoringState) -> Dict[str, Any]:
        logger.warning(
            f"[{state['request_id']}] Remote scoring failed ({state.get('failure')}): {state.get('error')}"
        )
        return {**state, "status": "failed"}

    async def score(self, request: ReportRequest) -> RemoteScoreResult:
        """
        Score a session remotely.

        Args:
            request: The session and athlete context

        Returns:
            RemoteScoreResult with the report, or the failure kind and message
        """
        initial_state: ScoringState = {
            "request": request,
            "request_id": str(uuid.uuid4()),
            "status": "pending",
            "error": None,
            "failure": None,
            "metrics": None,
            "dose": None,
            "system_prompt": None,
            "user_prompt": None,
            "raw_response": None,
            "parsed_response": None,
            "report": None,
        }

        final_state = await self._graph.ainvoke(initial_state)

        if final_state.get("error"):
            return RemoteScoreResult(
                success=False,
                failure=RemoteFailure(final_state["failure"]),
                error=final_state["error"],
            )
        return RemoteScoreResult(success=True, report=final_state["report"])

    async def coach_feedback(self, report: WorkoutReport, request: ReportRequest) -> CoachFeedbackResult:
        """
        One free-text coaching paragraph for an existing report.

        Args:
            report: Report produced by either engine
            request: The session it was produced from (for names and notes)

        Returns:
            CoachFeedbackResult with the paragraph, or the failure kind
        """
        player_notes = "\n".join(
            f'- {entry.name}: "{entry.notes.strip()}"'
            for entry in request.entries
            if entry.notes and entry.notes.strip()
        )
        user_prompt = COACH_FEEDBACK_USER.format(
            athlete_name=request.athlete_name,
            position=request.position.value,
            title=request.title,
            duration_min=report.duration_min,
            total_volume_kg=report.total_volume_kg,
            sets_completed=report.sets_completed,
            sets_planned=report.sets_planned,
            avg_rpe=report.avg_rpe,
            intensity_score=report.intensity_score,
            work_capacity_score=report.work_capacity_score,
            athletic_quality_score=report.athletic_quality_score,
            position_relevance_score=report.position_relevance_score,
            power_work=report.power_work,
            strength_work=report.strength_work,
            speed_work=report.speed_work,
            recovery_demand=report.recovery_demand.value,
            recommended_rest_hours=report.recommended_rest_hours,
            player_notes=f"\nPLAYER NOTES:\n{player_notes}\n" if player_notes else "",
        )

        try:
            insight = await self.llm_client.completion(
                system=COACH_FEEDBACK_SYSTEM,
                user=user_prompt,
                max_tokens=200,
                temperature=0.8,
            )
        except LLMError as e:
            failure = classify_failure(e)
            logger.warning(f"Coach feedback failed ({failure.value}): {e.message}")
            return CoachFeedbackResult(success=False, failure=failure, error=e.message)

        return CoachFeedbackResult(success=True, insight=insight)
