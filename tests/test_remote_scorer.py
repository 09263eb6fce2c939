"""Tests for the LangGraph remote scorer."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from workout_scoring.exceptions import (
    LLMAuthenticationError,
    LLMRateLimitError,
    LLMResponseInvalidError,
    LLMServiceUnavailableError,
    LLMTimeoutError,
)
from workout_scoring.models.report import RecoveryDemand, ReportSource
from workout_scoring.models.request import ReportRequest
from workout_scoring.models.team import SeasonPhase, TeamLevel
from workout_scoring.remote_scorer import (
    INSUFFICIENT_CAPS,
    RemoteFailure,
    RemoteScorer,
    classify_failure,
)


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def remote_reply():
    """A well-formed remote report."""
    return {
        "sessionValid": True,
        "intensityScore": 72.6,
        "workCapacityScore": 120,
        "athleticQualityScore": 55,
        "positionRelevanceScore": 81,
        "totalVolume": 6400,
        "totalDistance": 0.0,
        "duration": 25,
        "avgRPE": 5.0,
        "setsCompleted": 8,
        "setsPlanned": 8,
        "sessionPrimaryIntent": "Strength",
        "sessionSecondaryIntent": "none",
        "powerWork": 0,
        "strengthWork": 100,
        "speedWork": 0,
        "strengths": ["Solid compound volume"],
        "warnings": ["Add a lower-body hinge this week"],
        "coachInsights": "  Honest work. Push the RPE next time.  ",
    }


@pytest.fixture
def mock_llm_client(remote_reply):
    """Create a mock LLM client."""
    client = MagicMock()
    client.completion_json = AsyncMock(return_value=remote_reply)
    client.completion = AsyncMock(return_value="Solid grind. Rest up and come back ready.")
    return client


@pytest.fixture
def request_for(strength_session):
    def _request(entries=None, **overrides):
        values = {
            "entries": strength_session if entries is None else entries,
            "duration_min": 25,
            "athlete_id": "a1",
            "position": "OL",
            "athlete_name": "Jordan",
            "title": "Lower/Upper Strength",
        }
        values.update(overrides)
        return ReportRequest(**values)

    return _request


@pytest.fixture
def scorer(mock_llm_client):
    return RemoteScorer(
        llm_client=mock_llm_client,
        season_phase=SeasonPhase.IN_SEASON,
        team_level=TeamLevel.COLLEGE,
    )


# ============================================================================
# Successful scoring
# ============================================================================

class TestScoreSuccess:
    """Tests for a valid session with a well-formed reply."""

    @pytest.mark.asyncio
    async def test_builds_remote_report(self, scorer, request_for):
        result = await scorer.score(request_for())

        assert result.success
        assert result.failure is None
        report = result.report
        assert report.source == ReportSource.REMOTE
        assert report.session_valid
        assert report.intensity_score == 73
        assert report.work_capacity_score == 100
        assert report.athletic_quality_score == 55
        assert report.position_relevance_score == 81
        assert report.strengths == ("Solid compound volume",)
        assert report.coach_insight == "Honest work. Push the RPE next time."
        assert report.session_primary_intent == "strength"
        assert report.session_secondary_intent is None

    @pytest.mark.asyncio
    async def test_null_coach_insights_accepted(self, scorer, request_for, remote_reply):
        remote_reply["coachInsights"] = None

        result = await scorer.score(request_for())

        assert result.success
        assert result.report.coach_insight == ""

    @pytest.mark.asyncio
    async def test_totals_come_from_local_aggregation(self, scorer, request_for, remote_reply):
        remote_reply["totalVolume"] = 1
        result = await scorer.score(request_for())

        assert result.report.total_volume_kg == 6400
        assert result.report.sets_completed == 8

    @pytest.mark.asyncio
    async def test_missing_recovery_filled_locally(self, scorer, request_for):
        """0.4 x 73 + 0.4 x 64 + ~0 lands in the medium tier."""
        result = await scorer.score(request_for())

        assert result.report.recovery_demand == RecoveryDemand.MEDIUM
        assert result.report.recommended_rest_hours == 36

    @pytest.mark.asyncio
    async def test_reply_recovery_used_when_present(self, scorer, request_for, remote_reply):
        remote_reply["recoveryDemand"] = "high"
        remote_reply["recommendedRestHours"] = 90

        report = (await scorer.score(request_for())).report

        assert report.recovery_demand == RecoveryDemand.HIGH
        assert report.recommended_rest_hours == 72

    @pytest.mark.asyncio
    async def test_prompt_carries_team_context(self, scorer, mock_llm_client, request_for):
        await scorer.score(request_for(body_weight_kg=118))

        kwargs = mock_llm_client.completion_json.call_args.kwargs
        user_prompt = kwargs["user"]
        assert "Jordan" in user_prompt
        assert "Season Phase: in-season" in user_prompt
        assert "Team Level: college" in user_prompt
        assert "Body Weight (kg): 118" in user_prompt
        assert "Back Squat [Strength]: 4 sets" in user_prompt
        assert "x0.7" in user_prompt
        assert "150 m" in user_prompt
        assert "JSON" in kwargs["system"]


# ============================================================================
# Minimum dose
# ============================================================================

class TestInsufficientSession:
    """Sessions below the minimum effective dose."""

    @pytest.mark.asyncio
    async def test_local_dose_check_overrides_reply(self, scorer, request_for, make_exercise, remote_reply):
        remote_reply.update({
            "intensityScore": 90,
            "workCapacityScore": 90,
            "athleticQualityScore": 90,
            "positionRelevanceScore": 90,
            "recoveryDemand": "high",
            "recommendedRestHours": 48,
        })
        entries = [make_exercise("Back Squat", "Strength", sets=2, reps=3, load_kg=100)]

        report = (await scorer.score(request_for(entries=entries, duration_min=5))).report

        assert not report.session_valid
        assert report.intensity_score == INSUFFICIENT_CAPS["intensity_score"] == 35
        assert report.work_capacity_score == 25
        assert report.athletic_quality_score == 40
        assert report.position_relevance_score == 40
        assert report.strengths == ()
        assert report.recovery_demand == RecoveryDemand.INSUFFICIENT
        assert report.recommended_rest_hours == 0
        insufficient = [w for w in report.warnings if w.startswith("Session insufficient:")]
        assert len(insufficient) == 3

    @pytest.mark.asyncio
    async def test_reply_can_mark_session_invalid(self, scorer, request_for, remote_reply):
        remote_reply["sessionValid"] = False
        remote_reply["intensityScore"] = 20

        report = (await scorer.score(request_for())).report

        assert not report.session_valid
        assert report.intensity_score == 20
        assert report.work_capacity_score == 25
        assert report.recovery_demand == RecoveryDemand.INSUFFICIENT
        assert report.warnings == ("Add a lower-body hinge this week",)


# ============================================================================
# Failures
# ============================================================================

class TestScoreFailures:
    """Every failure is returned, never raised."""

    @pytest.mark.asyncio
    async def test_missing_api_key_is_auth_invalid(self, request_for):
        result = await RemoteScorer().score(request_for())

        assert not result.success
        assert result.failure == RemoteFailure.AUTH_INVALID
        assert result.report is None

    @pytest.mark.asyncio
    async def test_malformed_api_key_is_auth_invalid(self, request_for):
        result = await RemoteScorer(api_key="not-a-key").score(request_for())
        assert result.failure == RemoteFailure.AUTH_INVALID

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error, expected",
        [
            (LLMAuthenticationError(), RemoteFailure.AUTH_INVALID),
            (LLMRateLimitError(retry_after=20), RemoteFailure.RATE_LIMITED),
            (LLMResponseInvalidError(raw_response="{oops"), RemoteFailure.MALFORMED_RESPONSE),
            (LLMTimeoutError(timeout_seconds=30), RemoteFailure.NETWORK_ERROR),
            (LLMServiceUnavailableError(), RemoteFailure.NETWORK_ERROR),
        ],
    )
    async def test_llm_errors_are_classified(self, scorer, mock_llm_client, request_for, error, expected):
        mock_llm_client.completion_json.side_effect = error

        result = await scorer.score(request_for())

        assert not result.success
        assert result.failure == expected
        assert result.error

    @pytest.mark.asyncio
    async def test_missing_score_is_malformed(self, scorer, request_for, remote_reply):
        del remote_reply["positionRelevanceScore"]

        result = await scorer.score(request_for())

        assert result.failure == RemoteFailure.MALFORMED_RESPONSE
        assert "positionRelevanceScore" in result.error

    @pytest.mark.asyncio
    async def test_string_score_is_malformed(self, scorer, request_for, remote_reply):
        remote_reply["intensityScore"] = "70"

        result = await scorer.score(request_for())

        assert result.failure == RemoteFailure.MALFORMED_RESPONSE

    @pytest.mark.asyncio
    async def test_unexpected_client_error_is_network_error(self, scorer, mock_llm_client, request_for):
        mock_llm_client.completion_json.side_effect = OSError("connection reset")

        result = await scorer.score(request_for())

        assert result.failure == RemoteFailure.NETWORK_ERROR

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    async def test_non_finite_score_is_malformed(self, scorer, request_for, remote_reply, value):
        remote_reply["intensityScore"] = value

        result = await scorer.score(request_for())

        assert not result.success
        assert result.failure == RemoteFailure.MALFORMED_RESPONSE
        assert "intensityScore" in result.error

    @pytest.mark.asyncio
    async def test_report_build_failure_is_returned(self, scorer, request_for, monkeypatch):
        def _broken(*args, **kwargs):
            raise OverflowError("cannot convert float infinity to integer")

        monkeypatch.setattr("workout_scoring.remote_scorer.assemble_remote_report", _broken)

        result = await scorer.score(request_for())

        assert not result.success
        assert result.report is None
        assert result.failure == RemoteFailure.MALFORMED_RESPONSE
        assert "Failed to build report" in result.error

    def test_classify_failure_defaults_to_network(self):
        assert classify_failure(RuntimeError("boom")) == RemoteFailure.NETWORK_ERROR


# ============================================================================
# Coach feedback
# ============================================================================

class TestCoachFeedback:
    """Tests for RemoteScorer.coach_feedback."""

    @pytest.mark.asyncio
    async def test_returns_paragraph(self, scorer, mock_llm_client, request_for, make_exercise):
        from workout_scoring.engine import build_report

        entries = [
            make_exercise("Back Squat", "Strength", sets=4, reps=5, load_kg=140, notes="knee felt tight"),
            make_exercise("Bench Press", "Strength", sets=4, reps=5, load_kg=100),
        ]
        request = request_for(entries=entries)
        report = build_report(request.entries, request.duration_min, request.position)

        result = await scorer.coach_feedback(report, request)

        assert result.success
        assert result.insight.startswith("Solid grind")
        user_prompt = mock_llm_client.completion.call_args.kwargs["user"]
        assert 'Back Squat: "knee felt tight"' in user_prompt
        assert f"Intensity: {report.intensity_score}/100" in user_prompt

    @pytest.mark.asyncio
    async def test_failure_is_classified(self, scorer, mock_llm_client, request_for, strength_session):
        from workout_scoring.engine import build_report

        mock_llm_client.completion.side_effect = LLMRateLimitError()
        report = build_report(strength_session, 25, "OL")

        result = await scorer.coach_feedback(report, request_for())

        assert not result.success
        assert result.failure == RemoteFailure.RATE_LIMITED

    @pytest.mark.asyncio
    async def test_bad_key_without_client(self, request_for, strength_session):
        from workout_scoring.engine import build_report

        report = build_report(strength_session, 25, "OL")
        result = await RemoteScorer(api_key="bad").coach_feedback(report, request_for())

        assert result.failure == RemoteFailure.AUTH_INVALID


# ============================================================================
# Client wiring
# ============================================================================

class TestClientWiring:
    """Which LLM client a scorer uses."""

    def test_default_scorer_shares_client(self, monkeypatch):
        from workout_scoring.llm.providers import get_llm_client

        monkeypatch.setenv("OPENAI_API_KEY", "sk-test-0123456789abcdefghij")

        assert RemoteScorer().llm_client is get_llm_client()

    def test_api_key_override_builds_own_client(self, monkeypatch):
        from workout_scoring.llm.providers import get_llm_client

        monkeypatch.setenv("OPENAI_API_KEY", "sk-test-0123456789abcdefghij")
        scorer = RemoteScorer(api_key="sk-other-0123456789abcdefghij")

        assert scorer.llm_client is not get_llm_client()
