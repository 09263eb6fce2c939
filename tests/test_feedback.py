"""Tests for strengths, warnings and coach insight tokens."""

from workout_scoring.models.exercise import ExerciseCategory
from workout_scoring.models.report import Mixed, SessionMetrics, SingleCategory
from workout_scoring.models.team import AthletePosition
from workout_scoring.scoring.feedback import (
    MAX_INSIGHTS,
    generate_feedback,
    generate_insights,
    generate_strengths,
    generate_warnings,
)

MOBILITY = SingleCategory(ExerciseCategory.MOBILITY)
CONDITIONING = SingleCategory(ExerciseCategory.CONDITIONING)
SPEED = SingleCategory(ExerciseCategory.SPEED)


class TestStrengths:
    """Tests for generate_strengths."""

    def test_all_strengths(self):
        assert generate_strengths(athletic=80, intensity=80, capacity=75) == [
            "athletic-focus",
            "high-intensity",
            "good-capacity",
            "balanced",
        ]

    def test_balanced_only(self):
        assert generate_strengths(athletic=70, intensity=70, capacity=0) == ["balanced"]

    def test_none_earned(self):
        assert generate_strengths(athletic=69, intensity=79, capacity=74) == []


class TestWarnings:
    """Tests for generate_warnings."""

    def test_specialized_session_suppresses_quality_warnings(self, make_exercise):
        """A mobility day is not an incomplete leg day."""
        entries = [make_exercise(f"Stretch {i}", "Mobility") for i in range(5)]
        assert generate_warnings(entries, MOBILITY, athletic=40) == []

    def test_mixed_session_gets_quality_warnings(self, make_exercise):
        entries = [make_exercise(f"Stretch {i}", "Mobility") for i in range(3)]
        entries.append(make_exercise("Bench Press", "Strength"))

        assert generate_warnings(entries, Mixed(2), athletic=40) == [
            "low-athletic-quality",
            "no-lower-body",
        ]

    def test_lower_body_needs_more_than_three_exercises(self, make_exercise):
        entries = [make_exercise(f"Press {i}", "Strength") for i in range(3)]
        assert generate_warnings(entries, Mixed(1), athletic=60) == []

    def test_lower_body_keywords(self, make_exercise):
        entries = [make_exercise(f"Press {i}", "Strength") for i in range(3)]
        entries.append(make_exercise("Walking Lunge", "Strength"))
        assert generate_warnings(entries, Mixed(1), athletic=60) == []

    def test_high_frequency_applies_to_every_session(self, make_exercise):
        entries = [make_exercise("Stretch", "Mobility")]

        assert generate_warnings(entries, MOBILITY, athletic=50, recent_session_count=3) == [
            "high-frequency",
        ]
        assert generate_warnings(entries, MOBILITY, athletic=50, recent_session_count=2) == []


class TestInsights:
    """Tests for generate_insights."""

    def test_conditioning_volume_thresholds(self):
        def tokens(distance):
            metrics = SessionMetrics(total_distance_km=distance, exercise_count=1)
            return generate_insights(CONDITIONING, metrics, 65, 0, AthletePosition.RB)

        assert tokens(None) == ["keep-building-base", "balance-with-strength"]
        assert tokens(3.0) == ["decent-conditioning-work", "balance-with-strength"]
        assert tokens(5.0) == ["good-conditioning-work", "balance-with-strength"]

    def test_speed_session_depends_on_role(self):
        metrics = SessionMetrics(exercise_count=3)

        assert generate_insights(SPEED, metrics, 85, 45, AthletePosition.WR) == [
            "speed-work",
            "perfect-for-position",
        ]
        assert generate_insights(SPEED, metrics, 85, 0, AthletePosition.OL) == ["speed-work"]

    def test_fixed_category_commentary(self):
        metrics = SessionMetrics(exercise_count=2)
        recovery = SingleCategory(ExerciseCategory.RECOVERY)

        assert generate_insights(recovery, metrics, 40, 0, AthletePosition.QB) == [
            "recovery-work",
            "essential-for-progress",
        ]

    def test_mixed_session_commentary(self):
        metrics = SessionMetrics(exercise_count=5)
        insights = generate_insights(
            Mixed(3), metrics, 90, 85, AthletePosition.WR, volume_change_pct=30.0,
        )
        assert insights == ["excellent-athletic", "position-good", "volume-jump"]
        assert len(insights) <= MAX_INSIGHTS

    def test_mixed_session_needs_by_role(self):
        metrics = SessionMetrics(exercise_count=2)

        assert generate_insights(Mixed(2), metrics, 40, 50, AthletePosition.OL) == [
            "improve-athletic",
            "need-strength",
        ]
        assert generate_insights(Mixed(2), metrics, 40, 50, AthletePosition.DB) == [
            "improve-athletic",
            "need-explosive",
        ]
        assert generate_insights(Mixed(2), metrics, 40, 50, AthletePosition.QB) == [
            "improve-athletic",
        ]

    def test_volume_jump_must_exceed_threshold(self):
        metrics = SessionMetrics(exercise_count=2)
        assert generate_insights(
            Mixed(2), metrics, 60, 70, AthletePosition.TE, volume_change_pct=25.0,
        ) == ["keep-going"]

    def test_fallback_token(self):
        metrics = SessionMetrics(exercise_count=2)
        assert generate_insights(Mixed(2), metrics, 60, 70, AthletePosition.TE) == ["keep-going"]


class TestGenerateFeedback:
    """Tests for generate_feedback."""

    def test_combines_all_outputs(self, make_exercise):
        entries = [make_exercise("Bike", "Conditioning", sets=4, duration_sec=120)]
        feedback = generate_feedback(
            entries,
            CONDITIONING,
            SessionMetrics(exercise_count=1, sets_completed=4),
            intensity=40,
            work_capacity=30,
            athletic=65,
            position_score=15,
            position=AthletePosition.OL,
        )

        assert feedback.strengths == ()
        assert feedback.warnings == ()
        assert feedback.insights == ("keep-building-base", "balance-with-strength")
        assert feedback.coach_insight == "keep-building-base balance-with-strength"
