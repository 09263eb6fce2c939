"""LLM prompt templates for remote workout scoring."""

from typing import Dict, Tuple

from ..models.team import SeasonPhase, TeamLevel
from ..scoring import validation

# (intensity, work capacity, athletic quality, position fit)
Multipliers = Tuple[float, float, float, float]

SEASON_PHASE_MULTIPLIERS: Dict[SeasonPhase, Multipliers] = {
    SeasonPhase.OFF_SEASON: (1.1, 1.2, 1.1, 1.0),
    SeasonPhase.PRE_SEASON: (1.0, 0.9, 1.1, 1.2),
    SeasonPhase.IN_SEASON: (0.8, 0.7, 1.2, 1.3),
    SeasonPhase.POST_SEASON: (0.7, 0.6, 1.0, 0.8),
}

TEAM_LEVEL_MULTIPLIERS: Dict[TeamLevel, Multipliers] = {
    TeamLevel.AMATEUR: (0.9, 0.9, 1.0, 0.8),
    TeamLevel.SEMI_PRO: (1.0, 1.0, 1.0, 1.0),
    TeamLevel.COLLEGE: (1.1, 1.1, 1.1, 1.1),
    TeamLevel.PRO: (1.3, 1.3, 1.2, 1.3),
    # Developmental levels are judged like amateurs
    TeamLevel.YOUTH: (0.9, 0.9, 1.0, 0.8),
    TeamLevel.RECREATIONAL: (0.9, 0.9, 1.0, 0.8),
}


def format_multiplier_table(label: str, table: Dict) -> str:
    """Render a multiplier table as aligned plain text."""
    lines = [f"{label:<14}Intensity  WorkCap  AthleticQual  PositionFit"]
    for key, (intensity, capacity, athletic, position) in table.items():
        lines.append(
            f"{key.value:<14}x{intensity:<9.1f}x{capacity:<7.1f}x{athletic:<12.1f}x{position:.1f}"
        )
    return "\n".join(lines)


# ============================================================================
# REPORT GENERATION PROMPTS
# ============================================================================

REPORT_GENERATION_SYSTEM = """You are an expert American Football strength and conditioning coach.
Analyze training sessions of ANY type and produce an honest, actionable report.
Speed work is NOT the same as strength work: evaluate each session by its intent first.
Output ONLY valid JSON."""

REPORT_GENERATION_USER = """Generate a workout report for this session.

PLAYER:
- Name: {athlete_name}
- Position: {position}
- Body Weight (kg): {body_weight}
- Height (cm): {height}
- Season Phase: {season_phase}
- Team Level: {team_level}

WORKOUT:
- Title: {title}
- Duration (min): {duration_min}
- Exercises:
{exercise_list}
- Total Sets: {total_sets}
- Total Reps: {total_reps}
- Total Lifting Volume (kg): {total_volume_kg}
- Total Distance (km): {total_distance_km:.3f}
- Average RPE: {avg_rpe:.1f}{notes_line}

TASK:

1) SESSION INTENT
Pick one primary and an optional secondary intent:
speed | power | strength | conditioning | agility | mobility | mixed
Judge the session by its PRIMARY intent only. Never penalize a focused session
for the modalities it did not train; weekly balance belongs in coachInsights,
not in warnings.

2) MINIMUM EFFECTIVE DOSE
Mark the session insufficient if ANY of these are true:
- fewer than {min_exercises} exercises
- strength/power work with fewer than {min_sets} total sets or {min_reps} total reps
- sprint work below {min_sprint_m} m AND fewer than {min_sprint_reps} sprints
- conditioning shorter than {min_conditioning_min} minutes
- RPE above {high_rpe} with fewer than {min_sets_at_high_rpe} total sets
A session with adequate sets, reps and volume is VALID even when it is short.

If insufficient:
  "sessionValid": false, intensityScore <= 35, workCapacityScore <= 25,
  athleticQualityScore <= 40, positionRelevanceScore <= 40, "strengths": [],
  warnings naming the missing dose with numbers, "recoveryDemand": "insufficient",
  "recommendedRestHours": 0, and a very direct coachInsights.

3) SEASON PHASE MULTIPLIERS (apply to raw scores)
{season_table}

4) TEAM LEVEL MULTIPLIERS (apply to raw scores)
{team_table}

Final scores = raw x season multiplier x team multiplier, capped to 0-100.

5) SCORES (0-100)
- intensityScore: effort vs intent (load, RPE, density)
- workCapacityScore: useful volume vs position standards
- athleticQualityScore: execution and athletic transfer
- positionRelevanceScore: alignment with the {position} role

6) RECOVERY
recoveryDemand: low | medium | high | very-high, with 24-72 rest hours.

7) FEEDBACK
- strengths: 1-3 positives, only if earned
- warnings: 1-3 faults within the session's scope
- coachInsights: 2-3 direct sentences in context of role and season

OUTPUT FORMAT (JSON only):
{{
  "sessionValid": <true|false>,
  "intensityScore": <0-100>,
  "workCapacityScore": <0-100>,
  "athleticQualityScore": <0-100>,
  "positionRelevanceScore": <0-100>,
  "totalVolume": {total_volume_kg},
  "totalDistance": {total_distance_km:.3f},
  "duration": {duration_min},
  "avgRPE": {avg_rpe:.1f},
  "setsCompleted": {total_sets},
  "setsPlanned": {sets_planned},
  "sessionPrimaryIntent": "<speed|power|strength|conditioning|agility|mobility|mixed>",
  "sessionSecondaryIntent": "<none|speed|power|strength|conditioning|agility|mobility>",
  "powerWork": <0-100>,
  "strengthWork": <0-100>,
  "speedWork": <0-100>,
  "strengths": ["..."],
  "warnings": ["..."],
  "recoveryDemand": "<low|medium|high|very-high|insufficient>",
  "recommendedRestHours": <0-72>,
  "coachInsights": "..."
}}"""


def dose_thresholds() -> Dict[str, object]:
    """Minimum-dose thresholds as prompt template arguments."""
    return {
        "min_exercises": validation.MIN_EXERCISES,
        "min_sets": validation.MIN_STRENGTH_SETS,
        "min_reps": validation.MIN_STRENGTH_REPS,
        "min_sprint_m": int(round(validation.MIN_SPRINT_DISTANCE_KM * 1000)),
        "min_sprint_reps": validation.MIN_SPRINT_REPS,
        "min_conditioning_min": int(validation.MIN_CONDITIONING_MIN),
        "high_rpe": validation.HIGH_RPE,
        "min_sets_at_high_rpe": validation.MIN_SETS_AT_HIGH_RPE,
    }


# ============================================================================
# COACH FEEDBACK PROMPTS
# ============================================================================

COACH_FEEDBACK_SYSTEM = """You are a tough, no-nonsense American Football strength coach.
Call out weak effort, respect real work, and never sugarcoat."""

COACH_FEEDBACK_USER = """PLAYER: {athlete_name}
POSITION: {position}

WORKOUT COMPLETED:
- Title: {title}
- Duration: {duration_min} minutes
- Total Volume: {total_volume_kg} kg
- Sets Completed: {sets_completed}/{sets_planned}
- Average RPE: {avg_rpe}/10

PERFORMANCE SCORES:
- Intensity: {intensity_score}/100
- Work Capacity: {work_capacity_score}/100
- Athletic Quality: {athletic_quality_score}/100
- Position Fit: {position_relevance_score}/100

TRAINING FOCUS:
- Power Work: {power_work}%
- Strength Work: {strength_work}%
- Speed Work: {speed_work}%

RECOVERY:
- Demand: {recovery_demand}
- Recommended Rest: {recommended_rest_hours}h
{player_notes}
INSTRUCTIONS:
1. Do NOT suggest changing exercises; the coach programmed them
2. Be harsh when effort is weak (RPE under 6, under 20 minutes, or sets incomplete)
3. Show respect when RPE is above 7.5 and everything was completed
4. Address any pain, form or struggle the player mentions in their notes
5. 2-3 sentences maximum

Your coaching feedback:"""
