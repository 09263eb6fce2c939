"""Recovery demand estimation."""

from ..models.report import RecoveryDemand, RecoveryEstimate

# (upper bound exclusive, tier, rest hours); anything above the last bound is very high
RECOVERY_TIERS = (
    (40, RecoveryDemand.LOW, 24),
    (60, RecoveryDemand.MEDIUM, 36),
    (80, RecoveryDemand.HIGH, 48),
)
VERY_HIGH_REST_HOURS = 60


def blended_recovery_score(intensity: int, total_volume_kg: float, duration_min: float) -> float:
    """Weighted blend of intensity, lifted volume and session length.

    Volume saturates at 10 000 kg. Duration is scaled by 1/90, so it only
    nudges the blend by a point or two.
    """
    return (
        intensity * 0.4
        + min(100, total_volume_kg / 100) * 0.4
        + min(100, duration_min / 90) * 0.2
    )


def estimate_recovery(intensity: int, total_volume_kg: float, duration_min: float) -> RecoveryEstimate:
    """Map the blended score to a demand tier and recommended rest.

    Tier bounds are exclusive on the low side: a score of exactly 40
    is medium, not low.
    """
    score = blended_recovery_score(intensity, total_volume_kg, duration_min)
    for upper, demand, hours in RECOVERY_TIERS:
        if score < upper:
            return RecoveryEstimate(demand=demand, rest_hours=hours, blended_score=score)
    return RecoveryEstimate(
        demand=RecoveryDemand.VERY_HIGH,
        rest_hours=VERY_HIGH_REST_HOURS,
        blended_score=score,
    )
