"""Athlete and team context models."""

from enum import Enum


class PositionRole(str, Enum):
    """Role group that decides which work is most relevant to a position."""
    SKILL = "skill"    # Explosiveness first
    LINE = "line"      # Maximal strength first
    HYBRID = "hybrid"  # Needs both
    OTHER = "other"    # No role-specific weighting


class AthletePosition(str, Enum):
    """American football positions."""
    QB = "QB"
    RB = "RB"
    WR = "WR"
    TE = "TE"
    OL = "OL"
    DL = "DL"
    LB = "LB"
    DB = "DB"
    KP = "K/P"

    @property
    def role(self) -> PositionRole:
        """Role group for this position."""
        return _POSITION_ROLES.get(self, PositionRole.OTHER)


_POSITION_ROLES = {
    AthletePosition.RB: PositionRole.SKILL,
    AthletePosition.WR: PositionRole.SKILL,
    AthletePosition.DB: PositionRole.SKILL,
    AthletePosition.OL: PositionRole.LINE,
    AthletePosition.DL: PositionRole.LINE,
    AthletePosition.LB: PositionRole.HYBRID,
    AthletePosition.TE: PositionRole.HYBRID,
}


class SeasonPhase(str, Enum):
    """Training period of the team's year."""
    OFF_SEASON = "off-season"
    PRE_SEASON = "pre-season"
    IN_SEASON = "in-season"
    POST_SEASON = "post-season"


class TeamLevel(str, Enum):
    """Competitive level of the team."""
    AMATEUR = "amateur"
    SEMI_PRO = "semi-pro"
    COLLEGE = "college"
    PRO = "pro"
    YOUTH = "youth"
    RECREATIONAL = "recreational"
