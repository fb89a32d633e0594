"""Data models for the fantalega scorer."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .constants import ROLE_CODES


class Role(str, Enum):
    """Player role. Closed set: every rule table has one entry per member."""
    GOALKEEPER = 'goalkeeper'
    DEFENDER = 'defender'
    MIDFIELDER = 'midfielder'
    FORWARD = 'forward'

    @classmethod
    def parse(cls, value) -> 'Role':
        """
        Parse a role from its value, its name or a league role code.

        Accepts 'goalkeeper', 'GOALKEEPER' or 'P' (and likewise D, C, A).

        Raises:
            ValueError: If the value names no role
        """
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        if text.upper() in ROLE_CODES:
            return cls(ROLE_CODES[text.upper()])
        try:
            return cls(text.lower())
        except ValueError:
            raise ValueError(f'Invalid role: {value}') from None


@dataclass
class MatchEvent:
    """Raw per-player, per-matchday event tally. Any count may be None (= 0)."""
    player_id: str
    matchday: int
    minutes: Optional[float] = None  # None or 0 = did not play
    goals: Optional[int] = 0
    assists: Optional[int] = 0
    yellow_cards: Optional[int] = 0
    red_card: Optional[bool] = False
    own_goals: Optional[int] = 0
    penalties_scored: Optional[int] = 0
    penalties_missed: Optional[int] = 0
    penalties_saved: Optional[int] = 0  # Goalkeeper only
    goals_conceded: Optional[int] = 0   # Goalkeeper only


@dataclass
class PlayerRating:
    """Container for a player's matchday rating and its breakdown."""
    player_id: str
    role: Role
    matchday: int
    rating: Optional[float] = None  # None = no rating (did not play)
    breakdown: Dict[str, float] = field(default_factory=dict)
    found_in_events: bool = False

    @property
    def played(self) -> bool:
        return self.rating is not None


@dataclass(frozen=True)
class LineupPlayer:
    """A player entry in a submitted lineup."""
    player_id: str
    role: Role
    name: str = ''

    @property
    def label(self) -> str:
        return self.name or self.player_id


@dataclass
class Lineup:
    """A team's starters and bench for one matchday, in submission order."""
    team: str
    matchday: int
    formation: str
    starters: List[LineupPlayer] = field(default_factory=list)
    bench: List[LineupPlayer] = field(default_factory=list)


@dataclass(frozen=True)
class SubstitutionEntry:
    """One starter slot in a team score calculation."""
    starter: LineupPlayer
    substitute: Optional[LineupPlayer]
    reason: str  # played | substituted | no_substitute | cap_reached
    points: float = 0.0

    @property
    def is_substitution(self) -> bool:
        return self.reason == 'substituted'


@dataclass
class TeamScore:
    """A team's matchday total with the substitution trace behind it."""
    team: str
    matchday: int
    total_score: float = 0.0
    trace: List[SubstitutionEntry] = field(default_factory=list)

    @property
    def substitutions_used(self) -> int:
        return sum(1 for entry in self.trace if entry.is_substitution)


@dataclass(frozen=True)
class TeamMatchOutcome:
    """One side of a fixture: fantasy total and the goals it converts to."""
    total_score: float
    goals: int


@dataclass(frozen=True)
class MatchResult:
    """A settled head-to-head fixture."""
    matchday: int
    home_team: str
    away_team: str
    home_score: float = 0.0  # Fantasy points total
    away_score: float = 0.0
    home_goals: int = 0      # Converted goals
    away_goals: int = 0


@dataclass
class StandingsRow:
    """A team's season line in the league table."""
    team: str
    played: int = 0
    won: int = 0
    drawn: int = 0
    lost: int = 0
    league_points: int = 0
    total_fantasy_points: float = 0.0
