"""Pydantic schemas for rule sets and JSON data validation."""

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from .constants import DEFAULT_RULES_VERSION
from .models import MatchEvent, Role

FORMATION_PATTERN = r'^\d-\d-\d$'


class GoalBonusTable(BaseModel):
    """Goal bonus per role. Missing entries take the forward bonus, never zero."""

    goalkeeper: float
    defender: float
    midfielder: float
    forward: float

    model_config = ConfigDict(extra='forbid', frozen=True)

    @model_validator(mode='before')
    @classmethod
    def fill_from_forward(cls, data):
        """Default every unset role to the forward bonus."""
        if isinstance(data, dict) and data.get('forward') is not None:
            data = dict(data)
            for role in Role:
                if data.get(role.value) is None:
                    data[role.value] = data['forward']
        return data


class RuleSet(BaseModel):
    """
    Resolved scoring and goal-conversion rules for one league.

    Immutable and validated once at construction, so the scoring path
    never re-checks it.
    """

    version: str = DEFAULT_RULES_VERSION
    base_rating: float
    minutes_threshold: float
    minutes_bonus: float
    goal_bonus: GoalBonusTable
    assist_bonus: float
    yellow_card_malus: float
    red_card_malus: float
    own_goal_malus: float
    penalty_scored_bonus: float
    penalty_missed_malus: float
    penalty_saved_bonus: float
    goal_conceded_malus: float
    clean_sheet_bonus: float
    min_score: float
    max_score: float
    goal_threshold: float
    goal_interval: float = Field(..., gt=0)
    max_substitutions: int = Field(..., ge=0)

    model_config = ConfigDict(extra='forbid', frozen=True)

    @model_validator(mode='after')
    def check_clamp_bounds(self):
        """Ensure the clamp range is not empty."""
        if self.min_score > self.max_score:
            raise ValueError(
                f'min_score ({self.min_score}) must not exceed max_score ({self.max_score})'
            )
        return self

    def goal_bonus_for(self, role) -> float:
        """Goal bonus for a role; anything outside the role set gets the forward bonus."""
        try:
            return getattr(self.goal_bonus, Role.parse(role).value)
        except ValueError:
            return self.goal_bonus.forward


class GoalBonusOverrides(BaseModel):
    """Partial per-role goal bonus override."""

    goalkeeper: Optional[float] = None
    defender: Optional[float] = None
    midfielder: Optional[float] = None
    forward: Optional[float] = None

    model_config = ConfigDict(extra='forbid')


class RuleOverrides(BaseModel):
    """A league's partial rule override. Unset fields take the defaults."""

    base_rating: Optional[float] = None
    minutes_threshold: Optional[float] = None
    minutes_bonus: Optional[float] = None
    goal_bonus: Optional[GoalBonusOverrides] = None
    assist_bonus: Optional[float] = None
    yellow_card_malus: Optional[float] = None
    red_card_malus: Optional[float] = None
    own_goal_malus: Optional[float] = None
    penalty_scored_bonus: Optional[float] = None
    penalty_missed_malus: Optional[float] = None
    penalty_saved_bonus: Optional[float] = None
    goal_conceded_malus: Optional[float] = None
    clean_sheet_bonus: Optional[float] = None
    min_score: Optional[float] = None
    max_score: Optional[float] = None
    goal_threshold: Optional[float] = None
    goal_interval: Optional[float] = None
    max_substitutions: Optional[int] = None

    model_config = ConfigDict(extra='forbid')


class LeagueConfig(BaseModel):
    """League configuration settings."""

    name: str = Field(..., min_length=1)
    total_matchdays: int = Field(..., ge=1, le=38)
    roster_limits: dict[Role, int] = Field(default_factory=dict)
    allowed_formations: list[str] = Field(default_factory=list)
    rules: RuleOverrides = Field(default_factory=RuleOverrides)

    model_config = ConfigDict(extra='forbid')

    @field_validator('roster_limits', mode='before')
    @classmethod
    def parse_roles(cls, v):
        """Accept role codes (P, D, C, A) as well as role names."""
        return {Role.parse(role): count for role, count in v.items()}

    @field_validator('roster_limits')
    @classmethod
    def validate_role_limits(cls, v):
        """Ensure slot counts are sane."""
        for role, count in v.items():
            if count < 0 or count > 25:
                raise ValueError(f'Invalid roster limit for {role.value}: {count}')
        return v

    @field_validator('allowed_formations')
    @classmethod
    def validate_formations(cls, v):
        """Ensure formations look like D-C-A."""
        for formation in v:
            parts = formation.split('-')
            if len(parts) != 3 or not all(p.isdigit() for p in parts):
                raise ValueError(f'Invalid formation: {formation}')
            if sum(int(p) for p in parts) != 10:
                raise ValueError(f'Formation {formation} does not field 10 outfield players')
        return v


class PlayerRecord(BaseModel):
    """Player in players.json."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    role: Role
    real_team: Optional[str] = None

    model_config = ConfigDict(extra='ignore')

    @field_validator('role', mode='before')
    @classmethod
    def parse_role(cls, v):
        return Role.parse(v)


class PlayersFile(BaseModel):
    """Complete players.json file structure."""

    players: list[PlayerRecord]


class TeamRecord(BaseModel):
    """Fantasy team metadata."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    owner: str = ''

    model_config = ConfigDict(extra='forbid')


class TeamsFile(BaseModel):
    """Complete teams.json file structure."""

    teams: list[TeamRecord]


class MatchEventRecord(BaseModel):
    """One player's event tally in an events file. Accepts snake or camel case keys."""

    player_id: str = Field(..., validation_alias=AliasChoices('player_id', 'playerId', 'player'))
    minutes: Optional[float] = None
    goals: Optional[int] = 0
    assists: Optional[int] = 0
    yellow_cards: Optional[int] = Field(0, validation_alias=AliasChoices('yellow_cards', 'yellowCards'))
    red_card: Optional[bool] = Field(False, validation_alias=AliasChoices('red_card', 'redCard'))
    own_goals: Optional[int] = Field(0, validation_alias=AliasChoices('own_goals', 'ownGoals'))
    penalties_scored: Optional[int] = Field(
        0, validation_alias=AliasChoices('penalties_scored', 'penaltiesScored')
    )
    penalties_missed: Optional[int] = Field(
        0, validation_alias=AliasChoices('penalties_missed', 'penaltyMissed', 'penaltiesMissed')
    )
    penalties_saved: Optional[int] = Field(
        0, validation_alias=AliasChoices('penalties_saved', 'penaltySaved', 'penaltiesSaved')
    )
    goals_conceded: Optional[int] = Field(
        0, validation_alias=AliasChoices('goals_conceded', 'goalsConceded')
    )

    model_config = ConfigDict(extra='ignore')

    def to_event(self, matchday: int) -> MatchEvent:
        return MatchEvent(matchday=matchday, **self.model_dump())


class EventsFile(BaseModel):
    """Complete events/matchday_N.json file structure."""

    matchday: int = Field(..., ge=1)
    events: list[MatchEventRecord]

    @field_validator('events')
    @classmethod
    def validate_unique_players(cls, v):
        """At most one event record per player per matchday."""
        seen = set()
        for record in v:
            if record.player_id in seen:
                raise ValueError(f'Duplicate event for player {record.player_id}')
            seen.add(record.player_id)
        return v


class LineupRecord(BaseModel):
    """A team's lineup submission for a matchday."""

    formation: str = Field(..., pattern=FORMATION_PATTERN)
    starters: list[str]
    bench: list[str] = Field(default_factory=list)
    submitted_at: Optional[str] = None

    model_config = ConfigDict(extra='forbid')


class LineupsFile(BaseModel):
    """Complete lineups/matchday_N.json file structure."""

    matchday: int = Field(..., ge=1)
    lineups: dict[str, LineupRecord]
