from .models import (
    Role,
    MatchEvent,
    PlayerRating,
    LineupPlayer,
    Lineup,
    SubstitutionEntry,
    TeamScore,
    TeamMatchOutcome,
    MatchResult,
    StandingsRow,
)
from .schemas import RuleSet, RuleOverrides, GoalBonusTable, LeagueConfig
from .config import default_rules, resolve_rules, overrides_from_legacy_maps
from .scoring import score_player_event, rate_player, points_to_goals
from .aggregator import aggregate_team_score
from .scorer import MatchdayScorer, event_source_from_mapping
from .standings import compute_standings
from .schedule import pair_sequential, parse_schedule_file, get_matchday_fixtures
from .json_scorer import (
    score_matchday_from_json,
    save_matchday_results,
    load_match_results,
    update_standings_json,
)

__all__ = [
    # Models
    'Role',
    'MatchEvent',
    'PlayerRating',
    'LineupPlayer',
    'Lineup',
    'SubstitutionEntry',
    'TeamScore',
    'TeamMatchOutcome',
    'MatchResult',
    'StandingsRow',
    # Rules
    'RuleSet',
    'RuleOverrides',
    'GoalBonusTable',
    'LeagueConfig',
    'default_rules',
    'resolve_rules',
    'overrides_from_legacy_maps',
    # Scoring
    'score_player_event',
    'rate_player',
    'points_to_goals',
    'aggregate_team_score',
    'MatchdayScorer',
    'event_source_from_mapping',
    'compute_standings',
    # Fixtures
    'pair_sequential',
    'parse_schedule_file',
    'get_matchday_fixtures',
    # JSON-based
    'score_matchday_from_json',
    'save_matchday_results',
    'load_match_results',
    'update_standings_json',
]
