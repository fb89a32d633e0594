"""Validation functions for lineups, rosters, and scoring results."""

from collections import Counter
from typing import Iterable, Mapping, Optional

from .config import get_allowed_formations, get_roster_limits
from .constants import ROSTER_TOTAL
from .models import Lineup, LineupPlayer, PlayerRating, Role, TeamScore
from .schemas import RuleSet

STARTERS_PER_TEAM = 11


def parse_formation(formation: str) -> Optional[tuple[int, int, int]]:
    """Split 'D-C-A' into role counts, or None if malformed."""
    parts = formation.split('-')
    if len(parts) != 3 or not all(p.isdigit() for p in parts):
        return None
    defenders, midfielders, forwards = (int(p) for p in parts)
    return defenders, midfielders, forwards


def validate_formation(
    formation: str,
    starters: Iterable[LineupPlayer],
    allowed: Optional[Iterable[str]] = None,
) -> list[str]:
    """
    Check that the starters' roles match the declared formation.

    Checks:
    - Formation is well formed and in the allowed list
    - Exactly one goalkeeper
    - Defender, midfielder and forward counts match the formation

    Returns:
        List of validation error messages (empty if valid)
    """
    allowed = list(allowed) if allowed is not None else get_allowed_formations()
    counts = parse_formation(formation)
    if counts is None:
        return [f'Invalid formation: {formation}']

    errors = []
    if formation not in allowed:
        errors.append(f'Formation {formation} not allowed (allowed: {", ".join(allowed)})')

    roles = Counter(p.role for p in starters)
    expected = {
        Role.GOALKEEPER: 1,
        Role.DEFENDER: counts[0],
        Role.MIDFIELDER: counts[1],
        Role.FORWARD: counts[2],
    }
    for role, count in expected.items():
        if roles[role] != count:
            errors.append(f'Formation {formation} needs {count} {role.value}(s), got {roles[role]}')

    return errors


def validate_lineup(
    lineup: Lineup,
    roster_ids: Iterable[str],
    allowed_formations: Optional[Iterable[str]] = None,
) -> list[str]:
    """
    Validate a lineup submission before it is stored.

    Checks:
    - Formation checks (see validate_formation)
    - Starter count is 1 + defenders + midfielders + forwards
    - Every player is on the team's roster
    - No duplicates, starters and bench disjoint

    Args:
        lineup: Lineup to check
        roster_ids: Player ids on the team's roster
        allowed_formations: Allowed formations (default: the league config)

    Returns:
        List of validation error messages (empty if valid)
    """
    team = lineup.team
    errors = [f'{team}: {e}' for e in validate_formation(
        lineup.formation, lineup.starters, allowed_formations
    )]

    counts = parse_formation(lineup.formation)
    if counts is not None:
        expected = 1 + sum(counts)
        if len(lineup.starters) != expected:
            errors.append(
                f'{team} lineup has {len(lineup.starters)} starters '
                f'({lineup.formation} needs {expected})'
            )

    roster = set(roster_ids)
    for player in [*lineup.starters, *lineup.bench]:
        if player.player_id not in roster:
            errors.append(f'{team} lineup has {player.label} who is not on the roster')

    all_ids = [p.player_id for p in [*lineup.starters, *lineup.bench]]
    duplicates = sorted(pid for pid, n in Counter(all_ids).items() if n > 1)
    if duplicates:
        errors.append(f'{team} lineup has duplicate players: {", ".join(duplicates)}')

    return errors


def validate_roster(team: str, roles: Mapping[str, Role], limits: Optional[Mapping] = None) -> list[str]:
    """
    Validate a roster's composition.

    Args:
        team: Team identifier
        roles: Player id -> role for every player on the roster
        limits: Max players per role (default: the league config)

    Returns:
        List of validation error messages (empty if valid)
    """
    if limits is None:
        limits = get_roster_limits()

    errors = []
    counts = Counter(Role.parse(role) for role in roles.values())
    for role, limit in limits.items():
        role = Role.parse(role)
        if counts[role] > limit:
            errors.append(f'{team} has {counts[role]} {role.value}s (max {limit})')

    if len(roles) > ROSTER_TOTAL:
        errors.append(f'{team} has {len(roles)} players (max {ROSTER_TOTAL})')

    return errors


def validate_player_rating(score: PlayerRating, rules: RuleSet) -> list[str]:
    """
    Check that a player's rating is internally consistent.

    Sanity checks:
    - Rating inside the clamp range
    - Breakdown adds up to the rating (within rounding)

    Returns:
        List of warning messages (empty if no issues)
    """
    warnings = []
    if score.rating is None:
        return warnings

    if not rules.min_score <= score.rating <= rules.max_score:
        warnings.append(
            f'{score.player_id} rated {score.rating:.1f} outside '
            f'[{rules.min_score}, {rules.max_score}] - check for scoring bug'
        )

    if score.breakdown:
        diff = abs(sum(score.breakdown.values()) - score.rating)
        if diff > 0.01:
            warnings.append(
                f'{score.player_id} breakdown differs from rating {score.rating:.1f} by {diff:.2f}'
            )

    return warnings


def validate_team_score(team: str, total: float, num_starters: int, rules: RuleSet) -> list[str]:
    """
    Check that a team's total is reachable under the rules.

    Sanity checks:
    - No negative totals
    - Total no higher than num_starters * max_score

    Returns:
        List of warning messages (empty if no issues)
    """
    warnings = []

    if total < 0:
        warnings.append(f'{team} scored {total:.1f} pts (negative total - check for scoring bug)')
    elif total > num_starters * rules.max_score:
        warnings.append(
            f'{team} scored {total:.1f} pts, more than {num_starters} starters '
            f'x {rules.max_score} - check for scoring bug'
        )

    return warnings


def validate_all_scores(
    scores: Mapping[str, TeamScore],
    rules: RuleSet,
) -> tuple[list[str], list[str]]:
    """
    Validate all team scores for a matchday.

    Returns:
        Tuple of (errors, warnings)
        - errors: Substitution rule violations that should stop the matchday
        - warnings: Issues to review but not block scoring
    """
    errors: list[str] = []
    warnings: list[str] = []

    for team, score in scores.items():
        if score.substitutions_used > rules.max_substitutions:
            errors.append(
                f'{team} made {score.substitutions_used} substitutions '
                f'(max {rules.max_substitutions})'
            )

        subs = Counter(e.substitute.player_id for e in score.trace if e.is_substitution)
        reused = sorted(pid for pid, n in subs.items() if n > 1)
        if reused:
            errors.append(f'{team} used bench players more than once: {", ".join(reused)}')

        num_starters = len(score.trace) or STARTERS_PER_TEAM
        warnings.extend(validate_team_score(team, score.total_score, num_starters, rules))

    return errors, warnings
