"""League table calculation from settled match results."""

from typing import Iterable, List

from .constants import POINTS_FOR_DRAW, POINTS_FOR_WIN
from .models import MatchResult, StandingsRow


def compute_team_row(team: str, match_results: Iterable[MatchResult]) -> StandingsRow:
    """
    Fold every fixture a team played into its standings row.

    Goals decide win/draw/loss; fantasy points are summed as a tie-break metric.
    """
    row = StandingsRow(team=team)

    for match in match_results:
        if match.home_team == team:
            own_goals, opp_goals, own_score = match.home_goals, match.away_goals, match.home_score
        elif match.away_team == team:
            own_goals, opp_goals, own_score = match.away_goals, match.home_goals, match.away_score
        else:
            continue

        row.played += 1
        row.total_fantasy_points += own_score

        if own_goals > opp_goals:
            row.won += 1
        elif own_goals == opp_goals:
            row.drawn += 1
        else:
            row.lost += 1

    row.league_points = POINTS_FOR_WIN * row.won + POINTS_FOR_DRAW * row.drawn
    return row


def compute_standings(teams: Iterable[str], match_results: Iterable[MatchResult]) -> List[StandingsRow]:
    """
    Build the league table from scratch.

    Ordering: league points desc, total fantasy points desc, then team
    identifier asc so equal rows always come out in the same order.

    Args:
        teams: Team identifiers in the league
        match_results: Every settled fixture of the season

    Returns:
        StandingsRow list, first place first
    """
    match_results = list(match_results)
    rows = [compute_team_row(team, match_results) for team in teams]

    return sorted(rows, key=lambda r: (-r.league_points, -r.total_fantasy_points, r.team))
