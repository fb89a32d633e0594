"""Player rating and goal conversion functions."""

import math
from typing import Dict, Optional, Tuple

from .models import MatchEvent, Role
from .schemas import RuleSet


def _count(value) -> float:
    """Absent or undefined tallies count as zero."""
    return value or 0


def _parse_role(role):
    """Normalize a role; unknown values are kept and score as outfield players."""
    try:
        return Role.parse(role)
    except ValueError:
        return role


def score_player_event(
    event: Optional[MatchEvent], role: Role, rules: RuleSet
) -> Tuple[Optional[float], Dict[str, float]]:
    """
    Rate one player's matchday from their raw event tally.

    Scoring (default rules in brackets):
        - Did not play (no event, or minutes absent/0): no rating (None)
        - Base rating [6]
        - Minutes >= threshold [60]: minutes bonus [+0.5]
        - Goals: per-role bonus [GK 6, DEF 6, MID 4, FWD 3]
        - Assists [+1], yellow cards [-0.5], red card once [-1], own goals [-2]
        - Goalkeeper only: penalties saved [+3], goals conceded [-1],
          clean sheet with minutes >= threshold [+1]
        - Penalties scored [+3], penalties missed [-3]
        - Clamp to [min_score, max_score] [3, 10], always last

    Args:
        event: The player's MatchEvent, or None if no record exists
        role: Player role
        rules: Resolved rule set

    Returns:
        (rating, breakdown). The breakdown includes a 'clamp' entry when
        clamping changed the value, so it always sums to the rating.
    """
    breakdown: Dict[str, float] = {}

    # Single did-not-play gate
    if event is None or not event.minutes:
        return None, breakdown

    role = _parse_role(role)
    minutes = event.minutes
    points = rules.base_rating
    breakdown['base_rating'] = rules.base_rating

    if minutes >= rules.minutes_threshold:
        breakdown['minutes'] = rules.minutes_bonus
        points += rules.minutes_bonus

    goals = _count(event.goals)
    if goals:
        goal_pts = goals * rules.goal_bonus_for(role)
        breakdown['goals'] = goal_pts
        points += goal_pts

    assists = _count(event.assists)
    if assists:
        breakdown['assists'] = assists * rules.assist_bonus
        points += assists * rules.assist_bonus

    yellow_cards = _count(event.yellow_cards)
    if yellow_cards:
        breakdown['yellow_cards'] = -yellow_cards * rules.yellow_card_malus
        points -= yellow_cards * rules.yellow_card_malus

    # A second yellow arrives as the red flag, so this never double counts
    if event.red_card:
        breakdown['red_card'] = -rules.red_card_malus
        points -= rules.red_card_malus

    own_goals = _count(event.own_goals)
    if own_goals:
        breakdown['own_goals'] = -own_goals * rules.own_goal_malus
        points -= own_goals * rules.own_goal_malus

    if role == Role.GOALKEEPER:
        penalties_saved = _count(event.penalties_saved)
        if penalties_saved:
            breakdown['penalties_saved'] = penalties_saved * rules.penalty_saved_bonus
            points += penalties_saved * rules.penalty_saved_bonus

        goals_conceded = _count(event.goals_conceded)
        if goals_conceded:
            breakdown['goals_conceded'] = -goals_conceded * rules.goal_conceded_malus
            points -= goals_conceded * rules.goal_conceded_malus

        if goals_conceded == 0 and minutes >= rules.minutes_threshold:
            breakdown['clean_sheet'] = rules.clean_sheet_bonus
            points += rules.clean_sheet_bonus

    penalties_scored = _count(event.penalties_scored)
    if penalties_scored:
        breakdown['penalties_scored'] = penalties_scored * rules.penalty_scored_bonus
        points += penalties_scored * rules.penalty_scored_bonus

    penalties_missed = _count(event.penalties_missed)
    if penalties_missed:
        breakdown['penalties_missed'] = -penalties_missed * rules.penalty_missed_malus
        points -= penalties_missed * rules.penalty_missed_malus

    rating = max(rules.min_score, min(rules.max_score, points))
    if rating != points:
        breakdown['clamp'] = rating - points

    return rating, breakdown


def rate_player(event: Optional[MatchEvent], role: Role, rules: RuleSet) -> Optional[float]:
    """Rating for one player's matchday, or None if they did not play."""
    rating, _ = score_player_event(event, role, rules)
    return rating


def points_to_goals(total_score: float, rules: RuleSet) -> int:
    """
    Convert a team's fantasy total into goals for head-to-head fixtures.

    Scoring:
        - Below goal_threshold [66]: 0 goals
        - Otherwise: 1 goal plus 1 per full goal_interval [6] above the threshold

    Uses floor division so half-point totals never round up.
    """
    if total_score < rules.goal_threshold:
        return 0
    return 1 + math.floor((total_score - rules.goal_threshold) / rules.goal_interval)
