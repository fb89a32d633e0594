"""Team score aggregation with automatic bench substitutions."""

from typing import Callable, List, Optional, Tuple

from .models import Lineup, LineupPlayer, SubstitutionEntry
from .schemas import RuleSet

# (player, matchday) -> rating, or None if the player did not play
RatingsLookup = Callable[[LineupPlayer, int], Optional[float]]


def find_substitute(
    starter: LineupPlayer,
    bench: List[LineupPlayer],
    used: set,
    matchday: int,
    ratings_lookup: RatingsLookup,
) -> Tuple[Optional[LineupPlayer], Optional[float]]:
    """
    Find the first eligible bench player for a starter who did not play.

    Eligible means same role, not already used as a substitute in this
    aggregation, and rated for the matchday. Bench order is priority order.

    Returns:
        (substitute, rating), or (None, None) if nobody qualifies
    """
    for candidate in bench:
        if candidate.role != starter.role or candidate.player_id in used:
            continue
        rating = ratings_lookup(candidate, matchday)
        if rating is not None:
            return candidate, rating
    return None, None


def aggregate_team_score(
    lineup: Lineup,
    matchday: int,
    ratings_lookup: RatingsLookup,
    rules: RuleSet,
) -> Tuple[float, List[SubstitutionEntry]]:
    """
    Total a lineup's ratings, substituting from the bench for starters who did not play.

    Starters are processed in lineup order. A starter without a rating is
    replaced by the first eligible bench player while fewer than
    rules.max_substitutions substitutions have been made; otherwise the
    slot contributes zero. Each bench player replaces at most one starter.

    Args:
        lineup: Submitted lineup (starters and bench in priority order)
        matchday: Matchday number
        ratings_lookup: Resolves (player, matchday) to a rating or None
        rules: Resolved rule set

    Returns:
        (total_score, trace) with one trace entry per starter slot
    """
    total = 0.0
    substitutions = 0
    used: set = set()
    trace: List[SubstitutionEntry] = []

    for starter in lineup.starters:
        rating = ratings_lookup(starter, matchday)
        if rating is not None:
            total += rating
            trace.append(SubstitutionEntry(starter, None, 'played', rating))
            continue

        if substitutions >= rules.max_substitutions:
            trace.append(SubstitutionEntry(starter, None, 'cap_reached'))
            continue

        substitute, sub_rating = find_substitute(
            starter, lineup.bench, used, matchday, ratings_lookup
        )
        if substitute is None:
            trace.append(SubstitutionEntry(starter, None, 'no_substitute'))
            continue

        used.add(substitute.player_id)
        substitutions += 1
        total += sub_rating
        trace.append(SubstitutionEntry(starter, substitute, 'substituted', sub_rating))

    return total, trace
