"""Matchday scoring engine that ties ratings, lineups and fixtures together."""

import logging
from typing import Callable, Mapping, Optional, Sequence

from .aggregator import aggregate_team_score
from .models import (
    Lineup,
    LineupPlayer,
    MatchEvent,
    MatchResult,
    PlayerRating,
    TeamMatchOutcome,
    TeamScore,
)
from .schedule import pair_sequential
from .schemas import RuleSet
from .scoring import points_to_goals, score_player_event

logger = logging.getLogger('fantalega.scorer')

# (player_id, matchday) -> MatchEvent, or None if no record exists
EventSource = Callable[[str, int], Optional[MatchEvent]]


def event_source_from_mapping(events: Mapping[tuple[str, int], MatchEvent]) -> EventSource:
    """Wrap a {(player_id, matchday): MatchEvent} mapping as an event source."""
    def lookup(player_id: str, matchday: int) -> Optional[MatchEvent]:
        return events.get((player_id, matchday))
    return lookup


class MatchdayScorer:
    """
    Scores lineups and settles fixtures for one league.

    The rule set is injected once and never looked up globally; events come
    from whatever store the caller wraps as an EventSource.
    """

    def __init__(self, rules: RuleSet, event_source: EventSource):
        """
        Initialize scorer.

        Args:
            rules: Resolved rule set for the league
            event_source: Callable returning a player's MatchEvent for a matchday
        """
        self.rules = rules
        self.event_source = event_source

    def rate(self, player: LineupPlayer, matchday: int) -> PlayerRating:
        """
        Rate a single player for a matchday.

        Returns:
            PlayerRating with rating (None if the player did not play) and breakdown
        """
        event = self.event_source(player.player_id, matchday)
        result = PlayerRating(player_id=player.player_id, role=player.role, matchday=matchday)
        result.found_in_events = event is not None
        result.rating, result.breakdown = score_player_event(event, player.role, self.rules)
        return result

    def ratings_lookup(self, player: LineupPlayer, matchday: int) -> Optional[float]:
        """Rating only; the shape the aggregator expects."""
        return self.rate(player, matchday).rating

    def score_lineup(self, lineup: Lineup) -> TeamScore:
        """Score a lineup, applying automatic bench substitutions."""
        total, trace = aggregate_team_score(
            lineup, lineup.matchday, self.ratings_lookup, self.rules
        )
        score = TeamScore(
            team=lineup.team, matchday=lineup.matchday, total_score=total, trace=trace
        )

        for entry in trace:
            if entry.is_substitution:
                logger.info(
                    f'{lineup.team}: {entry.substitute.label} ({entry.points:.1f}) '
                    f'replaces {entry.starter.label}'
                )
            elif entry.reason != 'played':
                logger.info(f'{lineup.team}: {entry.starter.label} did not play ({entry.reason})')

        logger.debug(f'{lineup.team} matchday {lineup.matchday}: {total:.1f} pts')
        return score

    def score_teams(
        self,
        teams: Sequence[str],
        lineups: Mapping[str, Lineup],
        matchday: int,
    ) -> dict[str, TeamScore]:
        """
        Score every team for a matchday.

        A team that submitted no lineup scores 0 with an empty trace.

        Returns:
            Dict mapping team to TeamScore, in the order of teams
        """
        logger.info(f'Scoring matchday {matchday} for {len(teams)} teams')

        results = {}
        for team in teams:
            lineup = lineups.get(team)
            if lineup is None:
                logger.warning(f'{team} submitted no lineup for matchday {matchday}')
                results[team] = TeamScore(team=team, matchday=matchday)
                continue
            results[team] = self.score_lineup(lineup)

        return results

    def outcome(self, score: TeamScore) -> TeamMatchOutcome:
        """Convert a team score into one side of a fixture."""
        return TeamMatchOutcome(
            total_score=score.total_score,
            goals=points_to_goals(score.total_score, self.rules),
        )

    def settle_fixture(self, home: TeamScore, away: TeamScore) -> MatchResult:
        """Settle a head-to-head fixture from both teams' scores."""
        home_side = self.outcome(home)
        away_side = self.outcome(away)
        result = MatchResult(
            matchday=home.matchday,
            home_team=home.team,
            away_team=away.team,
            home_score=home_side.total_score,
            away_score=away_side.total_score,
            home_goals=home_side.goals,
            away_goals=away_side.goals,
        )
        logger.info(
            f'Matchday {result.matchday}: {result.home_team} {result.home_goals}-'
            f'{result.away_goals} {result.away_team} '
            f'({result.home_score:.1f} - {result.away_score:.1f})'
        )
        return result

    def settle_matchday(
        self,
        teams: Sequence[str],
        lineups: Mapping[str, Lineup],
        matchday: int,
        fixtures: Optional[Sequence[tuple[str, str]]] = None,
    ) -> tuple[dict[str, TeamScore], list[MatchResult]]:
        """
        Score all teams and settle the matchday's fixtures.

        Args:
            teams: Team identifiers in league order
            lineups: Lineups by team
            matchday: Matchday number
            fixtures: (home, away) pairs; defaults to sequential pairing of teams

        Returns:
            (team scores, match results)
        """
        scores = self.score_teams(teams, lineups, matchday)
        if fixtures is None:
            fixtures = pair_sequential(teams)

        results = []
        for home, away in fixtures:
            if home not in scores or away not in scores:
                logger.warning(f'Skipping fixture {home} v {away}: team not in league')
                continue
            results.append(self.settle_fixture(scores[home], scores[away]))

        return scores, results
