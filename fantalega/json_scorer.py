"""JSON-file data sources for matchday scoring.

Layout under the data directory:

    players.json                  {"players": [{"id", "name", "role", "real_team"}]}
    teams.json                    {"teams": [{"id", "name", "owner"}]}  (league order)
    events/matchday_N.json        {"matchday": N, "events": [{"player_id", "minutes", ...}]}
    lineups/matchday_N.json       {"matchday": N, "lineups": {team: {formation, starters, bench}}}
    league_config.json            optional league rules, see fantalega.config
    schedule.txt                  optional, see fantalega.schedule

Scored matchdays are written to results/matchday_N.json and the league
table to results/standings.json.
"""

import logging
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional

from .config import get_league_rules
from .models import Lineup, LineupPlayer, MatchEvent, MatchResult, StandingsRow, TeamScore
from .schedule import get_matchday_fixtures, parse_schedule_file
from .schemas import (
    EventsFile,
    LineupRecord,
    LineupsFile,
    PlayerRecord,
    PlayersFile,
    RuleSet,
    TeamRecord,
    TeamsFile,
)
from .scorer import MatchdayScorer, event_source_from_mapping
from .standings import compute_standings
from .utils import load_json, save_json

logger = logging.getLogger('fantalega.json_scorer')


def load_players(players_path: str | Path) -> dict[str, PlayerRecord]:
    """Load players.json as a dict of player id -> PlayerRecord."""
    players = load_json(players_path, schema=PlayersFile)
    return {p.id: p for p in players.players}


def load_teams(teams_path: str | Path) -> list[TeamRecord]:
    """Load teams.json. File order is league order (used for sequential pairing)."""
    return load_json(teams_path, schema=TeamsFile).teams


def load_events(
    events_path: str | Path,
    matchday: Optional[int] = None,
) -> dict[tuple[str, int], MatchEvent]:
    """Load a matchday's event tallies keyed by (player_id, matchday).

    Args:
        events_path: Path to events/matchday_N.json
        matchday: Expected matchday. On a mismatch with the file's own matchday
            a warning is logged and events are keyed by the expected one.
    """
    data = load_json(events_path, schema=EventsFile)
    if matchday is None:
        matchday = data.matchday
    elif data.matchday != matchday:
        logger.warning(
            f"Events file matchday ({data.matchday}) doesn't match expected matchday ({matchday})"
        )
    return {
        (record.player_id, matchday): record.to_event(matchday)
        for record in data.events
    }


def load_lineups(lineup_path: str | Path, matchday: int) -> dict[str, LineupRecord]:
    """Load lineup submissions for a matchday.

    Args:
        lineup_path: Path to lineups/matchday_N.json
        matchday: Expected matchday (a mismatch is logged, not fatal)

    Returns:
        Dict mapping team to LineupRecord
    """
    data = load_json(lineup_path, schema=LineupsFile)
    if data.matchday != matchday:
        logger.warning(
            f"Lineup file matchday ({data.matchday}) doesn't match expected matchday ({matchday})"
        )
    return data.lineups


def build_lineup(
    team: str,
    matchday: int,
    record: LineupRecord,
    players: dict[str, PlayerRecord],
) -> Lineup:
    """Build a Lineup, attaching each player's role and name.

    Raises:
        ValueError: If the lineup names a player missing from players.json
    """
    def entry(player_id: str) -> LineupPlayer:
        player = players.get(player_id)
        if player is None:
            raise ValueError(f'{team} lineup references unknown player {player_id}')
        return LineupPlayer(player_id=player.id, role=player.role, name=player.name)

    return Lineup(
        team=team,
        matchday=matchday,
        formation=record.formation,
        starters=[entry(pid) for pid in record.starters],
        bench=[entry(pid) for pid in record.bench],
    )


def score_matchday_from_json(
    data_dir: str | Path,
    matchday: int,
    rules: Optional[RuleSet] = None,
) -> tuple[dict[str, TeamScore], list[MatchResult]]:
    """Score a matchday and settle its fixtures from JSON data files.

    Args:
        data_dir: Data directory (see module docstring for layout)
        matchday: Matchday number
        rules: Resolved rule set (default: the rules in {data_dir}/league_config.json,
            or default_rules() if the data directory has no league config)

    Returns:
        Tuple of (team scores, match results)
    """
    data_dir = Path(data_dir)
    rules = rules or get_league_rules(data_dir / 'league_config.json')

    players = load_players(data_dir / 'players.json')
    teams = [t.id for t in load_teams(data_dir / 'teams.json')]

    events_path = data_dir / 'events' / f'matchday_{matchday}.json'
    if events_path.exists():
        events = load_events(events_path, matchday)
    else:
        logger.warning(f'No events for matchday {matchday}: every player is unrated')
        events = {}

    records = load_lineups(data_dir / 'lineups' / f'matchday_{matchday}.json', matchday)
    lineups = {
        team: build_lineup(team, matchday, record, players)
        for team, record in records.items()
    }

    schedule = None
    schedule_path = data_dir / 'schedule.txt'
    if schedule_path.exists():
        schedule = parse_schedule_file(schedule_path)
    fixtures = get_matchday_fixtures(matchday, teams, schedule)

    scorer = MatchdayScorer(rules, event_source_from_mapping(events))
    return scorer.settle_matchday(teams, lineups, matchday, fixtures)


def _trace_to_dict(score: TeamScore) -> list[dict]:
    return [
        {
            'starter': entry.starter.player_id,
            'substitute': entry.substitute.player_id if entry.substitute else None,
            'reason': entry.reason,
            'points': entry.points,
        }
        for entry in score.trace
    ]


def save_matchday_results(
    output_path: str | Path,
    matchday: int,
    scores: dict[str, TeamScore],
    results: list[MatchResult],
    rules: RuleSet,
) -> None:
    """Save a scored matchday to JSON.

    Args:
        output_path: Path to output JSON file
        matchday: Matchday number
        scores: Team scores from score_matchday_from_json
        results: Settled fixtures
        rules: Rule set used (its version is recorded)
    """
    teams_data = [
        {
            'team': team,
            'total_score': score.total_score,
            'substitutions': score.substitutions_used,
            'trace': _trace_to_dict(score),
        }
        for team, score in scores.items()
    ]

    ranked = sorted(teams_data, key=lambda t: t['total_score'], reverse=True)
    for rank, team_dict in enumerate(ranked, 1):
        team_dict['score_rank'] = rank

    save_json(output_path, {
        'matchday': matchday,
        'scored_at': datetime.now(timezone.utc).isoformat(),
        'rules_version': rules.version,
        'teams': teams_data,
        'matches': [asdict(r) for r in results],
    })
    logger.info(f'Scores saved to {output_path}')


def load_match_results(result_paths: Iterable[str | Path]) -> list[MatchResult]:
    """Load settled fixtures from saved matchday files, skipping missing ones."""
    results = []
    for path in result_paths:
        path = Path(path)
        if not path.exists():
            logger.warning(f'Skipping missing results file: {path}')
            continue
        data = load_json(path)
        results.extend(MatchResult(**match) for match in data.get('matches', []))
    return results


def update_standings_json(
    standings_path: str | Path,
    result_paths: Iterable[str | Path],
    teams: list[str],
) -> list[StandingsRow]:
    """Recompute standings from every saved matchday and write them out.

    The table is rebuilt from all results each time, never updated in place.

    Args:
        standings_path: Path to standings.json output
        result_paths: Paths to saved matchday result files
        teams: Team identifiers in the league

    Returns:
        Sorted standings rows
    """
    standings = compute_standings(teams, load_match_results(result_paths))

    save_json(standings_path, {
        'updated_at': datetime.now(timezone.utc).isoformat(),
        'standings': [asdict(row) for row in standings],
    })

    return standings
