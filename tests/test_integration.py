"""Integration tests for the JSON matchday workflow."""

import json
import logging

import pytest

from fantalega.config import default_rules, resolve_rules
from fantalega.json_scorer import (
    build_lineup,
    load_events,
    load_lineups,
    load_match_results,
    load_players,
    save_matchday_results,
    score_matchday_from_json,
    update_standings_json,
)
from fantalega.models import Role
from fantalega.validators import validate_all_scores, validate_lineup

TEAMS = ['ROM', 'LAZ']
ROLES = ['P'] + ['D'] * 3 + ['C'] * 4 + ['A'] * 3 + ['P', 'D', 'C', 'A']


def write(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2))


def player_ids(team):
    """11 starters (3-4-3) then 4 bench players, one per role."""
    return [f'{team.lower()}{i}' for i in range(len(ROLES))]


@pytest.fixture
def data_dir(tmp_path):
    """Data directory with two teams, one matchday of events and lineups."""
    data_dir = tmp_path / 'data'

    players = []
    for team in TEAMS:
        for pid, role in zip(player_ids(team), ROLES):
            players.append({'id': pid, 'name': pid.title(), 'role': role, 'real_team': team})
    write(data_dir / 'players.json', {'players': players})

    write(data_dir / 'teams.json', {'teams': [
        {'id': 'ROM', 'name': 'Roma Fanta', 'owner': 'Alice'},
        {'id': 'LAZ', 'name': 'Lazio Fanta', 'owner': 'Bob'},
    ]})

    # ROM: everyone plays 90', two goals from forwards, keeper keeps a clean sheet.
    # LAZ: the starting keeper doesn't play (bench keeper comes in), one forward sent off.
    events = []
    for pid in player_ids('ROM')[:11]:
        events.append({'player_id': pid, 'minutes': 90})
    events[0]['goalsConceded'] = 0
    events[8]['goals'] = 1
    events[9]['goals'] = 1

    laz = player_ids('LAZ')
    for pid in laz[1:11]:
        events.append({'player_id': pid, 'minutes': 90})
    events.append({'player_id': laz[11], 'minutes': 90, 'goalsConceded': 2})
    events[-2]['redCard'] = True  # last LAZ starter
    write(data_dir / 'events' / 'matchday_1.json', {'matchday': 1, 'events': events})

    write(data_dir / 'lineups' / 'matchday_1.json', {
        'matchday': 1,
        'lineups': {
            team: {
                'formation': '3-4-3',
                'starters': player_ids(team)[:11],
                'bench': player_ids(team)[11:],
            }
            for team in TEAMS
        },
    })

    return data_dir


class TestLoading:
    """Tests for reading the data files."""

    def test_load_players(self, data_dir):
        """Test role codes are parsed into roles."""
        players = load_players(data_dir / 'players.json')
        assert len(players) == 30
        assert players['rom0'].role == Role.GOALKEEPER
        assert players['rom10'].role == Role.FORWARD

    def test_load_events_camel_case(self, data_dir):
        """Test camelCase event keys are accepted."""
        events = load_events(data_dir / 'events' / 'matchday_1.json')
        assert events[('rom0', 1)].goals_conceded == 0
        assert events[('laz10', 1)].red_card is True
        assert ('laz0', 1) not in events

    def test_duplicate_event_rejected(self, tmp_path):
        """Test two records for one player in one matchday are rejected."""
        path = tmp_path / 'events.json'
        write(path, {'matchday': 1, 'events': [
            {'player_id': 'p1', 'minutes': 90},
            {'player_id': 'p1', 'minutes': 45},
        ]})
        with pytest.raises(ValueError, match='Duplicate event'):
            load_events(path)

    def test_build_lineup_validates(self, data_dir):
        """Test built lineups pass caller-side validation."""
        players = load_players(data_dir / 'players.json')
        records = load_lineups(data_dir / 'lineups' / 'matchday_1.json', 1)
        lineup = build_lineup('ROM', 1, records['ROM'], players)
        assert lineup.starters[0].role == Role.GOALKEEPER
        assert validate_lineup(lineup, player_ids('ROM')) == []

    def test_unknown_player(self, data_dir):
        """Test a lineup naming an unknown player is rejected."""
        players = load_players(data_dir / 'players.json')
        records = load_lineups(data_dir / 'lineups' / 'matchday_1.json', 1)
        records['ROM'].starters.append('nobody')
        with pytest.raises(ValueError, match='nobody'):
            build_lineup('ROM', 1, records['ROM'], players)


class TestMatchdayWorkflow:
    """End-to-end: data files -> scores -> results -> standings."""

    def test_score_matchday(self, data_dir):
        """Test totals, substitutions and the settled fixture."""
        scores, results = score_matchday_from_json(data_dir, 1)

        # ROM: keeper 7.5, 8 outfielders at 6.5, two scoring forwards at 9.5 (78.5)
        assert scores['ROM'].total_score == 7.5 + 8 * 6.5 + 2 * 9.5
        assert scores['ROM'].substitutions_used == 0

        # LAZ: bench keeper 4.5, 9 outfielders at 6.5, sent-off forward at 5.5 (68.5)
        assert scores['LAZ'].total_score == 4.5 + 9 * 6.5 + 5.5
        assert scores['LAZ'].substitutions_used == 1

        assert len(results) == 1
        match = results[0]
        assert (match.home_team, match.away_team) == ('ROM', 'LAZ')
        assert (match.home_goals, match.away_goals) == (3, 1)

        errors, warnings = validate_all_scores(scores, default_rules())
        assert errors == []

    def test_league_rules_applied(self, data_dir):
        """Test a league override changes the outcome."""
        rules = resolve_rules({'max_substitutions': 0})
        scores, results = score_matchday_from_json(data_dir, 1, rules)
        assert scores['LAZ'].substitutions_used == 0
        assert scores['LAZ'].total_score == 9 * 6.5 + 5.5
        assert results[0].away_goals == 0

    def test_schedule_file_sets_fixtures(self, data_dir):
        """Test schedule.txt overrides sequential pairing."""
        (data_dir / 'schedule.txt').write_text('Matchday 1: LAZ vs ROM\n')
        _, results = score_matchday_from_json(data_dir, 1)
        assert (results[0].home_team, results[0].away_team) == ('LAZ', 'ROM')

    def test_missing_events_file(self, data_dir):
        """Test a matchday with no events scores everyone zero."""
        (data_dir / 'events' / 'matchday_1.json').unlink()
        scores, results = score_matchday_from_json(data_dir, 1)
        assert all(s.total_score == 0 for s in scores.values())
        assert (results[0].home_goals, results[0].away_goals) == (0, 0)

    def test_save_and_standings(self, data_dir):
        """Test saved results feed a freshly computed table."""
        rules = default_rules()
        scores, results = score_matchday_from_json(data_dir, 1, rules)
        results_dir = data_dir / 'results'
        save_matchday_results(results_dir / 'matchday_1.json', 1, scores, results, rules)

        saved = json.loads((results_dir / 'matchday_1.json').read_text())
        assert saved['rules_version'] == rules.version
        assert saved['teams'][0]['score_rank'] == 1
        laz = next(t for t in saved['teams'] if t['team'] == 'LAZ')
        assert [e['reason'] for e in laz['trace']].count('substituted') == 1

        assert load_match_results([results_dir / 'matchday_1.json']) == results

        standings = update_standings_json(
            results_dir / 'standings.json',
            [results_dir / 'matchday_1.json', results_dir / 'matchday_2.json'],
            TEAMS,
        )
        assert [row.team for row in standings] == ['ROM', 'LAZ']
        assert standings[0].league_points == 3
        assert standings[1].lost == 1

        table = json.loads((results_dir / 'standings.json').read_text())
        assert table['standings'][0]['team'] == 'ROM'


class TestDataDirectory:
    """Tests for per-league files in the data directory."""

    def test_lowercase_team_ids_in_schedule(self, data_dir):
        """Test scheduled fixtures match team ids written in lowercase."""
        write(data_dir / 'teams.json', {'teams': [
            {'id': 'roma', 'name': 'Roma Fanta'},
            {'id': 'lazio', 'name': 'Lazio Fanta'},
        ]})
        lineups = json.loads((data_dir / 'lineups' / 'matchday_1.json').read_text())
        lineups['lineups'] = {
            'roma': lineups['lineups']['ROM'],
            'lazio': lineups['lineups']['LAZ'],
        }
        write(data_dir / 'lineups' / 'matchday_1.json', lineups)
        (data_dir / 'schedule.txt').write_text('Matchday 1: lazio vs roma\n')

        _, results = score_matchday_from_json(data_dir, 1)
        assert len(results) == 1
        assert (results[0].home_team, results[0].away_team) == ('lazio', 'roma')
        assert (results[0].home_goals, results[0].away_goals) == (1, 3)

    def test_league_config_in_data_dir(self, data_dir):
        """Test the data directory's league config supplies the rules."""
        write(data_dir / 'league_config.json', {
            'name': 'Lega Piccola',
            'total_matchdays': 19,
            'rules': {'max_substitutions': 0},
        })
        scores, results = score_matchday_from_json(data_dir, 1)
        assert scores['LAZ'].substitutions_used == 0
        assert scores['LAZ'].total_score == 9 * 6.5 + 5.5
        assert results[0].away_goals == 0

    def test_events_matchday_mismatch(self, data_dir, caplog):
        """Test events are keyed by the requested matchday and the mismatch is logged."""
        path = data_dir / 'events' / 'matchday_1.json'
        events = json.loads(path.read_text())
        events['matchday'] = 2
        write(path, events)

        with caplog.at_level(logging.WARNING, logger='fantalega.json_scorer'):
            scores, _ = score_matchday_from_json(data_dir, 1)

        assert scores['ROM'].total_score == 7.5 + 8 * 6.5 + 2 * 9.5
        assert "Events file matchday (2) doesn't match" in caplog.text
        assert ('rom0', 2) in load_events(path)
