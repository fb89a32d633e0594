"""Unit tests for standings and fixture scheduling."""

import pytest

from fantalega.models import MatchResult
from fantalega.schedule import get_matchday_fixtures, pair_sequential, parse_schedule_file
from fantalega.standings import compute_standings, compute_team_row


def match(matchday, home, away, home_goals, away_goals, home_score=66.0, away_score=66.0):
    return MatchResult(
        matchday=matchday,
        home_team=home,
        away_team=away,
        home_score=home_score,
        away_score=away_score,
        home_goals=home_goals,
        away_goals=away_goals,
    )


class TestTeamRow:
    """Tests for a single team's standings line."""

    def test_home_and_away(self):
        """Test results are read from the team's side of each fixture."""
        results = [
            match(1, 'ROM', 'LAZ', 2, 0, 75.0, 60.0),
            match(2, 'JUV', 'ROM', 1, 1, 70.0, 68.5),
            match(3, 'ROM', 'JUV', 0, 3, 58.0, 84.0),
        ]
        row = compute_team_row('ROM', results)
        assert (row.played, row.won, row.drawn, row.lost) == (3, 1, 1, 1)
        assert row.league_points == 4
        assert row.total_fantasy_points == 75.0 + 68.5 + 58.0

    def test_goals_decide_not_fantasy_points(self):
        """Test a draw on goals stays a draw even with more fantasy points."""
        row = compute_team_row('ROM', [match(1, 'ROM', 'LAZ', 1, 1, 71.5, 66.0)])
        assert row.drawn == 1
        assert row.won == 0

    def test_no_matches(self):
        """Test a team with no fixtures has an empty row."""
        row = compute_team_row('ROM', [match(1, 'LAZ', 'JUV', 1, 0)])
        assert row.played == 0
        assert row.league_points == 0


class TestStandings:
    """Tests for the full table."""

    def test_sorted_by_league_points(self):
        """Test 3 points for a win, 1 for a draw, highest first."""
        results = [
            match(1, 'ROM', 'LAZ', 2, 0),
            match(1, 'JUV', 'TOR', 1, 1),
        ]
        table = compute_standings(['ROM', 'LAZ', 'JUV', 'TOR'], results)
        assert table[0].team == 'ROM'
        assert table[0].league_points == 3
        assert table[-1].team == 'LAZ'
        assert table[-1].lost == 1

    def test_fantasy_points_break_ties(self):
        """Test equal league points are ordered by total fantasy points."""
        results = [
            match(1, 'ROM', 'LAZ', 1, 1, 66.0, 70.5),
        ]
        table = compute_standings(['ROM', 'LAZ'], results)
        assert [r.team for r in table] == ['LAZ', 'ROM']

    def test_team_id_is_final_tie_break(self):
        """Test identical rows come out in team id order regardless of input order."""
        results = [match(1, 'TOR', 'ATA', 1, 1, 66.0, 66.0)]
        assert [r.team for r in compute_standings(['TOR', 'ATA'], results)] == ['ATA', 'TOR']
        assert [r.team for r in compute_standings(['ATA', 'TOR'], results)] == ['ATA', 'TOR']

    def test_does_not_mutate_inputs(self):
        """Test inputs are left untouched and a fresh table is built each call."""
        results = [match(1, 'ROM', 'LAZ', 2, 0)]
        teams = ['ROM', 'LAZ']
        first = compute_standings(teams, results)
        second = compute_standings(teams, results)
        assert first == second
        assert first is not second
        assert teams == ['ROM', 'LAZ']
        assert results == [match(1, 'ROM', 'LAZ', 2, 0)]

    def test_season(self):
        """Test a small round robin."""
        results = [
            match(1, 'ROM', 'LAZ', 2, 1, 73.0, 67.0),
            match(1, 'JUV', 'TOR', 0, 0, 60.0, 62.5),
            match(2, 'LAZ', 'JUV', 1, 2, 66.5, 72.0),
            match(2, 'TOR', 'ROM', 1, 1, 69.0, 67.5),
            match(3, 'ROM', 'JUV', 0, 1, 61.0, 67.0),
            match(3, 'LAZ', 'TOR', 3, 0, 80.0, 55.0),
        ]
        table = compute_standings(['ROM', 'LAZ', 'JUV', 'TOR'], results)
        assert [(r.team, r.league_points) for r in table] == [
            ('JUV', 7),
            ('ROM', 4),
            ('LAZ', 3),
            ('TOR', 2),
        ]
        assert all(r.played == 3 for r in table)


class TestPairing:
    """Tests for sequential fixture pairing."""

    def test_even(self):
        """Test 1st v 2nd, 3rd v 4th."""
        assert pair_sequential(['A', 'B', 'C', 'D']) == [('A', 'B'), ('C', 'D')]

    def test_odd_last_team_sits_out(self):
        """Test the last team has no opponent with an odd count."""
        assert pair_sequential(['A', 'B', 'C']) == [('A', 'B')]

    def test_too_few(self):
        """Test no fixtures for fewer than two teams."""
        assert pair_sequential(['A']) == []
        assert pair_sequential([]) == []


class TestScheduleFile:
    """Tests for schedule.txt parsing."""

    def test_parse(self, tmp_path):
        """Test matchday lines, comments and vs/versus; team ids keep their case."""
        path = tmp_path / 'schedule.txt'
        path.write_text(
            '# Season 2024/25\n'
            'Matchday 1: ROM vs LAZ, JUV versus TOR\n'
            '\n'
            'Matchday 3: lazio vs roma, TOR vs JUV\n'
        )
        schedule = parse_schedule_file(path)
        assert schedule[0] == [('ROM', 'LAZ'), ('JUV', 'TOR')]
        assert schedule[1] == []
        assert schedule[2] == [('lazio', 'roma'), ('TOR', 'JUV')]

    def test_missing_file(self, tmp_path):
        """Test a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            parse_schedule_file(tmp_path / 'schedule.txt')

    def test_team_twice(self, tmp_path):
        """Test a team scheduled twice on one matchday is rejected."""
        path = tmp_path / 'schedule.txt'
        path.write_text('Matchday 1: ROM vs LAZ, ROM vs TOR\n')
        with pytest.raises(ValueError, match='twice'):
            parse_schedule_file(path)

    def test_bad_line(self, tmp_path):
        """Test a malformed line is rejected."""
        path = tmp_path / 'schedule.txt'
        path.write_text('Week 1: ROM vs LAZ\n')
        with pytest.raises(ValueError):
            parse_schedule_file(path)

    def test_fixtures_fall_back_to_pairing(self):
        """Test unscheduled matchdays use sequential pairing."""
        schedule = [[('LAZ', 'ROM')], []]
        teams = ['ROM', 'LAZ']
        assert get_matchday_fixtures(1, teams, schedule) == [('LAZ', 'ROM')]
        assert get_matchday_fixtures(2, teams, schedule) == [('ROM', 'LAZ')]
        assert get_matchday_fixtures(5, teams, schedule) == [('ROM', 'LAZ')]
        assert get_matchday_fixtures(1, teams) == [('ROM', 'LAZ')]
