"""Fixture pairing and schedule parsing.

Fixtures come from a schedule.txt file when the league has one:

    # Season 2024/25
    Matchday 1: ROM vs LAZ, JUV versus TOR
    Matchday 2: LAZ vs JUV, TOR vs ROM

Team ids are kept exactly as written and must match teams.json. The first
team of each pair plays at home. Without a schedule, teams are
paired sequentially in league order: 1st v 2nd, 3rd v 4th, and so on.
"""

import re
from pathlib import Path
from typing import Optional, Sequence

MATCHDAY_LINE = re.compile(r'^Matchday\s+(\d+)\s*:\s*(.+)$', re.IGNORECASE)
FIXTURE = re.compile(r'^(\S+)\s+(?:versus|vs\.?|v)\s+(\S+)$', re.IGNORECASE)


def pair_sequential(teams: Sequence[str]) -> list[tuple[str, str]]:
    """Pair teams in order as (home, away). With an odd count the last team sits out."""
    return [(teams[i], teams[i + 1]) for i in range(0, len(teams) - 1, 2)]


def parse_schedule_file(schedule_path: str | Path) -> list[list[tuple[str, str]]]:
    """Parse schedule.txt into fixtures per matchday.

    Args:
        schedule_path: Path to schedule.txt file

    Returns:
        List indexed by matchday - 1, each a list of (home, away) tuples.
        Matchdays missing from the file are empty lists.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If a fixture can't be parsed or a team plays twice in a matchday
    """
    schedule_path = Path(schedule_path)
    if not schedule_path.exists():
        raise FileNotFoundError(f'Schedule file not found: {schedule_path}')

    matchdays: list[list[tuple[str, str]]] = []

    with open(schedule_path) as f:
        for line_no, line in enumerate(f, 1):
            line = line.strip()
            if not line or line.startswith('#'):
                continue

            match = MATCHDAY_LINE.match(line)
            if not match:
                raise ValueError(f'{schedule_path}:{line_no}: not a matchday line: {line}')

            matchday = int(match.group(1))
            fixtures = []
            seen: set[str] = set()
            for fixture in match.group(2).split(','):
                teams_match = FIXTURE.match(fixture.strip())
                if not teams_match:
                    raise ValueError(f'{schedule_path}:{line_no}: bad fixture: {fixture.strip()}')
                home, away = teams_match.group(1), teams_match.group(2)
                if home in seen or away in seen or home == away:
                    raise ValueError(
                        f'{schedule_path}:{line_no}: team scheduled twice on matchday {matchday}'
                    )
                seen.update((home, away))
                fixtures.append((home, away))

            while len(matchdays) < matchday:
                matchdays.append([])
            matchdays[matchday - 1] = fixtures

    return matchdays


def get_matchday_fixtures(
    matchday: int,
    teams: Sequence[str],
    schedule: Optional[list[list[tuple[str, str]]]] = None,
) -> list[tuple[str, str]]:
    """Fixtures for a matchday: scheduled ones if available, else sequential pairing."""
    if schedule and matchday <= len(schedule) and schedule[matchday - 1]:
        return list(schedule[matchday - 1])
    return pair_sequential(teams)
