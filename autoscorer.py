#!/usr/bin/env python3
"""
Fantalega Autoscorer CLI

Scores a matchday's lineups from JSON data files, settles the head-to-head
fixtures and optionally rebuilds the league table.

Events come from data/events/matchday_{N}.json
Lineups come from data/lineups/matchday_{N}.json
League rules come from data/league_config.json (default rules if absent)

Usage:
    python autoscorer.py --matchday 1
    python autoscorer.py --matchday 1 --update-standings
    python autoscorer.py --matchday 1 --output results/md1.json --quiet
"""

import argparse
import logging
import sys
from pathlib import Path

from fantalega.config import get_league_rules, get_total_matchdays
from fantalega.json_scorer import (
    load_teams,
    save_matchday_results,
    score_matchday_from_json,
    update_standings_json,
)
from fantalega.logging_config import setup_logging
from fantalega.validators import validate_all_scores


def main():
    parser = argparse.ArgumentParser(description="Fantalega matchday autoscorer")
    parser.add_argument(
        "--matchday", "-m",
        type=int,
        required=True,
        help="Matchday number to score",
    )
    parser.add_argument(
        "--data-dir", "-d",
        default="data",
        help="Path to data directory",
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Output path for the scored matchday (defaults to {data-dir}/results/matchday_{N}.json)",
    )
    parser.add_argument(
        "--update-standings",
        action="store_true",
        help="Rebuild standings from every scored matchday",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log warnings and errors",
    )

    args = parser.parse_args()

    logger = setup_logging(
        level=logging.WARNING if args.quiet else logging.INFO,
        log_to_file=not args.quiet,
    )

    data_dir = Path(args.data_dir)
    results_dir = data_dir / "results"
    lineup_path = data_dir / "lineups" / f"matchday_{args.matchday}.json"
    output_path = Path(args.output) if args.output else results_dir / f"matchday_{args.matchday}.json"

    if not lineup_path.exists():
        logger.warning(f"Lineup file not found: {lineup_path}")
        logger.warning("Lineups need to be submitted before scoring.")
        sys.exit(0)

    config_path = data_dir / "league_config.json"
    try:
        rules = get_league_rules(config_path)
        total_matchdays = get_total_matchdays(config_path)
    except ValueError as e:
        logger.error(f"Invalid league config: {e}")
        sys.exit(1)

    if not 1 <= args.matchday <= total_matchdays:
        logger.error(f"Matchday {args.matchday} is outside the season (1-{total_matchdays})")
        sys.exit(1)

    logger.info(f"Scoring matchday {args.matchday} (rules {rules.version})...")
    scores, results = score_matchday_from_json(data_dir, args.matchday, rules)

    errors, warnings = validate_all_scores(scores, rules)
    for warning in warnings:
        logger.warning(warning)
    if errors:
        for error in errors:
            logger.error(error)
        sys.exit(1)

    ranked = sorted(scores.values(), key=lambda s: s.total_score, reverse=True)
    for rank, score in enumerate(ranked, 1):
        logger.info(f"  {rank}. {score.team}: {score.total_score:.1f} pts "
                    f"({score.substitutions_used} subs)")

    save_matchday_results(output_path, args.matchday, scores, results, rules)

    if args.update_standings:
        teams = [t.id for t in load_teams(data_dir / "teams.json")]
        standings_path = results_dir / "standings.json"
        update_standings_json(standings_path, sorted(results_dir.glob("matchday_*.json")), teams)
        logger.info(f"Standings updated: {standings_path}")


if __name__ == "__main__":
    main()
