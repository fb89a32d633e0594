"""League configuration and rule set resolution."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from . import constants
from .models import Role
from .schemas import LeagueConfig, RuleOverrides, RuleSet
from .utils import load_json

logger = logging.getLogger('fantalega.config')


@lru_cache(maxsize=1)
def default_rules() -> RuleSet:
    """
    Build the versioned default rule set.

    Built once per process and passed explicitly into every calculation.

    Example:
        from fantalega.config import default_rules
        rules = default_rules()
        print(f"Rules version: {rules.version}")
    """
    return RuleSet(
        version=constants.DEFAULT_RULES_VERSION,
        base_rating=constants.BASE_RATING,
        minutes_threshold=constants.MINUTES_THRESHOLD,
        minutes_bonus=constants.MINUTES_BONUS,
        goal_bonus=dict(constants.GOAL_BONUS),
        assist_bonus=constants.ASSIST_BONUS,
        yellow_card_malus=constants.YELLOW_CARD_MALUS,
        red_card_malus=constants.RED_CARD_MALUS,
        own_goal_malus=constants.OWN_GOAL_MALUS,
        penalty_scored_bonus=constants.PENALTY_SCORED_BONUS,
        penalty_missed_malus=constants.PENALTY_MISSED_MALUS,
        penalty_saved_bonus=constants.PENALTY_SAVED_BONUS,
        goal_conceded_malus=constants.GOAL_CONCEDED_MALUS,
        clean_sheet_bonus=constants.CLEAN_SHEET_BONUS,
        min_score=constants.MIN_SCORE,
        max_score=constants.MAX_SCORE,
        goal_threshold=constants.GOAL_THRESHOLD,
        goal_interval=constants.GOAL_INTERVAL,
        max_substitutions=constants.MAX_SUBSTITUTIONS,
    )


def resolve_rules(
    overrides: Optional[RuleOverrides | dict] = None,
    base: Optional[RuleSet] = None,
) -> RuleSet:
    """
    Merge a league's partial override onto a base rule set.

    Every field the override leaves unset keeps the base value; the goal
    bonus table is merged per role.

    Args:
        overrides: RuleOverrides (or a dict of its fields); None = use defaults
        base: Rule set to merge onto (default: default_rules())

    Returns:
        Validated RuleSet

    Raises:
        pydantic.ValidationError: If the override is malformed or the merged
            rules break an invariant (min_score > max_score, goal_interval <= 0)
    """
    base = base or default_rules()
    if overrides is None:
        return base
    if isinstance(overrides, dict):
        overrides = RuleOverrides.model_validate(overrides)

    merged = base.model_dump()
    changes = overrides.model_dump(exclude_none=True)
    goal_bonus = changes.pop('goal_bonus', {})
    merged.update(changes)
    merged['goal_bonus'].update(goal_bonus)

    return RuleSet.model_validate(merged)


def overrides_from_legacy_maps(
    bonus: Optional[dict[str, float]] = None,
    malus: Optional[dict[str, float]] = None,
    **scalars,
) -> RuleOverrides:
    """
    Convert key/value bonus and malus maps into a RuleOverrides.

    Keys follow the league document format (GOAL_A, ASSIST, YELLOW_CARD, ...).
    Extra keyword arguments are passed through as scalar fields
    (e.g. goal_threshold=70).

    Raises:
        ValueError: If a map contains an unknown key
    """
    fields: dict = dict(scalars)
    goal_bonus: dict[str, float] = {}

    for key, value in (bonus or {}).items():
        if key not in constants.LEGACY_BONUS_KEYS:
            raise ValueError(f'Unknown bonus key: {key}')
        field_name, role = constants.LEGACY_BONUS_KEYS[key]
        if role:
            goal_bonus[role] = value
        else:
            fields[field_name] = value

    for key, value in (malus or {}).items():
        if key not in constants.LEGACY_MALUS_KEYS:
            raise ValueError(f'Unknown malus key: {key}')
        fields[constants.LEGACY_MALUS_KEYS[key]] = value

    if goal_bonus:
        fields['goal_bonus'] = goal_bonus

    return RuleOverrides.model_validate(fields)


CONFIG_PATH = Path(__file__).parent.parent / 'data' / 'league_config.json'


@lru_cache(maxsize=8)
def get_config(config_path: Optional[Path] = None) -> LeagueConfig:
    """
    Load league configuration, by default from data/league_config.json.

    Configuration is cached per path after first load.

    Args:
        config_path: League config file (default: the bundled data/league_config.json)

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ValueError: If config file has invalid structure
    """
    return load_json(config_path or CONFIG_PATH, schema=LeagueConfig)


def _find_config(config_path: Optional[Path]) -> Optional[LeagueConfig]:
    """League config if the file exists, else None (league defaults apply)."""
    path = Path(config_path or CONFIG_PATH)
    if not path.exists():
        logger.info(f'No league config at {path}, using defaults')
        return None
    return get_config(path)


def get_league_rules(config_path: Optional[Path] = None) -> RuleSet:
    """Get the resolved rule set for a league, or the default rules without a config file."""
    config = _find_config(config_path)
    if config is None:
        return default_rules()
    return resolve_rules(config.rules)


def get_allowed_formations(config_path: Optional[Path] = None) -> list[str]:
    """Get allowed formations, falling back to the defaults."""
    config = _find_config(config_path)
    if config is None or not config.allowed_formations:
        return list(constants.ALLOWED_FORMATIONS)
    return list(config.allowed_formations)


def get_roster_limits(config_path: Optional[Path] = None) -> dict[Role, int]:
    """Get maximum players per role, falling back to the defaults."""
    limits = {Role(role): count for role, count in constants.ROSTER_LIMITS.items()}
    config = _find_config(config_path)
    if config is not None:
        limits.update(config.roster_limits)
    return limits


def get_total_matchdays(config_path: Optional[Path] = None) -> int:
    """Get number of matchdays in the season."""
    config = _find_config(config_path)
    if config is None:
        return constants.TOTAL_MATCHDAYS
    return config.total_matchdays


def clear_config_cache() -> None:
    """
    Clear the configuration cache.

    Use this if the config file is modified during runtime.
    """
    get_config.cache_clear()
