"""Constants and default rule values for the fantalega scorer."""

# Bump whenever a default scoring constant changes
DEFAULT_RULES_VERSION = '2024.1'

# Default rating rules
BASE_RATING = 6.0
MINUTES_THRESHOLD = 60
MINUTES_BONUS = 0.5
MIN_SCORE = 3.0
MAX_SCORE = 10.0

# Goal bonus per role
GOAL_BONUS = {
    'goalkeeper': 6.0,
    'defender': 6.0,
    'midfielder': 4.0,
    'forward': 3.0,
}

# Bonus points
ASSIST_BONUS = 1.0
PENALTY_SCORED_BONUS = 3.0
PENALTY_SAVED_BONUS = 3.0
CLEAN_SHEET_BONUS = 1.0

# Malus points (stored as positive, subtracted in calculation)
YELLOW_CARD_MALUS = 0.5
RED_CARD_MALUS = 1.0
OWN_GOAL_MALUS = 2.0
PENALTY_MISSED_MALUS = 3.0
GOAL_CONCEDED_MALUS = 1.0

# Match result calculation
GOAL_THRESHOLD = 66.0  # Fantasy points for the first goal
GOAL_INTERVAL = 6.0    # Every N extra points = +1 goal

MAX_SUBSTITUTIONS = 3

# League points per fixture outcome
POINTS_FOR_WIN = 3
POINTS_FOR_DRAW = 1

# Serie A season length
TOTAL_MATCHDAYS = 38

# Single-letter role codes used in league data files
ROLE_CODES = {
    'P': 'goalkeeper',
    'D': 'defender',
    'C': 'midfielder',
    'A': 'forward',
}

# Roster composition
ROSTER_LIMITS = {
    'goalkeeper': 3,
    'defender': 8,
    'midfielder': 8,
    'forward': 6,
}
ROSTER_TOTAL = 25

# Allowed formations [defenders-midfielders-forwards]
ALLOWED_FORMATIONS = [
    '3-4-3',
    '3-5-2',
    '4-3-3',
    '4-4-2',
    '4-5-1',
    '5-3-2',
    '5-4-1',
]

# Legacy rule map keys -> RuleOverrides fields
LEGACY_BONUS_KEYS = {
    'GOAL_P': ('goal_bonus', 'goalkeeper'),
    'GOAL_D': ('goal_bonus', 'defender'),
    'GOAL_C': ('goal_bonus', 'midfielder'),
    'GOAL_A': ('goal_bonus', 'forward'),
    'ASSIST': ('assist_bonus', None),
    'PENALTY_SAVED': ('penalty_saved_bonus', None),
    'PENALTY_SCORED': ('penalty_scored_bonus', None),
    'CLEAN_SHEET': ('clean_sheet_bonus', None),
}
LEGACY_MALUS_KEYS = {
    'YELLOW_CARD': 'yellow_card_malus',
    'RED_CARD': 'red_card_malus',
    'OWN_GOAL': 'own_goal_malus',
    'PENALTY_MISSED': 'penalty_missed_malus',
    'GOAL_CONCEDED': 'goal_conceded_malus',
}
