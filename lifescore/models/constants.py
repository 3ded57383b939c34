"""Constants for lifescore.

This module centralizes all magic numbers and default values used by the scoring engine.
"""


# Task scoring
IMPORTANCE_MULTIPLIERS = {
    "high": 3,
    "medium": 2,
    "low": 1,
}
DEFAULT_IMPORTANCE_MULTIPLIER = 1

# Grouping key for tasks that belong to no pillar. Real pillar ids are UUIDs,
# so a leading underscore can never collide with one.
UNASSIGNED_PILLAR = "_unassigned"

# Passing-day thresholds (action score, 0-100)
DEFAULT_WEEKDAY_PASS_THRESHOLD = 70
DEFAULT_WEEKEND_PASS_THRESHOLD = 70

# XP and levels
STREAK_BONUS_MIN_DAYS = 3
STREAK_BONUS_PER_DAY = 2
XP_PER_LEVEL_STEP = 100
MAX_LEVEL = 99

LEVEL_TITLES = {
    1: "Beginner",
    2: "Novice",
    3: "Apprentice",
    4: "Journeyman",
    5: "Adept",
    6: "Expert",
    7: "Master",
    8: "Grandmaster",
    9: "Legend",
    10: "Mythic",
}

# Ratio bands shared by week scores, goal status and cycle pace
AHEAD_RATIO = 1.10
ON_TRACK_RATIO = 0.85
PARTIAL_RATIO = 0.50

# Twelve-week cycle: 84 days including the start day
CYCLE_LENGTH_DAYS = 84
DEFAULT_TOTAL_WEEKS = 12

# Reports
REPORT_DAYS = {
    "weekly": 7,
    "monthly": 30,
}
REPORT_RANKING_SIZE = 5
