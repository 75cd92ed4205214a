"""
Global constants for the scoring engine.

Centralizes point values, storage keys and naming tables used across
scorers and services.
"""

# Configuration store keys
BATCH_CONFIGURATIONS_KEY = "batchConfigurations"  # JSON map: batch name -> BatchCriteria
WEEKLY_SCORING_KEY = "isWeeklyScoringEnabled"  # "true" / "false"

# Batch used whenever a selector is missing or unknown
DEFAULT_BATCH = "sahadev"

# Invalid "HH:MM" parse result
INVALID_TIME = -1

# Morning program sub-activities and their fixed points.
# Evening arati, spiritual class and the diet flag are tracked but not scored.
PROGRAM_ACTIVITY_POINTS = {
    "mangala_arati": 10,
    "tulsi_arati": 5,
    "narsimha_arati": 5,
    "guru_puja": 5,
    "bhagavatam_class": 10,
}

# Shloka bonus when a batch has no entry in the registry's shloka_bonus table
DEFAULT_SHLOKA_BONUS = 10

# Lecture categories: entry field, criteria minimum field, criteria visibility flag
LECTURE_CATEGORIES = [
    ("sp_lecture_minutes", "sp_lecture_minimum", None),  # always shown
    ("sm_lecture_minutes", "sm_lecture_minimum", "show_sm_lecture"),
    ("gsns_lecture_minutes", "gsns_lecture_minimum", "show_gsns_lecture"),
    ("hgrsp_lecture_minutes", "hgrsp_lecture_minimum", "show_hgrsp_lecture"),
]

# Score categories in display order
SCORE_CATEGORIES = [
    "sleep_time_score",
    "wake_up_time_score",
    "reading_score",
    "day_sleep_score",
    "japa_completion_score",
    "program_score",
    "hearing_score",
    "shloka_score",
]

BODY_CATEGORIES = ["sleep_time_score", "wake_up_time_score", "day_sleep_score"]
SOUL_CATEGORIES = [
    "reading_score",
    "hearing_score",
    "japa_completion_score",
    "program_score",
    "shloka_score",
]

WEEKDAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]  # date.weekday() order
