"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

PASSWORD_MIN_LENGTH = 6

FULL_NAME_MIN_LENGTH = 2
FULL_NAME_MAX_LENGTH = 100

STUDENT_ID_MIN_LENGTH = 3
STUDENT_ID_MAX_LENGTH = 20
STUDENT_TEXT_MIN_LENGTH = 2
STUDENT_TEXT_MAX_LENGTH = 100
ATTENDANCE_TIME_MAX_LENGTH = 32
YEAR_MIN, YEAR_MAX = 1, 10
SEMESTER_MIN, SEMESTER_MAX = 1, 8

DATE_FORMAT = "%Y-%m-%d"
DEFAULT_STORE_TIMEOUT_SECONDS = 5.0
DEFAULT_MATCH_PROBABILITY = 0.55
DEFAULT_SESSION_DAYS = 7
