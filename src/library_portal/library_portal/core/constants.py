"""Defaults shared across feature modules."""

DEFAULT_ATTENDANCE_GOAL = 20
DEFAULT_HISTORY_LIMIT = 10
DEFAULT_ANNOUNCEMENT_LIMIT = 5
DEFAULT_CHECKIN_COOLDOWN_MINUTES = 10
DEFAULT_PURPOSE = "Study"
WEEKLY_WINDOW_DAYS = 7
STREAK_LOOKBACK_DAYS = 365
ALL_TIME_REPORT_START = "2020-01-01"

IN_PROGRESS_LABEL = "In Progress"
STILL_IN_LABEL = "Still In"
GOAL_ACHIEVED_MESSAGE = "Goal achieved!"
