"""
Application constants
"""

# Habit kinds
HABIT_KIND_BUILD = "build"
HABIT_KIND_AVOID = "avoid"
HABIT_KINDS = (HABIT_KIND_BUILD, HABIT_KIND_AVOID)

# Penalty stacking formulas for build habits
PENALTY_STACKING_ADDITIVE = "additive"   # base + base * level
PENALTY_STACKING_DOUBLING = "doubling"   # base * 2 ** level
PENALTY_STACKING_MODES = (PENALTY_STACKING_ADDITIVE, PENALTY_STACKING_DOUBLING)

# Every violation adds exactly this much debt; a clean day removes the same
DEBT_PER_VIOLATION = 1
DEBT_PER_CLEAN_DAY = 1

# ISO day key format used in requests and storage
DAY_FORMAT = "%Y-%m-%d"

# Request header carrying the caller's identity
OWNER_HEADER = "X-User-Id"

# Scheduler job ids
ROLLOVER_JOB_ID = "day_rollover"
