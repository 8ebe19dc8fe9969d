"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from .enums import SubjectGroup

DEFAULT_GROUP = SubjectGroup.READING
DEFAULT_TOTAL_SKILLS = 10
CHECKIN_TOKENS = 1
GOAL_WEEKS_HISTORY_LIMIT = 10
MIN_PASSWORD_LENGTH = 6
DEFAULT_SESSION_LIFETIME_HOURS = 24

GROUP_ICONS = {
    SubjectGroup.READING: "\U0001F4D6",
    SubjectGroup.MATH: "\U0001F522",
    SubjectGroup.WRITING: "✏️",
    SubjectGroup.BEHAVIOR: "\U0001F91D",
}
FALLBACK_ICON = "\U0001F4DA"

# Starter goals created for every new teacher account.
DEFAULT_WEEKLY_GOALS = (
    (SubjectGroup.READING, "2-syllable words", "Read 8 words correctly"),
    (SubjectGroup.MATH, "Addition with regrouping", "Solve 10 problems correctly"),
    (SubjectGroup.WRITING, "Complete sentences", "Write 5 complete sentences"),
    (SubjectGroup.BEHAVIOR, "Asking for help politely", 'Remember: "Excuse me, can you help me please?"'),
)
