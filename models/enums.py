import enum


class ProgressStatus(str, enum.Enum):
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class BadgeType(str, enum.Enum):
    MODULE_COMPLETION = "MODULE_COMPLETION"
    QUIZ_PASS = "QUIZ_PASS"
    COURSE_COMPLETION = "COURSE_COMPLETION"
    STREAK = "STREAK"


class UserRole(str, enum.Enum):
    STUDENT = "student"
    INSTRUCTOR = "instructor"
