from models.errors import (
    SchedulingError,
    InvalidInterval,
    UnknownResource,
    SubstituteUnavailable,
    StaleApproval,
    InvalidTransition,
)
from models.interval import TimeInterval, overlaps
from models.lesson_session import LessonSession, LessonKind, SessionStatus
from models.substitution import SubstitutionRequest, SubstitutionStatus, StatusChange
from models.teacher import Teacher
from models.snapshot import ScheduleSnapshot

__all__ = [
    "SchedulingError",
    "InvalidInterval",
    "UnknownResource",
    "SubstituteUnavailable",
    "StaleApproval",
    "InvalidTransition",
    "TimeInterval",
    "overlaps",
    "LessonSession",
    "LessonKind",
    "SessionStatus",
    "SubstitutionRequest",
    "SubstitutionStatus",
    "StatusChange",
    "Teacher",
    "ScheduleSnapshot",
]
