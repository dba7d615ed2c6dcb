"""Datenmodell für einen Vertretungsantrag (Pydantic v2)."""

from datetime import date, datetime, time
from enum import Enum
from typing import Optional

from pydantic import BaseModel, model_validator

from models.interval import TimeInterval


class SubstitutionStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Erlaubte Übergänge; completed/cancelled sind Endzustände.
ALLOWED_TRANSITIONS: dict[SubstitutionStatus, set[SubstitutionStatus]] = {
    SubstitutionStatus.PENDING: {SubstitutionStatus.APPROVED, SubstitutionStatus.CANCELLED},
    SubstitutionStatus.APPROVED: {SubstitutionStatus.COMPLETED, SubstitutionStatus.CANCELLED},
    SubstitutionStatus.COMPLETED: set(),
    SubstitutionStatus.CANCELLED: set(),
}


class StatusChange(BaseModel):
    """Ein Eintrag im Statusverlauf eines Antrags."""

    from_status: SubstitutionStatus
    to_status: SubstitutionStatus
    changed_at: datetime


class SubstitutionRequest(BaseModel):
    """Antrag: Lehrkraft A wird an einem Datum im Slot [start, end) durch B vertreten.

    Die Verfügbarkeit von B wird beim Anlegen nur beratend geprüft; verbindlich
    ist erst die erneute Prüfung bei der Genehmigung.
    """

    id: str
    original_teacher_id: str
    substitute_teacher_id: str
    substitution_date: date
    start_time: time
    end_time: time
    status: SubstitutionStatus = SubstitutionStatus.PENDING
    reason: Optional[str] = None
    lesson_session_id: Optional[str] = None  # vertretene Einheit
    notes: Optional[str] = None
    created_by: Optional[str] = None
    history: list[StatusChange] = []

    @model_validator(mode="after")
    def _check_distinct_teachers(self):
        if self.substitute_teacher_id == self.original_teacher_id:
            raise ValueError(
                f"Vertretung {self.id}: Vertretung und Original sind dieselbe "
                f"Lehrkraft ({self.original_teacher_id})."
            )
        return self

    @property
    def slot(self) -> TimeInterval:
        return TimeInterval(date=self.substitution_date, start=self.start_time, end=self.end_time)

    @property
    def is_terminal(self) -> bool:
        return not ALLOWED_TRANSITIONS[self.status]

    def can_transition_to(self, target: SubstitutionStatus) -> bool:
        return target in ALLOWED_TRANSITIONS[self.status]
