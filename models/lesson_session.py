"""Datenmodell für eine konkrete Unterrichtseinheit (Pydantic v2)."""

from datetime import date, time
from enum import Enum
from typing import Optional

from pydantic import BaseModel, field_validator, model_validator

from models.errors import InvalidInterval
from models.interval import TimeInterval


class LessonKind(str, Enum):
    GROUP = "group"
    INDIVIDUAL = "individual"


class SessionStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    RESCHEDULED = "rescheduled"


class LessonSession(BaseModel):
    """Eine datierte Unterrichtseinheit mit ihren Ressourcen-Bindungen.

    Die Reihenfolge von Beginn/Ende wird hier bewusst NICHT validiert:
    Datensätze kommen aus dem externen Speicher, und die Engine muss
    fehlerhafte Einheiten mit InvalidInterval ablehnen (siehe .interval).
    """

    id: str
    date: date
    start_time: time
    end_time: time
    branch_id: str                        # Filiale, immer gesetzt
    teacher_id: Optional[str] = None      # Einzelstunden evtl. noch ohne Lehrkraft
    classroom_id: Optional[str] = None    # Online-Einheiten haben keinen Raum
    group_id: Optional[str] = None        # nur bei Gruppenunterricht
    student_ids: list[str] = []
    kind: LessonKind = LessonKind.GROUP
    status: SessionStatus = SessionStatus.SCHEDULED
    subject: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("id", "branch_id")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Bezeichner darf nicht leer sein.")
        return v

    @field_validator("teacher_id", "classroom_id", "group_id")
    @classmethod
    def _strip_optional(cls, v: Optional[str]) -> Optional[str]:
        # "" aus Formularen/Importen gilt als "nicht gebunden"
        if v is None:
            return None
        v = v.strip()
        return v or None

    @field_validator("student_ids")
    @classmethod
    def _dedupe_students(cls, v: list[str]) -> list[str]:
        seen: dict[str, None] = {}
        for sid in v:
            sid = sid.strip()
            if sid:
                seen.setdefault(sid, None)
        return list(seen)

    @model_validator(mode="after")
    def _check_individual_roster(self):
        if self.kind == LessonKind.INDIVIDUAL and len(self.student_ids) > 1:
            raise ValueError(
                f"Einzelstunde {self.id} hat {len(self.student_ids)} Schüler (max. 1)."
            )
        return self

    # ─── Abgeleitete Werte ───

    @property
    def is_active(self) -> bool:
        """Abgesagte Einheiten zählen weder für Konflikte noch für Auslastung."""
        return self.status != SessionStatus.CANCELLED

    @property
    def interval(self) -> TimeInterval:
        """Validiertes Zeitintervall; wirft InvalidInterval bei Ende ≤ Beginn oder Sekundenanteil."""
        try:
            return TimeInterval(date=self.date, start=self.start_time, end=self.end_time)
        except InvalidInterval as e:
            raise InvalidInterval(f"Einheit {self.id}: {e}", session_id=self.id) from e

    @property
    def duration_minutes(self) -> int:
        return self.interval.duration_minutes

    @property
    def time_range(self) -> str:
        return self.interval.time_range

    def resource_ids(self, dimension: str) -> list[str]:
        """Ressourcen-IDs dieser Einheit in einer Dimension (teacher/classroom/student)."""
        if dimension == "teacher":
            return [self.teacher_id] if self.teacher_id else []
        if dimension == "classroom":
            return [self.classroom_id] if self.classroom_id else []
        if dimension == "student":
            return list(self.student_ids)
        raise ValueError(f"Unbekannte Dimension: {dimension}")


def validate_sessions(sessions: list[LessonSession]) -> None:
    """Prüft alle Intervalle vorab; die erste ungültige Einheit bricht ab."""
    for s in sessions:
        s.interval  # wirft InvalidInterval
