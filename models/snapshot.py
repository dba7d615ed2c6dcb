"""ScheduleSnapshot: konsistente, schreibgeschützte Sicht auf den Stundenplan (Pydantic v2)."""

from collections import Counter
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from models.lesson_session import LessonSession, SessionStatus
from models.substitution import SubstitutionRequest
from models.teacher import Teacher


class ScheduleSnapshot(BaseModel):
    """Einheiten, Lehrkräfte-Verzeichnis und Vertretungen zu einem Zeitpunkt.

    Alle Auswertungen eines Aufrufs laufen gegen denselben Snapshot, damit
    Batch-Ergebnisse nicht von der Ausführungsreihenfolge abhängen.
    """

    sessions: list[LessonSession]
    teachers: list[Teacher] = []
    substitutions: list[SubstitutionRequest] = []
    created_at: Optional[datetime] = None
    data_version: str = "1.0"

    # ─── Übersicht ───

    def summary(self) -> str:
        """Kurze Übersicht über den Datensatz."""
        by_status = Counter(s.status for s in self.sessions)
        dates = sorted({s.date for s in self.sessions})
        lines = [
            f"Einheiten: {len(self.sessions)} "
            f"({by_status[SessionStatus.CANCELLED]} abgesagt)",
            f"Zeitraum: {dates[0].isoformat()} – {dates[-1].isoformat()}" if dates else "",
            f"Filialen: {len({s.branch_id for s in self.sessions})}",
            f"Räume: {len({s.classroom_id for s in self.sessions if s.classroom_id})}",
            f"Lehrkräfte: {len(self.teachers)}",
            f"Vertretungen: {len(self.substitutions)}",
        ]
        return "\n".join(l for l in lines if l)

    # ─── Filter ───

    def sessions_on(self, day: date, branch_id: Optional[str] = None) -> list[LessonSession]:
        """Einheiten an einem Datum, optional auf eine Filiale beschränkt."""
        return [
            s for s in self.sessions
            if s.date == day and (branch_id is None or s.branch_id == branch_id)
        ]

    def teacher_ids(self) -> set[str]:
        return {t.id for t in self.teachers}

    # ─── Persistenz ───

    def save_json(self, path: Path) -> None:
        """Speichert den Snapshot als JSON-Datei."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        updated = self.model_copy(update={
            "created_at": self.created_at or datetime.now(timezone.utc),
        })
        with open(path, "w", encoding="utf-8") as f:
            f.write(updated.model_dump_json(indent=2))

    @classmethod
    def load_json(cls, path: Path) -> "ScheduleSnapshot":
        """Lädt einen Snapshot aus einer JSON-Datei."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"JSON-Datei nicht gefunden: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return cls.model_validate_json(f.read())
