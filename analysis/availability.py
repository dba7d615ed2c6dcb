"""Verfügbarkeitsabfrage: welche Lehrkräfte sind in einem Slot frei?

Die Engine prüft nur zeitliche Exklusivität. Fach und Filiale filtert der
Aufrufer vorher (siehe eligible_candidates); sie werden hier nur mitgeführt.
"""

import logging
from datetime import date, time
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict

from models.errors import UnknownResource
from models.interval import TimeInterval, overlaps, span
from models.lesson_session import LessonSession, validate_sessions
from models.teacher import Teacher

logger = logging.getLogger(__name__)


class AvailabilityResult(BaseModel):
    """Aufteilung der Kandidaten in frei / belegt.

    Unbekannte Kandidaten stehen nur in errors, in keiner der beiden Listen.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    date: date
    start_time: time
    end_time: time
    subject: Optional[str] = None
    branch_id: Optional[str] = None
    available: list[str]
    conflicted: list[str]
    conflict_counts: dict[str, int] = {}     # Lehrkraft → Anzahl kollidierender Einheiten
    errors: list[UnknownResource] = []

    @property
    def unknown(self) -> list[str]:
        return [e.resource_id for e in self.errors]

    def is_available(self, teacher_id: str) -> bool:
        return teacher_id in self.available

    def print_rich(self, teachers: Optional[list[Teacher]] = None) -> None:
        """Gibt die Aufteilung als Tabelle über Rich aus."""
        from rich.console import Console
        from rich.table import Table
        from rich import box

        names = {t.id: t.name for t in teachers or []}
        console = Console()
        table = Table(
            title=f"Verfügbarkeit {self.date.isoformat()} "
                  f"{self.start_time.strftime('%H:%M')}–{self.end_time.strftime('%H:%M')}",
            box=box.ROUNDED,
        )
        table.add_column("Lehrkraft", style="bold")
        table.add_column("Name")
        table.add_column("Status")
        for tid in self.available:
            table.add_row(tid, names.get(tid, ""), "[green]frei[/green]")
        for tid in self.conflicted:
            n = self.conflict_counts.get(tid, 0)
            table.add_row(tid, names.get(tid, ""), f"[red]belegt ({n})[/red]")
        for tid in self.unknown:
            table.add_row(tid, "", "[yellow]unbekannt[/yellow]")
        console.print(table)


def eligible_candidates(
    teachers: list[Teacher],
    subject: Optional[str] = None,
    branch_id: Optional[str] = None,
) -> list[str]:
    """Vorfilter des Aufrufers: Lehrkräfte mit passendem Fach und Filiale."""
    return [
        t.id for t in teachers
        if (not subject or t.teaches(subject))
        and (not branch_id or t.works_at(branch_id))
    ]


class AvailabilityQuery:
    """Findet freie Lehrkräfte für einen Slot (deterministisch, ohne Ranking)."""

    def find_available(
        self,
        candidates: list[str],
        day: date,
        start_time: Union[str, time],
        end_time: Union[str, time],
        subject: Optional[str],
        branch_id: Optional[str],
        sessions: list[LessonSession],
        known_teacher_ids: Optional[set[str]] = None,
    ) -> AvailabilityResult:
        """Teilt die Kandidaten in 'available' und 'conflicted' auf.

        Jeder Kandidat wird einzeln gegen denselben Snapshot geprüft. Die
        Reihenfolge folgt der Kandidatenliste; Duplikate zählen einmal.
        known_teacher_ids: optionales Verzeichnis; unbekannte IDs landen in errors.
        """
        slot = span(day, start_time, end_time)
        validate_sessions(sessions)

        available: list[str] = []
        conflicted: list[str] = []
        counts: dict[str, int] = {}
        errors: list[UnknownResource] = []

        for teacher_id in dict.fromkeys(candidates):
            if known_teacher_ids is not None and teacher_id not in known_teacher_ids:
                errors.append(UnknownResource(teacher_id, dimension="teacher"))
                continue
            hits = self.conflicting_sessions(teacher_id, slot, sessions)
            if hits:
                conflicted.append(teacher_id)
                counts[teacher_id] = len(hits)
            else:
                available.append(teacher_id)

        if errors:
            logger.warning(
                f"Verfügbarkeit: {len(errors)} unbekannte Kandidaten "
                f"({', '.join(e.resource_id for e in errors)})"
            )
        logger.info(
            f"Verfügbarkeit {slot} (Fach: {subject or '-'}, Filiale: {branch_id or '-'}): "
            f"{len(available)} frei, {len(conflicted)} belegt"
        )
        return AvailabilityResult(
            date=slot.date,
            start_time=slot.start,
            end_time=slot.end,
            subject=subject,
            branch_id=branch_id,
            available=available,
            conflicted=conflicted,
            conflict_counts=counts,
            errors=errors,
        )

    def conflicting_sessions(
        self,
        teacher_id: str,
        slot: TimeInterval,
        sessions: list[LessonSession],
        exclude_session_id: Optional[str] = None,
    ) -> list[str]:
        """IDs aller aktiven Einheiten der Lehrkraft, die den Slot überschneiden."""
        return sorted(
            s.id for s in sessions
            if s.is_active
            and s.teacher_id == teacher_id
            and s.id != exclude_session_id
            and overlaps(slot, s.interval)
        )
