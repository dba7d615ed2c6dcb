"""Konflikterkennung für Unterrichtseinheiten.

Pro Ressourcen-Dimension (Lehrkraft, Raum, Schüler) werden die Einheiten nach
Ressource und Datum gruppiert, nach Beginn sortiert und per Sweep verglichen.
Überschneidungen werden transitiv zu Konfliktgruppen zusammengeführt
(A–B und B–C → eine Gruppe {A, B, C}, auch wenn A und C sich nicht berühren).
"""

import logging
from collections import defaultdict
from datetime import date, time
from typing import Literal, Optional

from pydantic import BaseModel

from models.interval import TimeInterval, overlaps, span
from models.lesson_session import LessonSession, validate_sessions

logger = logging.getLogger(__name__)

Dimension = Literal["teacher", "classroom", "student"]
DIMENSIONS: tuple[Dimension, ...] = ("teacher", "classroom", "student")

_DIMENSION_LABELS = {
    "teacher": "Lehrkraft",
    "classroom": "Raum",
    "student": "Schüler",
}


# ─── Ergebnis-Modelle ─────────────────────────────────────────────────────────

class ConflictGroup(BaseModel):
    """Maximale Menge von Einheiten, die sich auf einer Ressource (transitiv) überschneiden."""

    dimension: Dimension
    resource_id: str
    date: date
    session_ids: list[str]    # sortiert, ohne Duplikate


class ConflictReport(BaseModel):
    """Konfliktgruppen je Dimension. Alle drei Dimensionen sind immer vorhanden."""

    groups: dict[Dimension, list[ConflictGroup]]

    @property
    def has_conflicts(self) -> bool:
        return any(self.groups.values())

    @property
    def total_groups(self) -> int:
        return sum(len(g) for g in self.groups.values())

    def groups_for(self, dimension: Dimension) -> list[ConflictGroup]:
        return self.groups.get(dimension, [])

    def conflicting_session_ids(self, dimension: Optional[Dimension] = None) -> set[str]:
        """Alle Einheiten, die in mindestens einer Konfliktgruppe stehen."""
        dims = [dimension] if dimension else list(DIMENSIONS)
        return {
            sid
            for d in dims
            for group in self.groups_for(d)
            for sid in group.session_ids
        }

    def print_rich(self) -> None:
        """Gibt den Report formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        status = (
            "[bold red]✗ KONFLIKTE GEFUNDEN[/bold red]"
            if self.has_conflicts
            else "[bold green]✓ KONFLIKTFREI[/bold green]"
        )
        counts = " | ".join(
            f"{_DIMENSION_LABELS[d]}: {len(self.groups_for(d))}" for d in DIMENSIONS
        )
        console.print(Panel(f"{status}\n{counts}", title="Konfliktprüfung", border_style="cyan"))

        if not self.has_conflicts:
            return

        table = Table(box=box.ROUNDED, show_lines=True)
        table.add_column("Dimension", width=10)
        table.add_column("Ressource", width=14)
        table.add_column("Datum", width=12)
        table.add_column("Einheiten")
        for d in DIMENSIONS:
            for group in self.groups_for(d):
                table.add_row(
                    _DIMENSION_LABELS[d],
                    group.resource_id,
                    group.date.isoformat(),
                    ", ".join(group.session_ids),
                )
        console.print(table)


class SlotConflict(BaseModel):
    """Eine bestehende Einheit, die mit einem geplanten Slot kollidiert."""

    dimension: Dimension
    resource_id: str
    session_id: str
    time_range: str       # "10:00–11:00" der bestehenden Einheit

    @property
    def description(self) -> str:
        if self.dimension == "teacher":
            return f"Lehrkraft {self.resource_id} unterrichtet bereits {self.time_range}"
        if self.dimension == "classroom":
            return f"Raum {self.resource_id} ist bereits belegt {self.time_range}"
        return f"Schüler {self.resource_id} hat bereits Unterricht {self.time_range}"


class StudentConflictResult(BaseModel):
    """Ergebnis der Einzelprüfung eines Schülers."""

    student_id: str
    has_conflict: bool
    conflicting_session_ids: list[str]


# ─── Detektor ─────────────────────────────────────────────────────────────────

class ConflictDetector:
    """Erkennt Doppelbelegungen von Lehrkräften, Räumen und Schülern.

    Zustandslos: jede Methode ist eine reine Funktion über den übergebenen
    Einheiten und darf parallel aufgerufen werden.
    """

    def detect(self, sessions: list[LessonSession]) -> ConflictReport:
        """Führt die Konflikterkennung für alle Dimensionen durch.

        Ungültige Intervalle (Ende ≤ Beginn) brechen den Aufruf mit
        InvalidInterval ab, bevor irgendeine Gruppe berechnet wird.
        """
        validate_sessions(sessions)
        groups = {d: self._detect_dimension(sessions, d) for d in DIMENSIONS}
        report = ConflictReport(groups=groups)
        logger.info(
            f"Konfliktprüfung: {len(sessions)} Einheiten, "
            f"{report.total_groups} Konfliktgruppen"
        )
        return report

    def check_slot(
        self,
        proposal: LessonSession,
        sessions: list[LessonSession],
        exclude_session_id: Optional[str] = None,
    ) -> list[SlotConflict]:
        """Prüft eine geplante (noch nicht gespeicherte) Einheit gegen den Bestand.

        exclude_session_id: Einheit, die gerade verlegt wird (zählt nicht mit).
        """
        candidate = proposal.interval
        validate_sessions(sessions)
        conflicts: list[SlotConflict] = []

        for s in sessions:
            if not s.is_active or s.id in (proposal.id, exclude_session_id):
                continue
            if not overlaps(candidate, s.interval):
                continue
            for d in DIMENSIONS:
                shared = set(proposal.resource_ids(d)) & set(s.resource_ids(d))
                for rid in sorted(shared):
                    conflicts.append(SlotConflict(
                        dimension=d,
                        resource_id=rid,
                        session_id=s.id,
                        time_range=s.time_range,
                    ))
        return conflicts

    def check_students(
        self,
        student_ids: list[str],
        day: date,
        start_time: time,
        end_time: time,
        sessions: list[LessonSession],
        exclude_session_id: Optional[str] = None,
    ) -> list[StudentConflictResult]:
        """Prüft mehrere Schüler für einen Slot.

        Jeder Schüler wird einzeln gegen denselben Snapshot geprüft; es gibt
        keinen gemeinsamen Akkumulator zwischen den Prüfungen.
        """
        slot = span(day, start_time, end_time)
        validate_sessions(sessions)
        return [
            self._check_student(sid, slot, sessions, exclude_session_id)
            for sid in dict.fromkeys(student_ids)
        ]

    # ── Einzelne Prüfungen ────────────────────────────────────────────────────

    def _check_student(
        self,
        student_id: str,
        slot: TimeInterval,
        sessions: list[LessonSession],
        exclude_session_id: Optional[str],
    ) -> StudentConflictResult:
        hits = [
            s.id for s in sessions
            if s.is_active
            and s.id != exclude_session_id
            and student_id in s.student_ids
            and overlaps(slot, s.interval)
        ]
        return StudentConflictResult(
            student_id=student_id,
            has_conflict=bool(hits),
            conflicting_session_ids=sorted(hits),
        )

    def _detect_dimension(
        self, sessions: list[LessonSession], dimension: Dimension
    ) -> list[ConflictGroup]:
        """Gruppiert nach (Ressource, Datum) und sucht Überschneidungen je Gruppe."""
        buckets: dict[tuple[str, date], list[LessonSession]] = defaultdict(list)
        for s in sessions:
            if not s.is_active:
                continue
            for rid in s.resource_ids(dimension):
                buckets[(rid, s.date)].append(s)

        result: list[ConflictGroup] = []
        for (rid, day), bucket in buckets.items():
            if len(bucket) < 2:
                continue
            for member_ids in self._sweep(bucket):
                result.append(ConflictGroup(
                    dimension=dimension,
                    resource_id=rid,
                    date=day,
                    session_ids=member_ids,
                ))

        result.sort(key=lambda g: (g.resource_id, g.date, g.session_ids[0]))
        if result:
            logger.debug(f"  {_DIMENSION_LABELS[dimension]}: {len(result)} Konfliktgruppen")
        return result

    def _sweep(self, bucket: list[LessonSession]) -> list[list[str]]:
        """Sweep über nach Beginn sortierte Einheiten einer Ressource an einem Tag.

        Gibt die Zusammenhangskomponenten (≥ 2 Einheiten) als sortierte ID-Listen zurück.
        """
        ordered = sorted(bucket, key=lambda s: (s.start_time, s.end_time, s.id))
        parent = list(range(len(ordered)))

        def find(i: int) -> int:
            while parent[i] != i:
                parent[i] = parent[parent[i]]
                i = parent[i]
            return i

        def union(i: int, j: int) -> None:
            ri, rj = find(i), find(j)
            if ri != rj:
                parent[max(ri, rj)] = min(ri, rj)

        for i, a in enumerate(ordered):
            for j in range(i + 1, len(ordered)):
                b = ordered[j]
                # Sortiert nach Beginn: ab hier beginnt keine Einheit mehr vor a.end
                if b.start_time >= a.end_time:
                    break
                if overlaps(a.interval, b.interval):
                    union(i, j)

        components: dict[int, set[str]] = defaultdict(set)
        for i, s in enumerate(ordered):
            components[find(i)].add(s.id)

        return sorted(
            sorted(ids) for ids in components.values() if len(ids) > 1
        )
