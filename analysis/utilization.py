"""Raumauslastung: belegte Minuten eines Raums relativ zu einem Tagesfenster.

Die Auslastung ist ein Lastindikator, keine Gültigkeitsprüfung: auch
kollidierende Einheiten zählen voll, Überschneidungen werden nicht abgezogen.
"""

import logging
from datetime import date, time
from typing import Optional, Union

from pydantic import BaseModel

from config.schema import DisplayConfig
from models.interval import format_time, parse_time, window_minutes
from models.lesson_session import LessonSession, validate_sessions

logger = logging.getLogger(__name__)


class UtilizationReport(BaseModel):
    """Auslastung eines Raums an einem Datum."""

    classroom_id: str
    date: date
    window_start: time
    window_end: time
    occupied_minutes: int
    window_minutes: int
    utilization_percent: float              # Rohwert, kann > 100 sein (Überbuchung)
    contributing_session_ids: list[str]

    def rounded_percent(self, decimals: int = 2) -> float:
        """Auf [0, 100] begrenzt und auf decimals Nachkommastellen gerundet."""
        return round(min(max(self.utilization_percent, 0.0), 100.0), decimals)

    @property
    def display_percent(self) -> float:
        """Für die Anzeige auf [0, 100] begrenzt, 2 Nachkommastellen."""
        return self.rounded_percent(2)

    @property
    def is_overbooked(self) -> bool:
        return self.occupied_minutes > self.window_minutes

    @property
    def is_fully_booked(self) -> bool:
        return self.occupied_minutes == self.window_minutes


class UtilizationCalculator:
    """Berechnet die Auslastung von Räumen über ein explizites Zeitfenster.

    Das Fenster wird immer vom Aufrufer übergeben und nie aus den Daten abgeleitet.
    """

    def compute(
        self,
        classroom_id: str,
        day: date,
        window_start: Union[str, time],
        window_end: Union[str, time],
        sessions: list[LessonSession],
    ) -> UtilizationReport:
        """Summiert die Dauer aller aktiven Einheiten des Raums an diesem Datum."""
        start_t, end_t = parse_time(window_start), parse_time(window_end)
        total = window_minutes(start_t, end_t)
        validate_sessions(sessions)

        contributing = sorted(
            (
                s for s in sessions
                if s.is_active and s.classroom_id == classroom_id and s.date == day
            ),
            key=lambda s: (s.start_time, s.id),
        )
        occupied = sum(s.duration_minutes for s in contributing)
        percent = occupied / total * 100

        report = UtilizationReport(
            classroom_id=classroom_id,
            date=day,
            window_start=start_t,
            window_end=end_t,
            occupied_minutes=occupied,
            window_minutes=total,
            utilization_percent=percent,
            contributing_session_ids=[s.id for s in contributing],
        )
        if report.is_overbooked:
            logger.warning(
                f"Raum {classroom_id} am {day.isoformat()} überbucht: "
                f"{occupied} von {total} min ({percent:.1f}%)"
            )
        return report

    def compute_all(
        self,
        day: date,
        window_start: Union[str, time],
        window_end: Union[str, time],
        sessions: list[LessonSession],
    ) -> list[UtilizationReport]:
        """Ein Report je Raum, der an diesem Datum in den Einheiten vorkommt."""
        window_minutes(parse_time(window_start), parse_time(window_end))
        classroom_ids = sorted({
            s.classroom_id for s in sessions
            if s.classroom_id and s.date == day
        })
        reports = [
            self.compute(cid, day, window_start, window_end, sessions)
            for cid in classroom_ids
        ]
        logger.info(
            f"Auslastung {day.isoformat()} "
            f"({format_time(parse_time(window_start))}–{format_time(parse_time(window_end))}): "
            f"{len(reports)} Räume"
        )
        return reports

    def print_rich(
        self, reports: list[UtilizationReport], display: Optional[DisplayConfig] = None
    ) -> None:
        """Gibt mehrere Reports als Tabelle über Rich aus.

        display: Nachkommastellen und Schwelle für "hohe Auslastung"
        (ohne Angabe die Defaults aus DisplayConfig).
        """
        from rich.console import Console
        from rich.table import Table
        from rich import box

        display = display or DisplayConfig()
        decimals = display.percent_decimals
        console = Console()
        if not reports:
            console.print("[dim]Keine Räume belegt.[/dim]")
            return

        table = Table(title="Raumauslastung", box=box.ROUNDED)
        table.add_column("Raum", style="bold")
        table.add_column("Datum")
        table.add_column("Belegt (min)", justify="right")
        table.add_column("Fenster (min)", justify="right")
        table.add_column("Auslastung", justify="right")
        table.add_column("Einheiten")
        for r in reports:
            high = r.utilization_percent >= display.high_utilization_threshold
            if r.is_overbooked:
                color, marker = "red", " [red](überbucht)[/red]"
            elif high:
                color, marker = "yellow", " [yellow](hoch)[/yellow]"
            else:
                color, marker = "green", ""
            table.add_row(
                r.classroom_id,
                r.date.isoformat(),
                str(r.occupied_minutes),
                str(r.window_minutes),
                f"[{color}]{r.rounded_percent(decimals):.{decimals}f}%[/{color}]{marker}",
                ", ".join(r.contributing_session_ids),
            )
        console.print(table)
