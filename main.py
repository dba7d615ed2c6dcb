"""Unterrichtsplanung — Host-CLI für die Konflikt- und Ressourcen-Engine.

Verwendung:
  python main.py config init              Default-Konfiguration anlegen
  python main.py config show              Konfiguration anzeigen
  python main.py generate                 Demo-Snapshot erzeugen (JSON)
  python main.py conflicts                Konflikte im Snapshot anzeigen
  python main.py utilization              Raumauslastung eines Tages
  python main.py available                Freie Lehrkräfte für einen Slot
  python main.py check-slot               Geplante Einheit gegen Bestand prüfen
"""

import logging
import sys
from datetime import date
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich import box

console = Console()

# Standard-Pfad für den gespeicherten Snapshot
DEFAULT_DATA_JSON = Path("output/schedule_snapshot.json")


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_config():
    """Lädt die Konfiguration (oder Defaults) und richtet das Logging ein."""
    from config.manager import ConfigManager
    mgr = ConfigManager()
    try:
        config = mgr.load_or_default()
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    _setup_logging(config.logging.level.value)
    return mgr, config


def _load_snapshot_or_abort(json_path: str):
    from models.snapshot import ScheduleSnapshot
    try:
        return ScheduleSnapshot.load_json(Path(json_path))
    except FileNotFoundError as e:
        console.print(
            f"[red]{e}[/red]\n"
            "Verwenden Sie zunächst [bold]python main.py generate[/bold]."
        )
        sys.exit(1)


def _parse_date(value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"Datum im Format JJJJ-MM-TT erwartet: {value}") from None


_json_option = click.option(
    "--json-path", default=str(DEFAULT_DATA_JSON),
    help="Pfad zur Snapshot-JSON-Datei.",
)


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anzeigen oder anlegen."""


@cmd_config.command("init")
@click.option("--force", is_flag=True, default=False, help="Bestehende Datei überschreiben.")
def config_init(force: bool):
    """Legt die Default-Konfiguration als YAML an."""
    from config.defaults import default_engine_config
    from config.manager import ConfigManager

    mgr = ConfigManager()
    if not mgr.first_run_check() and not force:
        console.print(
            "[yellow]Eine Konfiguration existiert bereits.[/yellow] "
            "Mit [bold]--force[/bold] überschreiben."
        )
        return
    mgr.save(default_engine_config())


@cmd_config.command("show")
def config_show():
    """Zeigt die aktuelle Konfiguration an."""
    mgr, config = _load_config()

    console.print(Panel(
        f"[bold]{config.organization_name}[/bold]",
        title="Engine-Konfiguration",
        border_style="cyan",
    ))
    table = Table(box=box.ROUNDED)
    table.add_column("Parameter", style="bold")
    table.add_column("Wert")
    table.add_row("Betriebszeit", f"{config.working_hours.start}–{config.working_hours.end}")
    table.add_row("Standarddauer", f"{config.lessons.default_duration_minutes} min")
    table.add_row("Nachkommastellen", str(config.display.percent_decimals))
    table.add_row("Schwelle hohe Auslastung", f"{config.display.high_utilization_threshold:.0f}%")
    table.add_row("Log-Level", config.logging.level.value)
    console.print(table)


# ─── GENERATE ─────────────────────────────────────────────────────────────────

@click.command("generate")
@click.option("--seed", default=42, help="Zufalls-Seed für reproduzierbare Daten.")
@click.option("--date", "day", default=None, help="Datum der Demo-Einheiten (JJJJ-MM-TT).")
@_json_option
def cmd_generate(seed: int, day: Optional[str], json_path: str):
    """Erzeugt einen Demo-Snapshot mit absichtlichen Konflikten."""
    mgr, config = _load_config()
    from data.fake_data import FakeScheduleGenerator

    snapshot = FakeScheduleGenerator(config, seed=seed, day=_parse_date(day)).generate()
    console.print(f"[dim]{snapshot.summary()}[/dim]")
    snapshot.save_json(Path(json_path))
    console.print(f"[green]✓[/green] Snapshot gespeichert: {json_path}")


# ─── CONFLICTS ────────────────────────────────────────────────────────────────

@click.command("conflicts")
@_json_option
@click.option("--date", "day", default=None, help="Nur dieses Datum (JJJJ-MM-TT).")
@click.option("--branch", default=None, help="Nur diese Filiale.")
def cmd_conflicts(json_path: str, day: Optional[str], branch: Optional[str]):
    """Zeigt Lehrer-, Raum- und Schüler-Konflikte."""
    mgr, config = _load_config()
    from analysis.conflict_detector import ConflictDetector
    from models.errors import SchedulingError

    snapshot = _load_snapshot_or_abort(json_path)
    target = _parse_date(day)
    if target is not None:
        sessions = snapshot.sessions_on(target, branch_id=branch)
    else:
        sessions = [s for s in snapshot.sessions if branch is None or s.branch_id == branch]
    try:
        report = ConflictDetector().detect(sessions)
    except SchedulingError as e:
        console.print(f"[red bold]Prüfung abgebrochen:[/red bold] {e}")
        sys.exit(1)
    report.print_rich()
    sys.exit(1 if report.has_conflicts else 0)


# ─── UTILIZATION ──────────────────────────────────────────────────────────────

@click.command("utilization")
@_json_option
@click.option("--date", "day", required=True, help="Datum (JJJJ-MM-TT).")
@click.option("--start", default=None, help="Fensterbeginn HH:MM (Default: Betriebszeit).")
@click.option("--end", default=None, help="Fensterende HH:MM (Default: Betriebszeit).")
@click.option("--classroom", default=None, help="Nur dieser Raum.")
def cmd_utilization(json_path: str, day: str, start: Optional[str], end: Optional[str],
                    classroom: Optional[str]):
    """Berechnet die Raumauslastung eines Tages."""
    mgr, config = _load_config()
    from analysis.utilization import UtilizationCalculator
    from models.errors import SchedulingError

    snapshot = _load_snapshot_or_abort(json_path)
    window_start = start or config.working_hours.start
    window_end = end or config.working_hours.end
    calc = UtilizationCalculator()
    target = _parse_date(day)
    try:
        if classroom:
            reports = [calc.compute(classroom, target, window_start, window_end, snapshot.sessions)]
        else:
            reports = calc.compute_all(target, window_start, window_end, snapshot.sessions)
    except SchedulingError as e:
        console.print(f"[red bold]Berechnung abgebrochen:[/red bold] {e}")
        sys.exit(1)
    calc.print_rich(reports, display=config.display)


# ─── AVAILABLE ────────────────────────────────────────────────────────────────

@click.command("available")
@_json_option
@click.option("--date", "day", required=True, help="Datum (JJJJ-MM-TT).")
@click.option("--start", required=True, help="Beginn HH:MM.")
@click.option("--end", default=None, help="Ende HH:MM (Default: Beginn + Standarddauer).")
@click.option("--subject", default=None, help="Fach (Vorfilter).")
@click.option("--branch", default=None, help="Filiale (Vorfilter).")
@click.option("--teacher", "teacher_ids", multiple=True,
              help="Kandidaten explizit angeben (sonst: Verzeichnis + Vorfilter).")
def cmd_available(json_path: str, day: str, start: str, end: Optional[str],
                  subject: Optional[str], branch: Optional[str], teacher_ids: tuple[str, ...]):
    """Findet freie Lehrkräfte für einen Slot."""
    mgr, config = _load_config()
    from analysis.availability import AvailabilityQuery, eligible_candidates
    from models.errors import SchedulingError
    from models.interval import end_time_for

    snapshot = _load_snapshot_or_abort(json_path)
    try:
        end_t = end or end_time_for(start, config.lessons.default_duration_minutes)
        candidates = list(teacher_ids) or eligible_candidates(snapshot.teachers, subject, branch)
        result = AvailabilityQuery().find_available(
            candidates, _parse_date(day), start, end_t, subject, branch,
            snapshot.sessions, known_teacher_ids=snapshot.teacher_ids() or None,
        )
    except SchedulingError as e:
        console.print(f"[red bold]Abfrage abgebrochen:[/red bold] {e}")
        sys.exit(1)
    result.print_rich(snapshot.teachers)


# ─── CHECK-SLOT ───────────────────────────────────────────────────────────────

@click.command("check-slot")
@_json_option
@click.option("--date", "day", required=True, help="Datum (JJJJ-MM-TT).")
@click.option("--start", required=True, help="Beginn HH:MM.")
@click.option("--end", default=None, help="Ende HH:MM (Default: Beginn + Standarddauer).")
@click.option("--branch", required=True, help="Filiale.")
@click.option("--teacher", default=None, help="Lehrkraft.")
@click.option("--classroom", default=None, help="Raum.")
@click.option("--student", "student_ids", multiple=True, help="Schüler (mehrfach möglich).")
@click.option("--exclude", default=None, help="ID der Einheit, die verlegt wird.")
def cmd_check_slot(json_path: str, day: str, start: str, end: Optional[str], branch: str,
                   teacher: Optional[str], classroom: Optional[str],
                   student_ids: tuple[str, ...], exclude: Optional[str]):
    """Prüft eine geplante Einheit gegen den Bestand."""
    mgr, config = _load_config()
    from analysis.conflict_detector import ConflictDetector
    from models.errors import SchedulingError
    from models.interval import end_time_for, parse_time
    from models.lesson_session import LessonKind, LessonSession

    snapshot = _load_snapshot_or_abort(json_path)
    try:
        start_t = parse_time(start)
        end_t = parse_time(end) if end else end_time_for(start_t, config.lessons.default_duration_minutes)
        proposal = LessonSession(
            id="__proposal__",
            date=_parse_date(day),
            start_time=start_t,
            end_time=end_t,
            branch_id=branch,
            teacher_id=teacher,
            classroom_id=classroom,
            student_ids=list(student_ids),
            kind=LessonKind.INDIVIDUAL if len(student_ids) <= 1 else LessonKind.GROUP,
        )
        conflicts = ConflictDetector().check_slot(proposal, snapshot.sessions, exclude)
    except SchedulingError as e:
        console.print(f"[red bold]Prüfung abgebrochen:[/red bold] {e}")
        sys.exit(1)

    if not conflicts:
        console.print(f"[green]✓[/green] Slot {proposal.interval} ist frei.")
        return
    console.print(f"[red bold]✗ {len(conflicts)} Konflikte:[/red bold]")
    for c in conflicts:
        console.print(f"  [red]• {c.description} ({c.session_id})[/red]")
    sys.exit(1)


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
def cli():
    """Konflikt- und Ressourcen-Engine für die Unterrichtsplanung.

    Starten Sie mit: python main.py generate
    """


def main():
    cli()


# Befehle registrieren
cli.add_command(cmd_config)
cli.add_command(cmd_generate)
cli.add_command(cmd_conflicts)
cli.add_command(cmd_utilization)
cli.add_command(cmd_available)
cli.add_command(cmd_check_slot)


if __name__ == "__main__":
    main()
