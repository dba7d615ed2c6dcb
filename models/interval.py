"""Zeitintervall-Modell: halboffenes [Beginn, Ende) an einem festen Kalenderdatum."""

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Union

from models.errors import InvalidInterval


def parse_time(value: Union[str, time]) -> time:
    """Parst "HH:MM" (oder "HH:MM:SS") zu datetime.time."""
    if isinstance(value, time):
        return value
    try:
        parts = [int(p) for p in str(value).strip().split(":")]
        return time(*parts)
    except (TypeError, ValueError) as e:
        raise InvalidInterval(f"Ungültige Uhrzeit: {value!r}") from e


def format_time(value: time) -> str:
    """Gibt eine Uhrzeit als "HH:MM" zurück."""
    return value.strftime("%H:%M")


def _minutes_of_day(value: time) -> int:
    return value.hour * 60 + value.minute


def _check_whole_minute(value: time, label: str) -> None:
    if value.second or value.microsecond:
        raise InvalidInterval(
            f"{label} {value.isoformat()} liegt nicht auf einer vollen Minute."
        )


def minutes_between(start: time, end: time) -> int:
    """Minuten zwischen zwei Uhrzeiten am selben Tag (nur volle Minuten)."""
    return _minutes_of_day(end) - _minutes_of_day(start)


def end_time_for(start: Union[str, time], duration_minutes: int) -> time:
    """Berechnet das Stundenende aus Beginn + Dauer.

    Ein Ende nach Mitternacht wird NICHT umgebrochen, sondern abgelehnt.
    """
    start_t = parse_time(start)
    if duration_minutes <= 0:
        raise InvalidInterval(f"Dauer muss > 0 sein (erhalten: {duration_minutes} min)")
    total = _minutes_of_day(start_t) + duration_minutes
    if total >= 24 * 60:
        raise InvalidInterval(
            f"Stunde ab {format_time(start_t)} mit {duration_minutes} min "
            f"endet nach Mitternacht."
        )
    return time(hour=total // 60, minute=total % 60)


@dataclass(frozen=True)
class TimeInterval:
    """Belegung [start, end) an einem Kalenderdatum.

    Immutable (frozen=True), damit es als Dict-Key / Set-Element nutzbar ist.
    Mitternachtsübergreifende Intervalle gibt es nicht.
    """

    date: date
    start: time
    end: time

    def __post_init__(self) -> None:
        if self.end <= self.start:
            raise InvalidInterval(
                f"{self.date.isoformat()}: Ende {format_time(self.end)} liegt nicht "
                f"nach Beginn {format_time(self.start)}."
            )
        _check_whole_minute(self.start, f"{self.date.isoformat()}: Beginn")
        _check_whole_minute(self.end, f"{self.date.isoformat()}: Ende")

    @classmethod
    def from_datetimes(cls, start: datetime, end: datetime) -> "TimeInterval":
        """Baut ein Intervall aus zwei Zeitpunkten; beide müssen am selben Tag liegen."""
        if start.date() != end.date():
            raise InvalidInterval(
                f"Intervall {start.isoformat()} – {end.isoformat()} "
                f"überschreitet die Datumsgrenze."
            )
        return cls(date=start.date(), start=start.time(), end=end.time())

    @property
    def duration_minutes(self) -> int:
        return minutes_between(self.start, self.end)

    @property
    def time_range(self) -> str:
        """Lesbare Zeitspanne, z.B. "10:00–11:30"."""
        return f"{format_time(self.start)}–{format_time(self.end)}"

    def overlaps(self, other: "TimeInterval") -> bool:
        return overlaps(self, other)

    def __str__(self) -> str:
        return f"{self.date.isoformat()} {self.time_range}"


def overlaps(a: TimeInterval, b: TimeInterval) -> bool:
    """True wenn sich zwei Intervalle zeitlich überschneiden.

    Halboffen: Ende 10:00 und Beginn 10:00 berühren sich nur, das ist KEINE
    Überschneidung. Verschiedene Daten überschneiden sich nie.
    """
    return a.date == b.date and a.start < b.end and b.start < a.end


def span(day: date, start: Union[str, time], end: Union[str, time]) -> TimeInterval:
    """Kurzform: TimeInterval aus Datum und zwei Uhrzeiten (str oder time)."""
    return TimeInterval(date=day, start=parse_time(start), end=parse_time(end))


def window_minutes(start: Union[str, time], end: Union[str, time]) -> int:
    """Länge eines Tagesfensters in Minuten (validiert Ende > Beginn)."""
    start_t, end_t = parse_time(start), parse_time(end)
    if end_t <= start_t:
        raise InvalidInterval(
            f"Zeitfenster ungültig: {format_time(end_t)} liegt nicht nach {format_time(start_t)}."
        )
    _check_whole_minute(start_t, "Fensterbeginn")
    _check_whole_minute(end_t, "Fensterende")
    return minutes_between(start_t, end_t)
