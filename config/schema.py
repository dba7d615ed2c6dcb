from pydantic import BaseModel, Field, field_validator, model_validator
from enum import Enum


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


def _check_hhmm(v: str) -> str:
    parts = v.split(":")
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise ValueError(f"Uhrzeit im Format HH:MM erwartet, erhalten: {v!r}")
    hour, minute = int(parts[0]), int(parts[1])
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValueError(f"Uhrzeit außerhalb des Tages: {v!r}")
    return f"{hour:02d}:{minute:02d}"


# ─── BETRIEBSZEITEN ───

class WorkingHoursConfig(BaseModel):
    """Standard-Zeitfenster für die Raumauslastung.

    Wird nur vom Host (CLI) als Aufrufer verwendet; die Engine selbst
    erhält das Fenster immer explizit.
    """
    # Beginn des Fensters im Format "HH:MM"
    start: str = Field("09:00", description="Beginn der Betriebszeit")
    # Ende des Fensters im Format "HH:MM"
    end: str = Field("18:00", description="Ende der Betriebszeit")

    @field_validator("start", "end")
    @classmethod
    def _validate_time(cls, v: str) -> str:
        return _check_hhmm(v)

    @model_validator(mode='after')
    def _check_order(self):
        if self.end <= self.start:
            raise ValueError(
                f"Betriebszeit ungültig: Ende {self.end} liegt nicht nach Beginn {self.start}")
        return self


# ─── UNTERRICHT ───

class LessonConfig(BaseModel):
    """Defaults für neu geplante Einheiten."""
    # Standarddauer einer Einheit in Minuten
    default_duration_minutes: int = Field(80, ge=15, le=480,
        description="Standarddauer einer Einheit (Minuten)")


# ─── ANZEIGE ───

class DisplayConfig(BaseModel):
    """Anzeige-Optionen für Reports."""
    # Nachkommastellen für Prozentwerte
    percent_decimals: int = Field(2, ge=0, le=4,
        description="Nachkommastellen für Prozentwerte")
    # Ab welcher Auslastung (in %) ein Raum als "knapp" markiert wird
    high_utilization_threshold: float = Field(85.0, ge=0.0, le=100.0,
        description="Schwelle für hohe Auslastung (%)")


# ─── LOGGING ───

class LoggingConfig(BaseModel):
    """Logging-Konfiguration des Hosts."""
    level: LogLevel = Field(LogLevel.INFO, description="Log-Level")


# ─── GESAMT-CONFIG ───

class EngineConfig(BaseModel):
    """Gesamtkonfiguration des Hosts."""
    # Name der Schule / Organisation
    organization_name: str = Field("Sprachschule", description="Name der Organisation")
    # Standard-Betriebszeit (Auslastungsfenster)
    working_hours: WorkingHoursConfig = Field(default_factory=WorkingHoursConfig)
    # Defaults für Einheiten
    lessons: LessonConfig = Field(default_factory=LessonConfig)
    # Anzeige-Optionen
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    # Logging
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
