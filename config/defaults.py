from config.schema import (
    DisplayConfig,
    EngineConfig,
    LessonConfig,
    LoggingConfig,
    WorkingHoursConfig,
)

# Fächer der Demo-Daten (Sprachschule)
DEMO_SUBJECTS = ["Englisch", "Deutsch", "Spanisch", "Französisch", "Chinesisch"]

# Filialen der Demo-Daten: ID → Raum-IDs
DEMO_BRANCHES: dict[str, list[str]] = {
    "nord": ["101", "102", "103"],
    "sued": ["201", "202"],
}


def default_working_hours() -> WorkingHoursConfig:
    """Standard-Betriebszeit 09:00–18:00 (540 Minuten)."""
    return WorkingHoursConfig(start="09:00", end="18:00")


def default_engine_config() -> EngineConfig:
    """Vollständige Default-Konfiguration."""
    return EngineConfig(
        organization_name="Sprachschule",
        working_hours=default_working_hours(),
        lessons=LessonConfig(default_duration_minutes=80),
        display=DisplayConfig(),
        logging=LoggingConfig(),
    )
