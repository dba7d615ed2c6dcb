"""Fehlertypen der Planungs-Engine.

Alle Fehler erben von SchedulingError, damit der Aufrufer (z.B. die CLI)
Engine-Fehler gesammelt abfangen kann.
"""

from typing import Optional


class SchedulingError(Exception):
    """Basisklasse aller Engine-Fehler."""


class InvalidInterval(SchedulingError, ValueError):
    """Zeitintervall ungültig: Ende ≤ Beginn oder Ende an einem anderen Datum.

    Bricht den jeweiligen Aufruf ab, bevor eine Erkennung läuft.
    """

    def __init__(self, message: str, session_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.session_id = session_id


class UnknownResource(SchedulingError):
    """Kandidat/Ressource ist im übergebenen Verzeichnis nicht bekannt.

    Wird pro Eintrag gesammelt, nicht geworfen – der Rest des Batches läuft weiter.
    """

    def __init__(self, resource_id: str, dimension: str = "teacher") -> None:
        super().__init__(f"Unbekannte Ressource ({dimension}): {resource_id}")
        self.resource_id = resource_id
        self.dimension = dimension


class SubstituteUnavailable(SchedulingError):
    """Vertretung ist im angefragten Slot bereits verplant."""

    def __init__(self, message: str, conflicting_session_ids: list[str]) -> None:
        super().__init__(message)
        self.conflicting_session_ids = conflicting_session_ids


class StaleApproval(SubstituteUnavailable):
    """Bei der Genehmigung zeigt die erneute Prüfung einen neuen Konflikt.

    Der Antrag bleibt 'pending' und wird unverändert mitgegeben.
    """

    def __init__(self, message: str, conflicting_session_ids: list[str], request) -> None:
        super().__init__(message, conflicting_session_ids)
        self.request = request


class InvalidTransition(SchedulingError):
    """Statuswechsel eines Vertretungsantrags ist nicht erlaubt."""

    def __init__(self, request_id: str, current: str, target: str) -> None:
        super().__init__(
            f"Vertretung {request_id}: Übergang '{current}' → '{target}' nicht erlaubt."
        )
        self.request_id = request_id
        self.current = current
        self.target = target
