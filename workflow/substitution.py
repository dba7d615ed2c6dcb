"""Vertretungs-Workflow: Anlegen, Genehmigen, Abschließen, Stornieren.

Zustandsautomat:
  pending  --approve-->  approved  --complete-->  completed
  pending  --cancel--->  cancelled
  approved --cancel--->  cancelled

completed und cancelled sind Endzustände. Das Anlegen reserviert den Slot
NICHT; verbindlich ist die erneute Verfügbarkeitsprüfung bei approve.
Jede Operation gibt einen neuen Antrag zurück, der Eingabeantrag bleibt unverändert.
"""

import logging
import uuid
from datetime import date, datetime, time, timezone
from typing import Optional, Union

from analysis.availability import AvailabilityQuery
from models.errors import InvalidTransition, StaleApproval, SubstituteUnavailable
from models.interval import span
from models.lesson_session import LessonSession, validate_sessions
from models.substitution import StatusChange, SubstitutionRequest, SubstitutionStatus

logger = logging.getLogger(__name__)


class SubstitutionWorkflow:
    """Zustandsloser Workflow über SubstitutionRequest-Objekten."""

    def __init__(self, availability: Optional[AvailabilityQuery] = None) -> None:
        self.availability = availability or AvailabilityQuery()

    # ─── Anlegen ───

    def create(
        self,
        original_teacher_id: str,
        substitute_teacher_id: str,
        substitution_date: date,
        start_time: Union[str, time],
        end_time: Union[str, time],
        sessions: list[LessonSession],
        reason: Optional[str] = None,
        lesson_session_id: Optional[str] = None,
        notes: Optional[str] = None,
        created_by: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> SubstitutionRequest:
        """Legt einen Antrag im Status 'pending' an.

        Wirft SubstituteUnavailable, wenn die Vertretung im Slot bereits
        unterrichtet, und ValidationError, wenn Original == Vertretung.
        """
        slot = span(substitution_date, start_time, end_time)
        request = SubstitutionRequest(
            id=request_id or uuid.uuid4().hex,
            original_teacher_id=original_teacher_id,
            substitute_teacher_id=substitute_teacher_id,
            substitution_date=slot.date,
            start_time=slot.start,
            end_time=slot.end,
            reason=reason,
            lesson_session_id=lesson_session_id,
            notes=notes,
            created_by=created_by,
        )

        hits = self._substitute_conflicts(request, sessions)
        if hits:
            raise SubstituteUnavailable(
                f"Vertretung {substitute_teacher_id} ist am {slot} bereits verplant "
                f"({', '.join(hits)}).",
                conflicting_session_ids=hits,
            )

        logger.info(
            f"Vertretung {request.id} angelegt: {original_teacher_id} → "
            f"{substitute_teacher_id} am {slot}"
        )
        return request

    # ─── Übergänge ───

    def approve(
        self, request: SubstitutionRequest, sessions: list[LessonSession]
    ) -> SubstitutionRequest:
        """Genehmigt einen offenen Antrag nach erneuter Verfügbarkeitsprüfung.

        Findet die Prüfung einen neuen Konflikt, wird StaleApproval geworfen und
        der Antrag bleibt 'pending' (keine automatische Stornierung).
        """
        self._ensure_transition(request, SubstitutionStatus.APPROVED)
        hits = self._substitute_conflicts(request, sessions)
        if hits:
            logger.warning(
                f"Vertretung {request.id}: Genehmigung abgelehnt, "
                f"{request.substitute_teacher_id} inzwischen verplant ({', '.join(hits)})"
            )
            raise StaleApproval(
                f"Vertretung {request.id}: {request.substitute_teacher_id} ist am "
                f"{request.slot} inzwischen verplant ({', '.join(hits)}).",
                conflicting_session_ids=hits,
                request=request,
            )
        return self._transition(request, SubstitutionStatus.APPROVED)

    def complete(self, request: SubstitutionRequest) -> SubstitutionRequest:
        self._ensure_transition(request, SubstitutionStatus.COMPLETED)
        return self._transition(request, SubstitutionStatus.COMPLETED)

    def cancel(self, request: SubstitutionRequest) -> SubstitutionRequest:
        self._ensure_transition(request, SubstitutionStatus.CANCELLED)
        return self._transition(request, SubstitutionStatus.CANCELLED)

    # ─── Abfragen ───

    @staticmethod
    def filter_requests(
        requests: list[SubstitutionRequest],
        status: Optional[SubstitutionStatus] = None,
        teacher_id: Optional[str] = None,
    ) -> list[SubstitutionRequest]:
        """Filtert nach Status und/oder beteiligter Lehrkraft (Original oder Vertretung)."""
        return [
            r for r in requests
            if (status is None or r.status == status)
            and (
                teacher_id is None
                or teacher_id in (r.original_teacher_id, r.substitute_teacher_id)
            )
        ]

    # ── Interna ───────────────────────────────────────────────────────────────

    def _substitute_conflicts(
        self, request: SubstitutionRequest, sessions: list[LessonSession]
    ) -> list[str]:
        validate_sessions(sessions)
        return self.availability.conflicting_sessions(
            request.substitute_teacher_id,
            request.slot,
            sessions,
            exclude_session_id=request.lesson_session_id,
        )

    @staticmethod
    def _ensure_transition(request: SubstitutionRequest, target: SubstitutionStatus) -> None:
        if not request.can_transition_to(target):
            raise InvalidTransition(request.id, request.status.value, target.value)

    @staticmethod
    def _transition(request: SubstitutionRequest, target: SubstitutionStatus) -> SubstitutionRequest:
        change = StatusChange(
            from_status=request.status,
            to_status=target,
            changed_at=datetime.now(timezone.utc),
        )
        updated = request.model_copy(update={
            "status": target,
            "history": [*request.history, change],
        })
        logger.info(
            f"Vertretung {request.id}: {request.status.value} → {target.value}"
        )
        return updated
