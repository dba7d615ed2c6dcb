"""Tests für Intervall-Modell, Unterrichtseinheiten und Vertretungsanträge."""

from datetime import date, datetime, time

import pytest
from pydantic import ValidationError

from models.errors import InvalidInterval
from models.interval import (
    TimeInterval,
    end_time_for,
    format_time,
    overlaps,
    parse_time,
    span,
    window_minutes,
)
from models.lesson_session import LessonKind, LessonSession, SessionStatus, validate_sessions
from models.snapshot import ScheduleSnapshot
from models.substitution import SubstitutionRequest, SubstitutionStatus
from models.teacher import Teacher

DAY = date(2025, 9, 1)


def _session(sid: str, start: str, end: str, **kwargs) -> LessonSession:
    kwargs.setdefault("branch_id", "nord")
    return LessonSession(
        id=sid, date=kwargs.pop("day", DAY),
        start_time=parse_time(start), end_time=parse_time(end), **kwargs,
    )


# ─── INTERVALL ────────────────────────────────────────────────────────────────

class TestTimeInterval:
    def test_overlap_basic(self):
        a = span(DAY, "10:00", "11:00")
        b = span(DAY, "10:30", "11:30")
        assert overlaps(a, b)
        assert a.overlaps(b)

    @pytest.mark.parametrize("a, b", [
        (("10:00", "11:00"), ("10:30", "11:30")),
        (("10:00", "11:00"), ("11:00", "12:00")),
        (("09:00", "12:00"), ("10:00", "10:15")),
        (("08:00", "08:45"), ("13:00", "14:00")),
    ])
    def test_overlap_symmetric(self, a, b):
        """overlaps(A, B) == overlaps(B, A)."""
        ia, ib = span(DAY, *a), span(DAY, *b)
        assert overlaps(ia, ib) == overlaps(ib, ia)

    def test_boundary_touch_is_not_overlap(self):
        """Ende 10:00 und Beginn 10:00 überschneiden sich nicht."""
        a = span(DAY, "09:00", "10:00")
        b = span(DAY, "10:00", "11:00")
        assert not overlaps(a, b)
        assert not overlaps(b, a)

    def test_containment_overlaps(self):
        assert overlaps(span(DAY, "09:00", "12:00"), span(DAY, "10:00", "10:15"))

    def test_different_dates_never_overlap(self):
        a = span(date(2025, 9, 1), "10:00", "11:00")
        b = span(date(2025, 9, 2), "10:00", "11:00")
        assert not overlaps(a, b)

    def test_zero_duration_rejected(self):
        with pytest.raises(InvalidInterval):
            span(DAY, "10:00", "10:00")

    def test_end_before_start_rejected(self):
        with pytest.raises(InvalidInterval):
            span(DAY, "11:00", "10:00")

    def test_invalid_interval_is_value_error(self):
        with pytest.raises(ValueError):
            span(DAY, "11:00", "10:00")

    @pytest.mark.parametrize("start, end", [
        ("10:00:00", "10:00:30"),
        ("10:00:30", "10:01:10"),
        ("10:00", "11:00:15"),
    ])
    def test_seconds_rejected(self, start, end):
        """Intervalle liegen immer auf vollen Minuten."""
        with pytest.raises(InvalidInterval):
            span(DAY, start, end)

    def test_seconds_rejected_with_session_id(self):
        s = _session("S7", "11:00:00", "11:00:30")
        with pytest.raises(InvalidInterval) as exc:
            s.duration_minutes
        assert exc.value.session_id == "S7"

    def test_cross_midnight_rejected(self):
        with pytest.raises(InvalidInterval):
            TimeInterval.from_datetimes(
                datetime(2025, 9, 1, 23, 0), datetime(2025, 9, 2, 0, 30)
            )

    def test_from_datetimes_same_day(self):
        iv = TimeInterval.from_datetimes(
            datetime(2025, 9, 1, 14, 0), datetime(2025, 9, 1, 15, 30)
        )
        assert iv.date == DAY
        assert iv.duration_minutes == 90
        assert iv.time_range == "14:00–15:30"

    def test_interval_hashable(self):
        assert len({span(DAY, "10:00", "11:00"), span(DAY, "10:00", "11:00")}) == 1

    def test_parse_and_format(self):
        assert parse_time("9:05") == time(9, 5)
        assert format_time(time(9, 5)) == "09:05"
        with pytest.raises(InvalidInterval):
            parse_time("abc")

    def test_end_time_for(self):
        assert end_time_for("10:00", 80) == time(11, 20)

    def test_end_time_for_after_midnight_rejected(self):
        with pytest.raises(InvalidInterval):
            end_time_for("23:30", 80)

    def test_window_minutes(self):
        assert window_minutes("09:00", "18:00") == 540
        with pytest.raises(InvalidInterval):
            window_minutes("18:00", "09:00")


# ─── UNTERRICHTSEINHEIT ───────────────────────────────────────────────────────

class TestLessonSession:
    def test_defaults(self):
        s = _session("S1", "10:00", "11:00")
        assert s.status == SessionStatus.SCHEDULED
        assert s.kind == LessonKind.GROUP
        assert s.is_active
        assert s.duration_minutes == 60

    def test_cancelled_not_active(self):
        s = _session("S1", "10:00", "11:00", status="cancelled")
        assert not s.is_active

    def test_pydantic_parses_strings(self):
        s = LessonSession(id="S1", date="2025-09-01", start_time="10:00",
                          end_time="11:30", branch_id="nord")
        assert s.date == DAY
        assert s.time_range == "10:00–11:30"

    def test_empty_optional_ids_become_none(self):
        s = _session("S1", "10:00", "11:00", teacher_id="  ", classroom_id="")
        assert s.teacher_id is None
        assert s.classroom_id is None
        assert s.resource_ids("teacher") == []
        assert s.resource_ids("classroom") == []

    def test_student_ids_deduplicated(self):
        s = _session("S1", "10:00", "11:00", student_ids=["A", "B", "A", " "])
        assert s.student_ids == ["A", "B"]

    def test_individual_lesson_max_one_student(self):
        with pytest.raises(ValidationError):
            _session("S1", "10:00", "11:00", kind="individual", student_ids=["A", "B"])

    def test_empty_branch_rejected(self):
        with pytest.raises(ValidationError):
            _session("S1", "10:00", "11:00", branch_id=" ")

    def test_invalid_interval_raised_lazily(self):
        """Ungültige Zeiten werden erst von der Engine abgelehnt, mit Einheiten-ID."""
        s = _session("S9", "10:00", "10:00")
        with pytest.raises(InvalidInterval) as exc:
            s.interval
        assert exc.value.session_id == "S9"

    def test_validate_sessions(self):
        ok = _session("S1", "10:00", "11:00")
        bad = _session("S2", "12:00", "11:00")
        validate_sessions([ok])
        with pytest.raises(InvalidInterval):
            validate_sessions([ok, bad])

    def test_unknown_dimension(self):
        with pytest.raises(ValueError):
            _session("S1", "10:00", "11:00").resource_ids("branch")


# ─── VERTRETUNGSANTRAG ────────────────────────────────────────────────────────

class TestSubstitutionRequest:
    def _request(self, **kwargs) -> SubstitutionRequest:
        data = dict(
            id="R1", original_teacher_id="T2", substitute_teacher_id="T5",
            substitution_date=DAY, start_time=time(14, 0), end_time=time(15, 0),
        )
        data.update(kwargs)
        return SubstitutionRequest(**data)

    def test_default_pending(self):
        r = self._request()
        assert r.status == SubstitutionStatus.PENDING
        assert not r.is_terminal
        assert r.history == []

    def test_same_teacher_rejected(self):
        with pytest.raises(ValidationError):
            self._request(substitute_teacher_id="T2")

    def test_slot(self):
        assert self._request().slot == span(DAY, "14:00", "15:00")

    @pytest.mark.parametrize("status, target, allowed", [
        ("pending", "approved", True),
        ("pending", "cancelled", True),
        ("pending", "completed", False),
        ("approved", "completed", True),
        ("approved", "cancelled", True),
        ("completed", "cancelled", False),
        ("cancelled", "approved", False),
    ])
    def test_transition_table(self, status, target, allowed):
        r = self._request(status=status)
        assert r.can_transition_to(SubstitutionStatus(target)) is allowed

    def test_terminal_states(self):
        assert self._request(status="completed").is_terminal
        assert self._request(status="cancelled").is_terminal


# ─── LEHRKRAFT / SNAPSHOT ─────────────────────────────────────────────────────

class TestTeacherAndSnapshot:
    def test_teacher_filters(self):
        t = Teacher(id=" T1 ", name="Müller, Anna", subjects=["Englisch"], branch_ids=["nord"])
        assert t.id == "T1"
        assert t.teaches("englisch")
        assert not t.teaches("Deutsch")
        assert t.works_at("nord")
        assert not t.works_at("sued")

    def test_snapshot_summary_and_filter(self):
        snap = ScheduleSnapshot(
            sessions=[
                _session("S1", "10:00", "11:00", classroom_id="101"),
                _session("S2", "10:00", "11:00", branch_id="sued", status="cancelled"),
                _session("S3", "10:00", "11:00", day=date(2025, 9, 2)),
            ],
            teachers=[Teacher(id="T1", name="A")],
        )
        assert "Einheiten: 3 (1 abgesagt)" in snap.summary()
        assert [s.id for s in snap.sessions_on(DAY)] == ["S1", "S2"]
        assert [s.id for s in snap.sessions_on(DAY, branch_id="sued")] == ["S2"]
        assert snap.teacher_ids() == {"T1"}

    def test_snapshot_json_roundtrip(self, tmp_path):
        snap = ScheduleSnapshot(
            sessions=[_session("S1", "10:00", "11:00", student_ids=["A"])],
            teachers=[Teacher(id="T1", name="A", subjects=["Englisch"])],
        )
        path = tmp_path / "snap.json"
        snap.save_json(path)
        loaded = ScheduleSnapshot.load_json(path)
        assert loaded.sessions == snap.sessions
        assert loaded.created_at is not None

    def test_snapshot_load_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ScheduleSnapshot.load_json(tmp_path / "fehlt.json")
