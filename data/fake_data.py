"""Testdaten-Generator für die Unterrichtsplanung.

Erzeugt einen reproduzierbaren Snapshot mit absichtlichen Konflikten:
  1. Raum-Doppelbelegung: Raum 101 wird um 09:40 zusätzlich belegt
  2. Lehrer-Doppelbelegung: eine Lehrkraft hat parallel eine Online-Einzelstunde
  3. Schüler-Doppelbelegung: ein Gruppenschüler hat parallel eine Einzelstunde
  4. Abgesagte Einheit, die sich überschneidet (darf KEIN Konflikt sein)
  5. Online-Einheit ohne Raum (zählt nicht für Raum-Konflikte/Auslastung)
"""

import random
from datetime import date, time
from typing import Optional

from config.defaults import DEMO_BRANCHES, DEMO_SUBJECTS
from config.schema import EngineConfig
from models.interval import end_time_for, parse_time
from models.lesson_session import LessonKind, LessonSession, SessionStatus
from models.snapshot import ScheduleSnapshot
from models.teacher import Teacher

# ─── Namens-Listen ────────────────────────────────────────────────────────────

_FIRST_NAMES = [
    "Anna", "Bernd", "Clara", "Dieter", "Eva", "Frank", "Greta", "Hans",
    "Ines", "Jonas", "Karin", "Lukas", "Maria", "Nils", "Olga", "Paul",
]
_LAST_NAMES = [
    "Müller", "Schmidt", "Schneider", "Fischer", "Weber", "Meyer", "Wagner",
    "Becker", "Schulz", "Hoffmann", "Koch", "Richter", "Klein", "Wolf",
]

# Beginnzeiten des Tagesrasters
_START_TIMES = ["09:00", "10:30", "12:00", "14:00", "15:30"]

DEMO_DATE = date(2025, 9, 1)


class FakeScheduleGenerator:
    """Erzeugt Lehrkräfte und Einheiten für einen Demo-Tag."""

    def __init__(self, config: EngineConfig, seed: int = 42,
                 day: Optional[date] = None) -> None:
        self.config = config
        self.rng = random.Random(seed)
        self.day = day or DEMO_DATE
        self.duration = config.lessons.default_duration_minutes
        self._counter = 0

    def generate(self) -> ScheduleSnapshot:
        teachers = self._generate_teachers()
        sessions = self._generate_regular_sessions(teachers)
        sessions.extend(self._inject_conflicts(sessions, teachers))
        return ScheduleSnapshot(sessions=sessions, teachers=teachers)

    # ─── Lehrkräfte ───

    def _generate_teachers(self) -> list[Teacher]:
        teachers: list[Teacher] = []
        names = self.rng.sample(
            [f"{l}, {f}" for l in _LAST_NAMES for f in _FIRST_NAMES], 10
        )
        branch_ids = list(DEMO_BRANCHES)
        for i, name in enumerate(names, start=1):
            subjects = self.rng.sample(DEMO_SUBJECTS, 2)
            branches = [branch_ids[i % len(branch_ids)]]
            if i % 4 == 0:
                branches = list(branch_ids)   # arbeitet an beiden Filialen
            teachers.append(Teacher(
                id=f"T{i:02d}", name=name, subjects=subjects, branch_ids=branches,
            ))
        return teachers

    # ─── Reguläre Einheiten (konfliktfrei) ───

    def _next_id(self, prefix: str = "S") -> str:
        self._counter += 1
        return f"{prefix}{self._counter:03d}"

    def _students(self, count: int) -> list[str]:
        return [f"ST{self.rng.randint(1, 400):03d}" for _ in range(count)]

    def _generate_regular_sessions(self, teachers: list[Teacher]) -> list[LessonSession]:
        sessions: list[LessonSession] = []
        busy: set[tuple[str, str]] = set()   # (teacher_id, start)
        used_students: set[tuple[str, str]] = set()

        for branch_id, rooms in DEMO_BRANCHES.items():
            pool = [t for t in teachers if t.works_at(branch_id)]
            for room in rooms:
                for start in _START_TIMES:
                    # Vormittags immer belegt, danach bleibt ein Raum manchmal frei
                    if start not in _START_TIMES[:2] and self.rng.random() < 0.25:
                        continue
                    teacher = next(
                        (t for t in self.rng.sample(pool, len(pool))
                         if (t.id, start) not in busy),
                        None,
                    )
                    if teacher is None:
                        continue
                    busy.add((teacher.id, start))
                    students = [
                        s for s in self._students(self.rng.randint(3, 6))
                        if (s, start) not in used_students
                    ]
                    used_students.update((s, start) for s in students)
                    sessions.append(self._session(
                        start=start,
                        branch_id=branch_id,
                        classroom_id=room,
                        teacher_id=teacher.id,
                        students=students,
                        subject=self.rng.choice(teacher.subjects),
                        group_id=f"G-{branch_id}-{room}",
                    ))
        return sessions

    def _session(self, start: str, branch_id: str, classroom_id: Optional[str],
                 teacher_id: Optional[str], students: list[str],
                 subject: Optional[str] = None, group_id: Optional[str] = None,
                 kind: LessonKind = LessonKind.GROUP,
                 status: SessionStatus = SessionStatus.SCHEDULED,
                 notes: Optional[str] = None) -> LessonSession:
        start_t = parse_time(start)
        return LessonSession(
            id=self._next_id(),
            date=self.day,
            start_time=start_t,
            end_time=end_time_for(start_t, self.duration),
            branch_id=branch_id,
            teacher_id=teacher_id,
            classroom_id=classroom_id,
            group_id=group_id if kind == LessonKind.GROUP else None,
            student_ids=students,
            kind=kind,
            status=status,
            subject=subject,
            notes=notes,
        )

    # ─── Absichtliche Konflikte ───

    def _inject_conflicts(self, sessions: list[LessonSession],
                          teachers: list[Teacher]) -> list[LessonSession]:
        extra: list[LessonSession] = []
        # 09:40–11:00 berührt die Raster-Slots 09:00 und 10:30
        busy_early = {
            s.teacher_id for s in sessions
            if s.start_time in (time(9, 0), time(10, 30))
        }
        idle = [t for t in teachers if t.id not in busy_early] or teachers

        # 1. Raum 101 zusätzlich um 09:40 belegt
        extra.append(self._session(
            start="09:40", branch_id="nord", classroom_id="101",
            teacher_id=idle[0].id, students=self._students(3),
            subject=idle[0].subjects[0], notes="Raum-Doppelbelegung",
        ))

        # 2. Lehrkraft einer 10:30-Einheit unterrichtet zusätzlich online um 11:00
        anchor = next((s for s in sessions if s.start_time == time(10, 30)), None)
        if anchor is not None:
            extra.append(self._session(
                start="11:00", branch_id=anchor.branch_id, classroom_id=None,
                teacher_id=anchor.teacher_id, students=self._students(1),
                kind=LessonKind.INDIVIDUAL, notes="Lehrer-Doppelbelegung (online)",
            ))

        # 3. Gruppenschüler hat parallel eine Einzelstunde (ohne Lehrkraft)
        group = next((s for s in sessions if s.student_ids), None)
        if group is not None:
            extra.append(self._session(
                start=group.start_time.strftime("%H:%M"), branch_id=group.branch_id,
                classroom_id=None, teacher_id=None,
                students=[group.student_ids[0]], kind=LessonKind.INDIVIDUAL,
                notes="Schüler-Doppelbelegung",
            ))

        # 4. Abgesagte Einheit überschneidet Raum 102 um 12:00
        extra.append(self._session(
            start="12:00", branch_id="nord", classroom_id="102",
            teacher_id=idle[-1].id, students=self._students(2),
            status=SessionStatus.CANCELLED, notes="abgesagt",
        ))
        return extra
