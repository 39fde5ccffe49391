from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Union

from app.services.sections import DAY_COUNT, PERIOD_COUNT


@dataclass(frozen=True)
class StaticEntry:
    subject: str

    kind = "static"

    @property
    def text(self) -> str:
        return self.subject

    @property
    def teacher(self) -> str | None:
        return None

    @property
    def lab(self) -> str | None:
        return None


@dataclass(frozen=True)
class LabEntry:
    lab_name: str
    staff_name: str

    kind = "lab"

    @property
    def text(self) -> str:
        return f"Lab({self.lab_name})-{self.staff_name}"

    @property
    def teacher(self) -> str | None:
        return self.staff_name

    @property
    def lab(self) -> str | None:
        return self.lab_name


@dataclass(frozen=True)
class CourseEntry:
    course_name: str
    teacher_name: str

    kind = "course"

    @property
    def text(self) -> str:
        return f"{self.course_name}-{self.teacher_name}"

    @property
    def teacher(self) -> str | None:
        return self.teacher_name

    @property
    def lab(self) -> str | None:
        return None


@dataclass(frozen=True)
class ManualEntry:
    value: str
    teacher_name: str | None = None
    lab_name: str | None = None

    kind = "manual"

    @property
    def text(self) -> str:
        return self.value

    @property
    def teacher(self) -> str | None:
        return self.teacher_name

    @property
    def lab(self) -> str | None:
        return self.lab_name


Assignment = Union[StaticEntry, LabEntry, CourseEntry, ManualEntry]


def assignment_to_payload(value: Assignment | None) -> dict | None:
    if value is None:
        return None
    if isinstance(value, StaticEntry):
        return {"kind": "static", "subject": value.subject}
    if isinstance(value, LabEntry):
        return {"kind": "lab", "lab": value.lab_name, "teacher": value.staff_name}
    if isinstance(value, CourseEntry):
        return {"kind": "course", "course": value.course_name, "teacher": value.teacher_name}
    return {"kind": "manual", "text": value.value, "teacher": value.teacher_name, "lab": value.lab_name}


def assignment_from_payload(payload: dict | None) -> Assignment | None:
    if payload is None:
        return None
    kind = payload.get("kind")
    if kind == "static":
        return StaticEntry(subject=payload["subject"])
    if kind == "lab":
        return LabEntry(lab_name=payload["lab"], staff_name=payload["teacher"])
    if kind == "course":
        return CourseEntry(course_name=payload["course"], teacher_name=payload["teacher"])
    if kind == "manual":
        return ManualEntry(value=payload["text"], teacher_name=payload.get("teacher"), lab_name=payload.get("lab"))
    raise ValueError(f"Unknown assignment kind: {kind!r}")


class TimetableGrid:
    """Weekly assignment matrix indexed by (section, day, period).

    Plain storage: writes overwrite unconditionally and nothing here knows
    about locks or conflicts.
    """

    def __init__(self, section_count: int) -> None:
        if section_count < 0:
            raise ValueError("section_count must not be negative")
        self.section_count = section_count
        self._cells: list[list[list[Assignment | None]]] = [
            [[None] * PERIOD_COUNT for _ in range(DAY_COUNT)] for _ in range(section_count)
        ]

    def _check(self, section: int, day: int, period: int) -> None:
        if not (0 <= section < self.section_count and 0 <= day < DAY_COUNT and 0 <= period < PERIOD_COUNT):
            raise IndexError(f"Cell ({section}, {day}, {period}) is outside the grid")

    def get(self, section: int, day: int, period: int) -> Assignment | None:
        self._check(section, day, period)
        return self._cells[section][day][period]

    def set(self, section: int, day: int, period: int, value: Assignment | None) -> None:
        self._check(section, day, period)
        self._cells[section][day][period] = value

    def is_occupied(self, section: int, day: int, period: int) -> bool:
        return self.get(section, day, period) is not None

    def text_at(self, section: int, day: int, period: int) -> str:
        value = self.get(section, day, period)
        return "" if value is None else value.text

    def cells_at(self, day: int, period: int) -> Iterator[tuple[int, Assignment | None]]:
        for section in range(self.section_count):
            yield section, self.get(section, day, period)

    def filled_count(self, section: int) -> int:
        return sum(1 for day in self._cells[section] for value in day if value is not None)

    def text_rows(self, section: int) -> list[list[str]]:
        return [[self.text_at(section, day, period) for period in range(PERIOD_COUNT)] for day in range(DAY_COUNT)]

    def to_payload(self) -> list[list[list[dict | None]]]:
        return [[[assignment_to_payload(value) for value in day] for day in section] for section in self._cells]

    @classmethod
    def from_payload(cls, payload: list[list[list[dict | None]]]) -> "TimetableGrid":
        grid = cls(len(payload))
        for section, days in enumerate(payload):
            for day, periods in enumerate(days):
                for period, value in enumerate(periods):
                    grid.set(section, day, period, assignment_from_payload(value))
        return grid
