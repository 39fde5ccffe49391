from __future__ import annotations

from app.schemas.timetable import TimetableConfig
from app.services.grid import TimetableGrid
from app.services.sections import DAY_COUNT, PERIOD_COUNT

FREE_LABEL = "Free"


def teacher_names_for(config: TimetableConfig) -> list[str]:
    names: list[str] = []
    for candidate in [member.name for member in config.staff] + [config.hod.name]:
        if candidate and candidate not in names:
            names.append(candidate)
    return names


def project_teacher_schedule(grid: TimetableGrid, teacher_name: str, section_names: list[str]) -> list[list[str]]:
    schedule: list[list[str]] = []
    for day in range(DAY_COUNT):
        row: list[str] = []
        for period in range(PERIOD_COUNT):
            entry = FREE_LABEL
            # Lowest section index wins if the teacher somehow shows up twice.
            for section, value in grid.cells_at(day, period):
                if value is not None and value.teacher == teacher_name:
                    entry = f"{section_names[section]}: {value.text}"
                    break
            row.append(entry)
        schedule.append(row)
    return schedule


def project_teacher_schedules(
    grid: TimetableGrid,
    teacher_names: list[str],
    section_names: list[str],
) -> dict[str, list[list[str]]]:
    return {name: project_teacher_schedule(grid, name, section_names) for name in teacher_names}


def busy_period_count(schedule: list[list[str]]) -> int:
    return sum(1 for row in schedule for entry in row if entry != FREE_LABEL)
