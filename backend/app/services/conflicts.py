from __future__ import annotations

from app.services.grid import TimetableGrid


def lab_conflict(grid: TimetableGrid, lab_name: str, day: int, period: int) -> bool:
    """True if `lab_name` is already running in any section at this slot."""
    return any(value is not None and value.lab == lab_name for _, value in grid.cells_at(day, period))


def actor_conflict(grid: TimetableGrid, actor_name: str, day: int, period: int) -> bool:
    """True if `actor_name` already teaches in any section at this slot.

    Matches on the teacher recorded with each assignment, so "Rao" never
    collides with "Dr.Rao".
    """
    return any(value is not None and value.teacher == actor_name for _, value in grid.cells_at(day, period))


def section_slots_free(grid: TimetableGrid, sections: list[int], day: int, period: int) -> bool:
    return all(not grid.is_occupied(section, day, period) for section in sections)
