from __future__ import annotations

import logging
import re

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.exceptions import ConfigurationError, ResourceNotFoundError, SchedulerError
from app.models.timetable import GeneratedTimetable
from app.schemas.generator import (
    CellOut,
    GeneratedTimetableListItem,
    GeneratedTimetableOut,
    PlacementOutcomeOut,
    PlacementSummary,
    SectionTimetableOut,
    TeacherScheduleOut,
    TeacherSchedulesResponse,
)
from app.schemas.timetable import CellUpdate, TimetableConfig
from app.services.export import render_export
from app.services.grid import Assignment, ManualEntry, TimetableGrid
from app.services.placement import RandomSource, generate_grid, locked_cells
from app.services.sections import DAY_COUNT, PERIOD_COUNT, section_names
from app.services.teacher_view import busy_period_count, project_teacher_schedules, teacher_names_for

logger = logging.getLogger(__name__)

LAB_TEXT_PATTERN = re.compile(r"^Lab\((?P<lab>.+)\)-(?P<staff>.+)$")


def known_actor_names(config: TimetableConfig) -> list[str]:
    names = teacher_names_for(config)
    for lab in config.labs:
        for candidate in (lab.staff_a, lab.staff_b):
            if candidate and candidate not in names:
                names.append(candidate)
    return names


def resolve_manual_identity(
    value: str,
    teacher_names: list[str],
    lab_names: list[str],
) -> tuple[str | None, str | None]:
    """Work out who (and which lab) a typed cell belongs to.

    Cells read ``Course-Teacher`` or ``Lab(Name)-Staff``, so a teacher only
    matches as the whole text after a hyphen (or the whole text). The longest
    configured name wins, which keeps ``Mary-Ann`` from resolving to ``Ann``.
    """
    text = (value or "").strip()
    teacher = None
    for name in sorted(teacher_names, key=len, reverse=True):
        if text == name or text.endswith(f"-{name}"):
            teacher = name
            break
    lab = None
    match = LAB_TEXT_PATTERN.match(text)
    if match is not None and match.group("lab") in lab_names:
        lab = match.group("lab")
    return teacher, lab


def update_cell(
    grid: TimetableGrid,
    locked: set[tuple[int, int, int]],
    section: int,
    day: int,
    period: int,
    value: str,
    *,
    teacher: str | None = None,
    lab: str | None = None,
) -> bool:
    """Overwrite one cell by hand. Locked (static) cells are left untouched.

    No conflict checks are made; the operator owns consistency after a manual
    override.
    """
    if (section, day, period) in locked:
        return False
    text = (value or "").strip()
    grid.set(section, day, period, ManualEntry(value=text, teacher_name=teacher, lab_name=lab) if text else None)
    return True


def load_config(record: GeneratedTimetable) -> TimetableConfig:
    try:
        return TimetableConfig.model_validate(record.config)
    except ValidationError as exc:
        raise ConfigurationError(
            "Stored timetable configuration is invalid",
            details={"timetable_id": record.id, "errors": exc.errors(include_url=False)},
        ) from exc


def load_grid(record: GeneratedTimetable) -> TimetableGrid:
    try:
        return TimetableGrid.from_payload(record.grid)
    except (KeyError, ValueError, IndexError) as exc:
        raise ConfigurationError(
            "Stored timetable grid is invalid",
            details={"timetable_id": record.id},
        ) from exc


def _run_placement(config: TimetableConfig, rng: RandomSource | None) -> tuple[TimetableGrid, list[dict]]:
    settings = get_settings()
    result = generate_grid(
        config,
        rng=rng,
        attempt_budget=settings.placement_attempt_budget,
        hod_period_count=settings.hod_period_count,
    )
    if result.exhausted:
        logger.warning(
            "Placement left %s item(s) short: %s",
            len(result.exhausted),
            ", ".join(f"{item.phase}:{item.label}" for item in result.exhausted),
        )
    return result.grid, [outcome.as_dict() for outcome in result.outcomes]


def generate_timetable(db: Session, config: TimetableConfig, *, rng: RandomSource | None = None) -> GeneratedTimetable:
    grid, report = _run_placement(config, rng)
    record = GeneratedTimetable(
        class_count=config.classes,
        config=config.model_dump(mode="json", by_alias=True),
        grid=grid.to_payload(),
        placement_report=report,
        random_seed=config.random_seed,
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    logger.info("Generated timetable %s for %s classes", record.id, record.class_count)
    return record


def regenerate_timetable(
    db: Session,
    timetable_id: str,
    *,
    rng: RandomSource | None = None,
) -> GeneratedTimetable:
    record = get_timetable_or_404(db, timetable_id)
    config = load_config(record)
    grid, report = _run_placement(config, rng)
    record.grid = grid.to_payload()
    record.placement_report = report
    db.commit()
    db.refresh(record)
    logger.info("Regenerated timetable %s", record.id)
    return record


def get_timetable_or_404(db: Session, timetable_id: str) -> GeneratedTimetable:
    record = db.get(GeneratedTimetable, timetable_id)
    if record is None:
        raise ResourceNotFoundError("Timetable", timetable_id)
    return record


def list_timetables(db: Session) -> list[GeneratedTimetable]:
    query = select(GeneratedTimetable).order_by(GeneratedTimetable.created_at.desc())
    return list(db.execute(query).scalars())


def delete_timetable(db: Session, timetable_id: str) -> None:
    record = get_timetable_or_404(db, timetable_id)
    db.delete(record)
    db.commit()
    logger.info("Deleted timetable %s", timetable_id)


def edit_cell(db: Session, timetable_id: str, payload: CellUpdate) -> tuple[bool, Assignment | None, bool]:
    record = get_timetable_or_404(db, timetable_id)
    if payload.section >= record.class_count:
        raise SchedulerError(
            "Section is outside this timetable",
            details={"section": payload.section, "classes": record.class_count},
        )
    config = load_config(record)
    grid = load_grid(record)
    locked = locked_cells(config)
    teacher, lab = payload.teacher, payload.lab
    if teacher is None or lab is None:
        resolved_teacher, resolved_lab = resolve_manual_identity(
            payload.value,
            known_actor_names(config),
            [item.name for item in config.labs],
        )
        teacher = teacher if teacher is not None else resolved_teacher
        lab = lab if lab is not None else resolved_lab
    updated = update_cell(
        grid,
        locked,
        payload.section,
        payload.day,
        payload.period,
        payload.value,
        teacher=teacher,
        lab=lab,
    )
    if updated:
        record.grid = grid.to_payload()
        db.commit()
        logger.info(
            "Cell edited timetable=%s section=%s day=%s period=%s",
            timetable_id,
            payload.section,
            payload.day,
            payload.period,
        )
    else:
        logger.info(
            "Ignored edit of locked cell timetable=%s section=%s day=%s period=%s",
            timetable_id,
            payload.section,
            payload.day,
            payload.period,
        )
    is_locked = (payload.section, payload.day, payload.period) in locked
    return updated, grid.get(payload.section, payload.day, payload.period), is_locked


def cell_out(value: Assignment | None, *, locked: bool = False) -> CellOut | None:
    if value is None:
        return None
    return CellOut(kind=value.kind, text=value.text, teacher=value.teacher, lab=value.lab, locked=locked)


def summarize_report(report: list[dict]) -> PlacementSummary:
    return PlacementSummary(
        requested_hours=sum(item["requested"] for item in report),
        placed_hours=sum(item["placed"] for item in report),
        exhausted_items=sum(1 for item in report if item["status"] == "exhausted"),
        unplaceable_items=sum(1 for item in report if item["status"] == "unplaceable"),
    )


def serialize_timetable(record: GeneratedTimetable) -> GeneratedTimetableOut:
    config = load_config(record)
    grid = load_grid(record)
    locked = locked_cells(config)
    names = section_names(record.class_count)
    sections = [
        SectionTimetableOut(
            index=section,
            name=names[section],
            filled_periods=grid.filled_count(section),
            days=[
                [
                    cell_out(grid.get(section, day, period), locked=(section, day, period) in locked)
                    for period in range(PERIOD_COUNT)
                ]
                for day in range(DAY_COUNT)
            ],
        )
        for section in range(grid.section_count)
    ]
    return GeneratedTimetableOut(
        id=record.id,
        classes=record.class_count,
        random_seed=record.random_seed,
        config=config,
        sections=sections,
        placement_report=[PlacementOutcomeOut(**item) for item in record.placement_report],
        summary=summarize_report(record.placement_report),
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def serialize_list_item(record: GeneratedTimetable) -> GeneratedTimetableListItem:
    return GeneratedTimetableListItem(
        id=record.id,
        classes=record.class_count,
        summary=summarize_report(record.placement_report),
        created_at=record.created_at,
    )


def teacher_schedules(record: GeneratedTimetable) -> TeacherSchedulesResponse:
    config = load_config(record)
    grid = load_grid(record)
    schedules = project_teacher_schedules(grid, teacher_names_for(config), section_names(record.class_count))
    return TeacherSchedulesResponse(
        timetable_id=record.id,
        teachers=[
            TeacherScheduleOut(name=name, days=days, busy_periods=busy_period_count(days))
            for name, days in schedules.items()
        ],
    )


def export_timetable(record: GeneratedTimetable) -> str:
    return render_export(load_grid(record), section_names(record.class_count))
