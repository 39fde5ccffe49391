from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from app.schemas.timetable import TimetableConfig

PlacementPhase = Literal["static", "lab", "hod", "staff"]
PlacementStatus = Literal["placed", "exhausted", "unplaceable"]
CellKind = Literal["static", "lab", "course", "manual"]


class PlacementOutcomeOut(BaseModel):
    phase: PlacementPhase
    label: str
    section_indices: list[int] = Field(default_factory=list)
    requested: int = Field(ge=0)
    placed: int = Field(ge=0)
    attempts: int = Field(ge=0)
    status: PlacementStatus


class CellOut(BaseModel):
    kind: CellKind
    text: str
    teacher: str | None = None
    lab: str | None = None
    locked: bool = False


class SectionTimetableOut(BaseModel):
    index: int
    name: str
    filled_periods: int
    days: list[list[CellOut | None]]


class PlacementSummary(BaseModel):
    requested_hours: int
    placed_hours: int
    exhausted_items: int
    unplaceable_items: int


class GeneratedTimetableOut(BaseModel):
    id: str
    classes: int
    random_seed: int | None = None
    config: TimetableConfig
    sections: list[SectionTimetableOut]
    placement_report: list[PlacementOutcomeOut]
    summary: PlacementSummary
    created_at: datetime | None = None
    updated_at: datetime | None = None


class GeneratedTimetableListItem(BaseModel):
    id: str
    classes: int
    summary: PlacementSummary
    created_at: datetime | None = None


class CellUpdateResult(BaseModel):
    updated: bool
    section: int
    day: int
    period: int
    cell: CellOut | None = None


class TeacherScheduleOut(BaseModel):
    name: str
    days: list[list[str]]
    busy_periods: int


class TeacherSchedulesResponse(BaseModel):
    timetable_id: str
    teachers: list[TeacherScheduleOut]


class SectionRef(BaseModel):
    index: int
    name: str


class YearGroupOut(BaseModel):
    year_group: int
    year: int
    sections: list[SectionRef]


class SectionCatalogueOut(BaseModel):
    classes: int
    days: list[str]
    periods: list[str]
    year_groups: list[YearGroupOut]
