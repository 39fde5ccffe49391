from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Literal, Protocol

from app.schemas.timetable import CoursePayload, LabPayload, StaticHourPayload, TimetableConfig
from app.services.conflicts import actor_conflict, lab_conflict, section_slots_free
from app.services.grid import CourseEntry, LabEntry, StaticEntry, TimetableGrid
from app.services.sections import DAY_COUNT, PERIOD_COUNT, section_index, section_indices_for_year_group

logger = logging.getLogger(__name__)

DEFAULT_ATTEMPT_BUDGET = 400
DEFAULT_HOD_PERIOD_COUNT = 3

PlacementStatus = Literal["placed", "exhausted", "unplaceable"]


class RandomSource(Protocol):
    def randrange(self, stop: int) -> int: ...


@dataclass
class PlacementOutcome:
    phase: Literal["static", "lab", "hod", "staff"]
    label: str
    section_indices: list[int]
    requested: int
    placed: int = 0
    attempts: int = 0
    status: PlacementStatus = "placed"

    def as_dict(self) -> dict:
        return {
            "phase": self.phase,
            "label": self.label,
            "section_indices": list(self.section_indices),
            "requested": self.requested,
            "placed": self.placed,
            "attempts": self.attempts,
            "status": self.status,
        }


@dataclass
class PlacementResult:
    grid: TimetableGrid
    outcomes: list[PlacementOutcome] = field(default_factory=list)

    @property
    def exhausted(self) -> list[PlacementOutcome]:
        return [item for item in self.outcomes if item.status == "exhausted"]


class PlacementEngine:
    """Greedy randomized placement of weekly demand into a fresh grid.

    Phases run in a fixed order (static, lab, HOD, staff) and each one is
    fully committed before the next starts. Every attempt either writes all
    of its cells or none of them; demand that cannot be placed within the
    attempt budget is reported in the outcomes instead of raised.
    """

    def __init__(
        self,
        config: TimetableConfig,
        *,
        rng: RandomSource | None = None,
        attempt_budget: int = DEFAULT_ATTEMPT_BUDGET,
        hod_period_count: int = DEFAULT_HOD_PERIOD_COUNT,
    ) -> None:
        if attempt_budget < 1:
            raise ValueError("attempt_budget must be at least 1")
        if not 1 <= hod_period_count <= PERIOD_COUNT:
            raise ValueError(f"hod_period_count must be between 1 and {PERIOD_COUNT}")
        self.config = config
        self.random = rng if rng is not None else random.Random(config.random_seed)
        self.attempt_budget = attempt_budget
        self.hod_period_count = hod_period_count
        self.grid = TimetableGrid(config.classes)
        self.outcomes: list[PlacementOutcome] = []

    def run(self) -> PlacementResult:
        logger.info(
            "Placement run classes=%s static=%s labs=%s hod_courses=%s staff=%s",
            self.config.classes,
            len(self.config.static_hours),
            len(self.config.labs),
            len(self.config.hod.courses),
            len(self.config.staff),
        )
        self._place_static_hours()
        self._place_labs()
        self._place_hod_courses()
        self._place_staff_courses()
        return PlacementResult(grid=self.grid, outcomes=self.outcomes)

    def _draw_slot(self, period_count: int) -> tuple[int, int]:
        day = self.random.randrange(DAY_COUNT)
        period = self.random.randrange(period_count)
        return day, period

    def _place_static_hours(self) -> None:
        for item in self.config.static_hours:
            outcome = self._place_static_hour(item)
            self.outcomes.append(outcome)
        self._log_phase("static")

    def _place_static_hour(self, item: StaticHourPayload) -> PlacementOutcome:
        target = section_index(item.year_group + 1, item.section)
        outcome = PlacementOutcome(
            phase="static",
            label=item.subject,
            section_indices=[target],
            requested=len(item.slots),
        )
        if target >= self.grid.section_count:
            logger.warning("Static hour %s targets inactive section %s", item.subject, target)
            outcome.status = "unplaceable"
            return outcome
        for slot in item.slots:
            self.grid.set(target, slot.day, slot.period, StaticEntry(subject=item.subject))
            outcome.placed += 1
        return outcome

    def _place_labs(self) -> None:
        for lab in self.config.labs:
            outcome = self._place_lab(lab)
            self.outcomes.append(outcome)
        self._log_phase("lab")

    def _place_lab(self, lab: LabPayload) -> PlacementOutcome:
        targets = section_indices_for_year_group(lab.year_group, self.grid.section_count)
        outcome = PlacementOutcome(phase="lab", label=lab.name, section_indices=targets, requested=lab.hours)
        if not targets:
            logger.warning("Lab %s targets no active section (year_group=%s)", lab.name, lab.year_group)
            outcome.status = "unplaceable"
            return outcome

        staff_names = [lab.staff_a, lab.staff_b or lab.staff_a][: len(targets)]
        failures = 0
        while outcome.placed < lab.hours and failures < self.attempt_budget:
            day, period = self._draw_slot(PERIOD_COUNT)
            outcome.attempts += 1
            if lab_conflict(self.grid, lab.name, day, period) or not section_slots_free(
                self.grid, targets, day, period
            ):
                failures += 1
                continue
            for section, staff_name in zip(targets, staff_names):
                self.grid.set(section, day, period, LabEntry(lab_name=lab.name, staff_name=staff_name))
            outcome.placed += 1
            failures = 0

        self._finish(outcome)
        return outcome

    def _place_hod_courses(self) -> None:
        hod = self.config.hod
        for course in hod.courses:
            outcome = self._place_course("hod", hod.name, course, self.hod_period_count)
            self.outcomes.append(outcome)
        self._log_phase("hod")

    def _place_staff_courses(self) -> None:
        for member in self.config.staff:
            for course in member.courses:
                outcome = self._place_course("staff", member.name, course, PERIOD_COUNT)
                self.outcomes.append(outcome)
        self._log_phase("staff")

    def _place_course(
        self,
        phase: Literal["hod", "staff"],
        teacher_name: str,
        course: CoursePayload,
        period_count: int,
    ) -> PlacementOutcome:
        target = section_index(course.year, course.section)
        outcome = PlacementOutcome(
            phase=phase,
            label=f"{course.name}-{teacher_name}",
            section_indices=[target],
            requested=course.duration,
        )
        if target >= self.grid.section_count:
            logger.warning("Course %s targets inactive section %s", outcome.label, target)
            outcome.status = "unplaceable"
            return outcome

        while outcome.placed < course.duration and outcome.attempts < self.attempt_budget:
            day, period = self._draw_slot(period_count)
            outcome.attempts += 1
            if self.grid.is_occupied(target, day, period):
                continue
            if actor_conflict(self.grid, teacher_name, day, period):
                continue
            self.grid.set(target, day, period, CourseEntry(course_name=course.name, teacher_name=teacher_name))
            outcome.placed += 1

        self._finish(outcome)
        return outcome

    def _finish(self, outcome: PlacementOutcome) -> None:
        if outcome.placed < outcome.requested:
            outcome.status = "exhausted"
            logger.warning(
                "Placement exhausted phase=%s item=%s placed=%s requested=%s attempts=%s",
                outcome.phase,
                outcome.label,
                outcome.placed,
                outcome.requested,
                outcome.attempts,
            )

    def _log_phase(self, phase: str) -> None:
        items = [item for item in self.outcomes if item.phase == phase]
        logger.info(
            "Phase %s done items=%s placed=%s requested=%s",
            phase,
            len(items),
            sum(item.placed for item in items),
            sum(item.requested for item in items),
        )


def locked_cells(config: TimetableConfig) -> set[tuple[int, int, int]]:
    locked: set[tuple[int, int, int]] = set()
    for item in config.static_hours:
        target = section_index(item.year_group + 1, item.section)
        if target >= config.classes:
            continue
        for slot in item.slots:
            locked.add((target, slot.day, slot.period))
    return locked


def generate_grid(
    config: TimetableConfig,
    *,
    rng: RandomSource | None = None,
    attempt_budget: int = DEFAULT_ATTEMPT_BUDGET,
    hod_period_count: int = DEFAULT_HOD_PERIOD_COUNT,
) -> PlacementResult:
    engine = PlacementEngine(config, rng=rng, attempt_budget=attempt_budget, hod_period_count=hod_period_count)
    return engine.run()
