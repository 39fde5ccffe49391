from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from app.services.sections import DAY_COUNT, MAX_CLASS_COUNT, PERIOD_COUNT, section_indices_for_year_group

FORBIDDEN_NAME_CHARACTERS = (",", "\n", "\r")

SectionLetter = Literal["A", "B"]


def clean_name(value: str) -> str:
    cleaned = value.strip()
    if not cleaned:
        raise ValueError("Value must not be blank")
    if any(char in cleaned for char in FORBIDDEN_NAME_CHARACTERS):
        raise ValueError("Value must not contain commas or line breaks")
    return cleaned


class SlotPayload(BaseModel):
    day: int = Field(ge=0, lt=DAY_COUNT)
    period: int = Field(ge=0, lt=PERIOD_COUNT)


class StaticHourPayload(BaseModel):
    year_group: int = Field(alias="yearGroup", ge=0, le=4)
    section: SectionLetter = "A"
    subject: str = Field(min_length=1, max_length=200)
    slots: list[SlotPayload] = Field(default_factory=list, max_length=DAY_COUNT * PERIOD_COUNT)

    model_config = {"populate_by_name": True}

    @field_validator("subject")
    @classmethod
    def validate_subject(cls, value: str) -> str:
        return clean_name(value)


class LabPayload(BaseModel):
    year_group: int = Field(alias="yearGroup", ge=0, le=4)
    name: str = Field(min_length=1, max_length=200)
    hours: int = Field(ge=1, le=DAY_COUNT * PERIOD_COUNT)
    staff_a: str = Field(alias="staffA", min_length=1, max_length=200)
    staff_b: str | None = Field(default=None, alias="staffB", max_length=200)

    model_config = {"populate_by_name": True}

    @field_validator("name", "staff_a")
    @classmethod
    def validate_names(cls, value: str) -> str:
        return clean_name(value)

    @field_validator("staff_b")
    @classmethod
    def normalize_staff_b(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return clean_name(value)


class CoursePayload(BaseModel):
    year: int = Field(ge=1, le=5)
    section: SectionLetter = "A"
    name: str = Field(min_length=1, max_length=200)
    duration: int = Field(ge=1, le=DAY_COUNT * PERIOD_COUNT)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return clean_name(value)


class HodPayload(BaseModel):
    name: str = Field(default="", max_length=200)
    courses: list[CoursePayload] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        if not value.strip():
            return ""
        return clean_name(value)

    @model_validator(mode="after")
    def validate_name_for_courses(self) -> "HodPayload":
        if self.courses and not self.name:
            raise ValueError("HOD name is required when HOD courses are configured")
        return self


class StaffPayload(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    courses: list[CoursePayload] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return clean_name(value)


class TimetableConfig(BaseModel):
    classes: int = Field(default=6, ge=1, le=MAX_CLASS_COUNT)
    static_hours: list[StaticHourPayload] = Field(default_factory=list, alias="staticHours")
    hod: HodPayload = Field(default_factory=HodPayload)
    labs: list[LabPayload] = Field(default_factory=list)
    staff: list[StaffPayload] = Field(default_factory=list)
    random_seed: int | None = Field(default=None, alias="randomSeed", ge=0, le=2_000_000_000)

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def validate_lab_staffing(self) -> "TimetableConfig":
        for lab in self.labs:
            targets = section_indices_for_year_group(lab.year_group, self.classes)
            if len(targets) > 1 and lab.staff_b is None:
                raise ValueError(f"Lab {lab.name} spans two sections and needs staffB")
        return self

    @model_validator(mode="after")
    def validate_unique_staff(self) -> "TimetableConfig":
        seen: set[str] = set()
        duplicates: set[str] = set()
        for member in self.staff:
            if member.name in seen:
                duplicates.add(member.name)
            seen.add(member.name)
        if duplicates:
            raise ValueError(f"Duplicate staff name(s): {', '.join(sorted(duplicates))}")
        return self


class CellUpdate(BaseModel):
    section: int = Field(ge=0, lt=MAX_CLASS_COUNT)
    day: int = Field(ge=0, lt=DAY_COUNT)
    period: int = Field(ge=0, lt=PERIOD_COUNT)
    value: str = Field(default="", max_length=400)
    teacher: str | None = Field(default=None, max_length=200)
    lab: str | None = Field(default=None, max_length=200)

    @field_validator("value")
    @classmethod
    def validate_value(cls, value: str) -> str:
        cleaned = value.strip()
        if any(char in cleaned for char in FORBIDDEN_NAME_CHARACTERS):
            raise ValueError("Cell text must not contain commas or line breaks")
        return cleaned

    @field_validator("teacher", "lab")
    @classmethod
    def normalize_identity(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()
