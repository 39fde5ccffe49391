from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.schemas.generator import (
    CellUpdateResult,
    GeneratedTimetableListItem,
    GeneratedTimetableOut,
    TeacherSchedulesResponse,
)
from app.schemas.timetable import CellUpdate, TimetableConfig
from app.services.timetables import (
    cell_out,
    delete_timetable,
    edit_cell,
    export_timetable,
    generate_timetable,
    get_timetable_or_404,
    list_timetables,
    regenerate_timetable,
    serialize_list_item,
    serialize_timetable,
    teacher_schedules,
)

router = APIRouter()


@router.post("/", response_model=GeneratedTimetableOut, status_code=status.HTTP_201_CREATED)
def create_timetable(payload: TimetableConfig, db: Session = Depends(get_db)) -> GeneratedTimetableOut:
    record = generate_timetable(db, payload)
    return serialize_timetable(record)


@router.get("/", response_model=list[GeneratedTimetableListItem])
def list_generated_timetables(db: Session = Depends(get_db)) -> list[GeneratedTimetableListItem]:
    return [serialize_list_item(record) for record in list_timetables(db)]


@router.get("/{timetable_id}", response_model=GeneratedTimetableOut)
def get_timetable(timetable_id: str, db: Session = Depends(get_db)) -> GeneratedTimetableOut:
    return serialize_timetable(get_timetable_or_404(db, timetable_id))


@router.delete("/{timetable_id}")
def remove_timetable(timetable_id: str, db: Session = Depends(get_db)) -> dict:
    delete_timetable(db, timetable_id)
    return {"success": True}


@router.post("/{timetable_id}/regenerate", response_model=GeneratedTimetableOut)
def regenerate(timetable_id: str, db: Session = Depends(get_db)) -> GeneratedTimetableOut:
    return serialize_timetable(regenerate_timetable(db, timetable_id))


@router.patch("/{timetable_id}/cells", response_model=CellUpdateResult)
def update_timetable_cell(timetable_id: str, payload: CellUpdate, db: Session = Depends(get_db)) -> CellUpdateResult:
    updated, value, locked = edit_cell(db, timetable_id, payload)
    return CellUpdateResult(
        updated=updated,
        section=payload.section,
        day=payload.day,
        period=payload.period,
        cell=cell_out(value, locked=locked),
    )


@router.get("/{timetable_id}/teachers", response_model=TeacherSchedulesResponse)
def get_teacher_schedules(timetable_id: str, db: Session = Depends(get_db)) -> TeacherSchedulesResponse:
    return teacher_schedules(get_timetable_or_404(db, timetable_id))


@router.get("/{timetable_id}/export", response_class=PlainTextResponse)
def export(timetable_id: str, db: Session = Depends(get_db)) -> PlainTextResponse:
    record = get_timetable_or_404(db, timetable_id)
    return PlainTextResponse(
        export_timetable(record),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="timetable.csv"'},
    )
