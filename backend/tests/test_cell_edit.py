import random

from app.schemas.timetable import TimetableConfig
from app.services.grid import ManualEntry, StaticEntry
from app.services.placement import generate_grid, locked_cells
from app.services.timetables import known_actor_names, resolve_manual_identity, update_cell


def build():
    config = TimetableConfig.model_validate(
        {
            "classes": 2,
            "staticHours": [
                {"yearGroup": 0, "section": "A", "subject": "Library", "slots": [{"day": 0, "period": 0}]}
            ],
        }
    )
    result = generate_grid(config, rng=random.Random(0))
    return result.grid, locked_cells(config)


def test_edit_free_cell_then_read_back():
    grid, locked = build()
    assert update_cell(grid, locked, 0, 1, 1, "Seminar")
    assert grid.text_at(0, 1, 1) == "Seminar"
    assert grid.get(0, 1, 1) == ManualEntry(value="Seminar")


def test_locked_cell_is_never_changed():
    grid, locked = build()
    before = grid.to_payload()
    assert not update_cell(grid, locked, 0, 0, 0, "Seminar")
    assert not update_cell(grid, locked, 0, 0, 0, "")
    assert grid.get(0, 0, 0) == StaticEntry(subject="Library")
    assert grid.to_payload() == before


def test_same_slot_in_other_section_is_not_locked():
    grid, locked = build()
    assert update_cell(grid, locked, 1, 0, 0, "Seminar")
    assert grid.text_at(1, 0, 0) == "Seminar"


def test_blank_value_clears_cell():
    grid, locked = build()
    update_cell(grid, locked, 1, 2, 2, "Seminar")
    assert update_cell(grid, locked, 1, 2, 2, "   ")
    assert grid.get(1, 2, 2) is None


def test_edit_can_carry_teacher_identity():
    grid, locked = build()
    update_cell(grid, locked, 1, 4, 4, "Revision-Asha", teacher="Asha")
    assert grid.get(1, 4, 4).teacher == "Asha"


def test_typed_course_text_resolves_to_configured_teacher():
    assert resolve_manual_identity("Revision-Kiran", ["Kiran", "Dr.Rao"], []) == ("Kiran", None)
    assert resolve_manual_identity("  Maths-Dr.Rao ", ["Kiran", "Dr.Rao"], []) == ("Dr.Rao", None)


def test_typed_lab_text_resolves_lab_and_staff():
    assert resolve_manual_identity("Lab(DB Lab)-Asha", ["Asha"], ["DB Lab"]) == ("Asha", "DB Lab")
    assert resolve_manual_identity("Lab(Unknown)-Asha", ["Asha"], ["DB Lab"]) == ("Asha", None)


def test_resolution_needs_a_whole_name_after_the_hyphen():
    assert resolve_manual_identity("Maths-Ashan", ["Asha"], []) == (None, None)
    assert resolve_manual_identity("Seminar", ["Asha"], []) == (None, None)
    assert resolve_manual_identity("Maths-Mary-Ann", ["Ann", "Mary-Ann"], []) == ("Mary-Ann", None)


def test_known_actor_names_include_lab_staff():
    config = TimetableConfig.model_validate(
        {
            "classes": 2,
            "hod": {"name": "Dr.Rao", "courses": []},
            "labs": [{"yearGroup": 0, "name": "DB Lab", "hours": 1, "staffA": "Asha", "staffB": "Ravi"}],
            "staff": [{"name": "Kiran"}, {"name": "Asha"}],
        }
    )
    assert known_actor_names(config) == ["Kiran", "Asha", "Dr.Rao", "Ravi"]
