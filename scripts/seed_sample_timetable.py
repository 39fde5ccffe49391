"""Generate and store a sample department timetable.

Run:
  PYTHONPATH=backend python scripts/seed_sample_timetable.py
"""

from __future__ import annotations

import logging
import os

from app.core.config import get_settings
from app.core.logging import configure_logging
from app.db.bootstrap import ensure_runtime_schema_compatibility
from app.db.session import SessionLocal
from app.schemas.timetable import TimetableConfig
from app.services.timetables import export_timetable, generate_timetable, summarize_report

logger = logging.getLogger(__name__)

RAW_SEED = os.getenv("SEED_RANDOM_SEED", "").strip()
RANDOM_SEED = int(RAW_SEED) if RAW_SEED.isdigit() else None
CLASS_COUNT = int(os.getenv("SEED_CLASS_COUNT", "8"))

SAMPLE_CONFIG = {
    "classes": CLASS_COUNT,
    "randomSeed": RANDOM_SEED,
    "staticHours": [
        {"yearGroup": 0, "section": "A", "subject": "Library", "slots": [{"day": 0, "period": 4}]},
        {"yearGroup": 0, "section": "B", "subject": "Library", "slots": [{"day": 1, "period": 4}]},
        {"yearGroup": 1, "section": "A", "subject": "Sports", "slots": [{"day": 5, "period": 3}, {"day": 5, "period": 4}]},
        {"yearGroup": 3, "subject": "Seminar", "slots": [{"day": 4, "period": 0}]},
    ],
    "hod": {
        "name": "Dr.Rao",
        "courses": [
            {"year": 3, "section": "A", "name": "Compiler Design", "duration": 3},
            {"year": 4, "section": "A", "name": "Research Methods", "duration": 2},
        ],
    },
    "labs": [
        {"yearGroup": 0, "name": "C Lab", "hours": 3, "staffA": "Asha", "staffB": "Ravi"},
        {"yearGroup": 1, "name": "DB Lab", "hours": 3, "staffA": "Meera", "staffB": "John"},
        {"yearGroup": 2, "name": "Web Lab", "hours": 2, "staffA": "Kiran", "staffB": "Nila"},
        {"yearGroup": 3, "name": "ML Lab", "hours": 2, "staffA": "Priya"},
    ],
    "staff": [
        {
            "name": "Asha",
            "courses": [
                {"year": 1, "section": "A", "name": "Programming in C", "duration": 4},
                {"year": 1, "section": "B", "name": "Programming in C", "duration": 4},
            ],
        },
        {
            "name": "Meera",
            "courses": [
                {"year": 2, "section": "A", "name": "DBMS", "duration": 4},
                {"year": 2, "section": "B", "name": "DBMS", "duration": 4},
            ],
        },
        {
            "name": "Kiran",
            "courses": [
                {"year": 3, "section": "A", "name": "Web Technology", "duration": 4},
                {"year": 3, "section": "B", "name": "Web Technology", "duration": 4},
            ],
        },
        {
            "name": "Priya",
            "courses": [
                {"year": 4, "section": "A", "name": "Machine Learning", "duration": 4},
                {"year": 5, "section": "A", "name": "Deep Learning", "duration": 4},
            ],
        },
    ],
}


def main() -> None:
    configure_logging(get_settings().log_level)
    ensure_runtime_schema_compatibility()
    config = TimetableConfig.model_validate(SAMPLE_CONFIG)
    with SessionLocal() as session:
        record = generate_timetable(session, config)
        summary = summarize_report(record.placement_report)
        logger.info(
            "Stored timetable %s: placed %s of %s hours (%s exhausted, %s unplaceable)",
            record.id,
            summary.placed_hours,
            summary.requested_hours,
            summary.exhausted_items,
            summary.unplaceable_items,
        )
        print(export_timetable(record))


if __name__ == "__main__":
    main()
