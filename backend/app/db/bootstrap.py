from __future__ import annotations

import logging

from sqlalchemy import inspect

from app.db.base import Base
from app.db.session import engine
import app.models  # noqa: F401

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: dict[str, set[str]] = {
    "generated_timetables": {"id", "class_count", "config", "grid", "placement_report", "random_seed"},
}


def missing_schema_columns(connection) -> tuple[list[str], dict[str, list[str]]]:
    inspector = inspect(connection)
    table_names = set(inspector.get_table_names())
    missing_tables: list[str] = []
    missing_columns: dict[str, list[str]] = {}
    for table_name, columns in REQUIRED_COLUMNS.items():
        if table_name not in table_names:
            missing_tables.append(table_name)
            continue
        existing = {item["name"] for item in inspector.get_columns(table_name)}
        missing = sorted(columns - existing)
        if missing:
            missing_columns[table_name] = missing
    return missing_tables, missing_columns


def ensure_runtime_schema_compatibility() -> None:
    with engine.begin() as connection:
        missing_tables, missing_columns = missing_schema_columns(connection)
        if missing_tables:
            logger.info("Creating missing tables: %s", ", ".join(missing_tables))
            Base.metadata.create_all(bind=connection)
        if missing_columns:
            logger.warning("Schema is missing columns, run the migrations: %s", missing_columns)
