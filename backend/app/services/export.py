from __future__ import annotations

from app.services.grid import TimetableGrid
from app.services.sections import DAY_COUNT, DAY_NAMES, PERIOD_LABELS

HEADER_LINE = "Day," + ",".join(PERIOD_LABELS)


def render_export(grid: TimetableGrid, section_names: list[str]) -> str:
    """Flat text export, one block per section.

    Cell text is written unescaped; names are validated on input so they
    never contain commas or line breaks.
    """
    lines: list[str] = []
    for section in range(grid.section_count):
        lines.append(section_names[section])
        lines.append(HEADER_LINE)
        for day, row in enumerate(grid.text_rows(section)):
            lines.append(",".join([DAY_NAMES[day], *row]))
        lines.append("")
    return "".join(f"{line}\n" for line in lines)


def parse_export(text: str) -> dict[str, list[list[str]]]:
    sections: dict[str, list[list[str]]] = {}
    lines = text.split("\n")
    index = 0
    while index < len(lines):
        name = lines[index]
        if not name:
            index += 1
            continue
        if index + 1 >= len(lines) or lines[index + 1] != HEADER_LINE:
            raise ValueError(f"Missing header after section {name!r}")
        rows: list[list[str]] = []
        for offset in range(DAY_COUNT):
            line_no = index + 2 + offset
            if line_no >= len(lines):
                raise ValueError(f"Section {name!r} is truncated")
            fields = lines[line_no].split(",")
            if len(fields) != len(PERIOD_LABELS) + 1 or fields[0] != DAY_NAMES[offset]:
                raise ValueError(f"Malformed row {line_no + 1} in section {name!r}")
            rows.append(fields[1:])
        sections[name] = rows
        index += 2 + DAY_COUNT
    return sections
