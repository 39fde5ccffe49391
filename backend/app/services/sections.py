from __future__ import annotations

DAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)
PERIOD_LABELS = ("1", "2", "3", "4", "5")

DAY_COUNT = len(DAY_NAMES)
PERIOD_COUNT = len(PERIOD_LABELS)

SECTION_NAMES = (
    "I-BCA-A",
    "I-BCA-B",
    "II-BCA-A",
    "II-BCA-B",
    "III-BCA-A",
    "III-BCA-B",
    "I-MCA",
    "II-MCA",
)
MAX_CLASS_COUNT = len(SECTION_NAMES)

YEAR_BASE_INDEX = {1: 0, 2: 2, 3: 4, 4: 6, 5: 7}
SPLIT_YEAR_LIMIT = 3


def section_index(year: int, section: str) -> int:
    """Map a (year, section) pair to its zero-based section index.

    Years 1-3 have A/B sub-sections. Years 4 and 5 only have one section, so
    both A and B collapse onto the same index.
    """
    base = YEAR_BASE_INDEX[year]
    if year <= SPLIT_YEAR_LIMIT and section != "A":
        return base + 1
    return base


def section_indices_for_year_group(year_group: int, class_count: int) -> list[int]:
    if 0 <= year_group < SPLIT_YEAR_LIMIT:
        candidates = [2 * year_group, 2 * year_group + 1]
    elif year_group in (3, 4):
        candidates = [YEAR_BASE_INDEX[year_group + 1]]
    else:
        candidates = []
    return [index for index in candidates if index < class_count]


def section_names(class_count: int) -> list[str]:
    return list(SECTION_NAMES[:class_count])


def section_catalogue(class_count: int) -> list[dict]:
    catalogue: list[dict] = []
    for year_group in range(len(YEAR_BASE_INDEX)):
        indices = section_indices_for_year_group(year_group, class_count)
        if not indices:
            continue
        catalogue.append(
            {
                "year_group": year_group,
                "year": year_group + 1,
                "sections": [{"index": index, "name": SECTION_NAMES[index]} for index in indices],
            }
        )
    return catalogue
