"""Snapshot loading and date handling utilities."""

import json
import math
import re
from pathlib import Path
from typing import Any

from herold.models import (
    FontConfig,
    LayoutSettings,
    Person,
    PersonDetails,
    ProjectSettings,
    ProjectSnapshot,
    Relationship,
    ThemeConfig,
)


MONTH_MAP = {
    "JAN": 1,
    "JANUARY": 1,
    "JANUARI": 1,
    "FEB": 2,
    "FEBRUARY": 2,
    "FEBRUARI": 2,
    "MAR": 3,
    "MARCH": 3,
    "MARS": 3,
    "APR": 4,
    "APRIL": 4,
    "MAY": 5,
    "MAJ": 5,
    "JUN": 6,
    "JUNE": 6,
    "JUNI": 6,
    "JUL": 7,
    "JULY": 7,
    "JULI": 7,
    "AUG": 8,
    "AUGUST": 8,
    "AUGUSTI": 8,
    "SEP": 9,
    "SEPT": 9,
    "SEPTEMBER": 9,
    "OCT": 10,
    "OCTOBER": 10,
    "OKT": 10,
    "OKTOBER": 10,
    "NOV": 11,
    "NOVEMBER": 11,
    "DEC": 12,
    "DECEMBER": 12,
}

# Legacy project files were written with Swedish field names and tags
LEGACY_PERSON_KEYS = {
    "namn": "name",
    "kön": "gender",
    "föräldrar": "parents",
    "barn": "children",
    "anteckningar": "notes",
}

GENDER_TAGS = {
    "man": "male",
    "kvinna": "female",
    "male": "male",
    "female": "female",
    "other": "other",
}

STATUS_TAGS = {
    "levande": "living",
    "död": "deceased",
    "okänd": "unknown",
    "living": "living",
    "deceased": "deceased",
    "unknown": "unknown",
}

MARRIAGE_STATUS_TAGS = {
    "gift": "married",
    "skild": "divorced",
    "änka/änkling": "widowed",
}

_QUALIFIER_RE = re.compile(
    r"^(ABT\.?|ABOUT|BEF\.?|BEFORE|AFT\.?|AFTER|EST\.?|CAL\.?|CIRCA|CA\.?|AROUND|OMKRING):?\s*",
    flags=re.IGNORECASE,
)


def _iso(year: int, month: int | None, day: int | None) -> str | None:
    month = month or 1
    day = day or 1
    if 1 <= month <= 12 and 1 <= day <= 31:
        return f"{year:04d}-{month:02d}-{day:02d}"
    return None


def parse_date_string(date_str: str | None) -> str | None:
    """
    Parse a free-form date into ISO format (YYYY-MM-DD).
    Returns None if the date cannot be parsed.

    Handles formats like:
    - "1839-08-29", "1746-00-00"
    - "25 NOV 1954", "11 Aug. 1968"
    - "NOV 1954", "May, 1837"
    - "April 17, 1850", "SEPT. 17,1910"
    - "01/27/1920", "01-27-1920"
    - "1698", "ABOUT 1905", "(1789?)"
    """
    if not date_str:
        return None

    s = date_str.strip().strip("()").rstrip("?")
    s = _QUALIFIER_RE.sub("", s).strip()
    if not s:
        return None

    match = re.match(r"^(\d{4})-(\d{2})-(\d{2})$", s)
    if match:
        return _iso(int(match.group(1)), int(match.group(2)), int(match.group(3)))

    match = re.match(r"^(\d{1,2})\s+([A-Za-z]+)\.?\s*(\d{4})$", s)
    if match:
        month = MONTH_MAP.get(match.group(2).upper())
        if month:
            return _iso(int(match.group(3)), month, int(match.group(1)))

    match = re.match(r"^([A-Za-z]+)\.?,?\s*(\d{4})$", s)
    if match:
        month = MONTH_MAP.get(match.group(1).upper())
        if month:
            return _iso(int(match.group(2)), month, None)

    match = re.match(r"^([A-Za-z]+)\.?\s*(\d{1,2}),?\s*(\d{4})$", s)
    if match:
        month = MONTH_MAP.get(match.group(1).upper())
        if month:
            return _iso(int(match.group(3)), month, int(match.group(2)))

    match = re.match(r"^(\d{1,2})[-/](\d{1,2})[-/](\d{4})$", s)
    if match:
        return _iso(int(match.group(3)), int(match.group(1)), int(match.group(2)))

    match = re.match(r"^(\d{4})$", s)
    if match:
        return _iso(int(match.group(1)), None, None)

    return None


def _normalize_date(value: str | None) -> str | None:
    # Keep the raw text when it cannot be normalised; it is still shown to users
    return parse_date_string(value) or value


def person_from_dict(data: dict[str, Any]) -> Person:
    """Build a Person from a project-store record, accepting legacy field names."""
    record = {LEGACY_PERSON_KEYS.get(key, key): value for key, value in data.items()}

    person_id = record.get("id")
    if not person_id:
        raise ValueError(f"Person record without id: {data!r}")
    for required in ("name", "generation"):
        if record.get(required) is None:
            raise ValueError(f"Person {person_id} is missing required field '{required}'")

    generation = record["generation"]
    if isinstance(generation, bool) or not isinstance(generation, (int, float)):
        raise ValueError(f"Person {person_id} has a non-numeric generation: {generation!r}")
    if not math.isfinite(generation):
        raise ValueError(f"Person {person_id} has a non-finite generation: {generation!r}")

    details = PersonDetails(
        birth_date=_normalize_date(record.get("birthDate") or record.get("birth_date")),
        death_date=_normalize_date(record.get("deathDate") or record.get("death_date")),
        cultural_background=record.get("culturalBackground") or record.get("cultural_background"),
        titles=list(record.get("titles") or []),
        locations=list(record.get("locations") or []),
    )

    return Person(
        id=str(person_id),
        name=str(record["name"]),
        gender=GENDER_TAGS.get(record.get("gender") or "other", "other"),
        generation=generation,
        parents=[str(p) for p in record.get("parents") or []],
        children=[str(c) for c in record.get("children") or []],
        partner=str(record["partner"]) if record.get("partner") else None,
        status=STATUS_TAGS.get(record.get("status") or "unknown", "unknown"),
        notes=record.get("notes") or "",
        details=details,
    )


def relationship_from_dict(data: dict[str, Any]) -> Relationship:
    status = data.get("status")
    return Relationship(
        relationship_type=data["type"],
        person1_id=str(data["person1"]),
        person2_id=str(data["person2"]),
        status=MARRIAGE_STATUS_TAGS.get(status, status),
        start_date=_normalize_date(data.get("startDate")),
        end_date=_normalize_date(data.get("endDate")),
        notes=data.get("notes"),
    )


def settings_from_dict(data: dict[str, Any] | None) -> ProjectSettings:
    """Build ProjectSettings, falling back to the defaults for anything absent."""
    data = data or {}
    defaults = ProjectSettings()

    font_data = data.get("font") or {}
    sizes = font_data.get("size") or {}
    font = FontConfig(
        family=font_data.get("family", defaults.font.family),
        fallbacks=list(font_data.get("fallbacks", defaults.font.fallbacks)),
        title_size=sizes.get("title", defaults.font.title_size),
        names_size=sizes.get("names", defaults.font.names_size),
        relationships_size=sizes.get("relationships", defaults.font.relationships_size),
    )

    theme_data = data.get("theme") or {}
    colors = theme_data.get("colors") or {}
    decorations = theme_data.get("decorations") or {}
    theme = ThemeConfig(
        name=theme_data.get("name", defaults.theme.name),
        background=colors.get("background", defaults.theme.background),
        text=colors.get("text", defaults.theme.text),
        lines=colors.get("lines", defaults.theme.lines),
        accent=colors.get("accent", defaults.theme.accent),
        show_border=decorations.get("showBorder", defaults.theme.show_border),
        show_corner_decorations=decorations.get(
            "showCornerDecorations", defaults.theme.show_corner_decorations
        ),
        show_shadows=decorations.get("showShadows", defaults.theme.show_shadows),
    )

    layout_data = data.get("layout") or {}
    layout = LayoutSettings(
        algorithm=layout_data.get("algorithm", defaults.layout.algorithm),
        spacing=layout_data.get("spacing", defaults.layout.spacing),
        show_generation_labels=layout_data.get(
            "showGenerationLabels", defaults.layout.show_generation_labels
        ),
        show_marriage_symbols=layout_data.get(
            "showMarriageSymbols", defaults.layout.show_marriage_symbols
        ),
        center_main_person=layout_data.get("centerMainPerson", defaults.layout.center_main_person),
    )

    return ProjectSettings(
        font=font,
        orientation=data.get("orientation", defaults.orientation),
        theme=theme,
        layout=layout,
    )


def snapshot_from_dict(data: dict[str, Any]) -> ProjectSnapshot:
    """
    Build a ProjectSnapshot from the JSON shape written by the project store.

    Members may be given as a mapping keyed by id or as a list of records.
    Member order is preserved; it decides first-touch clustering.
    """
    raw_members = data.get("members") or {}
    if isinstance(raw_members, dict):
        raw_members = list(raw_members.values())

    members: dict[str, Person] = {}
    for record in raw_members:
        person = person_from_dict(record)
        members[person.id] = person

    return ProjectSnapshot(
        id=str(data["id"]),
        name=data.get("name", ""),
        description=data.get("description", ""),
        main_person_id=str(data.get("mainPersonId") or data.get("main_person_id") or ""),
        members=members,
        relationships=[relationship_from_dict(r) for r in data.get("relationships") or []],
        settings=settings_from_dict(data.get("settings")),
    )


def load_snapshot(path: Path) -> ProjectSnapshot:
    """Read a project snapshot from a UTF-8 JSON file."""
    return snapshot_from_dict(json.loads(Path(path).read_text(encoding="utf-8")))
