from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any

from .fields import PEOPLE_KEY
from .schemas import PersonRecord

PLACEHOLDER = "-"
PERSON_TABLE_COLUMNS: tuple[str, ...] = ("Nombre", "Documento", "Fecha Inicio")

_UPPERCASE = re.compile(r"([A-Z])")


@dataclass(slots=True)
class PersonTable:
    columns: tuple[str, ...] = PERSON_TABLE_COLUMNS
    rows: list[tuple[str, str, str]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"columns": list(self.columns), "rows": [list(row) for row in self.rows]}


def format_key(key: str) -> str:
    """Humanize a field key.

    Underscores become spaces, every uppercase letter gets a space in front of
    it and the first character is upper-cased:

        person_by_policy  -> "Person by policy"
        startDateValidity -> "Start Date Validity"
    """
    text = _UPPERCASE.sub(r" \1", key.replace("_", " "))
    return text[:1].upper() + text[1:]


def build_person_table(people: list[Any]) -> PersonTable:
    rows: list[tuple[str, str, str]] = []
    for entry in people:
        person = PersonRecord.from_dict(entry)
        rows.append(
            (
                person.full_name,
                person.document_number,
                person.coverage_start_date or PLACEHOLDER,
            )
        )
    return PersonTable(rows=rows)


def format_value(key: str, value: Any) -> str | PersonTable:
    if value is None:
        return PLACEHOLDER
    if isinstance(value, (list, tuple)):
        if key == PEOPLE_KEY and value:
            return build_person_table(list(value))
        return ", ".join(_scalar(item) for item in value) or PLACEHOLDER
    return _scalar(value)


def _scalar(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, ensure_ascii=False, default=str)
    return str(value)
