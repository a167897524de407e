from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

POLICY_NUMBER_KEY = "policy_number"
PEOPLE_KEY = "person_by_policy"

# Rendered before any generic field, in this order. "validity" shows up here and
# again in the validity group below.
GENERAL_FIELDS: tuple[tuple[str, str], ...] = (
    ("company", "Empresa"),
    ("insurance_company", "Aseguradora"),
    ("validity", "Fecha de Emisión"),
)

VALIDITY_FIELDS: tuple[tuple[str, str], ...] = (
    ("validity", "Vigencia"),
    ("start_date_validity", "Fecha de Inicio"),
    ("end_date_validity", "Fecha de Fin"),
)

RESERVED_KEYS: frozenset[str] = frozenset(
    {
        "company",
        "insurance_company",
        POLICY_NUMBER_KEY,
        PEOPLE_KEY,
        "start_date_validity",
        "end_date_validity",
        "validity",
    }
)


@dataclass(slots=True)
class LabeledField:
    key: str
    label: str
    value: Any


@dataclass(slots=True)
class SectionFields:
    policy_number: Any = None
    general: list[LabeledField] = field(default_factory=list)
    validity: list[LabeledField] = field(default_factory=list)
    people: Any = None
    generic: list[tuple[str, Any]] = field(default_factory=list)


def _present(section: dict[str, Any], key: str) -> bool:
    return section.get(key) is not None


def classify_section(section: dict[str, Any]) -> SectionFields:
    fields = SectionFields(
        policy_number=section.get(POLICY_NUMBER_KEY),
        people=section.get(PEOPLE_KEY),
    )
    fields.general = [
        LabeledField(key=key, label=label, value=section[key])
        for key, label in GENERAL_FIELDS
        if _present(section, key)
    ]
    fields.validity = [
        LabeledField(key=key, label=label, value=section[key])
        for key, label in VALIDITY_FIELDS
        if _present(section, key)
    ]
    fields.generic = [(key, value) for key, value in section.items() if key not in RESERVED_KEYS]
    return fields


def generic_keys(section: dict[str, Any]) -> list[str]:
    return [key for key in section if key not in RESERVED_KEYS]
