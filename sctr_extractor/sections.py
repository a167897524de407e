from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .fields import classify_section
from .formatting import PersonTable, build_person_table, format_key, format_value
from .highlight import Segment, highlight, match_count
from .schemas import PolicySection, StructuredContent, ValidationResult

GENERAL_GROUP_TITLE = "Información General"
VALIDITY_GROUP_TITLE = "Período de Vigencia"
PEOPLE_GROUP_TITLE = "Personas Aseguradas"
NO_POLICIES_MESSAGE = "No hay secciones segmentadas disponibles"
NO_STRUCTURED_CONTENT_MESSAGE = "No hay contenido estructurado disponible"
UNTITLED_SECTION = "Sección sin título"


@dataclass(slots=True)
class Row:
    label: str
    value: str | PersonTable

    def to_dict(self) -> dict[str, Any]:
        value = self.value.to_dict() if isinstance(self.value, PersonTable) else self.value
        return {"label": self.label, "value": value}


@dataclass(slots=True)
class Group:
    title: str
    rows: list[Row] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"title": self.title, "rows": [row.to_dict() for row in self.rows]}


@dataclass(slots=True)
class PolicyCard:
    index: int
    policy_number: str | None
    general: Group
    validity: Group
    people: PersonTable | None = None

    @property
    def title(self) -> str:
        return f"Póliza #{self.index}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "title": self.title,
            "policy_number": self.policy_number,
            "general": self.general.to_dict(),
            "validity": self.validity.to_dict(),
            "people": self.people.to_dict() if self.people is not None else None,
        }


@dataclass(slots=True)
class StructuredView:
    metadata: list[Row] = field(default_factory=list)
    sections: list[tuple[str, str]] = field(default_factory=list)
    empty_message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "metadata": [row.to_dict() for row in self.metadata],
            "sections": [{"title": title, "content": content} for title, content in self.sections],
            "empty_message": self.empty_message,
        }


@dataclass(slots=True)
class TextView:
    person_name: str
    term: str
    segments: list[Segment]
    matches: int
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "person_name": self.person_name,
            "term": self.term,
            "matches": self.matches,
            "segments": [segment.to_dict() for segment in self.segments],
        }


@dataclass(slots=True)
class ReportView:
    policies: list[PolicyCard]
    structured: StructuredView
    text: TextView

    @property
    def policies_empty_message(self) -> str | None:
        return None if self.policies else NO_POLICIES_MESSAGE

    def to_dict(self) -> dict[str, Any]:
        return {
            "policies": [card.to_dict() for card in self.policies],
            "policies_empty_message": self.policies_empty_message,
            "structured": self.structured.to_dict(),
            "text": self.text.to_dict(),
        }


def render_section(section: PolicySection, index: int) -> PolicyCard:
    if not isinstance(section, dict):
        section = {}
    fields = classify_section(section)

    general = Group(title=GENERAL_GROUP_TITLE)
    general.rows.extend(Row(item.label, format_value(item.key, item.value)) for item in fields.general)
    general.rows.extend(Row(format_key(key), format_value(key, value)) for key, value in fields.generic)

    validity = Group(title=VALIDITY_GROUP_TITLE)
    validity.rows.extend(Row(item.label, format_value(item.key, item.value)) for item in fields.validity)

    people = None
    if isinstance(fields.people, list) and fields.people:
        people = build_person_table(fields.people)

    policy_number = fields.policy_number
    return PolicyCard(
        index=index,
        policy_number=None if policy_number is None else str(policy_number),
        general=general,
        validity=validity,
        people=people,
    )


def render_policies(result: ValidationResult) -> list[PolicyCard]:
    return [render_section(section, position) for position, section in enumerate(result.policies, start=1)]


def render_structured_content(component: StructuredContent | None) -> StructuredView:
    if component is None:
        return StructuredView(empty_message=NO_STRUCTURED_CONTENT_MESSAGE)

    meta = component.metadata
    rows = [
        Row("Longitud total", format_value("total_length", meta.total_length)),
        Row("Número de secciones", format_value("section_count", meta.section_count)),
    ]
    rows.extend(Row(format_key(key), format_value(key, value)) for key, value in meta.additional_info.items())
    sections = [(section.title or UNTITLED_SECTION, section.content) for section in component.sections]
    return StructuredView(metadata=rows, sections=sections)


def render_extracted_text(result: ValidationResult, term: str | None = None) -> TextView:
    term = term or ""
    return TextView(
        person_name=result.person_name,
        term=term,
        segments=highlight(result.extracted_text, term),
        matches=match_count(result.extracted_text, term),
        text=result.extracted_text,
    )


def build_report(result: ValidationResult, term: str | None = None) -> ReportView:
    return ReportView(
        policies=render_policies(result),
        structured=render_structured_content(result.component),
        text=render_extracted_text(result, term),
    )
