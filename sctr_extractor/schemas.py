from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from .exceptions import ContractViolationError

REQUIRED_RESULT_FIELDS: tuple[str, ...] = ("extracted_text", "component", "segmented_sections")

PolicySection = dict[str, Any]


@dataclass(slots=True)
class PersonRecord:
    full_name: str
    document_number: str
    coverage_start_date: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> PersonRecord:
        if not isinstance(data, dict):
            return cls(full_name="", document_number="")
        start = data.get("coverage_start_date")
        return cls(
            full_name=_text(data.get("full_name")),
            document_number=_text(data.get("document_number")),
            coverage_start_date=None if start is None else str(start),
        )


@dataclass(slots=True)
class DocumentSection:
    title: str
    content: str


@dataclass(slots=True)
class DocumentMetadata:
    total_length: int | None = None
    section_count: int | None = None
    additional_info: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class StructuredContent:
    metadata: DocumentMetadata
    sections: list[DocumentSection] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StructuredContent:
        raw_meta = data.get("metadata")
        meta = raw_meta if isinstance(raw_meta, dict) else {}
        additional = meta.get("additional_info")
        metadata = DocumentMetadata(
            total_length=_int_or_none(meta.get("total_length")),
            section_count=_int_or_none(meta.get("section_count")),
            additional_info=dict(additional) if isinstance(additional, dict) else {},
        )
        sections: list[DocumentSection] = []
        raw_sections = data.get("sections")
        for item in raw_sections if isinstance(raw_sections, list) else []:
            if not isinstance(item, dict):
                continue
            sections.append(
                DocumentSection(title=_text(item.get("title")), content=_text(item.get("content")))
            )
        return cls(metadata=metadata, sections=sections)


@dataclass(slots=True)
class ValidationResult:
    extracted_text: str
    component: StructuredContent
    person_name: str
    policies: list[PolicySection] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any) -> ValidationResult:
        if not isinstance(payload, dict):
            raise ContractViolationError("La respuesta del servidor no tiene el formato esperado")
        missing = [name for name in REQUIRED_RESULT_FIELDS if payload.get(name) is None]
        if missing:
            raise ContractViolationError(
                "La respuesta del servidor no tiene el formato esperado "
                f"(faltan: {', '.join(missing)})"
            )
        component = payload["component"]
        if not isinstance(component, dict):
            raise ContractViolationError("La respuesta del servidor no tiene el formato esperado")

        return cls(
            extracted_text=_text(payload["extracted_text"]),
            component=StructuredContent.from_dict(component),
            person_name=_text(payload.get("person_name")),
            policies=_unwrap_sections(payload["segmented_sections"]),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "extracted_text": self.extracted_text,
            "component": asdict(self.component),
            "person_name": self.person_name,
            "segmented_sections": {"content": [dict(section) for section in self.policies]},
        }


def _unwrap_sections(value: Any) -> list[PolicySection]:
    # Current service builds wrap the list as {"content": [...]}; older ones sent the bare list.
    if isinstance(value, dict):
        value = value.get("content")
    if not isinstance(value, list):
        return []
    return [item if isinstance(item, dict) else {} for item in value]


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _int_or_none(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
