from sctr_extractor.formatting import PersonTable
from sctr_extractor.schemas import ValidationResult
from sctr_extractor.sections import (
    NO_POLICIES_MESSAGE,
    NO_STRUCTURED_CONTENT_MESSAGE,
    build_report,
    render_policies,
    render_section,
    render_structured_content,
)


def _payload(sections: list[dict[str, object]]) -> dict[str, object]:
    return {
        "extracted_text": "SCTR PENSION\nAsegurado: Juan Perez\nDNI 40123456",
        "component": {
            "metadata": {"total_length": 52, "section_count": 2, "additional_info": {"pageCount": 3}},
            "sections": [{"title": "Encabezado", "content": "SCTR PENSION"}, {"title": "", "content": "..."}],
        },
        "person_name": "Juan Perez",
        "segmented_sections": {"content": sections},
    }


def test_section_without_optional_keys_renders_without_people_group() -> None:
    card = render_section({}, 1)
    assert card.title == "Póliza #1"
    assert card.policy_number is None
    assert card.general.rows == []
    assert card.validity.rows == []
    assert card.people is None


def test_general_group_lists_reserved_rows_then_generic_rows() -> None:
    card = render_section(
        {
            "policy_number": "SCTR-778",
            "date_of_issuance": "05/01/2024",
            "company": "Constructora Andina SAC",
            "signatories": ["Gerente", "Apoderado"],
            "validity": "01/01/2024 al 31/12/2024",
            "start_date_validity": "01/01/2024",
            "person_by_policy": [],
        },
        2,
    )
    assert card.title == "Póliza #2"
    assert card.policy_number == "SCTR-778"
    assert [(row.label, row.value) for row in card.general.rows] == [
        ("Empresa", "Constructora Andina SAC"),
        ("Fecha de Emisión", "01/01/2024 al 31/12/2024"),
        ("Date of issuance", "05/01/2024"),
        ("Signatories", "Gerente, Apoderado"),
    ]
    assert [(row.label, row.value) for row in card.validity.rows] == [
        ("Vigencia", "01/01/2024 al 31/12/2024"),
        ("Fecha de Inicio", "01/01/2024"),
    ]
    assert card.people is None


def test_people_group_present_when_persons_listed() -> None:
    card = render_section(
        {"person_by_policy": [{"full_name": "Juan Perez", "document_number": "40123456"}]},
        1,
    )
    assert isinstance(card.people, PersonTable)
    assert card.people.rows == [("Juan Perez", "40123456", "-")]


def test_malformed_people_value_does_not_break_rendering() -> None:
    card = render_section({"person_by_policy": "Juan Perez", "company": 123}, 1)
    assert card.people is None
    assert card.general.rows[0].value == "123"


def test_policies_keep_detection_order_with_one_based_titles() -> None:
    result = ValidationResult.from_payload(
        _payload([{"policy_number": "A-1"}, {"policy_number": "B-2"}])
    )
    cards = render_policies(result)
    assert [(card.title, card.policy_number) for card in cards] == [
        ("Póliza #1", "A-1"),
        ("Póliza #2", "B-2"),
    ]


def test_structured_content_view_humanizes_additional_info() -> None:
    result = ValidationResult.from_payload(_payload([]))
    view = render_structured_content(result.component)
    assert [(row.label, row.value) for row in view.metadata] == [
        ("Longitud total", "52"),
        ("Número de secciones", "2"),
        ("Page Count", "3"),
    ]
    assert view.sections == [("Encabezado", "SCTR PENSION"), ("Sección sin título", "...")]


def test_structured_content_missing_gives_empty_state() -> None:
    assert render_structured_content(None).empty_message == NO_STRUCTURED_CONTENT_MESSAGE


def test_report_view_highlights_text_and_reports_empty_policies() -> None:
    result = ValidationResult.from_payload(_payload([]))
    report = build_report(result, "juan perez")
    assert report.policies == []
    assert report.policies_empty_message == NO_POLICIES_MESSAGE
    assert report.text.matches == 1
    assert [s.text for s in report.text.segments if s.is_match] == ["Juan Perez"]

    data = report.to_dict()
    assert data["text"]["person_name"] == "Juan Perez"
    assert data["structured"]["metadata"][0] == {"label": "Longitud total", "value": "52"}
