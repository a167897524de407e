from sctr_extractor.fields import RESERVED_KEYS, classify_section, generic_keys


def test_classifier_orders_general_fields_and_keeps_generic_order() -> None:
    section = {
        "zeta": "last?",
        "validity": "01/01/2024 - 31/12/2024",
        "insurance_company": "Rimac Seguros",
        "company": "Constructora Andina SAC",
        "alpha": "first?",
        "policy_number": "SCTR-0001",
    }
    fields = classify_section(section)

    assert [item.key for item in fields.general] == ["company", "insurance_company", "validity"]
    assert [item.label for item in fields.general] == ["Empresa", "Aseguradora", "Fecha de Emisión"]
    assert [key for key, _ in fields.generic] == ["zeta", "alpha"]
    assert fields.policy_number == "SCTR-0001"


def test_validity_appears_in_both_groups() -> None:
    fields = classify_section({"validity": "2024", "end_date_validity": "31/12/2024"})
    assert [item.key for item in fields.general] == ["validity"]
    assert [item.label for item in fields.validity] == ["Vigencia", "Fecha de Fin"]


def test_none_values_are_treated_as_absent_but_falsy_values_are_kept() -> None:
    fields = classify_section({"company": None, "insurance_company": "", "start_date_validity": None})
    assert [item.key for item in fields.general] == ["insurance_company"]
    assert fields.validity == []


def test_reserved_keys_never_listed_as_generic() -> None:
    section = {key: "x" for key in RESERVED_KEYS}
    section["signatories"] = ["A"]
    assert generic_keys(section) == ["signatories"]
    assert classify_section(section).generic == [("signatories", ["A"])]


def test_empty_section_classifies_without_error() -> None:
    fields = classify_section({})
    assert fields.general == []
    assert fields.validity == []
    assert fields.generic == []
    assert fields.people is None
    assert fields.policy_number is None
