from __future__ import annotations

import json
import sys
from pathlib import Path

from sctr_extractor import cli


def test_render_writes_html_report(tmp_path: Path, monkeypatch, capsys) -> None:
    source = tmp_path / "response.json"
    source.write_text(
        json.dumps(
            {
                "extracted_text": "Asegurado: Rosa Quispe",
                "component": {"metadata": {"total_length": 22, "section_count": 0}, "sections": []},
                "person_name": "Rosa Quispe",
                "segmented_sections": {"content": [{"policy_number": "P-77"}]},
            }
        ),
        encoding="utf-8",
    )
    output = tmp_path / "out" / "report.html"
    monkeypatch.setattr(
        sys,
        "argv",
        ["sctr-extractor", "render", "--input", str(source), "--output", str(output), "--search", "rosa"],
    )

    cli.main()

    printed = json.loads(capsys.readouterr().out)
    assert printed["policies"] == 1
    html = output.read_text(encoding="utf-8")
    assert "Póliza #1" in html
    assert "<mark>Rosa</mark>" in html


def test_render_reports_contract_violation(tmp_path: Path, monkeypatch, capsys) -> None:
    source = tmp_path / "response.json"
    source.write_text(json.dumps({"extracted_text": "x"}), encoding="utf-8")
    monkeypatch.setattr(
        sys,
        "argv",
        ["sctr-extractor", "render", "--input", str(source), "--output", str(tmp_path / "r.html")],
    )

    cli.main()

    printed = json.loads(capsys.readouterr().out)
    assert printed["error"] == "render_failed"
    assert not (tmp_path / "r.html").exists()


def test_validate_missing_file(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.setattr(
        sys,
        "argv",
        ["sctr-extractor", "validate", "--file", str(tmp_path / "nope.pdf"), "--person-name", "Ana"],
    )
    cli.main()
    assert json.loads(capsys.readouterr().out)["error"] == "file_not_found"
