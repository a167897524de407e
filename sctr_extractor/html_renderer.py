from __future__ import annotations

from html import escape

from .formatting import PersonTable
from .sections import Group, PolicyCard, ReportView, StructuredView, TextView

PAGE_TITLE = "SCTR Extractor"

STYLE = (
    "body{font-family:system-ui,sans-serif;max-width:1100px;margin:24px auto;padding:0 16px;"
    "background:#f9fafb;color:#111827;}"
    "header{display:flex;justify-content:space-between;align-items:center;}"
    "nav a{margin-right:16px;}"
    ".card{background:#fff;border:1px solid #e5e7eb;border-radius:8px;padding:14px 18px;margin:14px 0;}"
    ".badge{font-family:monospace;border:1px solid #d1d5db;border-radius:6px;padding:2px 8px;}"
    "dl{display:grid;grid-template-columns:1fr 2fr;gap:6px 16px;}"
    "dt{font-weight:600;}"
    "table{border-collapse:collapse;width:100%;}"
    "th,td{border-bottom:1px solid #e5e7eb;padding:6px;text-align:left;}"
    "pre{white-space:pre-wrap;font-family:monospace;font-size:13px;max-height:500px;overflow:auto;}"
    "mark{background:#fef08a;padding:0 2px;border-radius:2px;}"
    ".empty{padding:24px;text-align:center;color:#6b7280;}"
    ".error{color:#b91c1c;border-color:#fecaca;background:#fef2f2;}"
)

COPY_SCRIPT = (
    "<script>"
    "function copyExtractedText(btn){"
    "navigator.clipboard.writeText(document.getElementById('raw-text').dataset.text);"
    "btn.textContent='Copiado';setTimeout(function(){btn.textContent='Copiar';},2000);}"
    "</script>"
)


def _page(title: str, body: str) -> str:
    return (
        "<!doctype html>"
        f"<html lang='es'><head><meta charset='utf-8'><title>{escape(title)}</title>"
        f"<style>{STYLE}</style></head><body>"
        f"{body}"
        "</body></html>"
    )


def render_person_table(table: PersonTable) -> str:
    head = "".join(f"<th>{escape(column)}</th>" for column in table.columns)
    rows = "".join(
        "<tr>" + "".join(f"<td>{escape(cell)}</td>" for cell in row) + "</tr>" for row in table.rows
    )
    return f"<table><thead><tr>{head}</tr></thead><tbody>{rows}</tbody></table>"


def _render_value(value: str | PersonTable) -> str:
    if isinstance(value, PersonTable):
        return render_person_table(value)
    return escape(value)


def _render_group(group: Group, is_open: bool = False) -> str:
    items = []
    for row in group.rows:
        items.append(f"<dt>{escape(row.label)}</dt><dd>{_render_value(row.value)}</dd>")
    open_attr = " open" if is_open else ""
    return f"<details{open_attr}><summary>{escape(group.title)}</summary><dl>{''.join(items)}</dl></details>"


def render_policy_card(card: PolicyCard) -> str:
    badge = f" <span class='badge'>{escape(card.policy_number)}</span>" if card.policy_number else ""
    people = ""
    if card.people is not None:
        people = f"<details><summary>Personas Aseguradas</summary>{render_person_table(card.people)}</details>"
    return (
        "<section class='card policy'>"
        f"<h3>{escape(card.title)}{badge}</h3>"
        f"{_render_group(card.general, is_open=True)}"
        f"{_render_group(card.validity)}"
        f"{people}"
        "</section>"
    )


def _render_structured(view: StructuredView) -> str:
    if view.empty_message:
        return f"<div class='empty'>{escape(view.empty_message)}</div>"
    meta = "".join(f"<dt>{escape(row.label)}</dt><dd>{_render_value(row.value)}</dd>" for row in view.metadata)
    sections = "".join(
        f"<div class='card'><h4>{escape(title)}</h4><pre>{escape(content)}</pre></div>"
        for title, content in view.sections
    )
    return (
        "<div class='card'><h3>Metadatos del Documento</h3>"
        "<p>Información general sobre el contenido del documento</p>"
        f"<dl>{meta}</dl></div>"
        "<h3>Secciones del Documento</h3>"
        f"{sections}"
    )


def _render_text(view: TextView, session_path: str) -> str:
    person = ""
    if view.person_name:
        person = f"<p>Persona buscada: <strong>{escape(view.person_name)}</strong></p>"
    body = "".join(
        f"<mark>{escape(segment.text)}</mark>" if segment.is_match else escape(segment.text)
        for segment in view.segments
    )
    counter = f"<p>{view.matches} coincidencias</p>" if view.term.strip() else ""
    return (
        "<div class='card'>"
        "<h3>Texto Extraído</h3>"
        f"{person}"
        "<button type='button' onclick='copyExtractedText(this)'>Copiar</button>"
        f"<form method='get' action='{escape(session_path)}#raw'>"
        f"<input type='search' name='q' value='{escape(view.term)}' placeholder='Buscar en el texto...'>"
        "</form>"
        f"{counter}"
        f"<pre id='raw-text' data-text='{escape(view.text)}'>{body}</pre>"
        "</div>"
    )


def render_report(report: ReportView, session_path: str = "", reset_path: str = "/") -> str:
    if report.policies:
        policies = "".join(render_policy_card(card) for card in report.policies)
    else:
        policies = f"<div class='empty'>{escape(report.policies_empty_message or '')}</div>"

    body = (
        "<header><h1>Resultados del Análisis</h1>"
        f"<form method='post' action='{escape(reset_path)}'>"
        "<button type='submit'>Analizar otro documento</button></form></header>"
        "<nav><a href='#analysis'>Análisis del Documento</a>"
        "<a href='#structured'>Contenido Estructurado</a>"
        "<a href='#raw'>Texto Extraído</a></nav>"
        f"<section id='analysis'><h2>Análisis de Pólizas</h2>{policies}</section>"
        f"<section id='structured'><h2>Contenido Estructurado</h2>{_render_structured(report.structured)}</section>"
        f"<section id='raw'><h2>Texto Extraído</h2>{_render_text(report.text, session_path)}</section>"
        f"{COPY_SCRIPT}"
    )
    return _page(PAGE_TITLE, body)


def render_upload_page(max_upload_bytes: int, error: str | None = None, person_name: str = "") -> str:
    error_block = f"<div class='card error'><strong>Error</strong><p>{escape(error)}</p></div>" if error else ""
    limit_mb = f"{max_upload_bytes / (1024 * 1024):g}"
    body = (
        f"<header><h1>{PAGE_TITLE}</h1></header>"
        "<p>Herramienta para la extracción de información de documentos SCTR</p>"
        "<section class='card'>"
        "<h2>Extractor de Documentos SCTR</h2>"
        "<p>Sube un documento PDF y especifica el nombre de la persona para extraer la información</p>"
        "<form method='post' action='/analyze' enctype='multipart/form-data'>"
        "<p><label for='person-name'>Nombre de la Persona</label><br>"
        f"<input id='person-name' name='person_name' value='{escape(person_name)}' "
        "placeholder='Ingresa el nombre de la persona a buscar' required></p>"
        "<p><input type='file' name='file' accept='.pdf,application/pdf' required></p>"
        f"<p>Soporta documentos PDF de SCTR (máx. {limit_mb}MB)</p>"
        "<button type='submit'>Extraer Información</button>"
        "</form></section>"
        f"{error_block}"
    )
    return _page(PAGE_TITLE, body)
