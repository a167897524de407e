"""SCTR Extractor package."""

__all__ = [
    "cli",
    "client",
    "config",
    "exceptions",
    "fields",
    "formatting",
    "highlight",
    "html_renderer",
    "preflight",
    "schemas",
    "sections",
    "web_app",
    "workflow",
]
