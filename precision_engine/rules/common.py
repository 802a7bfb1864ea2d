"""Helpers shared by the rule checkers."""

from __future__ import annotations

from typing import Any

from pydantic.alias_generators import to_camel

from precision_engine.models.enums import FindingCategory, FindingKind, Severity
from precision_engine.models.results import Finding


def is_blank(value: Any) -> bool:
    """Missing, empty, or whitespace-only."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def wire_name(field: str) -> str:
    """Attribute name → name used in finding field paths (camelCase)."""
    return to_camel(field)


def error(category: FindingCategory, message: str, severity: Severity, field: str, suggestion: str = "", **extra) -> Finding:
    return Finding(kind=FindingKind.ERROR, category=category, message=message,
                   severity=severity, field=field, suggestion=suggestion, **extra)


def warning(category: FindingCategory, message: str, severity: Severity, field: str, suggestion: str = "") -> Finding:
    return Finding(kind=FindingKind.WARNING, category=category, message=message,
                   severity=severity, field=field, suggestion=suggestion)


def suggestion(category: FindingCategory, message: str, severity: Severity, field: str, hint: str = "") -> Finding:
    return Finding(kind=FindingKind.SUGGESTION, category=category, message=message,
                   severity=severity, field=field, suggestion=hint)
