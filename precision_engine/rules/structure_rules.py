"""
Structure Rules — required fields, identifier format, status and priority
vocabularies.  Pure function; safe to run concurrently.
"""

from __future__ import annotations

from precision_engine.models.documents import BaseDocument, CorpusContext
from precision_engine.models.enums import DocumentKind, FindingCategory, Severity
from precision_engine.models.results import Finding
from precision_engine.rules.catalog import DEFAULT_CATALOG, RuleCatalog
from precision_engine.rules.common import error, is_blank, wire_name


def check_structure(
    document: BaseDocument,
    kind: DocumentKind,
    corpus: CorpusContext | None = None,
    catalog: RuleCatalog = DEFAULT_CATALOG,
) -> list[Finding]:
    rules = catalog.rules_for(kind)
    findings: list[Finding] = []

    # ── Required fields ──────────────────────────────────
    for field in rules.required_fields:
        if is_blank(getattr(document, field, None)):
            name = wire_name(field)
            findings.append(error(
                FindingCategory.MISSING_REQUIRED_FIELD,
                f"Required field '{name}' is missing or empty",
                Severity.HIGH,
                name,
                f"Please provide a value for {name}",
            ))

    # ── Identifier format ────────────────────────────────
    doc_id = getattr(document, rules.id_field, None)
    if not is_blank(doc_id) and not rules.id_pattern.fullmatch(doc_id):
        findings.append(error(
            FindingCategory.INVALID_ID_FORMAT,
            f"ID '{doc_id}' does not match required pattern",
            Severity.HIGH,
            wire_name(rules.id_field),
            f"ID should match pattern: {rules.id_regex}",
        ))

    # ── Status vocabulary ────────────────────────────────
    status = getattr(document, "status", None)
    if not is_blank(status) and status not in rules.valid_statuses:
        findings.append(error(
            FindingCategory.INVALID_STATUS,
            f"Status '{status}' is not valid",
            Severity.MEDIUM,
            "status",
            f"Valid statuses: {', '.join(rules.valid_statuses)}",
        ))

    # ── Priority vocabulary ──────────────────────────────
    priority = getattr(document, "priority", None)
    if not is_blank(priority) and priority not in catalog.valid_priorities:
        findings.append(error(
            FindingCategory.INVALID_PRIORITY,
            f"Priority '{priority}' is not valid",
            Severity.MEDIUM,
            "priority",
            f"Valid priorities: {', '.join(catalog.valid_priorities)}",
        ))

    return findings
