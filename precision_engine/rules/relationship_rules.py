"""
Relationship Rules — parent capability references and dependency cycles.
Cross-document checks are skipped when no corpus is supplied, except the
self-reference cycle which needs only the document itself.
"""

from __future__ import annotations

from precision_engine.engine.graph import detect_cycle
from precision_engine.models.documents import BaseDocument, CorpusContext, Enabler
from precision_engine.models.enums import DocumentKind, FindingCategory, Severity
from precision_engine.models.results import Finding
from precision_engine.rules.catalog import DEFAULT_CATALOG, RuleCatalog
from precision_engine.rules.common import error, is_blank, warning


def check_relationships(
    document: BaseDocument,
    kind: DocumentKind,
    corpus: CorpusContext | None = None,
    catalog: RuleCatalog = DEFAULT_CATALOG,
) -> list[Finding]:
    findings: list[Finding] = []

    # ── Capability ↔ enabler link ────────────────────────
    if (
        kind == DocumentKind.ENABLER
        and isinstance(document, Enabler)
        and not is_blank(document.capability_id)
        and corpus is not None
        and not corpus.has_capability(document.capability_id)
    ):
        findings.append(error(
            FindingCategory.INVALID_CAPABILITY_REFERENCE,
            f"Referenced capability '{document.capability_id}' does not exist",
            Severity.CRITICAL,
            "capabilityId",
            "Ensure the capability ID is correct and the capability exists",
        ))

    dependencies: list[str] = list(getattr(document, "dependencies", None) or [])
    if not dependencies:
        return findings

    # ── Dangling dependency ids ──────────────────────────
    if corpus is not None:
        for dep in dependencies:
            if dep != document.identifier and corpus.find(dep) is None:
                findings.append(warning(
                    FindingCategory.UNKNOWN_DEPENDENCY,
                    f"Dependency '{dep}' does not exist in the corpus",
                    Severity.LOW,
                    "dependencies",
                    "Remove the dependency or add the referenced document",
                ))

    # ── Dependency cycles ────────────────────────────────
    # The document under validation overrides its own corpus entry
    doc_id = document.identifier or "<unsaved>"
    graph = corpus.dependency_map() if corpus is not None else {}
    graph[doc_id] = dependencies
    cycle = detect_cycle(doc_id, graph)
    if cycle.cycle:
        findings.append(error(
            FindingCategory.CIRCULAR_DEPENDENCY,
            f"Circular dependency detected: {' -> '.join(cycle.path)}",
            Severity.CRITICAL,
            "dependencies",
            "Remove or restructure dependencies to eliminate circular references",
            path=cycle.path,
        ))

    return findings
