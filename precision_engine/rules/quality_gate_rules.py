"""
Quality Gate Rules — approval before implementation, and the balance of
functional vs non-functional requirements on enablers.
"""

from __future__ import annotations

from precision_engine.models.documents import BaseDocument, CorpusContext, Enabler
from precision_engine.models.enums import Approval, DocumentKind, FindingCategory, Severity
from precision_engine.models.results import Finding
from precision_engine.rules.catalog import DEFAULT_CATALOG, RuleCatalog
from precision_engine.rules.common import error, suggestion, warning


def check_quality_gates(
    document: BaseDocument,
    kind: DocumentKind,
    corpus: CorpusContext | None = None,
    catalog: RuleCatalog = DEFAULT_CATALOG,
) -> list[Finding]:
    gates = catalog.quality_gates
    findings: list[Finding] = []

    status = getattr(document, "status", None)
    if (
        gates.require_approval_for_implementation
        and status in gates.implementation_statuses
        and getattr(document, "approval", None) != Approval.APPROVED.value
    ):
        findings.append(error(
            FindingCategory.MISSING_APPROVAL_FOR_IMPLEMENTATION,
            f"Status '{status}' requires approval",
            Severity.CRITICAL,
            "approval",
            "Obtain approval before moving to implementation status",
        ))

    if kind == DocumentKind.ENABLER and isinstance(document, Enabler):
        functional = len(document.functional_requirements)
        non_functional = len(document.non_functional_requirements)

        if functional > 0 and non_functional == 0:
            findings.append(suggestion(
                FindingCategory.MISSING_NFR_SUGGESTIONS,
                "Consider adding non-functional requirements",
                Severity.LOW,
                "nonFunctionalRequirements",
                "Add performance, security, or usability requirements",
            ))

        if functional == 0 and non_functional > 0:
            findings.append(warning(
                FindingCategory.MISSING_FUNCTIONAL_REQUIREMENTS,
                "Enabler has non-functional requirements but no functional requirements",
                Severity.MEDIUM,
                "functionalRequirements",
                "Define what the enabler should do before defining how well it should do it",
            ))

    return findings
