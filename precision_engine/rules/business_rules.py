"""Business Rules — kind-specific sanity checks."""

from __future__ import annotations

from precision_engine.models.documents import BaseDocument, Capability, CorpusContext
from precision_engine.models.enums import DocumentKind, FindingCategory, Severity
from precision_engine.models.results import Finding
from precision_engine.rules.catalog import DEFAULT_CATALOG, RuleCatalog
from precision_engine.rules.common import is_blank, suggestion, warning


def check_business_logic(
    document: BaseDocument,
    kind: DocumentKind,
    corpus: CorpusContext | None = None,
    catalog: RuleCatalog = DEFAULT_CATALOG,
) -> list[Finding]:
    findings: list[Finding] = []

    if kind == DocumentKind.CAPABILITY and isinstance(document, Capability):
        # Only a declared-but-empty list counts; None means "not tracked"
        if document.enablers is not None and len(document.enablers) == 0:
            findings.append(suggestion(
                FindingCategory.CAPABILITY_WITHOUT_ENABLERS,
                "Capability has no enablers defined",
                Severity.LOW,
                "enablers",
                "Consider breaking down this capability into specific enablers",
            ))

    if kind == DocumentKind.ENABLER:
        if is_blank(getattr(document, "implementation_plan", None)):
            findings.append(warning(
                FindingCategory.MISSING_IMPLEMENTATION_PLAN,
                "Enabler lacks implementation plan",
                Severity.MEDIUM,
                "implementationPlan",
                "Provide detailed implementation steps and approach",
            ))

        if is_blank(getattr(document, "acceptance_criteria", None)):
            findings.append(warning(
                FindingCategory.MISSING_ACCEPTANCE_CRITERIA,
                "Enabler lacks acceptance criteria",
                Severity.MEDIUM,
                "acceptanceCriteria",
                "Define clear acceptance criteria for completion verification",
            ))

    return findings
