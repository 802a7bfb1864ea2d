"""
Content Rules — description quality, placeholder tokens, and the
requirement tables nested inside enablers.

A functional requirement needs testable language ("shall", "when ... then");
a non-functional one needs something measurable (a number, a percentage, a
time unit or a comparison) unless its type is exempt (Security).
"""

from __future__ import annotations

import re

from precision_engine.models.documents import (
    BaseDocument,
    CorpusContext,
    Enabler,
    FunctionalRequirement,
    NonFunctionalRequirement,
)
from precision_engine.models.enums import DocumentKind, FindingCategory, Severity
from precision_engine.models.results import Finding
from precision_engine.rules.catalog import DEFAULT_CATALOG, QualityGateConfig, RuleCatalog
from precision_engine.rules.common import error, is_blank, warning, wire_name

_MEASURABLE = re.compile(
    r"\d|%|percent(?:age)?|\b(?:milli)?seconds?\b|\bms\b|\bminutes?\b|\bhours?\b|\bdays?\b|<=|>=|<|>",
    re.IGNORECASE,
)


def check_content(
    document: BaseDocument,
    kind: DocumentKind,
    corpus: CorpusContext | None = None,
    catalog: RuleCatalog = DEFAULT_CATALOG,
) -> list[Finding]:
    gates = catalog.quality_gates
    findings: list[Finding] = []

    description = getattr(document, "description", None)
    if not is_blank(description):
        findings.extend(_check_description(description.strip(), gates))

    if kind == DocumentKind.ENABLER and isinstance(document, Enabler):
        for index, req in enumerate(document.functional_requirements):
            findings.extend(
                _check_requirement(req, DocumentKind.FUNCTIONAL_REQUIREMENT, catalog, index)
            )
        for index, req in enumerate(document.non_functional_requirements):
            findings.extend(
                _check_requirement(req, DocumentKind.NON_FUNCTIONAL_REQUIREMENT, catalog, index)
            )

    # A requirement record validated on its own: required fields are
    # already covered by the structure check
    elif kind in (DocumentKind.FUNCTIONAL_REQUIREMENT, DocumentKind.NON_FUNCTIONAL_REQUIREMENT):
        findings.extend(_check_requirement_language(document, kind, gates, field="requirement", label=""))

    return findings


def _check_description(desc: str, gates: QualityGateConfig) -> list[Finding]:
    findings: list[Finding] = []

    if len(desc) < gates.min_description_length:
        findings.append(warning(
            FindingCategory.DESCRIPTION_TOO_SHORT,
            f"Description is too short ({len(desc)} chars, minimum {gates.min_description_length})",
            Severity.MEDIUM,
            "description",
            "Provide more detailed description to improve clarity",
        ))

    if len(desc) > gates.max_description_length:
        findings.append(warning(
            FindingCategory.DESCRIPTION_TOO_LONG,
            f"Description is too long ({len(desc)} chars, maximum {gates.max_description_length})",
            Severity.LOW,
            "description",
            "Consider breaking down into smaller, more focused descriptions",
        ))

    desc_lower = desc.lower()
    for word in gates.forbidden_words:
        if word.lower() in desc_lower:
            findings.append(warning(
                FindingCategory.FORBIDDEN_WORD_DETECTED,
                f"Description contains placeholder word: '{word}'",
                Severity.MEDIUM,
                "description",
                f"Replace '{word}' with actual content",
            ))

    return findings


def _check_requirement(
    req: FunctionalRequirement | NonFunctionalRequirement,
    kind: DocumentKind,
    catalog: RuleCatalog,
    index: int,
) -> list[Finding]:
    """Required fields plus language heuristics for one nested row."""
    functional = kind == DocumentKind.FUNCTIONAL_REQUIREMENT
    table = "functionalRequirements" if functional else "nonFunctionalRequirements"
    label = "Functional" if functional else "Non-functional"
    findings: list[Finding] = []

    for field in catalog.required_fields(kind):
        if is_blank(getattr(req, field, None)):
            name = wire_name(field)
            findings.append(error(
                FindingCategory.MISSING_REQUIREMENT_FIELD,
                f"{label} requirement {index + 1}: Missing required field '{name}'",
                Severity.HIGH,
                f"{table}[{index}].{name}",
                f"Please provide a value for {name}",
            ))

    findings.extend(_check_requirement_language(
        req, kind, catalog.quality_gates,
        field=f"{table}[{index}].requirement",
        label=f" {index + 1}",
    ))
    return findings


def _check_requirement_language(
    req: BaseDocument,
    kind: DocumentKind,
    gates: QualityGateConfig,
    field: str,
    label: str,
) -> list[Finding]:
    text = getattr(req, "requirement", None)
    if is_blank(text):
        return []

    if kind == DocumentKind.FUNCTIONAL_REQUIREMENT:
        if gates.require_testability_for_requirements and not _has_testable_language(text, gates):
            return [warning(
                FindingCategory.REQUIREMENT_NOT_TESTABLE,
                f"Functional requirement{label} may not be easily testable",
                Severity.MEDIUM,
                field,
                'Use testable language like "shall", "must", "when...then", etc.',
            )]
        return []

    req_type = getattr(req, "type", None) or ""
    if (
        gates.measurement_required_for_nfr
        and req_type not in gates.measurement_exempt_types
        and not _MEASURABLE.search(text)
    ):
        return [warning(
            FindingCategory.NFR_NOT_MEASURABLE,
            f"Non-functional requirement{label} lacks measurable criteria",
            Severity.MEDIUM,
            field,
            "Include specific metrics, thresholds, or measurable criteria",
        )]
    return []


def _has_testable_language(text: str, gates: QualityGateConfig) -> bool:
    words = set(re.findall(r"[a-z]+", text.lower()))
    return any(keyword in words for keyword in gates.testability_keywords)
