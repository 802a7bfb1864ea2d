"""
Auto-Fix Advisor — mechanical fixes for well-understood error categories.

Advisory only: suggestions name a field and a value; applying them is the
caller's business.  Only MISSING_REQUIRED_FIELD and INVALID_ID_FORMAT are
handled, everything else is skipped.
"""

from __future__ import annotations

import itertools
import logging
import time
from typing import Callable, Iterable

from precision_engine.models.enums import Approval, DocumentKind, FindingCategory, FixAction, Priority
from precision_engine.models.results import AutoFixSuggestion, Finding, ValidationResult
from precision_engine.rules.catalog import DEFAULT_CATALOG, RuleCatalog

logger = logging.getLogger(__name__)

_FIELD_DEFAULTS: dict[str, str] = {
    "priority": Priority.MEDIUM.value,
    "owner": "Product Team",
    "approval": Approval.NOT_APPROVED.value,
}

_ADD_FIELD_CONFIDENCE = 0.8
_FORMAT_ID_CONFIDENCE = 0.9


class AutoFixAdvisor:
    """Turns validation errors into fix proposals."""

    def __init__(self, catalog: RuleCatalog = DEFAULT_CATALOG, clock: Callable[[], float] = time.time):
        self.catalog = catalog
        # Millisecond-seeded sequence keeps ids from one advisor distinct
        self._sequence = itertools.count(int(clock() * 1000))

    def suggest(self, results: ValidationResult | Iterable[ValidationResult]) -> list[AutoFixSuggestion]:
        if isinstance(results, ValidationResult):
            results = [results]

        suggestions: list[AutoFixSuggestion] = []
        for result in results:
            for finding in result.errors:
                fix = self._fix_for(finding, result)
                if fix is not None:
                    suggestions.append(fix)

        logger.debug(f"[AUTOFIX] {len(suggestions)} suggestions generated")
        return suggestions

    def _fix_for(self, finding: Finding, result: ValidationResult) -> AutoFixSuggestion | None:
        if finding.category == FindingCategory.MISSING_REQUIRED_FIELD:
            if finding.field in ("id", "reqId"):
                return AutoFixSuggestion(
                    document_id=result.document_id,
                    action=FixAction.ADD_FIELD,
                    field=finding.field,
                    suggested_value=self.generate_id(result.kind),
                    confidence=_ADD_FIELD_CONFIDENCE,
                )
            return AutoFixSuggestion(
                document_id=result.document_id,
                action=FixAction.ADD_FIELD,
                field=finding.field,
                suggested_value=self.default_value(finding.field, result.kind),
                confidence=_ADD_FIELD_CONFIDENCE,
            )

        if finding.category == FindingCategory.INVALID_ID_FORMAT:
            return AutoFixSuggestion(
                document_id=result.document_id,
                action=FixAction.FORMAT_ID,
                field=finding.field or "id",
                suggested_value=self.generate_id(result.kind),
                confidence=_FORMAT_ID_CONFIDENCE,
            )

        return None

    def default_value(self, field: str, kind: DocumentKind | None) -> str:
        if field == "status" and kind is not None:
            return self.catalog.rules_for(kind).default_status
        return _FIELD_DEFAULTS.get(field, "")

    def generate_id(self, kind: DocumentKind | None) -> str:
        """A fresh identifier that matches the kind's pattern."""
        if kind is None:
            return f"DOC-{next(self._sequence) % 1_000_000:06d}"
        rules = self.catalog.rules_for(kind)
        width = rules.id_max_digits
        return f"{rules.id_prefix}-{next(self._sequence) % 10 ** width:0{width}d}"
