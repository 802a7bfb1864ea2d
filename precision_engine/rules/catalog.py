"""
Rule Catalog — static rule definitions keyed by document kind.

Pure data: required fields, identifier formats, status/priority vocabularies
and quality-gate thresholds.  Defaults are built in; an optional JSON file
(``settings.rules_file``) may override them.  Falls back to the defaults if
the file is missing or invalid.
"""

from __future__ import annotations

import json
import logging
import re
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from precision_engine.models.enums import DocumentKind, Priority

logger = logging.getLogger(__name__)


# ── Config models ────────────────────────────────────────

class KindRules(BaseModel):
    """Catalog row for one document kind."""
    model_config = ConfigDict(frozen=True)

    required_fields: tuple[str, ...]
    id_field: str = "id"
    id_prefix: str
    id_min_digits: int
    id_max_digits: int
    valid_statuses: tuple[str, ...]

    @property
    def id_regex(self) -> str:
        return rf"^{re.escape(self.id_prefix)}-\d{{{self.id_min_digits},{self.id_max_digits}}}$"

    @property
    def id_pattern(self) -> re.Pattern[str]:
        return _compile(self.id_regex)

    @property
    def default_status(self) -> str:
        return self.valid_statuses[0] if self.valid_statuses else ""


class QualityGateConfig(BaseModel):
    """Thresholds and switches shared by every kind."""
    model_config = ConfigDict(frozen=True)

    min_description_length: int = 20
    max_description_length: int = 2000
    bonus_description_length: int = 50  # quality score bonus threshold
    forbidden_words: tuple[str, ...] = ("TBD", "TODO", "FIXME", "placeholder")
    require_approval_for_implementation: bool = True
    implementation_statuses: tuple[str, ...] = ("In Implementation", "Implemented", "Deployed")
    require_testability_for_requirements: bool = True
    testability_keywords: tuple[str, ...] = ("shall", "must", "will", "should", "when", "then", "given")
    measurement_required_for_nfr: bool = True
    measurement_exempt_types: tuple[str, ...] = ("Security",)


_REQUIREMENT_STATUSES = (
    "In Draft",
    "Ready for Review",
    "In Review",
    "Ready to Implement",
    "In Implementation",
    "Implemented",
    "Refactored",
)


def _default_kinds() -> dict[DocumentKind, KindRules]:
    return {
        DocumentKind.CAPABILITY: KindRules(
            required_fields=("id", "title", "description", "status", "priority", "owner"),
            id_prefix="CAP",
            id_min_digits=4,
            id_max_digits=6,
            valid_statuses=("Draft", "In Review", "In Development", "Testing", "Deployed", "Deprecated"),
        ),
        DocumentKind.ENABLER: KindRules(
            required_fields=("id", "title", "description", "status", "priority", "owner", "capability_id"),
            id_prefix="ENB",
            id_min_digits=4,
            id_max_digits=6,
            valid_statuses=(
                "In Draft",
                "Ready for Analysis",
                "Ready for Analysis Review",
                "In Analysis Review",
                "Ready for Design",
                "In Design",
                "In Design Review",
                "Ready to Implement",
                "In Implementation",
                "Implemented",
                "Refactored",
            ),
        ),
        DocumentKind.FUNCTIONAL_REQUIREMENT: KindRules(
            required_fields=("req_id", "requirement", "description", "priority", "status"),
            id_field="req_id",
            id_prefix="FR",
            id_min_digits=3,
            id_max_digits=4,
            valid_statuses=_REQUIREMENT_STATUSES,
        ),
        DocumentKind.NON_FUNCTIONAL_REQUIREMENT: KindRules(
            required_fields=("req_id", "type", "requirement", "priority", "status", "test_approach"),
            id_field="req_id",
            id_prefix="NFR",
            id_min_digits=3,
            id_max_digits=4,
            valid_statuses=_REQUIREMENT_STATUSES,
        ),
    }


class RuleCatalog(BaseModel):
    """Read-only lookup table: one row per kind plus shared vocabularies."""
    model_config = ConfigDict(frozen=True)

    kinds: dict[DocumentKind, KindRules] = Field(default_factory=_default_kinds)
    valid_priorities: tuple[str, ...] = tuple(p.value for p in Priority)
    quality_gates: QualityGateConfig = QualityGateConfig()

    @field_validator("kinds", mode="after")
    @classmethod
    def _keep_builtin_kinds(cls, kinds: dict[DocumentKind, KindRules]) -> dict[DocumentKind, KindRules]:
        # Kinds missing from an override file keep their built-in row
        return {**_default_kinds(), **kinds}

    def rules_for(self, kind: DocumentKind | str) -> KindRules:
        return self.kinds[DocumentKind(kind)]

    def required_fields(self, kind: DocumentKind | str) -> tuple[str, ...]:
        return self.rules_for(kind).required_fields

    def id_pattern(self, kind: DocumentKind | str) -> re.Pattern[str]:
        return self.rules_for(kind).id_pattern

    def valid_statuses(self, kind: DocumentKind | str) -> tuple[str, ...]:
        return self.rules_for(kind).valid_statuses


@lru_cache(maxsize=None)
def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern)


DEFAULT_CATALOG = RuleCatalog()


def load_catalog(path: str | Path | None = None) -> RuleCatalog:
    """Load a catalog override from JSON, or return the built-in catalog."""
    if not path:
        return DEFAULT_CATALOG

    file_path = Path(path)
    if not file_path.exists():
        logger.warning(f"Rules file not found, using defaults: {file_path}")
        return DEFAULT_CATALOG

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
        catalog = RuleCatalog.model_validate(data)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.warning(f"Failed loading rules from {file_path}, using defaults: {e}")
        return DEFAULT_CATALOG

    logger.info(f"Loaded rule catalog from {file_path} ({len(catalog.kinds)} kinds)")
    return catalog
