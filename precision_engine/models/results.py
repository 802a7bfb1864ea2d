"""
Value objects produced by the engine.
Findings and results are immutable once built; the cache hands out the
same objects to later callers.
"""

from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, computed_field

from .enums import (
    DocumentKind,
    FindingCategory,
    FindingKind,
    FixAction,
    Severity,
)


class Finding(BaseModel):
    """One validation outcome attached to a (dotted) field path."""
    model_config = ConfigDict(frozen=True)

    kind: FindingKind
    category: FindingCategory
    message: str
    severity: Severity
    field: str = ""  # e.g. "functionalRequirements[2].requirement"
    suggestion: str = ""
    path: list[str] = Field(default_factory=list)  # cycle path for CIRCULAR_DEPENDENCY


class ValidationResult(BaseModel):
    """One document's validation outcome."""
    model_config = ConfigDict(frozen=True)

    document_id: str = ""
    kind: Optional[DocumentKind] = None
    is_valid: bool = True
    findings: list[Finding] = Field(default_factory=list)
    quality_score: int = 0  # 0-100
    processing_time_ms: float = 0.0
    from_cache: bool = False

    @computed_field  # type: ignore[prop-decorator]
    @property
    def errors(self) -> list[Finding]:
        return [f for f in self.findings if f.kind == FindingKind.ERROR]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def warnings(self) -> list[Finding]:
        return [f for f in self.findings if f.kind == FindingKind.WARNING]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def suggestions(self) -> list[Finding]:
        return [f for f in self.findings if f.kind == FindingKind.SUGGESTION]


class CycleCheck(BaseModel):
    """Outcome of a dependency-cycle walk."""
    model_config = ConfigDict(frozen=True)

    cycle: bool = False
    path: list[str] = Field(default_factory=list)  # [A, B, C, A] when cycle


# ── Batch ────────────────────────────────────────────────


class BatchSummary(BaseModel):
    total_documents: int = 0
    valid_documents: int = 0
    invalid_documents: int = 0
    total_errors: int = 0
    total_warnings: int = 0
    average_quality_score: float = 0.0
    processing_time_ms: float = 0.0


class BatchResult(BaseModel):
    results: list[ValidationResult] = Field(default_factory=list)
    summary: BatchSummary = Field(default_factory=BatchSummary)


# ── Auto-fix ─────────────────────────────────────────────


class AutoFixSuggestion(BaseModel):
    """A mechanical, advisory fix.  The engine never applies it."""
    model_config = ConfigDict(frozen=True)

    document_id: str = ""
    action: FixAction
    field: str
    suggested_value: str = ""
    confidence: float = 0.0  # 0-1


# ── Stats ────────────────────────────────────────────────


class CacheStats(BaseModel):
    size: int = 0
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    ttl_ms: int = 0
    max_entries: int = 0


class EngineStats(BaseModel):
    total_validations: int = 0
    cache_hit_rate: float = 0.0
    average_validation_time_ms: float = 0.0
    active_validations: int = 0
    peak_concurrent_validations: int = 0
    max_concurrent_validations: int = 0
    max_concurrent_checks: int = 0
    peak_concurrent_checks: int = 0
    configured_kinds: int = 0
    cache: CacheStats = Field(default_factory=CacheStats)
