"""Models — typed documents, enums and engine result objects."""

from precision_engine.models.enums import (
    Approval,
    CheckPhase,
    DocumentKind,
    FindingCategory,
    FindingKind,
    FixAction,
    Priority,
    Severity,
)
from precision_engine.models.documents import (
    BaseDocument,
    Capability,
    CorpusContext,
    Document,
    Enabler,
    FunctionalRequirement,
    NonFunctionalRequirement,
    detect_document_kind,
    parse_document,
)
from precision_engine.models.results import (
    AutoFixSuggestion,
    BatchResult,
    BatchSummary,
    CacheStats,
    CycleCheck,
    EngineStats,
    Finding,
    ValidationResult,
)

__all__ = [
    "Approval",
    "AutoFixSuggestion",
    "BaseDocument",
    "BatchResult",
    "BatchSummary",
    "CacheStats",
    "Capability",
    "CheckPhase",
    "CorpusContext",
    "CycleCheck",
    "Document",
    "DocumentKind",
    "Enabler",
    "EngineStats",
    "Finding",
    "FindingCategory",
    "FindingKind",
    "FixAction",
    "FunctionalRequirement",
    "NonFunctionalRequirement",
    "Priority",
    "Severity",
    "ValidationResult",
    "detect_document_kind",
    "parse_document",
]
