"""
Typed document records consumed by the validation engine.

Documents arrive from an external store (markdown parser, workspace loader)
and are read-only here.  Every field that a rule reports on is optional at
construction so that missing or blank values surface as findings instead of
construction errors; only wrongly-typed input is rejected by Pydantic.

Wire names are camelCase (``capabilityId``, ``functionalRequirements``);
snake_case attribute names are accepted too.
"""

from __future__ import annotations

from typing import Any, Iterable, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr
from pydantic.alias_generators import to_camel

from .enums import DocumentKind


class BaseDocument(BaseModel):
    """Common configuration for all document kinds."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    @property
    def identifier(self) -> str:
        return getattr(self, "id", None) or ""


# ── Requirement records (nested inside enablers) ─────────


class FunctionalRequirement(BaseDocument):
    """One row of an enabler's functional requirements table."""
    kind: Literal["functionalRequirement"] = "functionalRequirement"
    req_id: Optional[str] = None
    requirement: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[str] = None
    status: Optional[str] = None
    approval: Optional[str] = None

    @property
    def identifier(self) -> str:
        return self.req_id or ""


class NonFunctionalRequirement(BaseDocument):
    """One row of an enabler's non-functional requirements table."""
    kind: Literal["nonFunctionalRequirement"] = "nonFunctionalRequirement"
    req_id: Optional[str] = None
    type: Optional[str] = None  # Performance, Security, Usability, ...
    requirement: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[str] = None
    status: Optional[str] = None
    approval: Optional[str] = None
    test_approach: Optional[str] = None

    @property
    def identifier(self) -> str:
        return self.req_id or ""


# ── Top-level documents ──────────────────────────────────


class Capability(BaseDocument):
    """Top-level requirement document representing a system capability."""
    kind: Literal["capability"] = "capability"
    id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    owner: Optional[str] = None
    approval: Optional[str] = None
    dependencies: list[str] = Field(default_factory=list)
    enablers: Optional[list[str]] = None  # None = not declared
    implementation_plan: Optional[str] = None
    acceptance_criteria: Optional[str] = None


class Enabler(BaseDocument):
    """Child document under a capability, carrying requirement tables."""
    kind: Literal["enabler"] = "enabler"
    id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    owner: Optional[str] = None
    approval: Optional[str] = None
    capability_id: Optional[str] = None
    dependencies: list[str] = Field(default_factory=list)
    functional_requirements: list[FunctionalRequirement] = Field(default_factory=list)
    non_functional_requirements: list[NonFunctionalRequirement] = Field(default_factory=list)
    implementation_plan: Optional[str] = None
    acceptance_criteria: Optional[str] = None


Document = Union[Capability, Enabler, FunctionalRequirement, NonFunctionalRequirement]

_MODEL_BY_KIND: dict[DocumentKind, type[BaseDocument]] = {
    DocumentKind.CAPABILITY: Capability,
    DocumentKind.ENABLER: Enabler,
    DocumentKind.FUNCTIONAL_REQUIREMENT: FunctionalRequirement,
    DocumentKind.NON_FUNCTIONAL_REQUIREMENT: NonFunctionalRequirement,
}

_KIND_BY_PREFIX: list[tuple[str, DocumentKind]] = [
    ("CAP-", DocumentKind.CAPABILITY),
    ("ENB-", DocumentKind.ENABLER),
    ("NFR-", DocumentKind.NON_FUNCTIONAL_REQUIREMENT),
    ("FR-", DocumentKind.FUNCTIONAL_REQUIREMENT),
]


def detect_document_kind(document: BaseDocument | dict[str, Any]) -> DocumentKind | None:
    """
    Work out which kind a document is.
    Explicit ``kind`` wins, then the id prefix, then the shape of the record.
    """
    if isinstance(document, BaseDocument):
        return DocumentKind(document.kind)

    raw_kind = document.get("kind") or document.get("documentType")
    if raw_kind:
        try:
            return DocumentKind(raw_kind)
        except ValueError:
            pass

    doc_id = document.get("id") or document.get("reqId") or document.get("req_id") or ""
    if isinstance(doc_id, str):
        for prefix, kind in _KIND_BY_PREFIX:
            if doc_id.upper().startswith(prefix):
                return kind

    if "capabilityId" in document or "capability_id" in document:
        return DocumentKind.ENABLER
    if "enablers" in document:
        return DocumentKind.CAPABILITY
    return None


def parse_document(data: dict[str, Any], kind: DocumentKind | str | None = None) -> Document:
    """Build the typed model for a raw document dict."""
    resolved = DocumentKind(kind) if kind else detect_document_kind(data)
    if resolved is None:
        raise ValueError(f"Cannot determine document kind for '{data.get('id', '<no id>')}'")
    payload = {k: v for k, v in data.items() if k not in ("kind", "documentType")}
    return _MODEL_BY_KIND[resolved].model_validate({**payload, "kind": resolved.value})  # type: ignore[return-value]


# ── Corpus ───────────────────────────────────────────────


class CorpusContext(BaseModel):
    """
    Read-only set of documents available for cross-document checks.
    Supplied per call; the engine never keeps it beyond the call.
    """

    capabilities: list[Capability] = Field(default_factory=list)
    enablers: list[Enabler] = Field(default_factory=list)

    _index: dict[str, Capability | Enabler] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        # First occurrence wins when ids collide
        for doc in [*self.capabilities, *self.enablers]:
            if doc.id and doc.id not in self._index:
                self._index[doc.id] = doc

    @classmethod
    def from_documents(cls, documents: Iterable[BaseDocument]) -> CorpusContext:
        docs = list(documents)
        return cls(
            capabilities=[d for d in docs if isinstance(d, Capability)],
            enablers=[d for d in docs if isinstance(d, Enabler)],
        )

    @property
    def documents(self) -> list[Capability | Enabler]:
        return [*self.capabilities, *self.enablers]

    @property
    def size(self) -> int:
        return len(self.capabilities) + len(self.enablers)

    def find(self, doc_id: str) -> Capability | Enabler | None:
        return self._index.get(doc_id)

    def has_capability(self, capability_id: str) -> bool:
        return isinstance(self._index.get(capability_id), Capability)

    def dependency_map(self) -> dict[str, list[str]]:
        """id → dependency ids, for every document in the corpus."""
        return {doc_id: list(doc.dependencies) for doc_id, doc in self._index.items()}
