"""
PrecisionEngine — the public entry point of the validation engine.

Flow for one document:
  cache lookup → engine-wide slot → five rule checkers (bounded per
  document, run on worker threads) → aggregate in checker order → score
  → cache write → slot release.

Design:
  - All shared state (cache, limiters, metrics) belongs to the engine
    instance; separate engines never interfere.
  - ``validate_document`` never raises for document problems or checker
    faults.  A failing checker becomes a critical VALIDATION_ERROR finding
    and the result is not cached.
"""

from __future__ import annotations

import asyncio
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Any, Callable, Iterable, Optional, Sequence

from precision_engine.config import Settings
from precision_engine.engine.autofix import AutoFixAdvisor
from precision_engine.engine.cache import ValidationCache
from precision_engine.engine.concurrency import ConcurrencyLimiter
from precision_engine.models.documents import (
    BaseDocument,
    CorpusContext,
    detect_document_kind,
    parse_document,
)
from precision_engine.models.enums import (
    CheckPhase,
    DocumentKind,
    FindingCategory,
    FindingKind,
    Severity,
)
from precision_engine.models.results import (
    AutoFixSuggestion,
    BatchResult,
    BatchSummary,
    EngineStats,
    Finding,
    ValidationResult,
)
from precision_engine.rules.business_rules import check_business_logic
from precision_engine.rules.catalog import RuleCatalog, load_catalog
from precision_engine.rules.common import is_blank
from precision_engine.rules.content_rules import check_content
from precision_engine.rules.quality_gate_rules import check_quality_gates
from precision_engine.rules.relationship_rules import check_relationships
from precision_engine.rules.structure_rules import check_structure
from precision_engine.utils.hashing import document_fingerprint

logger = logging.getLogger(__name__)

Checker = Callable[[BaseDocument, DocumentKind, Optional[CorpusContext], RuleCatalog], list[Finding]]

# Aggregation order is this declaration order, whatever finishes first
DEFAULT_CHECKERS: tuple[tuple[CheckPhase, Checker], ...] = (
    (CheckPhase.STRUCTURE, check_structure),
    (CheckPhase.CONTENT, check_content),
    (CheckPhase.RELATIONSHIPS, check_relationships),
    (CheckPhase.QUALITY_GATES, check_quality_gates),
    (CheckPhase.BUSINESS_LOGIC, check_business_logic),
)

ERROR_PENALTY = 10
WARNING_PENALTY = 5
COMPLETENESS_BONUS = 5


def calculate_quality_score(
    document: BaseDocument | None,
    findings: Sequence[Finding],
    catalog: RuleCatalog,
) -> int:
    """100 − 10/error − 5/warning + 5 per completeness bonus, clamped to [0, 100]."""
    score = 100
    score -= ERROR_PENALTY * sum(1 for f in findings if f.kind == FindingKind.ERROR)
    score -= WARNING_PENALTY * sum(1 for f in findings if f.kind == FindingKind.WARNING)

    if document is not None:
        description = getattr(document, "description", None) or ""
        if len(description) > catalog.quality_gates.bonus_description_length:
            score += COMPLETENESS_BONUS
        if not is_blank(getattr(document, "acceptance_criteria", None)):
            score += COMPLETENESS_BONUS
        if not is_blank(getattr(document, "implementation_plan", None)):
            score += COMPLETENESS_BONUS

    return max(0, min(100, score))


class PrecisionEngine:
    """
    Rule-based validator for capabilities, enablers and requirement records.

    Usage:
        engine = PrecisionEngine(Settings(max_concurrent_validations=4))
        result = await engine.validate_document(doc, DocumentKind.ENABLER, corpus)
        batch = await engine.batch_validate(docs, corpus)
        fixes = engine.generate_auto_fix_suggestions(batch.results)
    """

    def __init__(
        self,
        settings: Settings | None = None,
        catalog: RuleCatalog | None = None,
        clock: Callable[[], float] = time.monotonic,
        checkers: Sequence[tuple[CheckPhase, Checker]] = DEFAULT_CHECKERS,
    ):
        self.settings = settings or Settings()
        self.catalog = catalog or load_catalog(self.settings.rules_file)
        self.checkers: list[tuple[CheckPhase, Checker]] = list(checkers)
        self.cache = ValidationCache(
            ttl_ms=self.settings.cache_ttl_ms,
            max_entries=self.settings.cache_max_entries,
            clock=clock,
        )
        self.validation_limiter = ConcurrencyLimiter(
            self.settings.max_concurrent_validations, name="validations"
        )
        self.advisor = AutoFixAdvisor(self.catalog)
        # One worker per checker slot across all concurrent validations
        self._executor = ThreadPoolExecutor(
            max_workers=self.settings.max_concurrent_validations * self.settings.max_concurrent_checks,
            thread_name_prefix="precision-check",
        )

        self.total_validations = 0
        self.cache_hits = 0
        self.peak_concurrent_checks = 0
        self._timed_runs = 0
        self.average_validation_time_ms = 0.0

    # ── Single document ──────────────────────────────────

    async def validate_document(
        self,
        document: BaseDocument | dict[str, Any],
        kind: DocumentKind | str | None = None,
        corpus: CorpusContext | None = None,
    ) -> ValidationResult:
        t0 = time.perf_counter()
        self.total_validations += 1

        try:
            if isinstance(document, dict):
                document = parse_document(document, kind)
            resolved_kind = DocumentKind(kind) if kind else detect_document_kind(document)
        except Exception as exc:
            logger.warning(f"[ENGINE] Rejected unreadable document: {exc}")
            return self._failure_result(document, kind, "document parsing", exc, t0)

        doc_id = document.identifier
        use_cache = self.settings.cache_enabled and bool(doc_id)
        cache_key = f"{resolved_kind.value}:{doc_id}"
        fingerprint = document_fingerprint(document) if use_cache else ""

        if use_cache:
            cached = self.cache.get(cache_key, fingerprint)
            if cached is not None:
                self.cache_hits += 1
                logger.debug(f"[ENGINE] Cache hit: {doc_id}")
                return cached.model_copy(update={
                    "from_cache": True,
                    "processing_time_ms": _elapsed_ms(t0),
                })
            logger.debug(f"[ENGINE] Cache miss: {doc_id}")

        async with self.validation_limiter.slot():
            findings, failed = await self._run_checkers(document, resolved_kind, corpus)
            result = ValidationResult(
                document_id=doc_id,
                kind=resolved_kind,
                is_valid=not failed and not any(f.kind == FindingKind.ERROR for f in findings),
                findings=findings,
                quality_score=calculate_quality_score(document, findings, self.catalog),
                processing_time_ms=_elapsed_ms(t0),
                from_cache=False,
            )
            if use_cache and not failed:
                self.cache.put(cache_key, result, fingerprint)

        self._record_timing(result.processing_time_ms)
        logger.info(
            f"[ENGINE] {doc_id or '<no id>'} ({resolved_kind.value}) → "
            f"valid={result.is_valid} score={result.quality_score} "
            f"errors={len(result.errors)} warnings={len(result.warnings)} "
            f"in {result.processing_time_ms:.1f}ms"
        )
        return result

    async def _run_checkers(
        self,
        document: BaseDocument,
        kind: DocumentKind,
        corpus: CorpusContext | None,
    ) -> tuple[list[Finding], bool]:
        """Run every checker under the per-document limit; collect in order."""
        limiter = ConcurrencyLimiter(self.settings.max_concurrent_checks, name=f"checks:{document.identifier}")
        loop = asyncio.get_running_loop()
        outcomes = await limiter.gather([
            partial(loop.run_in_executor, self._executor, checker, document, kind, corpus, self.catalog)
            for _, checker in self.checkers
        ])
        self.peak_concurrent_checks = max(self.peak_concurrent_checks, limiter.peak)

        findings: list[Finding] = []
        failures: list[tuple[str, Exception]] = []
        for (phase, _), outcome in zip(self.checkers, outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                logger.error(
                    f"[ENGINE] {phase.value} checker failed for {document.identifier or '<no id>'}: {outcome}",
                    exc_info=outcome,
                )
                failures.append((phase.value, outcome))
            else:
                findings.extend(outcome)

        # One fault finding per document, naming every phase that failed
        if failures:
            phases = ", ".join(phase for phase, _ in failures)
            findings.append(_validation_error(phases, failures[0][1]))
        return findings, bool(failures)

    # ── Batch ────────────────────────────────────────────

    async def batch_validate(
        self,
        documents: Iterable[BaseDocument | dict[str, Any]],
        corpus: CorpusContext | None = None,
    ) -> BatchResult:
        """Validate every document; the engine-wide limit bounds concurrency."""
        t0 = time.perf_counter()
        docs = list(documents)
        logger.info(f"[BATCH] Validating {len(docs)} documents (limit={self.validation_limiter.limit})")

        outcomes = await asyncio.gather(
            *(self.validate_document(doc, corpus=corpus) for doc in docs),
            return_exceptions=True,
        )

        results: list[ValidationResult] = []
        for doc, outcome in zip(docs, outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                logger.error(f"[BATCH] Unexpected failure: {outcome}", exc_info=outcome)
                outcome = self._failure_result(doc, None, "batch dispatch", outcome, t0)
            results.append(outcome)

        summary = summarize(results, _elapsed_ms(t0))
        logger.info(
            f"[BATCH] Done: {summary.valid_documents}/{summary.total_documents} valid, "
            f"{summary.total_errors} errors, {summary.total_warnings} warnings, "
            f"avg score {summary.average_quality_score:.1f} in {summary.processing_time_ms:.1f}ms"
        )
        logger.debug(f"[BATCH] Limiter: {self.validation_limiter.snapshot()}")
        return BatchResult(results=results, summary=summary)

    async def validate_workspace(self, documents: Iterable[BaseDocument | dict[str, Any]]) -> BatchResult:
        """Batch-validate documents against a corpus built from themselves."""
        docs: list[BaseDocument | dict[str, Any]] = []
        for doc in documents:
            if isinstance(doc, dict):
                try:
                    doc = parse_document(doc)
                except Exception as exc:
                    logger.warning(f"[BATCH] Keeping unreadable document for reporting: {exc}")
            docs.append(doc)

        corpus = CorpusContext.from_documents(d for d in docs if isinstance(d, BaseDocument))
        logger.info(
            f"[BATCH] Workspace corpus: {len(corpus.capabilities)} capabilities, "
            f"{len(corpus.enablers)} enablers"
        )
        return await self.batch_validate(docs, corpus)

    # ── Auto-fix / cache / stats ─────────────────────────

    def generate_auto_fix_suggestions(
        self, results: ValidationResult | Iterable[ValidationResult]
    ) -> list[AutoFixSuggestion]:
        return self.advisor.suggest(results)

    def clear_cache(self) -> None:
        self.cache.clear()

    def close(self) -> None:
        """Shut down the checker thread pool; the engine is unusable afterwards."""
        self._executor.shutdown(wait=True)
        logger.info("[ENGINE] Closed")

    def __enter__(self) -> PrecisionEngine:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def get_stats(self) -> EngineStats:
        hit_rate = self.cache_hits / self.total_validations if self.total_validations else 0.0
        return EngineStats(
            total_validations=self.total_validations,
            cache_hit_rate=round(hit_rate, 2),
            average_validation_time_ms=round(self.average_validation_time_ms, 3),
            active_validations=self.validation_limiter.in_flight,
            peak_concurrent_validations=self.validation_limiter.peak,
            max_concurrent_validations=self.validation_limiter.limit,
            max_concurrent_checks=self.settings.max_concurrent_checks,
            peak_concurrent_checks=self.peak_concurrent_checks,
            configured_kinds=len(self.catalog.kinds),
            cache=self.cache.stats(),
        )

    # ── Internals ────────────────────────────────────────

    def _record_timing(self, elapsed_ms: float) -> None:
        self._timed_runs += 1
        self.average_validation_time_ms += (elapsed_ms - self.average_validation_time_ms) / self._timed_runs

    def _failure_result(
        self,
        document: BaseDocument | dict[str, Any],
        kind: DocumentKind | str | None,
        phase: str,
        exc: BaseException,
        t0: float,
    ) -> ValidationResult:
        if isinstance(document, BaseDocument):
            doc_id, resolved = document.identifier, DocumentKind(document.kind)
        else:
            doc_id = str(document.get("id") or document.get("reqId") or "") if isinstance(document, dict) else ""
            try:
                resolved = DocumentKind(kind) if kind else None
            except ValueError:
                resolved = None
        findings = [_validation_error(phase, exc)]
        return ValidationResult(
            document_id=doc_id,
            kind=resolved,
            is_valid=False,
            findings=findings,
            quality_score=calculate_quality_score(None, findings, self.catalog),
            processing_time_ms=_elapsed_ms(t0),
        )


def summarize(results: Sequence[ValidationResult], processing_time_ms: float) -> BatchSummary:
    total = len(results)
    valid = sum(1 for r in results if r.is_valid)
    return BatchSummary(
        total_documents=total,
        valid_documents=valid,
        invalid_documents=total - valid,
        total_errors=sum(len(r.errors) for r in results),
        total_warnings=sum(len(r.warnings) for r in results),
        average_quality_score=(sum(r.quality_score for r in results) / total) if total else 0.0,
        processing_time_ms=processing_time_ms,
    )


def _validation_error(phase: str, exc: BaseException | str) -> Finding:
    return Finding(
        kind=FindingKind.ERROR,
        category=FindingCategory.VALIDATION_ERROR,
        message=f"Validation failed during {phase}: {exc}",
        severity=Severity.CRITICAL,
        field="document",
        suggestion="Check the document structure; this is an engine fault, not a content issue",
    )


def _elapsed_ms(t0: float) -> float:
    return (time.perf_counter() - t0) * 1000.0
