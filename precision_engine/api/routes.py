"""
API routes — thin HTTP layer that delegates to the PrecisionEngine.

Routes:
  GET    /health                        → API health check
  POST   /api/validation/document       → Validate one document
  POST   /api/validation/batch          → Validate many documents
  POST   /api/validation/workspace      → Validate a whole workspace against itself
  GET    /api/validation/rules          → Rule catalog + engine limits
  POST   /api/validation/auto-fix       → Auto-fix suggestions for results
  DELETE /api/validation/cache          → Clear the result cache
  GET    /api/validation/stats          → Engine statistics
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, ConfigDict, Field

from precision_engine.corpus.loader import load_corpus
from precision_engine.engine import PrecisionEngine
from precision_engine.models.documents import CorpusContext
from precision_engine.models.results import ValidationResult

logger = logging.getLogger(__name__)

# ── Routers ──────────────────────────────────────────────
health_router = APIRouter()
validation_router = APIRouter()


def get_engine(request: Request) -> PrecisionEngine:
    """The engine owned by this app instance."""
    return request.app.state.engine


# ── Request schemas ──────────────────────────────────────
class DocumentValidationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    document: dict[str, Any]
    document_type: Optional[str] = Field(default=None, alias="documentType")
    context: Optional[CorpusContext] = None


class BatchValidationRequest(BaseModel):
    documents: list[dict[str, Any]]
    context: Optional[CorpusContext] = None


class WorkspaceValidationRequest(BaseModel):
    documents: Optional[list[dict[str, Any]]] = None


class AutoFixRequest(BaseModel):
    results: list[ValidationResult]


# ── Health ───────────────────────────────────────────────

@health_router.get("/health")
async def health_check(engine: PrecisionEngine = Depends(get_engine)):
    stats = engine.get_stats()
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "active_validations": stats.active_validations,
        "cache_size": stats.cache.size,
    }


# ── Validation ───────────────────────────────────────────

@validation_router.post("/document")
async def validate_document(
    body: DocumentValidationRequest,
    engine: PrecisionEngine = Depends(get_engine),
):
    result = await engine.validate_document(body.document, body.document_type, body.context)
    return {
        "success": True,
        "validation": result.model_dump(mode="json"),
        "context": {
            "documents_in_context": body.context.size if body.context else 0,
            "processing_time_ms": result.processing_time_ms,
        },
    }


@validation_router.post("/batch")
async def validate_batch(
    body: BatchValidationRequest,
    engine: PrecisionEngine = Depends(get_engine),
):
    batch = await engine.batch_validate(body.documents, body.context)
    return {
        "success": True,
        "batch_validation": batch.model_dump(mode="json"),
        "context": {"documents_in_context": body.context.size if body.context else 0},
    }


@validation_router.post("/workspace")
async def validate_workspace(
    body: WorkspaceValidationRequest | None = None,
    engine: PrecisionEngine = Depends(get_engine),
):
    documents: list[Any]
    if body is not None and body.documents is not None:
        documents = body.documents
    else:
        corpus_path = engine.settings.corpus_path
        if not corpus_path:
            raise HTTPException(status_code=400, detail="No documents given and no corpus_path configured")
        try:
            documents = load_corpus(corpus_path)
        except FileNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))

    batch = await engine.validate_workspace(documents)
    return {"success": True, "workspace_validation": batch.model_dump(mode="json")}


@validation_router.get("/rules")
async def get_rules(engine: PrecisionEngine = Depends(get_engine)):
    return {
        "success": True,
        "rules": engine.catalog.model_dump(mode="json"),
        "limits": {
            "max_concurrent_validations": engine.settings.max_concurrent_validations,
            "max_concurrent_checks": engine.settings.max_concurrent_checks,
            "cache_enabled": engine.settings.cache_enabled,
            "cache_ttl_ms": engine.settings.cache_ttl_ms,
            "cache_max_entries": engine.settings.cache_max_entries,
        },
    }


@validation_router.post("/auto-fix")
async def auto_fix(body: AutoFixRequest, engine: PrecisionEngine = Depends(get_engine)):
    suggestions = engine.generate_auto_fix_suggestions(body.results)
    return {
        "success": True,
        "auto_fix_suggestions": [s.model_dump(mode="json") for s in suggestions],
        "suggestions_count": len(suggestions),
    }


@validation_router.delete("/cache")
async def clear_cache(engine: PrecisionEngine = Depends(get_engine)):
    engine.clear_cache()
    return {"success": True, "message": "Validation cache cleared successfully"}


@validation_router.get("/stats")
async def get_stats(engine: PrecisionEngine = Depends(get_engine)):
    return {"success": True, "stats": engine.get_stats().model_dump(mode="json")}
