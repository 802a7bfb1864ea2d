"""
Requirements Precision Engine — Main Entry Point

Validate a workspace directly (CLI):
    python -m precision_engine path/to/workspace

Run as an API server (for the editor UI):
    python -m precision_engine --serve
    # or: uvicorn precision_engine.api:app --reload --port 8000

Or import and run programmatically:
    from precision_engine.main import run
    batch = run("path/to/workspace")
"""

from __future__ import annotations

import asyncio
import logging
import sys
from datetime import datetime, timezone

from precision_engine.config import get_settings
from precision_engine.corpus.loader import load_corpus
from precision_engine.engine import PrecisionEngine
from precision_engine.models.results import BatchResult
from precision_engine.utils.logger import setup_logging


def run(corpus_path: str = "") -> BatchResult:
    """Validate every document in a workspace and return the batch result."""
    settings = get_settings()
    setup_logging(settings.log_level)
    logger = logging.getLogger(__name__)

    path = corpus_path or settings.corpus_path
    if not path:
        raise ValueError("No corpus path given (argument or CORPUS_PATH)")

    logger.info("=" * 60)
    logger.info("  REQUIREMENTS PRECISION ENGINE")
    logger.info(f"  Corpus: {path} | Started: {datetime.now(timezone.utc).isoformat()}")
    logger.info("=" * 60)

    documents = load_corpus(path)
    with PrecisionEngine(settings) as engine:
        batch = asyncio.run(engine.validate_workspace(documents))

    _print_summary(batch)
    return batch


def _print_summary(batch: BatchResult) -> None:
    """Log a human-readable summary of a workspace validation."""
    logger = logging.getLogger(__name__)
    summary = batch.summary

    logger.info("")
    logger.info("-" * 60)
    logger.info("  VALIDATION SUMMARY")
    logger.info("-" * 60)
    logger.info(f"  Documents:      {summary.total_documents}")
    logger.info(f"  Valid:          {summary.valid_documents}")
    logger.info(f"  Invalid:        {summary.invalid_documents}")
    logger.info(f"  Errors:         {summary.total_errors}")
    logger.info(f"  Warnings:       {summary.total_warnings}")
    logger.info(f"  Avg Score:      {summary.average_quality_score:.1f}")
    logger.info(f"  Elapsed:        {summary.processing_time_ms:.1f}ms")
    logger.info("-" * 60)

    for result in batch.results:
        if not result.findings:
            continue
        logger.info(f"  {result.document_id or '<no id>'} (score {result.quality_score})")
        for finding in result.findings:
            logger.info(
                f"    {finding.kind.value:<10} | {finding.severity.value:<8} | "
                f"{finding.category.value} | {finding.field} | {finding.message}"
            )
    logger.info("")


def serve(host: str = "0.0.0.0", port: int = 8000) -> None:
    """Start the FastAPI server."""
    import uvicorn

    setup_logging(get_settings().log_level)
    logger = logging.getLogger(__name__)
    logger.info(f"Starting API server on {host}:{port}")
    uvicorn.run("precision_engine.api:app", host=host, port=port, reload=False)


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if "--serve" in args:
        serve()
        return 0
    batch = run(args[0] if args else "")
    return 0 if batch.summary.invalid_documents == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
