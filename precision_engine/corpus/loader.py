"""
Corpus Loader — reads workspace documents from JSON.

Usage:
    python -m precision_engine.corpus.loader path/to/workspace

A path may be a single ``.json`` file or a directory of them.  Each file
holds one document or a list of documents.  Files that cannot be read are
skipped with a warning so one bad file never aborts a workspace load.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from precision_engine.models.documents import Document, parse_document

logger = logging.getLogger(__name__)


def _load_json(path: Path) -> list[dict[str, Any]]:
    """Read a JSON file and return its document records."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        # {"documents": [...]} or a single document
        data = data.get("documents", [data])
    if not isinstance(data, list):
        raise ValueError(f"Expected a document or a list of documents in {path}")
    return [d for d in data if isinstance(d, dict)]


def load_corpus(path: str | Path) -> list[Document]:
    """Load every document under ``path``."""
    root = Path(path)
    if not root.exists():
        raise FileNotFoundError(f"Corpus path not found: {root}")

    files = sorted(root.glob("*.json")) if root.is_dir() else [root]
    documents: list[Document] = []

    for file_path in files:
        try:
            records = _load_json(file_path)
        except (OSError, ValueError) as e:
            logger.warning(f"Skipping unreadable corpus file {file_path.name}: {e}")
            continue

        for record in records:
            try:
                documents.append(parse_document(record))
            except (ValueError, ValidationError) as e:
                logger.warning(f"Skipping invalid document in {file_path.name}: {e}")

    logger.info(f"Loaded {len(documents)} documents from {len(files)} files under {root}")
    return documents


# ── CLI entry point ──────────────────────────────────────

if __name__ == "__main__":
    import argparse

    logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")

    parser = argparse.ArgumentParser(description="List the documents in a workspace corpus")
    parser.add_argument("path", help="JSON file or directory of JSON files")
    args = parser.parse_args()

    for doc in load_corpus(args.path):
        print(f"{doc.kind:<26} {doc.identifier}")
