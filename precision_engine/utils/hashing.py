"""
Hashing utilities for cache keys.
"""

from __future__ import annotations

import hashlib

from pydantic import BaseModel


def sha256_hash(content: str | bytes) -> str:
    """Return the SHA-256 hex digest of the given content."""
    if isinstance(content, str):
        content = content.encode("utf-8")
    return hashlib.sha256(content).hexdigest()


def document_fingerprint(document: BaseModel) -> str:
    """Digest of a document's full content; any field edit changes it."""
    return sha256_hash(document.model_dump_json())
