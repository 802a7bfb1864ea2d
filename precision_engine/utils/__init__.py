from .hashing import document_fingerprint, sha256_hash
from .logger import setup_logging

__all__ = ["document_fingerprint", "setup_logging", "sha256_hash"]
