"""Corpus — workspace document loading."""

from precision_engine.corpus.loader import load_corpus

__all__ = ["load_corpus"]
