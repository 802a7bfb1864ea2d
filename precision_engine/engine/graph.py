"""
Dependency Graph Walker — cycle detection over ``dependencies`` lists.

Iterative depth-first walk (no recursion limit on long chains).  Each node
is fully explored at most once, so a walk is O(V + E).  Edges to ids that
are not in the graph are ignored; reporting dangling references belongs to
the relationship rules, not here.
"""

from __future__ import annotations

from typing import Iterator, Mapping, Sequence

from precision_engine.models.documents import CorpusContext
from precision_engine.models.results import CycleCheck


def detect_cycle(start_id: str, graph: Mapping[str, Sequence[str]]) -> CycleCheck:
    """
    Walk from ``start_id`` and report the first cycle found.

    The path runs from the first occurrence of the repeated node through
    the repeat, in traversal order: ``[A, B, C, A]``.
    """
    if start_id not in graph:
        return CycleCheck()

    explored: set[str] = set()
    on_stack: set[str] = {start_id}
    path: list[str] = [start_id]
    pending: list[Iterator[str]] = [iter(graph[start_id])]

    while pending:
        descended = False
        for dep in pending[-1]:
            if dep not in graph or dep in explored:
                continue
            if dep in on_stack:
                first = path.index(dep)
                return CycleCheck(cycle=True, path=[*path[first:], dep])
            on_stack.add(dep)
            path.append(dep)
            pending.append(iter(graph[dep]))
            descended = True
            break

        if not descended:
            pending.pop()
            finished = path.pop()
            on_stack.discard(finished)
            explored.add(finished)

    return CycleCheck()


def has_cycle(start_id: str, corpus: CorpusContext) -> CycleCheck:
    """Cycle check for a document that is already part of ``corpus``."""
    return detect_cycle(start_id, corpus.dependency_map())
