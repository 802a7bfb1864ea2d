"""
Engine — orchestration, caching, concurrency and dependency walking.

Callers import the engine from here:
    from precision_engine.engine import PrecisionEngine
"""

from .orchestrator import PrecisionEngine, calculate_quality_score
from .graph import detect_cycle, has_cycle

__all__ = ["PrecisionEngine", "calculate_quality_score", "detect_cycle", "has_cycle"]
