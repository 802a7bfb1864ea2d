"""Requirements Precision Engine — rule-based validation for capability and enabler documents."""

from precision_engine.engine import PrecisionEngine

__all__ = ["PrecisionEngine"]
