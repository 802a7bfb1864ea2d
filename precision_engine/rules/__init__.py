"""
Rules — the rule catalog and the five rule-checker families.

Each checker has the same signature:
    check_x(document, kind, corpus=None, catalog=DEFAULT_CATALOG) -> list[Finding]
"""

from .catalog import DEFAULT_CATALOG, KindRules, QualityGateConfig, RuleCatalog, load_catalog
from .structure_rules import check_structure
from .content_rules import check_content
from .relationship_rules import check_relationships
from .quality_gate_rules import check_quality_gates
from .business_rules import check_business_logic

__all__ = [
    "DEFAULT_CATALOG",
    "KindRules",
    "QualityGateConfig",
    "RuleCatalog",
    "load_catalog",
    "check_structure",
    "check_content",
    "check_relationships",
    "check_quality_gates",
    "check_business_logic",
]
