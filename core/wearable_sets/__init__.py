"""
core.wearable_sets - Wearable set catalog and best-set ranking.

Usage:
    from core.wearable_sets import compute_best_sets, load_catalog

    catalog = load_catalog()
    for ranked in compute_best_sets([10, 10, 10, 10, 50, 50], 10, catalog):
        print(ranked.set.name, ranked.delta, ranked.bonus_label)
"""
from __future__ import annotations

# Models
from core.wearable_sets.models import (
    ParsedSet,
    SetDefinition,
    RankedSet,
)

# Catalog
from core.wearable_sets.catalog import (
    DEFAULT_CATALOG_PATH,
    ValidationError,
    SetCatalog,
    build_catalog,
    get_default_catalog,
    load_catalog,
    parse_set_definition,
    to_slug,
)

# Calculator
from core.wearable_sets.calculator import (
    BestSetCalculator,
    build_bonus_label,
    compute_best_sets,
    format_bonus,
)

__all__ = [
    # Models
    "ParsedSet",
    "SetDefinition",
    "RankedSet",
    # Catalog
    "DEFAULT_CATALOG_PATH",
    "ValidationError",
    "SetCatalog",
    "build_catalog",
    "get_default_catalog",
    "load_catalog",
    "parse_set_definition",
    "to_slug",
    # Calculator
    "BestSetCalculator",
    "build_bonus_label",
    "compute_best_sets",
    "format_bonus",
]
