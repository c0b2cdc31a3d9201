"""
Best-set ranking calculator.

Scores every catalog set against a gotchi's base traits and ranks them by
the rarity (BRS) change they would produce.
"""
from __future__ import annotations

import logging
from typing import Any, List, Optional

from core.constants import (
    BEST_SETS_DEFAULT_LIMIT,
    BONUS_LABEL_SEPARATOR,
    EDITABLE_TRAIT_COUNT,
    TRAIT_KEYS,
    TRAIT_LABELS,
)
from core.parsing import clamp_trait, normalize_traits
from core.rarity import traits_to_brs
from core.wearable_sets.catalog import SetCatalog, get_default_catalog
from core.wearable_sets.models import RankedSet, SetDefinition

logger = logging.getLogger(__name__)


def format_bonus(value: int) -> str:
    """Format with an explicit sign for non-negative values."""
    return f"+{value}" if value >= 0 else str(value)


def build_bonus_label(set_def: SetDefinition) -> str:
    """e.g. ``BRS +3 · NRG +0 · AGG +1 · SPK -1 · BRN +0``"""
    parts = [f"BRS {format_bonus(set_def.set_bonus_brs)}"]
    for key, mod in zip(TRAIT_KEYS, set_def.trait_modifiers.as_list()):
        parts.append(f"{TRAIT_LABELS[key]} {format_bonus(mod)}")
    return BONUS_LABEL_SEPARATOR.join(parts)


def score_set(base_traits: List[int], base_score: int, set_def: SetDefinition) -> RankedSet:
    """Score one set against already-normalized base traits."""
    traits = list(base_traits)
    for i, mod in enumerate(set_def.trait_modifiers.as_list()):
        traits[i] = clamp_trait(traits[i] + mod)

    score_after = traits_to_brs(traits) + set_def.set_bonus_brs
    return RankedSet(
        set=set_def,
        score_after=score_after,
        delta=score_after - base_score,
        bonus_label=build_bonus_label(set_def),
        item_count=set_def.item_count,
    )


def _sort_key(ranked: RankedSet):
    # Best first: delta, then flat bonus, then total stat movement
    return (
        -ranked.delta,
        -ranked.set.set_bonus_brs,
        -ranked.set.trait_modifiers.total_movement,
    )


def compute_best_sets(
    base_traits: Any,
    limit: int = 0,
    catalog: Optional[SetCatalog] = None,
) -> List[RankedSet]:
    """
    Rank every set by the BRS delta it would give a gotchi.

    Args:
        base_traits: Base trait vector (at least the 4 editable traits)
        limit: Maximum number of results; 0 or less returns all
        catalog: Set catalog (bundled catalog when omitted)

    Returns:
        RankedSet list, best first. Empty if fewer than 4 traits are given.
    """
    if not isinstance(base_traits, (list, tuple)) or len(base_traits) < EDITABLE_TRAIT_COUNT:
        return []

    catalog = catalog if catalog is not None else get_default_catalog()

    safe_base = normalize_traits(base_traits)
    base_score = traits_to_brs(safe_base)

    ranked = [score_set(safe_base, base_score, set_def) for set_def in catalog]
    # sorted() is stable, so full ties keep catalog order
    ranked = sorted(ranked, key=_sort_key)

    return ranked[:limit] if limit > 0 else ranked


class BestSetCalculator:
    """
    Holds a catalog and a default result limit.

    Usage:
        calculator = BestSetCalculator(catalog, default_limit=10)
        top = calculator.rank([10, 10, 10, 10, 50, 50])
    """

    def __init__(self, catalog: Optional[SetCatalog] = None, default_limit: int = BEST_SETS_DEFAULT_LIMIT):
        """
        Args:
            catalog: Set catalog (bundled catalog when omitted)
            default_limit: Limit used when rank() is called without one
        """
        self.catalog = catalog if catalog is not None else get_default_catalog()
        self.default_limit = default_limit

    def rank(self, base_traits: Any, limit: Optional[int] = None) -> List[RankedSet]:
        effective_limit = self.default_limit if limit is None else limit
        ranked = compute_best_sets(base_traits, effective_limit, self.catalog)
        logger.debug(f"Ranked {len(ranked)} sets (limit {effective_limit})")
        return ranked

    def best(self, base_traits: Any) -> Optional[RankedSet]:
        """The single best set, or None if nothing can be ranked."""
        ranked = compute_best_sets(base_traits, 1, self.catalog)
        return ranked[0] if ranked else None
