"""
Base Rarity Score (BRS) calculation.

Each trait scores by its distance from the midpoint: values below 50 score
``100 - value``, everything else ``value + 1``. A gotchi's trait BRS is the
sum over all six traits (eye traits included). Total BRS adds the flat
bonuses from equipped wearables, completed sets and age.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable, List, Mapping, Optional, Sequence

from core.constants import AGE_BRS_MILESTONES, BRS_MIDPOINT, TRAIT_COUNT
from core.parsing import Number, is_complete_trait_vector, normalize_traits, parse_finite_number
from core.traits import CoreTraitMods, apply_core_trait_mods, get_canonical_modified_traits
from core.wearables import Wearable, sum_wearable_core_mods, sum_wearable_flat_brs

if TYPE_CHECKING:
    from core.wearable_sets.catalog import SetCatalog
    from core.wearable_sets.models import SetDefinition

logger = logging.getLogger(__name__)


def trait_to_brs(value: Number) -> int:
    """
    BRS contribution of a single trait value.

    Examples:
        >>> trait_to_brs(0), trait_to_brs(49), trait_to_brs(50), trait_to_brs(100)
        (100, 51, 51, 101)
    """
    t = parse_finite_number(value)
    return 100 - t if t < BRS_MIDPOINT else t + 1


def traits_to_brs(traits: Any) -> int:
    """Sum of trait_to_brs over all six trait slots."""
    return sum(trait_to_brs(v) for v in normalize_traits(traits, TRAIT_COUNT))


def brs_delta_from_core_mods(base_traits: Any, mods: CoreTraitMods) -> int:
    return traits_to_brs(apply_core_trait_mods(base_traits, mods)) - traits_to_brs(base_traits)


def age_brs_from_blocks(blocks_elapsed: Any) -> int:
    """Age bonus from the milestone table (0 before the first milestone)."""
    blocks = parse_finite_number(blocks_elapsed)
    result = 0
    for milestone_blocks, brs in AGE_BRS_MILESTONES:
        if blocks < milestone_blocks:
            break
        result = brs
    return result


def set_rarity_delta(
    base_traits: Any,
    wearable_trait_mods: CoreTraitMods,
    set_trait_mods: CoreTraitMods,
    set_flat_brs: Number,
) -> int:
    """
    BRS gained from active sets on top of already-equipped wearables.

    The trait part is measured against the wearable-modified traits, so a
    set pushing a trait back toward 50 can cost BRS.
    """
    traits_with_wearables = apply_core_trait_mods(base_traits, wearable_trait_mods)
    traits_with_set = apply_core_trait_mods(traits_with_wearables, set_trait_mods)
    trait_delta = traits_to_brs(traits_with_set) - traits_to_brs(traits_with_wearables)
    return (set_flat_brs or 0) + trait_delta


def compute_total_brs(
    base_traits: Any,
    wearable_trait_mods: CoreTraitMods,
    wearable_flat_brs: Number,
    set_trait_mods: CoreTraitMods,
    set_flat_brs: Number,
    age_brs: Number,
    final_traits: Optional[Sequence[Any]] = None,
) -> int:
    """
    Total BRS of a dressed gotchi.

    When ``final_traits`` is a complete 6-slot vector it is trusted as-is
    (e.g. traits reported by the subgraph); otherwise the trait part is
    rebuilt from base traits plus wearable and set modifiers.
    """
    if is_complete_trait_vector(final_traits):
        trait_with_mods = traits_to_brs(final_traits)
    else:
        traits_with_wearables = apply_core_trait_mods(base_traits, wearable_trait_mods)
        trait_with_mods = traits_to_brs(apply_core_trait_mods(traits_with_wearables, set_trait_mods))

    return (
        trait_with_mods
        + (wearable_flat_brs or 0)
        + (set_flat_brs or 0)
        + (age_brs or 0)
    )


def detect_active_sets(
    equipped_ids: Iterable[int],
    catalog: Optional[SetCatalog] = None,
) -> List[SetDefinition]:
    """Every set whose required wearables are all equipped."""
    if catalog is None:
        # Import here to avoid circular imports (the set ranker scores with this module)
        from core.wearable_sets.catalog import get_default_catalog
        catalog = get_default_catalog()
    equipped = set(equipped_ids)
    return [s for s in catalog if s.is_complete(equipped)]


@dataclass
class BRSBreakdown:
    """Full rarity breakdown for a dressed gotchi."""
    final_traits: List[Number]
    trait_base: int
    trait_with_mods: int
    wearable_flat: int
    set_flat_brs: int
    set_trait_delta: int
    set_delta_total: int
    age_brs: int
    total_brs: int
    active_sets: List[SetDefinition] = field(default_factory=list)
    wearable_trait_mods: CoreTraitMods = field(default_factory=CoreTraitMods)
    set_trait_mods: CoreTraitMods = field(default_factory=CoreTraitMods)

    def get_summary(self) -> str:
        """Get a human-readable one-line summary."""
        parts = [f"traits {self.trait_with_mods}"]
        if self.wearable_flat:
            parts.append(f"wearables {self.wearable_flat:+d}")
        if self.active_sets:
            names = ", ".join(s.name for s in self.active_sets)
            parts.append(f"sets {self.set_delta_total:+d} ({names})")
        if self.age_brs:
            parts.append(f"age {self.age_brs:+d}")
        return f"BRS {self.total_brs}: " + ", ".join(parts)


def compute_brs_breakdown(
    base_traits: Any,
    equipped_ids: Sequence[int],
    wearables_by_id: Mapping[int, Wearable],
    catalog: Optional[SetCatalog] = None,
    *,
    modified_traits: Optional[Sequence[Any]] = None,
    with_sets_traits: Optional[Sequence[Any]] = None,
    blocks_elapsed: Optional[int] = None,
    age_brs_override: Optional[int] = None,
    age_enabled: bool = False,
) -> BRSBreakdown:
    """
    Compute a complete BRS breakdown.

    Args:
        base_traits: The gotchi's base numeric traits
        equipped_ids: Equipped wearable ids (0 = empty slot)
        wearables_by_id: Known wearables
        catalog: Set catalog (bundled catalog when omitted)
        modified_traits: Subgraph traits with wearables applied, if known
        with_sets_traits: Subgraph traits with wearables and sets, if known
        blocks_elapsed: Blocks since the gotchi was claimed
        age_brs_override: Explicit age bonus; wins over blocks_elapsed
        age_enabled: Whether age BRS is counted from blocks_elapsed
    """
    active_sets = detect_active_sets(equipped_ids, catalog)
    wearable_trait_mods = sum_wearable_core_mods(equipped_ids, wearables_by_id)

    set_trait_mods = CoreTraitMods()
    for set_def in active_sets:
        set_trait_mods = set_trait_mods + set_def.trait_modifiers

    traits_with_wearables = apply_core_trait_mods(base_traits, wearable_trait_mods)
    local_final_traits = apply_core_trait_mods(traits_with_wearables, set_trait_mods)
    final_traits = get_canonical_modified_traits(
        base_traits,
        modified_traits,
        local_final_traits,
        with_sets_traits,
    )

    wearable_flat = sum_wearable_flat_brs(equipped_ids, wearables_by_id)
    set_flat = sum(s.set_bonus_brs for s in active_sets)
    set_delta_total = set_rarity_delta(base_traits, wearable_trait_mods, set_trait_mods, set_flat)

    if age_brs_override is not None:
        age_brs = int(parse_finite_number(age_brs_override))
    elif age_enabled and blocks_elapsed:
        age_brs = age_brs_from_blocks(blocks_elapsed)
    else:
        age_brs = 0

    total = compute_total_brs(
        base_traits,
        wearable_trait_mods,
        wearable_flat,
        set_trait_mods,
        set_flat,
        age_brs,
        final_traits=final_traits,
    )

    breakdown = BRSBreakdown(
        final_traits=final_traits,
        trait_base=traits_to_brs(base_traits),
        trait_with_mods=traits_to_brs(final_traits),
        wearable_flat=wearable_flat,
        set_flat_brs=set_flat,
        set_trait_delta=set_delta_total - set_flat,
        set_delta_total=set_delta_total,
        age_brs=age_brs,
        total_brs=total,
        active_sets=active_sets,
        wearable_trait_mods=wearable_trait_mods,
        set_trait_mods=set_trait_mods,
    )
    logger.debug(breakdown.get_summary())
    return breakdown
