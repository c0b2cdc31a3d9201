"""
Trait vector helpers.

A gotchi carries six numeric traits: four editable ones (NRG, AGG, SPK, BRN)
that wearables, sets and respec can move, and two cosmetic eye traits that
never change.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence

from core.constants import EDITABLE_TRAIT_COUNT, TRAIT_COUNT, TRAIT_KEYS
from core.parsing import Number, is_complete_trait_vector, normalize_traits, parse_finite_number


@dataclass(frozen=True)
class CoreTraitMods:
    """Modifiers for the four editable traits."""
    nrg: int = 0
    agg: int = 0
    spk: int = 0
    brn: int = 0

    @classmethod
    def from_list(cls, values: Any) -> "CoreTraitMods":
        """Build from a trait-ordered array (only the first 4 slots are read)."""
        nrg, agg, spk, brn = normalize_traits(values, EDITABLE_TRAIT_COUNT)
        return cls(nrg=nrg, agg=agg, spk=spk, brn=brn)

    def as_list(self) -> List[int]:
        return [self.nrg, self.agg, self.spk, self.brn]

    @property
    def total_movement(self) -> int:
        """Sum of absolute modifier values."""
        return sum(abs(v) for v in self.as_list())

    def is_zero(self) -> bool:
        return self.total_movement == 0

    def __add__(self, other: "CoreTraitMods") -> "CoreTraitMods":
        if not isinstance(other, CoreTraitMods):
            return NotImplemented
        return CoreTraitMods(
            nrg=self.nrg + other.nrg,
            agg=self.agg + other.agg,
            spk=self.spk + other.spk,
            brn=self.brn + other.brn,
        )

    def to_dict(self) -> dict:
        return dict(zip(TRAIT_KEYS, self.as_list()))


def apply_core_trait_mods(base_traits: Any, mods: CoreTraitMods) -> List[Number]:
    """Add editable-trait modifiers to a 6-slot vector. Eye traits are untouched."""
    base = normalize_traits(base_traits)
    moved = [value + mod for value, mod in zip(base, mods.as_list())]
    return moved + base[EDITABLE_TRAIT_COUNT:]


def sum_traits(a: Any, b: Any) -> List[Number]:
    """Element-wise sum of two 6-slot vectors."""
    left = normalize_traits(a)
    right = normalize_traits(b)
    return [x + y for x, y in zip(left, right)]


def sum_many_traits(vectors: Iterable[Any]) -> List[Number]:
    total = normalize_traits([])
    for vector in vectors:
        total = sum_traits(total, vector)
    return total


def compute_final_traits(base: Any, wearable_delta: Any, set_delta: Any) -> List[Number]:
    return sum_traits(sum_traits(base, wearable_delta), set_delta)


def get_canonical_modified_traits(
    base_traits: Any,
    modified_traits: Optional[Sequence[Any]] = None,
    local_computed_traits: Optional[Sequence[Any]] = None,
    with_sets_traits: Optional[Sequence[Any]] = None,
) -> List[Number]:
    """
    Pick the most authoritative post-modifier trait vector.

    Preference order: traits with sets applied (from the subgraph), modified
    traits (wearables only), locally computed traits, then the base traits.
    A candidate counts only if it is a complete 6-slot finite vector.
    """
    for candidate in (with_sets_traits, modified_traits, local_computed_traits):
        if is_complete_trait_vector(candidate, TRAIT_COUNT):
            return [parse_finite_number(v) for v in candidate]
    return normalize_traits(base_traits)
