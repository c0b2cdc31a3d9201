"""
Data models for wearable sets.

Contains dataclasses for set definitions and ranked sets.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from core.traits import CoreTraitMods


@dataclass(frozen=True)
class ParsedSet:
    """Validated fields of a raw catalog entry."""
    name: str
    set_bonus_brs: int
    trait_modifiers: CoreTraitMods


@dataclass(frozen=True)
class SetDefinition:
    """A wearable set: equipping every required item grants the bonuses."""
    id: str
    name: str
    required_wearable_ids: Tuple[int, ...] = ()
    set_bonus_brs: int = 0
    trait_modifiers: CoreTraitMods = field(default_factory=CoreTraitMods)

    @property
    def item_count(self) -> int:
        return len(self.required_wearable_ids)

    def is_complete(self, equipped_ids) -> bool:
        """True when every required wearable is in ``equipped_ids``."""
        equipped = set(equipped_ids)
        return all(wearable_id in equipped for wearable_id in self.required_wearable_ids)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "required_wearable_ids": list(self.required_wearable_ids),
            "set_bonus_brs": self.set_bonus_brs,
            "trait_modifiers": self.trait_modifiers.to_dict(),
        }


@dataclass
class RankedSet:
    """One row of the best-set ranking."""
    set: SetDefinition
    score_after: int
    delta: int
    bonus_label: str
    item_count: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "set": self.set.to_dict(),
            "score_after": self.score_after,
            "delta": self.delta,
            "bonus_label": self.bonus_label,
            "item_count": self.item_count,
        }
