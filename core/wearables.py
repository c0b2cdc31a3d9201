"""
Wearable models and flat rarity bonuses.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

from core.constants import TRAIT_COUNT, WEARABLE_RARITY_BRS
from core.parsing import normalize_traits, parse_finite_number
from core.traits import CoreTraitMods

logger = logging.getLogger(__name__)


class WearableRarity(Enum):
    """Rarity tiers for wearables."""
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    LEGENDARY = "legendary"
    MYTHICAL = "mythical"
    GODLIKE = "godlike"

    @classmethod
    def from_string(cls, value: Optional[str]) -> Optional["WearableRarity"]:
        """Parse a rarity string case-insensitively. Returns None if unknown."""
        if not value:
            return None
        value_lower = str(value).strip().lower()
        for rarity in cls:
            if rarity.value == value_lower:
                return rarity
        return None

    @property
    def flat_brs(self) -> int:
        return WEARABLE_RARITY_BRS[self.value]


def wearable_flat_brs(rarity: Any) -> int:
    """Flat BRS for a rarity tier; 0 for anything unrecognized."""
    if isinstance(rarity, WearableRarity):
        return rarity.flat_brs
    parsed = WearableRarity.from_string(rarity)
    return parsed.flat_brs if parsed else 0


@dataclass
class Wearable:
    """A single wearable item as seen by the rarity engine."""
    id: int
    name: str = ""
    rarity: Optional[str] = None
    # Six on-chain trait modifiers (the last two are always 0 in practice)
    trait_modifiers: List[int] = field(default_factory=lambda: [0] * TRAIT_COUNT)
    # Explicit BRS modifier, used when the rarity tier is unknown
    rarity_score_modifier: int = 0

    @property
    def brs(self) -> int:
        """Flat BRS contributed by this wearable when equipped."""
        tier_brs = wearable_flat_brs(self.rarity)
        if tier_brs:
            return tier_brs
        return self.rarity_score_modifier or 0

    @property
    def core_mods(self) -> CoreTraitMods:
        return CoreTraitMods.from_list(self.trait_modifiers)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Wearable":
        """Create from a subgraph/JSON record."""
        return cls(
            id=int(parse_finite_number(data.get("id"))),
            name=str(data.get("name") or ""),
            rarity=data.get("rarity"),
            trait_modifiers=normalize_traits(data.get("traitModifiers")),
            rarity_score_modifier=int(parse_finite_number(data.get("rarityScoreModifier"))),
        )


def sum_wearable_core_mods(
    equipped_ids: Iterable[int],
    wearables_by_id: Mapping[int, Wearable],
) -> CoreTraitMods:
    """Sum editable-trait modifiers of every equipped wearable we know about."""
    total = CoreTraitMods()
    for wearable_id in equipped_ids:
        if not wearable_id:
            continue
        wearable = wearables_by_id.get(wearable_id)
        if wearable is None:
            logger.debug("Unknown wearable id %s ignored", wearable_id)
            continue
        total = total + wearable.core_mods
    return total


def sum_wearable_flat_brs(
    equipped_ids: Iterable[int],
    wearables_by_id: Mapping[int, Wearable],
) -> int:
    total = 0
    for wearable_id in equipped_ids:
        if not wearable_id:
            continue
        wearable = wearables_by_id.get(wearable_id)
        if wearable is not None:
            total += wearable.brs
    return total


class WearableDataError(ValueError):
    """Raised when a wearables file cannot be read or is malformed."""
    pass


def load_wearables(path: Path) -> Dict[int, Wearable]:
    """
    Load wearable records keyed by id.

    Accepts a JSON list of records or an object with a ``wearables`` list,
    each record in the shape read by Wearable.from_dict. Records with a
    non-positive id are skipped; a later record with the same id wins.

    Raises:
        WearableDataError: If the file cannot be read, is not a JSON list,
            or holds a record that is not an object.
    """
    wearables_path = Path(path)
    try:
        with wearables_path.open("r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise WearableDataError(f"Failed to read wearables {wearables_path}: {exc}") from exc

    if isinstance(raw, dict) and isinstance(raw.get("wearables"), list):
        raw = raw["wearables"]
    if not isinstance(raw, list):
        raise WearableDataError(f"Wearables file {wearables_path} must be a JSON list")

    wearables: Dict[int, Wearable] = {}
    for index, record in enumerate(raw):
        if not isinstance(record, Mapping):
            raise WearableDataError(f"Wearable record {index} in {wearables_path} is not an object")
        wearable = Wearable.from_dict(record)
        if wearable.id <= 0:
            logger.warning(f"Skipping wearable record {index} without a valid id")
            continue
        wearables[wearable.id] = wearable

    logger.info(f"Loaded {len(wearables)} wearables from {wearables_path}")
    return wearables
