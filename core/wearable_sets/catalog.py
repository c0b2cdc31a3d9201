"""
Wearable set catalog loading and validation.

The catalog is a static JSON list of raw set records::

    {"id": "...", "name": "...", "wearableIds": [...],
     "traitBonuses": [nrg, agg, spk, brn, eyeShape, eyeColor],
     "setBonusBRS": 3}

Every record is validated once when the catalog is built. A malformed
catalog is a build-time defect, so errors propagate to whoever builds it.
"""
from __future__ import annotations

import json
import logging
import re
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from core.constants import EYE_COLOR_INDEX, EYE_SHAPE_INDEX, TRAIT_COUNT
from core.parsing import is_finite_number, parse_finite_number
from core.traits import CoreTraitMods
from core.wearable_sets.models import ParsedSet, SetDefinition

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent / "data" / "wearable_sets.json"

_SLUG_RE = re.compile(r"[^a-z0-9]+")


class ValidationError(ValueError):
    """Raised when a catalog entry (or the catalog as a whole) is malformed."""
    pass


def to_slug(text: str) -> str:
    """
    Build a URL-safe slug.

    Example:
        >>> to_slug("  Godlike Sergey! ")
        'godlike-sergey'
    """
    return _SLUG_RE.sub("-", str(text).strip().lower()).strip("-")


def _clean_name(raw: Mapping[str, Any]) -> str:
    name = str(raw.get("name") or "").strip()
    if name:
        return name
    return str(raw.get("id") or "").strip()


def _coerce_number(value: Any) -> Optional[Any]:
    """Accept real finite numbers and numeric strings, reject everything else."""
    if is_finite_number(value):
        return value
    if isinstance(value, str):
        sentinel = object()
        parsed = parse_finite_number(value, default=sentinel)  # type: ignore[arg-type]
        return None if parsed is sentinel else parsed
    return None


def _is_integral(number: Any) -> bool:
    return float(number).is_integer()


def parse_set_definition(raw: Mapping[str, Any]) -> ParsedSet:
    """
    Validate one raw catalog record.

    Args:
        raw: Raw set record from the catalog JSON

    Returns:
        ParsedSet with the cleaned name, flat BRS bonus and trait modifiers

    Raises:
        ValidationError: If the name/id is missing, traitBonuses is not a
            6-element list of integers with zero eye bonuses, or setBonusBRS
            is missing or not a finite integer.
    """
    if not isinstance(raw, Mapping):
        raise ValidationError("Invalid set definition: expected an object")

    name = _clean_name(raw)
    if not name:
        raise ValidationError("Invalid set definition: missing name/id")

    trait_bonuses = raw.get("traitBonuses")
    if not isinstance(trait_bonuses, (list, tuple)):
        raise ValidationError(f"Set {name}: traitBonuses missing")
    if len(trait_bonuses) != TRAIT_COUNT:
        raise ValidationError(f"Set {name}: traitBonuses length must be {TRAIT_COUNT}")

    bonuses = []
    for index, value in enumerate(trait_bonuses):
        number = _coerce_number(value)
        if number is None:
            raise ValidationError(f"Set {name}: traitBonuses[{index}] is not a number")
        if not _is_integral(number):
            raise ValidationError(f"Set {name}: traitBonuses[{index}] must be an integer")
        bonuses.append(int(number))

    if bonuses[EYE_SHAPE_INDEX] != 0 or bonuses[EYE_COLOR_INDEX] != 0:
        raise ValidationError(f"Set {name}: eye trait bonuses must be 0")

    # Unlike trait bonuses, numeric strings are not accepted here
    set_bonus = raw.get("setBonusBRS")
    if not is_finite_number(set_bonus):
        raise ValidationError(f"Set {name}: setBonusBRS missing or invalid")
    if not _is_integral(set_bonus):
        raise ValidationError(f"Set {name}: setBonusBRS must be an integer")

    return ParsedSet(
        name=name,
        set_bonus_brs=int(set_bonus),
        trait_modifiers=CoreTraitMods.from_list(bonuses),
    )


def _parse_wearable_ids(raw_ids: Any) -> Tuple[int, ...]:
    """Coerce ids to ints, dropping non-positive ones and duplicates."""
    if not isinstance(raw_ids, (list, tuple)):
        return ()
    seen: Dict[int, None] = {}
    for raw_id in raw_ids:
        wearable_id = parse_finite_number(raw_id)
        if isinstance(wearable_id, int) and wearable_id > 0:
            seen.setdefault(wearable_id, None)
    return tuple(seen)


class SetCatalog:
    """
    Immutable collection of validated set definitions.

    Safe for unsynchronized concurrent reads once built.
    """

    def __init__(self, sets: Iterable[SetDefinition]):
        self._sets: Tuple[SetDefinition, ...] = tuple(sets)
        self._by_id: Dict[str, SetDefinition] = {}
        for set_def in self._sets:
            # First definition wins when ids collide (non-strict catalogs only)
            self._by_id.setdefault(set_def.id, set_def)

    def __len__(self) -> int:
        return len(self._sets)

    def __iter__(self) -> Iterator[SetDefinition]:
        return iter(self._sets)

    def __contains__(self, set_id: object) -> bool:
        return set_id in self._by_id

    @property
    def sets(self) -> Tuple[SetDefinition, ...]:
        return self._sets

    def get(self, set_id: str) -> Optional[SetDefinition]:
        """Look up a set by slug id."""
        return self._by_id.get(set_id)

    def sets_containing(self, wearable_id: int) -> List[SetDefinition]:
        """All sets that require the given wearable."""
        return [s for s in self._sets if wearable_id in s.required_wearable_ids]


def build_catalog(raw_entries: Iterable[Mapping[str, Any]], strict_ids: bool = True) -> SetCatalog:
    """
    Validate raw entries and build the catalog.

    Args:
        raw_entries: Raw set records
        strict_ids: Fail when two names slug to the same id. When False the
            collision is logged and both entries are kept.

    Raises:
        ValidationError: On the first malformed entry, or on an id collision
            in strict mode.
    """
    sets: List[SetDefinition] = []
    seen_ids: Dict[str, str] = {}

    for raw in raw_entries:
        parsed = parse_set_definition(raw)
        set_id = to_slug(parsed.name)

        if set_id in seen_ids:
            message = (
                f"Duplicate set id '{set_id}' "
                f"(from '{seen_ids[set_id]}' and '{parsed.name}')"
            )
            if strict_ids:
                raise ValidationError(message)
            logger.warning(message)
        else:
            seen_ids[set_id] = parsed.name

        sets.append(SetDefinition(
            id=set_id,
            name=parsed.name,
            required_wearable_ids=_parse_wearable_ids(raw.get("wearableIds")),
            set_bonus_brs=parsed.set_bonus_brs,
            trait_modifiers=parsed.trait_modifiers,
        ))

    logger.debug("Built set catalog with %d sets", len(sets))
    return SetCatalog(sets)


def load_catalog(path: Optional[Path] = None, strict_ids: bool = True) -> SetCatalog:
    """
    Load and validate a catalog JSON file.

    Args:
        path: Catalog file. Defaults to the bundled catalog.
        strict_ids: See build_catalog.

    Raises:
        ValidationError: If the file cannot be read, is not a JSON list, or
            contains a malformed entry.
    """
    catalog_path = Path(path) if path is not None else DEFAULT_CATALOG_PATH

    try:
        with catalog_path.open("r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise ValidationError(f"Failed to read set catalog {catalog_path}: {exc}") from exc

    if isinstance(raw, dict) and isinstance(raw.get("sets"), list):
        raw = raw["sets"]
    if not isinstance(raw, list):
        raise ValidationError(f"Set catalog {catalog_path} must be a JSON list")

    catalog = build_catalog(raw, strict_ids=strict_ids)
    logger.info(f"Loaded {len(catalog)} wearable sets from {catalog_path}")
    return catalog


_default_catalog: Optional[SetCatalog] = None
_default_catalog_lock = threading.Lock()


def get_default_catalog() -> SetCatalog:
    """Get the bundled catalog, building it on first use."""
    global _default_catalog
    if _default_catalog is None:
        with _default_catalog_lock:
            if _default_catalog is None:
                _default_catalog = load_catalog()
    return _default_catalog
