"""
Respec (spirit point reallocation) simulator.

Spent skill points can be refunded 1:1 and redistributed over the four
editable traits. The simulator tracks the allocation for one gotchi and
projects the resulting base and modified traits. Wearable and set deltas
still apply on top of the simulated base.

No clamping happens here: over- or under-allocation past [0, 100] is shown
to the user as-is.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Sequence

from core.constants import EDITABLE_TRAIT_COUNT
from core.parsing import Number, normalize_traits, parse_finite_number

logger = logging.getLogger(__name__)


def _zero_allocation() -> List[int]:
    return [0] * EDITABLE_TRAIT_COUNT


def total_spirit_points(used_skill_points: Any = None) -> int:
    """
    Size of the refundable point pool.

    Returns 0 for missing or non-finite input, otherwise
    ``max(0, floor(used_skill_points))``.
    """
    if isinstance(used_skill_points, bool) or not isinstance(used_skill_points, (int, float)):
        return 0
    if not math.isfinite(used_skill_points):
        return 0
    return max(0, math.floor(used_skill_points))


def compute_wearable_delta(base_traits: Any, canonical_modified_traits: Any) -> List[Number]:
    """Per-trait difference between modified and base for the 4 editable traits."""
    base = normalize_traits(base_traits, EDITABLE_TRAIT_COUNT)
    modified = normalize_traits(canonical_modified_traits, EDITABLE_TRAIT_COUNT)
    return [m - b for b, m in zip(base, modified)]


@dataclass
class SimTraits:
    """Simulated traits for the 4 editable slots."""
    sim_base: List[Number]
    sim_modified: List[Number]
    # True when the post-wearable traits stood in for the contract base traits
    using_fallback: bool


def compute_sim_traits(
    base_traits: Any,
    allocated: Sequence[Any],
    respec_base_traits: Optional[Sequence[Any]] = None,
    wearable_delta: Optional[Sequence[Any]] = None,
    set_delta: Optional[Sequence[Any]] = None,
) -> SimTraits:
    """
    Project base and modified traits for an allocation.

    Args:
        base_traits: Gotchi base traits as known to the UI
        allocated: Points moved per editable trait (may be negative)
        respec_base_traits: Pre-wearable base traits from the contract;
            when omitted, base_traits is used and using_fallback is set
        wearable_delta: Equipped-wearable effect per editable trait
        set_delta: Active-set effect per editable trait
    """
    using_fallback = respec_base_traits is None
    base = normalize_traits(base_traits if using_fallback else respec_base_traits, EDITABLE_TRAIT_COUNT)
    alloc = normalize_traits(allocated, EDITABLE_TRAIT_COUNT)
    wearable = normalize_traits(wearable_delta, EDITABLE_TRAIT_COUNT)
    sets = normalize_traits(set_delta, EDITABLE_TRAIT_COUNT)

    sim_base = [b + a for b, a in zip(base, alloc)]
    sim_modified = [sb + w + s for sb, w, s in zip(sim_base, wearable, sets)]

    return SimTraits(sim_base=sim_base, sim_modified=sim_modified, using_fallback=using_fallback)


class RespecMode(Enum):
    IDLE = "idle"
    EDITING = "editing"


class RespecSimulator:
    """
    Respec state for one gotchi shown in one UI slot.

    States:
        IDLE -> EDITING via toggle_respec_mode() (allocation starts at zero)
        EDITING -> IDLE via toggle_respec_mode() (allocation is committed)

    Changing the identity key with sync_reset_key() drops everything, so
    state never leaks between gotchis sharing the slot.
    """

    def __init__(self, reset_key: str = "", used_skill_points: Any = None):
        """
        Args:
            reset_key: Identity of the gotchi instance being simulated
            used_skill_points: Already-spent skill points (the refundable pool)
        """
        self.reset_key = reset_key
        self.used_skill_points = used_skill_points
        self.is_respec_mode = False
        self.allocated: List[int] = _zero_allocation()
        self.committed_allocated: Optional[List[int]] = None

    @property
    def mode(self) -> RespecMode:
        return RespecMode.EDITING if self.is_respec_mode else RespecMode.IDLE

    @property
    def total_sp(self) -> int:
        return total_spirit_points(self.used_skill_points)

    @property
    def used(self) -> int:
        """Points currently moved, in either direction."""
        return sum(abs(v) for v in self.allocated)

    @property
    def sp_left(self) -> int:
        return max(0, self.total_sp - self.used)

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    def reset(self) -> None:
        self.is_respec_mode = False
        self.allocated = _zero_allocation()
        self.committed_allocated = None

    def sync_reset_key(self, reset_key: str) -> bool:
        """
        Reset all state when the gotchi identity changes.

        Returns:
            True if the key changed and state was reset
        """
        if reset_key == self.reset_key:
            return False
        logger.debug(f"Respec reset: {self.reset_key!r} -> {reset_key!r}")
        self.reset_key = reset_key
        self.reset()
        return True

    def toggle_respec_mode(self) -> RespecMode:
        """Enter edit mode, or commit the allocation and leave it."""
        if self.is_respec_mode:
            self.committed_allocated = list(self.allocated)
            self.is_respec_mode = False
        else:
            self.allocated = _zero_allocation()
            self.is_respec_mode = True
        return self.mode

    # ------------------------------------------------------------------
    # Point allocation
    # ------------------------------------------------------------------

    @staticmethod
    def _check_index(index: int) -> None:
        if not 0 <= index < EDITABLE_TRAIT_COUNT:
            raise IndexError(f"Trait index {index} out of range 0-{EDITABLE_TRAIT_COUNT - 1}")

    def can_increment(self, index: int) -> bool:
        self._check_index(index)
        return self.allocated[index] < 0 or self.sp_left > 0

    def can_decrement(self, index: int) -> bool:
        self._check_index(index)
        return self.allocated[index] > 0 or self.sp_left > 0

    def increment(self, index: int) -> bool:
        """Move one point into a trait. No-op (returns False) when not allowed."""
        if not self.can_increment(index):
            return False
        self.allocated[index] += 1
        return True

    def decrement(self, index: int) -> bool:
        """Move one point out of a trait. No-op (returns False) when not allowed."""
        if not self.can_decrement(index):
            return False
        self.allocated[index] -= 1
        return True

    def simulate(
        self,
        base_traits: Any,
        respec_base_traits: Optional[Sequence[Any]] = None,
        wearable_delta: Optional[Sequence[Any]] = None,
        set_delta: Optional[Sequence[Any]] = None,
    ) -> SimTraits:
        """Simulated traits for the current allocation."""
        return compute_sim_traits(
            base_traits,
            self.allocated,
            respec_base_traits=respec_base_traits,
            wearable_delta=wearable_delta,
            set_delta=set_delta,
        )


def coerce_allocation(values: Any) -> List[int]:
    """Parse an allocation vector from loosely typed input."""
    return [int(parse_finite_number(v)) for v in normalize_traits(values, EDITABLE_TRAIT_COUNT)]
