"""
Application-wide constants for Gotchi Closet.

Centralizes magic numbers and configuration values to improve maintainability.
"""

from typing import Dict, List, Tuple

# =============================================================================
# Trait Layout
# =============================================================================

# Total numeric traits on a gotchi (4 editable + 2 cosmetic)
TRAIT_COUNT = 6

# Traits that wearables, sets and respec can modify (NRG, AGG, SPK, BRN)
EDITABLE_TRAIT_COUNT = 4

# Cosmetic eye traits - never modified by sets or respec
EYE_SHAPE_INDEX = 4
EYE_COLOR_INDEX = 5

# Short labels in on-chain order
TRAIT_KEYS: Tuple[str, ...] = ("nrg", "agg", "spk", "brn")

TRAIT_LABELS: Dict[str, str] = {
    "nrg": "NRG",
    "agg": "AGG",
    "spk": "SPK",
    "brn": "BRN",
}

TRAIT_NAMES: List[str] = [
    "Energy",
    "Aggression",
    "Spookiness",
    "Brain Size",
    "Eye Shape",
    "Eye Color",
]


# =============================================================================
# Rarity Score
# =============================================================================

# Traits below the midpoint score 100 - value, the rest value + 1
BRS_MIDPOINT = 50

# Valid range for a trait after set modifiers are applied
TRAIT_MIN = 0
TRAIT_MAX = 100

# Flat BRS granted per wearable rarity tier
WEARABLE_RARITY_BRS: Dict[str, int] = {
    "common": 1,
    "uncommon": 2,
    "rare": 5,
    "legendary": 10,
    "mythical": 20,
    "godlike": 50,
}

# (blocks elapsed, BRS) - Fibonacci-spaced age milestones
AGE_BRS_MILESTONES: List[Tuple[int, int]] = [
    (1_000_000, 1),
    (2_000_000, 2),
    (3_000_000, 3),
    (5_000_000, 4),
    (8_000_000, 5),
    (13_000_000, 6),
    (21_000_000, 7),
    (34_000_000, 8),
    (55_000_000, 9),
    (89_000_000, 10),
]


# =============================================================================
# Rankings
# =============================================================================

# Default number of sets shown by the best-set ranker
BEST_SETS_DEFAULT_LIMIT = 10

# Guardrails for the configured limit
BEST_SETS_MIN_LIMIT = 1
BEST_SETS_MAX_LIMIT = 100

# Separator used in ranked set bonus labels
BONUS_LABEL_SEPARATOR = " · "


# =============================================================================
# Network Timeouts (seconds)
# =============================================================================

# Default timeout for API requests (general use)
API_TIMEOUT_DEFAULT = 10

# Guardrails for configured timeouts
API_TIMEOUT_MIN = 1
API_TIMEOUT_MAX = 120


# =============================================================================
# Gotchi Closet API
# =============================================================================

GOTCHI_API_BASE_URL = "https://gotchicloset.xyz"

# POST {"tokenId": "..."} -> {"baseTraits": [...]}
BASE_TRAITS_ENDPOINT = "/api/gotchis/base-traits"

USER_AGENT = "Gotchi-Closet/1.0 (rarity-engine)"


# =============================================================================
# Logging
# =============================================================================

LOG_FILE_NAME = "app.log"
LOG_MAX_BYTES = 1_000_000
LOG_BACKUP_COUNT = 3

LOG_FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"
LOG_CONSOLE_FORMAT = "[%(levelname)s] %(name)s - %(message)s"

# Third-party loggers held at WARNING unless debug logging is on
NOISY_LOGGERS: Tuple[str, ...] = ("urllib3", "requests")
