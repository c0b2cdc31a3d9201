"""
Configuration management for Gotchi Closet.
Handles user settings and persistence.
"""

import json
import logging
import copy
from pathlib import Path
from typing import Optional, Dict, Any, Tuple

from core.constants import (
    API_TIMEOUT_DEFAULT,
    API_TIMEOUT_MAX,
    API_TIMEOUT_MIN,
    BEST_SETS_DEFAULT_LIMIT,
    BEST_SETS_MAX_LIMIT,
    BEST_SETS_MIN_LIMIT,
    GOTCHI_API_BASE_URL,
    USER_AGENT,
)

logger = logging.getLogger(__name__)


def get_config_dir() -> Path:
    """
    Get the application config directory.

    Returns:
        Path to the config directory (~/.gotchi_closet/)
    """
    config_dir = Path.home() / ".gotchi_closet"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def _clamp(value: Any, low: float, high: float, default: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return max(low, min(high, number))


class Config:
    """
    Application configuration with JSON persistence.

    The backing store is a JSON file on disk (user config file). Missing
    keys fall back to DEFAULT_CONFIG, section by section.
    """

    # NOTE: This structure is treated as immutable. Always use
    # _default_config_deepcopy() when you need a fresh copy of defaults.
    DEFAULT_CONFIG: Dict[str, Any] = {
        "api": {
            "base_url": GOTCHI_API_BASE_URL,
            "user_agent": USER_AGENT,
            # Explicit timeouts (seconds). Requests supports tuple (connect, read)
            # but we store them separately for clarity and compose as needed.
            "timeouts": {
                "connect": API_TIMEOUT_DEFAULT,
                "read": API_TIMEOUT_DEFAULT,
            },
        },
        "rankings": {
            # Number of sets shown by the best-set ranker (min 1, max 100)
            "default_limit": BEST_SETS_DEFAULT_LIMIT,
        },
        "catalog": {
            # Path to a wearable set catalog JSON ("" = bundled catalog)
            "path": "",
            # Fail on duplicate set ids instead of logging a warning
            "strict_ids": True,
        },
        "wearables": {
            # Wearable records JSON for breakdowns ("" = none known)
            "path": "",
        },
        "rarity": {
            # Count age BRS from blocks elapsed in breakdowns
            "age_brs_enabled": False,
        },
        "logging": {
            "debug": False,
        },
    }

    def __init__(self, config_file: Optional[Path] = None) -> None:
        """
        Initialize configuration.

        Args:
            config_file: Optional path to config JSON file. When omitted,
                         the default path under ~/.gotchi_closet/config.json
                         is used.
        """
        self.config_file: Path = self._resolve_config_path(config_file)
        self.config_file.parent.mkdir(parents=True, exist_ok=True)

        # Load data from disk (or defaults)
        self.data: Dict[str, Any] = self._load()
        logger.info(f"Config loaded from {self.config_file}")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _resolve_config_path(config_file: Optional[Path]) -> Path:
        """Resolve the config file path, applying the default location when None."""
        if config_file is not None:
            return Path(config_file)
        return get_config_dir() / "config.json"

    def _load(self) -> Dict[str, Any]:
        """Load configuration from JSON file, merging with defaults."""
        if not self.config_file.exists():
            logger.info("No config file found, using defaults")
            return self._default_config_deepcopy()

        try:
            with self.config_file.open("r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            logger.error(f"Failed to load config: {exc}. Using defaults.")
            return self._default_config_deepcopy()

        if not isinstance(raw, dict):
            logger.error("Config file is not a JSON object. Using defaults.")
            return self._default_config_deepcopy()

        merged = self._merge_with_defaults(raw)
        logger.info("Configuration loaded successfully")
        return merged

    @classmethod
    def _default_config_deepcopy(cls) -> Dict[str, Any]:
        """
        Return a deep copy of the DEFAULT_CONFIG to avoid state leakage
        between instances or tests.
        """
        return copy.deepcopy(cls.DEFAULT_CONFIG)

    def _merge_with_defaults(self, user_config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge user config with defaults to handle new keys.

        Nested dictionaries are merged so new keys under e.g. "api" appear
        without discarding user-provided values.
        """
        merged = self._default_config_deepcopy()

        for key, value in user_config.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key].update(value)
            else:
                merged[key] = value

        return merged

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self) -> None:
        """Persist the current configuration to the config file."""
        try:
            with self.config_file.open("w", encoding="utf-8") as f:
                json.dump(self.data, f, indent=2, ensure_ascii=False)
            logger.info("Configuration saved")
        except OSError as exc:
            logger.error(f"Failed to save config: {exc}")

    # ------------------------------------------------------------------
    # API
    # ------------------------------------------------------------------

    @property
    def api_base_url(self) -> str:
        api = self.data.get("api", {}) or {}
        return str(api.get("base_url") or GOTCHI_API_BASE_URL)

    @api_base_url.setter
    def api_base_url(self, value: str) -> None:
        self.data.setdefault("api", {})
        self.data["api"]["base_url"] = str(value)
        self.save()

    @property
    def api_user_agent(self) -> str:
        api = self.data.get("api", {}) or {}
        return str(api.get("user_agent") or USER_AGENT)

    def get_api_timeouts(self) -> Tuple[float, float]:
        """
        Get (connect, read) timeouts in seconds.

        GUARDRAIL: each value is clamped to 1..120 seconds.
        """
        api = self.data.get("api", {}) or {}
        timeouts = api.get("timeouts", {}) or {}
        connect = _clamp(timeouts.get("connect"), API_TIMEOUT_MIN, API_TIMEOUT_MAX, API_TIMEOUT_DEFAULT)
        read = _clamp(timeouts.get("read"), API_TIMEOUT_MIN, API_TIMEOUT_MAX, API_TIMEOUT_DEFAULT)
        return connect, read

    def set_api_timeouts(self, connect: float, read: float) -> None:
        self.data.setdefault("api", {})
        self.data["api"]["timeouts"] = {"connect": connect, "read": read}
        self.save()

    # ------------------------------------------------------------------
    # Rankings
    # ------------------------------------------------------------------

    @property
    def best_sets_limit(self) -> int:
        """Default best-set result count, clamped to 1..100."""
        rankings = self.data.get("rankings", {}) or {}
        return int(_clamp(
            rankings.get("default_limit"),
            BEST_SETS_MIN_LIMIT,
            BEST_SETS_MAX_LIMIT,
            BEST_SETS_DEFAULT_LIMIT,
        ))

    @best_sets_limit.setter
    def best_sets_limit(self, value: int) -> None:
        self.data.setdefault("rankings", {})
        self.data["rankings"]["default_limit"] = int(value)
        self.save()

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    @property
    def catalog_path(self) -> Optional[Path]:
        """Custom catalog file, or None for the bundled catalog."""
        catalog = self.data.get("catalog", {}) or {}
        path = str(catalog.get("path") or "").strip()
        return Path(path).expanduser() if path else None

    @catalog_path.setter
    def catalog_path(self, value: Optional[Path]) -> None:
        self.data.setdefault("catalog", {})
        self.data["catalog"]["path"] = str(value) if value else ""
        self.save()

    @property
    def catalog_strict_ids(self) -> bool:
        catalog = self.data.get("catalog", {}) or {}
        return bool(catalog.get("strict_ids", True))

    @property
    def wearables_path(self) -> Optional[Path]:
        """Wearable records file, or None when no wearables are configured."""
        wearables = self.data.get("wearables", {}) or {}
        path = str(wearables.get("path") or "").strip()
        return Path(path).expanduser() if path else None

    @wearables_path.setter
    def wearables_path(self, value: Optional[Path]) -> None:
        self.data.setdefault("wearables", {})
        self.data["wearables"]["path"] = str(value) if value else ""
        self.save()

    # ------------------------------------------------------------------
    # Rarity / logging
    # ------------------------------------------------------------------

    @property
    def age_brs_enabled(self) -> bool:
        rarity = self.data.get("rarity", {}) or {}
        return bool(rarity.get("age_brs_enabled", False))

    @age_brs_enabled.setter
    def age_brs_enabled(self, enabled: bool) -> None:
        self.data.setdefault("rarity", {})
        self.data["rarity"]["age_brs_enabled"] = bool(enabled)
        self.save()

    @property
    def debug_logging(self) -> bool:
        log_cfg = self.data.get("logging", {}) or {}
        return bool(log_cfg.get("debug", False))

    def reset_to_defaults(self) -> None:
        """Reset all settings to defaults and persist."""
        self.data = self._default_config_deepcopy()
        self.save()
        logger.info("Configuration reset to defaults")

    def __repr__(self) -> str:
        return f"Config(file={self.config_file}, api={self.api_base_url})"
