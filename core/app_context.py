# core/app_context.py
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Dict, Optional

from core.config import Config
from core.wearable_sets.calculator import BestSetCalculator
from core.wearable_sets.catalog import SetCatalog, get_default_catalog, load_catalog
from core.wearables import Wearable, load_wearables
from data_sources.gotchi_api import GotchiAPIClient, RespecBaseTraitsCache

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """
    Aggregates core services for one session.

    Keeps wiring in one place so callers only orchestrate:
    - config: user settings
    - catalog: validated wearable set catalog (read-only)
    - calculator: best-set ranker over the catalog
    - respec_cache: contract base traits fetched this session
    - gotchi_api: HTTP client using respec_cache
    - wearables_by_id: known wearable records for BRS breakdowns

    Call close() when the session ends to release resources.
    """
    config: Config
    catalog: SetCatalog
    calculator: BestSetCalculator
    respec_cache: RespecBaseTraitsCache
    gotchi_api: GotchiAPIClient
    wearables_by_id: Dict[int, Wearable] = field(default_factory=dict)

    def close(self) -> None:
        """Close the HTTP session and drop session caches."""
        logger.info("Closing AppContext resources...")
        self.gotchi_api.close()
        self.respec_cache.clear()
        logger.info("AppContext resources closed")

    def __enter__(self) -> "AppContext":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def create_app_context(config: Optional[Config] = None) -> AppContext:
    """
    Build the session services from configuration.

    Raises:
        ValidationError: If the configured set catalog is malformed
        WearableDataError: If the configured wearables file is malformed
    """
    config = config if config is not None else Config()

    catalog_path = config.catalog_path
    if catalog_path is None and config.catalog_strict_ids:
        catalog = get_default_catalog()
    else:
        catalog = load_catalog(catalog_path, strict_ids=config.catalog_strict_ids)

    wearables_path = config.wearables_path
    wearables_by_id = load_wearables(wearables_path) if wearables_path is not None else {}

    calculator = BestSetCalculator(catalog, default_limit=config.best_sets_limit)

    respec_cache = RespecBaseTraitsCache()
    gotchi_api = GotchiAPIClient(
        base_url=config.api_base_url,
        cache=respec_cache,
        timeout=config.get_api_timeouts(),
        user_agent=config.api_user_agent,
    )

    logger.info(
        "AppContext ready: %d sets, %d wearables, API %s",
        len(catalog),
        len(wearables_by_id),
        config.api_base_url,
    )
    return AppContext(
        config=config,
        catalog=catalog,
        calculator=calculator,
        respec_cache=respec_cache,
        gotchi_api=gotchi_api,
        wearables_by_id=wearables_by_id,
    )
