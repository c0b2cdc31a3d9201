"""
Gotchi Closet API client.

Fetches a gotchi's pre-wearable ("respec") base traits from the
``/api/gotchis/base-traits`` endpoint, which reads them from the Aavegotchi
contract.
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Dict, List, Optional

import requests

from core.constants import (
    API_TIMEOUT_DEFAULT,
    BASE_TRAITS_ENDPOINT,
    GOTCHI_API_BASE_URL,
    TRAIT_COUNT,
)
from core.parsing import parse_finite_number
from data_sources.base_api import BaseAPIClient, TimeoutType, UpstreamError

logger = logging.getLogger(__name__)


class RespecBaseTraitsCache:
    """
    Session-lifetime cache of contract base traits, keyed by token id.

    Unbounded and never evicted. Thread-safe. Concurrent misses for the
    same token are not de-duplicated.
    """

    def __init__(self):
        self._entries: Dict[str, List[int]] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, token_id: str) -> Optional[List[int]]:
        """Cached traits (a copy), or None."""
        with self._lock:
            traits = self._entries.get(token_id)
            if traits is None:
                self.misses += 1
                return None
            self.hits += 1
            return list(traits)

    def set(self, token_id: str, traits: List[int]) -> None:
        with self._lock:
            self._entries[token_id] = list(traits)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
        logger.info("Respec base traits cache cleared")

    def stats(self) -> Dict[str, int]:
        """Return simple cache metrics for observability."""
        with self._lock:
            return {
                "hits": self.hits,
                "misses": self.misses,
                "size": len(self._entries),
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, token_id: object) -> bool:
        with self._lock:
            return token_id in self._entries


def normalize_token_id(token_id: Any) -> str:
    """
    Canonical string form of a token id.

    Raises:
        ValueError: If the id is not a non-negative integer
    """
    if isinstance(token_id, bool):
        raise ValueError(f"Invalid token id: {token_id!r}")
    text = str(token_id).strip() if token_id is not None else ""
    if not text.isdigit():
        raise ValueError(f"Invalid token id: {token_id!r}")
    return str(int(text))


class GotchiAPIClient(BaseAPIClient):
    """
    Client for the Gotchi Closet HTTP API.

    The respec cache is injected; it lives as long as its owner (normally
    the AppContext of one session).
    """

    def __init__(
        self,
        base_url: str = GOTCHI_API_BASE_URL,
        cache: Optional[RespecBaseTraitsCache] = None,
        timeout: TimeoutType = API_TIMEOUT_DEFAULT,
        user_agent: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            base_url: API host
            cache: Respec base traits cache (a private one when omitted)
            timeout: Request timeout in seconds, or (connect, read)
            user_agent: Custom User-Agent header
            session: Pre-built HTTP session
        """
        super().__init__(base_url=base_url, user_agent=user_agent, timeout=timeout, session=session)
        self.cache = cache if cache is not None else RespecBaseTraitsCache()

    def get_respec_base_traits(self, token_id: Any) -> List[int]:
        """
        Get a gotchi's base traits as stored on-chain (no wearables applied).

        Args:
            token_id: Gotchi token id

        Returns:
            6-element trait list

        Raises:
            ValueError: If token_id is not a non-negative integer
            UpstreamError: If the request fails or the response has fewer
                than 6 traits
        """
        key = normalize_token_id(token_id)

        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Respec base traits cache hit: {key}")
            return cached

        payload = self.post(BASE_TRAITS_ENDPOINT, data={"tokenId": key})

        raw_traits = payload.get("baseTraits") if isinstance(payload, dict) else None
        if not isinstance(raw_traits, list) or len(raw_traits) < TRAIT_COUNT:
            raise UpstreamError(f"Invalid base traits response for gotchi {key}")

        traits = [int(parse_finite_number(v)) for v in raw_traits[:TRAIT_COUNT]]
        self.cache.set(key, traits)
        logger.info(f"Fetched respec base traits for gotchi {key}: {traits}")
        return traits


def resolve_respec_base_traits(client: GotchiAPIClient, token_id: Any) -> Optional[List[int]]:
    """
    Fetch contract base traits, or None so the caller can fall back.

    Upstream failures are logged and mapped to None; the respec simulator
    then runs on current traits with using_fallback=True. Invalid token ids
    still raise ValueError.
    """
    try:
        return client.get_respec_base_traits(token_id)
    except UpstreamError as exc:
        logger.warning(
            "Respec base traits unavailable for gotchi %s; falling back to current traits. Error: %s",
            token_id,
            exc,
        )
        return None
