"""Response caches for HR catalog lookups"""
import time
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple
import logging

logger = logging.getLogger(__name__)


class ResponseCache(Protocol):
    """Anything with get/set/clear can back the Humand client"""

    def get(self, key: str) -> Optional[Any]: ...

    def set(self, key: str, value: Any) -> None: ...

    def clear(self) -> None: ...


class TTLCache:
    """In-memory cache whose entries expire after ttl_seconds"""

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, Tuple[float, Any]] = {}

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        stored_at, value = entry
        if self._clock() - stored_at > self.ttl_seconds:
            del self._entries[key]
            logger.debug(f"Cache entry expired: {key}")
            return None
        return value

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = (self._clock(), value)

    def clear(self) -> None:
        self._entries.clear()
        logger.info("Response cache cleared")

    def keys(self) -> List[str]:
        return list(self._entries.keys())


class NullCache:
    """Cache that never stores anything"""

    def get(self, key: str) -> Optional[Any]:
        return None

    def set(self, key: str, value: Any) -> None:
        pass

    def clear(self) -> None:
        pass

    def keys(self) -> List[str]:
        return []
