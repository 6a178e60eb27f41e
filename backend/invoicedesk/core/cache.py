import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class ViewCache:
    """
    In-process cache of rendered JSON views, keyed by path and then by the
    request's query string. Revalidating a path drops every variant of it.
    """

    def __init__(self) -> None:
        self._views: Dict[str, Dict[str, Any]] = {}

    def get(self, path: str, key: str = "") -> Optional[Any]:
        return self._views.get(path, {}).get(key)

    def set(self, path: str, key: str, value: Any) -> None:
        self._views.setdefault(path, {})[key] = value

    def is_cached(self, path: str, key: str = "") -> bool:
        return key in self._views.get(path, {})

    def revalidate_path(self, path: str) -> int:
        """Mark every cached variant of `path` stale. Returns how many were dropped."""
        dropped = self._views.pop(path, {})
        logger.debug("Revalidated %s (%d cached views dropped)", path, len(dropped))
        return len(dropped)
