"""View manager holding one explain view per open page."""

import asyncio
import logging
import time
from collections.abc import Callable

from infraexplain.config import settings
from infraexplain.ui.view import ExplainView

logger = logging.getLogger(__name__)


class ViewManager:
    """Manages explain views keyed by page.

    Stores views in memory. Views idle longer than the TTL are torn down,
    unless a request is still in flight for them.
    """

    def __init__(self, ttl_seconds: int | None = None) -> None:
        self.ttl_seconds = settings.view_ttl_seconds if ttl_seconds is None else ttl_seconds
        self._views: dict[str, ExplainView] = {}
        self._last_seen: dict[str, float] = {}
        self._lock = asyncio.Lock()

    async def get_or_create(
        self,
        view_id: str,
        factory: Callable[[], ExplainView],
    ) -> ExplainView:
        """Get the page's view, creating it if needed.

        Args:
            view_id: Page key, namespaced by the session cookie.
            factory: Builds a new view when the page has none.

        Returns:
            The page's ExplainView.
        """
        async with self._lock:
            self._cleanup_expired()
            view = self._views.get(view_id)
            if view is None:
                view = factory()
                self._views[view_id] = view
                logger.debug("Created explain view")
            self._last_seen[view_id] = time.time()
            return view

    async def discard(self, view_id: str) -> bool:
        """Tear down and forget the page's view.

        Args:
            view_id: Page key.

        Returns:
            True if a view was discarded, False if the page had none.
        """
        async with self._lock:
            view = self._views.pop(view_id, None)
            self._last_seen.pop(view_id, None)
        if view is None:
            return False
        view.teardown()
        return True

    async def discard_all(self) -> int:
        """Tear down every view.

        Returns:
            Number of views torn down.
        """
        async with self._lock:
            views = list(self._views.values())
            self._views.clear()
            self._last_seen.clear()
        for view in views:
            view.teardown()
        return len(views)

    def __len__(self) -> int:
        return len(self._views)

    def _cleanup_expired(self) -> None:
        """Tear down views idle longer than the TTL."""
        now = time.time()
        expired = [
            view_id
            for view_id, last_seen in self._last_seen.items()
            if now - last_seen > self.ttl_seconds and not self._views[view_id].state.is_loading
        ]
        for view_id in expired:
            self._last_seen.pop(view_id, None)
            if view := self._views.pop(view_id, None):
                view.teardown()
        if expired:
            logger.info(f"Tore down {len(expired)} idle views")


# Global view manager instance
view_manager = ViewManager()
