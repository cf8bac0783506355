"""Read operations for SpendSync: snapshot refresh and the merged list."""

import logging
from typing import Iterable, List, Optional, Set

from spendsync.protocols import RemoteStoreError
from spendsync.storage.merge import (
    DEFAULT_SORT,
    filter_by_category,
    merged_view,
    paginate,
    pending_ids,
    sort_expenses,
)
from spendsync.types import Expense, Page

logger = logging.getLogger(__name__)

# Upper bound on pages walked by a single refresh
MAX_REFRESH_PAGES = 1000


class ViewMixin:
    """Builds the list shown to the user."""

    def refresh_snapshot(self, force: bool = False) -> List[Expense]:
        """Fetch the full server list, or return the cached one.

        The snapshot is always the unfiltered list so it can answer any
        category offline. Offline, or when the fetch fails, the last cached
        snapshot is returned unchanged. A fresh cache is reused unless
        ``force`` is set.
        """
        cached = self._snapshot
        if not self.is_online():
            logger.debug("Offline: using cached snapshot")
            return cached.items
        if not force and not cached.stale:
            return cached.items

        items: List[Expense] = []
        page_size = self.settings.page_size
        try:
            for page in range(1, MAX_REFRESH_PAGES + 1):
                result = self._remote.list(page, page_size)
                items.extend(result.items)
                if not result.items or len(items) >= result.total:
                    break
        except RemoteStoreError as e:
            logger.warning(f"Snapshot refresh failed (continuing with cached data): {e}")
            return cached.items

        cached.store(items)
        return items

    def merged_view(
        self, snapshot: Optional[Iterable[Expense]] = None
    ) -> List[Expense]:
        """Merge ``snapshot`` (default: the cached one) with the offline queue."""
        if snapshot is None:
            snapshot = self._snapshot.items
        return merged_view(snapshot, self._queue.actions)

    def list_expenses(
        self,
        category: Optional[str] = None,
        sort: str = DEFAULT_SORT,
        page: int = 1,
        page_size: Optional[int] = None,
    ) -> Page:
        """Filtered, sorted and windowed merged view.

        Args:
            category: Category filter; None or "All" for everything.
            sort: One of ``spendsync.storage.SORT_KEYS``.
            page: Pages 1..page are returned cumulatively ("load more").
            page_size: Defaults to the configured page size.
        """
        snapshot = self.refresh_snapshot()
        server = sort_expenses(filter_by_category(snapshot, category), sort)
        merged = filter_by_category(self.merged_view(server), category)
        return paginate(merged, page, page_size or self.settings.page_size)

    def pending_ids(self) -> Set[str]:
        """Ids shown with an offline-pending marker."""
        return pending_ids(self._queue.actions)
