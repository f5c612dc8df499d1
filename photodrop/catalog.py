"""
CatalogLister - Builds the gallery listing from the preview cache directory.
"""

import logging
from typing import List, Optional, Sequence

from .exceptions import ListError
from .file_store import PreviewCache
from .models import CatalogPage


def partition(items: Sequence[str], columns: int = 3) -> List[List[str]]:
    """
    Split items into contiguous, roughly equal groups, preserving order.

    With fewer items than columns every item goes into the first group.
    Leftover items from an uneven split go to the earlier groups, so
    10 items become groups of 4, 3 and 3.
    """
    items = list(items)
    if len(items) < columns:
        return [items] + [[] for _ in range(columns - 1)]

    base, extra = divmod(len(items), columns)
    groups = []
    start = 0
    for index in range(columns):
        end = start + base + (1 if index < extra else 0)
        groups.append(items[start:end])
        start = end
    return groups


class CatalogLister:
    """
    Lists previews newest first and lays them out in gallery columns.

    Nothing is cached between calls; every listing reads the directory.
    """

    def __init__(
        self,
        preview_cache: PreviewCache,
        limit: int = 100,
        columns: int = 3,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the lister.

        Args:
            preview_cache: Store holding the derived previews
            limit: Maximum number of previews returned
            columns: Number of gallery columns
            logger: Optional logger instance
        """
        self.preview_cache = preview_cache
        self.limit = limit
        self.columns = columns
        self.logger = logger or logging.getLogger(__name__)

    def list_urls(self) -> List[str]:
        """
        Preview URLs, most recently modified first, capped at the limit.

        Raises:
            ListError: If the preview cache directory cannot be read
        """
        urls, _ = self._list()
        return urls

    def page(self) -> CatalogPage:
        """Current listing split into gallery columns."""
        urls, truncated = self._list()
        return CatalogPage(
            columns=partition(urls, self.columns),
            total=len(urls),
            truncated=truncated,
        )

    def _list(self):
        entries = self.preview_cache.entries()
        # sorted() is stable, so equal times keep directory order
        try:
            entries = sorted(entries, key=lambda e: e.stat().st_mtime_ns, reverse=True)
        except OSError as e:
            self.logger.error(f"Could not stat previews in {self.preview_cache.root}: {e}")
            raise ListError(f"could not list files: {e}", path=self.preview_cache.root) from e

        truncated = len(entries) > self.limit
        if truncated:
            self.logger.debug(
                f"Listing capped at {self.limit} of {len(entries)} previews"
            )
            entries = entries[:self.limit]

        return [self.preview_cache.url_for(e.name) for e in entries], truncated
