"""
Records describing stored originals, derived previews and gallery pages.
"""

from dataclasses import dataclass, field, asdict
from typing import List

PREVIEW_EXTENSION = '.jpg'


@dataclass
class StoredFile:
    """
    An uploaded original as written to the original store.

    Attributes:
        identifier: Generated name stem (timestamp based)
        extension: Extension taken verbatim from the client filename
        size: Size in bytes
        path: Absolute location on disk
    """
    identifier: str
    extension: str
    size: int
    path: str

    @property
    def filename(self) -> str:
        return self.identifier + self.extension

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class PreviewFile:
    """
    A resized copy of an original, written to the preview cache.

    Attributes:
        identifier: Generated name stem, independent of the source original
        width: Width in pixels
        height: Height in pixels
        size: Encoded size in bytes
        path: Absolute location on disk
    """
    identifier: str
    width: int
    height: int
    size: int
    path: str

    @property
    def filename(self) -> str:
        return self.identifier + PREVIEW_EXTENSION

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class CatalogPage:
    """
    Request-scoped split of preview URLs into gallery columns.

    Attributes:
        columns: Ordered groups of URLs, newest first overall
        total: Number of URLs across all columns
        truncated: True when previews beyond the listing cap were dropped
    """
    columns: List[List[str]] = field(default_factory=lambda: [[], [], []])
    total: int = 0
    truncated: bool = False

    @property
    def first(self) -> List[str]:
        return self.columns[0]

    @property
    def middle(self) -> List[str]:
        return self.columns[1]

    @property
    def last(self) -> List[str]:
        return self.columns[2]

    @property
    def urls(self) -> List[str]:
        """All URLs in listing order."""
        return [url for column in self.columns for url in column]

    def to_dict(self) -> dict:
        return asdict(self)
