"""
ArchiveProgress - Reports archive export progress.
"""

import logging
from typing import Optional


class ArchiveProgress:
    """
    Per-entry callback for the archive exporter.

    Purely informational: it never influences what ends up in the archive.
    """

    def __init__(
        self,
        show_files: bool = False,
        log_interval: int = 100,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize progress tracker.

        Args:
            show_files: If True, print each entry as it's archived
            log_interval: Log summary progress every N entries (when not show_files)
            logger: Optional logger instance
        """
        self.show_files = show_files
        self.log_interval = log_interval
        self.logger = logger or logging.getLogger(__name__)
        self.count = 0

    def on_entry_archived(self, arcname: str) -> None:
        """
        Called once for every file added to the archive.

        Args:
            arcname: Name of the entry inside the archive
        """
        self.count += 1

        if self.show_files:
            print(f"  [ADD] {arcname}")
        elif self.count % self.log_interval == 0:
            self.logger.info(f"Progress: {self.count} files archived")
        else:
            self.logger.debug(f"Archived: {arcname}")

    def __call__(self, arcname: str) -> None:
        """Allow use as callback."""
        self.on_entry_archived(arcname)
