"""
FileStore - Flat directory storage for originals and previews.

The directory listing is the only index: files are written once under a
freshly generated name and never rewritten.
"""

import logging
import os
import time
import uuid
from typing import List, Optional, Tuple

from .exceptions import ListError, StorageWriteError
from .models import PREVIEW_EXTENSION, PreviewFile, StoredFile

TIME_FORMAT = "%Y-%m-%dT%H-%M-%S"


class FileStore:
    """
    A single flat directory of generated-name files.
    """

    # Attempts at finding an unused name before giving up
    MAX_NAME_ATTEMPTS = 5

    def __init__(
        self,
        root: str,
        url_prefix: str,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the store.

        Args:
            root: Directory holding the files
            url_prefix: URL path the directory is served under (e.g. '/files')
            logger: Optional logger instance
        """
        self.root = root
        self.url_prefix = url_prefix.rstrip('/')
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def new_identifier() -> str:
        """
        Generate a fresh name stem.

        The stem is a local timestamp with nanosecond precision followed by
        a short random suffix, so lexical order follows creation order.
        """
        now = time.time_ns()
        seconds, nanos = divmod(now, 1_000_000_000)
        stamp = time.strftime(TIME_FORMAT, time.localtime(seconds))
        return f"{stamp}.{nanos:09d}-{uuid.uuid4().hex[:8]}"

    def path_for(self, name: str) -> str:
        return os.path.join(self.root, name)

    def url_for(self, name: str) -> str:
        return f"{self.url_prefix}/{name}"

    def write(self, data: bytes, extension: str) -> Tuple[str, str]:
        """
        Write data under a new name.

        Args:
            data: File content
            extension: Extension appended to the generated stem

        Returns:
            Tuple of (identifier, path)
        """
        for _ in range(self.MAX_NAME_ATTEMPTS):
            identifier = self.new_identifier()
            path = self.path_for(identifier + extension)
            try:
                with open(path, 'xb') as f:
                    f.write(data)
            except FileExistsError:
                self.logger.debug(f"Name already taken, retrying: {path}")
                continue
            except OSError as e:
                self.logger.error(f"Could not write {path}: {e}")
                raise StorageWriteError(f"could not write file: {e}", path=path) from e
            self.logger.debug(f"Wrote {len(data)} bytes to {path}")
            return identifier, path

        raise StorageWriteError(f"could not find a free file name in {self.root}", path=self.root)

    def entries(self) -> List[os.DirEntry]:
        """
        List the regular, non-hidden files in the directory.

        Raises:
            ListError: If the directory cannot be read
        """
        try:
            with os.scandir(self.root) as it:
                return [
                    entry for entry in it
                    if not entry.name.startswith('.') and entry.is_file()
                ]
        except OSError as e:
            self.logger.error(f"Could not list {self.root}: {e}")
            raise ListError(f"could not list files: {e}", path=self.root) from e


class OriginalStore(FileStore):
    """Directory of uploaded files, kept byte for byte."""

    def __init__(self, root: str, logger: Optional[logging.Logger] = None):
        super().__init__(root, '/files', logger)

    def save(self, data: bytes, extension: str) -> StoredFile:
        identifier, path = self.write(data, extension)
        return StoredFile(
            identifier=identifier,
            extension=extension,
            size=len(data),
            path=path,
        )


class PreviewCache(FileStore):
    """Directory of derived previews, always JPEG encoded."""

    def __init__(self, root: str, logger: Optional[logging.Logger] = None):
        super().__init__(root, '/imagecache', logger)

    def save(self, data: bytes, width: int, height: int) -> PreviewFile:
        identifier, path = self.write(data, PREVIEW_EXTENSION)
        return PreviewFile(
            identifier=identifier,
            width=width,
            height=height,
            size=len(data),
            path=path,
        )
