"""
ArchiveExporter - Bundles every original into a single zip download.
"""

import logging
import os
import shutil
import tempfile
import zipfile
from typing import Callable, Iterator, Optional

from .exceptions import ArchiveError

ProgressCallback = Callable[[str], None]

ARCHIVE_NAME = 'files.zip'


class ArchiveStream:
    """
    A finished archive on disk, read back in chunks.

    Owns the scratch directory the archive was built in and removes it on
    close(). WSGI servers call close() on response bodies once the response
    is over, whether it completed or not.
    """

    chunk_size = 64 * 1024
    content_type = 'application/zip'

    def __init__(
        self,
        path: str,
        scratch_dir: str,
        entry_count: int,
        filename: str = ARCHIVE_NAME,
        logger: Optional[logging.Logger] = None
    ):
        self.path = path
        self.scratch_dir = scratch_dir
        self.entry_count = entry_count
        self.filename = filename
        self.size = os.path.getsize(path)
        self.logger = logger or logging.getLogger(__name__)
        self._closed = False

    def __iter__(self) -> Iterator[bytes]:
        try:
            with open(self.path, 'rb') as body:
                for chunk in iter(lambda: body.read(self.chunk_size), b''):
                    yield chunk
        finally:
            self.close()

    def close(self) -> None:
        """Remove the scratch directory. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        shutil.rmtree(self.scratch_dir, ignore_errors=True)
        self.logger.debug(f"Removed scratch directory {self.scratch_dir}")

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> 'ArchiveStream':
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class ArchiveExporter:
    """
    Writes the original store into a deflate-compressed zip archive.

    The store is only ever read.
    """

    def __init__(
        self,
        storage_path: str,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize exporter.

        Args:
            storage_path: Directory holding the originals
            logger: Optional logger instance
        """
        self.storage_path = storage_path
        self.logger = logger or logging.getLogger(__name__)

    def build(
        self,
        destination: str,
        progress: Optional[ProgressCallback] = None
    ) -> int:
        """
        Write the archive to a file.

        Args:
            destination: Path of the zip file to create
            progress: Optional callback invoked with each entry name

        Returns:
            Number of entries written

        Raises:
            ArchiveError: If the store cannot be read or the archive written
        """
        if not os.path.isdir(self.storage_path):
            self.logger.error(f"Storage path missing: {self.storage_path}")
            raise ArchiveError(
                f"could not archive files: no such directory {self.storage_path}",
                path=self.storage_path,
                status_code=404,
            )

        count = 0
        try:
            with zipfile.ZipFile(destination, 'w', compression=zipfile.ZIP_DEFLATED) as archive:
                for file_path, arcname in self._walk():
                    archive.write(file_path, arcname)
                    count += 1
                    if progress:
                        self._report(progress, arcname)
        except (OSError, zipfile.BadZipFile, zipfile.LargeZipFile) as e:
            self.logger.error(f"Error archiving {self.storage_path}: {e}")
            raise ArchiveError(f"could not archive files: {e}", path=self.storage_path) from e

        self.logger.info(f"Archived {count} files from {self.storage_path}")
        return count

    def export(self, progress: Optional[ProgressCallback] = None) -> ArchiveStream:
        """
        Build the archive in a scratch directory and return it for streaming.

        The archive is complete before the stream is returned. On failure
        the scratch directory is removed before the error propagates.
        """
        try:
            scratch_dir = tempfile.mkdtemp(prefix='photodrop-zip-')
        except OSError as e:
            self.logger.error(f"Could not create scratch directory: {e}")
            raise ArchiveError(f"could not create scratch directory: {e}") from e

        destination = os.path.join(scratch_dir, ARCHIVE_NAME)
        try:
            count = self.build(destination, progress)
            return ArchiveStream(destination, scratch_dir, count, logger=self.logger)
        except BaseException:
            shutil.rmtree(scratch_dir, ignore_errors=True)
            raise

    def _report(self, progress: ProgressCallback, arcname: str) -> None:
        """Call the progress callback; its failures never affect the archive."""
        try:
            progress(arcname)
        except Exception as e:
            self.logger.warning(f"Progress callback failed for {arcname}: {e}")

    def _walk(self):
        """Yield (path, archive name) for every regular file, in sorted order."""
        for dirpath, dirnames, filenames in os.walk(self.storage_path, onerror=self._raise):
            dirnames.sort()
            for name in sorted(filenames):
                file_path = os.path.join(dirpath, name)
                if not os.path.isfile(file_path):
                    continue
                arcname = os.path.relpath(file_path, self.storage_path)
                yield file_path, arcname.replace(os.sep, '/')

    @staticmethod
    def _raise(error: OSError) -> None:
        raise error
