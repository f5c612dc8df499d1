"""
photodrop - a small photo upload server.

Uploads are stored unchanged in an originals directory. JPEG uploads also
get a fixed-width preview in an image cache directory, which backs a
newest-first gallery page. All originals can be downloaded as one zip.

The two directories are the only state; nothing is indexed in memory.
"""

__version__ = "1.0.0"

from .config import ServerConfig
from .exceptions import (
    PhotodropError,
    UploadInputError,
    UploadTooLargeError,
    StorageWriteError,
    DecodeError,
    EncodeError,
    ListError,
    ArchiveError,
)
from .models import StoredFile, PreviewFile, CatalogPage
from .file_store import FileStore, OriginalStore, PreviewCache
from .preview_generator import PreviewGenerator
from .catalog import CatalogLister, partition
from .archive_exporter import ArchiveExporter, ArchiveStream
from .archive_progress import ArchiveProgress
from .ingestion import Ingestor, IngestResult

__all__ = [
    "ServerConfig",
    "PhotodropError",
    "UploadInputError",
    "UploadTooLargeError",
    "StorageWriteError",
    "DecodeError",
    "EncodeError",
    "ListError",
    "ArchiveError",
    "StoredFile",
    "PreviewFile",
    "CatalogPage",
    "FileStore",
    "OriginalStore",
    "PreviewCache",
    "PreviewGenerator",
    "CatalogLister",
    "partition",
    "ArchiveExporter",
    "ArchiveStream",
    "ArchiveProgress",
    "Ingestor",
    "IngestResult",
]
