"""
Ingestor - Stores an upload and derives its gallery preview.
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional

from .exceptions import DecodeError, EncodeError, StorageWriteError, UploadInputError
from .file_store import OriginalStore, PreviewCache
from .models import PreviewFile, StoredFile
from .preview_generator import PreviewGenerator


def upload_extension(filename: str) -> str:
    """
    Extension of a client filename, kept verbatim with its leading dot.

    Only the last path component counts, with either slash as separator.
    A name that is all extension ('.jpg') keeps it. Empty when there is no dot.
    """
    name = filename.replace('\\', '/').rsplit('/', 1)[-1]
    dot = name.rfind('.')
    if dot < 0:
        return ''
    return name[dot:]


@dataclass
class IngestResult:
    """
    Outcome of a successful upload.

    Attributes:
        original: The stored original
        preview: The derived preview, None when the upload is not a JPEG
    """
    original: StoredFile
    preview: Optional[PreviewFile] = None


class Ingestor:
    """
    Runs one upload through the store, derive and cache steps.

    The original is always written first. A failure after that point leaves
    the original in place without a preview.
    """

    def __init__(
        self,
        original_store: OriginalStore,
        preview_cache: PreviewCache,
        preview_generator: PreviewGenerator,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize ingestor.

        Args:
            original_store: Store receiving the uploaded bytes
            preview_cache: Store receiving derived previews
            preview_generator: Derivation engine for eligible uploads
            logger: Optional logger instance
        """
        self.originals = original_store
        self.previews = preview_cache
        self.preview_gen = preview_generator
        self.logger = logger or logging.getLogger(__name__)

    def ingest(self, filename: str, data: bytes) -> IngestResult:
        """
        Store an upload and, for JPEGs, its preview.

        Args:
            filename: Client supplied filename, used only for its extension
            data: Uploaded content

        Returns:
            IngestResult describing what was written

        Raises:
            UploadInputError: If no filename was supplied or it contains a NUL byte
            StorageWriteError: If the original or the preview could not be written
            DecodeError: If a JPEG-named upload could not be decoded
            EncodeError: If the preview could not be encoded
        """
        if not filename:
            raise UploadInputError("can not open form file: missing filename")
        if '\0' in filename:
            raise UploadInputError("can not open form file: filename contains a NUL byte")

        start = time.time()
        ext = upload_extension(filename)

        try:
            original = self.originals.save(data, ext)
        except StorageWriteError as e:
            self.logger.error(f"Upload of {filename} failed storing original at {e.path}: {e}")
            raise
        self.logger.info(f"Stored original {filename} as {original.filename} ({original.size} bytes)")

        result = IngestResult(original=original)
        if not self.preview_gen.is_eligible(ext):
            self.logger.debug(f"No preview for {original.filename}: not a JPEG extension")
            return result

        try:
            preview_data, (width, height) = self.preview_gen.derive(data)
        except (DecodeError, EncodeError) as e:
            self.logger.error(f"Preview derivation failed for {original.path}: {e}")
            raise

        try:
            result.preview = self.previews.save(preview_data, width, height)
        except StorageWriteError as e:
            self.logger.error(f"Could not store preview of {original.path} at {e.path}: {e}")
            raise

        self.logger.info(
            f"Stored preview {result.preview.filename} ({width}x{height}) "
            f"for {original.filename} in {time.time() - start:.2f}s"
        )
        return result
