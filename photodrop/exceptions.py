"""
Error types raised by the photodrop components.

Each error carries the HTTP status used when it reaches the request
boundary in the server.
"""

from typing import Optional


class PhotodropError(Exception):
    """Base class for all photodrop errors."""
    status_code = 500

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.path = path


class UploadInputError(PhotodropError):
    """Raised when the upload form is missing its file field or is otherwise invalid."""
    status_code = 400


class UploadTooLargeError(UploadInputError):
    """Raised when the request body exceeds the configured upload cap."""
    status_code = 413


class StorageWriteError(PhotodropError):
    """Raised when an original or a preview cannot be written to disk."""
    pass


class DecodeError(PhotodropError):
    """Raised when uploaded bytes are not a decodable JPEG."""
    pass


class EncodeError(PhotodropError):
    """Raised when a resized preview cannot be encoded."""
    pass


class ListError(PhotodropError):
    """Raised when the preview cache directory cannot be enumerated."""
    pass


class ArchiveError(PhotodropError):
    """Raised when the originals archive cannot be built."""

    def __init__(self, message: str, path: Optional[str] = None, status_code: int = 500):
        super().__init__(message, path)
        self.status_code = status_code
