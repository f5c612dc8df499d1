"""
ServerConfig - Runtime configuration for the photodrop server.
"""

import argparse
import os
from dataclasses import dataclass, asdict
from typing import List

DEFAULT_PREVIEW_WIDTH = 512
DEFAULT_PREVIEW_QUALITY = 85
DEFAULT_CATALOG_LIMIT = 100
DEFAULT_MAX_UPLOAD_BYTES = 30 * 1024 * 1024


@dataclass
class ServerConfig:
    """
    Configuration built once at startup and handed to every component.

    Attributes:
        storage_path: Directory holding uploaded originals
        image_cache_path: Directory holding derived previews
        port: Port to serve on
        host: Interface to bind
        preview_width: Target width of derived previews in pixels
        preview_quality: JPEG quality of derived previews
        catalog_limit: Maximum number of previews listed on the gallery page
        max_upload_bytes: Largest accepted upload request body
    """
    storage_path: str
    image_cache_path: str
    port: int
    host: str = '0.0.0.0'
    preview_width: int = DEFAULT_PREVIEW_WIDTH
    preview_quality: int = DEFAULT_PREVIEW_QUALITY
    catalog_limit: int = DEFAULT_CATALOG_LIMIT
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES

    def validate(self) -> List[str]:
        """
        Check the configuration.

        Returns:
            List of problems; empty when the configuration is usable
        """
        errors = []

        if not self.storage_path:
            errors.append("Storage path is required")
        elif not os.path.isdir(self.storage_path):
            errors.append(f"Storage path is not a directory: {self.storage_path}")

        if not self.image_cache_path:
            errors.append("Image cache path is required")
        elif not os.path.isdir(self.image_cache_path):
            errors.append(f"Image cache path is not a directory: {self.image_cache_path}")

        if not 0 < self.port < 65536:
            errors.append(f"Port out of range: {self.port}")
        if self.preview_width <= 0:
            errors.append(f"Preview width must be positive: {self.preview_width}")
        if not 1 <= self.preview_quality <= 95:
            errors.append(f"Preview quality must be between 1 and 95: {self.preview_quality}")
        if self.catalog_limit <= 0:
            errors.append(f"Catalog limit must be positive: {self.catalog_limit}")
        if self.max_upload_bytes <= 0:
            errors.append(f"Upload cap must be positive: {self.max_upload_bytes}")

        return errors

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> 'ServerConfig':
        """Create from parsed command line arguments."""
        config = cls(
            storage_path=args.storage_path,
            image_cache_path=args.image_cache_path,
            port=args.port,
        )
        if getattr(args, 'host', None) is not None:
            config.host = args.host
        if getattr(args, 'preview_width', None) is not None:
            config.preview_width = args.preview_width
        if getattr(args, 'catalog_limit', None) is not None:
            config.catalog_limit = args.catalog_limit
        if getattr(args, 'max_upload_mb', None) is not None:
            config.max_upload_bytes = args.max_upload_mb * 1024 * 1024
        return config
