"""
PreviewGenerator - Derives fixed-width gallery previews from JPEG uploads.
"""

import io
import logging
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from .exceptions import DecodeError, EncodeError

ELIGIBLE_MARKERS = ('jpg', 'jpeg')


class PreviewGenerator:
    """
    Resizes JPEG images to a fixed width using Pillow.

    Holds only its settings, so one instance can serve concurrent requests.
    """

    def __init__(
        self,
        width: int = 512,
        quality: int = 85,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize preview generator.

        Args:
            width: Target width for previews (default: 512)
            quality: JPEG quality for output (default: 85)
            logger: Optional logger instance
        """
        self.width = width
        self.quality = quality
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def is_eligible(extension: str) -> bool:
        """True if an upload with this extension should get a preview."""
        ext_lower = extension.lower()
        return any(marker in ext_lower for marker in ELIGIBLE_MARKERS)

    def target_size(self, size: Tuple[int, int]) -> Tuple[int, int]:
        """Size of the preview for an image of the given size. Never upscales."""
        width, height = size
        if width <= self.width:
            return width, height
        new_height = max(1, round(height * self.width / width))
        return self.width, new_height

    def derive(self, image_data: bytes) -> Tuple[bytes, Tuple[int, int]]:
        """
        Generate a preview from JPEG data.

        Args:
            image_data: Original image as bytes

        Returns:
            Tuple of (preview_bytes, (width, height))

        Raises:
            DecodeError: If the data is not a decodable JPEG
            EncodeError: If the resized image cannot be encoded
        """
        img = self._decode(image_data)

        size = self.target_size(img.size)
        if size != img.size:
            img = img.resize(size, Image.Resampling.LANCZOS)
        img = self._convert_color_mode(img)

        output = io.BytesIO()
        try:
            img.save(output, format='JPEG', quality=self.quality, optimize=True)
        except (OSError, ValueError) as e:
            self.logger.error(f"Error encoding preview: {e}")
            raise EncodeError(f"could not encode jpeg: {e}") from e

        return output.getvalue(), img.size

    def _decode(self, image_data: bytes) -> Image.Image:
        """Open and fully load the image, insisting on JPEG."""
        try:
            img = Image.open(io.BytesIO(image_data))
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
            self.logger.error(f"Error opening image: {e}")
            raise DecodeError(f"could not resize jpeg: {e}") from e

        if img.format != 'JPEG':
            self.logger.error(f"Expected a JPEG, got {img.format}")
            raise DecodeError(f"could not resize jpeg: not a JPEG image ({img.format})")

        try:
            img.load()
        except (OSError, SyntaxError, ValueError) as e:
            self.logger.error(f"Error decoding image: {e}")
            raise DecodeError(f"could not resize jpeg: {e}") from e
        return img

    def _convert_color_mode(self, img: Image.Image) -> Image.Image:
        """Convert image to a mode the JPEG encoder accepts."""
        if img.mode in ('RGB', 'L', 'CMYK'):
            return img
        return img.convert('RGB')
