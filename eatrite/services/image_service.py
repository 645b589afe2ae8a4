"""Image processing service for ingredient photos."""

import base64
import binascii
import io
import logging
from typing import Tuple

from PIL import Image, UnidentifiedImageError

from eatrite.config import settings
from eatrite.utils.exceptions import ImageProcessingError

logger = logging.getLogger(__name__)

SUPPORTED_MIME_TYPES = ("image/jpeg", "image/png", "image/webp")
DEFAULT_MIME_TYPE = "image/jpeg"

# Images below this size are sent untouched
RESIZE_THRESHOLD_BYTES = 350_000


class ImageService:
    """Service for validating and encoding ingredient photos."""

    @staticmethod
    def validate_image(file_content: bytes, filename: str) -> Tuple[bytes, str]:
        """
        Validate an uploaded image.

        Args:
            file_content: Image file bytes
            filename: Original filename

        Returns:
            Tuple of (image_bytes, mime_type)

        Raises:
            ImageProcessingError: If image is invalid
        """
        if not file_content:
            raise ImageProcessingError("Image file is empty")

        max_size = settings.max_request_size
        if len(file_content) > max_size:
            raise ImageProcessingError(f"Image file too large (max {max_size / 1024 / 1024}MB)")

        mime_type = ImageService.detect_mime_type(file_content)

        if mime_type not in SUPPORTED_MIME_TYPES:
            raise ImageProcessingError(
                f"Unsupported image format for {filename}: {mime_type}. Supported: JPEG, PNG, WebP"
            )

        return file_content, mime_type

    @staticmethod
    def detect_mime_type(file_content: bytes) -> str:
        """
        Detect MIME type from file content (magic bytes).

        Args:
            file_content: File bytes

        Returns:
            MIME type string, "application/octet-stream" if unknown
        """
        if file_content.startswith(b"\xff\xd8\xff"):
            return "image/jpeg"
        elif file_content.startswith(b"\x89PNG\r\n\x1a\n"):
            return "image/png"
        elif file_content.startswith(b"RIFF") and b"WEBP" in file_content[:12]:
            return "image/webp"
        return "application/octet-stream"

    @staticmethod
    def prepare_for_vision(image_bytes: bytes, mime_type: str) -> Tuple[bytes, str]:
        """
        Downscale + compress large images to reduce vision latency.

        Returns: (new_bytes, new_mime). Small images come back unchanged.

        Raises:
            ImageProcessingError: If Pillow cannot decode the image
        """
        if len(image_bytes) < RESIZE_THRESHOLD_BYTES:
            return image_bytes, mime_type

        try:
            with Image.open(io.BytesIO(image_bytes)) as im:
                # Normalize to RGB; if alpha exists, composite onto white
                if im.mode in ("RGBA", "LA") or (im.mode == "P" and "transparency" in im.info):
                    bg = Image.new("RGBA", im.size, (255, 255, 255, 255))
                    im = Image.alpha_composite(bg, im.convert("RGBA")).convert("RGB")
                else:
                    im = im.convert("RGB")

                max_dim = settings.vision_max_dim
                w, h = im.size
                if max(w, h) > max_dim:
                    scale = max_dim / float(max(w, h))
                    im = im.resize((max(1, int(w * scale)), max(1, int(h * scale))), Image.LANCZOS)

                out = io.BytesIO()
                im.save(out, format="JPEG", quality=settings.jpeg_quality, optimize=True)
        except (UnidentifiedImageError, OSError) as e:
            raise ImageProcessingError(f"Could not decode image: {e}") from e

        logger.info(
            "Image optimized for vision",
            extra={"orig_bytes": len(image_bytes), "opt_bytes": out.tell()},
        )
        return out.getvalue(), "image/jpeg"

    @staticmethod
    def encode_base64(image_bytes: bytes) -> str:
        return base64.b64encode(image_bytes).decode("ascii")

    @staticmethod
    def decode_base64(image_base64: str) -> bytes:
        """
        Decode a bare base64 payload or a ``data:`` URL.

        Raises:
            ImageProcessingError: If the payload is not valid base64
        """
        payload = image_base64.strip()
        if payload.startswith("data:"):
            _, _, payload = payload.partition(",")
        try:
            data = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ImageProcessingError(f"Image is not valid base64: {e}") from e
        if not data:
            raise ImageProcessingError("Image is empty")
        return data

    @staticmethod
    def to_data_url(image_base64: str) -> str:
        """
        Build the ``data:`` URL sent to the vision model.

        ``data:`` URLs pass through; for bare payloads the MIME type is
        sniffed from the decoded bytes, falling back to JPEG.
        """
        payload = image_base64.strip()
        if payload.startswith("data:"):
            return payload

        mime_type = DEFAULT_MIME_TYPE
        try:
            # 16 base64 chars -> 12 bytes, enough for every magic number we check
            head = base64.b64decode(payload[:16])
            detected = ImageService.detect_mime_type(head)
            if detected in SUPPORTED_MIME_TYPES:
                mime_type = detected
        except (binascii.Error, ValueError):
            logger.debug("Could not sniff image MIME type, assuming %s", DEFAULT_MIME_TYPE)

        return f"data:{mime_type};base64,{payload}"
