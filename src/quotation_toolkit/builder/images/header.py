"""
Module: builder.images.header

Purpose:
    Resolve a quotation's header image reference into verified image bytes.
    Runs before layout: the layout engine only ever sees in-memory bytes.

Key Functions:
    - decode_data_url(): data:image/...;base64 URL -> bytes
    - load_embedded_image(): Verify bytes decode as an image
    - load_image_file(): Read a local image and re-encode it as PNG
    - resolve_header_image(): Any reference -> bytes, or None for text header

Key Classes:
    - AssetResolutionError: Reference cannot be turned into image bytes

Dependencies:
    - PIL: Decoding, verification and PNG re-encoding

Used By:
    - builder.layout.composer: Embedded data URLs
    - builder.controller: Header and signature pre-resolution
    - cli: --header option
"""

from __future__ import annotations

import base64
import binascii
import logging
from io import BytesIO
from pathlib import Path
from typing import Optional
from urllib.parse import unquote_to_bytes

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

# Same limit the upload form enforces on header images
MAX_IMAGE_BYTES = 2 * 1024 * 1024


class AssetResolutionError(Exception):
    """Image reference could not be resolved to usable image bytes."""

    def __init__(self, message: str, reference: Optional[str] = None):
        super().__init__(message)
        self.reference = reference


def decode_data_url(url: str) -> bytes:
    """
    Decode a `data:image/...` URL.

    Args:
        url: Data URL, base64 or percent-encoded

    Returns:
        Raw image bytes (not yet verified)

    Raises:
        AssetResolutionError: Not an image data URL, bad payload, or too large
    """
    if not url.startswith("data:"):
        raise AssetResolutionError("Not a data URL", _short(url))

    meta, sep, payload = url[len("data:"):].partition(",")
    if not sep:
        raise AssetResolutionError("Data URL has no payload", _short(url))
    if not meta.lower().startswith("image/"):
        raise AssetResolutionError(f"Data URL is not an image: {meta or 'text/plain'}", _short(url))

    if ";base64" in meta.lower():
        try:
            data = base64.b64decode(payload.strip(), validate=True)
        except (binascii.Error, ValueError) as e:
            raise AssetResolutionError(f"Invalid base64 payload: {e}", _short(url)) from e
    else:
        data = unquote_to_bytes(payload)

    if not data:
        raise AssetResolutionError("Data URL payload is empty", _short(url))
    _check_size(len(data), _short(url))
    return data


def load_embedded_image(data: bytes) -> bytes:
    """
    Verify that `data` decodes as a raster image.

    Returns:
        The same bytes, unchanged

    Raises:
        AssetResolutionError: Bytes are not a readable image
    """
    if not data:
        raise AssetResolutionError("Image data is empty")
    try:
        with Image.open(BytesIO(data)) as img:
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        raise AssetResolutionError(f"Image data could not be decoded: {e}") from e
    return data


def load_image_file(path: Path) -> bytes:
    """
    Read an image file and re-encode it as PNG.

    Raises:
        AssetResolutionError: Missing, too large, or unreadable file
    """
    path = Path(path)
    if not path.is_file():
        raise AssetResolutionError(f"Image file not found: {path}", str(path))
    _check_size(path.stat().st_size, str(path))

    try:
        with Image.open(path) as img:
            img.load()
            if img.mode not in ("RGB", "RGBA", "L", "LA"):
                img = img.convert("RGBA")
            buffer = BytesIO()
            img.save(buffer, format="PNG")
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        raise AssetResolutionError(f"Image file could not be decoded: {e}", str(path)) from e

    logger.debug(f"Loaded image {path.name}: {buffer.tell()} bytes as PNG")
    return buffer.getvalue()


def resolve_header_image(
    reference: Optional[str],
    *,
    base_dir: Optional[Path] = None,
) -> Optional[bytes]:
    """
    Resolve a header image reference to verified bytes.

    Handles embedded data URLs and local file paths (relative paths are
    resolved against `base_dir`). Remote URLs are not fetched. Any failure
    is logged and returns None so the caller falls back to the text header.

    Args:
        reference: Data URL, file path, or None
        base_dir: Directory for relative paths

    Returns:
        Image bytes, or None when the text header should be used

    Example:
        >>> resolve_header_image("data:image/png;base64,iVBORw0...")
        b'\\x89PNG...'
        >>> resolve_header_image(None) is None
        True
    """
    if not reference or not reference.strip():
        return None
    reference = reference.strip()

    try:
        if reference.startswith("data:"):
            return load_embedded_image(decode_data_url(reference))

        if reference.startswith(("http://", "https://")):
            logger.warning(f"Remote header image not fetched, using text header: {_short(reference)}")
            return None

        path = Path(reference).expanduser()
        if not path.is_absolute() and base_dir is not None:
            path = Path(base_dir) / path
        return load_image_file(path)

    except AssetResolutionError as e:
        logger.warning(f"Header image unavailable, using text header: {e}")
        return None


def _check_size(size: int, reference: Optional[str]) -> None:
    if size > MAX_IMAGE_BYTES:
        raise AssetResolutionError(
            f"Image is {size} bytes, limit is {MAX_IMAGE_BYTES} bytes", reference
        )


def _short(reference: str, limit: int = 48) -> str:
    """Truncate long references (data URLs) for messages."""
    return reference if len(reference) <= limit else reference[:limit] + "..."
