"""
Module: builder.images

Purpose:
    Image assets for quotation documents: header image resolution and
    the built-in signature.

Key Classes:
    - AssetResolutionError: Image reference could not be resolved

Key Functions:
    - resolve_header_image(): Reference -> bytes or None
    - decode_data_url(), load_embedded_image(), load_image_file()
    - default_signature_png(): Built-in signature asset

Dependencies:
    - PIL: Image decoding and encoding

Used By:
    - builder.layout.composer: Header selection
    - builder.controller: Asset pre-resolution
"""

from .header import (
    MAX_IMAGE_BYTES,
    AssetResolutionError,
    decode_data_url,
    load_embedded_image,
    load_image_file,
    resolve_header_image,
)
from .signature import default_signature_png

__all__ = [
    "MAX_IMAGE_BYTES",
    "AssetResolutionError",
    "decode_data_url",
    "load_embedded_image",
    "load_image_file",
    "resolve_header_image",
    "default_signature_png",
]
