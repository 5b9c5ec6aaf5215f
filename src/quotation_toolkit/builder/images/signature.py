"""
Module: builder.images.signature

Purpose:
    Built-in signature image used when no signature file is configured.
    Drawn once with Pillow at the 289x68 signature aspect and cached.
"""

from __future__ import annotations

import math
from functools import lru_cache
from io import BytesIO

from PIL import Image, ImageDraw

SIGNATURE_SIZE = (289, 68)

_INK = (20, 30, 90, 255)


@lru_cache(maxsize=1)
def default_signature_png() -> bytes:
    """
    PNG bytes of the built-in signature.

    The stroke is a fixed curve, so the bytes are identical on every call
    and across processes.
    """
    width, height = SIGNATURE_SIZE
    img = Image.new("RGBA", SIGNATURE_SIZE, (255, 255, 255, 0))
    draw = ImageDraw.Draw(img)

    # Looping flourish across the width
    points = []
    steps = 120
    for i in range(steps + 1):
        t = i / steps
        x = 12 + t * (width - 40)
        y = height / 2 + math.sin(t * math.pi * 5) * (height * 0.28) * (1 - t * 0.5)
        points.append((round(x, 1), round(y, 1)))
    draw.line(points, fill=_INK, width=3, joint="curve")

    # Underline
    draw.line([(20, height - 10), (width - 20, height - 14)], fill=_INK, width=2)

    buffer = BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()
