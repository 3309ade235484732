"""Preview thumbnails for the attachment grid.

Decodes an attachment's base64 payload with Pillow, shrinks it to fit the
preview tile and returns PNG bytes.
"""
from __future__ import annotations

import base64
import io
from typing import Tuple

from PIL import Image, ImageOps

PREVIEW_SIZE = (160, 160)
WHITE = (255, 255, 255)


def decode_image(payload: str | bytes) -> Image.Image:
    """Open a base64 image payload, raising ValueError for anything unreadable."""
    try:
        raw = base64.b64decode(payload, validate=True)
    except Exception as exc:
        raise ValueError("Invalid base64 data provided") from exc

    try:
        image = Image.open(io.BytesIO(raw))
        image.load()
    except Exception as exc:
        raise ValueError("Decoded bytes are not a supported image format") from exc
    return image


class ThumbnailGenerator:
    """Shrink uploaded figures for the preview tiles.

    Args:
        max_size: Bounding box the thumbnail must fit in.
        background: Colour behind transparent regions (white when None).
    """

    def __init__(self, max_size: Tuple[int, int] = PREVIEW_SIZE, background: Tuple[int, int, int] | None = None):
        self.max_size = max_size
        self.background = background or WHITE

    def create_thumbnail(self, data: str | bytes) -> bytes:
        """Return PNG bytes for a base64 payload without a data-URL header.

        Camera photos of instrument screens are rotated upright from their
        EXIF orientation first; the aspect ratio is kept.
        """
        figure = ImageOps.exif_transpose(decode_image(data)).convert("RGBA")
        figure.thumbnail(self.max_size, Image.LANCZOS)

        tile = Image.new("RGB", figure.size, self.background)
        tile.paste(figure, mask=figure.getchannel("A"))

        buffer = io.BytesIO()
        tile.save(buffer, format="PNG", optimize=True)
        return buffer.getvalue()
