from __future__ import annotations

import logging
from io import BytesIO
from typing import Tuple

from PIL import Image

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 600


def read_dimensions(image_bytes: bytes) -> Tuple[int, int, str]:
    """
    Return `(width, height, mime_type)` for an encoded image.

    Only the header is parsed. Dimensions that cannot be determined fall
    back to 800x600.
    """
    with Image.open(BytesIO(image_bytes)) as img:
        width, height = img.size
        mime_type = Image.MIME.get(img.format or "", "image/jpeg")
    return width or DEFAULT_WIDTH, height or DEFAULT_HEIGHT, mime_type


def composite_jpeg(image_bytes: bytes, layer: Image.Image, quality: int = 80) -> bytes:
    """
    Overlay `layer` on the source image at the origin and encode as JPEG.

    The layer is cropped or padded to the source size, so a layer rendered
    for the 800x600 fallback still composites cleanly.
    """
    with Image.open(BytesIO(image_bytes)) as source:
        base = source.convert("RGBA")

    if layer.size != base.size:
        logger.warning("Text layer %s does not match image %s; fitting to image", layer.size, base.size)
        fitted = Image.new("RGBA", base.size, (0, 0, 0, 0))
        fitted.paste(layer, (0, 0))
        layer = fitted

    merged = Image.alpha_composite(base, layer.convert("RGBA")).convert("RGB")

    buffer = BytesIO()
    merged.save(buffer, format="JPEG", quality=quality, optimize=True)
    return buffer.getvalue()
