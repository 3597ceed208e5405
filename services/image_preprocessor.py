"""Image pre-processing before scene analysis.

Camera frames from phones are often several megapixels; the vision model
gains nothing from that resolution. `ImagePreprocessor` verifies the upload
is a decodable image, scales it so its longest edge fits `max_dimension`,
and re-encodes it as base64 JPEG text ready for a data URL.

Example:
    prep = ImagePreprocessor(max_dimension=1024)
    image_b64, mime_type = prep.prepare(raw_bytes)
"""
from __future__ import annotations

import base64
import io
from typing import Tuple

from PIL import Image, UnidentifiedImageError

from utils.errors import InputValidationError

JPEG_QUALITY = 85


class ImagePreprocessor:
    """Downscale uploaded frames and encode them for the vision model.

    Args:
        max_dimension: Longest edge, in pixels, after scaling. Smaller images are left at their size.
        background: Color used to flatten transparent images to RGB.
    """

    def __init__(self, max_dimension: int = 1024, background: Tuple[int, int, int] | None = None):
        if max_dimension < 1:
            raise ValueError("max_dimension must be positive")
        self.max_dimension = max_dimension
        self.background = background or (255, 255, 255)

    def prepare(self, raw: bytes) -> Tuple[str, str]:
        """Return `(base64_text, mime_type)` for the scaled image.

        Raises:
            InputValidationError: If the bytes cannot be opened as an image, or
                declare more pixels than Pillow's decompression-bomb limit.
        """
        try:
            src = Image.open(io.BytesIO(raw))
            src.load()
        except Image.DecompressionBombError as exc:
            raise InputValidationError("Uploaded image has too many pixels", ["image"]) from exc
        except (UnidentifiedImageError, OSError) as exc:
            raise InputValidationError("Uploaded file is not a supported image", ["image"]) from exc

        if src.mode in ("RGBA", "LA", "P"):
            src = src.convert("RGBA")
            flat = Image.new("RGB", src.size, self.background)
            flat.paste(src, mask=src.split()[3])
            src = flat
        elif src.mode != "RGB":
            src = src.convert("RGB")

        src.thumbnail((self.max_dimension, self.max_dimension), Image.LANCZOS)

        out_io = io.BytesIO()
        src.save(out_io, format="JPEG", quality=JPEG_QUALITY)
        return base64.b64encode(out_io.getvalue()).decode("ascii"), "image/jpeg"
