"""Turn RGBA frames into luminance tensors for the model."""

from typing import Optional

import numpy as np

from espcn_live.core.colorspace import luminance
from espcn_live.core.types import Rect, Tensor
from espcn_live.sources.frame import Frame


def crop_region(image: np.ndarray, rect: Optional[Rect]) -> np.ndarray:
    """Return the RGBA pixels inside ``rect`` (the whole image if ``None``).

    Raises:
        ValueError: if the rect does not lie fully inside the image.
    """
    if rect is None:
        return image
    h, w = image.shape[:2]
    if not rect.fits_within(w, h):
        raise ValueError(f"Crop {rect} outside {w}x{h} image")
    return image[rect.y:rect.bottom, rect.x:rect.right]


def extract_luminance(frame: Frame, crop: Optional[Rect] = None) -> Tensor:
    """Convert a frame (or a crop of it) to a ``[1, 1, H, W]`` luminance tensor.

    Each sample is the Y of YUV divided by 255.  Values are *not* clamped to
    ``[0, 1]``; Y never reaches 0 or 255 for byte input, so in practice the
    samples lie in roughly ``[0.063, 0.922]``.
    """
    pixels = crop_region(frame.image, crop).astype(np.float32)
    r, g, b = pixels[..., 0], pixels[..., 1], pixels[..., 2]
    y = luminance(r, g, b) / 255
    h, w = y.shape
    return Tensor(data=y, shape=(1, 1, h, w))


def extract_mean_lightness(frame: Frame, crop: Optional[Rect] = None) -> Tensor:
    """Luminance approximated as the plain mean of R, G and B over 255.

    Used for quick still-image checks where the YUV offset is unwanted.
    """
    pixels = crop_region(frame.image, crop).astype(np.float32)
    y = pixels[..., :3].sum(axis=-1) / 3 / 255
    h, w = y.shape
    return Tensor(data=y, shape=(1, 1, h, w))
