"""Turn model output back into RGBA pixels.

To keep the model cheap it only sees luminance.  Two ways of getting an
image back out are supported:

* **grayscale** - the luminance becomes R, G and B directly.
* **mix** - the input crop is upscaled conventionally (bilinear), and the
  model's luminance replaces the Y of that image while its U and V are kept.
  This gives a colour result at the cost of one extra resize.
"""

import cv2
import numpy as np

from espcn_live.core.colorspace import clamp_uint8, mix
from espcn_live.core.types import Tensor


def _spatial(result: Tensor) -> np.ndarray:
    """Return the result as an ``(H, W)`` array."""
    arr = result.to_array()
    if arr.ndim == 4 and arr.shape[:2] == (1, 1):
        arr = arr[0, 0]
    elif arr.ndim == 3 and arr.shape[0] == 1:
        arr = arr[0]
    if arr.ndim != 2:
        raise ValueError(f"Cannot render tensor of shape {result.shape}")
    return arr


def render_grayscale(result: Tensor) -> np.ndarray:
    """Write luminance to R, G and B with opaque alpha.

    Returns:
        RGBA uint8 array of shape ``(H, W, 4)``.
    """
    y = _spatial(result)
    h, w = y.shape
    lightness = clamp_uint8(y * 255)
    rgba = np.empty((h, w, 4), dtype=np.uint8)
    rgba[..., 0] = lightness
    rgba[..., 1] = lightness
    rgba[..., 2] = lightness
    rgba[..., 3] = 255
    return rgba


def render_mix(result: Tensor, scaled_rgba: np.ndarray) -> np.ndarray:
    """Recombine model luminance with the chrominance of ``scaled_rgba``.

    Args:
        result: Model output, spatial size ``(H, W)``.
        scaled_rgba: Conventionally upscaled RGBA image of the same size.

    Raises:
        ValueError: if the two images differ in size.
    """
    y = _spatial(result)
    if scaled_rgba.shape[:2] != y.shape:
        raise ValueError(
            f"Chrominance surface {scaled_rgba.shape[1]}x{scaled_rgba.shape[0]} "
            f"does not match model output {y.shape[1]}x{y.shape[0]}"
        )
    src = scaled_rgba.astype(np.float64)
    r, g, b, a = mix(y, src[..., 0], src[..., 1], src[..., 2], src[..., 3])
    out = np.empty(scaled_rgba.shape, dtype=np.uint8)
    out[..., 0] = clamp_uint8(r)
    out[..., 1] = clamp_uint8(g)
    out[..., 2] = clamp_uint8(b)
    out[..., 3] = clamp_uint8(a)
    return out


def scale_region(rgba: np.ndarray, factor: int) -> np.ndarray:
    """Upscale an RGBA crop by an integer factor with bilinear filtering."""
    h, w = rgba.shape[:2]
    return cv2.resize(
        np.ascontiguousarray(rgba), (w * factor, h * factor),
        interpolation=cv2.INTER_LINEAR,
    )
