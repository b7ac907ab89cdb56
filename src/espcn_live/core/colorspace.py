"""RGB <-> YUV conversion used around the luminance-only model.

All functions accept python floats or numpy arrays and broadcast
elementwise.  None of the conversions clamp; only :func:`clamp_uint8`
produces storable byte values.

Reference: https://en.wikipedia.org/wiki/YUV
"""

from typing import Tuple, Union

import numpy as np


Number = Union[float, np.ndarray]


def rgb_to_yuv(r: Number, g: Number, b: Number) -> Tuple[Number, Number, Number]:
    """Convert RGB (0-255 scale) to YUV with BT.601 studio-swing constants."""
    y = 0.257 * r + 0.504 * g + 0.098 * b + 16
    u = -0.148 * r - 0.291 * g + 0.439 * b + 128
    v = 0.439 * r - 0.368 * g - 0.071 * b + 128
    return y, u, v


def yuv_to_rgb(y: Number, u: Number, v: Number) -> Tuple[Number, Number, Number]:
    """Convert YUV back to RGB.

    Inverse of :func:`rgb_to_yuv` up to rounding.
    """
    r = y + 1.4075 * (v - 128)
    g = y - 0.3455 * (u - 128) - 0.7169 * (v - 128)
    b = y + 1.7790 * (u - 128)
    return r, g, b


def luminance(r: Number, g: Number, b: Number) -> Number:
    """Y component only."""
    return 0.257 * r + 0.504 * g + 0.098 * b + 16


def clamp_uint8(value: Number) -> Number:
    """Round half up and clamp into ``[0, 255]``.

    Returns an ``int`` for scalar input and a ``uint8`` array otherwise.
    """
    if np.isscalar(value):
        return int(max(0, min(255, np.floor(value + 0.5))))
    arr = np.floor(np.asarray(value, dtype=np.float64) + 0.5)
    return np.clip(arr, 0, 255).astype(np.uint8)


def mix(y: Number, r: Number, g: Number, b: Number, a: Number):
    """Replace the luminance of an RGBA pixel with a model output sample.

    Args:
        y: Model luminance in ``[0, 1]``.
        r, g, b, a: Pixel whose chrominance (and alpha) is kept.

    Returns:
        ``(r, g, b, a)`` floats; red/green/blue are unclamped.
    """
    _, u, v = rgb_to_yuv(r, g, b)
    r2, g2, b2 = yuv_to_rgb(y * 255, u, v)
    return r2, g2, b2, a
