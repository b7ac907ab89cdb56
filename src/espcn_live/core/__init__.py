"""Core types, enums and colour conversion for espcn-live."""

from .enums import (
    LoopState,
    Lightness,
    RenderPolicy,
    Backend,
)

from .types import (
    Tensor,
    Rect,
    ZoomRect,
)

from .errors import (
    EspcnLiveError,
    SourceError,
    InferenceError,
    AdapterNotLoadedError,
)

from .colorspace import (
    rgb_to_yuv,
    yuv_to_rgb,
    luminance,
    clamp_uint8,
    mix,
)

__all__ = [
    # Enums
    "LoopState",
    "Lightness",
    "RenderPolicy",
    "Backend",
    # Types
    "Tensor",
    "Rect",
    "ZoomRect",
    # Errors
    "EspcnLiveError",
    "SourceError",
    "InferenceError",
    "AdapterNotLoadedError",
    # Colour
    "rgb_to_yuv",
    "yuv_to_rgb",
    "luminance",
    "clamp_uint8",
    "mix",
]
