"""Frame processing pipeline: extractor, renderer and the frame loop."""

from espcn_live.pipeline.extractor import (
    crop_region,
    extract_luminance,
    extract_mean_lightness,
)
from espcn_live.pipeline.renderer import (
    render_grayscale,
    render_mix,
    scale_region,
)
from espcn_live.pipeline.frame_loop import (
    AppState,
    FrameLoop,
    Scheduler,
    ImmediateScheduler,
    RefreshScheduler,
)

__all__ = [
    "crop_region",
    "extract_luminance",
    "extract_mean_lightness",
    "render_grayscale",
    "render_mix",
    "scale_region",
    "AppState",
    "FrameLoop",
    "Scheduler",
    "ImmediateScheduler",
    "RefreshScheduler",
]
