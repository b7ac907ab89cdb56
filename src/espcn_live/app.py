"""Build a ready-to-run frame loop from configuration."""

import logging
from typing import List

from espcn_live.core.enums import Lightness, RenderPolicy
from espcn_live.core.types import ZoomRect
from espcn_live.inference import create_adapter
from espcn_live.pipeline.frame_loop import AppState, FrameLoop, RefreshScheduler
from espcn_live.sources import FrameSource, ImageSource, VideoFileSource, WebcamSource
from espcn_live.surfaces import (
    ImageFileSurface,
    Surface,
    VideoWriterSurface,
    WindowSurface,
)
from espcn_live.utils.config import EspcnLiveConfig, SourceConfig


logger = logging.getLogger(__name__)


def build_source(config: SourceConfig) -> FrameSource:
    """Create the frame source described by ``config``."""
    if config.kind == "webcam":
        return WebcamSource(device=config.device)
    if config.path is None:
        raise ValueError(f"Source kind '{config.kind}' needs a path")
    if config.kind == "image":
        return ImageSource(path=config.path, repeat=config.loop)
    return VideoFileSource(config.path, loop=config.loop)


def build_app(config: EspcnLiveConfig) -> FrameLoop:
    """Wire adapter, source, zoom rect and surfaces into a :class:`FrameLoop`.

    Nothing is loaded or opened here; that happens in :meth:`FrameLoop.start`.
    """
    policy = RenderPolicy(config.loop.policy)
    out_cfg = config.output

    zoom = None
    if policy is RenderPolicy.MIX:
        zoom = ZoomRect(
            x=config.zoom.x or 0,
            y=config.zoom.y or 0,
            width=config.zoom.width,
            height=config.zoom.height,
            zoom_factor=config.zoom.factor,
        )

    outputs: List[Surface] = []
    scaled_surface = None
    input_surface = None
    if out_cfg.show_window:
        outputs.append(WindowSurface(out_cfg.window_name, hold=out_cfg.hold_window))
        if zoom is not None:
            scaled_surface = WindowSurface(f"{out_cfg.window_name} (bilinear)")
            input_surface = WindowSurface(
                f"{out_cfg.window_name} (input)", on_pointer=zoom.follow
            )
    if out_cfg.video_path:
        outputs.append(VideoWriterSurface(out_cfg.video_path, fps=out_cfg.video_fps))
    if out_cfg.image_path:
        outputs.append(ImageFileSurface(out_cfg.image_path))
    if not outputs:
        logger.warning("No output configured; frames will be processed and discarded")

    app = AppState(
        adapter=create_adapter(config.model),
        source=build_source(config.source),
        outputs=outputs,
        policy=policy,
        lightness=Lightness(config.loop.lightness),
        zoom=zoom,
        center_zoom=zoom is not None and config.zoom.x is None and config.zoom.y is None,
        scaled_surface=scaled_surface,
        input_surface=input_surface,
        max_frames=config.loop.max_frames,
    )
    return FrameLoop(app, RefreshScheduler(fps=config.loop.fps))
