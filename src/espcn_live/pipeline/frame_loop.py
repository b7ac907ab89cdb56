"""Frame loop: extract -> infer -> render, once per display refresh.

Initialization order is fixed and enforced by :meth:`FrameLoop.start`:

1. load the model (``IDLE`` until this succeeds)
2. open the source and bind the zoom rect to its size
3. enter ``RUNNING`` and process frames

Cycles never overlap: the next frame is only requested after the previous
one has been rendered, so a slow model simply drops frames.
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional

import cv2
import numpy as np

from espcn_live.core.enums import Lightness, LoopState, RenderPolicy
from espcn_live.core.types import ZoomRect
from espcn_live.inference.base import InferenceAdapter
from espcn_live.pipeline.extractor import (
    crop_region,
    extract_luminance,
    extract_mean_lightness,
)
from espcn_live.pipeline.renderer import render_grayscale, render_mix, scale_region
from espcn_live.sources.base import FrameSource
from espcn_live.surfaces.base import Surface


logger = logging.getLogger(__name__)


# ============================================================================
# Schedulers
# ============================================================================

class Scheduler(ABC):
    """Decides when the next cycle may start."""

    def __init__(self):
        self.ticks = 0

    def source_opened(self, source: FrameSource) -> None:
        """Called once the source is open, before the first cycle."""

    @abstractmethod
    async def wait_next_frame(self) -> None:
        """Suspend until the next frame should be processed."""


class ImmediateScheduler(Scheduler):
    """Yields to the event loop and continues straight away."""

    async def wait_next_frame(self) -> None:
        self.ticks += 1
        await asyncio.sleep(0)


class RefreshScheduler(Scheduler):
    """Paces cycles to a fixed refresh rate.

    Ticks that were missed while a cycle ran long are skipped rather than
    caught up on.

    Args:
        fps: Refresh rate.  ``0`` follows the source's own frame rate, and
            runs unpaced if the source has none (still images).
        clock: Monotonic clock in seconds.
        sleep: Awaitable sleep, injectable for tests.
    """

    def __init__(
        self,
        fps: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        super().__init__()
        self.follow_source = fps <= 0
        self.interval = 0.0
        self.set_rate(fps)
        self._clock = clock
        self._sleep = sleep
        self._next_tick: Optional[float] = None
        self.skipped = 0

    def set_rate(self, fps: float) -> None:
        self.interval = 1.0 / fps if fps > 0 else 0.0

    def source_opened(self, source: FrameSource) -> None:
        if self.follow_source:
            self.set_rate(source.fps)
            logger.info("Pacing to source rate: %.1f fps", source.fps)

    async def wait_next_frame(self) -> None:
        now = self._clock()
        if self._next_tick is None:
            self._next_tick = now
        self._next_tick += self.interval
        delay = self._next_tick - now
        if delay < 0:
            if self.interval > 0:
                self.skipped += int(-delay // self.interval)
            self._next_tick = now
            delay = 0.0
        self.ticks += 1
        await self._sleep(delay)


# ============================================================================
# Application state
# ============================================================================

@dataclass
class AppState:
    """Everything the loop works on.

    Attributes:
        adapter: Inference runtime binding.
        source: Frame source.
        outputs: Surfaces the rendered frame is written to.
        policy: Grayscale replace or colour mix.
        lightness: Brightness measure fed to the model.
        zoom: Crop window fed to the model; required for ``MIX``.
        center_zoom: Centre the zoom rect on the source when starting.
        scaled_surface: Receives the bilinear-upscaled crop (``MIX`` only).
        input_surface: Receives the source frame with the zoom outline.
        max_frames: Debug guard, stop after this many frames.
    """
    adapter: InferenceAdapter
    source: FrameSource
    outputs: List[Surface] = field(default_factory=list)
    policy: RenderPolicy = RenderPolicy.GRAYSCALE
    lightness: Lightness = Lightness.YUV
    zoom: Optional[ZoomRect] = None
    center_zoom: bool = False
    scaled_surface: Optional[Surface] = None
    input_surface: Optional[Surface] = None
    max_frames: Optional[int] = None

    # Runtime
    state: LoopState = LoopState.IDLE
    frames_processed: int = 0
    last_error: Optional[BaseException] = None

    def all_surfaces(self) -> List[Surface]:
        surfaces = list(self.outputs)
        for extra in (self.scaled_surface, self.input_surface):
            if extra is not None:
                surfaces.append(extra)
        return surfaces


# ============================================================================
# Loop
# ============================================================================

class FrameLoop:
    """Drives one :class:`AppState` through repeated pipeline passes.

    Usage::

        loop = FrameLoop(app, RefreshScheduler(fps=60))
        await loop.run()
        loop.close()
    """

    def __init__(self, app: AppState, scheduler: Optional[Scheduler] = None):
        self.app = app
        self.scheduler = scheduler or RefreshScheduler()

    @property
    def state(self) -> LoopState:
        return self.app.state

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Load the model, open the source and enter ``RUNNING``.

        Raises:
            ValueError: if ``MIX`` is requested without a zoom rect, or the
                zoom rect is larger than the source frames.
            InferenceError / SourceError: if loading or opening fails.
        """
        app = self.app
        if app.state is not LoopState.IDLE:
            return
        if app.policy is RenderPolicy.MIX and app.zoom is None:
            raise ValueError("Colour mix needs a zoom rect")

        app.adapter.load()
        app.source.open()
        self.scheduler.source_opened(app.source)

        w, h = app.source.resolution
        if app.zoom is not None and w and h:
            zoom = app.zoom
            if zoom.width > w or zoom.height > h:
                raise ValueError(
                    f"Zoom rect {zoom.width}x{zoom.height} does not fit "
                    f"{w}x{h} source {app.source.__class__.__name__}; "
                    f"lower zoom.width / zoom.height"
                )
            if app.center_zoom:
                zoom.center_on(w, h)
            else:
                zoom.bind(w, h)

        app.state = LoopState.RUNNING
        logger.info(
            "Frame loop running: adapter=%s policy=%s lightness=%s max_frames=%s",
            app.adapter.name, app.policy.value, app.lightness.value, app.max_frames,
        )

    def stop(self) -> None:
        """Stop after the current cycle."""
        if self.app.state is LoopState.RUNNING:
            logger.info("Frame loop stop requested")
        self.app.state = LoopState.STOPPED

    def close(self) -> None:
        """Release the source and every surface."""
        self.app.source.close()
        for surface in self.app.all_surfaces():
            surface.close()

    def follow_pointer(self, x: int, y: int) -> None:
        """Move the zoom rect to a pointer position (clamped)."""
        if self.app.zoom is not None:
            self.app.zoom.follow(x, y)

    # ------------------------------------------------------------------
    # Processing
    # ------------------------------------------------------------------

    async def step(self) -> bool:
        """Run one extract -> infer -> render pass.

        Returns:
            ``False`` if the source had no frame, ``True`` otherwise.
        """
        app = self.app
        frame = app.source.read()
        if frame is None:
            return False

        extract = (
            extract_mean_lightness if app.lightness is Lightness.MEAN
            else extract_luminance
        )
        scaled = None
        if app.policy is RenderPolicy.MIX:
            zoom = app.zoom
            if zoom.bounds != (frame.width, frame.height):
                zoom.bind(frame.width, frame.height)
            tensor = extract(frame, zoom)
            scaled = scale_region(crop_region(frame.image, zoom), zoom.zoom_factor)
            if app.scaled_surface is not None:
                app.scaled_surface.write(scaled)
        else:
            tensor = extract(frame)
        logger.debug("LR shape: %s", tensor.shape)

        result = await asyncio.to_thread(app.adapter.infer, tensor)
        logger.debug("SR shape: %s", result.shape)

        if app.policy is RenderPolicy.MIX:
            rgba = render_mix(result, scaled)
        else:
            rgba = render_grayscale(result)

        for surface in app.outputs:
            surface.write(rgba)
        if app.input_surface is not None:
            app.input_surface.write(self._input_preview(frame.image))

        app.frames_processed += 1
        logger.debug("Frame %d rendered", app.frames_processed)
        return True

    def _input_preview(self, image: np.ndarray) -> np.ndarray:
        zoom = self.app.zoom
        if zoom is None:
            return image
        preview = image.copy()
        cv2.rectangle(
            preview, (zoom.x, zoom.y), (zoom.right - 1, zoom.bottom - 1),
            (255, 0, 0, 255), 1,
        )
        return preview

    def _closed_by_user(self) -> bool:
        return any(
            getattr(surface, "closed_by_user", False)
            for surface in self.app.all_surfaces()
        )

    async def run(self) -> int:
        """Start (if needed) and process frames until something stops the loop.

        Errors are logged and recorded in ``app.last_error``; they are not
        re-raised.  Cancellation is propagated.

        Returns:
            Number of frames processed.
        """
        app = self.app
        try:
            self.start()
            while app.state is LoopState.RUNNING:
                if app.max_frames is not None and app.frames_processed >= app.max_frames:
                    logger.info("Debug guard reached after %d frame(s)", app.frames_processed)
                    break
                if self._closed_by_user():
                    logger.info("Output window closed by user")
                    break
                if not await self.step():
                    logger.info("Source exhausted after %d frame(s)", app.frames_processed)
                    break
                await self.scheduler.wait_next_frame()
        except asyncio.CancelledError:
            logger.info("Frame loop cancelled")
            raise
        except Exception as e:
            app.last_error = e
            logger.error(f"Frame loop error: {e}", exc_info=True)
        finally:
            app.state = LoopState.STOPPED
        return app.frames_processed
