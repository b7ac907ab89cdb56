"""Live camera frame source."""

import logging
import time
from typing import Optional

import cv2

from espcn_live.core.errors import SourceError
from espcn_live.sources.base import FrameSource
from espcn_live.sources.frame import Frame

logger = logging.getLogger(__name__)


class WebcamSource(FrameSource):
    """Grabs frames from a camera through ``cv2.VideoCapture``.

    Args:
        device: Camera index or device path such as ``"/dev/video0"``.
        fps: Rate requested from the driver; also reported as :attr:`fps`
            when the driver does not say what it actually delivers.
    """

    def __init__(self, device: int | str = 0, fps: float = 30.0):
        self._device = device
        self._requested_fps = fps
        self._cap: Optional[cv2.VideoCapture] = None
        self._opened_at = 0.0
        self._grabbed = 0

    def open(self) -> None:
        if self._cap is not None:
            return
        cap = cv2.VideoCapture(self._device)
        if not cap.isOpened():
            raise SourceError(f"Could not open webcam device: {self._device}")
        cap.set(cv2.CAP_PROP_FPS, self._requested_fps)
        self._cap = cap
        self._opened_at = time.monotonic()
        self._grabbed = 0

        w, h = self.resolution
        logger.info("Webcam %s opened: %dx%d @ %.1f fps", self._device, w, h, self.fps)

    def close(self) -> None:
        if self._cap is None:
            return
        self._cap.release()
        self._cap = None
        logger.info("Webcam %s released", self._device)

    def read(self) -> Optional[Frame]:
        if self._cap is None:
            return None
        ok, image = self._cap.read()
        if not ok:
            logger.warning("Webcam %s returned no frame", self._device)
            return None
        frame = Frame.from_bgr(
            image,
            timestamp=time.monotonic() - self._opened_at,
            frame_number=self._grabbed,
            source_name=f"webcam:{self._device}",
        )
        self._grabbed += 1
        return frame

    @property
    def fps(self) -> float:
        if self._cap is None:
            return self._requested_fps
        return self._cap.get(cv2.CAP_PROP_FPS) or self._requested_fps

    @property
    def resolution(self) -> tuple[int, int]:
        if self._cap is None:
            return (0, 0)
        return (
            int(self._cap.get(cv2.CAP_PROP_FRAME_WIDTH)),
            int(self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT)),
        )

    @property
    def is_open(self) -> bool:
        return self._cap is not None
