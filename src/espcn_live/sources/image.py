"""Still-image frame source.

Behaves like a static ``<img>`` that is drawn again on every refresh.  With
``repeat=False`` the image is delivered once and the source then reports
exhaustion, which ends the frame loop after a single pass.
"""

import logging
from pathlib import Path
from typing import Optional

import cv2
import numpy as np

from espcn_live.core.errors import SourceError
from espcn_live.sources.base import FrameSource
from espcn_live.sources.frame import Frame

logger = logging.getLogger(__name__)


class ImageSource(FrameSource):
    """Frame source backed by a single image file or an in-memory array.

    Args:
        path: Image file readable by OpenCV.  Ignored when ``image`` is given.
        image: RGBA uint8 array to serve instead of reading a file.
        repeat: Serve the image on every read rather than only the first.
    """

    def __init__(
        self,
        path: Optional[str | Path] = None,
        image: Optional[np.ndarray] = None,
        repeat: bool = True,
    ):
        if path is None and image is None:
            raise ValueError("ImageSource needs a path or an image")
        self._path = str(path) if path is not None else None
        self._preloaded = image
        self._repeat = repeat

        self._image: Optional[np.ndarray] = None
        self._delivered = 0

    def open(self) -> None:
        if self._image is not None:
            return
        if self._preloaded is not None:
            self._image = np.ascontiguousarray(self._preloaded, dtype=np.uint8)
        else:
            if not Path(self._path).exists():
                raise FileNotFoundError(f"Image file not found: {self._path}")
            # UNCHANGED keeps alpha; Frame.from_bgr reduces 16-bit to 8-bit
            decoded = cv2.imread(self._path, cv2.IMREAD_UNCHANGED)
            if decoded is None:
                raise SourceError(f"Could not decode image: {self._path}")
            if decoded.dtype != np.uint8:
                logger.info("Reducing %s image to 8 bits per channel", decoded.dtype)
            self._image = Frame.from_bgr(decoded, 0.0, 0, self.source_name).image
        self._delivered = 0
        h, w = self._image.shape[:2]
        logger.info("ImageSource opened: %s  %dx%d", self.source_name, w, h)

    def close(self) -> None:
        self._image = None

    def read(self) -> Optional[Frame]:
        if self._image is None:
            return None
        if not self._repeat and self._delivered:
            return None
        h, w = self._image.shape[:2]
        frame = Frame(
            image=self._image.copy(),
            timestamp=0.0,
            frame_number=self._delivered,
            source_name=self.source_name,
            width=w,
            height=h,
        )
        self._delivered += 1
        return frame

    @property
    def source_name(self) -> str:
        if self._path is not None:
            return f"image:{Path(self._path).name}"
        return "image:<array>"

    @property
    def fps(self) -> float:
        return 0.0

    @property
    def resolution(self) -> tuple[int, int]:
        if self._image is None:
            return (0, 0)
        h, w = self._image.shape[:2]
        return (w, h)

    @property
    def is_open(self) -> bool:
        return self._image is not None
