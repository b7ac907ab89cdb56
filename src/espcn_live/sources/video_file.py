"""Video file frame source."""

import logging
from pathlib import Path
from typing import Optional

import cv2
import numpy as np

from espcn_live.core.errors import SourceError
from espcn_live.sources.base import FrameSource
from espcn_live.sources.frame import Frame

logger = logging.getLogger(__name__)


class VideoFileSource(FrameSource):
    """Decodes a video file, optionally rewinding at the end like a looping clip.

    Args:
        path: Any container OpenCV can decode.
        loop: Seek back to the first frame on EOF instead of ending.
    """

    def __init__(self, path: str | Path, loop: bool = False):
        self._path = Path(path)
        self._loop = loop
        self._cap: Optional[cv2.VideoCapture] = None
        self._clip_fps = 0.0
        self._size = (0, 0)
        self._served = 0   # frames handed out since open
        self._position = 0  # index of the next frame within the clip

    def open(self) -> None:
        if self._cap is not None:
            return
        if not self._path.exists():
            raise FileNotFoundError(f"Video file not found: {self._path}")

        cap = cv2.VideoCapture(str(self._path))
        if not cap.isOpened():
            raise SourceError(f"Could not open video: {self._path}")
        self._cap = cap
        self._clip_fps = cap.get(cv2.CAP_PROP_FPS) or 30.0
        self._size = (
            int(cap.get(cv2.CAP_PROP_FRAME_WIDTH)),
            int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT)),
        )
        self._served = 0
        self._position = 0
        logger.info(
            "Video opened: %s  %dx%d @ %.1f fps  loop=%s",
            self._path.name, *self._size, self._clip_fps, self._loop,
        )

    def close(self) -> None:
        if self._cap is None:
            return
        self._cap.release()
        self._cap = None
        logger.info("Video closed: %s", self._path.name)

    def _rewind(self) -> Optional[np.ndarray]:
        self._cap.set(cv2.CAP_PROP_POS_FRAMES, 0)
        self._position = 0
        ok, image = self._cap.read()
        return image if ok else None

    def read(self) -> Optional[Frame]:
        if self._cap is None:
            return None

        ok, image = self._cap.read()
        if not ok:
            # An empty clip would rewind forever
            if not self._loop or self._position == 0:
                return None
            logger.debug("End of %s, rewinding", self._path.name)
            image = self._rewind()
            if image is None:
                return None

        frame = Frame.from_bgr(
            image,
            timestamp=self._position / self._clip_fps,
            frame_number=self._served,
            source_name=f"file:{self._path.name}",
        )
        self._position += 1
        self._served += 1
        return frame

    @property
    def fps(self) -> float:
        return self._clip_fps

    @property
    def resolution(self) -> tuple[int, int]:
        return self._size

    @property
    def is_open(self) -> bool:
        return self._cap is not None
