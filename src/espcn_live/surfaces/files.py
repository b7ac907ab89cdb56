"""Surfaces that write frames to disk."""

import logging
from pathlib import Path
from typing import Optional

import cv2
import numpy as np

from espcn_live.core.errors import EspcnLiveError
from espcn_live.surfaces.base import Surface

logger = logging.getLogger(__name__)


class VideoWriterSurface(Surface):
    """Appends frames to a video file.

    The writer is created on the first frame, so the output size follows
    whatever the model produces.  Later frames of a different size are
    resized to the first frame's size.

    Args:
        path: Output file (``.mp4`` is written with the ``mp4v`` codec).
        fps: Frame rate stored in the container.
    """

    def __init__(self, path: str | Path, fps: float = 30.0, fourcc: str = "mp4v"):
        self._path = Path(path)
        self._fps = fps
        self._fourcc = fourcc
        self._writer: Optional[cv2.VideoWriter] = None
        self._size: Optional[tuple[int, int]] = None
        self.frames_written = 0

    def write(self, rgba: np.ndarray) -> None:
        h, w = rgba.shape[:2]
        if self._writer is None:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fourcc = cv2.VideoWriter_fourcc(*self._fourcc)
            self._writer = cv2.VideoWriter(str(self._path), fourcc, self._fps, (w, h))
            if not self._writer.isOpened():
                self._writer = None
                raise EspcnLiveError(f"Could not open video writer: {self._path}")
            self._size = (w, h)
            logger.info("Writing video: %s  %dx%d @ %.1f fps", self._path, w, h, self._fps)

        bgr = cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGR)
        if (w, h) != self._size:
            bgr = cv2.resize(bgr, self._size)
        self._writer.write(bgr)
        self.frames_written += 1

    def close(self) -> None:
        if self._writer is not None:
            self._writer.release()
            self._writer = None
            logger.info("Video closed: %s (%d frames)", self._path, self.frames_written)

    @property
    def size(self) -> Optional[tuple[int, int]]:
        return self._size


class ImageFileSurface(Surface):
    """Writes frames as PNG images.

    Args:
        path: Output path.  If it contains ``{frame}`` it is formatted with
            a running frame counter and every frame is kept; otherwise each
            write overwrites the same file.
    """

    def __init__(self, path: str | Path):
        self._path = str(path)
        self._count = 0
        self._size: Optional[tuple[int, int]] = None

    def write(self, rgba: np.ndarray) -> None:
        target = Path(self._path.format(frame=self._count))
        target.parent.mkdir(parents=True, exist_ok=True)
        if not cv2.imwrite(str(target), cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGRA)):
            raise EspcnLiveError(f"Could not write image: {target}")
        h, w = rgba.shape[:2]
        self._size = (w, h)
        self._count += 1
        logger.debug("Wrote %s", target)

    @property
    def size(self) -> Optional[tuple[int, int]]:
        return self._size
