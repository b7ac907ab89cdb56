"""Frame dataclass for the espcn-live FrameSource abstraction."""

from dataclasses import dataclass

import cv2
import numpy as np


def _to_uint8(image: np.ndarray) -> np.ndarray:
    """Rescale a 16-bit or float decode to 8 bits per channel."""
    if image.dtype == np.uint8:
        return image
    if image.dtype == np.uint16:
        return np.round(image / 257.0).astype(np.uint8)
    if np.issubdtype(image.dtype, np.floating):
        # float images (EXR, TIFF) are nominally in [0, 1]
        return np.clip(np.round(image * 255.0), 0, 255).astype(np.uint8)
    return np.clip(image, 0, 255).astype(np.uint8)


@dataclass
class Frame:
    """A single RGBA frame with metadata.

    Attributes:
        image: RGBA uint8 numpy array of shape (H, W, 4).
        timestamp: Seconds since the source was opened (monotonic for live
            sources, video-time for file sources).
        frame_number: Sequential counter starting from 0.
        source_name: Human-readable identifier, e.g. ``"webcam:0"``,
            ``"file:video.mp4"``, ``"image:lr.png"``.
        width: Frame width in pixels.
        height: Frame height in pixels.
    """

    image: np.ndarray
    timestamp: float
    frame_number: int
    source_name: str
    width: int
    height: int

    @classmethod
    def from_bgr(
        cls,
        image: np.ndarray,
        timestamp: float,
        frame_number: int,
        source_name: str,
    ) -> "Frame":
        """Wrap an OpenCV BGR (or BGRA / grey) image as an RGBA uint8 frame.

        Deeper decodes such as 16-bit PNGs are scaled down to 8 bits first.
        """
        image = _to_uint8(image)
        if image.ndim == 2:
            rgba = cv2.cvtColor(image, cv2.COLOR_GRAY2RGBA)
        elif image.shape[2] == 4:
            rgba = cv2.cvtColor(image, cv2.COLOR_BGRA2RGBA)
        else:
            rgba = cv2.cvtColor(image, cv2.COLOR_BGR2RGBA)
        h, w = rgba.shape[:2]
        return cls(
            image=rgba,
            timestamp=timestamp,
            frame_number=frame_number,
            source_name=source_name,
            width=w,
            height=h,
        )
