"""Frame sources for the espcn-live loop.

Every source hands out RGBA uint8 :class:`Frame` objects, whether they come
from a webcam, a video file or a still image.

Quick start::

    from espcn_live.sources import VideoFileSource

    with VideoFileSource("demo.mp4", loop=True) as src:
        frame = src.read()
        tensor = extract_luminance(frame)
"""

from espcn_live.sources.frame import Frame
from espcn_live.sources.base import FrameSource
from espcn_live.sources.webcam import WebcamSource
from espcn_live.sources.video_file import VideoFileSource
from espcn_live.sources.image import ImageSource

__all__ = [
    "Frame",
    "FrameSource",
    "WebcamSource",
    "VideoFileSource",
    "ImageSource",
]
