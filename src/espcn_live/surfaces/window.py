"""OpenCV window surface."""

import logging
from typing import Callable, Optional

import cv2
import numpy as np

from espcn_live.surfaces.base import Surface

logger = logging.getLogger(__name__)


PointerHandler = Callable[[int, int], None]


class WindowSurface(Surface):
    """Shows frames in a HighGUI window.

    Pressing ``q`` or ``Esc`` in the window sets :attr:`closed_by_user`;
    the frame loop checks it and stops.

    Args:
        name: Window title.
        on_pointer: Called with ``(x, y)`` in image coordinates whenever the
            mouse moves over the window.
        hold: On close, keep the last frame up until a key is pressed.
            Single-frame runs would otherwise flash the window shut.
    """

    def __init__(
        self,
        name: str = "espcn-live",
        on_pointer: Optional[PointerHandler] = None,
        hold: bool = False,
    ):
        self.name = name
        self._on_pointer = on_pointer
        self.hold = hold
        self._created = False
        self._size: Optional[tuple[int, int]] = None
        self.closed_by_user = False

    def _ensure_window(self) -> None:
        if self._created:
            return
        cv2.namedWindow(self.name, cv2.WINDOW_AUTOSIZE)
        if self._on_pointer is not None:
            cv2.setMouseCallback(self.name, self._mouse_callback)
        self._created = True
        logger.info("Window opened: %s", self.name)

    def _mouse_callback(self, event, x, y, flags, param) -> None:
        if event == cv2.EVENT_MOUSEMOVE and self._on_pointer is not None:
            self._on_pointer(x, y)

    def write(self, rgba: np.ndarray) -> None:
        self._ensure_window()
        cv2.imshow(self.name, cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGR))
        h, w = rgba.shape[:2]
        self._size = (w, h)
        key = cv2.waitKey(1) & 0xFF
        if key in (ord('q'), 27):
            self.closed_by_user = True

    def close(self) -> None:
        if self._created:
            if self.hold and self._size is not None and not self.closed_by_user:
                logger.info("Press any key in '%s' to close", self.name)
                cv2.waitKey(0)
            cv2.destroyWindow(self.name)
            self._created = False
            logger.info("Window closed: %s", self.name)

    @property
    def size(self) -> Optional[tuple[int, int]]:
        return self._size
