"""Abstract base class for all espcn-live frame sources."""

from abc import ABC, abstractmethod
from typing import Optional

from espcn_live.sources.frame import Frame


class FrameSource(ABC):
    """Where the frame loop pulls its pixels from.

    A source is opened once by :meth:`FrameLoop.start`, read once per cycle
    and closed when the loop shuts down.  Every frame it hands out is RGBA
    uint8, whatever the decoder produced.
    """

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @abstractmethod
    def open(self) -> None:
        """Acquire the decoder or device.  Opening twice is a no-op."""

    @abstractmethod
    def close(self) -> None:
        """Release the decoder or device."""

    @abstractmethod
    def read(self) -> Optional[Frame]:
        """Return the next frame, or ``None`` once nothing more will come."""

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    @abstractmethod
    def fps(self) -> float:
        """Rate the source produces frames at; ``0`` for still images.

        The frame loop paces itself to this when no refresh rate is set.
        """

    @property
    @abstractmethod
    def resolution(self) -> tuple[int, int]:
        """``(width, height)``; the zoom rect is clamped against this."""

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """``True`` between :meth:`open` and :meth:`close`."""

    def __enter__(self) -> "FrameSource":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
