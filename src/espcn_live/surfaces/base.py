"""Abstract base class for output surfaces."""

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np


class Surface(ABC):
    """Something RGBA frames can be drawn onto.

    Surfaces take ownership of nothing; ``write`` may be called with a new
    size at any time and the surface adapts (like a canvas being resized).
    """

    @abstractmethod
    def write(self, rgba: np.ndarray) -> None:
        """Draw an RGBA uint8 image of shape (H, W, 4)."""

    def close(self) -> None:
        """Release any resources.  Default: nothing to release."""

    @property
    def size(self) -> Optional[tuple[int, int]]:
        """``(width, height)`` of the last image written, if any."""
        return None

    def __enter__(self) -> "Surface":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
