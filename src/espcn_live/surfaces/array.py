"""In-memory surface that keeps the last frame written."""

from typing import List, Optional

import numpy as np

from espcn_live.surfaces.base import Surface


class ArraySurface(Surface):
    """Keeps the most recent image (and optionally every image) in memory.

    Args:
        keep_history: Store a copy of every frame in :attr:`history`.
    """

    def __init__(self, keep_history: bool = False):
        self._keep_history = keep_history
        self.image: Optional[np.ndarray] = None
        self.history: List[np.ndarray] = []
        self.writes = 0

    def write(self, rgba: np.ndarray) -> None:
        self.image = rgba.copy()
        if self._keep_history:
            self.history.append(self.image)
        self.writes += 1

    @property
    def size(self) -> Optional[tuple[int, int]]:
        if self.image is None:
            return None
        h, w = self.image.shape[:2]
        return (w, h)
