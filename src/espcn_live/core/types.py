"""Core data types for espcn-live."""

from dataclasses import dataclass
from typing import Optional, Tuple
import numpy as np


# ============================================================================
# Tensors
# ============================================================================

@dataclass
class Tensor:
    """A flat float32 buffer with an associated shape.

    This is the unit of exchange with the inference runtimes.  ``data`` is
    always stored flat and row-major; use :meth:`to_array` for the shaped
    view.
    """
    data: np.ndarray
    shape: Tuple[int, ...]

    def __post_init__(self):
        self.data = np.asarray(self.data, dtype=np.float32).reshape(-1)
        self.shape = tuple(int(s) for s in self.shape)
        expected = int(np.prod(self.shape)) if self.shape else 1
        if self.data.size != expected:
            raise ValueError(
                f"Tensor data has {self.data.size} elements, "
                f"shape {self.shape} needs {expected}"
            )

    @classmethod
    def from_array(cls, array: np.ndarray) -> "Tensor":
        """Create a tensor from a shaped numpy array."""
        array = np.asarray(array, dtype=np.float32)
        return cls(data=array.reshape(-1), shape=array.shape)

    @property
    def dims(self) -> Tuple[int, ...]:
        """Alias for ``shape``."""
        return self.shape

    @property
    def height(self) -> int:
        return self.shape[-2]

    @property
    def width(self) -> int:
        return self.shape[-1]

    def to_array(self) -> np.ndarray:
        """Return the data reshaped to ``shape``."""
        return self.data.reshape(self.shape)

    def squeeze(self) -> "Tensor":
        """Drop all singleton axes."""
        return Tensor.from_array(np.squeeze(self.to_array()))

    def reshape(self, shape: Tuple[int, ...]) -> "Tensor":
        return Tensor(data=self.data, shape=shape)


# ============================================================================
# Geometry
# ============================================================================

@dataclass
class Rect:
    """Integer rectangle in pixel coordinates."""
    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def area(self) -> int:
        return self.width * self.height

    def fits_within(self, width: int, height: int) -> bool:
        """True when the rect lies fully inside a ``width`` x ``height`` image."""
        return (
            self.x >= 0 and self.y >= 0
            and self.width > 0 and self.height > 0
            and self.right <= width and self.bottom <= height
        )


@dataclass
class ZoomRect(Rect):
    """Fixed-size crop window that follows a pointer.

    The window is the model's input region in the zoom variant.  Its size
    never changes; :meth:`follow` only moves it.
    """
    x: int = 0
    y: int = 0
    width: int = 64
    height: int = 64
    zoom_factor: int = 4
    bounds: Optional[Tuple[int, int]] = None

    def bind(self, bounds_width: int, bounds_height: int) -> None:
        """Set the size of the surface the rect moves over."""
        self.bounds = (bounds_width, bounds_height)
        self.follow(self.x, self.y)

    def follow(self, px: int, py: int) -> None:
        """Move the rect's top-left corner to the pointer, clamped to bounds.

        Keeps a one-pixel margin on the right and bottom edges.
        """
        if self.bounds is None:
            self.x, self.y = int(px), int(py)
            return
        bw, bh = self.bounds
        self.x = max(0, min(bw - self.width - 1, int(px)))
        self.y = max(0, min(bh - self.height - 1, int(py)))

    def center_on(self, bounds_width: int, bounds_height: int) -> None:
        """Bind to the given bounds and move to their centre."""
        self.bind(bounds_width, bounds_height)
        self.follow(
            (bounds_width - self.width) // 2,
            (bounds_height - self.height) // 2,
        )

    @property
    def output_size(self) -> Tuple[int, int]:
        """``(width, height)`` of the upscaled window."""
        return (self.width * self.zoom_factor, self.height * self.zoom_factor)
