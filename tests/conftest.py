"""Pytest configuration and shared fixtures for espcn-live tests."""

from typing import Callable, Optional

import numpy as np
import pytest

from espcn_live.core.types import Tensor
from espcn_live.inference.base import InferenceAdapter

# Configure pytest-asyncio
pytest_plugins = ['pytest_asyncio']


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "runtime: mark test as requiring a real inference runtime"
    )


class FakeAdapter(InferenceAdapter):
    """In-process stand-in for an inference runtime.

    Upscales by nearest-neighbour repetition and optionally applies ``fn``
    to the result.
    """

    def __init__(
        self,
        factor: int = 1,
        fn: Optional[Callable[[np.ndarray], np.ndarray]] = None,
        fail_on_load: bool = False,
        fail_on_call: Optional[int] = None,
    ):
        super().__init__()
        self.factor = factor
        self.fn = fn
        self.fail_on_load = fail_on_load
        self.fail_on_call = fail_on_call
        self.calls = 0
        self.inputs = []

    @property
    def name(self) -> str:
        return "fake"

    def _load(self) -> None:
        if self.fail_on_load:
            raise RuntimeError("model file is corrupt")

    def _infer(self, tensor: Tensor) -> Tensor:
        self.calls += 1
        self.inputs.append(tensor)
        if self.fail_on_call is not None and self.calls >= self.fail_on_call:
            raise RuntimeError("kernel crashed")
        arr = tensor.to_array()
        if self.factor > 1:
            arr = np.repeat(np.repeat(arr, self.factor, axis=2), self.factor, axis=3)
        if self.fn is not None:
            arr = self.fn(arr)
        return Tensor.from_array(arr)


def make_rgba(height: int, width: int, rgb=(255, 255, 255), alpha: int = 255) -> np.ndarray:
    """Solid-colour RGBA image."""
    image = np.empty((height, width, 4), dtype=np.uint8)
    image[..., 0] = rgb[0]
    image[..., 1] = rgb[1]
    image[..., 2] = rgb[2]
    image[..., 3] = alpha
    return image


@pytest.fixture
def fake_adapter():
    return FakeAdapter()


@pytest.fixture
def adapter_factory():
    """The :class:`FakeAdapter` class, for tests that need custom options."""
    return FakeAdapter


@pytest.fixture
def rgba():
    """The :func:`make_rgba` helper."""
    return make_rgba


@pytest.fixture
def white_image():
    return make_rgba(8, 10)
