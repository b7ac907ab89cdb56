"""Inference adapter interface.

The only thing the frame loop needs from an ML runtime is
``infer(tensor) -> tensor``.  Each runtime binding implements this one
seam; everything else about models (format, kernels, devices) stays inside
the runtime.
"""

import logging
from abc import ABC, abstractmethod

from espcn_live.core.errors import AdapterNotLoadedError, InferenceError
from espcn_live.core.types import Tensor


logger = logging.getLogger(__name__)


class InferenceAdapter(ABC):
    """Abstract base class for inference runtime bindings.

    Subclasses must implement:
    - _load(): Load the model artifact
    - _infer(): Run the loaded model on one ``[1, 1, H, W]`` tensor
    - name: Property returning a short runtime name for logs
    """

    def __init__(self):
        self._loaded = False

    @property
    @abstractmethod
    def name(self) -> str:
        """Short runtime name, e.g. ``"onnx"``."""
        pass

    @abstractmethod
    def _load(self) -> None:
        pass

    @abstractmethod
    def _infer(self, tensor: Tensor) -> Tensor:
        pass

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def load(self) -> None:
        """Load the model.  Safe to call more than once.

        Raises:
            InferenceError: if the runtime cannot load the model.
        """
        if self._loaded:
            return
        try:
            self._load()
        except InferenceError:
            raise
        except Exception as e:
            raise InferenceError(f"{self.name}: failed to load model: {e}") from e
        self._loaded = True
        logger.info("Model loaded (%s)", self.name)

    def infer(self, tensor: Tensor) -> Tensor:
        """Run the model on one input tensor.

        Raises:
            AdapterNotLoadedError: if :meth:`load` has not succeeded.
            InferenceError: if the runtime fails.
        """
        if not self._loaded:
            raise AdapterNotLoadedError(f"{self.name}: infer() called before load()")
        try:
            return self._infer(tensor)
        except InferenceError:
            raise
        except Exception as e:
            raise InferenceError(f"{self.name}: inference failed: {e}") from e
