"""TensorFlow / Keras binding."""

import logging
from pathlib import Path
from typing import Any, Optional

import numpy as np

from espcn_live.core.types import Tensor
from espcn_live.inference.base import InferenceAdapter


logger = logging.getLogger(__name__)


class KerasAdapter(InferenceAdapter):
    """Run a Keras super-resolution model with TensorFlow.

    Output is squeezed to ``(H', W')`` and clipped to ``[0, 1]`` before it
    is returned as a ``[1, 1, H', W']`` tensor.

    Args:
        model_path: Path to a ``.keras`` / ``.h5`` file or SavedModel dir.
        data_format: ``"channels_first"`` feeds ``[1, 1, H, W]`` unchanged,
            ``"channels_last"`` feeds ``[1, H, W, 1]``.
        model: Already-built model (any callable accepting a batch array
            and ``training=False``).  When given, nothing is read from disk.
    """

    def __init__(
        self,
        model_path: Optional[str] = None,
        data_format: str = "channels_first",
        model: Optional[Any] = None,
    ):
        super().__init__()
        if data_format not in ("channels_first", "channels_last"):
            raise ValueError(f"Unknown data_format: {data_format}")
        self.model_path = model_path
        self.data_format = data_format
        self._model = model

    @property
    def name(self) -> str:
        return "tensorflow"

    def _load(self) -> None:
        if self._model is not None:
            return
        if self.model_path is None:
            raise ValueError("no model path given")
        if not Path(self.model_path).exists():
            raise FileNotFoundError(f"Model file not found: {self.model_path}")

        import tensorflow as tf

        logger.info("Loading Keras model %s", self.model_path)
        self._model = tf.keras.models.load_model(self.model_path, compile=False)

    def _infer(self, tensor: Tensor) -> Tensor:
        x = tensor.to_array()
        if self.data_format == "channels_last":
            x = np.transpose(x, (0, 2, 3, 1))
        out = np.asarray(self._model(x, training=False))
        out = np.clip(np.squeeze(out), 0.0, 1.0)
        if out.ndim != 2:
            raise ValueError(f"Expected single-channel output, got shape {out.shape}")
        h, w = out.shape
        return Tensor(data=out, shape=(1, 1, h, w))
