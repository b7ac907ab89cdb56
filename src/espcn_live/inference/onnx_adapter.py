"""ONNX Runtime binding."""

import logging
from pathlib import Path
from typing import Any, List, Optional

import numpy as np

from espcn_live.core.types import Tensor
from espcn_live.inference.base import InferenceAdapter


logger = logging.getLogger(__name__)


class OnnxAdapter(InferenceAdapter):
    """Run an ONNX super-resolution model with ``onnxruntime``.

    Args:
        model_path: Path to the ``.onnx`` file.
        input_name: Name of the input to feed; ``None`` uses the first one.
        output_name: Name of the output to return.  Falls back to the first
            output if the model has no output with this name.
        providers: Execution providers, e.g. ``["CPUExecutionProvider"]``.
            Empty means every provider available in this install.
        session: Already-created session (anything with ``get_inputs``,
            ``get_outputs`` and ``run``).  When given, nothing is read from
            disk on :meth:`load`.
    """

    def __init__(
        self,
        model_path: Optional[str] = None,
        input_name: Optional[str] = None,
        output_name: str = "output",
        providers: Optional[List[str]] = None,
        session: Optional[Any] = None,
    ):
        super().__init__()
        self.model_path = model_path
        self.input_name = input_name
        self.output_name = output_name
        self.providers = list(providers or [])
        self._session = session

    @property
    def name(self) -> str:
        return "onnx"

    def _load(self) -> None:
        if self._session is None:
            if self.model_path is None:
                raise ValueError("no model path given")
            if not Path(self.model_path).exists():
                raise FileNotFoundError(f"Model file not found: {self.model_path}")

            import onnxruntime as ort

            providers = self.providers or ort.get_available_providers()
            logger.info("Loading ONNX model %s (providers=%s)", self.model_path, providers)
            self._session = ort.InferenceSession(self.model_path, providers=providers)

        inputs = [i.name for i in self._session.get_inputs()]
        outputs = [o.name for o in self._session.get_outputs()]
        if self.input_name is None:
            self.input_name = inputs[0]
        elif self.input_name not in inputs:
            raise ValueError(f"Model has no input '{self.input_name}' (inputs: {inputs})")
        if self.output_name not in outputs:
            logger.warning(
                "Model has no output '%s', using '%s'", self.output_name, outputs[0]
            )
            self.output_name = outputs[0]

    def _infer(self, tensor: Tensor) -> Tensor:
        feed = {self.input_name: tensor.to_array().astype(np.float32)}
        (out,) = self._session.run([self.output_name], feed)
        return Tensor.from_array(out)
