"""Inference runtime bindings for espcn-live."""

from espcn_live.core.enums import Backend
from espcn_live.inference.base import InferenceAdapter
from espcn_live.inference.onnx_adapter import OnnxAdapter
from espcn_live.inference.keras_adapter import KerasAdapter
from espcn_live.utils.config import ModelConfig


def create_adapter(config: ModelConfig) -> InferenceAdapter:
    """Build the adapter selected by ``config.backend``."""
    backend = Backend(config.backend)
    if backend is Backend.ONNX:
        return OnnxAdapter(
            model_path=config.path,
            input_name=config.input_name,
            output_name=config.output_name,
            providers=config.providers,
        )
    if backend is Backend.TENSORFLOW:
        return KerasAdapter(model_path=config.path, data_format=config.data_format)
    raise ValueError(f"Unsupported backend: {config.backend}")


__all__ = [
    "InferenceAdapter",
    "OnnxAdapter",
    "KerasAdapter",
    "create_adapter",
]
