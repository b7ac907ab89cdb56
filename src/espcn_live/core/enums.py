"""Core enumerations for espcn-live."""

from enum import Enum, auto


class LoopState(Enum):
    """Lifecycle of the frame loop."""
    IDLE = auto()      # model not loaded yet
    RUNNING = auto()
    STOPPED = auto()


class RenderPolicy(Enum):
    """How model output becomes output pixels."""
    GRAYSCALE = "grayscale"  # luminance written to R, G and B
    MIX = "mix"              # luminance recombined with scaled chrominance


class Backend(Enum):
    """Supported inference runtimes."""
    ONNX = "onnx"
    TENSORFLOW = "tensorflow"


class Lightness(Enum):
    """How a pixel's brightness is computed before it is fed to the model."""
    YUV = "yuv"    # Y of the YUV conversion
    MEAN = "mean"  # plain (R + G + B) / 3
