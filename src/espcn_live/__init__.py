"""espcn-live - real-time ESPCN super-resolution on video frames.

Frames are reduced to luminance, upscaled by a pretrained ESPCN model running
in ONNX Runtime or TensorFlow, and turned back into RGBA pixels.
"""

__version__ = "0.1.0"
