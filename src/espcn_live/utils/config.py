"""Configuration management for espcn-live."""

import logging
from pathlib import Path
from typing import Optional, Dict, Any, List, Literal

import yaml
from pydantic import BaseModel, Field, field_validator

from espcn_live.core.enums import Backend, Lightness, RenderPolicy


logger = logging.getLogger(__name__)


class ModelConfig(BaseModel):
    """Configuration for the inference runtime and model artifact."""
    backend: Backend = Backend.ONNX
    path: str = "models/ESPCN.onnx"
    input_name: Optional[str] = None  # None = model's first input
    output_name: str = "output"
    # ONNX Runtime execution providers, empty = all available
    providers: List[str] = Field(default_factory=list)
    # Keras models usually expect NHWC; the ONNX export is NCHW
    data_format: Literal["channels_first", "channels_last"] = "channels_first"

    model_config = {"extra": "allow"}


class SourceConfig(BaseModel):
    """Where frames come from."""
    kind: Literal["video", "webcam", "image"] = "video"
    path: Optional[str] = None
    device: int = 0
    loop: bool = True  # rewind videos on EOF; False serves an image once


class LoopConfig(BaseModel):
    """Frame loop pacing and debug guard."""
    fps: float = 60.0  # display refresh rate; 0 = pace to the source
    max_frames: Optional[int] = None  # stop after N frames (debug)
    policy: RenderPolicy = RenderPolicy.GRAYSCALE
    lightness: Lightness = Lightness.YUV

    @field_validator("fps")
    @classmethod
    def validate_fps(cls, v: float) -> float:
        if v < 0:
            raise ValueError("fps must be >= 0")
        return v

    @field_validator("max_frames")
    @classmethod
    def validate_max_frames(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError("max_frames must be >= 0")
        return v


class ZoomConfig(BaseModel):
    """Zoom rectangle used as model input in the colour-mix variant."""
    width: int = 64
    height: int = 64
    factor: int = 4  # must match the model's upscale factor
    x: Optional[int] = None  # None = centred
    y: Optional[int] = None


class OutputConfig(BaseModel):
    """Where rendered frames go."""
    show_window: bool = False
    window_name: str = "espcn-live"
    hold_window: bool = False  # wait for a key before closing the window
    video_path: Optional[str] = None
    video_fps: float = 30.0
    image_path: Optional[str] = None


class LoggingConfig(BaseModel):
    """Configuration for logging."""
    level: str = "INFO"
    log_to_file: bool = False
    log_directory: str = "logs"
    max_log_size_mb: int = 100
    backup_count: int = 5


class EspcnLiveConfig(BaseModel):
    """Root configuration for espcn-live."""

    project_name: str = "espcn-live"
    debug_mode: bool = False

    model: ModelConfig = Field(default_factory=ModelConfig)
    source: SourceConfig = Field(default_factory=SourceConfig)
    loop: LoopConfig = Field(default_factory=LoopConfig)
    zoom: ZoomConfig = Field(default_factory=ZoomConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def setup_logging(self) -> None:
        """Configure logging based on config."""
        log_level = getattr(logging, self.logging.level.upper())

        handlers = []

        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

        if self.logging.log_to_file:
            log_dir = Path(self.logging.log_directory)
            log_dir.mkdir(exist_ok=True, parents=True)

            from logging.handlers import RotatingFileHandler
            file_handler = RotatingFileHandler(
                log_dir / "espcn_live.log",
                maxBytes=self.logging.max_log_size_mb * 1024 * 1024,
                backupCount=self.logging.backup_count
            )
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            handlers.append(file_handler)

        logging.basicConfig(
            level=log_level,
            handlers=handlers,
            force=True
        )

        logger.info(f"Logging configured: level={self.logging.level}")


def load_config(
    config_path: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None
) -> EspcnLiveConfig:
    """Load configuration from YAML file with optional overrides.

    Args:
        config_path: Path to YAML config file. If None, uses default.yaml
        overrides: Dictionary of config overrides (nested keys with dots)

    Returns:
        Validated EspcnLiveConfig instance

    Example:
        >>> config = load_config("config/zoom.yaml")
        >>> config = load_config(overrides={"loop.max_frames": 1})
    """
    if config_path is None:
        repo_root = Path(__file__).parent.parent.parent.parent
        config_path = repo_root / "config" / "default.yaml"
    else:
        config_path = Path(config_path)

    config_dict = {}
    if config_path.exists():
        logger.info(f"Loading config from {config_path}")
        with open(config_path) as f:
            config_dict = yaml.safe_load(f) or {}
    else:
        logger.warning(f"Config file not found: {config_path}, using defaults")

    if overrides:
        config_dict = _apply_overrides(config_dict, overrides)

    config = EspcnLiveConfig(**config_dict)
    config.setup_logging()

    return config


def _apply_overrides(
    config_dict: Dict[str, Any],
    overrides: Dict[str, Any]
) -> Dict[str, Any]:
    """Apply nested overrides to config dictionary.

    Example:
        overrides = {"loop.max_frames": 1}
        -> config_dict["loop"]["max_frames"] = 1
    """
    for key, value in overrides.items():
        keys = key.split(".")
        d = config_dict
        for k in keys[:-1]:
            d = d.setdefault(k, {})
        d[keys[-1]] = value
    return config_dict
