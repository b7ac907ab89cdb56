"""Command line entry point.

Usage:
    espcn-live video --input clip.mp4 --model models/ESPCN.onnx
    espcn-live zoom --input clip.mp4 --backend tensorflow --model models/ESPCN.keras
    espcn-live image --input lr.png --output sr.png
"""

import argparse
import asyncio
import logging
import sys
from typing import Any, Dict, List, Optional

import yaml

from espcn_live import __version__
from espcn_live.app import build_app
from espcn_live.utils.config import load_config


logger = logging.getLogger(__name__)


def _parse_overrides(items: List[str]) -> Dict[str, Any]:
    """Turn ``key=value`` strings into an overrides dict, YAML-typing values."""
    overrides = {}
    for item in items:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"Override must be key=value: {item}")
        overrides[key.strip()] = yaml.safe_load(value)
    return overrides


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="espcn-live",
        description="Real-time ESPCN super-resolution on video, webcam or images",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", default=None,
                        help="YAML config file (default: config/default.yaml)")
    parser.add_argument("-o", "--set", dest="overrides", action="append", default=[],
                        metavar="KEY=VALUE",
                        help="Config override with dotted key, e.g. loop.fps=30")

    sub = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--input", help="Input video / image path")
    common.add_argument("--model", help="Model artifact path")
    common.add_argument("--backend", choices=["onnx", "tensorflow"],
                        help="Inference runtime")
    common.add_argument("--max-frames", type=int, default=None,
                        help="Stop after N frames (debug)")
    common.add_argument("--output", help="Write output to this video / image path")
    common.add_argument("--lightness", choices=["yuv", "mean"], default=None,
                        help="Brightness fed to the model (image default: mean)")
    common.add_argument("--no-display", action="store_true",
                        help="Do not open preview windows")

    video = sub.add_parser("video", parents=[common],
                           help="Full-frame grayscale super-resolution")
    video.add_argument("--webcam", type=int, default=None, metavar="DEVICE",
                       help="Read from a webcam instead of --input")

    zoom = sub.add_parser("zoom", parents=[common],
                          help="Zoom window with colour recombination")
    zoom.add_argument("--webcam", type=int, default=None, metavar="DEVICE",
                      help="Read from a webcam instead of --input")
    zoom.add_argument("--zoom-size", type=int, default=None,
                      help="Zoom window width and height in pixels")
    zoom.add_argument("--factor", type=int, default=None,
                      help="Model upscale factor")

    sub.add_parser("image", parents=[common],
                   help="Run the model once on a still image")
    return parser


def _command_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if args.command == "image":
        overrides["source.kind"] = "image"
        overrides["loop.policy"] = "grayscale"
        overrides["loop.max_frames"] = 1
        overrides["source.loop"] = False
        overrides["loop.lightness"] = args.lightness or "mean"
        if not args.no_display:
            overrides["output.hold_window"] = True
    else:
        overrides["loop.policy"] = "mix" if args.command == "zoom" else "grayscale"
        if args.webcam is not None:
            overrides["source.kind"] = "webcam"
            overrides["source.device"] = args.webcam
        elif args.input:
            overrides["source.kind"] = "video"
        if args.lightness:
            overrides["loop.lightness"] = args.lightness

    if args.input:
        overrides["source.path"] = args.input
    if args.model:
        overrides["model.path"] = args.model
    if args.backend:
        overrides["model.backend"] = args.backend
    if args.max_frames is not None:
        overrides["loop.max_frames"] = args.max_frames
    if args.no_display:
        overrides["output.show_window"] = False
    if args.output:
        key = "output.image_path" if args.command == "image" else "output.video_path"
        overrides[key] = args.output
    if args.command == "zoom":
        if args.zoom_size is not None:
            overrides["zoom.width"] = args.zoom_size
            overrides["zoom.height"] = args.zoom_size
        if args.factor is not None:
            overrides["zoom.factor"] = args.factor
    return overrides


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the ``espcn-live`` command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        overrides = _parse_overrides(args.overrides)
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))
    overrides.update(_command_overrides(args))

    config = load_config(args.config, overrides=overrides)
    try:
        loop = build_app(config)
    except ValueError as e:
        logger.error(str(e))
        return 2

    try:
        frames = asyncio.run(loop.run())
    except KeyboardInterrupt:
        logger.info("Interrupted")
        frames = loop.app.frames_processed
    finally:
        loop.close()

    logger.info("Processed %d frame(s)", frames)
    return 1 if loop.app.last_error is not None else 0


if __name__ == "__main__":
    sys.exit(main())
