"""Render an escape-time fractal or gradient-noise field as terminal glyphs.

Loads a render.v1 YAML config (or the built-in defaults), applies CLI
overrides, re-validates, configures logging, and runs render_main().

CLI:
    python scripts/render.py                                    # defaults: fractal, terminal-sized
    python scripts/render.py --config configs/render_fractal_v1.yaml --cols 100 --rows 50
    python scripts/render.py --mode noise --seed 7 --frames 60 --scale 0.05
    python scripts/render.py --max-iter 64 --method vectorized \\
                             --text-out out/frame.txt --image-out out/frame.png \\
                             --manifest-out out/manifest.yaml

Glyph rows go to stdout; logs go to stderr.

Exit codes:
    0: Rendered successfully
    2: Invalid arguments or configuration
"""

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

from src.ascii_fields.pipeline import render_main
from src.utils import validators
from src.utils.logging_config import install_excepthook, setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Render a Mandelbrot-style escape-time field or gradient noise as ASCII"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to render.v1 YAML config (defaults built in)",
    )
    parser.add_argument(
        "--mode",
        choices=["fractal", "noise"],
        help="Field to render",
    )
    parser.add_argument(
        "--cols",
        type=int,
        help="Fixed grid width (disables terminal probing)",
    )
    parser.add_argument(
        "--rows",
        type=int,
        help="Fixed grid height (disables terminal probing)",
    )
    parser.add_argument(
        "--precision",
        choices=["single", "double"],
        help="Floating-point width for the fractal path",
    )
    parser.add_argument(
        "--method",
        choices=["reference", "vectorized"],
        help="Per-cell reference loop or numpy whole-grid evaluation",
    )
    parser.add_argument(
        "--max-iter",
        type=int,
        help="Escape-time iteration cap",
    )
    parser.add_argument(
        "--bounds",
        type=float,
        nargs=4,
        metavar=("RE_MIN", "IM_MIN", "RE_MAX", "IM_MAX"),
        help="Complex-plane rectangle for the fractal",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Noise table seed (omit for fresh entropy)",
    )
    parser.add_argument(
        "--scale",
        type=float,
        help="Noise lattice units per glyph cell",
    )
    parser.add_argument(
        "--frames",
        type=int,
        help="Number of noise frames to draw",
    )
    parser.add_argument(
        "--fps",
        type=float,
        help="Noise frame rate when --frames > 1",
    )
    parser.add_argument(
        "--ramp",
        type=str,
        help="Glyph ramp for the selected mode (densest/lowest first)",
    )
    parser.add_argument(
        "--no-banner",
        action="store_true",
        help="Skip the build/terminal banner",
    )
    parser.add_argument(
        "--text-out",
        type=str,
        help="Write the last frame to this text file",
    )
    parser.add_argument(
        "--image-out",
        type=str,
        help="Write the last intensity grid to this PNG",
    )
    parser.add_argument(
        "--manifest-out",
        type=str,
        help="Write a render manifest YAML",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        help="DEBUG, INFO, WARNING, ERROR",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        help="Emit logs as JSON lines",
    )
    return parser


def overrides_from_args(args: argparse.Namespace, current_mode: str = "fractal") -> Dict[str, Any]:
    """Nested config overrides for every CLI flag that was given."""
    overrides: Dict[str, Any] = {}

    def put(section: Optional[str], key: str, value: Any) -> None:
        if value is None:
            return
        if section is None:
            overrides[key] = value
        else:
            overrides.setdefault(section, {})[key] = value

    put(None, "mode", args.mode)
    put(None, "precision", args.precision)
    put(None, "method", args.method)

    if args.cols is not None or args.rows is not None:
        put("grid", "auto_size", False)
    put("grid", "cols", args.cols)
    put("grid", "rows", args.rows)

    put("fractal", "max_iter", args.max_iter)
    if args.bounds is not None:
        re_min, im_min, re_max, im_max = args.bounds
        put("fractal", "bounds", {"min": [re_min, im_min], "max": [re_max, im_max]})

    put("noise", "seed", args.seed)
    put("noise", "scale", args.scale)
    put("noise", "frames", args.frames)
    put("noise", "fps", args.fps)

    if args.ramp is not None:
        mode = args.mode or current_mode
        put(mode, "ramp", args.ramp)

    if args.no_banner:
        put("output", "banner", False)
    put("output", "text_path", args.text_out)
    put("output", "image_path", args.image_out)
    put("output", "manifest_path", args.manifest_out)

    put("logging", "level", args.log_level)
    if args.log_json:
        put("logging", "json_format", True)

    return overrides


def load_config(args: argparse.Namespace) -> validators.RenderConfigV1:
    if args.config:
        cfg = validators.load_render_config(args.config)
    else:
        cfg = validators.RenderConfigV1()
    return validators.apply_overrides(cfg, overrides_from_args(args, current_mode=cfg.mode))


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        cfg = load_config(args)
    except (FileNotFoundError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    setup_logging(
        log_level=cfg.logging.level,
        log_file=cfg.logging.file,
        json=cfg.logging.json_format,
        color=cfg.logging.color,
        context={"app": "render"},
    )
    install_excepthook()

    try:
        render_main(cfg)
    except KeyboardInterrupt:
        logger.info("Interrupted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
