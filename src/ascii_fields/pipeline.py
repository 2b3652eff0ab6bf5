"""Render pipeline: validated config -> glyph frames -> stream + artifacts.

Runs one render job end to end:
    1. Resolve grid size (fixed, or probed terminal size clamped to range)
    2. Build GridDriver and the field (escape-time evaluator or noise field)
    3. Render one fractal frame, or `noise.frames` noise frames with the
       window shifted by `noise.drift` each frame
    4. Write optional banner and rows to the output stream
    5. Persist optional artifacts atomically:
        - text: last frame, one row per line
        - image: last intensity grid as 8-bit grayscale PNG
        - manifest: build info, resolved config, grid size, timings, hashes

Used by:
    - CLI: scripts/render.py
    - Tests: render_main(cfg, stream=io.StringIO(), term_size=(100, 50))
"""

import logging
import sys
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TextIO, Tuple

import numpy as np

from src.utils import fs, hashing
from src.utils.logging_config import pop_context, push_context
from src.utils.profiler import TimerAccumulator, timer
from src.utils.validators import RenderConfigV1

from .escape_time import ComplexFieldEvaluator
from .gradient_noise import GradientNoiseField
from .grid_driver import GridDriver
from .host import build_info, clamp_dimensions, format_banner, probe_terminal_size
from .quantizer import SymbolRamp

logger = logging.getLogger(__name__)

# Move the cursor up n lines (redraw animated frames in place)
CURSOR_UP = "\033[{n}A"


def resolve_grid_size(
    cfg: RenderConfigV1,
    term_size: Optional[Tuple[int, int]] = None
) -> Tuple[Tuple[int, int], Tuple[int, int]]:
    """Terminal size and output grid size.

    Returns
    -------
    tuple
        ((term_cols, term_rows), (cols, rows))
    """
    term = term_size if term_size is not None else probe_terminal_size()
    if cfg.grid.auto_size:
        out = clamp_dimensions(term, cfg.grid.cols_range, cfg.grid.rows_range)
    else:
        out = (cfg.grid.cols, cfg.grid.rows)
    return term, out


def noise_window(
    cfg: RenderConfigV1,
    cols: int,
    rows: int,
    frame: int
) -> Tuple[Tuple[float, float], Tuple[float, float]]:
    """Lattice-space rectangle covered by a noise frame."""
    scale = cfg.noise.scale
    ox = cfg.noise.origin[0] + cfg.noise.drift[0] * frame
    oy = cfg.noise.origin[1] + cfg.noise.drift[1] * frame
    return (ox, oy), (ox + cols * scale, oy + rows * scale)


def _render_fractal(cfg: RenderConfigV1, driver: GridDriver) -> Tuple[List[str], np.ndarray]:
    evaluator = ComplexFieldEvaluator(cfg.fractal.max_iter, precision=cfg.precision)
    ramp = SymbolRamp(cfg.fractal.ramp)
    lo = complex(*cfg.fractal.bounds.min)
    hi = complex(*cfg.fractal.bounds.max)

    counts = driver.fractal_intensities(evaluator, lo, hi)
    rows = driver.fractal_glyphs(counts, ramp)
    return rows, (counts & 0xFF).astype(np.uint8)


def _write_frame(stream: TextIO, rows: List[str], redraw: bool) -> None:
    if redraw and rows:
        stream.write(CURSOR_UP.format(n=len(rows)))
    for row in rows:
        stream.write(row + "\n")
    stream.flush()


def render_main(
    cfg: RenderConfigV1,
    stream: Optional[TextIO] = None,
    term_size: Optional[Tuple[int, int]] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Dict[str, Any]:
    """Run a render job.

    Parameters
    ----------
    cfg : RenderConfigV1
        Validated configuration
    stream : TextIO, optional
        Destination for banner and glyph rows, default sys.stdout
    term_size : tuple, optional
        (cols, rows) to use instead of probing the terminal
    sleep : Callable[[float], None]
        Frame pacing function (injectable for tests)

    Returns
    -------
    Dict[str, Any]
        - rows, cols: output grid size
        - frames: number of frames rendered
        - lines: glyph rows of the last frame
        - text_sha256: hash of the last frame's text
        - elapsed_s: total render time (excludes pacing)
        - text_path, image_path, manifest_path: artifact paths or None
    """
    stream = stream if stream is not None else sys.stdout
    push_context(mode=cfg.mode)

    try:
        term, (cols, rows) = resolve_grid_size(cfg, term_size)
        driver = GridDriver(cols, rows, precision=cfg.precision, method=cfg.method)
        info = build_info(cfg.precision)
        logger.info(f"Rendering {cfg.mode} {cols}x{rows} ({cfg.precision}, {cfg.method})")

        if cfg.output.banner:
            stream.write(format_banner(info, term, (cols, rows)) + "\n")

        timings: Dict[str, float] = {}

        def record(name: str, elapsed: float) -> None:
            timings[name] = elapsed
            logger.info(f"{name}: {elapsed:.3f} s")

        if cfg.mode == "fractal":
            with timer("fractal_pass", sink=record):
                lines, levels = _render_fractal(cfg, driver)
            _write_frame(stream, lines, redraw=False)
            frames = 1
        else:
            field = GradientNoiseField.from_seed(cfg.noise.seed)
            ramp = SymbolRamp(cfg.noise.ramp)
            frame_timer = TimerAccumulator("noise_frame")
            frames = cfg.noise.frames
            redraw = frames > 1 and stream.isatty()
            period = 1.0 / cfg.noise.fps
            lines, samples = [], np.zeros((rows, cols))

            for frame in range(frames):
                push_context(frame=frame)
                lo, hi = noise_window(cfg, cols, rows, frame)
                with frame_timer.measure():
                    samples = driver.noise_intensities(field, lo, hi)
                    lines = driver.noise_glyphs(samples, ramp)
                _write_frame(stream, lines, redraw=redraw and frame > 0)
                if frame < frames - 1:
                    sleep(period)
            pop_context(keys=["frame"])

            timings['noise_frame_mean'] = frame_timer.mean()
            timings['noise_total'] = frame_timer.total_time
            logger.info(f"{frame_timer!r}")
            levels = np.clip(samples * 0.5 + 0.5, 0.0, 1.0)

        text = "".join(row + "\n" for row in lines)
        text_sha256 = hashing.sha256_string(text)

        result = {
            'rows': rows,
            'cols': cols,
            'frames': frames,
            'lines': lines,
            'text_sha256': text_sha256,
            'elapsed_s': timings.get('fractal_pass', timings.get('noise_total', 0.0)),
            'text_path': None,
            'image_path': None,
            'manifest_path': None,
        }

        _write_artifacts(cfg, result, text, levels, info, timings)
        return result
    finally:
        pop_context(keys=["mode", "frame"])


def _write_artifacts(
    cfg: RenderConfigV1,
    result: Dict[str, Any],
    text: str,
    levels: np.ndarray,
    info: Dict[str, str],
    timings: Dict[str, float],
) -> None:
    out = cfg.output

    if out.text_path:
        fs.atomic_write_text(out.text_path, text)
        result['text_path'] = str(Path(out.text_path))
        logger.info(f"Wrote text frame: {out.text_path}")

    if out.image_path:
        if levels.size == 0:
            logger.warning(f"Empty grid; skipping image output {out.image_path}")
        else:
            fs.atomic_save_image(levels, out.image_path)
            result['image_path'] = str(Path(out.image_path))
            logger.info(f"Wrote intensity image: {out.image_path}")

    if out.manifest_path:
        config = cfg.to_dict()
        manifest = {
            'schema': 'render_manifest.v1',
            'build': info,
            'grid': {'cols': result['cols'], 'rows': result['rows']},
            'frames': result['frames'],
            'text_sha256': result['text_sha256'],
            'config_sha256': hashing.hash_dict(config),
            'timings_s': {k: float(v) for k, v in timings.items()},
            'artifacts': {
                'text': result['text_path'],
                'image': result['image_path'],
            },
            'config': config,
        }
        fs.atomic_yaml_dump(manifest, out.manifest_path)
        result['manifest_path'] = str(Path(out.manifest_path))
        logger.info(f"Wrote manifest: {out.manifest_path}")
