"""Grid iteration: pixel -> domain mapping, field evaluation, glyph rows.

For cell (row, col) the domain coordinate on each axis is

    lo + span * index / dimension

(linear, not pixel-centred: index 0 maps exactly to lo). Columns run along
the real / x axis, rows along the imaginary / y axis.

Two evaluation methods produce identical rows:
    - "reference":  per-cell loop through the scalar field API
    - "vectorized": whole-grid numpy evaluation

Every pass allocates a fresh intensity grid (rows x cols, row-major); the
driver keeps nothing between passes.

Usage:
    from src.ascii_fields.grid_driver import GridDriver

    driver = GridDriver(cols=80, rows=40)
    rows = driver.render_fractal(evaluator, "@%#*+=~:. ",
                                 complex(-1.4, -1.0), complex(0.6, 1.0))
    print("\\n".join(rows))
"""

import logging
from typing import List, Sequence, Tuple, Union

import numpy as np

from .escape_time import ComplexFieldEvaluator, float_dtype
from .gradient_noise import GradientNoiseField
from .quantizer import SymbolRamp, as_ramp, noise_bucket, noise_buckets

logger = logging.getLogger(__name__)

METHODS = ("reference", "vectorized")

Point = Union[complex, Tuple[float, float]]
RampLike = Union[SymbolRamp, str, Sequence[str]]


def _as_xy(p: Point) -> Tuple[float, float]:
    if isinstance(p, tuple):
        return float(p[0]), float(p[1])
    p = complex(p)
    return p.real, p.imag


class GridDriver:
    """Render a rows x cols glyph grid from a numeric field.

    Parameters
    ----------
    cols : int
        Grid width (>= 0)
    rows : int
        Grid height (>= 0)
    precision : str
        Float width for domain coordinates: "double" or "single"
    method : str
        "reference" or "vectorized"
    """

    def __init__(self, cols: int, rows: int, precision: str = "double", method: str = "reference"):
        if cols < 0 or rows < 0:
            raise ValueError(f"Grid dimensions must be non-negative, got cols={cols}, rows={rows}")
        if method not in METHODS:
            raise ValueError(f"Unknown method: {method!r}. Use one of {METHODS}")
        self.cols = int(cols)
        self.rows = int(rows)
        self.precision = precision
        self.method = method
        self._dtype = float_dtype(precision)

    def __repr__(self) -> str:
        return (f"GridDriver(cols={self.cols}, rows={self.rows}, "
                f"precision={self.precision!r}, method={self.method!r})")

    @property
    def empty(self) -> bool:
        return self.cols == 0 or self.rows == 0

    def axes(self, lo: Point, hi: Point, dtype=None) -> Tuple[np.ndarray, np.ndarray]:
        """Domain coordinates along columns (x) and rows (y).

        Parameters
        ----------
        lo, hi : complex or (x, y)
            Domain rectangle corners; lo maps to index 0
        dtype : numpy float dtype, optional
            Defaults to the driver's precision

        Returns
        -------
        tuple
            (xs, ys) with shapes (cols,) and (rows,)
        """
        dt = dtype or self._dtype
        lo_x, lo_y = (dt(v) for v in _as_xy(lo))
        hi_x, hi_y = (dt(v) for v in _as_xy(hi))

        # span * index / dimension, in that order
        xs = lo_x + (hi_x - lo_x) * np.arange(self.cols, dtype=dt) / dt(max(self.cols, 1))
        ys = lo_y + (hi_y - lo_y) * np.arange(self.rows, dtype=dt) / dt(max(self.rows, 1))
        return xs.astype(dt), ys.astype(dt)

    # ------------------------------------------------------------------
    # Intensity grids
    # ------------------------------------------------------------------

    def fractal_intensities(self, evaluator: ComplexFieldEvaluator, lo: Point, hi: Point) -> np.ndarray:
        """Escape-time counts, shape (rows, cols), int64."""
        xs, ys = self.axes(lo, hi)

        if self.method == "vectorized":
            c = xs[np.newaxis, :] + 1j * ys[:, np.newaxis]
            return evaluator.iterate_grid(c)

        grid = np.zeros((self.rows, self.cols), dtype=np.int64)
        for row in range(self.rows):
            y = ys[row]
            for col in range(self.cols):
                grid[row, col] = evaluator.iterate(complex(xs[col], y))
        return grid

    def noise_intensities(self, field: GradientNoiseField, lo: Point, hi: Point) -> np.ndarray:
        """Noise samples, shape (rows, cols), float64."""
        xs, ys = self.axes(lo, hi, dtype=np.float64)

        if self.method == "vectorized":
            return field.sample_grid(xs[np.newaxis, :], ys[:, np.newaxis])

        grid = np.zeros((self.rows, self.cols), dtype=np.float64)
        for row in range(self.rows):
            y = float(ys[row])
            for col in range(self.cols):
                grid[row, col] = field.sample(float(xs[col]), y)
        return grid

    # ------------------------------------------------------------------
    # Glyph rows
    # ------------------------------------------------------------------

    def fractal_glyphs(self, counts: np.ndarray, ramp: RampLike) -> List[str]:
        """Quantize an escape-time grid into glyph rows.

        Counts are reduced to 8 bits first (count & 0xFF); for
        max_iter <= 255 that is the identity.
        """
        ramp = as_ramp(ramp)
        if self.empty:
            return []
        levels = np.asarray(counts, dtype=np.int64) & 0xFF

        if self.method == "vectorized":
            return self._join_rows(ramp.lookup_table()[levels], ramp)

        return [
            "".join(ramp[ramp.index_of(int(levels[row, col]))] for col in range(self.cols))
            for row in range(self.rows)
        ]

    def noise_glyphs(self, samples: np.ndarray, ramp: RampLike) -> List[str]:
        """Map a noise grid onto ramp indices and glyph rows."""
        ramp = as_ramp(ramp)
        if self.empty:
            return []
        n = len(ramp)

        if self.method == "vectorized":
            return self._join_rows(noise_buckets(samples, n), ramp)

        return [
            "".join(ramp[noise_bucket(float(samples[row, col]), n)] for col in range(self.cols))
            for row in range(self.rows)
        ]

    def render_fractal(
        self,
        evaluator: ComplexFieldEvaluator,
        ramp: RampLike,
        lo: Point,
        hi: Point,
    ) -> List[str]:
        """Glyph rows for the escape-time field over [lo, hi)."""
        if self.empty:
            return []
        logger.debug(f"Fractal pass {self.cols}x{self.rows}, max_iter={evaluator.max_iter}")
        return self.fractal_glyphs(self.fractal_intensities(evaluator, lo, hi), ramp)

    def render_noise(
        self,
        field: GradientNoiseField,
        ramp: RampLike,
        lo: Point,
        hi: Point,
    ) -> List[str]:
        """Glyph rows for the gradient noise field over [lo, hi)."""
        if self.empty:
            return []
        logger.debug(f"Noise pass {self.cols}x{self.rows}")
        return self.noise_glyphs(self.noise_intensities(field, lo, hi), ramp)

    def _join_rows(self, indices: np.ndarray, ramp: SymbolRamp) -> List[str]:
        glyphs = np.array(ramp.glyphs, dtype=object)
        return ["".join(glyphs[indices[row]]) for row in range(self.rows)]
