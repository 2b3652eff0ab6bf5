"""Coherent 2D gradient noise on an integer lattice.

Each lattice point (ix, iy) is assigned one of 256 unit gradients through a
single-level permutation hash:

    idx = perm[ix & 255] + perm[iy & 255]
    g   = gradients[idx & 255]

A sample at (x, y) blends the four corner dot products
dot(g_corner, (x, y) - corner) with smoothstep weights, first along x for
both rows, then along y using the offset from the lower y origin.

Tables are built once per instance from an injectable random source and are
read-only afterwards, so concurrent sampling needs no locking.

Randomness:
    - RandomSource protocol: next_angle() and shuffle(values)
    - NumpyRandomSource wraps numpy.random.default_rng (seed=None is unseeded)
    - Construction order: 256 angles, then one shuffle of range(256)

Usage:
    from src.ascii_fields.gradient_noise import GradientNoiseField

    field = GradientNoiseField.from_seed(1234)
    v = field.sample(3.7, 1.2)          # approx [-1, 1]
    grid = field.sample_grid(xs, ys)    # broadcastable arrays
"""

import logging
import math
from typing import Optional, Protocol, Tuple

import numpy as np

logger = logging.getLogger(__name__)

TABLE_SIZE = 256
TABLE_MASK = TABLE_SIZE - 1

Vec2 = Tuple[float, float]


class RandomSource(Protocol):
    """Source of randomness for table construction."""

    def next_angle(self) -> float:
        """Uniform angle in [0, 2*pi)."""
        ...

    def shuffle(self, values: list) -> None:
        """Uniform in-place shuffle."""
        ...


class NumpyRandomSource:
    """RandomSource backed by numpy's Generator (PCG64).

    Parameters
    ----------
    seed : int, optional
        Seed for reproducible tables; None draws fresh OS entropy
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def next_angle(self) -> float:
        return float(self._rng.uniform(0.0, 2.0 * math.pi))

    def shuffle(self, values: list) -> None:
        self._rng.shuffle(values)

    def __repr__(self) -> str:
        return f"NumpyRandomSource(seed={self.seed})"


def smoothstep(t: float) -> float:
    """Cubic ease 3t^2 - 2t^3."""
    return t * t * (3.0 - 2.0 * t)


def lerp(a: float, b: float, t: float) -> float:
    return a + t * (b - a)


class GradientNoiseField:
    """Permutation-hashed gradient noise field.

    Parameters
    ----------
    random_source : RandomSource, optional
        Source used once, at construction. Defaults to an unseeded
        NumpyRandomSource.

    Attributes
    ----------
    gradients : np.ndarray
        (256, 2) float64 unit vectors, read-only
    permutation : np.ndarray
        (256,) int64 bijection on [0, 255], read-only
    """

    def __init__(self, random_source: Optional[RandomSource] = None):
        if random_source is None:
            random_source = NumpyRandomSource()

        angles = [random_source.next_angle() for _ in range(TABLE_SIZE)]
        self._gradient_list = [(math.cos(a), math.sin(a)) for a in angles]

        perm = list(range(TABLE_SIZE))
        random_source.shuffle(perm)
        self._perm_list = [int(p) for p in perm]

        if sorted(self._perm_list) != list(range(TABLE_SIZE)):
            raise ValueError("Random source shuffle did not produce a permutation of [0, 255]")

        self.gradients = np.array(self._gradient_list, dtype=np.float64)
        self.gradients.flags.writeable = False
        self.permutation = np.array(self._perm_list, dtype=np.int64)
        self.permutation.flags.writeable = False

        logger.debug(f"Built gradient noise tables from {random_source!r}")

    @classmethod
    def from_seed(cls, seed: Optional[int]) -> "GradientNoiseField":
        """Field built from a seeded NumpyRandomSource."""
        return cls(NumpyRandomSource(seed))

    def gradient_at(self, ix: int, iy: int) -> Vec2:
        """Unit gradient assigned to lattice point (ix, iy)."""
        perm = self._perm_list
        idx = perm[ix & TABLE_MASK] + perm[iy & TABLE_MASK]
        return self._gradient_list[idx & TABLE_MASK]

    def sample(self, x: float, y: float) -> float:
        """Noise value at (x, y), approximately in [-1, 1]."""
        x0 = math.floor(x)
        y0 = math.floor(y)
        x1 = x0 + 1
        y1 = y0 + 1

        g00 = self.gradient_at(x0, y0)
        g10 = self.gradient_at(x1, y0)
        g01 = self.gradient_at(x0, y1)
        g11 = self.gradient_at(x1, y1)

        dx0 = x - x0
        dx1 = x - x1
        dy0 = y - y0
        dy1 = y - y1

        v00 = g00[0] * dx0 + g00[1] * dy0
        v10 = g10[0] * dx1 + g10[1] * dy0
        v01 = g01[0] * dx0 + g01[1] * dy1
        v11 = g11[0] * dx1 + g11[1] * dy1

        fx = smoothstep(dx0)
        vx0 = lerp(v00, v10, fx)
        vx1 = lerp(v01, v11, fx)

        fy = smoothstep(dy0)
        return lerp(vx0, vx1, fy)

    def _gradients_at(self, ix: np.ndarray, iy: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        idx = (self.permutation[ix & TABLE_MASK] + self.permutation[iy & TABLE_MASK]) & TABLE_MASK
        g = self.gradients[idx]
        return g[..., 0], g[..., 1]

    def sample_grid(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        """Vectorized `sample` over broadcastable coordinate arrays."""
        x, y = np.broadcast_arrays(np.asarray(x, dtype=np.float64), np.asarray(y, dtype=np.float64))

        fx0 = np.floor(x)
        fy0 = np.floor(y)
        # Lattice indices only matter mod 256; reducing in float first keeps
        # the int64 cast in range for any finite coordinate
        with np.errstate(invalid="ignore"):
            x0 = np.mod(fx0, TABLE_SIZE).astype(np.int64)
            y0 = np.mod(fy0, TABLE_SIZE).astype(np.int64)
        x1 = x0 + 1
        y1 = y0 + 1

        g00x, g00y = self._gradients_at(x0, y0)
        g10x, g10y = self._gradients_at(x1, y0)
        g01x, g01y = self._gradients_at(x0, y1)
        g11x, g11y = self._gradients_at(x1, y1)

        dx0 = x - fx0
        dx1 = x - (fx0 + 1.0)
        dy0 = y - fy0
        dy1 = y - (fy0 + 1.0)

        v00 = g00x * dx0 + g00y * dy0
        v10 = g10x * dx1 + g10y * dy0
        v01 = g01x * dx0 + g01y * dy1
        v11 = g11x * dx1 + g11y * dy1

        fx = smoothstep(dx0)
        vx0 = lerp(v00, v10, fx)
        vx1 = lerp(v01, v11, fx)

        fy = smoothstep(dy0)
        return lerp(vx0, vx1, fy)
