"""Intensity -> glyph quantization.

Two mappings are provided:

    quantize(value, ramp)
        8-bit intensity [0, 255] -> glyph. With n glyphs and
        step = 255 // n, the first n-1 glyphs own uniform buckets
        [i*step, (i+1)*step); everything else (including values past the
        last uniform bucket) falls to the final glyph.

    noise_bucket(value, n)
        noise sample in approx [-1, 1] -> glyph index: v*0.5 + 0.5 split
        into n equal buckets, clamped to [0, n-1].

Ramps run from "densest" (intensity 0) to "sparsest" (intensity max).
"""

from typing import Sequence, Union

import numpy as np

# Default ramps (densest first)
FRACTAL_RAMP = "@%#*+=~:. "
NOISE_RAMP = " .:-=+*#%@"

INTENSITY_LEVELS = 256


class SymbolRamp:
    """Ordered, non-empty glyph sequence.

    Parameters
    ----------
    glyphs : str or sequence of str
        Glyphs from densest to sparsest

    Raises
    ------
    ValueError
        If the ramp is empty
    """

    def __init__(self, glyphs: Union[str, Sequence[str]]):
        glyphs = tuple(glyphs)
        if len(glyphs) == 0:
            raise ValueError("Symbol ramp must contain at least one glyph")
        for g in glyphs:
            if not isinstance(g, str):
                raise ValueError(f"Glyphs must be strings, got {type(g).__name__}: {g!r}")
        self.glyphs = glyphs
        self.step = 255 // len(glyphs)

    def __len__(self) -> int:
        return len(self.glyphs)

    def __getitem__(self, i: int) -> str:
        return self.glyphs[i]

    def __iter__(self):
        return iter(self.glyphs)

    def __repr__(self) -> str:
        return f"SymbolRamp({''.join(self.glyphs)!r})"

    def index_of(self, value: int) -> int:
        """Glyph index for an 8-bit intensity."""
        n = len(self.glyphs)
        step = self.step
        for i in range(n - 1):
            if i * step <= value < (i + 1) * step:
                return i
        return n - 1

    def lookup_table(self) -> np.ndarray:
        """(256,) int64 table: entry v is index_of(v)."""
        return np.array([self.index_of(v) for v in range(INTENSITY_LEVELS)], dtype=np.int64)


def as_ramp(ramp: Union[SymbolRamp, str, Sequence[str]]) -> SymbolRamp:
    if isinstance(ramp, SymbolRamp):
        return ramp
    return SymbolRamp(ramp)


def quantize(value: int, ramp: Union[SymbolRamp, str, Sequence[str]]) -> str:
    """Glyph for an 8-bit intensity value.

    Examples
    --------
    >>> quantize(0, "@%#*+=~:. ")
    '@'
    >>> quantize(25, "@%#*+=~:. ")
    '%'
    >>> quantize(250, "@%#*+=~:. ")
    ' '
    """
    ramp = as_ramp(ramp)
    return ramp[ramp.index_of(value)]


def noise_bucket(value: float, n: int) -> int:
    """Ramp index for a noise sample in approx [-1, 1].

    u = value * 0.5 + 0.5 is split into n equal-width buckets, int(u * n),
    clamped to [0, n - 1]. Each glyph, the last one included, owns a 1/n
    slice of [0, 1); how much of the ramp a frame uses depends on the
    field's actual range (2D gradient noise rarely leaves +-0.7).
    """
    u = value * 0.5 + 0.5
    idx = int(u * n)
    return min(max(idx, 0), n - 1)


def noise_buckets(values: np.ndarray, n: int) -> np.ndarray:
    """Vectorized `noise_bucket` (truncation toward zero, then clamp)."""
    u = np.asarray(values, dtype=np.float64) * 0.5 + 0.5
    idx = np.trunc(u * n).astype(np.int64)
    return np.clip(idx, 0, n - 1)
