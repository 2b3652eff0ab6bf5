"""Test glyph quantization.

Tests for src.ascii_fields.quantizer:
    - n-1 uniform buckets of width 255 // n plus a catch-all last glyph
    - Ramp construction (string/list, empty rejected, single glyph)
    - 256-entry lookup table agrees with index_of
    - Noise bucket remap [-1, 1] -> [0, n-1] with clamping

Run:
    pytest tests/test_quantizer.py -v
"""

import numpy as np
import pytest

from src.ascii_fields.quantizer import (
    FRACTAL_RAMP,
    SymbolRamp,
    noise_bucket,
    noise_buckets,
    quantize,
)

RAMP = ['@', '%', '#', '*', '+', '=', '~', ':', '.', ' ']


@pytest.mark.parametrize("value,glyph", [
    (0, '@'),
    (24, '@'),
    (25, '%'),
    (49, '%'),
    (50, '#'),
    (199, ':'),
    (200, '.'),
    (224, '.'),
    (225, ' '),
    (250, ' '),
    (255, ' '),
])
def test_quantize_ten_glyph_ramp(value, glyph):
    assert quantize(value, RAMP) == glyph


def test_default_fractal_ramp_matches_list():
    assert tuple(SymbolRamp(FRACTAL_RAMP)) == tuple(RAMP)


def test_step_width():
    assert SymbolRamp(RAMP).step == 25
    assert SymbolRamp("ab").step == 127
    assert SymbolRamp("abc").step == 85


def test_catch_all_bucket_is_oversized():
    """Two glyphs: [0, 127) -> first, [127, 255] -> second."""
    ramp = SymbolRamp("#.")
    assert quantize(126, ramp) == '#'
    assert quantize(127, ramp) == '.'
    assert quantize(255, ramp) == '.'


def test_single_glyph_ramp():
    ramp = SymbolRamp("x")
    assert all(quantize(v, ramp) == 'x' for v in range(256))


def test_empty_ramp_rejected():
    with pytest.raises(ValueError, match="at least one glyph"):
        SymbolRamp("")
    with pytest.raises(ValueError):
        SymbolRamp([])


def test_non_string_glyph_rejected():
    with pytest.raises(ValueError, match="strings"):
        SymbolRamp(['a', 3])


def test_lookup_table_matches_index_of():
    ramp = SymbolRamp(RAMP)
    table = ramp.lookup_table()
    assert table.shape == (256,)
    assert [ramp.index_of(v) for v in range(256)] == table.tolist()
    assert table[0] == 0 and table[255] == len(RAMP) - 1


def test_lookup_table_monotonic():
    table = SymbolRamp(" .:-=+*#%@").lookup_table()
    assert np.all(np.diff(table) >= 0)


@pytest.mark.parametrize("value,expected", [
    (-1.0, 0),
    (-0.99, 0),
    (0.0, 5),
    (0.5, 7),
    (0.85, 9),
    (1.0, 9),
    (1.7, 9),
    (-3.0, 0),
])
def test_noise_bucket(value, expected):
    assert noise_bucket(value, 10) == expected


def test_noise_bucket_every_glyph_reachable():
    """Each of the n glyphs owns an equal slice of [-1, 1], the last included."""
    n = 10
    centers = [(i + 0.5) / n * 2.0 - 1.0 for i in range(n)]
    assert [noise_bucket(v, n) for v in centers] == list(range(n))
    assert noise_bucket(0.81, n) == n - 1
    assert noise_bucket(-0.81, n) == 0


def test_noise_buckets_matches_scalar():
    values = np.linspace(-1.3, 1.3, 101)
    expected = [noise_bucket(float(v), 7) for v in values]
    assert noise_buckets(values, 7).tolist() == expected
