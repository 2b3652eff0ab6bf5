"""Field generators, quantization and grid rendering.

Components (leaves first):
    - escape_time: ComplexFieldEvaluator
    - gradient_noise: GradientNoiseField, RandomSource, NumpyRandomSource
    - quantizer: SymbolRamp, quantize, noise_bucket
    - grid_driver: GridDriver
    - host: terminal probing and banner (host-side inputs)
    - pipeline: render_main (config -> frames -> artifacts)

Convenience imports:
    from src.ascii_fields import ComplexFieldEvaluator, GradientNoiseField, GridDriver
"""

from .escape_time import ComplexFieldEvaluator
from .gradient_noise import GradientNoiseField, NumpyRandomSource, RandomSource
from .grid_driver import GridDriver
from .quantizer import FRACTAL_RAMP, NOISE_RAMP, SymbolRamp, noise_bucket, quantize

__all__ = [
    'ComplexFieldEvaluator',
    'GradientNoiseField',
    'NumpyRandomSource',
    'RandomSource',
    'GridDriver',
    'SymbolRamp',
    'quantize',
    'noise_bucket',
    'FRACTAL_RAMP',
    'NOISE_RAMP',
]
