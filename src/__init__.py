"""ascii-fields: numeric field generators rendered as terminal glyph grids.

This package contains two 2D scalar field generators and the machinery that
turns them into rows of glyphs:
    - escape-time iteration of z -> z^2 + c (orbit seeded at c)
    - permutation-hashed gradient noise with smoothstep blending

Architecture layers (strict one-way dependency):
    scripts/ -> src/ascii_fields/ -> src/utils/

Key invariants:
    - Field evaluation never touches terminal or CLI state
    - Interior points map to 0, the fastest escapes to max_iter
    - Noise tables are immutable after construction
    - YAML-only configs, validated by pydantic
"""

__version__ = "1.0.0"
