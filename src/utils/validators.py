"""YAML schema validation and config loading.

Provides centralized validation for render configuration files using
pydantic:
    - Render schema (render.v1): mode, precision, evaluation method
    - Grid: fixed size or terminal-probed size with clamp ranges
    - Fractal: plane bounds, iteration cap, glyph ramp
    - Noise: lattice scale, seed, window origin, animation (frames/drift/fps)
    - Logging and output artifact paths

All loaders fail fast with the offending file path and pydantic's
field-level message.

Usage:
    from src.utils import validators

    cfg = validators.load_render_config("configs/render_fractal_v1.yaml")
    cfg = validators.apply_overrides(cfg, {"grid": {"cols": 100}})
"""

from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_FRACTAL_RAMP = "@%#*+=~:. "
DEFAULT_NOISE_RAMP = " .:-=+*#%@"


def _check_ramp(v: Union[str, List[str]]) -> Union[str, List[str]]:
    if len(v) < 2:
        raise ValueError(f"Glyph ramp needs at least 2 glyphs, got {len(v)}: {v!r}")
    if not isinstance(v, str):
        for g in v:
            if len(g) != 1:
                raise ValueError(f"Each glyph must be a single character, got {g!r}")
    return v


def _check_range(v: Tuple[int, int]) -> Tuple[int, int]:
    lo, hi = v
    if lo < 1 or lo > hi:
        raise ValueError(f"Range must satisfy 1 <= lo <= hi, got ({lo}, {hi})")
    return v


# ============================================================================
# RENDER SCHEMA V1
# ============================================================================

class GridConfig(BaseModel):
    """Grid size: fixed, or probed from the terminal and clamped."""
    model_config = ConfigDict(extra="forbid")

    auto_size: bool = Field(True, description="Probe terminal size instead of cols/rows")
    cols: int = Field(80, ge=0, description="Fixed width in glyphs")
    rows: int = Field(40, ge=0, description="Fixed height in glyphs")
    cols_range: Tuple[int, int] = Field((80, 128), description="Clamp for probed width")
    rows_range: Tuple[int, int] = Field((40, 128), description="Clamp for probed height")

    @field_validator('cols_range', 'rows_range')
    @classmethod
    def validate_range(cls, v: Tuple[int, int]) -> Tuple[int, int]:
        return _check_range(v)


class PlaneBounds(BaseModel):
    """Rectangle in the complex plane, (re, im) corners."""
    model_config = ConfigDict(extra="forbid")

    min: Tuple[float, float] = Field((-1.4, -1.0), description="Corner mapped to cell (0, 0)")
    max: Tuple[float, float] = Field((0.6, 1.0), description="Opposite corner (exclusive)")


class FractalConfig(BaseModel):
    """Escape-time rendering parameters."""
    model_config = ConfigDict(extra="forbid")

    bounds: PlaneBounds = Field(default_factory=PlaneBounds)
    max_iter: int = Field(256, ge=0, description="Iteration cap")
    ramp: Union[str, List[str]] = Field(DEFAULT_FRACTAL_RAMP, description="Glyphs, densest first")

    @field_validator('ramp')
    @classmethod
    def validate_ramp(cls, v):
        return _check_ramp(v)


class NoiseConfig(BaseModel):
    """Gradient-noise rendering parameters."""
    model_config = ConfigDict(extra="forbid")

    scale: float = Field(0.1, gt=0.0, description="Lattice units per glyph cell")
    seed: Optional[int] = Field(None, ge=0, description="Table seed; null for fresh entropy")
    origin: Tuple[float, float] = Field((0.0, 0.0), description="Window origin in lattice units")
    ramp: Union[str, List[str]] = Field(DEFAULT_NOISE_RAMP, description="Glyphs, low to high")
    frames: int = Field(1, ge=1, description="Number of frames to draw")
    drift: Tuple[float, float] = Field((0.5, 0.0), description="Window shift per frame (lattice units)")
    fps: float = Field(12.0, gt=0.0, description="Frame pacing when frames > 1")

    @field_validator('ramp')
    @classmethod
    def validate_ramp(cls, v):
        return _check_ramp(v)


class LoggingConfig(BaseModel):
    """Logging setup passed to logging_config.setup_logging."""
    model_config = ConfigDict(extra="forbid")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    file: Optional[str] = None
    json_format: bool = False
    color: bool = True

    @field_validator('level', mode='before')
    @classmethod
    def upper_level(cls, v):
        return v.upper() if isinstance(v, str) else v


class OutputConfig(BaseModel):
    """Stdout banner and optional artifacts."""
    model_config = ConfigDict(extra="forbid")

    banner: bool = Field(True, description="Print build/terminal banner before the frame")
    text_path: Optional[str] = Field(None, description="Write last frame as text")
    image_path: Optional[str] = Field(None, description="Write last intensity grid as PNG")
    manifest_path: Optional[str] = Field(None, description="Write render manifest YAML")


class RenderConfigV1(BaseModel):
    """Complete render configuration (render.v1 schema)."""
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    schema_version: str = Field("render.v1", alias="schema")
    mode: Literal["fractal", "noise"] = "fractal"
    precision: Literal["single", "double"] = "double"
    method: Literal["reference", "vectorized"] = "reference"
    grid: GridConfig = Field(default_factory=GridConfig)
    fractal: FractalConfig = Field(default_factory=FractalConfig)
    noise: NoiseConfig = Field(default_factory=NoiseConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "render.v1":
            raise ValueError(f"Expected schema 'render.v1', got '{v}'")
        return v

    @model_validator(mode='after')
    def validate_output_paths(self) -> 'RenderConfigV1':
        """Artifact paths must not collide."""
        paths = [p for p in (self.output.text_path, self.output.image_path,
                             self.output.manifest_path) if p]
        if len(paths) != len(set(paths)):
            raise ValueError(f"Output artifact paths must be distinct, got {paths}")
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict with YAML field names (for manifests and merging)."""
        return self.model_dump(mode="json", by_alias=True)


# ============================================================================
# LOADERS
# ============================================================================

def render_config_from_dict(data: Optional[Dict[str, Any]], source: str = "<dict>") -> RenderConfigV1:
    """Validate a render config mapping.

    Raises
    ------
    ValueError
        If validation fails (message includes the source)
    """
    try:
        return RenderConfigV1(**(data or {}))
    except Exception as e:
        raise ValueError(f"Render config validation failed at {source}: {e}") from e


def load_render_config(path: Union[str, Path]) -> RenderConfigV1:
    """Load and validate a render config from YAML.

    Parameters
    ----------
    path : Union[str, Path]
        Path to a render.v1 YAML file

    Returns
    -------
    RenderConfigV1
        Validated configuration

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ValueError
        If validation fails
    """
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Render config not found: {path}")

    data = fs.load_yaml(path)
    return render_config_from_dict(data, source=str(path))


def _deep_merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def apply_overrides(cfg: RenderConfigV1, overrides: Dict[str, Any]) -> RenderConfigV1:
    """Merge nested overrides into cfg and re-validate.

    Examples
    --------
    >>> cfg = apply_overrides(cfg, {"mode": "noise", "noise": {"seed": 7}})
    """
    return render_config_from_dict(_deep_merge(cfg.to_dict(), overrides), source="<overrides>")
