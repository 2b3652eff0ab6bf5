"""Test render config validation and loading.

Tests for src.utils.validators:
    - Shipped configs load and validate
    - Defaults match the documented fractal view
    - Out-of-range and unknown fields rejected with the source in the message
    - Overrides merge into nested sections and re-validate

Run:
    pytest tests/test_schemas.py -v
"""

import pytest

from src.utils import fs, validators


# ============================================================================
# SHIPPED CONFIGS
# ============================================================================

def test_load_fractal_config(project_root):
    """Fractal config matches the built-in defaults."""
    cfg = validators.load_render_config(project_root / "configs/render_fractal_v1.yaml")
    assert cfg.mode == "fractal"
    assert cfg.fractal.max_iter == 256
    assert cfg.fractal.bounds.min == (-1.4, -1.0)
    assert cfg.fractal.bounds.max == (0.6, 1.0)
    assert cfg.grid.cols_range == (80, 128)
    assert cfg.grid.rows_range == (40, 128)
    assert cfg.to_dict() == validators.RenderConfigV1().to_dict()


def test_load_noise_config(project_root):
    """Noise config loads with its own clamp ranges."""
    cfg = validators.load_render_config(project_root / "configs/render_noise_v1.yaml")
    assert cfg.mode == "noise"
    assert cfg.method == "vectorized"
    assert cfg.noise.scale == 0.08
    assert cfg.noise.seed is None
    assert cfg.grid.rows_range == (20, 64)
    assert cfg.output.banner is False


def test_missing_config_file(tmp_path):
    """Missing file raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        validators.load_render_config(tmp_path / "nope.yaml")


def test_empty_yaml_gives_defaults(tmp_path):
    """An empty document validates to all defaults."""
    path = tmp_path / "empty.yaml"
    path.write_text("")
    cfg = validators.load_render_config(path)
    assert cfg.schema_version == "render.v1"
    assert cfg.mode == "fractal"


# ============================================================================
# REJECTION
# ============================================================================

def test_error_message_includes_source(tmp_path):
    """Validation errors name the offending file."""
    path = tmp_path / "bad.yaml"
    fs.atomic_yaml_dump({'fractal': {'max_iter': -1}}, path)
    with pytest.raises(ValueError, match="bad.yaml"):
        validators.load_render_config(path)


@pytest.mark.parametrize("data", [
    {'schema': 'render.v2'},
    {'mode': 'julia'},
    {'precision': 'half'},
    {'method': 'gpu'},
    {'grid': {'cols': -1}},
    {'grid': {'cols_range': [0, 10]}},
    {'grid': {'rows_range': [50, 40]}},
    {'fractal': {'ramp': '@'}},
    {'fractal': {'ramp': ['@', '##']}},
    {'noise': {'scale': 0.0}},
    {'noise': {'frames': 0}},
    {'noise': {'fps': 0}},
    {'noise': {'seed': -3}},
    {'logging': {'level': 'LOUD'}},
    {'colour': 'red'},
    {'grid': {'width': 80}},
])
def test_invalid_values_rejected(data):
    with pytest.raises(ValueError, match="validation failed"):
        validators.render_config_from_dict(data)


def test_colliding_output_paths_rejected():
    """Artifact paths must be distinct."""
    with pytest.raises(ValueError, match="distinct"):
        validators.render_config_from_dict(
            {'output': {'text_path': 'out/a', 'manifest_path': 'out/a'}})


def test_log_level_case_insensitive():
    cfg = validators.render_config_from_dict({'logging': {'level': 'debug'}})
    assert cfg.logging.level == "DEBUG"


def test_list_ramp_accepted():
    cfg = validators.render_config_from_dict({'fractal': {'ramp': ['#', '.', ' ']}})
    assert cfg.fractal.ramp == ['#', '.', ' ']


# ============================================================================
# OVERRIDES
# ============================================================================

def test_apply_overrides_nested():
    """Overrides merge per key without dropping siblings."""
    cfg = validators.RenderConfigV1()
    out = validators.apply_overrides(cfg, {'mode': 'noise', 'noise': {'seed': 7}})
    assert out.mode == "noise"
    assert out.noise.seed == 7
    assert out.noise.scale == cfg.noise.scale
    assert cfg.mode == "fractal"


def test_apply_overrides_revalidates():
    with pytest.raises(ValueError):
        validators.apply_overrides(validators.RenderConfigV1(), {'fractal': {'max_iter': -5}})


def test_to_dict_roundtrip(tmp_path):
    """to_dict() output is itself a valid config (schema alias kept)."""
    cfg = validators.apply_overrides(validators.RenderConfigV1(), {'grid': {'auto_size': False}})
    data = cfg.to_dict()
    assert data['schema'] == "render.v1"
    path = tmp_path / "cfg.yaml"
    fs.atomic_yaml_dump(data, path)
    assert validators.load_render_config(path).to_dict() == data
