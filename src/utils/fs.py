"""Atomic filesystem operations for render artifacts and YAML handling.

Provides:
    - Atomic writes: tmp file -> fsync -> rename (prevents partial reads)
    - YAML load/save (PyYAML safe_load / safe_dump)
    - Grayscale/RGB image saving through PIL
    - Directory creation with exist_ok semantics

A viewer tailing the text output or polling the preview PNG never observes
a half-written frame.

Usage:
    from src.utils import fs
    fs.atomic_write_text(out_dir / "frame.txt", "\\n".join(rows))
    fs.atomic_save_image(levels_u8, out_dir / "frame.png")
    fs.atomic_yaml_dump(manifest, out_dir / "manifest.yaml")
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import numpy as np
import yaml
from PIL import Image


def ensure_dir(p: Union[str, Path]) -> Path:
    """Create directory (and parents) if missing, return Path."""
    p = Path(p)
    p.mkdir(parents=True, exist_ok=True)
    return p


def atomic_write_bytes(
    path: Union[str, Path],
    data: bytes,
    tmp_suffix: str = ".tmp"
) -> None:
    """Write bytes to file atomically (tmp -> fsync -> rename).

    Parameters
    ----------
    path : Union[str, Path]
        Target file path
    data : bytes
        Data to write
    tmp_suffix : str
        Temporary file suffix, default ".tmp"

    Raises
    ------
    RuntimeError
        If the write or rename fails (tmp file is removed)
    """
    path = Path(path)
    ensure_dir(path.parent)

    # Same directory so the rename stays on one filesystem
    tmp_path = path.with_suffix(path.suffix + tmp_suffix)

    try:
        with open(tmp_path, 'wb') as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        tmp_path.replace(path)
    except Exception as e:
        if tmp_path.exists():
            tmp_path.unlink()
        raise RuntimeError(f"Failed to write {path} atomically: {e}") from e


def atomic_write_text(
    path: Union[str, Path],
    text: str,
    encoding: str = "utf-8"
) -> None:
    """Write text to file atomically."""
    atomic_write_bytes(path, text.encode(encoding))


def atomic_save_image(
    img: np.ndarray,
    path: Union[str, Path],
    pil_kwargs: Optional[Dict[str, Any]] = None
) -> None:
    """Save image atomically.

    Parameters
    ----------
    img : np.ndarray
        (H, W) or (H, W, 3); uint8, or float in [0, 1]
    path : Union[str, Path]
        Target file path (extension determines format)
    pil_kwargs : Optional[Dict[str, Any]]
        Additional kwargs for PIL.Image.save

    Raises
    ------
    ValueError
        If the array is empty or has an unsupported shape
    RuntimeError
        If saving fails
    """
    path = Path(path)
    pil_kwargs = pil_kwargs or {}
    img = np.asarray(img)

    if img.size == 0:
        raise ValueError(f"Cannot save empty image to {path}")
    if img.ndim == 3 and img.shape[2] == 1:
        img = img.squeeze(2)
    if img.ndim not in (2, 3):
        raise ValueError(f"Expected (H, W) or (H, W, 3) image, got shape {img.shape}")

    if np.issubdtype(img.dtype, np.floating):
        img = (np.clip(img, 0.0, 1.0) * 255.0).round().astype(np.uint8)
    elif img.dtype != np.uint8:
        img = np.clip(img, 0, 255).astype(np.uint8)

    ensure_dir(path.parent)
    pil_img = Image.fromarray(img)

    # Keep the real extension last so PIL detects the format
    tmp_path = path.with_name(path.stem + ".tmp" + path.suffix)
    try:
        pil_img.save(tmp_path, **pil_kwargs)
        tmp_path.replace(path)
    except Exception as e:
        if tmp_path.exists():
            tmp_path.unlink()
        raise RuntimeError(f"Failed to save image {path} atomically: {e}") from e


def atomic_yaml_dump(obj: Any, path: Union[str, Path]) -> None:
    """Save object as YAML atomically (safe_dump, insertion order kept)."""
    yaml_str = yaml.safe_dump(
        obj,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True
    )
    atomic_write_bytes(path, yaml_str.encode('utf-8'))


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """Load YAML file safely.

    Raises
    ------
    FileNotFoundError
        If file doesn't exist
    yaml.YAMLError
        If YAML parsing fails
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Failed to parse YAML file {path}: {e}") from e
