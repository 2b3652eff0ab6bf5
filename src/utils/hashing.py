"""SHA-256 helpers for render provenance.

The render manifest records a hash of the emitted text and of the resolved
config so two runs can be compared without diffing frames.
"""

import hashlib
import json
from pathlib import Path
from typing import Union


def sha256_file(path: Union[str, Path], chunk_size: int = 1 << 20) -> str:
    """SHA-256 hex digest of a file, read in chunks."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    sha256 = hashlib.sha256()
    with open(path, 'rb') as f:
        for chunk in iter(lambda: f.read(chunk_size), b''):
            sha256.update(chunk)
    return sha256.hexdigest()


def sha256_string(s: str) -> str:
    """SHA-256 hex digest of a UTF-8 string."""
    sha256 = hashlib.sha256()
    sha256.update(s.encode('utf-8'))
    return sha256.hexdigest()


def hash_dict(d: dict) -> str:
    """SHA-256 of a JSON-serializable dict (sorted keys)."""
    return sha256_string(json.dumps(d, sort_keys=True))
