"""Cross-cutting utilities (lowest dependency layer).

This package provides shared primitives for:
    - Config validation (validators)
    - Atomic I/O and YAML (fs)
    - Provenance hashing (hashing)
    - Wall-clock profiling (profiler)
    - Unified logging (logging_config)

No module in utils/ may import from upper layers (ascii_fields, scripts).

Convenience imports:
    from src.utils import fs, validators
    from src.utils.logging_config import setup_logging, push_context
"""

from . import fs
from . import hashing
from . import logging_config
from . import profiler
from . import validators

from .logging_config import push_context, setup_logging

__all__ = [
    'fs',
    'hashing',
    'logging_config',
    'profiler',
    'validators',
    'setup_logging',
    'push_context',
]
