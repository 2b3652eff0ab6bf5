"""Host-side inputs: terminal size probing, clamping, build banner.

The field generators never look at the terminal; this module turns the
terminal into plain parameters (cols, rows) and produces the informational
banner printed ahead of a frame.
"""

import logging
import platform
import shutil
import sys
from typing import Dict, Tuple

logger = logging.getLogger(__name__)

FALLBACK_TERMINAL_SIZE = (80, 25)
DEFAULT_COLS_RANGE = (80, 128)
DEFAULT_ROWS_RANGE = (40, 128)


def probe_terminal_size(fallback: Tuple[int, int] = FALLBACK_TERMINAL_SIZE) -> Tuple[int, int]:
    """(cols, rows) of the controlling terminal, or fallback when unknown."""
    size = shutil.get_terminal_size(fallback=fallback)
    return size.columns, size.lines


def clamp(value: int, lo: int, hi: int) -> int:
    return min(max(value, lo), hi)


def clamp_dimensions(
    size: Tuple[int, int],
    cols_range: Tuple[int, int] = DEFAULT_COLS_RANGE,
    rows_range: Tuple[int, int] = DEFAULT_ROWS_RANGE,
) -> Tuple[int, int]:
    """Clamp (cols, rows) into inclusive ranges."""
    cols, rows = size
    return clamp(cols, *cols_range), clamp(rows, *rows_range)


def build_info(precision: str) -> Dict[str, str]:
    """Version and platform details for the banner and manifest."""
    from src import __version__

    return {
        'package': "ascii-fields",
        'version': __version__,
        'precision': precision,
        'python': platform.python_version(),
        'implementation': platform.python_implementation(),
        'platform': sys.platform,
        'machine': platform.machine() or "unknown",
    }


def format_banner(
    info: Dict[str, str],
    term_size: Tuple[int, int],
    out_size: Tuple[int, int],
) -> str:
    """Three-line banner: build, interpreter, terminal vs. output size."""
    return "\n".join([
        f"{info['package']} v{info['version']} for {info['platform']}-{info['machine']} "
        f"({info['precision']} precision)",
        f"running on {info['implementation']} {info['python']}",
        f"{term_size[0]}x{term_size[1]} terminal, will output "
        f"{out_size[0]}x{out_size[1]} characters",
    ])
