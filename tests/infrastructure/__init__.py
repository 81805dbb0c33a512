"""
Shared test infrastructure for vingo.

Modules:
- file_utils: creating template and data files
- cli_utils: running vingo.cli in a subprocess
"""

from .file_utils import write, touch_ns
from .cli_utils import run_cli, jload

__all__ = ["write", "touch_ns", "run_cli", "jload"]
