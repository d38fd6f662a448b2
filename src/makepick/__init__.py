"""makepick: pick a Makefile target and run it.

Finds the nearest Makefile above the file being edited, lists its targets,
asks which one to build and runs make with it.
"""

import importlib.metadata

from makepick.config import MakePickSettings, load_settings
from makepick.errors import MakePickError, MakePickErrorCode
from makepick.extractor import MakeTarget, extract_targets, read_targets, scan_targets
from makepick.invoker import BuildProcess, MakeInvoker, build_command
from makepick.locator import find_makefile, resolve_makefile
from makepick.runner import MakeRunner, RunOutcome
from makepick.selection import Chooser, PromptChooser, StaticChooser, select_target
from makepick.session import SessionContext

try:
    __version__ = importlib.metadata.version("makepick")
except importlib.metadata.PackageNotFoundError:
    # Running from a source tree that was never installed
    __version__ = "unknown"

__all__ = [
    "__version__",
    "BuildProcess",
    "Chooser",
    "MakeInvoker",
    "MakePickError",
    "MakePickErrorCode",
    "MakePickSettings",
    "MakeRunner",
    "MakeTarget",
    "PromptChooser",
    "RunOutcome",
    "SessionContext",
    "StaticChooser",
    "build_command",
    "extract_targets",
    "find_makefile",
    "load_settings",
    "read_targets",
    "resolve_makefile",
    "scan_targets",
    "select_target",
]
