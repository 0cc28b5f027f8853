# tests/utils/__init__.py

from .force_mtime_advance import force_mtime_advance
from .patch_everywhere import patch_everywhere
from .trace import TRACE, make_trace
from .workspace import DEFAULT_TOOL_CONFIG, make_build_cfg, make_workspace

__all__ = [
    "DEFAULT_TOOL_CONFIG",
    "TRACE",
    "force_mtime_advance",
    "make_build_cfg",
    "make_trace",
    "make_workspace",
    "patch_everywhere",
]
