# src/tspico8/__init__.py

"""TSPico8 — build, watch, and launch PICO-8 games written in TypeScript.

Full developer API
==================
This package re-exports all non-private symbols from its submodules,
making it suitable for programmatic use or custom integrations.
Anything prefixed with "_" is considered internal and may change.

Highlights:
    - main()                  → CLI entrypoint
    - run_build_cycle()       → compile, compress, package, relaunch
    - watch_for_changes()     → rebuild loop over the workspace
    - PlayerProcessManager    → owner of the single PICO-8 process
    - resolve_build_config()  → derive build paths from the workspace configs
"""

from .actions import (
    collect_watched_files,
    detect_changes,
    get_metadata,
    run_isolated,
    watch_for_changes,
)
from .build import (
    BuildResult,
    build_game_file,
    compile_ts,
    compress_game_file,
    run_build_cycle,
    strip_strict_mode,
)
from .cli import (
    main,
)
from .config import (
    determine_log_level,
    determine_watch_interval,
    find_workspace,
    load_tool_config,
    load_tsconfig,
    resolve_build_config,
)
from .config_validate import (
    ValidationSummary,
    validate_tool_config,
    validate_tsconfig,
)
from .constants import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_WATCH_INTERVAL,
    DEFAULT_WORKSPACE_DIR,
)
from .errors import (
    BuildStageError,
    CompileError,
    CompressError,
    ConfigReadError,
    PackagingToolError,
    ToolNotFoundError,
)
from .meta import (
    PROGRAM_DISPLAY,
    PROGRAM_ENV,
    PROGRAM_PACKAGE,
    PROGRAM_SCRIPT,
    Metadata,
)
from .player import (
    PlayerHandle,
    PlayerProcessManager,
    resolve_player_path,
)
from .runtime import current_runtime
from .scaffold import init_workspace
from .tools import (
    build_minifier_args,
    run_compiler,
    run_minifier,
    run_packager,
)
from .types import (
    BuildConfig,
    CompressionConfig,
    RebuildEvent,
    Runtime,
    ToolConfigInput,
    TSConfigInput,
)
from .utils import load_jsonc, should_use_color
from .utils_logs import (
    LEVEL_ORDER,
    colorize,
    get_logger,
    set_log_level,
)


__all__ = [  # noqa: RUF022
    # --- CLI / Actions ---
    "get_metadata",
    "init_workspace",
    "main",
    "watch_for_changes",
    "collect_watched_files",
    "detect_changes",
    "run_isolated",
    #
    # --- Build Pipeline ---
    "BuildResult",
    "build_game_file",
    "compile_ts",
    "compress_game_file",
    "run_build_cycle",
    "strip_strict_mode",
    "build_minifier_args",
    "run_compiler",
    "run_minifier",
    "run_packager",
    #
    # --- Player ---
    "PlayerHandle",
    "PlayerProcessManager",
    "resolve_player_path",
    #
    # --- Config Handling ---
    "determine_log_level",
    "determine_watch_interval",
    "find_workspace",
    "load_tool_config",
    "load_tsconfig",
    "resolve_build_config",
    "validate_tool_config",
    "validate_tsconfig",
    "ValidationSummary",
    #
    # --- Errors ---
    "BuildStageError",
    "CompileError",
    "CompressError",
    "ConfigReadError",
    "PackagingToolError",
    "ToolNotFoundError",
    #
    # --- Constants / Metadata / Runtime ---
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_WATCH_INTERVAL",
    "DEFAULT_WORKSPACE_DIR",
    "Metadata",
    "PROGRAM_DISPLAY",
    "PROGRAM_ENV",
    "PROGRAM_PACKAGE",
    "PROGRAM_SCRIPT",
    "current_runtime",
    #
    # --- utils ---
    "LEVEL_ORDER",
    "colorize",
    "get_logger",
    "load_jsonc",
    "set_log_level",
    "should_use_color",
    #
    # --- Types ---
    "BuildConfig",
    "CompressionConfig",
    "RebuildEvent",
    "Runtime",
    "ToolConfigInput",
    "TSConfigInput",
]
