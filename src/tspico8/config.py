# src/tspico8/config.py


import argparse
import os
from pathlib import Path
from typing import Any, cast

from .config_validate import (
    ValidationSummary,
    validate_tool_config,
    validate_tsconfig,
)
from .constants import (
    CARTRIDGE_FILE,
    DEFAULT_ENV_LOG_LEVEL,
    DEFAULT_ENV_WATCH_INTERVAL,
    DEFAULT_ENV_WORKSPACE,
    DEFAULT_LOG_LEVEL,
    DEFAULT_WATCH_INTERVAL,
    DEFAULT_WORKSPACE_DIR,
    SPRITESHEET_FILE,
    TOOL_CONFIG_FILE,
    TSCONFIG_FILE,
)
from .errors import ConfigReadError
from .meta import PROGRAM_ENV
from .types import BuildConfig, ToolConfigInput, TSConfigInput
from .utils import load_jsonc, remove_path_in_error_message
from .utils_logs import get_logger


# --------------------------------------------------------------------------- #
# layered settings (CLI → env → config → default)
# --------------------------------------------------------------------------- #


def _env(key: str) -> str | None:
    return os.getenv(f"{PROGRAM_ENV}_{key}") or os.getenv(key)


def determine_log_level(
    args: argparse.Namespace,
    config_log_level: str | None = None,
) -> str:
    """Resolve log level from CLI → env → tspico8.json → default."""
    if getattr(args, "log_level", None):
        return cast("str", args.log_level)

    env_log_level = _env(DEFAULT_ENV_LOG_LEVEL)
    if env_log_level:
        return env_log_level.lower()

    if config_log_level:
        return config_log_level.lower()

    return DEFAULT_LOG_LEVEL


def determine_watch_interval(
    args: argparse.Namespace,
    config_interval: float | None = None,
) -> float:
    """Resolve the polling interval from CLI → env → tspico8.json → default."""
    if getattr(args, "interval", None) is not None:
        return float(args.interval)

    env_interval = _env(DEFAULT_ENV_WATCH_INTERVAL)
    if env_interval:
        try:
            return float(env_interval)
        except ValueError:
            get_logger().warning(
                "Ignoring invalid %s_%s=%r; expected seconds as a number.",
                PROGRAM_ENV,
                DEFAULT_ENV_WATCH_INTERVAL,
                env_interval,
            )

    if config_interval is not None:
        return float(config_interval)

    return DEFAULT_WATCH_INTERVAL


def find_workspace(args: argparse.Namespace, cwd: Path) -> Path:
    """Locate the workspace directory.

    Search order:
      1. Explicit path from CLI (--workspace)
      2. {PROGRAM_ENV}_WORKSPACE environment variable
      3. ./p8workspace under the current working directory

    The directory is not required to exist (``init`` creates it).
    """
    # prefixed only: CI runners export a generic WORKSPACE of their own
    raw = getattr(args, "workspace", None) or os.getenv(
        f"{PROGRAM_ENV}_{DEFAULT_ENV_WORKSPACE}"
    )
    if raw:
        return Path(raw).expanduser().resolve()
    return (cwd / DEFAULT_WORKSPACE_DIR).resolve()


def require_workspace(workspace: Path) -> None:
    """Fail early with a hint when ``run`` is pointed at an empty location."""
    if not workspace.is_dir():
        xmsg = (
            f"Workspace not found: {workspace}\n"
            "   Run 'tspico8 init' first, or pass --workspace."
        )
        raise FileNotFoundError(xmsg)


# --------------------------------------------------------------------------- #
# document loaders
# --------------------------------------------------------------------------- #


def _load_document(path: Path) -> dict[str, Any]:
    """Read one JSON(C) document, turning every failure into ConfigReadError."""
    logger = get_logger()
    logger.trace("[CONFIG] reading %s", path)
    try:
        data = load_jsonc(path)
    except FileNotFoundError as e:
        raise ConfigReadError(path, "file not found") from e
    except ValueError as e:
        raise ConfigReadError(path, remove_path_in_error_message(str(e), path)) from e

    if data is None:
        raise ConfigReadError(path, "file is empty")
    return data


def _apply_summary(path: Path, summary: ValidationSummary) -> None:
    logger = get_logger()
    for warning in summary.warnings:
        logger.warning("%s: %s", path.name, warning)
    if not summary.valid:
        raise ConfigReadError(path, "\n   ".join(summary.errors))


def load_tsconfig(workspace: Path) -> TSConfigInput:
    """Load and validate the compiler options document."""
    path = workspace / TSCONFIG_FILE
    data = _load_document(path)
    _apply_summary(path, validate_tsconfig(data))
    return cast("TSConfigInput", data)


def load_tool_config(workspace: Path) -> ToolConfigInput:
    """Load and validate the tool options document."""
    path = workspace / TOOL_CONFIG_FILE
    data = _load_document(path)
    _apply_summary(path, validate_tool_config(data))
    return cast("ToolConfigInput", data)


# --------------------------------------------------------------------------- #
# build config resolution
# --------------------------------------------------------------------------- #


def resolve_build_config(workspace: Path) -> BuildConfig:
    """Read both documents and derive every path a build cycle needs.

    Called fresh on every cycle so edits to either document take effect
    on the next rebuild without restarting the watcher.
    """
    logger = get_logger()
    tsconfig = load_tsconfig(workspace)
    tool_cfg = load_tool_config(workspace)

    compression = tool_cfg["compression"]
    executable = tool_cfg.get("pico8", {}).get("executable")

    resolved: BuildConfig = {
        "workspace": workspace,
        "out_file": workspace / tsconfig["compilerOptions"]["outFile"],
        "compressed_file": workspace / compression["compressedFile"],
        "cartridge_file": workspace / CARTRIDGE_FILE,
        "spritesheet_file": workspace / SPRITESHEET_FILE,
        "compression": {
            "compress": compression.get("compress", False),
            "mangle": compression.get("mangle", False),
            "indent_level": compression.get("indentLevel", 2),
        },
        "compress_options": dict(tool_cfg.get("compressOptions", {})),
        "mangle_options": dict(tool_cfg.get("mangleOptions", {})),
        # relative overrides are taken from the workspace
        "player_override": (
            workspace / Path(executable).expanduser() if executable else None
        ),
    }
    logger.trace("[CONFIG] resolved build config: %s", resolved)
    return resolved
