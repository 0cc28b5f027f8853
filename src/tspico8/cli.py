# src/tspico8/cli.py

import argparse
import platform
import sys
from difflib import get_close_matches
from pathlib import Path

from .actions import get_metadata, watch_for_changes
from .build import run_build_cycle
from .config import (
    determine_log_level,
    determine_watch_interval,
    find_workspace,
    load_tool_config,
    require_workspace,
)
from .constants import (
    DEFAULT_WATCH_INTERVAL,
    DEFAULT_WORKSPACE_DIR,
    SPRITESHEET_FILE,
    WATCH_IGNORE_DIRS,
    WATCH_SOURCE_GLOB,
)
from .meta import (
    DESCRIPTION,
    PROGRAM_DISPLAY,
    PROGRAM_ENV,
    PROGRAM_SCRIPT,
)
from .player import PlayerProcessManager
from .runtime import current_runtime
from .scaffold import ask_yes_no, init_workspace
from .utils import get_sys_version_info, safe_log
from .utils_logs import LEVEL_ORDER, get_logger, set_log_level


# --------------------------------------------------------------------------- #
# CLI setup and helpers
# --------------------------------------------------------------------------- #


class HintingArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        # Build known option strings: ["-v", "--verbose", "--log-level", ...]
        known_opts: list[str] = []
        for action in self._actions:
            known_opts.extend([s for s in action.option_strings if s])

        hint_lines: list[str] = []
        # Argparse message for bad flags is typically
        # "unrecognized arguments: --intrval ..."
        if "unrecognized arguments:" in message:
            bad = message.split("unrecognized arguments:", 1)[1].strip()
            # Split conservatively on whitespace
            bad_args = [tok for tok in bad.split() if tok.startswith("-")]
            for arg in bad_args:
                close = get_close_matches(arg, known_opts, n=1, cutoff=0.6)
                if close:
                    hint_lines.append(f"Hint: did you mean {close[0]}?")

        # Print usage + the original error
        self.print_usage(sys.stderr)
        full = f"{self.prog}: error: {message}"
        if hint_lines:
            full += "\n" + "\n".join(hint_lines)
        self.exit(2, full + "\n")


def _setup_parser() -> argparse.ArgumentParser:
    """Define and return the CLI argument parser."""
    parser = HintingArgumentParser(prog=PROGRAM_SCRIPT, description=DESCRIPTION)

    parser.add_argument(
        "-w",
        "--workspace",
        help=(
            f"Workspace directory (default: ${PROGRAM_ENV}_WORKSPACE"
            f" or ./{DEFAULT_WORKSPACE_DIR})."
        ),
    )

    # --- Color ---
    color = parser.add_mutually_exclusive_group()
    color.add_argument(
        "--no-color",
        dest="use_color",
        action="store_const",
        const=False,
        help="Disable ANSI color output.",
    )
    color.add_argument(
        "--color",
        dest="use_color",
        action="store_const",
        const=True,
        help="Force-enable ANSI color output (overrides auto-detect).",
    )
    color.set_defaults(use_color=None)

    # --- Version and verbosity ---
    parser.add_argument("--version", action="store_true", help="Show version info.")

    log_level = parser.add_mutually_exclusive_group()
    log_level.add_argument(
        "-q",
        "--quiet",
        action="store_const",
        const="warning",
        dest="log_level",
        help="Suppress non-critical output (same as --log-level warning).",
    )
    log_level.add_argument(
        "-v",
        "--verbose",
        action="store_const",
        const="debug",
        dest="log_level",
        help="Verbose output (same as --log-level debug).",
    )
    log_level.add_argument(
        "--log-level",
        choices=LEVEL_ORDER,
        default=None,
        dest="log_level",
        help="Set log verbosity level.",
    )

    # --- Commands ---
    commands = parser.add_subparsers(dest="command", metavar="COMMAND")

    init = commands.add_parser(
        "init",
        help=(
            f"Copy the required files into the workspace (./{DEFAULT_WORKSPACE_DIR})."
            " Files that already exist are skipped."
        ),
    )
    init.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help="Copy without asking for confirmation.",
    )

    run = commands.add_parser("run", help="Build, watch, and launch your PICO-8 game.")
    run.add_argument(
        "--interval",
        type=float,
        metavar="SECONDS",
        default=None,
        help=(
            "Polling interval for file changes"
            f" (default config or: {DEFAULT_WATCH_INTERVAL})."
        ),
    )
    run.add_argument(
        "--once",
        action="store_true",
        help="Run a single build cycle and exit instead of watching.",
    )
    return parser


def _run(args: argparse.Namespace, workspace: Path) -> int:
    """The ``run`` command: build, launch, then watch until interrupted."""
    logger = get_logger()
    require_workspace(workspace)

    # startup config errors are fatal; later ones are isolated per cycle
    tool_cfg = load_tool_config(workspace)
    set_log_level(determine_log_level(args, tool_cfg.get("logLevel")))
    logger.trace("[CONFIG] log-level re-resolved from config: %s", logger.level_name)

    logger.info("📁 Workspace: %s", workspace)
    manager = PlayerProcessManager(workspace)

    if args.once:
        run_build_cycle(workspace, manager)
        return 0

    interval = determine_watch_interval(args, tool_cfg.get("watchInterval"))
    try:
        watch_for_changes(
            lambda: run_build_cycle(workspace, manager),
            workspace,
            (WATCH_SOURCE_GLOB, SPRITESHEET_FILE),
            ignore_dirs=[workspace / d for d in WATCH_IGNORE_DIRS],
            interval=interval,
        )
    finally:
        manager.stop()
    return 0


# --------------------------------------------------------------------------- #
# Main entry
# --------------------------------------------------------------------------- #


def main(argv: list[str] | None = None) -> int:  # noqa: PLR0911
    logger = get_logger()  # init (use env + defaults)

    try:
        parser = _setup_parser()
        args = parser.parse_args(argv)

        # --- Early runtime init (use CLI + env + defaults) ---
        set_log_level(determine_log_level(args))
        if args.use_color is not None:
            current_runtime["use_color"] = args.use_color
        logger.trace("[BOOT] log-level initialized: %s", logger.level_name)

        logger.debug(
            "Runtime: Python %s (%s)\n    %s",
            platform.python_version(),
            platform.python_implementation(),
            sys.version.replace("\n", " "),
        )

        # --- Version flag ---
        if args.version:
            meta = get_metadata()
            logger.info("%s %s (%s)", PROGRAM_DISPLAY, meta.version, meta.commit)
            return 0

        # --- Python version check ---
        if get_sys_version_info() < (3, 10):
            logger.error("%s requires Python 3.10 or newer.", PROGRAM_DISPLAY)
            return 1

        if args.command is None:
            parser.print_help(sys.stderr)
            return 2

        workspace = find_workspace(args, Path.cwd())

        if args.command == "init":
            confirm = (lambda _question: True) if args.yes else ask_yes_no
            return init_workspace(workspace, confirm=confirm)

        return _run(args, workspace)

    except (FileNotFoundError, ValueError, TypeError, RuntimeError) as e:
        # controlled termination
        try:
            logger.error_if_not_debug(str(e))
        except Exception:  # noqa: BLE001
            safe_log(f"[FATAL] Logging failed while reporting: {e}")
        return getattr(e, "code", 1)

    except Exception as e:  # noqa: BLE001
        # unexpected internal error
        try:
            logger.critical_if_not_debug("Unexpected internal error: %s", e)
        except Exception:  # noqa: BLE001
            safe_log(f"[FATAL] Logging failed while reporting: {e}")

        return getattr(e, "code", 1)
