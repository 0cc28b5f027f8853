# src/tspico8/tools.py
"""Adapters for the external tools of the pipeline.

Each adapter is one blocking subprocess call with a fixed command line.
Output is captured and attached to the stage error on failure so the
user sees the tool's own diagnostics.
"""

import json
import shutil
import subprocess
from pathlib import Path
from typing import Any

from .constants import (
    COMPILER_CMD,
    KEEP_COMMENTS_PATTERN,
    MINIFIER_CMD,
    PACKAGER_CMD,
)
from .errors import (
    CompileError,
    CompressError,
    PackagingToolError,
    ToolNotFoundError,
)
from .types import CompressionConfig
from .utils_logs import get_logger


def resolve_tool(name: str, stage: str) -> str:
    """Return the executable for ``name`` on PATH.

    Goes through shutil.which so npm's ``.cmd`` shims resolve on Windows.
    """
    found = shutil.which(name)
    if found is None:
        raise ToolNotFoundError(name, stage)
    return found


def _run(
    cmd: list[str], *, cwd: Path | None = None, stdin: str | None = None
) -> "subprocess.CompletedProcess[str]":
    logger = get_logger()
    logger.debug("$ %s", " ".join(cmd))
    return subprocess.run(  # noqa: S603
        cmd,
        cwd=cwd,
        input=stdin,
        capture_output=True,
        text=True,
        encoding="utf-8",
        check=False,
    )


# --------------------------------------------------------------------------- #
# compile
# --------------------------------------------------------------------------- #


def run_compiler(workspace: Path) -> None:
    """Run ``tsc`` in the workspace; it discovers tsconfig.json on its own."""
    exe = resolve_tool(COMPILER_CMD, "compile")
    result = _run([exe], cwd=workspace)
    if result.returncode != 0:
        # tsc reports diagnostics on stdout
        raise CompileError(
            f"TypeScript compilation failed (exit code {result.returncode}).",
            output=result.stdout + result.stderr,
            returncode=result.returncode,
        )


# --------------------------------------------------------------------------- #
# minify
# --------------------------------------------------------------------------- #


def format_option_bag(options: dict[str, Any]) -> str:
    """Render an option bag as uglifyjs' ``key=value,...`` CLI syntax.

    Values are JSON-encoded, which uglifyjs parses as JavaScript literals.
    """
    return ",".join(f"{key}={json.dumps(value)}" for key, value in options.items())


def build_minifier_args(
    compression: CompressionConfig,
    compress_options: dict[str, Any],
    mangle_options: dict[str, Any],
) -> list[str]:
    """Translate the compression settings into uglifyjs arguments.

    - compress / mangle toggle independently and carry their option bags
    - if either is on, only the cartridge metadata comments survive
    - if both are off the output is beautified and keeps every comment
    - statement-terminating semicolons are never added
    """
    args: list[str] = []

    if compression["compress"]:
        args.append("--compress")
        if compress_options:
            args.append(format_option_bag(compress_options))

    if compression["mangle"]:
        args.append("--mangle")
        if mangle_options:
            args.append(format_option_bag(mangle_options))

    minifying = compression["compress"] or compression["mangle"]
    output_opts = f"indent_level={compression['indent_level']},semicolons=false"
    if minifying:
        args += ["--output-opts", output_opts]
        args += ["--comments", KEEP_COMMENTS_PATTERN]
    else:
        args += ["--beautify", output_opts]
        args += ["--comments", "all"]

    return args


def run_minifier(
    source: str,
    compression: CompressionConfig,
    compress_options: dict[str, Any],
    mangle_options: dict[str, Any],
) -> str:
    """Minify ``source`` through uglifyjs (stdin → stdout) and return the code."""
    exe = resolve_tool(MINIFIER_CMD, "compress")
    cmd = [exe, *build_minifier_args(compression, compress_options, mangle_options)]
    result = _run(cmd, stdin=source)
    if result.returncode != 0:
        raise CompressError(
            f"Minification failed (exit code {result.returncode}).",
            output=result.stderr,
            returncode=result.returncode,
        )
    return result.stdout


# --------------------------------------------------------------------------- #
# package
# --------------------------------------------------------------------------- #


def run_packager(
    script_file: Path,
    cartridge_file: Path,
    spritesheet_file: Path,
    reference_cartridge: Path,
) -> None:
    """Assemble code and spritesheet into a cartridge with jspicl-cli."""
    logger = get_logger()
    exe = resolve_tool(PACKAGER_CMD, "package")
    cmd = [
        exe,
        "--input",
        str(script_file),
        "--output",
        str(cartridge_file),
        "--spritesheetImagePath",
        str(spritesheet_file),
        "--cartridgePath",
        str(reference_cartridge),
    ]
    result = _run(cmd)
    if result.stdout.strip():
        logger.debug(result.stdout.rstrip())
    if result.returncode != 0:
        raise PackagingToolError(
            f"Cartridge packaging failed (exit code {result.returncode}).",
            output=result.stdout + result.stderr,
            returncode=result.returncode,
        )
