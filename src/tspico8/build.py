# src/tspico8/build.py
"""Build orchestrator: compile → compress → package → relaunch."""

from dataclasses import dataclass
from pathlib import Path

from . import tools
from .config import resolve_build_config
from .constants import MIN_CODE_LENGTH, STRICT_MODE_DIRECTIVE
from .player import PlayerHandle, PlayerProcessManager, resolve_player_path
from .types import BuildConfig
from .utils_logs import GREEN, colorize, get_logger


@dataclass
class BuildResult:
    build_cfg: BuildConfig
    player: PlayerHandle | None = None


# --------------------------------------------------------------------------- #
# stages
# --------------------------------------------------------------------------- #


def strip_strict_mode(source: str) -> str:
    """Remove the leading ``"use strict";`` directive emitted by tsc.

    PICO-8 code shares one global scope, which strict mode forbids.
    """
    if not source.lstrip().startswith(STRICT_MODE_DIRECTIVE):
        return source
    start = source.index(STRICT_MODE_DIRECTIVE)
    return source[:start] + source[start + len(STRICT_MODE_DIRECTIVE) :]


def compile_ts(build_cfg: BuildConfig) -> None:
    tools.run_compiler(build_cfg["workspace"])


def compress_game_file(build_cfg: BuildConfig) -> str:
    """Minify the compiler output into the compressed script file."""
    logger = get_logger()
    out_file = build_cfg["out_file"]
    logger.trace("[COMPRESS] reading %s", out_file)
    source = strip_strict_mode(out_file.read_text(encoding="utf-8"))

    code = tools.run_minifier(
        source,
        build_cfg["compression"],
        build_cfg["compress_options"],
        build_cfg["mangle_options"],
    )

    if len(code) < MIN_CODE_LENGTH:
        # still written below; the cartridge will just be empty
        logger.warning("Empty code.")
        logger.warning(source)

    compressed = build_cfg["compressed_file"]
    compressed.parent.mkdir(parents=True, exist_ok=True)
    compressed.write_text(code, encoding="utf-8")
    return code


def build_game_file(build_cfg: BuildConfig) -> Path:
    """Pack the compressed script and spritesheet into the cartridge.

    The cartridge doubles as its own reference, so sections jspicl-cli
    does not generate (sfx, music, map) are carried over between builds.
    """
    cartridge = build_cfg["cartridge_file"]
    tools.run_packager(
        build_cfg["compressed_file"],
        cartridge,
        build_cfg["spritesheet_file"],
        cartridge,
    )
    return cartridge


# --------------------------------------------------------------------------- #
# cycle
# --------------------------------------------------------------------------- #


def run_build_cycle(
    workspace: Path,
    player_manager: PlayerProcessManager | None = None,
) -> BuildResult:
    """Run one full cycle.

    Any stage failure raises a BuildStageError subclass and skips the
    remaining stages, including the relaunch. Passing no manager builds
    without launching.
    """
    logger = get_logger()
    build_cfg = resolve_build_config(workspace)
    result = BuildResult(build_cfg)

    logger.info("Compiling TypeScript to JavaScript.")
    compile_ts(build_cfg)

    logger.info("Compressing JavaScript.")
    compress_game_file(build_cfg)

    logger.info("Building game file.")
    cartridge = build_game_file(build_cfg)

    if player_manager is None:
        logger.info(colorize(f"✅ Build completed → {cartridge}", GREEN))
        return result

    executable = resolve_player_path(build_cfg)
    if executable is None:
        logger.info(colorize(f"✅ Build completed → {cartridge}", GREEN))
        logger.info("PICO-8 executable not found; skipping launch.")
        return result

    result.player = player_manager.relaunch(executable, cartridge)
    return result
