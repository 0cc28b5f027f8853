# src/tspico8/types.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, TypedDict

from typing_extensions import NotRequired

ChangeKind = Literal["modified", "created", "deleted"]


# --- raw documents (as written by the user) ---------------------------------


class CompilerOptionsInput(TypedDict, total=False):
    outFile: str


class TSConfigInput(TypedDict, total=False):
    compilerOptions: CompilerOptionsInput


class Pico8Input(TypedDict, total=False):
    executable: str


class CompressionInput(TypedDict):
    compressedFile: str
    indentLevel: NotRequired[int]
    compress: NotRequired[bool]
    mangle: NotRequired[bool]


class ToolConfigInput(TypedDict, total=False):
    pico8: Pico8Input
    compression: CompressionInput
    compressOptions: dict[str, Any]
    mangleOptions: dict[str, Any]

    # runtime behavior
    logLevel: str
    watchInterval: float


# --- resolved (what the build consumes) -------------------------------------


class CompressionConfig(TypedDict):
    compress: bool
    mangle: bool
    indent_level: int


class BuildConfig(TypedDict):
    workspace: Path

    # derived paths (absolute)
    out_file: Path
    compressed_file: Path
    cartridge_file: Path
    spritesheet_file: Path

    # minifier settings
    compression: CompressionConfig
    compress_options: dict[str, Any]
    mangle_options: dict[str, Any]

    # configured player override (may not exist on disk)
    player_override: Path | None


class RebuildEvent(TypedDict):
    path: Path
    kind: ChangeKind


class Runtime(TypedDict):
    log_level: str
    use_color: bool
