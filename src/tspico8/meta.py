# src/tspico8/meta.py

"""Centralized program identity constants for TSPico8."""

from typing import NamedTuple

_BASE = "tspico8"

# CLI script name (the executable or console entrypoint)
PROGRAM_SCRIPT = _BASE

# Human-readable name for banners, help text, etc.
PROGRAM_DISPLAY = "TSPico8"

# Python package / import name
PROGRAM_PACKAGE = _BASE.replace("-", "_")

# Environment variable prefix (used for TSPICO8_LOG_LEVEL, etc.)
PROGRAM_ENV = _BASE.replace("-", "_").upper()

# Short tagline or description for help screens and metadata
DESCRIPTION = "Build, watch, and launch PICO-8 games written in TypeScript."


class Metadata(NamedTuple):
    version: str
    commit: str
