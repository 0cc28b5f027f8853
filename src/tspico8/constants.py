# src/tspico8/constants.py
"""
Central constants used across the project.
"""

# --- env keys ---
DEFAULT_ENV_LOG_LEVEL: str = "LOG_LEVEL"
DEFAULT_ENV_WATCH_INTERVAL: str = "WATCH_INTERVAL"
DEFAULT_ENV_WORKSPACE: str = "WORKSPACE"

# --- config defaults ---
DEFAULT_LOG_LEVEL: str = "info"
DEFAULT_WATCH_INTERVAL: float = 1.0  # seconds

# --- workspace layout ---
DEFAULT_WORKSPACE_DIR: str = "p8workspace"
BUILD_DIR: str = "build"
COMPILED_PLACEHOLDER: str = "compiled.js"
TSCONFIG_FILE: str = "tsconfig.json"
TOOL_CONFIG_FILE: str = "tspico8.json"
CARTRIDGE_FILE: str = "game.p8"
SPRITESHEET_FILE: str = "spritesheet.png"
WATCH_SOURCE_GLOB: str = "**/*.ts"
WATCH_IGNORE_DIRS: tuple[str, ...] = (BUILD_DIR, "node_modules")

# --- external tools ---
COMPILER_CMD: str = "tsc"
MINIFIER_CMD: str = "uglifyjs"
PACKAGER_CMD: str = "jspicl-cli"

# Explicit strict mode breaks the global scope PICO-8 code relies on
STRICT_MODE_DIRECTIVE: str = '"use strict";'

# Comments the cartridge format needs, kept even when minifying
KEEP_COMMENTS_PATTERN: str = "/title|author|desc|script|input|saveid/"

# Minified output shorter than this is reported as empty
MIN_CODE_LENGTH: int = 10

# Default PICO-8 install locations, checked before the configured path
PICO8_DEFAULT_PATHS: dict[str, str] = {
    "win32": "C:\\Program Files (x86)\\PICO-8\\pico8.exe",
    "darwin": "/Applications/PICO-8.app/Contents/MacOS/pico8",
    "linux": "~/pico-8/pico8",
}

# seconds to wait for the player to exit before killing it
PLAYER_TERMINATE_TIMEOUT: float = 3.0
