# src/tspico8/scaffold.py
"""``init``: lay out a fresh workspace from the bundled template."""

import shutil
from collections.abc import Callable
from pathlib import Path

from .constants import BUILD_DIR, COMPILED_PLACEHOLDER, TOOL_CONFIG_FILE
from .meta import PROGRAM_SCRIPT
from .utils_logs import get_logger

TEMPLATE_DIR = Path(__file__).resolve().parent / "template"

Confirm = Callable[[str], bool]


def ask_yes_no(question: str) -> bool:
    """Prompt until the answer is recognisably yes or no."""
    while True:
        answer = input(f"{question} ").strip().lower()
        if answer in {"y", "yes"}:
            return True
        if answer in {"n", "no"}:
            return False
        print("Please answer y(es) or n(o).")


def template_files(template_dir: Path = TEMPLATE_DIR) -> list[Path]:
    return sorted(template_dir.iterdir(), key=lambda p: p.name)


def copy_file(src: Path, dest: Path, *, src_root: Path) -> bool:
    """Copy one file unless dest exists. Returns True if copied."""
    logger = get_logger()
    try:
        rel = src.relative_to(src_root)
    except ValueError:
        rel = src

    if dest.exists():
        logger.warning("%s already exists in directory, skipping.", rel)
        return False

    logger.debug("📄 %s → %s", rel, dest)
    dest.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(src, dest)
    return True


def copy_directory(src: Path, dest: Path, *, src_root: Path) -> int:
    """Recursively copy directory contents, skipping files that exist."""
    copied = 0
    dest.mkdir(parents=True, exist_ok=True)
    for item in sorted(src.iterdir(), key=lambda p: p.name):
        target = dest / item.name
        if item.is_dir():
            copied += copy_directory(item, target, src_root=src_root)
        elif copy_file(item, target, src_root=src_root):
            copied += 1
    return copied


def prepare_workspace(workspace: Path) -> None:
    """Create the workspace, its build dir and the compiled.js placeholder."""
    logger = get_logger()
    build_dir = workspace / BUILD_DIR
    build_dir.mkdir(parents=True, exist_ok=True)

    placeholder = build_dir / COMPILED_PLACEHOLDER
    try:
        # exclusive create: never truncate an existing build
        with placeholder.open("x", encoding="utf-8"):
            pass
    except FileExistsError:
        logger.trace("[INIT] %s already present", placeholder)
    else:
        logger.debug("Created empty %s", placeholder)


def init_workspace(
    workspace: Path,
    *,
    confirm: Confirm = ask_yes_no,
    template_dir: Path = TEMPLATE_DIR,
) -> int:
    """Scaffold ``workspace``. Returns the process exit code."""
    logger = get_logger()
    prepare_workspace(workspace)

    files = template_files(template_dir)
    logger.info("The following files will be added to the %s directory:", workspace)
    for f in files:
        logger.info(f.name)

    if not confirm("Proceed to copy? (y/n)"):
        logger.info("Stopping installation.")
        return 0

    copied = 0
    for src in files:
        dest = workspace / src.name
        if src.is_dir():
            copied += copy_directory(src, dest, src_root=template_dir)
        elif copy_file(src, dest, src_root=template_dir):
            copied += 1

    logger.debug("Copied %d file(s).", copied)
    logger.info(
        "\nCopying complete. Edit %s, then type \"%s run\".",
        workspace / TOOL_CONFIG_FILE,
        PROGRAM_SCRIPT,
    )
    return 0
