# src/tspico8/actions.py
import re
import subprocess
import time
from collections.abc import Callable, Sequence
from contextlib import suppress
from importlib import metadata as importlib_metadata
from pathlib import Path

from .constants import DEFAULT_WATCH_INTERVAL
from .meta import PROGRAM_PACKAGE, Metadata
from .types import RebuildEvent
from .utils import plural
from .utils_logs import get_logger


def collect_watched_files(
    root: Path,
    patterns: Sequence[str],
    ignore_dirs: Sequence[Path] = (),
) -> list[Path]:
    """Expand the watch patterns under root into a unique, sorted file list."""
    files: set[Path] = set()
    ignored = [d.resolve() for d in ignore_dirs]

    for pattern in patterns:
        for p in root.glob(pattern):
            if not p.is_file():
                continue
            resolved = p.resolve()
            if any(resolved.is_relative_to(d) for d in ignored):
                continue
            files.add(resolved)

    return sorted(files)


def _snapshot(files: Sequence[Path]) -> dict[Path, float]:
    mtimes: dict[Path, float] = {}
    for f in files:
        # a file can vanish between glob and stat
        with suppress(FileNotFoundError):
            mtimes[f] = f.stat().st_mtime
    return mtimes


def detect_changes(
    mtimes: dict[Path, float],
    files: Sequence[Path],
) -> list[RebuildEvent]:
    """Compare files against the known mtimes; update mtimes in place."""
    events: list[RebuildEvent] = []
    current = _snapshot(files)

    for f, new_m in current.items():
        old_m = mtimes.get(f)
        if old_m is None:
            events.append({"path": f, "kind": "created"})
        elif new_m != old_m:
            events.append({"path": f, "kind": "modified"})
        mtimes[f] = new_m

    for f in [f for f in mtimes if f not in current]:
        events.append({"path": f, "kind": "deleted"})
        mtimes.pop(f)

    return events


def run_isolated(rebuild_func: Callable[[], object]) -> bool:
    """Run one cycle; log any failure instead of letting it escape."""
    logger = get_logger()
    try:
        rebuild_func()
    except Exception as e:  # noqa: BLE001
        logger.error_if_not_debug("Rebuild failed: %s", e)
        return False
    return True


def watch_for_changes(
    rebuild_func: Callable[[], object],
    root: Path,
    patterns: Sequence[str],
    *,
    ignore_dirs: Sequence[Path] = (),
    interval: float = DEFAULT_WATCH_INTERVAL,
) -> None:
    """Poll file modification times and rebuild when changes are detected.

    - Runs one cycle immediately, before any edit.
    - Re-expands the patterns every tick to notice created/removed files.
    - Every change, whichever file it hits, triggers one full rebuild;
      changes seen in the same tick share that rebuild.
    - A failing cycle is logged and the loop keeps watching.
    Stops on KeyboardInterrupt.
    """
    logger = get_logger()
    patterns = tuple(patterns)  # fixed for the lifetime of the loop
    logger.info(
        "👀 Watching for changes (interval=%.2fs)... Press Ctrl+C to stop.", interval
    )

    # discover at start
    mtimes = _snapshot(collect_watched_files(root, patterns, ignore_dirs))
    logger.trace("[WATCH] initial files: %s", [str(f) for f in mtimes])

    try:
        run_isolated(rebuild_func)  # initial build

        while True:
            time.sleep(interval)

            files = collect_watched_files(root, patterns, ignore_dirs)
            events = detect_changes(mtimes, files)
            if not events:
                continue

            for event in events:
                logger.debug("%s: %s", event["kind"], event["path"])
            logger.info(
                "\n🔁 Detected %d changed file%s. Rebuilding...",
                len(events),
                plural(events),
            )
            run_isolated(rebuild_func)
    except KeyboardInterrupt:
        logger.info("\n🛑 Watch stopped.")


def get_metadata() -> Metadata:
    """Return (version, commit) for this tool.

    - Source checkout → read pyproject.toml + git
    - Installed package → distribution metadata
    """
    logger = get_logger()
    version = "unknown"
    commit = "unknown"

    root = Path(__file__).resolve().parents[2]
    pyproject = root / "pyproject.toml"
    if pyproject.exists():
        logger.trace("trying to read metadata from %s", pyproject)
        text = pyproject.read_text(encoding="utf-8")
        match = re.search(r'(?m)^\s*version\s*=\s*["\']([^"\']+)["\']', text)
        if match:
            version = match.group(1)
    else:
        with suppress(importlib_metadata.PackageNotFoundError):
            version = importlib_metadata.version(PROGRAM_PACKAGE)

    # Try git for commit
    with suppress(Exception):
        logger.trace("trying to get commit from git")
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],  # noqa: S607
            cwd=root,
            capture_output=True,
            text=True,
            check=True,
        )
        commit = result.stdout.strip()

    logger.trace("got package version %s with commit %s", version, commit)
    return Metadata(version, commit)
