# src/tspico8/player.py
"""PICO-8 player process lifecycle.

At most one player started by this tool is alive at a time: relaunching
terminates the previous process (and waits for it) before spawning the
next one.
"""

import subprocess
import sys
import threading
from collections.abc import Callable, Sequence
from pathlib import Path

from .constants import PICO8_DEFAULT_PATHS, PLAYER_TERMINATE_TIMEOUT
from .types import BuildConfig
from .utils_logs import get_logger

# --------------------------------------------------------------------------- #
# executable resolution
# --------------------------------------------------------------------------- #

PlayerPathStrategy = Callable[[BuildConfig], Path | None]


def _platform_default(_build_cfg: BuildConfig) -> Path | None:
    raw = PICO8_DEFAULT_PATHS.get(sys.platform)
    return Path(raw).expanduser() if raw else None


def _configured_override(build_cfg: BuildConfig) -> Path | None:
    return build_cfg["player_override"]


# evaluated in order; the first candidate that exists on disk wins
PLAYER_PATH_STRATEGIES: tuple[PlayerPathStrategy, ...] = (
    _platform_default,
    _configured_override,
)


def resolve_player_path(
    build_cfg: BuildConfig,
    strategies: Sequence[PlayerPathStrategy] = PLAYER_PATH_STRATEGIES,
) -> Path | None:
    """Return the PICO-8 executable to launch, or None for build-only mode."""
    logger = get_logger()
    for strategy in strategies:
        candidate = strategy(build_cfg)
        logger.trace("[PLAYER] %s → %s", strategy.__name__, candidate)
        if candidate is not None and candidate.is_file():
            return candidate
    return None


# --------------------------------------------------------------------------- #
# process handle
# --------------------------------------------------------------------------- #


class PlayerHandle:
    """One spawned player process.

    A daemon thread waits on the process from spawn time and reports a
    non-zero exit code, unless the exit was caused by ``terminate()``.
    """

    def __init__(self, process: "subprocess.Popen[bytes]") -> None:
        self.process = process
        self._stopping = False
        self._waiter = threading.Thread(
            target=self._wait_for_exit,
            name=f"pico8-waiter-{process.pid}",
            daemon=True,
        )
        self._waiter.start()

    @property
    def pid(self) -> int:
        return self.process.pid

    @property
    def live(self) -> bool:
        return self.process.poll() is None

    def _wait_for_exit(self) -> None:
        code = self.process.wait()
        if code and not self._stopping:
            get_logger().info("PICO-8 process exited with code %d.", code)

    def terminate(self, timeout: float = PLAYER_TERMINATE_TIMEOUT) -> None:
        """Stop the process and block until it is gone."""
        self._stopping = True
        if not self.live:
            return
        self.process.terminate()
        try:
            self.process.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            get_logger().warning(
                "PICO-8 (pid %d) ignored terminate; killing it.", self.pid
            )
            self.process.kill()
            self.process.wait()


# --------------------------------------------------------------------------- #
# manager
# --------------------------------------------------------------------------- #


class PlayerProcessManager:
    """Owns the single player handle for a workspace."""

    def __init__(self, workspace: Path) -> None:
        self.workspace = workspace
        self._handle: PlayerHandle | None = None
        self._lock = threading.Lock()

    @property
    def handle(self) -> PlayerHandle | None:
        return self._handle

    def _command(self, executable: Path, cartridge: Path) -> list[str]:
        return [
            str(executable),
            "-root_path",
            str(self.workspace),
            "-run",
            str(cartridge.resolve()),
        ]

    def relaunch(self, executable: Path, cartridge: Path) -> PlayerHandle:
        """Terminate the live player (if any), then start a new one."""
        logger = get_logger()
        with self._lock:
            if self._handle is not None and self._handle.live:
                logger.info("Killing existing PICO-8 process.")
                self._handle.terminate()
            self._handle = None

            cmd = self._command(executable, cartridge)
            logger.info("Launching PICO-8.")
            logger.debug("$ %s", " ".join(cmd))
            process = subprocess.Popen(cmd)  # noqa: S603
            self._handle = PlayerHandle(process)
            return self._handle

    def stop(self) -> None:
        """Terminate the live player, if any."""
        with self._lock:
            if self._handle is not None and self._handle.live:
                get_logger().debug("Stopping PICO-8 (pid %d).", self._handle.pid)
                self._handle.terminate()
            self._handle = None
