# src/tspico8/errors.py
"""Exceptions raised by the build pipeline.

They subclass the builtins that ``cli.main()`` already treats as
controlled termination, so a failing stage is reported without a
traceback unless the log level asks for one.
"""

from pathlib import Path


class ConfigReadError(ValueError):
    """A workspace config document is missing, malformed, or incomplete."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Error while reading '{path.name}': {detail}")


class BuildStageError(RuntimeError):
    """A pipeline stage failed; later stages and the relaunch were skipped."""

    stage: str = "build"

    # process exit status reported by cli.main()
    code: int = 1

    def __init__(
        self, message: str, *, output: str = "", returncode: int | None = None
    ) -> None:
        self.output = output
        self.returncode = returncode
        super().__init__(message)

    def __str__(self) -> str:
        base = super().__str__()
        if self.output.strip():
            return f"{base}\n{self.output.rstrip()}"
        return base


class ToolNotFoundError(BuildStageError):
    def __init__(self, tool: str, stage: str) -> None:
        self.tool = tool
        self.stage = stage
        super().__init__(f"[{stage}] '{tool}' was not found on PATH.")


class CompileError(BuildStageError):
    stage = "compile"


class CompressError(BuildStageError):
    stage = "compress"


class PackagingToolError(BuildStageError):
    stage = "package"
