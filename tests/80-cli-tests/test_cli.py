# tests/80-cli-tests/test_cli.py
"""End-to-end tests for tspico8.cli.main() with the external tools faked."""

import json
import shutil
from pathlib import Path
from typing import Any

import pytest

import tspico8.actions as mod_actions
import tspico8.build as mod_build
import tspico8.cli as mod_cli
import tspico8.tools as mod_tools
from tspico8.errors import CompileError
from tspico8.meta import PROGRAM_DISPLAY
from tests.utils import DEFAULT_TOOL_CONFIG, make_workspace, patch_everywhere


@pytest.fixture
def fake_tools(monkeypatch: pytest.MonkeyPatch) -> list[str]:
    """Replace every external tool with an in-process stand-in."""
    calls: list[str] = []

    def compile_(_workspace: Path) -> None:
        calls.append("compile")

    def minify(source: str, *_args: Any) -> str:
        calls.append("compress")
        return source

    def package(_script: Path, cartridge: Path, *_args: Any) -> None:
        calls.append("package")
        cartridge.write_text("pico-8 cartridge")

    monkeypatch.setattr(mod_tools, "run_compiler", compile_)
    monkeypatch.setattr(mod_tools, "run_minifier", minify)
    monkeypatch.setattr(mod_tools, "run_packager", package)
    monkeypatch.setattr(mod_build, "resolve_player_path", lambda _cfg: None)
    return calls


# ---------------------------------------------------------------------------
# parser surface
# ---------------------------------------------------------------------------


def test_help_exits_zero(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as e:
        mod_cli.main(["--help"])

    assert e.value.code == 0
    out = capsys.readouterr().out
    assert "init" in out
    assert "run" in out


def test_version_prints_program_name(capsys: pytest.CaptureFixture[str]) -> None:
    # --- execute ---
    code = mod_cli.main(["--version"])

    # --- verify ---
    assert code == 0
    assert PROGRAM_DISPLAY in capsys.readouterr().out


def test_no_command_prints_usage(capsys: pytest.CaptureFixture[str]) -> None:
    # --- execute ---
    code = mod_cli.main([])

    # --- verify ---
    assert code == 2
    assert "usage:" in capsys.readouterr().err


def test_misspelled_flag_gets_hint(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as e:
        mod_cli.main(["--colr"])

    assert e.value.code == 2
    assert "Hint: did you mean --color?" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------


def test_init_yes_scaffolds_workspace(tmp_path: Path) -> None:
    # --- setup ---
    workspace = tmp_path / "game"

    # --- execute ---
    code = mod_cli.main(["-w", str(workspace), "init", "--yes"])

    # --- verify ---
    assert code == 0
    for name in ("tsconfig.json", "tspico8.json", "main.ts", "spritesheet.png"):
        assert (workspace / name).is_file()
    assert (workspace / "build" / "compiled.js").is_file()


def test_init_defaults_to_p8workspace_in_cwd(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    # --- setup ---
    monkeypatch.chdir(tmp_path)

    # --- execute ---
    code = mod_cli.main(["init", "-y"])

    # --- verify ---
    assert code == 0
    assert (tmp_path / "p8workspace" / "tspico8.json").is_file()


def test_init_asks_before_copying(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    # --- setup ---
    monkeypatch.setattr("builtins.input", lambda _prompt: "n")
    workspace = tmp_path / "game"

    # --- execute ---
    code = mod_cli.main(["-w", str(workspace), "init"])

    # --- verify ---
    assert code == 0
    assert not (workspace / "main.ts").exists()


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------


def test_run_once_builds_and_exits(
    workspace: Path,
    fake_tools: list[str],
    capsys: pytest.CaptureFixture[str],
) -> None:
    # --- execute ---
    code = mod_cli.main(["-w", str(workspace), "run", "--once"])

    # --- verify ---
    assert code == 0
    assert fake_tools == ["compile", "compress", "package"]
    assert (workspace / "game.p8").read_text() == "pico-8 cartridge"
    out = capsys.readouterr().out
    assert "Build completed" in out
    assert "skipping launch" in out


def test_run_once_reports_compile_failure(
    workspace: Path,
    fake_tools: list[str],
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    # --- setup ---
    def broken(_workspace: Path) -> None:
        raise CompileError("TypeScript compilation failed.", output="main.ts(1,1)")

    monkeypatch.setattr(mod_tools, "run_compiler", broken)

    # --- execute ---
    code = mod_cli.main(["-w", str(workspace), "run", "--once"])

    # --- verify ---
    assert code == 1
    err = capsys.readouterr().err
    assert "TypeScript compilation failed." in err
    assert "main.ts(1,1)" in err
    assert not (workspace / "game.p8").exists()


def test_run_once_reports_missing_tool(
    workspace: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    # --- setup ---
    monkeypatch.setattr(shutil, "which", lambda _name: None)

    # --- execute ---
    code = mod_cli.main(["-w", str(workspace), "run", "--once"])

    # --- verify ---
    assert code == 1
    assert "'tsc' was not found" in capsys.readouterr().err


def test_run_without_workspace_fails(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    # --- execute ---
    code = mod_cli.main(["-w", str(tmp_path / "missing"), "run", "--once"])

    # --- verify ---
    assert code == 1
    assert "tspico8 init" in capsys.readouterr().err


def test_run_with_broken_config_fails(
    workspace: Path,
    fake_tools: list[str],
    capsys: pytest.CaptureFixture[str],
) -> None:
    # --- setup ---
    (workspace / "tspico8.json").write_text("{ not json")

    # --- execute ---
    code = mod_cli.main(["-w", str(workspace), "run", "--once"])

    # --- verify ---
    assert code == 1
    assert fake_tools == []
    assert "tspico8.json" in capsys.readouterr().err


def test_run_uses_workspace_from_env(
    workspace: Path,
    fake_tools: list[str],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    # --- setup ---
    monkeypatch.setenv("TSPICO8_WORKSPACE", str(workspace))

    # --- execute ---
    code = mod_cli.main(["run", "--once"])

    # --- verify ---
    assert code == 0
    assert (workspace / "game.p8").exists()


def test_config_log_level_applies_to_run(
    tmp_path: Path,
    fake_tools: list[str],
    capsys: pytest.CaptureFixture[str],
) -> None:
    # --- setup ---
    workspace = make_workspace(
        tmp_path, tool_config={**DEFAULT_TOOL_CONFIG, "logLevel": "warning"}
    )

    # --- execute ---
    code = mod_cli.main(["-w", str(workspace), "run", "--once"])

    # --- verify ---
    assert code == 0
    assert "Compiling TypeScript" not in capsys.readouterr().out


def test_cli_log_level_beats_config(
    tmp_path: Path,
    fake_tools: list[str],
    capsys: pytest.CaptureFixture[str],
) -> None:
    # --- setup ---
    workspace = make_workspace(
        tmp_path, tool_config={**DEFAULT_TOOL_CONFIG, "logLevel": "warning"}
    )

    # --- execute ---
    code = mod_cli.main(["--log-level", "info", "-w", str(workspace), "run", "--once"])

    # --- verify ---
    assert code == 0
    assert "Compiling TypeScript" in capsys.readouterr().out


def test_run_watches_with_resolved_interval(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    # --- setup ---
    workspace = make_workspace(
        tmp_path, tool_config={**DEFAULT_TOOL_CONFIG, "watchInterval": 0.5}
    )
    seen: dict[str, Any] = {}

    def fake_watch(
        rebuild: Any, root: Path, patterns: Any, **kwargs: Any
    ) -> None:
        seen.update(root=root, patterns=tuple(patterns), **kwargs)

    patch_everywhere(monkeypatch, mod_actions, "watch_for_changes", fake_watch)

    # --- execute ---
    code = mod_cli.main(["-w", str(workspace), "run"])

    # --- verify ---
    assert code == 0
    assert seen["root"] == workspace.resolve()
    assert seen["interval"] == 0.5
    assert "spritesheet.png" in seen["patterns"]
    assert workspace.resolve() / "build" in seen["ignore_dirs"]


def test_run_interval_flag_overrides_config(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    # --- setup ---
    workspace = make_workspace(
        tmp_path, tool_config={**DEFAULT_TOOL_CONFIG, "watchInterval": 0.5}
    )
    seen: dict[str, Any] = {}

    def fake_watch(*_args: Any, **kwargs: Any) -> None:
        seen.update(kwargs)

    patch_everywhere(monkeypatch, mod_actions, "watch_for_changes", fake_watch)

    # --- execute ---
    mod_cli.main(["-w", str(workspace), "run", "--interval", "2"])

    # --- verify ---
    assert seen["interval"] == 2.0


def test_run_stops_player_when_watch_ends(
    workspace: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    # --- setup ---
    stopped: list[bool] = []
    monkeypatch.setattr(
        mod_cli.PlayerProcessManager, "stop", lambda _self: stopped.append(True)
    )
    patch_everywhere(
        monkeypatch, mod_actions, "watch_for_changes", lambda *_a, **_k: None
    )

    # --- execute ---
    mod_cli.main(["-w", str(workspace), "run"])

    # --- verify ---
    assert stopped == [True]


def test_tool_config_is_json_with_comments(
    workspace: Path,
    fake_tools: list[str],
) -> None:
    # --- setup ---
    text = "// edited by hand\n" + json.dumps(DEFAULT_TOOL_CONFIG)
    (workspace / "tspico8.json").write_text(text)

    # --- execute and verify ---
    assert mod_cli.main(["-w", str(workspace), "run", "--once"]) == 0


def test_run_ctrl_c_during_first_build_exits_cleanly(
    workspace: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    # --- setup ---
    def interrupted(*_args: Any, **_kwargs: Any) -> None:
        raise KeyboardInterrupt

    monkeypatch.setattr(mod_cli, "run_build_cycle", interrupted)

    # --- execute ---
    code = mod_cli.main(["-w", str(workspace), "run"])

    # --- verify ---
    assert code == 0
    assert "Watch stopped" in capsys.readouterr().out
