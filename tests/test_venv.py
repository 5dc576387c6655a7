from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from python_launcher import AmbiguousVirtualEnvironment, InterpreterVersion, Signal
from python_launcher._venv import detect, executable_for, load, read_pyvenv_cfg

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from conftest import MakePython, MakeSnapshot


def test_detect_activated(make_snapshot: MakeSnapshot, tmp_path: Path) -> None:
    snapshot = make_snapshot(env={"VIRTUAL_ENV": str(tmp_path / "active")})
    assert detect(snapshot) == tmp_path / "active"


def test_detect_activated_wins_over_local(
    make_snapshot: MakeSnapshot,
    make_venv: Callable[..., Path],
    workdir: Path,
    tmp_path: Path,
) -> None:
    make_venv(workdir / ".venv")
    snapshot = make_snapshot(env={"VIRTUAL_ENV": str(tmp_path / "active")})
    assert detect(snapshot) == tmp_path / "active"


def test_detect_empty_variable_ignored(make_snapshot: MakeSnapshot) -> None:
    assert detect(make_snapshot(env={"VIRTUAL_ENV": ""})) is None


def test_detect_local(make_snapshot: MakeSnapshot, make_venv: Callable[..., Path], workdir: Path) -> None:
    venv = make_venv(workdir / ".venv")
    assert detect(make_snapshot()) == venv


def test_detect_parent(make_snapshot: MakeSnapshot, make_venv: Callable[..., Path], workdir: Path) -> None:
    venv = make_venv(workdir / ".venv")
    nested = workdir / "a" / "b"
    nested.mkdir(parents=True)
    assert detect(make_snapshot(cwd=nested)) == venv


def test_detect_nearest_wins(make_snapshot: MakeSnapshot, make_venv: Callable[..., Path], workdir: Path) -> None:
    make_venv(workdir / ".venv")
    nested = workdir / "project"
    inner = make_venv(nested / ".venv")
    assert detect(make_snapshot(cwd=nested)) == inner


def test_detect_requires_marker(make_snapshot: MakeSnapshot, make_python: MakePython, workdir: Path) -> None:
    make_python(workdir / ".venv" / "bin", "python")
    assert detect(make_snapshot()) is None


def test_detect_no_cwd(make_snapshot: MakeSnapshot, caplog: pytest.LogCaptureFixture) -> None:
    snapshot = make_snapshot()
    snapshot = type(snapshot)(env=snapshot.env, cwd=None)
    assert detect(snapshot) is None
    assert "current working directory is invalid" in caplog.text


def test_executable_for(tmp_path: Path) -> None:
    assert executable_for(tmp_path / "venv") == tmp_path / "venv" / "bin" / "python"


def test_read_pyvenv_cfg(tmp_path: Path) -> None:
    cfg = tmp_path / "pyvenv.cfg"
    cfg.write_text("home = /usr/bin\ninclude-system-site-packages = false\nnot a pair\nprompt = a=b\n", encoding="utf-8")
    assert read_pyvenv_cfg(cfg) == {
        "home": "/usr/bin",
        "include-system-site-packages": "false",
        "prompt": "a=b",
    }


@pytest.mark.parametrize(
    ("key", "value", "expected"),
    [
        ("version", "3.11.4", InterpreterVersion(3, 11, 64)),
        ("version_info", "3.12.1.final.0", InterpreterVersion(3, 12, 64)),
        ("version_info", "3.13.0", InterpreterVersion(3, 13, 64)),
    ],
)
def test_load(make_venv: Callable[..., Path], tmp_path: Path, key: str, value: str, expected: InterpreterVersion) -> None:
    root = make_venv(tmp_path / "venv", value, key=key)
    environment = load(root, 64)
    assert environment.root == root
    assert environment.executable == root / "bin" / "python"
    assert environment.version == expected


def test_load_missing_cfg(make_python: MakePython, tmp_path: Path) -> None:
    root = tmp_path / "venv"
    make_python(root / "bin", "python")
    with pytest.raises(AmbiguousVirtualEnvironment, match="cannot read pyvenv.cfg") as context:
        load(root, 64)
    assert context.value.root == root
    assert context.value.signal is Signal.VENV


def test_load_no_version(make_python: MakePython, tmp_path: Path) -> None:
    root = tmp_path / "venv"
    make_python(root / "bin", "python")
    (root / "pyvenv.cfg").write_text("home = /usr/bin\nversion = unknown\n", encoding="utf-8")
    with pytest.raises(AmbiguousVirtualEnvironment, match="no Python version recorded"):
        load(root, 64)


def test_load_missing_interpreter(tmp_path: Path) -> None:
    root = tmp_path / "venv"
    root.mkdir()
    (root / "pyvenv.cfg").write_text("version = 3.11.4\n", encoding="utf-8")
    with pytest.raises(AmbiguousVirtualEnvironment, match="is not an executable"):
        load(root, 64)


def test_load_non_executable_interpreter(make_python: MakePython, tmp_path: Path) -> None:
    root = tmp_path / "venv"
    make_python(root / "bin", "python", mode=0o644)
    (root / "pyvenv.cfg").write_text("version = 3.11.4\n", encoding="utf-8")
    with pytest.raises(AmbiguousVirtualEnvironment, match="is not an executable"):
        load(root, 64)
