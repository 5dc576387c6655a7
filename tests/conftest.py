from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Protocol

import pytest

from python_launcher import EnvironmentSnapshot
from python_launcher._config import LauncherConfig

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping


class MakePython(Protocol):
    def __call__(self, directory: Path, name: str, *, mode: int = 0o755) -> Path: ...


class MakeSnapshot(Protocol):
    def __call__(  # noqa: PLR0913
        self,
        *,
        path: Iterable[Path] = (),
        env: Mapping[str, str] | None = None,
        cwd: Path | None = None,
        framework: Iterable[Path] = (),
        config: LauncherConfig | None = None,
        architecture: int = 64,
    ) -> EnvironmentSnapshot: ...


@pytest.fixture
def make_python() -> MakePython:
    def _make(directory: Path, name: str, *, mode: int = 0o755) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        exe = directory / name
        exe.touch()
        exe.chmod(mode)
        return exe

    return _make


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    folder = tmp_path / "work"
    folder.mkdir()
    return folder


@pytest.fixture
def make_snapshot(workdir: Path) -> MakeSnapshot:
    def _make(  # noqa: PLR0913
        *,
        path: Iterable[Path] = (),
        env: Mapping[str, str] | None = None,
        cwd: Path | None = None,
        framework: Iterable[Path] = (),
        config: LauncherConfig | None = None,
        architecture: int = 64,
    ) -> EnvironmentSnapshot:
        return EnvironmentSnapshot(
            env=MappingProxyType(dict(env or {})),
            cwd=workdir if cwd is None else cwd,
            search_path=tuple(path),
            framework_dirs=tuple(framework),
            platform="linux",
            native_architecture=architecture,
            config=LauncherConfig() if config is None else config,
        )

    return _make


@pytest.fixture
def make_venv(make_python: MakePython) -> Callable[..., Path]:
    def _make(root: Path, version: str = "3.11.4", *, key: str = "version") -> Path:
        root.mkdir(parents=True, exist_ok=True)
        (root / "pyvenv.cfg").write_text(f"home = /usr/bin\n{key} = {version}\n", encoding="utf-8")
        make_python(root / "bin", "python")
        return root

    return _make
