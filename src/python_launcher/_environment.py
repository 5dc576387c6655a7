"""A frozen view of the process state that drives a resolution."""

from __future__ import annotations

import logging
import os
import struct
import sys
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from ._config import LauncherConfig, load_config
from ._version_spec import _DC_KW

if TYPE_CHECKING:
    from collections.abc import Mapping

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)
_32BIT_POINTER_SIZE: Final[int] = 4
MACOS_FRAMEWORK_DIR: Final[Path] = Path("/Library/Frameworks/Python.framework/Versions/Current/bin")
DEBUG_ENV_VAR: Final[str] = "PYLAUNCH_DEBUG"


def native_architecture() -> int:
    # same as stdlib platform.architecture to account for pointer size != max int
    return 32 if struct.calcsize("P") == _32BIT_POINTER_SIZE else 64


def search_path(env: Mapping[str, str]) -> tuple[Path, ...]:
    path = env.get("PATH", None)
    if path is None:
        try:
            path = os.confstr("CS_PATH")
        except (AttributeError, ValueError):  # pragma: no cover # no confstr
            path = os.defpath
    return tuple(map(Path, path.split(os.pathsep))) if path else ()


def framework_dirs(platform: str) -> tuple[Path, ...]:
    return (MACOS_FRAMEWORK_DIR,) if platform == "darwin" else ()


def debug_level(env: Mapping[str, str]) -> int:
    value = env.get(DEBUG_ENV_VAR, "").strip()
    if not value:
        return 0
    try:
        return max(int(value), 0)
    except ValueError:
        return 1


def _current_dir() -> Path | None:
    try:
        return Path.cwd()
    except OSError:
        return None


@dataclass(**_DC_KW)
class EnvironmentSnapshot:
    """Every ambient input of the resolver, captured once per invocation and never mutated."""

    env: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    cwd: Path | None = None
    search_path: tuple[Path, ...] = ()
    framework_dirs: tuple[Path, ...] = ()
    platform: str = sys.platform
    native_architecture: int = 64
    config: LauncherConfig = field(default_factory=LauncherConfig)

    @classmethod
    def capture(cls, env: Mapping[str, str] | None = None, cwd: Path | None = None) -> EnvironmentSnapshot:
        env = MappingProxyType(dict(os.environ if env is None else env))
        snapshot = cls(
            env=env,
            cwd=_current_dir() if cwd is None else cwd,
            search_path=search_path(env),
            framework_dirs=framework_dirs(sys.platform),
            platform=sys.platform,
            native_architecture=native_architecture(),
            config=load_config(env),
        )
        _LOGGER.debug("captured %r", snapshot)
        return snapshot

    @property
    def debug_level(self) -> int:
        return debug_level(self.env)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(cwd={self.cwd}, platform={self.platform}, "
            f"architecture={self.native_architecture}, search_path={len(self.search_path)} entries)"
        )


__all__ = [
    "DEBUG_ENV_VAR",
    "MACOS_FRAMEWORK_DIR",
    "EnvironmentSnapshot",
    "debug_level",
    "framework_dirs",
    "native_architecture",
    "search_path",
]
