"""Detect an active or nearby virtual environment and read its ``pyvenv.cfg`` (PEP 405)."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Final

from ._errors import AmbiguousVirtualEnvironment
from ._version_spec import _DC_KW, InterpreterVersion

if TYPE_CHECKING:
    from ._environment import EnvironmentSnapshot

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)
VIRTUAL_ENV_VAR: Final[str] = "VIRTUAL_ENV"
DEFAULT_VENV_DIR: Final[str] = ".venv"
PYVENV_CFG: Final[str] = "pyvenv.cfg"
_VERSION_KEYS: Final[tuple[str, ...]] = ("version_info", "version")
_VERSION_RE: Final[re.Pattern[str]] = re.compile(r"^\s*([0-9]+)\.([0-9]+)")


@dataclass(**_DC_KW)
class VirtualEnvironment:
    root: Path
    executable: Path
    version: InterpreterVersion


def executable_for(root: Path) -> Path:
    return root / "bin" / "python"


def detect(snapshot: EnvironmentSnapshot) -> Path | None:
    """Return the root of the activated virtual environment, else of the nearest ``.venv`` directory."""
    _LOGGER.info("checking for %s environment variable", VIRTUAL_ENV_VAR)
    if active := snapshot.env.get(VIRTUAL_ENV_VAR):
        _LOGGER.debug("%s set to %s", VIRTUAL_ENV_VAR, active)
        return Path(active)
    if snapshot.cwd is None:
        _LOGGER.warning("current working directory is invalid")
        return None
    _LOGGER.info("searching for a %s in %s and parent directories", DEFAULT_VENV_DIR, snapshot.cwd)
    for directory in (snapshot.cwd, *snapshot.cwd.parents):
        candidate = directory / DEFAULT_VENV_DIR
        _LOGGER.debug("checking %s", candidate)
        if (candidate / PYVENV_CFG).is_file():
            return candidate
    return None


def read_pyvenv_cfg(path: Path) -> dict[str, str]:
    config: dict[str, str] = {}
    with path.open(encoding="utf-8") as file_handler:
        for line in file_handler:
            raw_name, delimiter, raw_value = line.partition("=")
            if delimiter != "=":
                continue
            config[raw_name.strip()] = raw_value.strip()
    return config


def load(root: Path, native_architecture: int | None) -> VirtualEnvironment:
    """Describe the environment at *root*, raising :class:`AmbiguousVirtualEnvironment` if it is not usable."""
    cfg = root / PYVENV_CFG
    try:
        config = read_pyvenv_cfg(cfg)
    except (OSError, UnicodeDecodeError) as exception:
        raise AmbiguousVirtualEnvironment(root, f"cannot read {cfg.name} ({exception})") from exception
    version = _version_from(config)
    if version is None:
        raise AmbiguousVirtualEnvironment(root, f"no Python version recorded in {cfg.name}")
    executable = executable_for(root)
    if not (executable.is_file() and os.access(executable, os.X_OK)):
        raise AmbiguousVirtualEnvironment(root, f"{executable} is not an executable")
    environment = VirtualEnvironment(
        root=root,
        executable=executable,
        version=InterpreterVersion(*version, native_architecture),
    )
    _LOGGER.debug("virtual environment %s provides Python %s", root, environment.version)
    return environment


def _version_from(config: dict[str, str]) -> tuple[int, int] | None:
    for key in _VERSION_KEYS:
        if (value := config.get(key)) and (match := _VERSION_RE.match(value)):
            return int(match.group(1)), int(match.group(2))
    return None


__all__ = [
    "DEFAULT_VENV_DIR",
    "PYVENV_CFG",
    "VIRTUAL_ENV_VAR",
    "VirtualEnvironment",
    "detect",
    "executable_for",
    "load",
    "read_pyvenv_cfg",
]
