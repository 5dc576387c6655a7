"""User configuration read from a ``py.ini`` file."""

from __future__ import annotations

import configparser
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from platformdirs import user_config_path

from ._version_spec import _DC_KW

if TYPE_CHECKING:
    from collections.abc import Mapping

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)
APP_NAME: Final[str] = "python-launcher"
CONFIG_FILE_NAME: Final[str] = "py.ini"
CONFIG_ENV_VAR: Final[str] = "PYLAUNCH_CONFIG"
PREFER_VENV_ENV_VAR: Final[str] = "PYLAUNCH_PREFER_VENV"
_FALSE_VALUES: Final[frozenset[str]] = frozenset({"0", "false", "no", "off"})


@dataclass(**_DC_KW)
class LauncherConfig:
    """Default version tokens keyed like ``python``/``python3`` and the virtual environment policy."""

    defaults: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    prefer_venv: bool = True
    path: Path | None = None


def config_path(env: Mapping[str, str]) -> Path:
    if explicit := env.get(CONFIG_ENV_VAR):
        return Path(explicit).expanduser()
    return user_config_path(APP_NAME, appauthor=False) / CONFIG_FILE_NAME


def load_config(env: Mapping[str, str]) -> LauncherConfig:
    path = config_path(env)
    parser = configparser.ConfigParser(interpolation=None)
    try:
        read = parser.read(path, encoding="utf-8")
    except (OSError, UnicodeDecodeError, configparser.Error) as exception:
        _LOGGER.warning("ignoring configuration file %s: %s", path, exception)
        return _apply_env_overrides(LauncherConfig(), env)
    if not read:
        _LOGGER.debug("no configuration file at %s", path)
        return _apply_env_overrides(LauncherConfig(), env)
    _LOGGER.debug("read configuration from %s", path)
    defaults = dict(parser.items("defaults")) if parser.has_section("defaults") else {}
    try:
        prefer_venv = parser.getboolean("launcher", "prefer_venv", fallback=True)
    except ValueError as exception:
        _LOGGER.warning("ignoring launcher.prefer_venv in %s: %s", path, exception)
        prefer_venv = True
    config = LauncherConfig(defaults=MappingProxyType(defaults), prefer_venv=prefer_venv, path=path)
    return _apply_env_overrides(config, env)


def _apply_env_overrides(config: LauncherConfig, env: Mapping[str, str]) -> LauncherConfig:
    if not (value := env.get(PREFER_VENV_ENV_VAR)):
        return config
    prefer_venv = value.strip().lower() not in _FALSE_VALUES
    return LauncherConfig(defaults=config.defaults, prefer_venv=prefer_venv, path=config.path)


__all__ = [
    "CONFIG_ENV_VAR",
    "PREFER_VENV_ENV_VAR",
    "LauncherConfig",
    "config_path",
    "load_config",
]
