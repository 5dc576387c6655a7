"""The ``py`` command: inspect the launcher's own arguments, resolve, then dispatch."""

from __future__ import annotations

import logging
import os
import re
import sys
from typing import TYPE_CHECKING, Final

from ._config import config_path
from ._discovery import all_executables, discover
from ._dispatch import dispatch
from ._environment import EnvironmentSnapshot, debug_level
from ._errors import IllegalArgument, LauncherError, NoInterpreterFound, Signal
from ._resolver import resolve, select
from ._version_spec import ANY, VersionSpecifier

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from pathlib import Path

    from ._discovery import DiscoveredInterpreter

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)
_VERSION_FLAG: Final[re.Pattern[str]] = re.compile(r"-(?:-?[0-9])")
_SOLO_FLAGS: Final[frozenset[str]] = frozenset({"-h", "--help", "--list"})
_COLUMN_SEPARATOR: Final[str] = "│"

HELP: Final[str] = """\
Python Launcher for Unix {version}

usage:
{launcher} [launcher-args] [python-args]

Launcher arguments:
-2     : Launch the latest Python 2.x version
-3     : Launch the latest Python 3.x version
-X.Y   : Launch the specified Python version
-X.Y-A : Launch the specified Python version built for architecture A (32 or 64)
--A    : Launch the latest Python version built for architecture A

--list : List all known interpreters

Environment variables:
VIRTUAL_ENV          : root of the activated virtual environment
PY_PYTHON            : version to use when no version is requested
PY_PYTHON{{X}}         : version to use when only major version X is requested
PYLAUNCH_PREFER_VENV : set to 0 to skip a matching virtual environment when a version is requested
PYLAUNCH_CONFIG      : configuration file to use instead of {config}
PYLAUNCH_DEBUG       : set to 1 (or 2 for directory listings) to log how the interpreter is chosen

The following help text is from Python ({python}):
"""


def version_from_flag(arg: str) -> VersionSpecifier | None:
    """Return the specifier of a launcher version flag such as ``-3.9``; other arguments give ``None``."""
    if not _VERSION_FLAG.match(arg):
        return None
    return VersionSpecifier.parse(arg[1:], signal=Signal.FLAG)


def list_executables(interpreters: Sequence[DiscoveredInterpreter]) -> str:
    if not interpreters:
        raise NoInterpreterFound(ANY)
    width = max(len(str(interpreter.version)) for interpreter in interpreters)
    rows = (f" {str(i.version):<{width}} {_COLUMN_SEPARATOR} {i.path}" for i in interpreters)
    return "\n".join(rows) + "\n"


def help_message(launcher: str, executable: Path, snapshot: EnvironmentSnapshot) -> str:
    from . import __version__  # noqa: PLC0415

    return HELP.format(version=__version__, launcher=launcher, python=executable, config=config_path(snapshot.env))


def setup_logging(env: Mapping[str, str]) -> None:
    level = logging.DEBUG if debug_level(env) else logging.WARNING
    logging.basicConfig(level=level, format="%(name)s: %(message)s", stream=sys.stderr)


def run(argv: Sequence[str], snapshot: EnvironmentSnapshot) -> int:
    launcher, args = argv[0], list(argv[1:])
    first = args[0] if args else None
    if first in _SOLO_FLAGS:
        if len(args) > 1:
            raise IllegalArgument(launcher, first)
        if first == "--list":
            sys.stdout.write(list_executables(all_executables(snapshot)))
            return 0
        executable = select(ANY, discover(snapshot)).path
        sys.stdout.write(help_message(launcher, executable, snapshot))
        sys.stdout.flush()
        dispatch(executable, ["-h"])
    explicit = version_from_flag(first) if first is not None else None
    if explicit is not None:
        args = args[1:]
    selected = resolve(snapshot, explicit, args)
    _LOGGER.info("selected %s via %s", selected.executable, selected.request.signal)
    dispatch(selected.executable, selected.args, signal=selected.request.signal)


def main(argv: Sequence[str] | None = None) -> int:
    argv = sys.argv if argv is None else argv
    setup_logging(os.environ)
    snapshot = EnvironmentSnapshot.capture()
    try:
        return run(argv, snapshot)
    except LauncherError as exception:
        sys.stderr.write(f"py: {exception}\n")
        return exception.exit_code


__all__ = [
    "help_message",
    "list_executables",
    "main",
    "run",
    "version_from_flag",
]
