"""Find Python interpreters by file name on the search path, without ever running them."""

from __future__ import annotations

import logging
import os
import re
from contextlib import suppress
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Final

from ._version_spec import _DC_KW, InterpreterVersion

if TYPE_CHECKING:
    from collections.abc import Generator, Iterable
    from pathlib import Path

    from ._environment import EnvironmentSnapshot

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)
PATTERN: Final[re.Pattern[str]] = re.compile(
    r"""
    python
    (?P<major>[0-9]+)               # major (e.g. 3)
    (?:\.(?P<minor>[0-9]+))?        # minor (e.g. 12)
    (?:-(?P<arch>32|64))?           # architecture bitness
    """,
    re.VERBOSE,
)


class Location(Enum):
    SEARCH_PATH = "PATH"
    FRAMEWORK = "framework"


@dataclass(**_DC_KW)
class DiscoveredInterpreter:
    path: Path
    version: InterpreterVersion
    location: Location
    position: int

    def __str__(self) -> str:
        return f"{self.version} at {self.path}"


def version_from_name(name: str, native_architecture: int | None = None) -> InterpreterVersion | None:
    """Infer the version an executable provides from its file name (e.g. ``python3.12``)."""
    if not (match := PATTERN.fullmatch(name)):
        return None
    arch = match.group("arch")
    return InterpreterVersion(
        major=int(match.group("major")),
        minor=None if match.group("minor") is None else int(match.group("minor")),
        architecture=native_architecture if arch is None else int(arch),
    )


def is_executable_file(path: Path) -> bool:
    try:
        return path.is_file() and os.access(path, os.X_OK)
    except OSError:
        return False


def discover(snapshot: EnvironmentSnapshot) -> Generator[DiscoveredInterpreter, None, None]:
    """Lazily yield every interpreter on the search path, then in the framework directories, in order."""
    position = 0
    sources = [(Location.SEARCH_PATH, snapshot.search_path), (Location.FRAMEWORK, snapshot.framework_dirs)]
    for location, directories in sources:
        for pos, directory in enumerate(get_paths(directories)):
            _LOGGER.debug(LazyPathDump(pos, directory, location, snapshot.debug_level))
            for path, version in _interpreters_in(directory, snapshot.native_architecture):
                interpreter = DiscoveredInterpreter(path=path, version=version, location=location, position=position)
                position += 1
                _LOGGER.debug("found %s", interpreter)
                yield interpreter


def _interpreters_in(directory: Path, native_architecture: int | None) -> list[tuple[Path, InterpreterVersion]]:
    found = []
    try:
        entries = sorted(directory.iterdir(), key=lambda entry: entry.name)
    except OSError:
        _LOGGER.debug("cannot list %s", directory)
        return found
    for entry in entries:
        version = version_from_name(entry.name, native_architecture)
        if version is None:
            continue
        if not is_executable_file(entry):
            _LOGGER.debug("skipping %s as it is not an executable file", entry)
            continue
        found.append((entry.absolute(), version))
    return found


def get_paths(directories: Iterable[Path]) -> Generator[Path, None, None]:
    for entry in directories:
        with suppress(OSError):
            if entry.is_dir() and next(entry.iterdir(), None):
                yield entry


def all_executables(snapshot: EnvironmentSnapshot) -> list[DiscoveredInterpreter]:
    """One interpreter per version, the first one discovered, newest first."""
    first_seen: dict[InterpreterVersion, DiscoveredInterpreter] = {}
    for interpreter in discover(snapshot):
        first_seen.setdefault(interpreter.version, interpreter)
    return sorted(first_seen.values(), key=lambda interpreter: interpreter.version.sort_key, reverse=True)


class LazyPathDump:
    def __init__(self, pos: int, path: Path, location: Location, debug_level: int = 0) -> None:
        self.pos = pos
        self.path = path
        self.location = location
        self.debug_level = debug_level

    def __repr__(self) -> str:
        content = f"discover {self.location.value}[{self.pos}]={self.path}"
        if self.debug_level > 1:
            content += " with =>"
            for file_path in sorted(self.path.iterdir()):
                if is_executable_file(file_path):
                    content += f" {file_path.name}"
        return content


__all__ = [
    "DiscoveredInterpreter",
    "LazyPathDump",
    "Location",
    "all_executables",
    "discover",
    "get_paths",
    "is_executable_file",
    "version_from_name",
]
