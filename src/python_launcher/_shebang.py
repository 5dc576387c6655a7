"""Find the Python version a script asks for on its ``#!`` line."""

from __future__ import annotations

import logging
import re
from pathlib import Path, PurePosixPath
from stat import S_ISREG
from typing import Final

from ._errors import MalformedSpecifier, Signal
from ._request import ShebangRequest
from ._version_spec import ANY, VersionSpecifier

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)

#: the kernel never looks further than this into a script for its interpreter line
MAX_SHEBANG_BYTES: Final[int] = 256
MARKER: Final[bytes] = b"#!"
VIRTUAL_DIRS: Final[frozenset[str]] = frozenset({"/bin", "/usr/bin", "/usr/local/bin"})
LAUNCHER_NAME: Final[str] = "py"
_PYTHON_COMMAND: Final[re.Pattern[str]] = re.compile(r"python(?P<version>[-0-9].*)?")
_VERSION_FLAG: Final[re.Pattern[str]] = re.compile(r"-(?:-?[0-9])")
_TRAILING_TOKEN: Final[re.Pattern[bytes]] = re.compile(rb"\S*\Z")


def read_first_line(path: str | Path) -> str | None:
    """Return the ``#!`` line of *path* without its terminator, or ``None`` when there is none.

    Only regular files are read: a pipe or device would block, or lose the bytes the interpreter needs later.
    """
    try:
        if not S_ISREG(Path(path).stat().st_mode):
            _LOGGER.debug("%s is not a regular file", path)
            return None
        with Path(path).open("rb") as file_handler:
            head = file_handler.read(MAX_SHEBANG_BYTES + 1)
    except OSError as exception:
        _LOGGER.debug("cannot read %s: %s", path, exception)
        return None
    if not head.startswith(MARKER):
        _LOGGER.debug("no %r at the start of %s", MARKER.decode(), path)
        return None
    first_line, newline, _ = head[:MAX_SHEBANG_BYTES].partition(b"\n")
    if not newline and len(head) > MAX_SHEBANG_BYTES and not head[MAX_SHEBANG_BYTES:].isspace():
        # the kernel drops whatever token its buffer cut in two
        first_line = _TRAILING_TOKEN.sub(b"", first_line).rstrip()
        if not first_line.startswith(MARKER):
            _LOGGER.debug("first line of %s is longer than %d bytes", path, MAX_SHEBANG_BYTES)
            return None
    try:
        return first_line.rstrip(b"\r").decode("utf-8")
    except UnicodeDecodeError:
        _LOGGER.debug("first line of %s is not UTF-8", path)
        return None


def _command_tokens(line: str) -> list[str] | None:
    tokens = line[len(MARKER) :].split()
    if not tokens:
        return None
    interpreter = PurePosixPath(tokens[0])
    if str(interpreter.parent) not in VIRTUAL_DIRS and tokens[0] != interpreter.name:
        return None
    if interpreter.name != "env":
        return [interpreter.name, *tokens[1:]]
    rest = tokens[1:]
    while rest and rest[0].startswith("-"):  # env options, e.g. -S
        rest = rest[1:]
    if not rest or PurePosixPath(rest[0]).name != rest[0]:
        return None
    return rest


def extract_request(line: str) -> ShebangRequest | None:
    """Turn a ``#!`` line into a request, or ``None`` if it does not name a Python interpreter."""
    if not line.startswith(MARKER.decode()) or (tokens := _command_tokens(line.strip())) is None:
        return None
    command, arguments = tokens[0], tokens[1:]
    if command == LAUNCHER_NAME:
        specifier = ANY
        if arguments and _VERSION_FLAG.match(arguments[0]):
            try:
                specifier = VersionSpecifier.parse(arguments[0][1:], signal=Signal.SHEBANG)
            except MalformedSpecifier:
                _LOGGER.debug("ignoring shebang %r with malformed version flag", line)
                return None
        return ShebangRequest(raw=command, specifier=specifier)
    if not (match := _PYTHON_COMMAND.fullmatch(command)):
        _LOGGER.debug("shebang %r is not for Python", line)
        return None
    try:
        specifier = VersionSpecifier.parse(match.group("version") or "", signal=Signal.SHEBANG)
    except MalformedSpecifier:
        _LOGGER.debug("ignoring shebang %r with malformed version", line)
        return None
    _LOGGER.debug("found shebang %r requesting %s", command, specifier)
    return ShebangRequest(raw=command, specifier=specifier)


def request_from_script(path: str | Path) -> ShebangRequest | None:
    _LOGGER.info("checking %s for a shebang", path)
    if (line := read_first_line(path)) is None:
        return None
    return extract_request(line)


__all__ = [
    "MAX_SHEBANG_BYTES",
    "extract_request",
    "read_first_line",
    "request_from_script",
]
