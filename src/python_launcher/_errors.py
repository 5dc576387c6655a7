"""Failures that end a launcher invocation before (or instead of) handing off to Python."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, ClassVar, Final

if TYPE_CHECKING:
    from pathlib import Path

    from ._version_spec import VersionSpecifier

EX_USAGE: Final[int] = 64
EX_DATAERR: Final[int] = 65
EX_UNAVAILABLE: Final[int] = 69
EX_OSERR: Final[int] = 71
EX_CONFIG: Final[int] = 78


class Signal(str, Enum):
    """The source that drove a resolution."""

    FLAG = "flag"
    SHEBANG = "shebang"
    VENV = "venv"
    ENV_DEFAULT = "env-default"
    NONE = "none"

    def __str__(self) -> str:
        return self.value


class LauncherError(Exception):
    """Base class of every launcher failure, carrying the process exit code to use."""

    exit_code: ClassVar[int] = EX_USAGE

    def __init__(self, message: str, *, signal: Signal = Signal.NONE) -> None:
        super().__init__(message)
        self.signal = signal

    def __str__(self) -> str:
        return f"{super().__str__()} (requested via {self.signal})"


class IllegalArgument(LauncherError):
    exit_code = EX_USAGE

    def __init__(self, launcher: str, argument: str) -> None:
        super().__init__(f"{argument!r} cannot be combined with other arguments to {launcher}")
        self.launcher = launcher
        self.argument = argument


class MalformedSpecifier(LauncherError, ValueError):
    """A version token that is not ``X``, ``X.Y``, ``X.Y-ARCH`` or ``-ARCH``."""

    exit_code = EX_DATAERR

    def __init__(self, token: str, *, signal: Signal = Signal.NONE) -> None:
        super().__init__(f"malformed version specifier {token!r}", signal=signal)
        self.token = token


class NoInterpreterFound(LauncherError):
    exit_code = EX_UNAVAILABLE

    def __init__(self, specifier: VersionSpecifier, *, signal: Signal = Signal.NONE) -> None:
        target = "any Python" if specifier.is_any else f"Python {specifier}"
        super().__init__(f"no executable found for {target}", signal=signal)
        self.specifier = specifier


class AmbiguousVirtualEnvironment(LauncherError):
    exit_code = EX_CONFIG

    def __init__(self, root: Path, reason: str) -> None:
        super().__init__(f"virtual environment at {root} is unusable: {reason}", signal=Signal.VENV)
        self.root = root
        self.reason = reason


class DispatchFailure(LauncherError):
    exit_code = EX_OSERR

    def __init__(self, executable: Path, error: OSError, *, signal: Signal = Signal.NONE) -> None:
        super().__init__(f"failed to execute {executable}: {error.strerror or error}", signal=signal)
        self.executable = executable
        self.error = error


__all__ = [
    "EX_CONFIG",
    "EX_DATAERR",
    "EX_OSERR",
    "EX_UNAVAILABLE",
    "EX_USAGE",
    "AmbiguousVirtualEnvironment",
    "DispatchFailure",
    "IllegalArgument",
    "LauncherError",
    "MalformedSpecifier",
    "NoInterpreterFound",
    "Signal",
]
