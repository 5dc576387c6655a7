"""Hand the process over to the chosen interpreter."""

from __future__ import annotations

import logging
import os
from shlex import quote
from typing import TYPE_CHECKING, Final, NoReturn

from ._errors import DispatchFailure, Signal

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)


def dispatch(executable: Path, args: Sequence[str], *, signal: Signal = Signal.NONE) -> NoReturn:
    """Replace the current process image with *executable*; only returns by raising :class:`DispatchFailure`.

    The new process gets ``argv[0]`` set to the executable path, followed by *args* unchanged, and inherits the
    environment as-is.
    """
    argv = [str(executable), *args]
    _LOGGER.debug("executing %s", LogCmd(argv))
    try:
        os.execv(executable, argv)
    except OSError as exception:
        raise DispatchFailure(executable, exception, signal=signal) from exception
    msg = "os.execv returned"  # pragma: no cover
    raise AssertionError(msg)  # pragma: no cover


class LogCmd:
    def __init__(self, cmd: Sequence[str]) -> None:
        self.cmd = cmd

    def __repr__(self) -> str:
        return " ".join(quote(str(c)) for c in self.cmd)


__all__ = [
    "LogCmd",
    "dispatch",
]
