"""Pick the interpreter to run by walking the signal sources in precedence order."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Final, NamedTuple

from ._discovery import discover
from ._errors import AmbiguousVirtualEnvironment, NoInterpreterFound, Signal
from ._request import (
    EnvironmentDefault,
    ExplicitFlag,
    ResolutionRequest,
    ShebangRequest,
    Unconstrained,
    VirtualEnvironmentRequest,
)
from ._shebang import request_from_script
from ._venv import detect, load
from ._version_spec import ANY, VersionSpecifier

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from ._discovery import DiscoveredInterpreter
    from ._environment import EnvironmentSnapshot

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)
DEFAULT_ENV_VAR: Final[str] = "PY_PYTHON"


class Selected(NamedTuple):
    executable: Path
    args: list[str]
    request: ResolutionRequest


def choose_request(
    snapshot: EnvironmentSnapshot,
    explicit: VersionSpecifier | None,
    args: Sequence[str],
) -> ResolutionRequest:
    """Derive the single active request: flag, shebang, virtual environment, environment default, nothing."""
    base: ExplicitFlag | ShebangRequest | None = None
    if explicit is not None:
        base = ExplicitFlag(specifier=explicit)
    elif args and (shebang := request_from_script(_script_path(snapshot, args[0]))) is not None:
        base = shebang
    if (venv := _virtual_environment_for(snapshot, base)) is not None:
        return venv
    specifier = ANY if base is None else base.specifier
    if (default := environment_default(snapshot, specifier)) is not None:
        return default
    return Unconstrained() if base is None else base


def _script_path(snapshot: EnvironmentSnapshot, arg: str) -> Path:
    # only the first argument is checked, later ones may belong to the script itself
    script = Path(arg)
    if snapshot.cwd is None or script.is_absolute():
        return script
    return snapshot.cwd / script


def _virtual_environment_for(
    snapshot: EnvironmentSnapshot,
    base: ExplicitFlag | ShebangRequest | None,
) -> VirtualEnvironmentRequest | None:
    if (root := detect(snapshot)) is None:
        return None
    deciding = base is None or base.specifier.is_any
    try:
        environment = load(root, snapshot.native_architecture)
    except AmbiguousVirtualEnvironment as exception:
        if deciding:
            raise
        _LOGGER.warning("skipping %s as %s asked for Python %s", exception, base.signal, base.specifier)
        return None
    if deciding:
        _LOGGER.info("using virtual environment %s", root)
        return VirtualEnvironmentRequest(environment=environment)
    if snapshot.config.prefer_venv and base.specifier.matches(environment.version):
        _LOGGER.info("virtual environment %s satisfies %s %s", root, base.signal, base.specifier)
        return VirtualEnvironmentRequest(environment=environment)
    _LOGGER.info(
        "skipping virtual environment %s (Python %s) for %s %s",
        root,
        environment.version,
        base.signal,
        base.specifier,
    )
    return None


def environment_default(snapshot: EnvironmentSnapshot, specifier: VersionSpecifier) -> EnvironmentDefault | None:
    """Look up ``PY_PYTHON`` for an unconstrained request or ``PY_PYTHON{major}`` for a major-only one."""
    if specifier.is_any:
        variable = DEFAULT_ENV_VAR
    elif specifier.is_major_only:
        variable = f"{DEFAULT_ENV_VAR}{specifier.major}"
    else:
        return None
    key = variable[len("PY_") :].lower()
    _LOGGER.info("checking the %s environment variable", variable)
    if value := snapshot.env.get(variable, "").strip():
        source = variable
    elif value := snapshot.config.defaults.get(key, "").strip():
        source = f"{key} in {snapshot.config.path}"
    else:
        _LOGGER.info("%s not set", variable)
        return None
    _LOGGER.debug("%s = %r", source, value)
    default = VersionSpecifier.parse(value, signal=Signal.ENV_DEFAULT)
    if specifier.major is not None and default.major != specifier.major:
        _LOGGER.warning("ignoring %s=%s as it does not provide Python %s", source, value, specifier.major)
        return None
    return EnvironmentDefault(specifier=default, source=source)


def select(
    specifier: VersionSpecifier,
    interpreters: Iterable[DiscoveredInterpreter],
    *,
    signal: Signal = Signal.NONE,
) -> DiscoveredInterpreter:
    """Return the newest interpreter satisfying *specifier*; ties go to the first one discovered."""
    best: DiscoveredInterpreter | None = None
    for interpreter in interpreters:
        if not specifier.matches(interpreter.version):
            continue
        if specifier.is_exact:
            best = interpreter
            break
        if best is None or interpreter.version.sort_key > best.version.sort_key:
            best = interpreter
    if best is None:
        raise NoInterpreterFound(specifier, signal=signal)
    _LOGGER.debug("accepted %s for %s", best, specifier)
    return best


def resolve(
    snapshot: EnvironmentSnapshot,
    explicit: VersionSpecifier | None,
    args: Sequence[str],
    interpreters: Iterable[DiscoveredInterpreter] | None = None,
) -> Selected:
    """Decide which executable to run for this invocation and which arguments it receives."""
    request = choose_request(snapshot, explicit, args)
    _LOGGER.info("resolving %r", request)
    if isinstance(request, VirtualEnvironmentRequest):
        executable = request.environment.executable
    else:
        candidates = discover(snapshot) if interpreters is None else interpreters
        executable = select(request.specifier, candidates, signal=request.signal).path
    return Selected(executable=executable, args=list(args), request=request)


__all__ = [
    "DEFAULT_ENV_VAR",
    "Selected",
    "choose_request",
    "environment_default",
    "resolve",
    "select",
]
