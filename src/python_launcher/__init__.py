"""Launch the right Python interpreter for the invocation at hand."""

from __future__ import annotations

from importlib.metadata import version

from ._discovery import DiscoveredInterpreter, Location, discover
from ._dispatch import dispatch
from ._environment import EnvironmentSnapshot
from ._errors import (
    AmbiguousVirtualEnvironment,
    DispatchFailure,
    IllegalArgument,
    LauncherError,
    MalformedSpecifier,
    NoInterpreterFound,
    Signal,
)
from ._request import (
    EnvironmentDefault,
    ExplicitFlag,
    ResolutionRequest,
    ShebangRequest,
    Unconstrained,
    VirtualEnvironmentRequest,
)
from ._resolver import Selected, resolve
from ._version_spec import InterpreterVersion, VersionSpecifier

__version__ = version("python-launcher")

__all__ = [
    "AmbiguousVirtualEnvironment",
    "DiscoveredInterpreter",
    "DispatchFailure",
    "EnvironmentDefault",
    "EnvironmentSnapshot",
    "ExplicitFlag",
    "IllegalArgument",
    "InterpreterVersion",
    "LauncherError",
    "Location",
    "MalformedSpecifier",
    "NoInterpreterFound",
    "ResolutionRequest",
    "Selected",
    "ShebangRequest",
    "Signal",
    "Unconstrained",
    "VersionSpecifier",
    "VirtualEnvironmentRequest",
    "__version__",
    "discover",
    "dispatch",
    "resolve",
]
