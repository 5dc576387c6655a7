"""The signal sources a single invocation can resolve through; exactly one is active per run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Union

from ._errors import Signal
from ._version_spec import _DC_KW, ANY, VersionSpecifier

if TYPE_CHECKING:
    from ._venv import VirtualEnvironment


@dataclass(**_DC_KW)
class ExplicitFlag:
    specifier: VersionSpecifier
    signal: ClassVar[Signal] = Signal.FLAG


@dataclass(**_DC_KW)
class ShebangRequest:
    raw: str
    specifier: VersionSpecifier
    signal: ClassVar[Signal] = Signal.SHEBANG


@dataclass(**_DC_KW)
class VirtualEnvironmentRequest:
    environment: VirtualEnvironment
    signal: ClassVar[Signal] = Signal.VENV

    @property
    def specifier(self) -> VersionSpecifier:
        version = self.environment.version
        return VersionSpecifier(major=version.major, minor=version.minor, architecture=version.architecture)


@dataclass(**_DC_KW)
class EnvironmentDefault:
    specifier: VersionSpecifier
    source: str
    signal: ClassVar[Signal] = Signal.ENV_DEFAULT


@dataclass(**_DC_KW)
class Unconstrained:
    signal: ClassVar[Signal] = Signal.NONE

    @property
    def specifier(self) -> VersionSpecifier:
        return ANY


ResolutionRequest = Union[ExplicitFlag, ShebangRequest, VirtualEnvironmentRequest, EnvironmentDefault, Unconstrained]


__all__ = [
    "EnvironmentDefault",
    "ExplicitFlag",
    "ResolutionRequest",
    "ShebangRequest",
    "Unconstrained",
    "VirtualEnvironmentRequest",
]
