"""Package relations, shared object names and optional dependencies."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Union

from pkginfo_tool.errors import AlpmTypeError
from pkginfo_tool.types import Name, Version

_OPERATORS = ("<=", ">=", "<", ">", "=")
_SHARED_OBJECT_RE = re.compile(r"[A-Za-z0-9_@+][A-Za-z0-9@._+-]*\.so")
_SONAME_RE = re.compile(r"[A-Za-z0-9_@+][A-Za-z0-9@._+-]*\.so(?:\.[A-Za-z0-9._+-]+)?")


class RelationOrSoname:
    """A run-time dependency or provision: a relation or a soname."""

    __slots__ = ()

    @classmethod
    def from_string(cls, text: str) -> RelationOrSoname:
        return parse_relation_or_soname(text)


@dataclass(frozen=True)
class VersionRequirement:
    """A comparison operator together with a version."""

    comparison: str
    version: Version

    def __post_init__(self) -> None:
        if self.comparison not in _OPERATORS:
            raise AlpmTypeError(f"invalid version comparison {self.comparison!r}")

    @classmethod
    def from_string(cls, text: str) -> VersionRequirement:
        for operator in _OPERATORS:
            if text.startswith(operator):
                return cls(operator, Version.from_string(text[len(operator):]))
        raise AlpmTypeError(f"invalid version requirement {text!r}")

    def __str__(self) -> str:
        return f"{self.comparison}{self.version}"


@dataclass(frozen=True)
class PackageRelation(RelationOrSoname):
    """A package name with an optional version requirement."""

    name: Name
    version_requirement: VersionRequirement | None = None

    @classmethod
    def from_string(cls, text: str) -> PackageRelation:
        match = re.search(r"[<>=]", text)
        if match is None:
            return cls(Name.from_string(text))
        split = match.start()
        return cls(
            Name.from_string(text[:split]),
            VersionRequirement.from_string(text[split:]),
        )

    def __str__(self) -> str:
        requirement = self.version_requirement
        return f"{self.name}{requirement}" if requirement is not None else str(self.name)


class ElfArchitectureFormat(Enum):
    """The ELF class of a shared object."""

    BIT32 = "32"
    BIT64 = "64"

    def __str__(self) -> str:
        return self.value


VersionOrSoname = Union[Version, str]


@dataclass(frozen=True)
class SonameV1(RelationOrSoname):
    """A shared object name, optionally with a version or soname and an ELF class."""

    name: str
    version_or_soname: VersionOrSoname | None = None
    architecture: ElfArchitectureFormat | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not _SHARED_OBJECT_RE.fullmatch(self.name):
            raise AlpmTypeError(f"invalid shared object name {self.name!r}")
        if (self.version_or_soname is None) != (self.architecture is None):
            raise AlpmTypeError(
                "a soname needs both a version or soname and an architecture, or neither"
            )
        if isinstance(self.version_or_soname, str) and not _SHARED_OBJECT_RE.fullmatch(
            self.version_or_soname
        ):
            raise AlpmTypeError(f"invalid shared object name {self.version_or_soname!r}")

    @classmethod
    def from_string(cls, text: str) -> SonameV1:
        name, sep, rest = text.partition("=")
        if not sep:
            return cls(name)
        target, dash, arch = rest.rpartition("-")
        if not dash:
            raise AlpmTypeError(f"soname {text!r} has no architecture")
        try:
            architecture = ElfArchitectureFormat(arch)
        except ValueError:
            raise AlpmTypeError(f"invalid ELF architecture format {arch!r}") from None
        target_value: VersionOrSoname
        if _SHARED_OBJECT_RE.fullmatch(target):
            target_value = target
        else:
            target_value = Version.from_string(target)
        return cls(name, target_value, architecture)

    def __str__(self) -> str:
        if self.version_or_soname is None:
            return self.name
        return f"{self.name}={self.version_or_soname}-{self.architecture}"


@dataclass(frozen=True)
class SonameV2(RelationOrSoname):
    """A soname qualified by a library prefix, as in ``lib:libfoo.so.1``."""

    prefix: Name
    soname: str

    def __post_init__(self) -> None:
        if not isinstance(self.soname, str) or not _SONAME_RE.fullmatch(self.soname):
            raise AlpmTypeError(f"invalid soname {self.soname!r}")

    @classmethod
    def from_string(cls, text: str) -> SonameV2:
        prefix, sep, soname = text.partition(":")
        if not sep:
            raise AlpmTypeError(f"soname {text!r} has no prefix")
        return cls(Name.from_string(prefix), soname)

    def __str__(self) -> str:
        return f"{self.prefix}:{self.soname}"


@dataclass(frozen=True)
class OptionalDependency:
    """A package relation with an optional description of what it adds."""

    relation: PackageRelation
    description: str | None = None

    @classmethod
    def from_string(cls, text: str) -> OptionalDependency:
        relation, sep, description = text.partition(":")
        return cls(
            PackageRelation.from_string(relation.strip()),
            description.strip() or None if sep else None,
        )

    def __str__(self) -> str:
        if self.description:
            return f"{self.relation}: {self.description}"
        return str(self.relation)


def parse_relation_or_soname(text: str) -> RelationOrSoname:
    """Recognise a SonameV2, then a SonameV1, then a PackageRelation in ``text``."""
    for kind in (SonameV2, SonameV1, PackageRelation):
        try:
            return kind.from_string(text)
        except AlpmTypeError:
            continue
    raise AlpmTypeError(
        f"{text!r}: expected alpm-sonamev2, alpm-sonamev1 or alpm-package-relation"
    )