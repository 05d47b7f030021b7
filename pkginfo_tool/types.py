"""Value types used in PKGINFO fields."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlsplit, urlunsplit

from pkginfo_tool.errors import AlpmTypeError, InvalidVariantError

_NAME_RE = re.compile(r"[A-Za-z0-9@._+-]+")
_PKGVER_RE = re.compile(r"[A-Za-z0-9][A-Za-z0-9._+]*")
_PKGREL_RE = re.compile(r"\d+(?:\.\d+)?")
_VERSION_RE = re.compile(
    r"(?:(?P<epoch>\d+):)?(?P<pkgver>[A-Za-z0-9][A-Za-z0-9._+]*)(?:-(?P<pkgrel>\d+(?:\.\d+)?))?"
)
_SCHEME_RE = re.compile(r"[A-Za-z][A-Za-z0-9+.-]*")
_SPECIAL_SCHEMES = frozenset({"http", "https", "ftp", "ws", "wss"})
_PACKAGER_RE = re.compile(
    r"(?P<name>[^<>\s](?:[^<>]*[^<>\s])?) <(?P<email>[^\s<>@]+@[^\s<>@]+)>"
)
_EMAIL_RE = re.compile(r"[^\s<>@]+@[^\s<>@]+")


def _require_str(value: object, what: str) -> str:
    if not isinstance(value, str):
        raise AlpmTypeError(f"{what} must be a string, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class Name:
    """A package name following the alpm-package-name rules."""

    value: str

    def __post_init__(self) -> None:
        text = _require_str(self.value, "package name")
        if not _NAME_RE.fullmatch(text) or text[0] in "-.":
            raise AlpmTypeError(f"invalid package name {text!r}")

    @classmethod
    def from_string(cls, text: str) -> Name:
        return cls(text)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Version:
    """A package version of the form ``[epoch:]pkgver[-pkgrel]``."""

    pkgver: str
    epoch: int | None = None
    pkgrel: str | None = None

    def __post_init__(self) -> None:
        if not _PKGVER_RE.fullmatch(_require_str(self.pkgver, "pkgver")):
            raise AlpmTypeError(f"invalid pkgver {self.pkgver!r}")
        if self.epoch is not None and (
            isinstance(self.epoch, bool) or not isinstance(self.epoch, int) or self.epoch < 0
        ):
            raise AlpmTypeError(f"invalid epoch {self.epoch!r}")
        if self.pkgrel is not None and not _PKGREL_RE.fullmatch(
            _require_str(self.pkgrel, "pkgrel")
        ):
            raise AlpmTypeError(f"invalid pkgrel {self.pkgrel!r}")

    @classmethod
    def from_string(cls, text: str) -> Version:
        match = _VERSION_RE.fullmatch(_require_str(text, "version"))
        if match is None:
            raise AlpmTypeError(f"invalid version {text!r}")
        epoch = match["epoch"]
        return cls(
            match["pkgver"],
            int(epoch) if epoch is not None else None,
            match["pkgrel"],
        )

    def __str__(self) -> str:
        text = self.pkgver
        if self.epoch is not None:
            text = f"{self.epoch}:{text}"
        if self.pkgrel is not None:
            text = f"{text}-{self.pkgrel}"
        return text


class Architecture(Enum):
    """A CPU architecture a package is built for."""

    ANY = "any"
    AARCH64 = "aarch64"
    ARM = "arm"
    ARMV6H = "armv6h"
    ARMV7H = "armv7h"
    I386 = "i386"
    I486 = "i486"
    I686 = "i686"
    PENTIUM4 = "pentium4"
    RISCV32 = "riscv32"
    RISCV64 = "riscv64"
    X86_64 = "x86_64"
    X86_64_V2 = "x86_64_v2"
    X86_64_V3 = "x86_64_v3"
    X86_64_V4 = "x86_64_v4"

    @classmethod
    def from_string(cls, text: str) -> Architecture:
        try:
            return cls(text)
        except ValueError:
            raise AlpmTypeError(f"invalid architecture {text!r}") from None

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class BuildDate:
    """A build time in seconds since the Unix epoch."""

    timestamp: int

    def __post_init__(self) -> None:
        if isinstance(self.timestamp, bool) or not isinstance(self.timestamp, int):
            raise AlpmTypeError(f"invalid build date {self.timestamp!r}")

    @classmethod
    def from_string(cls, text: str) -> BuildDate:
        if not re.fullmatch(r"-?\d+", _require_str(text, "build date")):
            raise AlpmTypeError(f"invalid build date {text!r}")
        return cls(int(text))

    def __str__(self) -> str:
        return str(self.timestamp)


@dataclass(frozen=True)
class InstalledSize:
    """The installed size of a package in bytes."""

    size: int

    def __post_init__(self) -> None:
        if isinstance(self.size, bool) or not isinstance(self.size, int) or self.size < 0:
            raise AlpmTypeError(f"invalid installed size {self.size!r}")

    @classmethod
    def from_string(cls, text: str) -> InstalledSize:
        if not re.fullmatch(r"\d+", _require_str(text, "installed size")):
            raise AlpmTypeError(f"invalid installed size {text!r}")
        return cls(int(text))

    def __str__(self) -> str:
        return str(self.size)


@dataclass(frozen=True)
class License:
    """A license identifier or expression."""

    expression: str

    def __post_init__(self) -> None:
        text = _require_str(self.expression, "license")
        if not text or text != text.strip() or "\n" in text:
            raise AlpmTypeError(f"invalid license {text!r}")

    @classmethod
    def from_string(cls, text: str) -> License:
        return cls(text)

    def __str__(self) -> str:
        return self.expression


@dataclass(frozen=True)
class Group:
    """The name of a package group."""

    name: str

    def __post_init__(self) -> None:
        text = _require_str(self.name, "group")
        if not text or any(char.isspace() for char in text):
            raise AlpmTypeError(f"invalid group {text!r}")

    @classmethod
    def from_string(cls, text: str) -> Group:
        return cls(text)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Backup:
    """A relative path to a file that is backed up on upgrade."""

    path: str

    def __post_init__(self) -> None:
        text = _require_str(self.path, "backup path")
        if not text or text.startswith("/") or text.endswith("/") or "\n" in text:
            raise AlpmTypeError(f"invalid backup path {text!r}")

    @classmethod
    def from_string(cls, text: str) -> Backup:
        return cls(text)

    def __str__(self) -> str:
        return self.path


@dataclass(frozen=True)
class Url:
    """An absolute URL."""

    value: str

    def __post_init__(self) -> None:
        text = _require_str(self.value, "url")
        if not text or any(char.isspace() for char in text):
            raise AlpmTypeError(f"invalid url {text!r}")
        try:
            parts = urlsplit(text)
        except ValueError as exc:
            raise AlpmTypeError(f"invalid url {text!r}: {exc}") from exc
        if not _SCHEME_RE.fullmatch(parts.scheme):
            raise AlpmTypeError(f"url {text!r} has no scheme")
        if parts.scheme.lower() in _SPECIAL_SCHEMES and not parts.netloc:
            raise AlpmTypeError(f"url {text!r} has no host")

    @classmethod
    def from_string(cls, text: str) -> Url:
        cls(text)
        parts = urlsplit(text)
        scheme = parts.scheme.lower()
        path = parts.path
        if not path and scheme in _SPECIAL_SCHEMES:
            path = "/"
        return cls(urlunsplit((scheme, parts.netloc, path, parts.query, parts.fragment)))

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Packager:
    """The person who built a package: a name and an e-mail address."""

    name: str
    email: str

    def __post_init__(self) -> None:
        name = _require_str(self.name, "packager name")
        if not name or name != name.strip() or "<" in name or ">" in name:
            raise AlpmTypeError(f"invalid packager name {name!r}")
        if not _EMAIL_RE.fullmatch(_require_str(self.email, "packager e-mail")):
            raise AlpmTypeError(f"invalid packager e-mail {self.email!r}")

    @classmethod
    def from_string(cls, text: str) -> Packager:
        match = _PACKAGER_RE.fullmatch(_require_str(text, "packager"))
        if match is None:
            raise AlpmTypeError(f"invalid packager {text!r}")
        return cls(match["name"], match["email"])

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"


@dataclass(frozen=True)
class ExtraData:
    """A ``key=value`` pair of extra package data."""

    key: str
    value: str

    def __post_init__(self) -> None:
        key = _require_str(self.key, "extra data key")
        value = _require_str(self.value, "extra data value")
        if not key or "=" in key or any(char.isspace() for char in key):
            raise AlpmTypeError(f"invalid extra data key {key!r}")
        if not value or "\n" in value:
            raise AlpmTypeError(f"invalid extra data value {value!r}")

    @classmethod
    def from_string(cls, text: str) -> ExtraData:
        key, sep, value = _require_str(text, "extra data").partition("=")
        if not sep:
            raise AlpmTypeError(f"extra data {text!r} is not of the form key=value")
        return cls(key, value)

    def __str__(self) -> str:
        return f"{self.key}={self.value}"


class PackageType(Enum):
    """The kind of package described by a PKGINFO file."""

    DEBUG = "debug"
    PACKAGE = "pkg"
    SOURCE = "src"
    SPLIT = "split"

    @classmethod
    def from_string(cls, text: str) -> PackageType:
        try:
            return cls(text)
        except ValueError:
            raise InvalidVariantError(f"Matching variant not found: {text!r}") from None

    def __str__(self) -> str:
        return self.value