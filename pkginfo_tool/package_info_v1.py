"""PKGINFO data following the version 1 specification."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, fields
from typing import Any, ClassVar

from pkginfo_tool.errors import DeserializeError, PkginfoError
from pkginfo_tool.relations import (
    OptionalDependency,
    PackageRelation,
    RelationOrSoname,
)
from pkginfo_tool.types import (
    Architecture,
    Backup,
    BuildDate,
    Group,
    InstalledSize,
    License,
    Name,
    Packager,
    Url,
    Version,
)

Parser = Callable[[str], Any]

_SCALAR_PARSERS: dict[str, Parser] = {
    "pkgname": Name.from_string,
    "pkgbase": Name.from_string,
    "pkgver": Version.from_string,
    "pkgdesc": str,
    "url": Url.from_string,
    "builddate": BuildDate.from_string,
    "packager": Packager.from_string,
    "size": InstalledSize.from_string,
    "arch": Architecture.from_string,
}

_LIST_PARSERS: dict[str, Parser] = {
    "license": License.from_string,
    "replaces": PackageRelation.from_string,
    "group": Group.from_string,
    "conflict": PackageRelation.from_string,
    "provides": RelationOrSoname.from_string,
    "backup": Backup.from_string,
    "depend": RelationOrSoname.from_string,
    "optdepend": OptionalDependency.from_string,
    "makedepend": PackageRelation.from_string,
    "checkdepend": PackageRelation.from_string,
}


def parse_key_values(text: str) -> dict[str, list[str]]:
    """Split PKGINFO text into its keys, each with the values given for it in order.

    Blank lines and lines starting with ``#`` are ignored. Every other line must
    have the form ``key = value``.
    """
    entries: dict[str, list[str]] = {}
    for number, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key:
            raise DeserializeError(f"line {number}: expected 'key = value', got {raw_line!r}")
        entries.setdefault(key, []).append(value.strip())
    return entries


def format_list(label: str, items: Iterable[object]) -> str:
    """Render each item as a ``label = item`` line, each line ending in a newline."""
    return "".join(f"{label} = {item}\n" for item in items)


def _convert(key: str, parser: Parser, value: str) -> Any:
    try:
        return parser(value)
    except PkginfoError as exc:
        raise DeserializeError(f"invalid value for {key!r}: {exc}") from exc


@dataclass
class PackageInfoV1:
    """PKGINFO version 1: package metadata with repeatable relation fields."""

    scalar_parsers: ClassVar[dict[str, Parser]] = _SCALAR_PARSERS
    list_parsers: ClassVar[dict[str, Parser]] = _LIST_PARSERS

    pkgname: Name
    pkgbase: Name
    pkgver: Version
    pkgdesc: str
    url: Url
    builddate: BuildDate
    packager: Packager
    size: InstalledSize
    arch: Architecture
    license: list[License] = field(default_factory=list)
    replaces: list[PackageRelation] = field(default_factory=list)
    group: list[Group] = field(default_factory=list)
    conflict: list[PackageRelation] = field(default_factory=list)
    provides: list[RelationOrSoname] = field(default_factory=list)
    backup: list[Backup] = field(default_factory=list)
    depend: list[RelationOrSoname] = field(default_factory=list)
    optdepend: list[OptionalDependency] = field(default_factory=list)
    makedepend: list[PackageRelation] = field(default_factory=list)
    checkdepend: list[PackageRelation] = field(default_factory=list)

    @classmethod
    def _values_from_text(cls, text: str) -> dict[str, Any]:
        entries = parse_key_values(text)
        unknown = [key for key in entries if key not in cls.scalar_parsers and key not in cls.list_parsers]
        if unknown:
            raise DeserializeError(f"unknown field {unknown[0]!r}")
        missing = [key for key in cls.scalar_parsers if key not in entries]
        if missing:
            raise DeserializeError(f"missing field {missing[0]!r}")

        values: dict[str, Any] = {}
        for key, parser in cls.scalar_parsers.items():
            given = entries[key]
            if len(given) > 1:
                raise DeserializeError(f"duplicate field {key!r}")
            values[key] = _convert(key, parser, given[0])
        for key, parser in cls.list_parsers.items():
            values[key] = [_convert(key, parser, value) for value in entries.get(key, [])]
        return values

    @classmethod
    def from_string(cls, text: str) -> PackageInfoV1:
        """Parse PKGINFO text, raising DeserializeError if it does not validate."""
        return cls(**cls._values_from_text(text))

    def to_dict(self) -> dict[str, Any]:
        """Return the fields as strings and lists of strings, in declaration order."""
        result: dict[str, Any] = {}
        for item in fields(self):
            value = getattr(self, item.name)
            if isinstance(value, list):
                result[item.name] = [str(entry) for entry in value]
            else:
                result[item.name] = str(value)
        return result

    def _header_lines(self) -> list[str]:
        return [
            f"pkgname = {self.pkgname}",
            f"pkgbase = {self.pkgbase}",
            f"pkgver = {self.pkgver}",
            f"pkgdesc = {self.pkgdesc}",
            f"url = {self.url}",
            f"builddate = {self.builddate}",
            f"packager = {self.packager}",
            f"size = {self.size}",
            f"arch = {self.arch}",
        ]

    def _list_section(self) -> str:
        sections = [
            format_list("license", self.license),
            format_list("replaces", self.replaces),
            format_list("group", self.group),
            format_list("conflict", self.conflict),
            format_list("provides", self.provides),
            format_list("backup", self.backup),
            format_list("depend", self.depend),
            format_list("optdepend", self.optdepend),
            format_list("makedepend", self.makedepend),
            format_list("checkdepend", self.checkdepend).rstrip("\n"),
        ]
        return "".join(sections)

    def __str__(self) -> str:
        return "".join(f"{line}\n" for line in self._header_lines()) + self._list_section()