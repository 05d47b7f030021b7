"""PKGINFO data following the version 2 specification."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar

from pkginfo_tool.errors import DeserializeError, MissingExtraDataError
from pkginfo_tool.package_info_v1 import PackageInfoV1, Parser
from pkginfo_tool.types import ExtraData, PackageType

_PKGTYPE_KEY = "pkgtype"


@dataclass
class PackageInfoV2(PackageInfoV1):
    """PKGINFO version 2: version 1 fields plus extra data with a required package type."""

    list_parsers: ClassVar[dict[str, Parser]] = {
        **PackageInfoV1.list_parsers,
        "xdata": ExtraData.from_string,
    }

    xdata: list[ExtraData] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.check_pkg_type()

    @classmethod
    def _values_from_text(cls, text: str) -> dict[str, Any]:
        values = super()._values_from_text(text)
        if not values["xdata"]:
            raise DeserializeError("missing field 'xdata'")
        return values

    @classmethod
    def from_string(cls, text: str) -> PackageInfoV2:
        """Parse PKGINFO text and check that it carries a valid package type."""
        return cls(**cls._values_from_text(text))

    def _pkgtype_entry(self) -> ExtraData:
        entry = next((item for item in self.xdata if item.key == _PKGTYPE_KEY), None)
        if entry is None:
            raise MissingExtraDataError()
        return entry

    def pkg_type(self) -> PackageType:
        """Return the package type named by the ``pkgtype`` extra data entry."""
        return PackageType.from_string(self._pkgtype_entry().value)

    def check_pkg_type(self) -> None:
        """Raise if the ``pkgtype`` entry is absent or names no known package type."""
        self.pkg_type()

    def to_dict(self) -> dict[str, Any]:
        """Return the fields as strings and lists of strings, extra data last."""
        return super().to_dict()

    def __str__(self) -> str:
        pkg_type = self._pkgtype_entry()
        other_xdata = [item for item in self.xdata if item.key != _PKGTYPE_KEY]
        header = self._header_lines()
        header.insert(2, f"xdata = {pkg_type}")
        text = "".join(f"{line}\n" for line in header) + self._list_section()
        if other_xdata:
            text += "\n" + "\n".join(f"xdata = {item}" for item in other_xdata)
        return text