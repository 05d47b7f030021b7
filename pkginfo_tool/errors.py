"""Exceptions raised while reading, validating and writing PKGINFO data."""

from __future__ import annotations

from os import PathLike


class PkginfoError(Exception):
    """Base class of every error raised by this package."""


class AlpmTypeError(PkginfoError, ValueError):
    """A value does not follow the format of its ALPM type."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"ALPM type parse error: {detail}")


class IoPathError(PkginfoError, OSError):
    """An I/O operation on a path failed."""

    def __init__(self, path: str | PathLike[str], context: str, cause: BaseException) -> None:
        self.path = path
        self.context = context
        self.cause = cause
        super().__init__(f'I/O error at path "{path}" while {context}:\n{cause}')

    def __str__(self) -> str:
        return f'I/O error at path "{self.path}" while {self.context}:\n{self.cause}'


class DeserializeError(PkginfoError, ValueError):
    """The PKGINFO text could not be turned into a package description."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Failed to deserialize PKGINFO file:\n{detail}")


class NoInputFileError(PkginfoError):
    """Neither a file nor piped input was given."""

    def __init__(self) -> None:
        super().__init__("No input file given.")


class InvalidVariantError(PkginfoError, ValueError):
    """A string names no member of a fixed set of variants."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Invalid variant ({detail})")


class MissingExtraDataError(PkginfoError, ValueError):
    """The required ``pkgtype`` extra data entry is absent."""

    def __init__(self) -> None:
        super().__init__("Extra data is missing.")