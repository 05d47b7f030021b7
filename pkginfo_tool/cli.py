"""Command line interface for creating, validating and formatting PKGINFO files."""

from __future__ import annotations

import argparse
import json
import os
import sys
from collections.abc import Iterable, Mapping, Sequence
from enum import Enum
from pathlib import Path
from typing import IO, Any, Union

from pkginfo_tool.errors import (
    InvalidVariantError,
    IoPathError,
    NoInputFileError,
    PkginfoError,
)
from pkginfo_tool.package_info_v1 import PackageInfoV1
from pkginfo_tool.package_info_v2 import PackageInfoV2

PathArg = Union[str, "os.PathLike[str]"]

DEFAULT_OUTPUT = ".PKGINFO"
_ENV_PREFIX = "PKGINFO_"
_OUTPUT_ENV = "PKGINFO_OUTPUT_FILE"

_SCALAR_OPTIONS = (
    "pkgname",
    "pkgbase",
    "pkgver",
    "pkgdesc",
    "url",
    "builddate",
    "packager",
    "size",
    "arch",
)

# Each list option with the delimiter that splits its values apart.
_LIST_OPTIONS: dict[str, str | None] = {
    "license": " ",
    "replaces": " ",
    "group": " ",
    "conflict": " ",
    "provides": " ",
    "backup": " ",
    "depend": " ",
    "optdepend": ",",
    "makedepend": " ",
    "checkdepend": " ",
}
_XDATA_OPTION = "xdata"


class OutputFormat(Enum):
    """Formats the ``format`` command can write."""

    JSON = "json"

    def __str__(self) -> str:
        return self.value


def _env_name(option: str) -> str:
    return f"{_ENV_PREFIX}{option.upper()}"


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for the command line tool."""
    parser = argparse.ArgumentParser(
        prog="pkginfo-tool",
        description="Create, validate and format PKGINFO files.",
    )
    commands = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")

    create = commands.add_parser(
        "create",
        help="create a PKGINFO file according to a schema",
        description=(
            "Create a PKGINFO file according to a schema. Every option may also be "
            "given through its PKGINFO_<OPTION> environment variable."
        ),
    )
    versions = create.add_subparsers(dest="version", required=True, metavar="VERSION")

    common = argparse.ArgumentParser(add_help=False)
    for option in _SCALAR_OPTIONS:
        common.add_argument(
            f"--{option}",
            metavar=option.upper(),
            help=f"the {option} value (env: {_env_name(option)})",
        )
    for option, delimiter in _LIST_OPTIONS.items():
        common.add_argument(
            f"--{option}",
            action="append",
            metavar=option.upper(),
            help=(
                f"one or more {option} values, separated by {delimiter!r} "
                f"(env: {_env_name(option)})"
            ),
        )
    common.add_argument(
        "output",
        nargs="?",
        metavar="FILE",
        help=f"file to write to (env: {_OUTPUT_ENV}, default: {DEFAULT_OUTPUT})",
    )

    versions.add_parser("v1", parents=[common], help="create a PKGINFO version 1 file")
    v2 = versions.add_parser("v2", parents=[common], help="create a PKGINFO version 2 file")
    v2.add_argument(
        f"--{_XDATA_OPTION}",
        action="append",
        metavar="XDATA",
        help=f"one or more key=value extra data entries (env: {_env_name(_XDATA_OPTION)})",
    )

    validate_cmd = commands.add_parser("validate", help="validate a PKGINFO file")
    validate_cmd.add_argument(
        "file", nargs="?", type=Path, metavar="FILE", help="file to read; stdin if omitted"
    )

    format_cmd = commands.add_parser(
        "format", help="parse a PKGINFO file and write it in another format"
    )
    format_cmd.add_argument(
        "file", nargs="?", type=Path, metavar="FILE", help="file to read; stdin if omitted"
    )
    format_cmd.add_argument(
        "-o",
        "--output-format",
        choices=[item.value for item in OutputFormat],
        default=OutputFormat.JSON.value,
        metavar="OUTPUT_FORMAT",
        help="the output format to use (default: json)",
    )
    format_cmd.add_argument(
        "-p", "--pretty", action="store_true", help="pretty-print the output"
    )
    return parser


def _split(values: Iterable[str], delimiter: str | None) -> list[str]:
    pieces: list[str] = []
    for value in values:
        parts = value.split(delimiter) if delimiter else [value]
        pieces.extend(part for part in parts if part)
    return pieces


def _resolve_create_values(
    parser: argparse.ArgumentParser,
    args: argparse.Namespace,
    environ: Mapping[str, str],
) -> dict[str, Any]:
    values: dict[str, Any] = {}
    missing: list[str] = []
    for option in _SCALAR_OPTIONS:
        value = getattr(args, option)
        if value is None:
            value = environ.get(_env_name(option)) or None
        if value is None:
            missing.append(f"--{option}")
        else:
            values[option] = value
    if missing:
        parser.error("the following arguments are required: " + ", ".join(missing))

    list_options = dict(_LIST_OPTIONS)
    if args.version == "v2":
        list_options[_XDATA_OPTION] = None
    for option, delimiter in list_options.items():
        given = getattr(args, option)
        if given is None:
            env_value = environ.get(_env_name(option))
            given = [env_value] if env_value else []
        values[option] = _split(given, delimiter)
    return values


def create_file(version: int, values: Mapping[str, Any], output: PathArg = DEFAULT_OUTPUT) -> None:
    """Validate ``values`` against PKGINFO version ``version`` and write them to ``output``.

    Scalar fields are given as strings, list fields as iterables of strings.
    """
    if version == 1:
        info_cls: type[PackageInfoV1] = PackageInfoV1
    elif version == 2:
        info_cls = PackageInfoV2
    else:
        raise InvalidVariantError(f"unknown PKGINFO version {version!r}")

    known = set(info_cls.scalar_parsers) | set(info_cls.list_parsers)
    unknown = [key for key in values if key not in known]
    if unknown:
        raise PkginfoError(f"unknown field {unknown[0]!r} for PKGINFO version {version}")

    fields: dict[str, Any] = {}
    for key, parser in info_cls.scalar_parsers.items():
        raw = values.get(key)
        if raw is None:
            raise PkginfoError(f"missing value for {key!r}")
        fields[key] = parser(raw)
    for key, parser in info_cls.list_parsers.items():
        fields[key] = [parser(raw) for raw in values.get(key) or ()]

    data = str(info_cls(**fields))

    path = Path(output)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise IoPathError(path.parent, "creating output directory", exc) from exc
    try:
        with path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(data)
    except OSError as exc:
        raise IoPathError(path, "writing to output file", exc) from exc


def _read_stdin(stdin: IO[Any] | None) -> str:
    if stdin is None or stdin.isatty():
        raise NoInputFileError()
    source = getattr(stdin, "buffer", stdin)
    try:
        data = source.read()
    except OSError as exc:
        raise IoPathError("/dev/stdin", "reading from stdin", exc) from exc
    if isinstance(data, str):
        return data
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise PkginfoError(str(exc)) from exc


def parse(file: PathArg | None = None, stdin: IO[Any] | None = None) -> PackageInfoV1:
    """Read PKGINFO data from ``file`` or, if none is given, from piped standard input.

    Version 2 is tried first, then version 1.
    """
    if file is not None:
        try:
            contents = Path(file).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise IoPathError(file, "reading file contents", exc) from exc
    else:
        contents = _read_stdin(sys.stdin if stdin is None else stdin)

    try:
        return PackageInfoV2.from_string(contents)
    except PkginfoError:
        return PackageInfoV1.from_string(contents)


def validate(file: PathArg | None = None, stdin: IO[Any] | None = None) -> None:
    """Raise if the PKGINFO data in ``file`` or on standard input is not valid."""
    parse(file, stdin)


def format_output(
    file: PathArg | None = None,
    output_format: OutputFormat | str = OutputFormat.JSON,
    pretty: bool = False,
    stdin: IO[Any] | None = None,
) -> str:
    """Parse PKGINFO data, print it to stdout in ``output_format`` and return the text."""
    info = parse(file, stdin)
    fmt = OutputFormat(output_format)
    if fmt is OutputFormat.JSON:
        if pretty:
            text = json.dumps(info.to_dict(), indent=2, ensure_ascii=False)
        else:
            text = json.dumps(info.to_dict(), separators=(",", ":"), ensure_ascii=False)
    print(text)
    return text


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line tool and return its exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        if args.command == "create":
            values = _resolve_create_values(parser, args, os.environ)
            output = args.output or os.environ.get(_OUTPUT_ENV) or DEFAULT_OUTPUT
            create_file(2 if args.version == "v2" else 1, values, output)
        elif args.command == "validate":
            validate(args.file)
        else:
            format_output(args.file, args.output_format, args.pretty)
    except PkginfoError as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())