# pkginfo_tool

Create, validate and format `.PKGINFO` files: the metadata file stored in
package archives. Both format version 1 and format version 2 are supported.
Version 2 adds `xdata = key=value` entries and requires one of them to be a
`pkgtype` naming `pkg`, `debug`, `src` or `split`.

The package has no dependencies outside the standard library.

## Installation

```
pip install .
```

## Command line

### validate

```
pkginfo-tool validate path/to/.PKGINFO
cat .PKGINFO | pkginfo-tool validate
```

The data is read as version 2 first and, if that fails, as version 1. When no
file is given, piped standard input is read; if standard input is a terminal,
the command fails with `No input file given.`. A valid file prints nothing and
exits with 0. An invalid one prints the error on standard error and exits
with 1.

### format

```
pkginfo-tool format path/to/.PKGINFO
pkginfo-tool format -p path/to/.PKGINFO
```

The file (or standard input) is parsed and validated the same way, then
printed as JSON: one object whose keys are the field names, with scalar
fields as strings and repeatable fields as lists of strings. For version 2
data, `xdata` comes last. `-p`/`--pretty` indents the output by two spaces.
`-o`/`--output-format` selects the format; `json` is the only one and the
default.

### create

```
pkginfo-tool create v1 \
    --pkgname example --pkgbase example --pkgver 1:1.0.0-1 \
    --pkgdesc "A project that does something" \
    --url https://example.org/ --builddate 1729181726 \
    --packager "John Doe <john@example.com>" \
    --size 181849963 --arch any \
    --license GPL-3.0-or-later --depend glibc

pkginfo-tool create v2 ... --xdata pkgtype=pkg
```

`--pkgname`, `--pkgbase`, `--pkgver`, `--pkgdesc`, `--url`, `--builddate`,
`--packager`, `--size` and `--arch` are required. `--license`, `--replaces`,
`--group`, `--conflict`, `--provides`, `--backup`, `--depend`, `--optdepend`,
`--makedepend` and `--checkdepend` may be repeated; a single value holding
several entries is also split, on spaces, or on commas for `--optdepend`.
`create v2` also takes `--xdata`, which may be repeated and is not split.

An optional positional `FILE` names the output file; it defaults to
`.PKGINFO`, and missing parent directories are created.

Every option can also be set through an environment variable named
`PKGINFO_` followed by the option in upper case, for example
`PKGINFO_PKGNAME`, `PKGINFO_DEPEND` or `PKGINFO_XDATA`. The output file can be
set with `PKGINFO_OUTPUT_FILE`. An option given on the command line takes
precedence over its variable.

## Library

```python
from pkginfo_tool.package_info_v2 import PackageInfoV2

with open(".PKGINFO", encoding="utf-8") as handle:
    info = PackageInfoV2.from_string(handle.read())

print(info.pkg_type())   # PackageType.PACKAGE
print(info.to_dict())
print(str(info))         # the PKGINFO text again
```

- `pkginfo_tool.package_info_v1.PackageInfoV1` and
  `pkginfo_tool.package_info_v2.PackageInfoV2` are dataclasses with a
  `from_string` parser, `to_dict()` and a `__str__` that writes PKGINFO text.
  `PackageInfoV2` checks its `pkgtype` entry when it is built.
- `pkginfo_tool.types` holds the field value types (`Name`, `Version`,
  `Url`, `Packager`, `Architecture`, `PackageType`, `ExtraData` and others),
  each with a `from_string` class method.
- `pkginfo_tool.relations` holds `PackageRelation`, `SonameV1`, `SonameV2`,
  `OptionalDependency` and `parse_relation_or_soname`, which tries a
  `SonameV2`, then a `SonameV1`, then a `PackageRelation`.
- `pkginfo_tool.cli` exposes the commands as functions: `create_file`,
  `parse`, `validate`, `format_output` and `main`.

Invalid data raises a subclass of `pkginfo_tool.errors.PkginfoError`:
`AlpmTypeError`, `DeserializeError`, `InvalidVariantError`,
`MissingExtraDataError`, `NoInputFileError` or `IoPathError`.

## Limits

Field values are checked against simplified rules. In particular, license
values are accepted as any non-blank single-line text and are not checked
against the SPDX license list, and URLs are checked only for a scheme and,
for web schemes, a host.