import io
import json
import sys

import pytest

from pkginfo_tool.cli import (
    OutputFormat,
    build_parser,
    create_file,
    format_output,
    main,
    parse,
    validate,
)
from pkginfo_tool.errors import (
    AlpmTypeError,
    DeserializeError,
    InvalidVariantError,
    IoPathError,
    MissingExtraDataError,
    NoInputFileError,
    PkginfoError,
)
from pkginfo_tool.package_info_v1 import PackageInfoV1
from pkginfo_tool.package_info_v2 import PackageInfoV2
from pkginfo_tool.types import PackageType

VALID_PKGINFO_V1_DATA = """
pkgname = example
pkgbase = example
pkgver = 1:1.0.0-1
pkgdesc = A project that does something
url = https://example.org/
builddate = 1729181726
packager = John Doe <john@example.com>
size = 181849963
arch = any
license = GPL-3.0-or-later
license = LGPL-3.0-or-later
replaces = other-package>0.9.0-3
group = package-group
group = other-package-group
conflict = conflicting-package<1.0.0
conflict = other-conflicting-package<1.0.0
provides = some-component
provides = some-other-component=1:1.0.0-1
backup = etc/example/config.toml
backup = etc/example/other-config.txt
depend = glibc
depend = gcc-libs
optdepend = python: for special-python-script.py
optdepend = ruby: for special-ruby-script.rb
makedepend = cmake
makedepend = python-sphinx
checkdepend = extra-test-tool
checkdepend = other-extra-test-tool
"""

VALID_PKGINFO_V2_DATA = """
pkgname = example
pkgbase = example
xdata = pkgtype=pkg
pkgver = 1:1.0.0-1
pkgdesc = A project that does something
url = https://example.org/
builddate = 1729181726
packager = John Doe <john@example.com>
size = 181849963
arch = any
license = GPL-3.0-or-later
license = LGPL-3.0-or-later
replaces = other-package>0.9.0-3
group = package-group
group = other-package-group
conflict = conflicting-package<1.0.0
conflict = other-conflicting-package<1.0.0
provides = some-component
provides = some-other-component=1:1.0.0-1
backup = etc/example/config.toml
backup = etc/example/other-config.txt
depend = glibc
depend = gcc-libs
optdepend = python: for special-python-script.py
optdepend = ruby: for special-ruby-script.rb
makedepend = cmake
makedepend = python-sphinx
checkdepend = extra-test-tool
checkdepend = other-extra-test-tool
"""

REQUIRED = {
    "pkgname": "example",
    "pkgbase": "example",
    "pkgver": "1:1.0.0-1",
    "pkgdesc": "A project that does something",
    "url": "https://example.org/",
    "builddate": "1729181726",
    "packager": "John Doe <john@example.com>",
    "size": "181849963",
    "arch": "any",
}

LISTS = {
    "license": ["GPL-3.0-or-later", "LGPL-3.0-or-later"],
    "replaces": ["other-package>0.9.0-3"],
    "group": ["package-group", "other-package-group"],
    "conflict": ["conflicting-package<1.0.0", "other-conflicting-package<1.0.0"],
    "provides": ["some-component", "some-other-component=1:1.0.0-1"],
    "backup": ["etc/example/config.toml", "etc/example/other-config.txt"],
    "depend": ["glibc", "gcc-libs"],
    "optdepend": [
        "python: for special-python-script.py",
        "ruby: for special-ruby-script.rb",
    ],
    "makedepend": ["cmake", "python-sphinx"],
    "checkdepend": ["extra-test-tool", "other-extra-test-tool"],
}

HEADER_V1 = (
    "pkgname = example\n"
    "pkgbase = example\n"
    "pkgver = 1:1.0.0-1\n"
    "pkgdesc = A project that does something\n"
    "url = https://example.org/\n"
    "builddate = 1729181726\n"
    "packager = John Doe <john@example.com>\n"
    "size = 181849963\n"
    "arch = any\n"
)
HEADER_V2 = HEADER_V1.replace(
    "pkgbase = example\n", "pkgbase = example\nxdata = pkgtype=pkg\n"
)

ALL_ENV_NAMES = [
    f"PKGINFO_{name.upper()}" for name in [*REQUIRED, *LISTS, "xdata", "output_file"]
]


class _Terminal(io.StringIO):
    def isatty(self):
        return True


def _stdin(text):
    return io.TextIOWrapper(io.BytesIO(text.encode("utf-8")), encoding="utf-8")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ALL_ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def _input(all_fields, xdata):
    values = dict(REQUIRED)
    lists = LISTS if all_fields else {}
    return values, lists, xdata


def _expected(all_fields, xdata):
    if xdata is None:
        return VALID_PKGINFO_V1_DATA.strip() if all_fields else HEADER_V1
    return VALID_PKGINFO_V2_DATA.strip() if all_fields else HEADER_V2


CASES = [
    pytest.param(True, None, id="pkginfov1_all_fields"),
    pytest.param(False, None, id="pkginfov1_optional_fields"),
    pytest.param(True, ["pkgtype=pkg"], id="pkginfov2_all_fields"),
    pytest.param(False, ["pkgtype=pkg"], id="pkginfov2_optional_fields"),
]


@pytest.mark.parametrize("data", [VALID_PKGINFO_V1_DATA, VALID_PKGINFO_V2_DATA])
def test_validate_valid_stdin(monkeypatch, data):
    monkeypatch.setattr(sys, "stdin", _stdin(data))
    assert main(["validate"]) == 0


def test_parse_v1_falls_back_to_v1():
    info = parse(None, _stdin(VALID_PKGINFO_V1_DATA))
    assert type(info) is PackageInfoV1
    assert str(info) == VALID_PKGINFO_V1_DATA.strip()


def test_parse_v2_is_detected():
    info = parse(None, _stdin(VALID_PKGINFO_V2_DATA))
    assert isinstance(info, PackageInfoV2)
    assert info.pkg_type() == PackageType.PACKAGE


def test_parse_from_file(tmp_path):
    path = tmp_path / "pkginfo"
    path.write_text(VALID_PKGINFO_V2_DATA, encoding="utf-8")
    assert str(parse(path)) == VALID_PKGINFO_V2_DATA.strip()


@pytest.mark.parametrize(
    "data, has_xdata",
    [(VALID_PKGINFO_V1_DATA, False), (VALID_PKGINFO_V2_DATA, True)],
)
def test_format_pretty_json(monkeypatch, capsys, data, has_xdata):
    monkeypatch.setattr(sys, "stdin", _stdin(data))
    assert main(["format", "-p"]) == 0
    out = capsys.readouterr().out
    assert '\n  "pkgname": "example",' in out
    parsed = json.loads(out)
    expected_keys = [*REQUIRED, *LISTS] + (["xdata"] if has_xdata else [])
    assert list(parsed) == expected_keys
    assert parsed["url"] == "https://example.org/"
    assert parsed["license"] == ["GPL-3.0-or-later", "LGPL-3.0-or-later"]
    if has_xdata:
        assert parsed["xdata"] == ["pkgtype=pkg"]


def test_format_compact_json(capsys):
    text = format_output(None, OutputFormat.JSON, False, _stdin(VALID_PKGINFO_V1_DATA))
    assert text.startswith('{"pkgname":"example","pkgbase":"example",')
    assert capsys.readouterr().out == text + "\n"


def test_output_format_text():
    assert str(OutputFormat.JSON) == "json"
    assert OutputFormat("json") is OutputFormat.JSON


@pytest.mark.parametrize("all_fields, xdata", CASES)
def test_write_pkginfo_via_cli(monkeypatch, tmp_path, all_fields, xdata):
    monkeypatch.chdir(tmp_path)
    scalars, lists, xdata_values = _input(all_fields, xdata)
    argv = ["create", "v2" if xdata else "v1"]
    for key, value in scalars.items():
        argv += [f"--{key}", value]
    for key, items in lists.items():
        for item in items:
            argv += [f"--{key}", item]
    for item in xdata_values or []:
        argv += ["--xdata", item]
    assert main(argv) == 0
    path = tmp_path / ".PKGINFO"
    assert path.read_text(encoding="utf-8") == _expected(all_fields, xdata)
    assert main(["validate", str(path)]) == 0


@pytest.mark.parametrize("all_fields, xdata", CASES)
def test_write_pkginfo_via_env(monkeypatch, tmp_path, all_fields, xdata):
    monkeypatch.chdir(tmp_path)
    scalars, lists, xdata_values = _input(all_fields, xdata)
    for key, value in scalars.items():
        monkeypatch.setenv(f"PKGINFO_{key.upper()}", value)
    for key, items in lists.items():
        joiner = "," if key == "optdepend" else " "
        monkeypatch.setenv(f"PKGINFO_{key.upper()}", joiner.join(items))
    if xdata_values:
        monkeypatch.setenv("PKGINFO_XDATA", " ".join(xdata_values))
    assert main(["create", "v2" if xdata else "v1"]) == 0
    path = tmp_path / ".PKGINFO"
    assert path.read_text(encoding="utf-8") == _expected(all_fields, xdata)
    assert main(["validate", str(path)]) == 0


def test_output_file_from_env(monkeypatch, tmp_path):
    target = tmp_path / "out" / "info"
    monkeypatch.setenv("PKGINFO_OUTPUT_FILE", str(target))
    argv = ["create", "v1"]
    for key, value in REQUIRED.items():
        argv += [f"--{key}", value]
    assert main(argv) == 0
    assert target.read_text(encoding="utf-8") == HEADER_V1


def test_create_file_creates_parent_directories(tmp_path):
    target = tmp_path / "a" / "b" / ".PKGINFO"
    create_file(2, {**REQUIRED, **LISTS, "xdata": ["pkgtype=pkg"]}, target)
    assert target.read_text(encoding="utf-8") == VALID_PKGINFO_V2_DATA.strip()


def test_create_file_v2_without_xdata(tmp_path):
    with pytest.raises(MissingExtraDataError):
        create_file(2, REQUIRED, tmp_path / ".PKGINFO")
    assert not (tmp_path / ".PKGINFO").exists()


def test_create_file_v2_invalid_pkgtype(tmp_path):
    with pytest.raises(InvalidVariantError):
        create_file(2, {**REQUIRED, "xdata": ["pkgtype=foo"]}, tmp_path / ".PKGINFO")


def test_create_file_invalid_name(tmp_path):
    with pytest.raises(AlpmTypeError):
        create_file(1, {**REQUIRED, "pkgname": "-bad name"}, tmp_path / ".PKGINFO")


def test_create_file_missing_value(tmp_path):
    values = {key: value for key, value in REQUIRED.items() if key != "arch"}
    with pytest.raises(PkginfoError, match="arch"):
        create_file(1, values, tmp_path / ".PKGINFO")


def test_create_file_v1_rejects_xdata(tmp_path):
    with pytest.raises(PkginfoError, match="xdata"):
        create_file(1, {**REQUIRED, "xdata": ["pkgtype=pkg"]}, tmp_path / ".PKGINFO")


def test_create_file_unknown_version(tmp_path):
    with pytest.raises(InvalidVariantError):
        create_file(3, REQUIRED, tmp_path / ".PKGINFO")


def test_create_file_parent_is_a_file(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    with pytest.raises(IoPathError) as info:
        create_file(1, REQUIRED, blocker / "sub" / ".PKGINFO")
    assert "creating output directory" in str(info.value)


def test_validate_missing_file(tmp_path):
    with pytest.raises(IoPathError) as info:
        validate(tmp_path / "missing")
    assert "reading file contents" in str(info.value)


def test_validate_terminal_stdin():
    with pytest.raises(NoInputFileError):
        validate(None, _Terminal())


def test_validate_invalid_content():
    with pytest.raises(DeserializeError):
        validate(None, _stdin("pkgname = example\n"))


def test_validate_duplicate_field():
    with pytest.raises(DeserializeError):
        validate(None, _stdin(VALID_PKGINFO_V1_DATA + "pkgname = foo\n"))


def test_parse_invalid_utf8():
    with pytest.raises(PkginfoError):
        parse(None, io.BytesIO(b"pkgname = \xff\xfe\n"))


def test_main_reports_error(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", _stdin("not a pkginfo\n"))
    assert main(["validate"]) == 1
    assert "Failed to deserialize PKGINFO file" in capsys.readouterr().err


def test_main_create_missing_required_exits_with_usage_error():
    with pytest.raises(SystemExit) as info:
        main(["create", "v1"])
    assert info.value.code == 2


def test_main_rejects_unknown_output_format():
    with pytest.raises(SystemExit) as info:
        main(["format", "-o", "yaml"])
    assert info.value.code == 2


def test_build_parser_format_defaults():
    args = build_parser().parse_args(["format"])
    assert args.command == "format"
    assert args.output_format == "json"
    assert args.pretty is False
    assert args.file is None