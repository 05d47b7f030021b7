[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pkginfo_tool"
version = "0.1.0"
description = "Create, validate and format PKGINFO package metadata files"
requires-python = ">=3.10"
dependencies = []
keywords = ["pkginfo", "packaging", "alpm", "metadata", "validation"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Archiving :: Packaging",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
pkginfo-tool = "pkginfo_tool.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["pkginfo_tool"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
