"""Create, validate and format PKGINFO package metadata files, versions 1 and 2."""

__version__ = "0.1.0"