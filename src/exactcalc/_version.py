"""Installed version of exactcalc."""

from importlib.metadata import PackageNotFoundError, version


def get_version() -> str:
    """Return the installed distribution version, or "0.0.0" when run from an uninstalled tree."""
    try:
        return version("exactcalc")
    except PackageNotFoundError:
        return "0.0.0"
