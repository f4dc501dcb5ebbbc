"""Top-level package for DynamicSheets.

Provides subpackages:
- dynamicsheets.core – request, question and standards data models
- dynamicsheets.builder – question generation, page layout and PDF output
- dynamicsheets.standards – standards pack import, registry and CSV conversion
- dynamicsheets.web – Flask HTTP surface
"""

PRODUCT_NAME = "DynamicSheets4Teach™"


def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        try:
            for line in pyproject.read_text(encoding="utf-8").splitlines():
                if line.strip().startswith("version"):
                    # Parse: version = "0.1.0"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass

    try:
        from importlib.metadata import PackageNotFoundError, version as pkg_version
    except ImportError:
        return "0.0.0"
    try:
        return pkg_version("dynamicsheets")
    except PackageNotFoundError:
        return "0.0.0"


__version__ = _get_version()
__all__: list[str] = ["__version__", "PRODUCT_NAME"]
