"""Top-level package for the Board18 renderer.

Provides subpackages:
- b18_render.layout – pixel geometry for maps, markets, par and revenue tracks
- b18_render.tiles – tile catalog lookup, color buckets and token trays
- b18_render.render – content server, rendering surface and capture loop
- b18_render.output – manifest JSON and zip packaging
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"

    if pyproject.exists():
        try:
            content = pyproject.read_text()
            for line in content.splitlines():
                if line.strip().startswith("version"):
                    # Parse: version = "0.3.1"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass

    from importlib.metadata import PackageNotFoundError, version as pkg_version
    try:
        return pkg_version("b18-render")
    except PackageNotFoundError:
        return "0.0.0"

__version__ = _get_version()
__all__: list[str] = ["__version__"]
