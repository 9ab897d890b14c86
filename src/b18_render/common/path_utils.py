"""Path and filename utilities.

Single source of truth for the render output layout:

    <output_root>/<bname>/board18-<bname>-<version>/<bname>-<version>/Map.png
    <output_root>/<bname>/board18-<bname>-<version>.json
    <output_root>/<bname>/board18-<bname>-<version>.zip
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


def capitalize(text: str) -> str:
    """Upper-case the first character only.

    Examples:
        >>> capitalize("yellow/green")
        'Yellow/green'
        >>> capitalize("")
        ''
    """
    return text[:1].upper() + text[1:]


def color_filename(color: str) -> str:
    """File name for a tile color sheet.

    Examples:
        >>> color_filename("yellow")
        'Yellow.png'
        >>> color_filename("green/brown")
        'Green_brown.png'
    """
    return f"{capitalize(color.replace('/', '_'))}.png"


@dataclass(frozen=True)
class RenderPaths:
    """Output locations for one game version.

    Attributes:
        output_root: Base render directory (usually "render")
        bname: Game name
        version: Package version
    """

    output_root: Path
    bname: str
    version: str

    @property
    def id(self) -> str:
        return f"{self.bname}-{self.version}"

    @property
    def folder_name(self) -> str:
        return f"board18-{self.id}"

    @property
    def game_dir(self) -> Path:
        return self.output_root / self.bname

    @property
    def package_dir(self) -> Path:
        """Directory zipped into the archive (archive root folder)."""
        return self.game_dir / self.folder_name

    @property
    def image_dir(self) -> Path:
        return self.package_dir / self.id

    @property
    def manifest_path(self) -> Path:
        return self.game_dir / f"{self.folder_name}.json"

    @property
    def archive_path(self) -> Path:
        return self.game_dir / f"{self.folder_name}.zip"

    @property
    def archive_manifest_name(self) -> str:
        """Manifest path inside the archive, Board18 import layout."""
        return f"{self.folder_name}/{self.id}.json"

    @property
    def lock_path(self) -> Path:
        return self.game_dir / ".render.lock"

    def image(self, filename: str) -> Path:
        return self.image_dir / filename

    def display(self, path: Path) -> str:
        """Path relative to the output root, for progress messages."""
        try:
            return path.relative_to(self.output_root).as_posix()
        except ValueError:
            return path.as_posix()
