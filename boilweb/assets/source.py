"""Asset source abstraction and its two backends.

Assets are addressed by slash-separated relative paths (``static/app.js``)
regardless of backend. Both backends expose the same tree layout: a
``templates/`` directory with page templates and a ``static/`` directory with
files served to browsers.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from fnmatch import fnmatchcase
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path

from starlette.staticfiles import StaticFiles
from starlette.types import ASGIApp

from boilweb.core.config import AssetSettings

from .exceptions import AssetError, AssetNotFoundError

logger = logging.getLogger(__name__)

_GLOB_MAGIC = frozenset("*?[")


def split_path(path: str) -> list[str]:
    """Validate an asset path and return its segments.

    Rejects absolute paths, empty segments and ``.``/``..`` segments so a
    lookup can never leave the source root.
    """
    if not path or path.startswith("/") or path.endswith("/"):
        raise AssetNotFoundError(path)
    segments = path.split("/")
    for segment in segments:
        if segment in ("", ".", ".."):
            raise AssetNotFoundError(path)
    return segments


class AssetSource(ABC):
    """Read-only hierarchical namespace of byte blobs."""

    @property
    @abstractmethod
    def root(self) -> Traversable:
        """Top of the asset tree."""

    @abstractmethod
    def static_app(self) -> ASGIApp:
        """Build an ASGI app serving files of this tree by their path."""

    def glob(self, pattern: str) -> list[str]:
        """Return the sorted paths of files matching ``pattern``.

        Matching is done per segment, so ``*`` never crosses a ``/``.
        """
        matches: list[str] = []
        self._walk(self.root, split_path(pattern), [], matches)
        return sorted(matches)

    def _walk(self, node: Traversable, pattern: list[str], prefix: list[str], out: list[str]) -> None:
        head, rest = pattern[0], pattern[1:]
        if _GLOB_MAGIC.isdisjoint(head):
            candidates = [node.joinpath(head)]
        elif node.is_dir():
            candidates = [child for child in node.iterdir() if fnmatchcase(child.name, head)]
        else:
            candidates = []
        for child in candidates:
            if rest:
                if child.is_dir():
                    self._walk(child, rest, prefix + [child.name], out)
            elif child.is_file():
                out.append("/".join(prefix + [child.name]))

    def locate(self, path: str) -> Traversable:
        node = self.root
        for segment in split_path(path):
            node = node.joinpath(segment)
        return node

    def exists(self, path: str) -> bool:
        try:
            return self.locate(path).is_file()
        except AssetNotFoundError:
            return False

    def read_bytes(self, path: str) -> bytes:
        node = self.locate(path)
        if not node.is_file():
            raise AssetNotFoundError(path)
        try:
            return node.read_bytes()
        except FileNotFoundError as exc:
            raise AssetNotFoundError(path) from exc
        except OSError as exc:
            raise AssetError(f"cannot read asset {path}: {exc}") from exc

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        try:
            return self.read_bytes(path).decode(encoding)
        except UnicodeDecodeError as exc:
            raise AssetError(f"asset {path} is not valid {encoding}: {exc}") from exc


class DirectoryAssetSource(AssetSource):
    """Assets read from a directory on disk."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory).resolve()
        if not self.directory.is_dir():
            raise AssetError(f"asset directory {self.directory} does not exist")

    @property
    def root(self) -> Traversable:
        return self.directory

    def static_app(self) -> ASGIApp:
        return StaticFiles(directory=self.directory)

    def __repr__(self) -> str:
        return f"DirectoryAssetSource({str(self.directory)!r})"


class PackageAssetSource(AssetSource):
    """Assets shipped as data files inside an installed package."""

    def __init__(self, package: str, directory: str = "bundle") -> None:
        self.package = package
        self.directory = directory
        try:
            self._root = resources.files(package).joinpath(directory)
        except ModuleNotFoundError as exc:
            raise AssetError(f"asset package {package} is not importable") from exc
        if not self._root.is_dir():
            raise AssetError(f"package {package} has no asset directory {directory!r}")

    @property
    def root(self) -> Traversable:
        return self._root

    def static_app(self) -> ASGIApp:
        return StaticFiles(packages=[(self.package, self.directory)])

    def __repr__(self) -> str:
        return f"PackageAssetSource({self.package!r}, {self.directory!r})"


def build_asset_source(settings: AssetSettings) -> AssetSource:
    if settings.backend == "directory":
        source: AssetSource = DirectoryAssetSource(settings.directory)
    else:
        source = PackageAssetSource(settings.package, settings.package_dir)
    logger.info("using asset source %r", source)
    return source


__all__ = [
    "AssetSource",
    "DirectoryAssetSource",
    "PackageAssetSource",
    "build_asset_source",
    "split_path",
]
