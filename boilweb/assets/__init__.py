"""Read-only asset sources backed by a package bundle or a filesystem directory."""

from .exceptions import AssetError, AssetNotFoundError
from .source import AssetSource, DirectoryAssetSource, PackageAssetSource, build_asset_source

__all__ = [
    "AssetError",
    "AssetNotFoundError",
    "AssetSource",
    "DirectoryAssetSource",
    "PackageAssetSource",
    "build_asset_source",
]
