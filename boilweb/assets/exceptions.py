"""Asset source specific exceptions."""


class AssetError(Exception):
    """Base class for asset source errors."""


class AssetNotFoundError(AssetError):
    """Raised when a requested asset path does not name a readable file."""
