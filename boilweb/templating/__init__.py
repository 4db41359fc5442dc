"""Page templates loaded from an asset source."""

from .exceptions import MissingTemplateError, TemplateError, TemplateLoadError, TemplateNotFoundError
from .registry import TemplateRegistry, TemplateSet

__all__ = [
    "MissingTemplateError",
    "TemplateError",
    "TemplateLoadError",
    "TemplateNotFoundError",
    "TemplateRegistry",
    "TemplateSet",
]
