"""HTTP layer: page routes and the static asset handler."""

from .pages import router
from .static import PrefixRewriteStaticFiles

__all__ = ["PrefixRewriteStaticFiles", "router"]
