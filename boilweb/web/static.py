"""Static asset serving under a public prefix that differs from the asset path.

Assets live under an internal directory of the asset source (``/static/``)
but are published under a shorter public prefix (``/s/``). The handler
rewrites the request path and hands the request to a regular static file app,
which takes care of content types, conditional requests and HEAD.
"""

from __future__ import annotations

import logging
import posixpath
from typing import AnyStr

from starlette.responses import PlainTextResponse
from starlette.types import ASGIApp, Receive, Scope, Send

logger = logging.getLogger(__name__)


def rewrite_path(path: AnyStr, strip_prefix: AnyStr, new_prefix: AnyStr) -> AnyStr:
    """Replace the first occurrence of ``strip_prefix`` in ``path``."""
    return path.replace(strip_prefix, new_prefix, 1)


class PrefixRewriteStaticFiles:
    """ASGI app mapping ``strip_prefix`` paths onto ``new_prefix`` for a static app.

    Both the decoded ``path`` and, when the server supplied one, the
    percent-encoded ``raw_path`` must start with the public prefix, and the
    rewritten path must not climb out of ``new_prefix`` through ``..``
    segments; otherwise the request is answered with 404 without touching the
    static app. The scope is rewritten in place before delegation.
    """

    def __init__(self, app: ASGIApp, strip_prefix: str = "/s/", new_prefix: str = "/static/") -> None:
        self.app = app
        self.strip_prefix = strip_prefix
        self.new_prefix = new_prefix
        self._strip_raw = strip_prefix.encode("ascii")
        self._new_raw = new_prefix.encode("ascii")

    def matches(self, scope: Scope) -> bool:
        raw_path = scope.get("raw_path") or b""
        return scope["path"].startswith(self.strip_prefix) and (
            not raw_path or raw_path.startswith(self._strip_raw)
        )

    def confined(self, path: str) -> bool:
        """Whether ``path`` still lies under ``new_prefix`` once dot segments are resolved."""
        normalized = posixpath.normpath(path)
        return normalized == self.new_prefix.rstrip("/") or normalized.startswith(self.new_prefix)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        path = rewrite_path(scope["path"], self.strip_prefix, self.new_prefix)
        if not self.matches(scope) or not self.confined(path):
            logger.warning(
                "Path=%r RawPath=%r, prefix=%r",
                scope["path"],
                scope.get("raw_path") or b"",
                self.strip_prefix,
            )
            response = PlainTextResponse("Not Found", status_code=404)
            await response(scope, receive, send)
            return

        scope["path"] = path
        if scope.get("raw_path"):
            scope["raw_path"] = rewrite_path(scope["raw_path"], self._strip_raw, self._new_raw)
        # the rewritten path addresses the asset tree from its root, not from the mount point
        scope["root_path"] = ""
        await self.app(scope, receive, send)


__all__ = ["PrefixRewriteStaticFiles", "rewrite_path"]
