"""Index page and favicon endpoints."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Iterator, Mapping

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse, Response, StreamingResponse
from jinja2 import Template

from boilweb.assets import AssetNotFoundError
from boilweb.core.container import ApplicationContainer

from .deps import get_container

logger = logging.getLogger(__name__)

router = APIRouter()

FAVICON_MEDIA_TYPE = "image/vnd.microsoft.icon"


def format_rfc3339_nano(ns: int) -> str:
    """Format nanoseconds since the epoch as RFC 3339 in UTC, trailing zeros trimmed."""
    seconds, nanos = divmod(ns, 1_000_000_000)
    stamp = datetime.fromtimestamp(seconds, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%S")
    if nanos:
        stamp += "." + f"{nanos:09d}".rstrip("0")
    return stamp + "Z"


def _render(template: Template, context: Mapping[str, Any]) -> Iterator[str]:
    # headers are already sent once the first chunk goes out, so a failure
    # can only end the body early
    try:
        yield from template.generate(context)
    except Exception as exc:  # pylint: disable=broad-except
        logger.error("error rendering %s: %s", template.name, exc)


@router.get("/", response_class=HTMLResponse)
def index(request: Request, container: ApplicationContainer = Depends(get_container)) -> Response:
    logger.info("index %s", request.url.path)
    settings = container.settings
    container.templates.reload_if_dev()
    template = container.templates.require(settings.templates.index)
    context = {
        "request": request,
        "DateStr": format_rfc3339_nano(time.time_ns()),
        "Prod": settings.prod,
        "static_prefix": settings.static.public_prefix,
    }
    return StreamingResponse(_render(template, context), media_type="text/html")


@router.get("/favicon.ico", include_in_schema=False)
def favicon(container: ApplicationContainer = Depends(get_container)) -> Response:
    try:
        data = container.assets.read_bytes(container.settings.static.favicon_path)
    except AssetNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
    return Response(content=data, media_type=FAVICON_MEDIA_TYPE)
