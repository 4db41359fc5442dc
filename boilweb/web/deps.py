"""Reusable FastAPI dependencies."""

from fastapi import Request

from boilweb.core.container import ApplicationContainer


def get_container(request: Request) -> ApplicationContainer:
    return request.app.state.container


__all__ = ["get_container"]
