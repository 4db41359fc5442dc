from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from boilweb import __version__
from boilweb.core.config import Settings, get_settings
from boilweb.core.container import ApplicationContainer, build_container
from boilweb.db import dispose
from boilweb.web import PrefixRewriteStaticFiles, router


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await dispose(app.state.container.database)


def create_app(
    settings: Optional[Settings] = None,
    *,
    container: Optional[ApplicationContainer] = None,
) -> FastAPI:
    if container is None:
        container = build_container(settings or get_settings())
    settings = container.settings

    app = FastAPI(
        title=settings.project_name,
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.container = container

    app.include_router(router)

    # public prefix -> internal asset directory
    static = PrefixRewriteStaticFiles(
        container.assets.static_app(),
        strip_prefix=settings.static.public_prefix,
        new_prefix=settings.static.internal_prefix,
    )
    app.mount(settings.static.public_prefix.rstrip("/"), static, name="static")

    return app
