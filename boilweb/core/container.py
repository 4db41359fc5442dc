"""Simple dependency container for wiring core services."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from boilweb.assets import AssetSource, build_asset_source
from boilweb.core.config import Settings, get_settings
from boilweb.db import connect
from boilweb.templating import TemplateRegistry


@dataclass(slots=True)
class ApplicationContainer:
    settings: Settings
    assets: AssetSource
    templates: TemplateRegistry
    database: Optional[AsyncEngine] = None


def build_container(settings: Optional[Settings] = None) -> ApplicationContainer:
    """Build the asset source, load templates and open the optional database.

    Template load failures propagate: the application cannot serve its
    index page without them.
    """
    settings = settings or get_settings()
    assets = build_asset_source(settings.assets)
    templates = TemplateRegistry(
        assets,
        pattern=settings.templates.pattern,
        required=(settings.templates.index,),
        prod=settings.prod,
    )
    templates.load()
    return ApplicationContainer(
        settings=settings,
        assets=assets,
        templates=templates,
        database=connect(settings.database),
    )


__all__ = ["ApplicationContainer", "build_container"]
