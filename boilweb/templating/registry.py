"""Template registry with atomically swapped snapshots.

A registry owns one immutable :class:`TemplateSet` at a time. ``load()``
parses the whole set from the asset source and replaces the active snapshot
only when every template compiled and every required template is present.
Readers grab the current snapshot reference once and keep using it, so a
concurrent reload never exposes a half-built set.
"""

from __future__ import annotations

import logging
import posixpath
import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from jinja2 import DictLoader, Environment, Template, TemplateSyntaxError

from boilweb.assets import AssetError, AssetSource

from .exceptions import MissingTemplateError, TemplateLoadError, TemplateNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TemplateSet:
    environment: Environment
    templates: Mapping[str, Template]

    def get(self, name: str) -> Optional[Template]:
        return self.templates.get(name)

    def names(self) -> list[str]:
        return sorted(self.templates)


class TemplateRegistry:
    def __init__(
        self,
        assets: AssetSource,
        *,
        pattern: str = "templates/*.html",
        required: Iterable[str] = ("index.html",),
        prod: bool = False,
    ) -> None:
        self.assets = assets
        self.pattern = pattern
        self.required = tuple(required)
        self.prod = prod
        self._snapshot: Optional[TemplateSet] = None
        self._lock = threading.Lock()

    @property
    def snapshot(self) -> Optional[TemplateSet]:
        return self._snapshot

    @property
    def loaded(self) -> bool:
        return self._snapshot is not None

    def load(self) -> TemplateSet:
        """Parse every template matching the pattern and make the result active."""
        with self._lock:
            snapshot = self._parse()
            self._snapshot = snapshot
        logger.debug("loaded templates %s", ", ".join(snapshot.names()))
        return snapshot

    def reload_if_dev(self) -> bool:
        """Reparse templates unless running in production; failures keep the old set."""
        if self.prod:
            return False
        try:
            self.load()
        except TemplateLoadError as exc:
            logger.error("error reloading templates: %s", exc)
            return False
        return True

    def lookup(self, name: str) -> Optional[Template]:
        snapshot = self._snapshot
        if snapshot is None:
            return None
        return snapshot.get(name)

    def require(self, name: str) -> Template:
        template = self.lookup(name)
        if template is None:
            raise TemplateNotFoundError(name)
        return template

    def names(self) -> list[str]:
        snapshot = self._snapshot
        return snapshot.names() if snapshot else []

    def _parse(self) -> TemplateSet:
        try:
            paths = self.assets.glob(self.pattern)
        except AssetError as exc:
            raise TemplateLoadError(f"invalid template pattern {self.pattern!r}: {exc}") from exc
        if not paths:
            raise TemplateLoadError(f"template pattern {self.pattern!r} matches no files")

        sources: dict[str, str] = {}
        for path in paths:
            try:
                sources[posixpath.basename(path)] = self.assets.read_text(path)
            except AssetError as exc:
                raise TemplateLoadError(f"cannot read template {path}: {exc}") from exc

        environment = Environment(loader=DictLoader(sources), autoescape=True)
        compiled: dict[str, Template] = {}
        for name in sources:
            try:
                compiled[name] = environment.get_template(name)
            except TemplateSyntaxError as exc:
                raise TemplateLoadError(f"{name}:{exc.lineno}: {exc.message}") from exc

        missing = [name for name in self.required if name not in compiled]
        if missing:
            raise MissingTemplateError(missing)
        return TemplateSet(environment=environment, templates=MappingProxyType(compiled))
