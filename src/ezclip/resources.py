from __future__ import annotations

import logging
from typing import Any

from .errors import ResourceResolutionError
from .host import HostStore
from .policy import DEFAULT_SETTINGS, ClipSettings, layer_color_index

logger = logging.getLogger(__name__)


class ResourceResolver:
    """Ensures named layers, linetypes and text styles exist in a host store.

    Every ``ensure_*`` call is idempotent: an existing resource is never
    touched, so the attributes of the first creation stick.
    """

    def __init__(self, store: HostStore, settings: ClipSettings = DEFAULT_SETTINGS) -> None:
        self.store = store
        self.settings = settings

    def ensure_layer(self, name: str, default_color: int | None = None) -> None:
        if self.store.has("layer", name):
            return
        if default_color is None:
            default_color = self.settings.default_layer_color
        color = layer_color_index(name, default_color, rules=self.settings.layer_color_rules)
        attributes = {
            "color": color,
            "lineweight": self.settings.layer_lineweight,
            "plot": 1 if self.settings.layer_plottable else 0,
        }
        try:
            with self.store.transaction():
                self.store.create("layer", name, attributes)
        except ValueError as exc:
            raise ResourceResolutionError("layer", name, f"cannot create layer {name!r}: {exc}") from exc
        logger.info("created layer %r (color %d)", name, color)

    def ensure_linetype(self, name: str) -> None:
        if self.store.has("linetype", name):
            return
        definition = self.store.standard_linetype(name)
        if definition is None:
            raise ResourceResolutionError(
                "linetype",
                name,
                f"linetype {name!r} not found in the standard linetype library",
            )
        attributes = {
            "description": definition["description"],
            "pattern": definition["pattern"],
        }
        with self.store.transaction():
            self.store.create("linetype", name, attributes)
        logger.info("loaded linetype %r from the standard library", name)

    def ensure_text_style(self, name: str) -> Any | None:
        """Return the style entry for ``name`` or ``None``; styles are never created."""
        if not name or not self.store.has("style", name):
            logger.debug("text style %r not found, keeping the default style", name)
            return None
        return self.store.get("style", name)
