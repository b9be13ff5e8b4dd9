"""
Map views service.

Registers the map entry points (sidebar, large dialog, external map) and
renders them from the static HTML shipped with the package. The views
fetch their data from the JSON endpoints; nothing here touches sheets.
"""

import logging
from pathlib import Path
from string import Template
from typing import Optional, Protocol

from fastapi.responses import HTMLResponse, RedirectResponse, Response

from snapshot_api.schemas import Menu, MenuItem, ViewOptions

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"

VIEWS = {
    "sidebar": ViewOptions(
        kind="sidebar",
        title="Storage Caves",
        template="mapSidebar.html",
        width=300,
        height=420,
    ),
    "dialog": ViewOptions(
        kind="dialog",
        title="Storage Caves Interactive Map",
        template="mapSidebar.html",
        width=900,
        height=700,
    ),
    "external": ViewOptions(kind="external", title="Opening Map..."),
}

MENU = Menu(
    title="Storage Caves Map",
    items=[
        MenuItem(label="Open Sidebar", view="sidebar"),
        MenuItem(label="Open Large Dialog", view="dialog"),
        MenuItem(label="Open External Map", view="external"),
    ],
)


class ViewHost(Protocol):
    def render_view(self, name: str, options: ViewOptions) -> Response: ...


def get_view(name: str) -> ViewOptions:
    """Look up a registered view. Raises KeyError for unknown names."""
    return VIEWS[name]


class StaticViewHost:
    """Serves views from HTML files, filling in $title, $width, $height and $map_url."""

    def __init__(self, static_dir: Path = STATIC_DIR, external_url: Optional[str] = None):
        self.static_dir = Path(static_dir)
        self.external_url = external_url

    def render_view(self, name: str, options: ViewOptions) -> Response:
        if options.kind == "external":
            url = options.url or self.external_url
            if not url:
                raise ValueError(f"View '{name}' has no external URL configured")
            logger.info("Redirecting view '%s' to %s", name, url)
            return RedirectResponse(url)

        html = Template((self.static_dir / options.template).read_text(encoding="utf-8"))
        return HTMLResponse(
            html.safe_substitute(
                title=options.title,
                width=options.width or "",
                height=options.height or "",
                map_url=self.external_url or "",
            )
        )
