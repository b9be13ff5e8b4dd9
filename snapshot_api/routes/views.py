"""
Map view endpoints.

The menu lists the map entry points; each entry renders a registered view.
"""

from fastapi import APIRouter, Depends, HTTPException

from snapshot_api import config
from snapshot_api.schemas import Menu
from snapshot_api.services import views

router = APIRouter(tags=["views"])


def get_view_host() -> views.ViewHost:
    return views.StaticViewHost(external_url=config.EXTERNAL_MAP_URL)


@router.get("/menu", response_model=Menu)
def read_menu():
    return views.MENU


@router.get("/views/{name}")
def render_view(name: str, host: views.ViewHost = Depends(get_view_host)):
    """
    Render a map view (sidebar, dialog) or redirect to the external map.
    """
    try:
        options = views.get_view(name)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"View '{name}' not found.")
    return host.render_view(name, options)


@router.get("/")
def index(host: views.ViewHost = Depends(get_view_host)):
    return host.render_view("sidebar", views.get_view("sidebar"))
