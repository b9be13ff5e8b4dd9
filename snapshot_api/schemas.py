from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional


class Snapshot(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    sheet: Optional[str] = None  # Only set in multi-location mode
    last_updated: str = Field(alias="lastUpdated")
    total_units: int = Field(alias="totalUnits")
    data: List[Dict[str, Any]] = []


class SnapshotError(BaseModel):
    success: bool = False
    error: str
    message: str


class StatusStats(BaseModel):
    available: int = 0
    sold: int = 0
    reserved: int = 0
    leased: int = 0


class LocationCatalog(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    locations: List[str]
    default_location: Optional[str] = Field(default=None, alias="defaultLocation")


class MenuItem(BaseModel):
    label: str
    view: str


class Menu(BaseModel):
    title: str
    items: List[MenuItem]


class ViewOptions(BaseModel):
    kind: str  # sidebar | dialog | external
    title: str
    template: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    url: Optional[str] = None
