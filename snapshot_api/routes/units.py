"""
Unit data endpoints.

Serve the sheet snapshot consumed by the interactive map, plus the status
stats and location catalog used by the sidebar.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from snapshot_api import config
from snapshot_api.schemas import LocationCatalog, StatusStats
from snapshot_api.services import exporter
from snapshot_api.services.sheets import DataSource, get_data_source

logger = logging.getLogger(__name__)

router = APIRouter(tags=["units"])


@router.get("/units")
def read_units(
    location: Optional[str] = None,
    sheet: Optional[str] = None,
    source: DataSource = Depends(get_data_source),
):
    """
    Return every unit row of the selected sheet as a JSON snapshot.

    Failures are reported in the body with ``success: false``; the
    response status stays 200.
    """
    snapshot = exporter.build_snapshot(
        source,
        sheet or location,
        catalog=config.LOCATION_CATALOG,
        multi_location=config.MULTI_LOCATION,
        default_sheet=config.DEFAULT_SHEET,
    )
    return JSONResponse(
        content=snapshot.model_dump(mode="json", by_alias=True, exclude_unset=True)
    )


@router.get("/stats", response_model=StatusStats)
def read_stats(
    location: Optional[str] = None,
    sheet: Optional[str] = None,
    source: DataSource = Depends(get_data_source),
):
    """
    Count units per status (available, sold, reserved, leased).
    """
    try:
        return exporter.compute_status_stats(
            source,
            sheet or location,
            catalog=config.LOCATION_CATALOG,
            multi_location=config.MULTI_LOCATION,
            default_sheet=config.DEFAULT_SHEET,
            status_label=config.STATUS_COLUMN,
        )
    except Exception as e:
        logger.error("Stats query failed for '%s': %s", sheet or location, e)
        raise HTTPException(status_code=502, detail=f"Failed to read sheet: {e}")


@router.get("/locations", response_model=LocationCatalog)
def read_locations():
    """
    List the catalog's sheet tabs for the sidebar location picker.
    """
    if not config.MULTI_LOCATION:
        raise HTTPException(
            status_code=404,
            detail="Location catalog is only available in multi-location mode.",
        )
    return exporter.location_catalog(config.LOCATION_CATALOG)
