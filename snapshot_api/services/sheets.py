"""
Google Sheets service.

Data sources the exporter reads grids from. Each source lists its tabs in
declared order and returns a tab's raw cell grid (row 0 = headers).
"""

import json
import logging
from collections.abc import Mapping, Sequence
from functools import lru_cache
from typing import Any, Optional, Protocol

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from snapshot_api import config
from snapshot_api.services.exporter import SourceNotFound

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets.readonly"]


class DataSource(Protocol):
    def list_sources(self) -> list[str]: ...

    def read_grid(self, name: str) -> list[list[Any]]: ...


def _quote_sheet_name(name: str) -> str:
    """Quote a tab name for A1 notation (e.g. Buford - GA -> 'Buford - GA')."""
    return "'" + name.replace("'", "''") + "'"


class GoogleSheetsSource:
    """Reads tabs of one spreadsheet through the Sheets API v4."""

    def __init__(self, spreadsheet_id: Optional[str], service=None):
        self.spreadsheet_id = spreadsheet_id
        self._service = service

    def _get_sheets_service(self):
        """Return the injected client, else build a fresh one for this call."""
        if self._service is not None:
            return self._service
        if not self.spreadsheet_id:
            raise ValueError("SPREADSHEET_ID is not configured")
        # httplib2 clients are not thread-safe; never share one across requests
        credentials = config.get_google_credentials(SCOPES)
        return build("sheets", "v4", credentials=credentials)

    def list_sources(self) -> list[str]:
        result = (
            self._get_sheets_service().spreadsheets()
            .get(spreadsheetId=self.spreadsheet_id, fields="sheets.properties.title")
            .execute()
        )
        return [s["properties"]["title"] for s in result.get("sheets", [])]

    def read_grid(self, name: str) -> list[list[Any]]:
        """
        Read every populated cell of a tab.

        Numbers and booleans keep their types; dates come back as the
        sheet's formatted strings. The API trims trailing empty cells, so
        rows can be shorter than the header.
        """
        try:
            result = (
                self._get_sheets_service().spreadsheets()
                .values()
                .get(
                    spreadsheetId=self.spreadsheet_id,
                    range=_quote_sheet_name(name),
                    valueRenderOption="UNFORMATTED_VALUE",
                    dateTimeRenderOption="FORMATTED_STRING",
                )
                .execute()
            )
        except HttpError as e:
            # The API answers 400 "Unable to parse range" for unknown tabs
            if e.resp.status == 400:
                raise SourceNotFound(name) from e
            raise

        values = result.get("values", [])
        logger.debug("Read %d row(s) from sheet '%s'", len(values), name)
        return values


class InMemorySource:
    """Grids held in memory, keyed by tab name in declared order."""

    def __init__(self, grids: Mapping[str, Sequence[Sequence[Any]]]):
        self.grids = {name: list(grid) for name, grid in grids.items()}

    @classmethod
    def from_json_file(cls, path: str) -> "InMemorySource":
        with open(path, encoding="utf-8") as f:
            grids = json.load(f)
        if not isinstance(grids, dict):
            raise ValueError(f"{path} must hold a JSON object of tab name -> rows")
        return cls(grids)

    def list_sources(self) -> list[str]:
        return list(self.grids)

    def read_grid(self, name: str) -> list[list[Any]]:
        try:
            return self.grids[name]
        except KeyError:
            raise SourceNotFound(name) from None


@lru_cache(maxsize=1)
def get_data_source() -> DataSource:
    """FastAPI dependency returning the configured data source."""
    if config.DATA_SOURCE == "memory":
        if not config.SAMPLE_DATA_FILE:
            raise ValueError("DATA_SOURCE=memory requires SAMPLE_DATA_FILE")
        logger.info("Serving sheets from %s", config.SAMPLE_DATA_FILE)
        return InMemorySource.from_json_file(config.SAMPLE_DATA_FILE)

    if config.DATA_SOURCE != "google":
        raise ValueError(f"Unknown DATA_SOURCE '{config.DATA_SOURCE}'")
    return GoogleSheetsSource(config.SPREADSHEET_ID)
