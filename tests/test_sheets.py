from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock

import httplib2
import pytest
from googleapiclient.errors import HttpError

from snapshot_api import config
from snapshot_api.services import sheets
from snapshot_api.services.exporter import SourceNotFound
from snapshot_api.services.sheets import GoogleSheetsSource, InMemorySource


def _service(titles: list[str], values: list[list[object]] | None = None) -> MagicMock:
    service = MagicMock()
    service.spreadsheets().get().execute.return_value = {
        "sheets": [{"properties": {"title": t}} for t in titles]
    }
    service.spreadsheets().values().get().execute.return_value = {"values": values or []}
    return service


def test_google_list_sources_in_declared_order():
    source = GoogleSheetsSource("sheet-id", service=_service(["Buford - GA", "Concord - NC"]))
    assert source.list_sources() == ["Buford - GA", "Concord - NC"]


def test_google_read_grid_quotes_tab_name():
    service = _service(["Buford - GA"], [["id", "status"], ["A1", "Sold"]])
    source = GoogleSheetsSource("sheet-id", service=service)

    assert source.read_grid("Buford - GA") == [["id", "status"], ["A1", "Sold"]]
    service.spreadsheets().values().get.assert_called_with(
        spreadsheetId="sheet-id",
        range="'Buford - GA'",
        valueRenderOption="UNFORMATTED_VALUE",
        dateTimeRenderOption="FORMATTED_STRING",
    )


def test_google_read_grid_unknown_tab():
    service = _service(["Buford - GA"])
    resp = httplib2.Response({"status": 400})
    service.spreadsheets().values().get().execute.side_effect = HttpError(
        resp, b'{"error": {"message": "Unable to parse range"}}'
    )
    source = GoogleSheetsSource("sheet-id", service=service)

    with pytest.raises(SourceNotFound):
        source.read_grid("Nowhere")


def test_google_source_requires_spreadsheet_id():
    with pytest.raises(ValueError):
        GoogleSheetsSource(None).list_sources()


def test_in_memory_source(unit_grid):
    source = InMemorySource({"Units": unit_grid})
    assert source.list_sources() == ["Units"]
    assert source.read_grid("Units")[1] == ["A1", "Available"]
    with pytest.raises(SourceNotFound):
        source.read_grid("Other")


def test_in_memory_source_from_json_file(tmp_path: Path, unit_grid):
    path = tmp_path / "units.json"
    path.write_text(json.dumps({"Buford - GA": unit_grid}), encoding="utf-8")
    assert InMemorySource.from_json_file(str(path)).list_sources() == ["Buford - GA"]


def test_get_data_source_memory(monkeypatch, tmp_path: Path, unit_grid):
    path = tmp_path / "units.json"
    path.write_text(json.dumps({"Units": unit_grid}), encoding="utf-8")
    monkeypatch.setattr(config, "DATA_SOURCE", "memory")
    monkeypatch.setattr(config, "SAMPLE_DATA_FILE", str(path))
    sheets.get_data_source.cache_clear()
    try:
        assert isinstance(sheets.get_data_source(), InMemorySource)
    finally:
        sheets.get_data_source.cache_clear()


def test_get_data_source_unknown_backend(monkeypatch):
    monkeypatch.setattr(config, "DATA_SOURCE", "ftp")
    sheets.get_data_source.cache_clear()
    try:
        with pytest.raises(ValueError):
            sheets.get_data_source()
    finally:
        sheets.get_data_source.cache_clear()


def test_google_builds_fresh_client_per_read(monkeypatch):
    clients = []

    def fake_build(*args, **kwargs):
        client = _service(["Buford - GA"], [["id", "status"]])
        clients.append(client)
        return client

    monkeypatch.setattr(sheets, "build", fake_build)
    monkeypatch.setattr(config, "get_google_credentials", lambda scopes: object())
    source = GoogleSheetsSource("sheet-id")

    source.list_sources()
    source.read_grid("Buford - GA")

    assert len(clients) == 2
    assert clients[0] is not clients[1]
