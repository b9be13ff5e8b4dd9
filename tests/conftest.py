# Shared pytest fixtures
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from snapshot_api import config
from snapshot_api.config import load_location_catalog
from snapshot_api.main import app
from snapshot_api.services.sheets import InMemorySource, get_data_source


@pytest.fixture()
def unit_grid() -> list[list[object]]:
    return [
        ["id", "status"],
        ["A1", "Available"],
        ["A2", "RESERVED"],
        ["", "Sold"],
        ["A4", "leased"],
    ]


@pytest.fixture()
def multi_source(unit_grid) -> InMemorySource:
    return InMemorySource(
        {
            "Buford - GA": unit_grid,
            "Fort Mill - SC": [
                ["unit_id", "status", "price"],
                ["F1", "Sold", 1200],
                ["F2", "Available", 950],
            ],
            "Scratch": [["unit_id", "status"]],
        }
    )


@pytest.fixture()
def client(monkeypatch, multi_source):
    monkeypatch.setattr(config, "MULTI_LOCATION", True)
    monkeypatch.setattr(config, "DEFAULT_SHEET", None)
    monkeypatch.setattr(config, "STATUS_COLUMN", None)
    monkeypatch.setattr(config, "LOCATION_CATALOG", load_location_catalog(None))
    monkeypatch.setattr(config, "EXTERNAL_MAP_URL", "https://maps.example.com/storage-caves.html")
    app.dependency_overrides[get_data_source] = lambda: multi_source
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
