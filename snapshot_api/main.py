"""
Sheet Snapshot API

Publishes spreadsheet rows as live JSON for an interactive map:
1. Reads the unit rows of a sheet tab (one tab per location)
2. Zips headers against rows into unit records
3. Serves the records with update metadata as a JSON snapshot
4. Summarises unit availability for the map sidebar
5. Serves the sidebar / dialog views and the menu that opens them
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from snapshot_api import config
from snapshot_api.routes import units, views
from snapshot_api.services.views import STATIC_DIR

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

app = FastAPI(
    title="Sheet Snapshot API",
    description="Google Sheets rows as a live JSON endpoint for interactive maps",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(units.router)
app.include_router(views.router)

# Serve static view assets
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")


@app.get("/health")
def health():
    return {"status": "ok"}
