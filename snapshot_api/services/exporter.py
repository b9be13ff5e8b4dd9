"""
Snapshot exporter.

Turns a raw sheet grid into the JSON snapshot served to the map:

  Grid
    ├── row 0        -> headers (field names)
    └── rows 1..n    -> one record per row whose first cell is set

Also summarises the status column into fixed availability buckets and
resolves location selectors to sheet tabs.
"""

import logging
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Optional, Union

from snapshot_api.schemas import LocationCatalog, Snapshot, SnapshotError, StatusStats

if TYPE_CHECKING:
    from snapshot_api.services.sheets import DataSource

logger = logging.getLogger(__name__)

ERROR_MESSAGE = "Failed to fetch data from Google Sheet"

STATUS_BUCKETS = ("available", "sold", "reserved", "leased")

# Column B holds the unit status
STATUS_INDEX = 1


class SourceNotFound(LookupError):
    """Raised when a location or tab name has no backing sheet."""

    def __init__(self, name: Optional[str] = None):
        self.name = name
        if name:
            super().__init__(f'Sheet "{name}" not found')
        else:
            super().__init__("Spreadsheet has no sheets")


class TransformFailure(Exception):
    """Raised when a grid cannot be turned into records."""


def resolve_source_name(
    sources: Sequence[str],
    selector: Optional[str] = None,
    catalog: Optional[Mapping[str, str]] = None,
    default: Optional[str] = None,
) -> str:
    """
    Pick the sheet tab for a request.

    A selector that is a catalog key is translated to its tab name, any other
    selector is used verbatim. Without a selector the configured default tab
    is used, else the first tab in declared order.
    """
    sources = list(sources)

    if selector:
        name = (catalog or {}).get(selector) or selector
    elif default:
        name = default
    elif sources:
        name = sources[0]
    else:
        raise SourceNotFound()

    if name not in sources:
        raise SourceNotFound(name)
    return name


def _header_label(value: Any) -> str:
    if isinstance(value, str):
        return value
    return "" if value is None else str(value)


def grid_to_records(grid: Sequence[Sequence[Any]]) -> list[dict[str, Any]]:
    """
    Zip the header row against every data row.

    Rows with an empty first cell are skipped; a row that is not a list of
    cells fails the whole grid. Cells beyond the header width are dropped
    and missing trailing cells are left out of the record.
    """
    if not grid:
        raise TransformFailure("Sheet has no header row")
    if not isinstance(grid[0], (list, tuple)):
        raise TransformFailure(f"Header row is not a list of cells: {grid[0]!r}")

    try:
        headers = [_header_label(h) for h in grid[0]]
        records: list[dict[str, Any]] = []

        for i, row in enumerate(grid[1:], start=2):
            if not isinstance(row, (list, tuple)):
                raise TransformFailure(f"Row {i} is not a list of cells: {row!r}")
            if not row or not row[0]:
                continue  # Skip rows with no ID
            records.append(
                {header: row[j] for j, header in enumerate(headers) if j < len(row)}
            )
    except TypeError as e:
        raise TransformFailure(f"Malformed sheet grid: {e}") from e

    return records


def status_column_index(headers: Sequence[Any], label: Optional[str] = None) -> int:
    """Find the status column by header label, falling back to column B."""
    if label:
        wanted = label.strip().lower()
        for i, header in enumerate(headers):
            if _header_label(header).strip().lower() == wanted:
                return i
        logger.warning("Status column '%s' not in headers, using column B", label)
    return STATUS_INDEX


def count_statuses(
    grid: Sequence[Sequence[Any]], status_index: int = STATUS_INDEX
) -> dict[str, int]:
    """
    Count data rows per status bucket.

    Rows without an ID are skipped like in the snapshot; unknown or blank
    statuses are ignored.
    """
    stats = dict.fromkeys(STATUS_BUCKETS, 0)

    for row in grid[1:]:
        if not isinstance(row, (list, tuple)) or not row or not row[0]:
            continue
        if len(row) <= status_index:
            continue
        status = row[status_index]
        if not status:
            continue
        normalized = str(status).lower()
        if normalized in stats:
            stats[normalized] += 1

    return stats


def _timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_snapshot(
    source: "DataSource",
    selector: Optional[str] = None,
    *,
    catalog: Optional[Mapping[str, str]] = None,
    multi_location: bool = True,
    default_sheet: Optional[str] = None,
) -> Union[Snapshot, SnapshotError]:
    """
    Read one sheet from ``source`` and wrap its records in a snapshot envelope.

    Never raises: lookup and transform failures come back as a
    ``SnapshotError`` with ``success=False``. In single-location mode the
    selector is ignored and the envelope carries no ``sheet`` field.
    """
    if not multi_location:
        selector = None

    try:
        name = resolve_source_name(source.list_sources(), selector, catalog, default_sheet)
        records = grid_to_records(source.read_grid(name))
    except SourceNotFound as e:
        logger.warning("Snapshot lookup failed: %s", e)
        return SnapshotError(success=False, error=str(e), message=ERROR_MESSAGE)
    except Exception as e:
        logger.exception("Snapshot build failed for selector %r", selector)
        return SnapshotError(success=False, error=str(e), message=ERROR_MESSAGE)

    logger.info("Built snapshot of %d unit(s) from sheet '%s'", len(records), name)

    fields: dict[str, Any] = {"success": True}
    if multi_location:
        fields["sheet"] = name
    fields.update(lastUpdated=_timestamp(), totalUnits=len(records), data=records)
    return Snapshot(**fields)


def compute_status_stats(
    source: "DataSource",
    selector: Optional[str] = None,
    *,
    catalog: Optional[Mapping[str, str]] = None,
    multi_location: bool = True,
    default_sheet: Optional[str] = None,
    status_label: Optional[str] = None,
) -> StatusStats:
    """
    Summarise unit availability for one sheet.

    A selector that resolves to no sheet yields all-zero counts instead of
    an error, in both modes.
    """
    if not multi_location:
        selector = None

    try:
        name = resolve_source_name(source.list_sources(), selector, catalog, default_sheet)
        grid = source.read_grid(name)
    except SourceNotFound as e:
        logger.warning("Stats lookup failed, returning zero counts: %s", e)
        return StatusStats()

    headers = grid[0] if grid else []
    return StatusStats(**count_statuses(grid, status_column_index(headers, status_label)))


def location_catalog(catalog: Mapping[str, str]) -> LocationCatalog:
    """List catalog tab names in declared order; the first one is the default."""
    locations = list(catalog.values())
    return LocationCatalog(
        locations=locations,
        defaultLocation=locations[0] if locations else None,
    )
