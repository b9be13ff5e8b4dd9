import json
import os
from types import MappingProxyType

from dotenv import load_dotenv
from google.oauth2 import service_account

load_dotenv()


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


SPREADSHEET_ID = os.getenv("SPREADSHEET_ID")

# GCP credentials – either individual env vars (hosted) or a JSON key file (local)
GCP_CLIENT_EMAIL = os.getenv("GCP_CLIENT_EMAIL")
GCP_PRIVATE_KEY = os.getenv("GCP_PRIVATE_KEY")
GCP_PROJECT_ID = os.getenv("GCP_PROJECT_ID")
GOOGLE_SERVICE_ACCOUNT_FILE = os.getenv("GOOGLE_SERVICE_ACCOUNT_FILE", "service-account.json")

# "google" reads the live spreadsheet, "memory" serves SAMPLE_DATA_FILE
DATA_SOURCE = os.getenv("DATA_SOURCE", "google")
SAMPLE_DATA_FILE = os.getenv("SAMPLE_DATA_FILE")

# Multi-location mode enables the ?location= selector and the catalog endpoint
MULTI_LOCATION = _env_flag("MULTI_LOCATION", default=True)
DEFAULT_SHEET = os.getenv("DEFAULT_SHEET") or None

# Header label of the status column; unset keeps the positional column B
STATUS_COLUMN = os.getenv("STATUS_COLUMN") or None

EXTERNAL_MAP_URL = os.getenv(
    "EXTERNAL_MAP_URL", "https://pxl360.com/interactive-map/storage-caves-v3.html"
)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

DEFAULT_LOCATION_CATALOG = {
    "Buford": "Buford - GA",
    "FortMill": "Fort Mill - SC",
    "Concord": "Concord - NC",
    "Concord2": "Concord 2 - NC",
    "LakeNorman": "Lake Norman - NC",
    "Lexington": "Lexington - NC",
    "Nashville": "Nashville - TN",
}


def load_location_catalog(raw: str | None = None) -> MappingProxyType:
    """Build the read-only location catalog.

    ``raw`` is a JSON object of short key -> tab name (the LOCATION_CATALOG
    env var). Falls back to the built-in Storage Caves locations.
    """
    if not raw:
        return MappingProxyType(dict(DEFAULT_LOCATION_CATALOG))

    parsed = json.loads(raw)
    if not isinstance(parsed, dict):
        raise ValueError("LOCATION_CATALOG must be a JSON object of key -> tab name")
    return MappingProxyType({str(k): str(v) for k, v in parsed.items()})


LOCATION_CATALOG = load_location_catalog(os.getenv("LOCATION_CATALOG"))


def get_google_credentials(scopes: list[str]) -> service_account.Credentials:
    """Build Google service-account credentials.

    Prefers individual env vars (GCP_CLIENT_EMAIL, GCP_PRIVATE_KEY,
    GCP_PROJECT_ID) which work on hosted deployments.  Falls back to a
    local JSON key file for development.
    """
    if GCP_CLIENT_EMAIL and GCP_PRIVATE_KEY and GCP_PROJECT_ID:
        # Normalise the private key: strip wrapping quotes, convert literal
        # "\n" sequences to real newlines, and trim whitespace.
        pk = GCP_PRIVATE_KEY.strip()
        if pk.startswith('"') and pk.endswith('"'):
            pk = pk[1:-1]
        pk = pk.replace("\\n", "\n")
        info = {
            "type": "service_account",
            "project_id": GCP_PROJECT_ID,
            "client_email": GCP_CLIENT_EMAIL,
            "private_key": pk,
            "token_uri": "https://oauth2.googleapis.com/token",
        }
        return service_account.Credentials.from_service_account_info(info, scopes=scopes)

    return service_account.Credentials.from_service_account_file(
        GOOGLE_SERVICE_ACCOUNT_FILE, scopes=scopes
    )
