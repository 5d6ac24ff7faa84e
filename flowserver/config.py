"""Configuration settings for the Flow server."""

import os
from pathlib import Path

DATA_DIR = os.environ.get("FLOW_DATA_DIR", "./data")

STORAGE_DIR = os.environ.get("FLOW_STORAGE_DIR", os.path.join(DATA_DIR, "uploads"))

DATABASE_PATH = os.environ.get("FLOW_DATABASE_PATH", os.path.join(DATA_DIR, "store.db"))

# UUID namespace used to derive client IDs from recovery codes.
CELERIX_NAMESPACE = os.environ.get("CELERIX_NAMESPACE", "")

ADMIN_SECRET = os.environ.get("ADMIN_SECRET", "")

FLOW_HOST = os.environ.get("FLOW_HOST", "0.0.0.0")

FLOW_PORT = int(os.environ.get("FLOW_PORT", "8080"))

FLOW_ENV = os.environ.get("FLOW_ENV", "production")

VERSION_FILE = os.environ.get(
    "FLOW_VERSION_FILE", str(Path(__file__).resolve().parent / "version.json")
)
