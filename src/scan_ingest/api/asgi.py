"""ASGI entrypoint for the scan ingest API."""

from scan_ingest.api.app import create_app
from scan_ingest.containers import build_container

app = create_app(build_container())
