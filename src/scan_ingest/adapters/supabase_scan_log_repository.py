"""Supabase repository for the scan log."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from scan_ingest.domain.errors import StoreUnavailable
from scan_ingest.domain.scans import ScanRecord
from scan_ingest.services.commits import ScanLogStore

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseScanLogRepository(ScanLogStore):
    """Supabase-backed append-only scan log.

    A batch is sent as one bulk insert, which PostgREST runs as a single
    statement, so either every row lands or none do.
    """

    client: Client
    table: str = "scan_log"

    def append_records(self, records: Sequence[ScanRecord]) -> int:
        """Insert all records in one request and return the row count."""
        if not records:
            return 0
        payload = [record.to_row() for record in records]
        try:
            response = self.client.table(self.table).insert(payload).execute()
        except (APIError, httpx.HTTPError) as exc:
            _logger.exception("Scan log append failed: table=%s", self.table)
            raise StoreUnavailable(f"Scan log '{self.table}' is unavailable") from exc
        if not response.data:
            # An empty echo still means the rows were written.
            _logger.debug("Scan log insert returned no rows: table=%s", self.table)
        return len(records)
