"""Error taxonomy for scan ingestion."""


class ScanIngestError(Exception):
    """Base class for ingestion errors."""

    status = "ERROR"
    retryable = False


class ParseError(ScanIngestError):
    """Payload is neither an identifier nor a decodable object."""

    status = "INVALID_JSON"


class ValidationFailure(ScanIngestError):
    """Identifier does not match the identifier format."""

    status = "INVALID_ID"


class DuplicateSuppressed(ScanIngestError):
    """Same identifier was already scanned in this session recently."""

    status = "DUPLICATE"


class LockTimeout(ScanIngestError):
    """Exclusive access to the scan log could not be acquired in time.

    Nothing was appended, so the whole batch can be resubmitted.
    """

    status = "LOCK_TIMEOUT"
    retryable = True


class StoreUnavailable(ScanIngestError):
    """The scan log store is missing or unreachable."""

    status = "STORE_UNAVAILABLE"
