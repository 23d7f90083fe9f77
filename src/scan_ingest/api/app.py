"""FastAPI application factory."""

import logging

from fastapi import FastAPI, Header, Request
from fastapi.responses import JSONResponse

from scan_ingest.api.scan_models import ScanBatchIn, ScanEventIn
from scan_ingest.app_logging import configure_logging
from scan_ingest.containers import AppContainer
from scan_ingest.domain.errors import LockTimeout, ScanIngestError, StoreUnavailable
from scan_ingest.domain.scans import IngestResult, ScanOutcome, SessionContext
from scan_ingest.services.operators import StaticOperatorProvider, resolve_operator


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    app = FastAPI()
    app.state.container = container

    @app.exception_handler(ScanIngestError)
    async def scan_ingest_error(
        request: Request, exc: ScanIngestError
    ) -> JSONResponse:
        if isinstance(exc, LockTimeout):
            status_code = 503
        elif isinstance(exc, StoreUnavailable):
            status_code = 502
        else:
            status_code = 500
        logger.warning("Scan ingestion failed: status=%s %s", exc.status, exc)
        return JSONResponse(
            status_code=status_code,
            content={
                "status": exc.status,
                "message": str(exc),
                "retryable": exc.retryable,
            },
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/scans/config")
    async def scan_config(request: Request) -> dict[str, object]:
        """Publish the identifier format and limits for client pre-filtering."""
        state_container: AppContainer = request.app.state.container
        return state_container.scan_config.to_payload()

    @app.post("/scans/batch")
    def submit_batch(
        batch: ScanBatchIn,
        request: Request,
        x_operator: str | None = Header(default=None),
    ) -> dict[str, object]:
        """Ingest a batch of scans without server-side dedup."""
        state_container: AppContainer = request.app.state.container
        context = SessionContext(
            operator=resolve_operator(StaticOperatorProvider(x_operator)),
            session_id=batch.session_id,
        )
        result = state_container.ingestion_service.ingest(
            context, [event.to_event() for event in batch.events]
        )
        return _result_payload(result)

    @app.post("/scans")
    def submit_scan(
        event: ScanEventIn,
        request: Request,
        x_operator: str | None = Header(default=None),
    ) -> dict[str, object]:
        """Ingest one scan, suppressing rapid repeats."""
        state_container: AppContainer = request.app.state.container
        context = SessionContext(
            operator=resolve_operator(StaticOperatorProvider(x_operator)),
            session_id=event.session_id,
        )
        result = state_container.ingestion_service.ingest_one(
            context, event.to_event()
        )
        return _result_payload(result)

    return app


def _result_payload(result: IngestResult) -> dict[str, object]:
    return {
        "appended": result.appended,
        "results": [_outcome_payload(outcome) for outcome in result.results],
    }


def _outcome_payload(outcome: ScanOutcome) -> dict[str, object]:
    student = None
    if outcome.student is not None:
        student = {
            "id": outcome.student.identifier,
            "firstName": outcome.student.first_name,
            "lastName": outcome.student.last_name,
            "grade": outcome.student.grade,
            "gradYear": outcome.student.grad_year,
        }
    return {
        "correlationId": outcome.correlation_id,
        "ok": outcome.ok,
        "status": str(outcome.status),
        "message": outcome.message,
        "student": student,
        "payloadMode": str(outcome.payload_mode) if outcome.payload_mode else None,
    }
