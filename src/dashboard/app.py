"""
Dashboard Web App

FastAPI app exposing statistics, the preview and the run triggers.
Every route sits behind one shared HTTP Basic username/password pair.
"""

import logging
import secrets
from typing import Optional

from fastapi import Depends, FastAPI, Form, HTTPException, status
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from ..config import Settings
from ..disbursement.pipeline import DisbursementPipeline
from ..disbursement.preview import PreviewService
from ..disbursement.stats import StatsHolder
from ..errors import InvalidInput, RunInProgressError, UpstreamError
from ..records.airtable_client import AirtableClient
from ..transfers.hcb_client import HCBClient
from .templates import DashboardTemplates

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={'error': message})


def _records_client(settings: Settings) -> AirtableClient:
    return AirtableClient(
        base_id=settings.airtable_base_id,
        api_key=settings.airtable_api_key,
        events_table=settings.airtable_events_table,
        disbursements_table=settings.airtable_disbursements_table,
        timeout=settings.request_timeout
    )


def create_app(
    settings: Settings,
    pipeline: Optional[DisbursementPipeline] = None,
    preview: Optional[PreviewService] = None
) -> FastAPI:
    """
    Build the dashboard app.

    Args:
        settings: Service configuration
        pipeline: Optional pre-built pipeline (built from settings otherwise)
        preview: Optional pre-built preview service (built from settings otherwise)

    Returns:
        Configured FastAPI application
    """
    # One AirtableClient, and so one requests session, per service
    if pipeline is None:
        transfers = HCBClient(
            api_token=settings.hcb_api_token,
            base_url=settings.hcb_base_url,
            timeout=settings.request_timeout
        )
        pipeline = DisbursementPipeline(
            records=_records_client(settings),
            transfers=transfers,
            view_id=settings.airtable_events_view,
            organization_id=settings.hcb_organization_id,
            program_name=settings.program_name,
            stats=StatsHolder()
        )
    if preview is None:
        preview = PreviewService(_records_client(settings), settings.airtable_events_view)

    security = HTTPBasic()

    def require_basic_auth(credentials: HTTPBasicCredentials = Depends(security)) -> str:
        user_ok = secrets.compare_digest(
            credentials.username.encode('utf-8'),
            settings.basic_auth_username.encode('utf-8')
        )
        password_ok = secrets.compare_digest(
            credentials.password.encode('utf-8'),
            settings.basic_auth_password.encode('utf-8')
        )
        if not (user_ok and password_ok):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid credentials",
                headers={"WWW-Authenticate": "Basic"}
            )
        return credentials.username

    app = FastAPI(
        title=f"{settings.program_name} Cash Cannon",
        description="Airtable-to-HCB disbursement dashboard",
        version="1.0.0",
        dependencies=[Depends(require_basic_auth)]
    )

    # Sync handlers run in the threadpool, so a slow run does not block other routes

    @app.get("/", response_class=HTMLResponse)
    def dashboard():
        return DashboardTemplates.render_dashboard(
            pipeline.stats.snapshot(),
            program=settings.program_name
        )

    @app.get("/api/stats")
    def run_stats():
        return pipeline.stats.snapshot().model_dump(mode='json')

    @app.get("/api/preview")
    def preview_disbursements(custom_amount: Optional[str] = None):
        try:
            return preview.preview(custom_amount)
        except InvalidInput as e:
            return _error(400, str(e))
        except UpstreamError as e:
            logger.error(f"Preview failed: {e}")
            return _error(502, f"Error fetching events: {e}")

    @app.post("/trigger-disbursements")
    def trigger_disbursements():
        try:
            result = pipeline.run_standard()
        except RunInProgressError as e:
            return _error(409, str(e))
        except UpstreamError as e:
            return _error(502, f"Error fetching events: {e}")
        return result.model_dump()

    @app.post("/trigger-custom-disbursements")
    def trigger_custom_disbursements(custom_amount: Optional[str] = Form(None)):
        try:
            result = pipeline.run_custom(custom_amount)
        except InvalidInput as e:
            return _error(400, str(e))
        except RunInProgressError as e:
            return _error(409, str(e))
        except UpstreamError as e:
            return _error(502, f"Error fetching events: {e}")
        return result.model_dump()

    return app
