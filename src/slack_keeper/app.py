"""FastAPI application with lifespan, health, and directory refresh endpoints."""

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import PlainTextResponse

from slack_keeper.config import get_settings
from slack_keeper.keeper import close_client, get_entity_cache
from slack_keeper.logging_config import configure_logging
from slack_keeper.slack.router import router as slack_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging, start the periodic client refresh, and clean up on shutdown."""
    settings = get_settings()
    configure_logging(settings.log_level)
    app.state.settings = settings

    refresher = asyncio.create_task(
        get_entity_cache().run_periodic(settings.client_refresh_minutes * 60)
    )
    try:
        yield
    finally:
        refresher.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await refresher
        await close_client()


app = FastAPI(
    title="Slack Keeper",
    lifespan=lifespan,
)
app.include_router(slack_router)


async def verify_scheduler(request: Request) -> None:
    """Verify the scheduler secret header for protected endpoints.

    Compares the X-Scheduler-Secret header against the configured secret.
    Raises HTTPException 403 if the header is missing, empty, or mismatched.
    """
    settings = get_settings()
    secret = request.headers.get("X-Scheduler-Secret", "")
    if not settings.scheduler_secret or secret != settings.scheduler_secret:
        raise HTTPException(status_code=403, detail="Invalid scheduler secret")


@app.get("/", response_class=PlainTextResponse)
async def root():
    return "OK - Slack Keeper Integration"


@app.get("/health")
async def health():
    """Health check endpoint for the hosting platform and local development."""
    return {
        "status": "ok",
        "service": "slack-keeper",
        "version": "0.1.0",
    }


@app.post("/clients/refresh")
async def refresh_clients_endpoint(_: None = Depends(verify_scheduler)):
    """Refresh the client directory cache now; the previous snapshot survives failures."""
    try:
        count = await get_entity_cache().refresh()
    except Exception as exc:
        logger.error("Scheduled client refresh failed", extra={"error": str(exc)})
        return {"status": "error", "error": str(exc)}
    return {"status": "ok", "clients": count}
