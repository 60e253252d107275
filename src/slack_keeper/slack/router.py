"""Slack interactivity router with signature verification."""

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.responses import Response

from slack_keeper.slack.handlers import handle_interaction
from slack_keeper.slack.verification import verify_slack_request

router = APIRouter(prefix="", tags=["slack"])


@router.post("/slack/interactions")
async def slack_interactions(
    request: Request,
    background_tasks: BackgroundTasks,
    payload: dict = Depends(verify_slack_request),
) -> Response:
    """Receive Slack interactivity requests (message shortcut, select options, modal submissions).

    Slack retries (X-Slack-Retry-Num header) are acknowledged immediately
    to prevent duplicate task creation.
    """
    if request.headers.get("X-Slack-Retry-Num"):
        return Response(status_code=200)

    return await handle_interaction(payload, background_tasks)
