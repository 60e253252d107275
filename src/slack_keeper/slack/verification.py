"""Slack request signature verification as a FastAPI dependency."""

import json
from urllib.parse import parse_qs

from fastapi import HTTPException, Request
from slack_sdk.signature import SignatureVerifier

from slack_keeper.config import get_settings


async def verify_slack_request(request: Request) -> dict:
    """Verify the Slack signature and return the parsed interaction payload.

    Reads the raw body FIRST (before any form parsing) so the signature is
    checked against the exact bytes Slack signed. Interactivity requests are
    form-encoded with the JSON document in the ``payload`` field.

    Raises HTTPException(403) if the signature is invalid and
    HTTPException(400) if the payload is missing or not JSON.
    """
    settings = get_settings()
    body = await request.body()

    timestamp = request.headers.get("X-Slack-Request-Timestamp", "")
    signature = request.headers.get("X-Slack-Signature", "")

    verifier = SignatureVerifier(signing_secret=settings.slack_signing_secret)

    if not verifier.is_valid(body=body.decode("utf-8"), timestamp=timestamp, signature=signature):
        raise HTTPException(status_code=403, detail="Invalid Slack signature")

    raw_payload = parse_qs(body.decode("utf-8")).get("payload", [None])[0]
    if not raw_payload:
        raise HTTPException(status_code=400, detail="Missing interaction payload")
    try:
        return json.loads(raw_payload)
    except json.JSONDecodeError as exc:
        raise HTTPException(status_code=400, detail="Malformed interaction payload") from exc
