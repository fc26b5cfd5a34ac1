from functools import lru_cache
import json
import logging

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from pydantic import ValidationError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.database import get_db
from app.schemas.paddle import CreateTransactionRequest
from app.services.paddle_client import PaddleClient, build_catalog_url
from app.services.paddle_webhook_service import process_event, verify_paddle_signature
from config import PaddleSettings, load_paddle_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/paddle-webhook", tags=["paddle"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type, paddle-signature",
}


@lru_cache
def get_paddle_settings() -> PaddleSettings:
    """Read once per process; override this dependency to inject settings."""
    return load_paddle_settings()


def _json_error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code, headers=CORS_HEADERS)


def _forward(upstream: httpx.Response) -> Response:
    return Response(
        content=upstream.text,
        status_code=upstream.status_code,
        media_type="application/json",
        headers=CORS_HEADERS,
    )


@router.options("")
@router.options("/{path:path}")
def preflight():
    return Response(status_code=200, headers=CORS_HEADERS)


@router.post("")
async def receive_webhook(
    request: Request,
    db: Session = Depends(get_db),
    settings: PaddleSettings = Depends(get_paddle_settings)
):
    """
    Paddle webhook receiver. 200 "OK" for handled and ignored events alike.
    """
    try:
        config_error = settings.configuration_error()
        if config_error:
            logger.error(f"[PaddleWebhook] {config_error}")
            return _json_error(config_error, 500)

        signature = request.headers.get("paddle-signature")
        raw_body = await request.body()
        if not signature:
            return _json_error("Missing signature", 400)

        if settings.verify_signature and not verify_paddle_signature(raw_body, signature, settings.webhook_secret):
            logger.warning("[PaddleWebhook] Signature verification failed")
            return _json_error("Invalid signature", 401)

        try:
            payload = json.loads(raw_body)
        except ValueError:
            return _json_error("Invalid JSON", 400)

        await run_in_threadpool(process_event, db, payload)
        return PlainTextResponse("OK", status_code=200, headers=CORS_HEADERS)

    except Exception as e:
        await run_in_threadpool(db.rollback)
        logger.exception(f"[PaddleWebhook] Webhook processing error: {e}")
        return PlainTextResponse(f"Error: {e}", status_code=500, headers=CORS_HEADERS)


@router.post("/create-transaction")
async def create_transaction(
    request: Request,
    settings: PaddleSettings = Depends(get_paddle_settings)
):
    """
    Creates a hosted-checkout transaction and relays Paddle's answer.
    """
    token_error = settings.token_error()
    if token_error:
        return _json_error(token_error, 500)

    try:
        body = CreateTransactionRequest.model_validate_json(await request.body())
    except ValidationError:
        return _json_error("Invalid JSON body", 400)
    if not body.items:
        return _json_error("items[] is required", 400)

    client = PaddleClient(settings.api_token)
    try:
        upstream = await run_in_threadpool(client.create_transaction, settings.base_url, body.to_paddle_body())
    except httpx.HTTPError as e:
        logger.error(f"[PaddleWebhook] Failed to create transaction: {e}")
        return _json_error(f"Failed to reach Paddle API: {e}", 500)
    return _forward(upstream)


@router.get("")
@router.get("/{path:path}")
def proxy_catalog(
    request: Request,
    path: str = "",
    settings: PaddleSettings = Depends(get_paddle_settings)
):
    """
    Read-only proxy for product and price lookups.
    Paddle's body and status code are passed through unchanged.
    """
    token_error = settings.token_error()
    if token_error:
        return _json_error(token_error, 500)

    api_url = build_catalog_url(settings.base_url, path, list(request.query_params.multi_items()))
    if not api_url:
        return _json_error("Invalid API request", 400)

    client = PaddleClient(settings.api_token)
    try:
        upstream = client.get(api_url)
    except httpx.HTTPError as e:
        logger.error(f"[PaddleWebhook] Failed to fetch from Paddle API: {e}")
        return _json_error(f"Failed to fetch from Paddle API: {e}", 500)
    return _forward(upstream)
