"""FastAPI route factory for receiving verified webhooks."""

import inspect
from typing import Annotated, Awaitable, Callable

from fastapi import APIRouter, Depends, HTTPException, Request
from loguru import logger
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from .common.errors import HexDecodeSignature, JsonDecodeError, SignatureMismatch
from .config import WebhookSettings, get_settings
from .webhook import Event, EventKind

EventHandler = Callable[[Event], Awaitable[None] | None]


class WebhookAck(BaseModel):
    status: str
    event: EventKind
    job_id: str


def verified_event(settings: WebhookSettings) -> Callable[[Request], Awaitable[Event]]:
    """Create a dependency that returns the verified event of a request.

    Rejections map to 400 (missing or malformed signature), 401 (signature
    mismatch) and 422 (signed but unparseable body).
    """
    secret = settings.secret_bytes()
    header_name = settings.signature_header

    async def dependency(request: Request) -> Event:
        signature = request.headers.get(header_name)
        if signature is None:
            logger.warning(f"Rejected webhook: missing {header_name} header")
            raise HTTPException(
                status_code=400,
                detail=f"Missing {header_name} header",
            )

        payload = await request.body()
        try:
            return Event.from_json(payload, signature, secret)
        except HexDecodeSignature as e:
            logger.warning(f"Rejected webhook: {e}")
            raise HTTPException(status_code=400, detail=str(e))
        except SignatureMismatch as e:
            logger.warning("Rejected webhook: signature mismatch")
            raise HTTPException(status_code=401, detail=str(e))
        except JsonDecodeError as e:
            # Signed by CloudConvert, so most likely an API version mismatch
            logger.warning(f"Rejected signed webhook: {e.cause}")
            raise HTTPException(status_code=422, detail=str(e))

    return dependency


def create_webhook_router(
    handler: EventHandler,
    settings: WebhookSettings | None = None,
) -> APIRouter:
    """Create a router that verifies deliveries and passes them to ``handler``.

    Args:
        handler: Called with each verified event. May be sync or async; sync
            handlers run in a worker thread.
        settings: Receiver settings. Defaults to :func:`get_settings`.

    Example:
        from fastapi import FastAPI
        from cloudconvert_webhooks.routes import create_webhook_router

        async def on_event(event):
            if event.event is EventKind.JOB_FINISHED:
                ...

        app = FastAPI()
        app.include_router(create_webhook_router(on_event))
    """
    settings = settings or get_settings()
    router = APIRouter()

    @router.post(settings.webhook_path, response_model=WebhookAck)
    async def receive_webhook(
        event: Annotated[Event, Depends(verified_event(settings))],
    ) -> WebhookAck:
        logger.info(f"Received webhook {event.event.value} for job {event.job.id}")
        if inspect.iscoroutinefunction(handler):
            await handler(event)
        else:
            # Sync handlers may block, keep them off the event loop
            result = await run_in_threadpool(handler, event)
            if inspect.isawaitable(result):
                await result
        return WebhookAck(status="ok", event=event.event, job_id=event.job.id)

    _ = receive_webhook
    return router
