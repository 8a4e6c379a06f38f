"""HTTP server: publish, subscribe (event stream), snapshot, health, stats."""

from dotenv import load_dotenv
load_dotenv()

import asyncio
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response, StreamingResponse

from msgrelay.config import Settings
from msgrelay.errors import RelayError
from msgrelay.filters import parse_filters
from msgrelay.keepalive import ping_loop
from msgrelay.observability import get_logger
from msgrelay.protocol import (
    EVENT_STREAM_HEADERS,
    EVENT_STREAM_MEDIA_TYPE,
    HEALTH_TEXT,
    JSON_MEDIA_TYPE,
)
from msgrelay.relay import MessageRelay
from msgrelay.stream_subscriber import StreamSubscriber

logger = get_logger("msgrelay.server")

# Every handler is `async def` so it runs on the event loop thread, never in the
# threadpool; the relay relies on handlers not interleaving.
router = APIRouter()


def get_relay(request: Request) -> MessageRelay:
    return request.app.state.relay


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def _cancel(tasks: List[asyncio.Task]) -> None:
    for task in tasks:
        task.cancel()
    for task in tasks:
        try:
            await task
        except asyncio.CancelledError:
            pass


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    relay: MessageRelay = app.state.relay
    tasks: List[asyncio.Task] = []
    if settings.keepalive_enabled:
        tasks.append(asyncio.create_task(ping_loop(settings.address, settings.ping_interval)))
    if settings.reset_interval is not None:
        tasks.append(asyncio.create_task(relay.idle.run(settings.idle_check_interval)))
    logger.info(
        "server_started",
        extra={
            "port": settings.port,
            "keepalive": settings.keepalive_enabled,
            "reset_interval": settings.reset_interval,
        },
    )
    yield
    await _cancel(tasks)


async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    return JSONResponse(content=exc.to_dict(), status_code=exc.status_code)


# ---- Publish ----

@router.post("/message/{key}/{version}")
async def publish(key: str, version: str, request: Request, relay: MessageRelay = Depends(get_relay)) -> Response:
    """POST /message/{key}/{version} with a JSON body → 200 empty, 400 bad input, 409 version conflict."""
    body = await request.body()
    relay.publish_request(key, version, body, request.headers.get("content-type"))
    return Response(status_code=200)


# ---- Subscribe ----

@router.get("/messages")
async def subscribe(
    request: Request,
    relay: MessageRelay = Depends(get_relay),
    settings: Settings = Depends(get_settings),
) -> StreamingResponse:
    """GET /messages?matches=..&starts-with=.. → text/event-stream of current then future messages."""
    predicate = parse_filters(request.query_params)
    subscriber = StreamSubscriber(predicate, max_size=settings.subscriber_queue_max_size)

    # Registration happens when streaming starts, so a response that is never
    # iterated leaves nothing registered. Nothing awaits before the first frame.
    async def event_stream():
        try:
            relay.subscribe(subscriber)
            async for frame in subscriber.frames(request.is_disconnected):
                yield frame
        finally:
            relay.unsubscribe(subscriber)

    return StreamingResponse(
        event_stream(),
        media_type=EVENT_STREAM_MEDIA_TYPE,
        headers=EVENT_STREAM_HEADERS,
    )


# ---- Snapshot ----

@router.get("/messages/snapshot")
async def snapshot(request: Request, relay: MessageRelay = Depends(get_relay)) -> Response:
    """GET /messages/snapshot?matches=..&starts-with=.. → [ { id: { key, version }, data } ]."""
    predicate = parse_filters(request.query_params)
    return Response(content=relay.snapshot_body(predicate), media_type=JSON_MEDIA_TYPE)


# ---- Health / Stats ----

@router.get("/health")
async def health() -> PlainTextResponse:
    return PlainTextResponse(HEALTH_TEXT, status_code=200)


@router.get("/stats")
async def stats(relay: MessageRelay = Depends(get_relay)) -> JSONResponse:
    """GET /stats → { counters: {...}, gauges: { keys, subscribers } }."""
    return JSONResponse(content=relay.stats(), status_code=200)


def create_app(settings: Optional[Settings] = None, relay: Optional[MessageRelay] = None) -> FastAPI:
    """Build the app around one relay instance (a fresh one unless given)."""
    settings = settings or Settings.from_env()
    app = FastAPI(title="Message Relay", lifespan=lifespan)
    app.state.settings = settings
    app.state.relay = relay or MessageRelay(reset_after=settings.reset_interval)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RelayError, relay_error_handler)
    app.include_router(router)
    return app


app = create_app()


def main() -> None:
    import uvicorn

    settings: Settings = app.state.settings
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
