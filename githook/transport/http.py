"""HTTP transport — a FastAPI app handing POST bodies to a RequestHandler.

Every path answers, mirroring a catch-all handler: the body is passed to the
handler in a worker thread and its bytes are returned as plain text with
status 200, including error text.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from fastapi.concurrency import run_in_threadpool

import githook
from githook.transport import RequestHandler

logger = logging.getLogger(__name__)


def create_app(handler: RequestHandler) -> FastAPI:
    """Build the webhook app around *handler*."""
    app = FastAPI(title="githook", version=githook.__version__)

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.api_route("/{path:path}", methods=["GET", "POST", "PUT"])
    async def webhook(request: Request, path: str = "") -> PlainTextResponse:
        try:
            body = await request.body()
        except Exception as exc:  # noqa: BLE001
            message = f"ReadFrom failed: {exc}"
            logger.error(message)
            return PlainTextResponse(message)

        response = await run_in_threadpool(handler.handle, body)
        return PlainTextResponse(response.decode("utf-8", errors="replace"))

    return app


def serve(handler: RequestHandler, host: str, port: int, log_level: str = "info") -> None:
    """Run the webhook app under uvicorn until interrupted."""
    import uvicorn

    logger.info("githook listening on: %s:%d", host, port)
    uvicorn.run(create_app(handler), host=host, port=port, log_level=log_level.lower())
