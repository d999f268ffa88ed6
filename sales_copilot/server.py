"""HTTP front end for the Sales Copilot.

Run with:
    sales-copilot-server
    uvicorn sales_copilot.server:app --reload
"""

from __future__ import annotations

import logging
import time
import uuid
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from sales_copilot.agent import ALL_TOOLS, create_sales_copilot_agent
from sales_copilot.api.routes import router
from sales_copilot.config import CORS_ORIGINS, MODEL_NAME, SERVER_HOST, SERVER_PORT, get_settings
from sales_copilot.services.metrics import metrics

VERSION = "1.0.0"
REQUEST_ID_HEADER = "X-Request-ID"

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI):
    """Validate Apollo, Unipile and Anthropic settings, then build the agent.

    A missing secret stops the server here instead of surfacing as a failed
    tool call in the middle of a conversation.
    """
    try:
        settings = get_settings()
    except OSError:
        logger.critical("Not starting: configuration is incomplete", exc_info=True)
        raise

    application.state.agent = create_sales_copilot_agent()
    logger.info(
        "Copilot ready: model %s, %d tools, Unipile at %s",
        MODEL_NAME, len(ALL_TOOLS), settings.unipile.base_url,
    )
    try:
        yield
    finally:
        application.state.agent = None
        logger.info("Shutting down, flushed %d metric points", metrics.flush())


app = FastAPI(
    title="Sales Copilot",
    description="Prospect research over Apollo and LinkedIn, plus outreach drafting.",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
    expose_headers=[REQUEST_ID_HEADER],
)


@app.middleware("http")
async def request_context(request: Request, call_next) -> Response:
    """Tag each request with an id (client-supplied or new) and log its outcome."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    request.state.request_id = request_id
    t0 = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "[%s] %s %s -> %d in %.0fms",
        request_id, request.method, request.url.path,
        response.status_code, (time.perf_counter() - t0) * 1000,
    )
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


app.include_router(router, prefix="/api")


@app.get("/")
async def root():
    return {
        "service": "Sales Copilot",
        "version": VERSION,
        "docs": "/docs",
        "endpoints": ["/api/health", "/api/chat", "/api/documents/{document_id}"],
    }


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    uvicorn.run("sales_copilot.server:app", host=SERVER_HOST, port=SERVER_PORT)


if __name__ == "__main__":
    run()
