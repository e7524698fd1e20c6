"""
TheQallaRoom: FastAPI relay server entry point.

Guest chat with per-channel replay, a live presence roster and WebRTC
signaling for small voice rooms. All state lives in process memory.
"""

import logging
import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from qallaroom.api import channels, health, presence, stickers, voice
from qallaroom.config import settings
from qallaroom.state import RelayState
from qallaroom.websocket.handlers import relay_ws_handler

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

os.makedirs(settings.UPLOAD_DIR, exist_ok=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.relay = RelayState.from_settings(settings)
    logger.info("%s running on port %s", settings.APP_NAME, settings.PORT)
    if app.state.relay.invite_code:
        logger.info("Invite-only enabled (INVITE_CODE set).")
    yield
    await app.state.relay.close()


app = FastAPI(
    title="TheQallaRoom",
    description="Guest chat, presence and WebRTC signaling relay",
    version="1.0.0",
    debug=settings.DEBUG,
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------
# allow_origins=["*"] is incompatible with allow_credentials=True, so a
# wildcard entry switches to allow_origin_regex=".*" instead.
_cors_origins = [o for o in settings.CORS_ORIGINS if o != "*"]
_cors_regex = ".*" if len(_cors_origins) < len(settings.CORS_ORIGINS) else None

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_origin_regex=_cors_regex,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
app.include_router(health.router)
app.include_router(stickers.router, prefix="/api")
app.include_router(channels.router, prefix="/api")
app.include_router(presence.router, prefix="/api")
app.include_router(voice.router, prefix="/api")

# Serve uploaded stickers as static assets
app.mount(stickers.STICKER_URL_PREFIX, StaticFiles(directory=settings.UPLOAD_DIR), name="stickers")

# ---------------------------------------------------------------------------
# WebSocket endpoint
# ---------------------------------------------------------------------------


@app.websocket("/ws")
async def relay_websocket_endpoint(websocket: WebSocket) -> None:
    await relay_ws_handler(websocket, websocket.app.state.relay)


def run() -> None:
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())
