# fastapi-backend/src/main.py
import logging
from pathlib import Path
from contextlib import asynccontextmanager

import uvicorn
from pydantic import BaseModel
from fastapi.responses import FileResponse, JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi import Depends, FastAPI, HTTPException

from settings import AppSettings, get_settings
from commands import COMMAND_RULES, VoiceResponse, process_command
from telemetry.client import OpenObserveClient
from telemetry.snapshot import fetch_latest_metrics


settings = get_settings()

LOG_LEVEL = (settings.log_level or "INFO").upper()
HOST = settings.host
PORT = int(settings.port)
STATIC_DIR = Path(__file__).resolve().parent / "static"

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger("main")


class VoiceCommand(BaseModel):
    command: str


def get_telemetry_client(s: AppSettings = Depends(get_settings)) -> OpenObserveClient:
    return OpenObserveClient(s)


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        logger.info("Starting application...")
        for rule in COMMAND_RULES:
            logger.info("Registered command rule: %s %s", rule.name, list(rule.keywords))
        if settings.demo_mode:
            logger.info("Demo mode: serving simulated metrics only")
        else:
            logger.info("Telemetry store: %s", settings.telemetry_url)
        logger.info("Application startup complete")
        yield
    finally:
        logger.info("Application shutdown complete")


app = FastAPI(
    title="AARDI Voice Dashboard",
    version=settings.app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins or ["*"],
    allow_credentials=bool(settings.cors_allow_credentials),
    allow_methods=settings.cors_allow_methods or ["*"],
    allow_headers=settings.cors_allow_headers or ["*"],
)


@app.get("/")
async def root():
    return FileResponse(STATIC_DIR / "index.html", media_type="text/html")


@app.get("/health", response_class=JSONResponse)
async def health():
    try:
        return JSONResponse({"ok": True})
    except Exception as exc:
        logger.exception("Health check failed: %s", exc)
        raise HTTPException(status_code=500, detail="health check failed")


@app.post("/api/voice", response_model=VoiceResponse)
async def voice(
    body: VoiceCommand,
    s: AppSettings = Depends(get_settings),
    client: OpenObserveClient = Depends(get_telemetry_client),
) -> VoiceResponse:
    logger.info("Processing command: %s", body.command)
    metrics, source = await fetch_latest_metrics(s, client)
    logger.info("Metrics source: %s", source)
    return process_command(body.command, metrics, source)


if __name__ == "__main__":
    logger.info("Starting %s on %s:%d", app.title, HOST, PORT)
    uvicorn.run(app, host=HOST, port=PORT, log_level=LOG_LEVEL.lower())
