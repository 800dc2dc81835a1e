"""
Top-level Merit Journal API
"""
import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .data import PingResponse, VersionResponse
from .entries.api import app as entries_api
from .middleware import CollectionPathMiddleware
from .utils.settings import CORS_ALLOWED_ORIGINS
from .version import MERITJOURNAL_VERSION

LOG_LEVEL = logging.INFO
if os.getenv("MERITJOURNAL_DEBUG", "").lower() == "true":
    LOG_LEVEL = logging.DEBUG

LOG_FORMAT = "[%(levelname)s] %(name)s (Source: %(pathname)s:%(lineno)d, Time: %(asctime)s) - %(message)s"
logging.basicConfig(format=LOG_FORMAT, level=LOG_LEVEL)

ENTRIES_PATH = "/api/journal-entries"

app = FastAPI(openapi_url=None)

app.add_middleware(CollectionPathMiddleware, paths=[ENTRIES_PATH])

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/ping", response_model=PingResponse)
async def ping() -> PingResponse:
    return PingResponse(status="ok")


@app.get("/version", response_model=VersionResponse)
async def version() -> VersionResponse:
    return VersionResponse(version=MERITJOURNAL_VERSION)


app.mount(ENTRIES_PATH, entries_api)
