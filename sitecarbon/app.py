# app.py
import logging
import os
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from sitecarbon.audit.runner import LighthouseRunner
from sitecarbon.cache import ResultCache, build_cache
from sitecarbon.config import CACHE_TTL, LOG_LEVEL, PUBLIC_DIR
from sitecarbon.core.analysis import analyze_url
from sitecarbon.core.green_hosting import GreenHostingClient
from sitecarbon.core.utils import cache_key_for_url, is_valid_url
from sitecarbon.models.schema import ErrorResponse

# ---------- logging ----------
logging.basicConfig(level=LOG_LEVEL)
log = logging.getLogger("sitecarbon")


def error_response(status_code: int, error: str, **extra) -> JSONResponse:
    body = ErrorResponse(error=error, **extra).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)


# ---------- dependencies ----------
def get_cache(request: Request) -> ResultCache:
    return request.app.state.cache


def get_green_client(request: Request) -> GreenHostingClient:
    return request.app.state.green_client


def get_audit_runner(request: Request) -> LighthouseRunner:
    return request.app.state.audit_runner


# ---------- routes ----------
async def analyze(
    url: Optional[str] = None,
    cache: ResultCache = Depends(get_cache),
    green_client: GreenHostingClient = Depends(get_green_client),
    audit_runner: LighthouseRunner = Depends(get_audit_runner),
):
    url = (url or "").strip()
    if not url:
        return error_response(400, "URL parameter is required")
    if not is_valid_url(url):
        return error_response(400, "Invalid URL provided")

    log.info("Analysis requested for: %s", url)
    key = cache_key_for_url(url)
    cached = await cache.get(key)
    if cached:
        log.info("Returning cached analysis for %s", url)
        # equivalent URLs share an entry; echo the caller's own form
        return {**cached, "url": url}

    try:
        payload = await analyze_url(url, green_client, audit_runner)
        await cache.set(key, payload, CACHE_TTL)
    except Exception as e:
        log.exception("Error analyzing website %s", url)
        return error_response(500, "Failed to analyze website", details=str(e), url=url)
    return payload


async def health_check():
    return {"status": "ok"}


def create_app(
    cache: Optional[ResultCache] = None,
    green_client: Optional[GreenHostingClient] = None,
    audit_runner: Optional[LighthouseRunner] = None,
    public_dir: Optional[str] = PUBLIC_DIR,
) -> FastAPI:
    app = FastAPI(title="Website Carbon Analyzer", version="1.0.0")
    app.state.cache = cache if cache is not None else build_cache()
    app.state.green_client = green_client or GreenHostingClient()
    app.state.audit_runner = audit_runner or LighthouseRunner()

    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    app.add_api_route("/analyze", analyze, methods=["GET"])
    app.add_api_route("/health", health_check, methods=["GET"])

    # mounted last so API routes win
    if public_dir and os.path.isdir(public_dir):
        app.mount("/", StaticFiles(directory=public_dir, html=True), name="public")
    return app


app = create_app()
