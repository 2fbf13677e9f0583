from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Dict, Optional

from fastapi import Depends, FastAPI, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings, get_settings
from .exceptions import (
    AttemptsExhaustedError,
    RateLimitedError,
    SearchFailedError,
    ValidationError,
    get_error_response,
)
from .models import CachePolicy, HealthResponse, ProviderCredentials, ProviderId, SearchRequest
from .services.cost_control import get_cost_control
from .services.http_pool import HTTPClientPool, close_http_pool
from .services.search import SearchService
from .utils.logging_security import SecureLogger, log_secure

logger = logging.getLogger("reality_search")
logging.basicConfig(level=logging.INFO)


settings: Settings = get_settings()

# Bring-your-own-key request headers
USER_KEY_HEADERS: Dict[ProviderId, str] = {
    ProviderId.SERPAPI: "x-user-serpapi-key",
    ProviderId.SEARCHAPI: "x-user-searchapi-key",
    ProviderId.BRAVE: "x-user-brave-key",
}

SHORT_CDN_CACHE_SECONDS = 60


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown events."""
    HTTPClientPool()
    configured = sorted(p.value for p in settings.server_credentials())
    logger.info(f"reality-search ready (server keys: {', '.join(configured) or 'none'}, BYO keys: {settings.enable_byo_key})")

    yield

    await close_http_pool()


app = FastAPI(title="reality-search API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins if settings.allowed_origins else ["http://localhost:3000"],
    allow_credentials=False,
    allow_methods=["GET"],
    allow_headers=["*"],
    expose_headers=["Retry-After", "X-Request-ID"],
)


# ====================
# Helper Functions
# ====================

def get_client_ip(request: Request) -> str:
    """First X-Forwarded-For hop, then X-Real-IP, else "unknown"."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip() or "unknown"
    real_ip = request.headers.get("x-real-ip")
    if real_ip and real_ip.strip():
        return real_ip.strip()
    return "unknown"


def get_credentials(request: Request, settings: Settings) -> ProviderCredentials:
    user: Dict[ProviderId, str] = {}
    if settings.enable_byo_key:
        for provider, header in USER_KEY_HEADERS.items():
            value = (request.headers.get(header) or "").strip()
            if value:
                user[provider] = value
    return ProviderCredentials(user=user, server=settings.server_credentials())


def get_search_service() -> SearchService:
    current = get_settings()
    return SearchService(settings=current, cost_control=get_cost_control())


def set_no_store(response: Response) -> None:
    response.headers["Cache-Control"] = "private, no-store"
    response.headers["Pragma"] = "no-cache"


def set_cdn_cache(response: Response, policy: CachePolicy) -> None:
    response.headers["Cache-Control"] = "max-age=0"
    response.headers["CDN-Cache-Control"] = (
        f"s-maxage={policy.ttl_seconds}, "
        f"stale-while-revalidate={policy.swr_seconds}, "
        f"stale-if-error={policy.stale_if_error_seconds}"
    )


def set_short_cdn_cache(response: Response) -> None:
    response.headers["Cache-Control"] = "max-age=0"
    response.headers["CDN-Cache-Control"] = f"s-maxage={SHORT_CDN_CACHE_SECONDS}"


# Secure logging middleware with request tracing and key redaction
@app.middleware("http")
async def secure_logging_middleware(request: Request, call_next):
    request_id = SecureLogger.generate_request_id()
    request.state.request_id = request_id
    start_time = time.perf_counter()

    request_log = SecureLogger.format_request_log(
        request, request_id, include_headers=logger.isEnabledFor(logging.DEBUG)
    )
    log_secure("info", "Request received", request_log, request_id)

    try:
        response = await call_next(request)
    except Exception as e:
        duration_ms = (time.perf_counter() - start_time) * 1000
        error_log = SecureLogger.format_error_log(request_id, e, include_traceback=True)
        error_log["duration_ms"] = round(duration_ms, 2)
        log_secure("error", "Request failed", error_log, request_id)
        raise

    duration_ms = (time.perf_counter() - start_time) * 1000
    log_secure(
        "info",
        "Request completed",
        SecureLogger.format_response_log(request_id, response.status_code, duration_ms),
        request_id,
    )
    response.headers["X-Request-ID"] = request_id
    return response


async def search_failed_handler(request: Request, exc: SearchFailedError) -> JSONResponse:
    """Map search failures to HTTP status codes and cache headers."""
    if isinstance(exc, ValidationError):
        status_code = 400
    elif isinstance(exc, RateLimitedError):
        status_code = 429
    else:
        status_code = 503

    response = JSONResponse(get_error_response(exc), status_code=status_code)

    if isinstance(exc, RateLimitedError):
        response.headers["Retry-After"] = str(exc.retry_after)

    # Server-key upstream failures are cached briefly so retries do not hammer the providers
    if isinstance(exc, AttemptsExhaustedError) and not getattr(request.state, "byo_key", False):
        set_short_cdn_cache(response)
    else:
        set_no_store(response)

    logger.info(f"Search failed ({status_code}, {exc.reason}): {exc.message}")
    return response


app.add_exception_handler(SearchFailedError, search_failed_handler)


# ====================
# Routes
# ====================

@app.get("/api/healthz", response_model=HealthResponse)
async def healthz(response: Response) -> HealthResponse:
    set_no_store(response)
    return HealthResponse(
        ok=True,
        time=datetime.now(timezone.utc).isoformat(),
        build_sha=get_settings().build_sha,
    )


@app.get("/api/search")
async def search(
    request: Request,
    q: str = Query(default=""),
    country: Optional[str] = Query(default=None),
    lang: Optional[str] = Query(default=None),
    strict_country: bool = Query(default=False),
    service: SearchService = Depends(get_search_service),
) -> JSONResponse:
    credentials = get_credentials(request, service.settings)
    request.state.byo_key = credentials.has_any_user()

    outcome = await service.search(
        SearchRequest(
            query=q,
            country_hint=country,
            language_hint=lang,
            client_identity=get_client_ip(request),
            credentials=credentials,
            strict_country=strict_country,
        )
    )

    response = JSONResponse(outcome.to_response().model_dump(mode="json"))
    if outcome.cacheable:
        set_cdn_cache(response, outcome.cache)
    else:
        set_no_store(response)
    return response
