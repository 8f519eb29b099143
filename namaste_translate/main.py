"""NAMASTE terminology backend: FastAPI application entry point.

Provides the FHIR-style ConceptMap ``$translate`` operation and the
administrative ConceptMap listing. Authentication is handled upstream.
"""

import logging
import time
from collections import defaultdict
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from namaste_translate.config import settings
from namaste_translate.engine.orchestrator import TranslationOrchestrator
from namaste_translate.exceptions import InvalidQuery, NotFound, TranslationError
from namaste_translate.store.base import MappingStore
from namaste_translate.store.memory import InMemoryMappingStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
)
logger = logging.getLogger("namaste_translate")


# ═══════════════ RATE LIMITER ═══════════════

class RateLimiter:
    """Sliding-window rate limiter by IP.

    IPs with no hits inside the window are dropped, at most once per window.
    """

    def __init__(self, max_requests: int, window_seconds: int = 60):
        self.max_requests = max_requests
        self.window = window_seconds
        self._hits: dict[str, list[float]] = defaultdict(list)
        self._last_sweep = time.monotonic()

    def is_limited(self, ip: str) -> bool:
        now = time.monotonic()
        window_start = now - self.window
        if now - self._last_sweep >= self.window:
            self._sweep(window_start)
            self._last_sweep = now
        # Remove expired entries
        self._hits[ip] = [t for t in self._hits[ip] if t > window_start]
        if len(self._hits[ip]) >= self.max_requests:
            return True
        self._hits[ip].append(now)
        return False

    def _sweep(self, window_start: float) -> None:
        stale = [ip for ip, hits in self._hits.items() if not hits or hits[-1] <= window_start]
        for ip in stale:
            del self._hits[ip]


rate_limiter = RateLimiter(settings.rate_limit_per_minute)


# ═══════════════ ENGINE WIRING ═══════════════

_orchestrator: TranslationOrchestrator | None = None


def build_store() -> MappingStore:
    """Mapping store selected by STORE_BACKEND."""
    if settings.store_backend.strip().lower() == "sql":
        from namaste_translate.database import get_session_factory
        from namaste_translate.store.sql import SqlMappingStore
        return SqlMappingStore(get_session_factory())
    return InMemoryMappingStore.from_file(settings.seed_path or None)


def get_orchestrator() -> TranslationOrchestrator:
    """FastAPI dependency. One orchestrator per process, built on first use."""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = TranslationOrchestrator(build_store())
    return _orchestrator


# ═══════════════ LIFESPAN ═══════════════

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "NAMASTE backend starting | store=%s | mode=%s | demo_mode=%s",
        settings.store_backend, settings.translate_mode, settings.is_demo_mode,
    )

    if settings.store_backend.strip().lower() == "sql":
        from namaste_translate.database import close_db, init_db
        db_ok = await init_db()
        logger.info("Database: %s", "connected" if db_ok else "unavailable (continuing without)")
        yield
        await close_db()
    else:
        yield

    logger.info("NAMASTE backend shutting down")


# ═══════════════ APP ═══════════════

app = FastAPI(
    title="NAMASTE Terminology API",
    description="AYUSH / NAMASTE ConceptMap $translate service",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


def _error_body(exc: TranslationError, request: Request) -> dict:
    key = "message" if isinstance(exc, NotFound) else "error"
    return {key: exc.message, "query": dict(request.query_params)}


@app.exception_handler(TranslationError)
async def translation_error_handler(request: Request, exc: TranslationError):
    logger.info(
        "Translate failed | %s | status=%d | %s",
        type(exc).__name__, exc.status_code, exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc, request))


# ═══════════════ ENDPOINTS ═══════════════

@app.get("/health")
async def health():
    return {
        "status": "ok",
        "demo_mode": settings.is_demo_mode,
        "store_backend": settings.store_backend,
        "translate_mode": settings.translate_mode,
    }


@app.get("/fhir/ConceptMap")
async def list_concept_maps(orchestrator: TranslationOrchestrator = Depends(get_orchestrator)):
    """Administrative dump of every stored ConceptMap."""
    try:
        documents = await orchestrator.list_concept_maps()
    except TranslationError:
        raise
    except Exception as e:
        logger.error("ConceptMap listing failed | %s", str(e)[:300])
        return JSONResponse(
            status_code=500,
            content={"error": "Could not fetch ConceptMaps."},
        )
    return [d.model_dump(by_alias=True, exclude_none=True) for d in documents]


@app.get("/fhir/ConceptMap/$translate")
async def translate(
    request: Request,
    code: str | None = None,
    name: str | None = None,
    orchestrator: TranslationOrchestrator = Depends(get_orchestrator),
):
    """FHIR $translate over the flat specialty tables or the grouped ConceptMaps."""
    client_ip = request.headers.get("x-forwarded-for", "").split(",")[0].strip()
    if not client_ip:
        client_ip = request.client.host if request.client else "unknown"

    if rate_limiter.is_limited(client_ip):
        return JSONResponse(
            status_code=429,
            content={"error": "Too many requests. Please wait a minute."},
        )

    start = time.monotonic()
    try:
        if settings.uses_grouped_mode:
            resource = await orchestrator.translate_grouped(code=code, name=name)
            body = resource.to_response()
        elif code and code.strip():
            result = await orchestrator.translate_by_code(code)
            body = result.to_response()
        elif name and name.strip():
            result = await orchestrator.translate_by_name(name)
            body = result.to_response()
        else:
            raise InvalidQuery("Missing or invalid ?code or ?name parameter")
    except TranslationError:
        raise
    except Exception as e:
        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.error("Translate crashed | %dms | %s", elapsed_ms, str(e)[:300])
        return JSONResponse(
            status_code=500,
            content={"error": "Translation failed.", "query": dict(request.query_params)},
        )

    return JSONResponse(content=body)
