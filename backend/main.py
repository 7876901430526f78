import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.router import limiter, router
from config import settings
from services.errors import ConfigurationError
from services.seniority_thresholds import verify_key_dimensions_alignment

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    report = verify_key_dimensions_alignment()
    if not report.valid:
        raise ConfigurationError(f"Archetype key dimensions reference unknown values: {report.model_dump()}")
    yield


app = FastAPI(
    title="Skillvee Matching API",
    description="Recruiter search extraction, seniority filtering and candidate percentiles",
    version="1.0.0",
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    content = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    content = {"error": "Internal server error"}
    if settings.debug:
        content["details"] = str(exc)
    return JSONResponse(status_code=500, content=content)


app.include_router(router)
