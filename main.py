import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from visits_app.config import settings
from visits_app.exceptions import (
    ConfigurationError,
    InvalidQueryError,
    SinkWriteError,
    UpstreamError,
)
from visits_app.api.v1 import track, detect, query

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Classifies docs page views (bots, AI agents, humans) and serves aggregate queries",
    debug=settings.debug
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


######## Error responses

@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    return JSONResponse(status_code=500, content={"error": str(exc)})


@app.exception_handler(InvalidQueryError)
async def invalid_query_handler(request: Request, exc: InvalidQueryError):
    return JSONResponse(status_code=400, content={"error": "invalid query", "allowed": exc.allowed})


@app.exception_handler(UpstreamError)
async def upstream_error_handler(request: Request, exc: UpstreamError):
    return JSONResponse(status_code=502, content={"error": str(exc)})


@app.exception_handler(SinkWriteError)
async def sink_write_error_handler(request: Request, exc: SinkWriteError):
    logger.error("Dataset write failed: %s", exc)
    return JSONResponse(status_code=502, content={"error": str(exc), "dataset": exc.dataset})


@app.get("/")
def read_root():
    """Root endpoint with API information"""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc"
    }


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"ok": True}


######## Include routers
app.include_router(track.router)
app.include_router(detect.router)
app.include_router(query.router)
