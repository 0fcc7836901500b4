"""
FastAPI application entry point.

Water Meter Analytics - read-only aggregation API over industry water
meter readings, feeding the dashboard's tables and charts.
"""
import asyncio
import logging
from datetime import datetime, timezone
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.config import settings, ensure_directories
from app.database import init_db
from app.exceptions import MeterAnalyticsError, NotFound, RequestTimeout
from app.schemas.common import HealthResponse
from app.routers import reference, charts, meter_data

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(levelname)s - %(name)s - %(message)s'
)
logger = logging.getLogger(__name__)

API = settings.API_PREFIX

AVAILABLE_ENDPOINTS = [
    f"GET {API}/health",
    f"GET {API}/years",
    f"GET {API}/divisions",
    f"GET {API}/industries",
    f"GET {API}/months",
    f"GET {API}/chart1?division=X&financial_year=Y",
    f"GET {API}/chart2?financial_year=X",
    f"GET {API}/chart3?industry=X",
    f"GET {API}/chart4?industry=X",
    f"GET {API}/chart5?industry=X&financial_year=Y",
    f"GET {API}/chart6?division=X&financial_year=Y",
    f"GET {API}/alldata?page=0&pageSize=20",
    f"GET {API}/all-meter-data",
    f"GET {API}/stats",
    f"GET {API}/test-db",
]

# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="""
    **Water Meter Analytics API**

    Read-only reporting over industry water meter readings.

    ## Key Features

    * **Reference lists**: financial years, divisions, industries, months
    * **Charts**: meter reading differences grouped by industry, division,
      year and month
    * **Raw data**: paginated listing of every reading
    * **Statistics**: whole-table record counts and totals
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
)


@app.middleware("http")
async def request_timeout(request: Request, call_next):
    """Answer 408 when a request runs past REQUEST_TIMEOUT_SECONDS."""
    try:
        return await asyncio.wait_for(
            call_next(request), timeout=settings.REQUEST_TIMEOUT_SECONDS
        )
    except asyncio.TimeoutError:
        logger.warning(f"Request timeout: {request.method} {request.url.path}")
        error = RequestTimeout()
        return JSONResponse(status_code=error.status_code, content=error.body())


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every request with its query parameters."""
    logger.info(f"{request.method} {request.url.path} Query: {dict(request.query_params)}")
    return await call_next(request)


# Startup event
@app.on_event("startup")
async def startup_event():
    """Initialize application on startup."""
    ensure_directories()

    try:
        init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.warning(f"Database initialization warning: {e}")

    logger.info(f"{settings.PROJECT_NAME} ready, health check at {API}/health")


# Include routers
app.include_router(reference.router, prefix=API, tags=["Reference Lists"])
app.include_router(charts.router, prefix=API, tags=["Charts"])
app.include_router(meter_data.router, prefix=API, tags=["Meter Data"])


# Root endpoint
@app.get("/", tags=["Root"])
def root():
    """API root endpoint with basic information."""
    return {
        "message": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "docs": "/docs",
        "redoc": "/redoc",
        "endpoints": AVAILABLE_ENDPOINTS,
    }


# Health check
@app.get(f"{API}/health", response_model=HealthResponse, tags=["Health"])
def health_check():
    """
    Liveness probe.

    Never touches the database; use ``/test-db`` for connectivity.
    """
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "message": "Backend is running successfully!",
        "database": f"not checked (see {API}/test-db)",
    }


# Exception handlers
@app.exception_handler(MeterAnalyticsError)
async def meter_analytics_exception_handler(request: Request, exc: MeterAnalyticsError):
    return JSONResponse(status_code=exc.status_code, content=exc.body())


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404 and request.url.path.startswith(API):
        return JSONResponse(
            status_code=NotFound.status_code,
            content={
                "error": NotFound.error,
                "requested_path": request.url.path,
                "method": request.method,
                "available_endpoints": AVAILABLE_ENDPOINTS,
            }
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.detail,
            "status_code": exc.status_code
        }
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal Server Error",
            "message": str(exc),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
    )
