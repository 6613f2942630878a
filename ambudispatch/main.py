import logging
import os
import time
import uuid

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ambudispatch.core.validate import ValidationError

from ambudispatch.api.v1.endpoints.health import router as health_router
from ambudispatch.api.v1.endpoints.hospitals import router as hospitals_router
from ambudispatch.api.v1.endpoints.matching import router as matching_router
from ambudispatch.api.v1.endpoints.vitals import router as vitals_router

load_dotenv()

logging.basicConfig(
    level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Ambulance Dispatch Backend",
    version="1.0.0",
    description="Hospital matching and vital-sign simulation for ambulance dispatch.",
)

# =====================================================
#  ROUTERS
# =====================================================

app.include_router(health_router, prefix="/api/v1")
app.include_router(hospitals_router, prefix="/api/v1")
app.include_router(matching_router, prefix="/api/v1")
app.include_router(vitals_router, prefix="/api/v1")

# =====================================================
#  CORS
# =====================================================

origins = [o.strip() for o in os.getenv("ALLOW_ORIGINS", "*").split(",")]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# =====================================================
#  MIDDLEWARE: REQUEST ID + WAKTU PROSES
# =====================================================

@app.middleware("http")
async def add_request_id(request: Request, call_next):
    rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = rid

    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000

    response.headers["X-Request-ID"] = rid
    response.headers["X-Process-Time-Ms"] = f"{elapsed_ms:.1f}"
    logger.info("%s %s -> %s (%.1f ms) rid=%s", request.method, request.url.path, response.status_code, elapsed_ms, rid)
    return response

# =====================================================
#  ERROR HANDLERS
# =====================================================

@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    # direktori RS rusak (bed available > total, koordinat di luar range, dst)
    logger.warning("direktori RS tidak valid: %s", exc)
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(FileNotFoundError)
async def config_missing_handler(request: Request, exc: FileNotFoundError):
    # CONFIG_PATH menunjuk file yang tidak ada
    logger.error("konfigurasi tidak ditemukan: %s", exc)
    return JSONResponse(status_code=500, content={"detail": str(exc)})

# =====================================================
#  ROOT
# =====================================================

@app.get("/")
async def root():
    return {
        "service": "ambudispatch",
        "status": "ok",
        "docs": "/docs",
        "api": "/api/v1",
    }
