"""
Risk Assessment Platform — FastAPI application entry-point.

Run with:
    uvicorn riskassess.main:app --reload
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from riskassess.config import settings
from riskassess.database import create_tables
from riskassess.errors import ApiError

# ── Import routers ──
from riskassess.routers import projects


# ── Lifespan: create tables on startup ──
@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_tables()
    yield


app = FastAPI(
    title=settings.APP_NAME,
    description="Describe a project idea, get an AI risk assessment, keep the ones worth keeping.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=("*",))


# ── Error rendering: {"error": "..."} with the status and headers of the ApiError ──
@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    return JSONResponse(
        {"error": exc.message},
        status_code=exc.status_code,
        headers=exc.headers,
    )


# ── Register API routers ──
app.include_router(projects.router)
