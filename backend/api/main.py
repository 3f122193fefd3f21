"""
ProdTrack API — FastAPI Application Entry Point
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request

from chatbot.completion import build_chat_responder
from core.config import get_settings
from core.errors import AppError

settings = get_settings()
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("ProdTrack API starting up", version=settings.app_version)
    if settings.auto_create_tables:
        from db.session import init_models

        await init_models()
    yield
    logger.info("ProdTrack API shutting down")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Production cost and inventory tracking",
    lifespan=lifespan,
)

# Chat strategy is fixed for the lifetime of the app.
app.state.chat_responder = build_chat_responder(settings)


# ─── Error handling ─────────────────────────────────────────────────────────


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("request.failed", path=request.url.path, error=exc.message, details=exc.details)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    message = "Route not found" if exc.status_code == 404 and exc.detail == "Not Found" else exc.detail
    return JSONResponse(status_code=exc.status_code, content={"error": message}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
    return JSONResponse(
        status_code=400,
        content={"error": "; ".join(problems) or "Invalid input"},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("request.unhandled_error", path=request.url.path)
    return JSONResponse(status_code=500, content={"error": "Something went wrong!"})


# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Import and register routers
from api.v1.routers import (
    actual_usage,
    alerts,
    auth,
    chatbot,
    dashboard,
    inventory,
    orders,
    reports,
)

app.include_router(auth.router)
app.include_router(dashboard.router)
app.include_router(orders.router)
app.include_router(actual_usage.router)
app.include_router(inventory.router)
app.include_router(alerts.router)
app.include_router(reports.router)
app.include_router(chatbot.router)


@app.get("/health")
async def health_check():
    """Health check endpoint for load balancers."""
    return {"status": "healthy", "version": settings.app_version}
