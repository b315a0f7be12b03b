from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
import json
import logging
import os
import traceback
from fastapi import FastAPI, Depends, Form, Request, HTTPException
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session
from sqlalchemy import select
from starlette.concurrency import run_in_threadpool
import structlog
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from .db import SessionLocal, get_db, init_db, is_initialized
from .ingestion import ingest_batch, ingest_post
from .middleware import RequestCounterMiddleware, RequestMetrics, SecurityHeadersMiddleware
from .repository import get_post, list_posts
from .schemas import PostDraft, PostForm
from .utils import parse_post_id
from .validation import BatchValidationError, validate_batch, validate_post_form
from .config import settings

# Configure structured logging
structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer()
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    ),
    logger_factory=structlog.PrintLoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger(__name__)

BASE_DIR = Path(__file__).resolve().parent
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))

# Initialize rate limiter
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)
metrics = RequestMetrics()

@asynccontextmanager
async def lifespan(app: FastAPI):
    # storage must be ready before the first request is routed
    init_db()
    logger.info("Application started", port=settings.PORT, env=settings.ENV)
    yield

INTERNAL_ERROR = "Internal server error"

def _internal_error_response(request: Request, exc: Exception):
    logger.error(
        "Unhandled exception",
        exc_info=exc,
        path=request.url.path,
        method=request.method,
        traceback=traceback.format_exc()
    )
    if request.url.path.startswith("/api/"):
        return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR})
    return PlainTextResponse(INTERNAL_ERROR, status_code=500)

app = FastAPI(title="Blog API", lifespan=lifespan)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Registered first so it sits inside the metrics and header middlewares
@app.middleware("http")
async def internal_errors(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception as exc:
        return _internal_error_response(request, exc)

app.add_middleware(RequestCounterMiddleware, metrics=metrics)
app.add_middleware(SecurityHeadersMiddleware)

STATIC_DIR = settings.STATIC_DIR or str(BASE_DIR / "static")
if os.path.exists(STATIC_DIR):
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

# Global exception handler for anything raised outside the middleware above
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    return _internal_error_response(request, exc)

@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring"""
    try:
        # Test database connection
        db = SessionLocal()
        try:
            db.execute(select(1))
        finally:
            db.close()
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": "1.0.0"
        }
    except Exception as e:
        logger.error("Health check failed", exc_info=e)
        raise HTTPException(status_code=503, detail="Service unhealthy")

@app.get("/ready")
async def readiness_check():
    if not is_initialized():
        return JSONResponse(status_code=503, content={"status": "starting"})
    return {"status": "ready"}

@app.get("/metrics")
async def request_metrics():
    return metrics.snapshot()

def _render_form(request: Request, post: PostForm, valid: bool):
    return templates.TemplateResponse(
        request, "edit-news.html", {"post": post, "valido": valid}
    )

@app.get("/post")
@limiter.limit(settings.RATE_LIMIT_POST)
def new_post_form(request: Request):
    return _render_form(request, PostForm(), True)

@app.post("/post")
@limiter.limit(settings.RATE_LIMIT_POST)
def submit_post(
    request: Request,
    db: Session = Depends(get_db),
    title: str | None = Form(None),
    resumo: str | None = Form(None),
    description: str | None = Form(None),
):
    result = validate_post_form(title, resumo, description)
    if not result.valid:
        logger.info("Post form rejected")
        return _render_form(request, result.post, False)
    ingest_post(db, PostDraft(**result.post.model_dump()))
    return RedirectResponse("/", status_code=302)

async def _read_articles(request: Request):
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    if not isinstance(body, dict):
        return None
    return body.get("artigos")

@app.post("/api/post")
@limiter.limit(settings.RATE_LIMIT_API)
async def bulk_create_posts(request: Request, db: Session = Depends(get_db)):
    articles = await _read_articles(request)
    try:
        drafts = validate_batch(articles)
    except BatchValidationError as e:
        return JSONResponse(status_code=400, content={"error": e.message})
    created = await run_in_threadpool(ingest_batch, db, drafts)
    return {"message": f"Successfully created {created} articles"}

@app.get("/post/{post_id}")
# under /post, so the post budget applies on top of the default one
@limiter.limit(f"{settings.RATE_LIMIT_DEFAULT};{settings.RATE_LIMIT_POST}")
def view_post(request: Request, post_id: str, db: Session = Depends(get_db)):
    pk = parse_post_id(post_id)
    if pk is None:
        return PlainTextResponse("Invalid post ID", status_code=400)
    post = get_post(db, pk)
    if post is None:
        return PlainTextResponse("Post not found", status_code=404)
    return templates.TemplateResponse(request, "view-news.html", {"post": post})

@app.get("/")
@limiter.limit(settings.RATE_LIMIT_DEFAULT)
def index(request: Request, db: Session = Depends(get_db)):
    posts = list_posts(db)
    return templates.TemplateResponse(request, "index.html", {"posts": posts})
