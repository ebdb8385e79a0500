# backend/asesoria/main.py
"""
App FastAPI: CORS, lifespan (startup/shutdown), routers + middleware de trazas.
"""
import logging, time

# Cargar .env ANTES de importar config/routers
from dotenv import load_dotenv, find_dotenv
load_dotenv(find_dotenv(), override=False)

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .core.config import settings
from .core.deps import current_question_source
from .routes import flows, keywords, questions, risk
from .telemetry.logging import setup_logging
from .telemetry.otel import setup_otel

setup_logging()
http_logger = logging.getLogger("asesoria.http")

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_otel()
    logging.getLogger("asesoria").info(
        "Portal de asesoría listo (fuente de preguntas=%s, umbrales=%s/%s)",
        settings.QUESTION_SOURCE, settings.RISK_WARN_THRESHOLD, settings.RISK_OK_THRESHOLD,
    )
    yield
    current_question_source.cache_clear()

app = FastAPI(title="Portal Asesoría Financiera API", version="0.1.0", lifespan=lifespan)

# ---------------- CORS ----------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------- Middleware de trazas ----------------
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        http_logger.exception("%s %s EXC after %.4fs", request.method, request.url.path, time.perf_counter() - start)
        raise
    http_logger.info("%s %s -> %s in %.4fs", request.method, request.url.path, response.status_code, time.perf_counter() - start)
    return response

# ---------------- Healthcheck ----------------
@app.get("/health", tags=["misc"])
async def health():
    return {"ok": True}

# ---------------- Routers ----------------
app.include_router(questions.router, prefix="/questions", tags=["questions"])
app.include_router(keywords.router,  prefix="/keywords",  tags=["keywords"])
app.include_router(risk.router,      prefix="/risk",      tags=["risk"])
app.include_router(flows.router,     prefix="/flows",     tags=["flows"])
