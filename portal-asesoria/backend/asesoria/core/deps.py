"""
Dependencias comunes para FastAPI:
- current_store (sesiones de cuestionario en memoria)
- current_question_source (banco JSON o API del portal, según QUESTION_SOURCE)
- current_scorer (servicio externo de puntuación)
En pruebas se reemplazan con app.dependency_overrides.
"""
from functools import lru_cache

from ..core.config import settings
from ..models.session import SessionStore
from ..services.question_source import ContentQuestionSource, HttpQuestionSource, QuestionSource
from ..services.scoring_client import HttpScoringClient, Scorer


@lru_cache
def current_store() -> SessionStore:
    return SessionStore(max_sessions=settings.SESSION_MAX)


@lru_cache
def current_question_source() -> QuestionSource:
    if settings.QUESTION_SOURCE == "http":
        return HttpQuestionSource(settings.QUESTIONS_API_URL, timeout=settings.HTTP_TIMEOUT_SECONDS)
    return ContentQuestionSource(settings.CONTENT_DIR, settings.CONTENT_LOCALE, settings.CONTENT_VERSION)


@lru_cache
def current_scorer() -> Scorer:
    return HttpScoringClient(settings.SCORING_API_URL, timeout=settings.HTTP_TIMEOUT_SECONDS)
