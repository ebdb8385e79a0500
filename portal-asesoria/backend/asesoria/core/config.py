"""
Configuración central de la app (fuente única de verdad).
Lee variables de entorno y expone un objeto Settings tipado.
"""
import os
from pathlib import Path
from pydantic import BaseModel, Field

# backend/asesoria/core/config.py -> portal-asesoria/
_PROJECT_DIR = Path(__file__).resolve().parents[3]


def _csv(name: str, default: str) -> list[str]:
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings(BaseModel):
    CORS_ORIGINS: list[str] = Field(default_factory=lambda: _csv("CORS_ORIGINS", "*"))

    # Banco de preguntas local (JSON versionado) o API del portal
    QUESTION_SOURCE: str = Field(default_factory=lambda: os.getenv("QUESTION_SOURCE", "content"))
    CONTENT_DIR: str = Field(default_factory=lambda: os.getenv("CONTENT_DIR", str(_PROJECT_DIR / "content")))
    CONTENT_LOCALE: str = Field(default_factory=lambda: os.getenv("CONTENT_LOCALE", "es-CO"))
    CONTENT_VERSION: str = Field(default_factory=lambda: os.getenv("CONTENT_VERSION", "2025-10-01"))
    QUESTIONS_API_URL: str = Field(default_factory=lambda: os.getenv("QUESTIONS_API_URL", "http://localhost:8080/api"))

    # Servicio externo de puntuación (recomendación + color de semáforo)
    SCORING_API_URL: str = Field(default_factory=lambda: os.getenv("SCORING_API_URL", "http://localhost:8080/api"))
    HTTP_TIMEOUT_SECONDS: float = Field(default_factory=lambda: float(os.getenv("HTTP_TIMEOUT_SECONDS", "30")))

    # Semáforo: < warn rojo, [warn, ok) amarillo, >= ok verde
    RISK_WARN_THRESHOLD: float = Field(default_factory=lambda: float(os.getenv("RISK_WARN_THRESHOLD", "60")))
    RISK_OK_THRESHOLD: float = Field(default_factory=lambda: float(os.getenv("RISK_OK_THRESHOLD", "80")))

    # Palabras clave compuestas: largo mínimo de cada palabra para contar como coincidencia
    KEYWORD_MIN_WORD_LENGTH: int = Field(default_factory=lambda: int(os.getenv("KEYWORD_MIN_WORD_LENGTH", "4")))

    # Sesiones de cuestionario en memoria
    SESSION_MAX: int = Field(default_factory=lambda: int(os.getenv("SESSION_MAX", "1000")))

settings = Settings()
