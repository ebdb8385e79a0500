"""
Tarjeta de análisis para los tableros de cliente y asesor.
El análisis automático cuenta como 50% del proceso; la revisión del asesor completa el resto.
"""
from typing import Any

from .risk_classifier import classify_color_code, describe

ANALYSIS_PROGRESS = 50
REVIEW_PROGRESS = 50


def format_analysis_title(categoria: str, conteo: int) -> str:
    """'finanzas-corporativas', 2 → 'Finanzas corporativas #2'."""
    categoria = categoria or ""
    formatted = categoria[:1].upper() + categoria[1:].replace("-", " ")
    return f"{formatted} #{conteo}" if conteo > 1 else formatted


def analysis_status(color_code: Any) -> str:
    # el color indica severidad, no avance: solo "verde" se considera cerrado
    return "completed" if isinstance(color_code, str) and color_code.strip().lower() == "verde" else "in-progress"


def total_progress(has_adviser_review: bool = False) -> int:
    return ANALYSIS_PROGRESS + (REVIEW_PROGRESS if has_adviser_review else 0)


def analysis_card(categoria: str, conteo: int, color_code: Any, adviser_review: str | None = None) -> dict:
    level = classify_color_code(color_code)
    has_review = bool(adviser_review and adviser_review.strip())
    return {
        "title": format_analysis_title(categoria, conteo),
        "status": analysis_status(color_code),
        "progress": total_progress(has_review),
        "has_adviser_review": has_review,
        "risk": describe(level),
    }
