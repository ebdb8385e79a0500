from typing import Any, Dict, Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from ..services.analysis_view import analysis_card
from ..services.risk_classifier import (
    Thresholds,
    classify_color_code,
    classify_score,
    composite_score,
    describe,
)

router = APIRouter()

class ScoreIn(BaseModel):
    # Any: un puntaje ausente o no numérico se clasifica como riesgo alto, no como 422
    score: Any = None
    thresholds: Thresholds = Field(default_factory=Thresholds)

class CompositeIn(BaseModel):
    indicators: Dict[str, float]                      # 0..100 por indicador
    weights: Dict[str, float] = Field(default_factory=dict)
    thresholds: Thresholds = Field(default_factory=Thresholds)

class AnalysisCardIn(BaseModel):
    categoria: str
    conteo: int = 1
    color_semaforo: Optional[str] = Field(default=None, alias="colorSemaforo")
    analisis_asesor: Optional[str] = Field(default=None, alias="analisisAsesor")

    model_config = {"populate_by_name": True}

@router.post("/score", summary="Semáforo a partir de un puntaje compuesto")
async def risk_from_score(payload: ScoreIn):
    level = classify_score(payload.score, payload.thresholds)
    return {"thresholds": payload.thresholds.model_dump(), **describe(level)}

@router.post("/composite", summary="Puntaje compuesto ponderado + semáforo")
async def risk_from_indicators(payload: CompositeIn):
    score = composite_score(payload.indicators, payload.weights)
    level = classify_score(score, payload.thresholds)
    return {"score": score, "thresholds": payload.thresholds.model_dump(), **describe(level)}

@router.get("/color/{code}", summary="Semáforo a partir del color asignado")
async def risk_from_color(code: str):
    return {"code": code, **describe(classify_color_code(code))}

@router.post("/analysis-card", summary="Tarjeta de análisis para tableros")
async def risk_analysis_card(payload: AnalysisCardIn):
    return analysis_card(payload.categoria, payload.conteo, payload.color_semaforo, payload.analisis_asesor)
