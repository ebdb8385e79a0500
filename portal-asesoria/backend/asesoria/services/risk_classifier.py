"""
Clasificador del semáforo de riesgo.
Dos entradas con la misma salida ordenada (RiskLevel):
- puntaje compuesto + umbrales
- color asignado por el servicio externo ("verde"/"amarillo"/"rojo")

Nunca lanza: ante datos inválidos cae al nivel más conservador.
"""
import math
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, model_validator

from ..core.config import settings
from ..models.risk import RiskLevel


class Thresholds(BaseModel):
    warn: float = Field(default_factory=lambda: settings.RISK_WARN_THRESHOLD)
    ok: float = Field(default_factory=lambda: settings.RISK_OK_THRESHOLD)

    @model_validator(mode="after")
    def _ordered(self) -> "Thresholds":
        if self.warn > self.ok:
            raise ValueError("El umbral de advertencia debe ser menor o igual al óptimo")
        return self


_COLOR_CODES = {
    "rojo": RiskLevel.WORST,
    "red": RiskLevel.WORST,
    "amarillo": RiskLevel.MIDDLE,
    "yellow": RiskLevel.MIDDLE,
    "verde": RiskLevel.BEST,
    "green": RiskLevel.BEST,
}


def _as_finite(score: Any) -> float | None:
    if score is None or isinstance(score, bool):
        return None
    try:
        value = float(score)
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


def classify_score(score: Any, thresholds: Thresholds | None = None) -> RiskLevel:
    """
    - < warn        → WORST
    - [warn, ok)    → MIDDLE
    - >= ok         → BEST
    Puntaje ausente o no finito → WORST.
    """
    t = thresholds or Thresholds()
    value = _as_finite(score)
    if value is None:
        return RiskLevel.WORST
    if value < t.warn:
        return RiskLevel.WORST
    if value < t.ok:
        return RiskLevel.MIDDLE
    return RiskLevel.BEST


def classify_color_code(code: Any) -> RiskLevel:
    """Color desconocido → MIDDLE."""
    if not isinstance(code, str):
        return RiskLevel.MIDDLE
    return _COLOR_CODES.get(code.strip().lower(), RiskLevel.MIDDLE)


def describe(level: RiskLevel) -> dict:
    return {
        "level": level.name.lower(),
        "color": level.color,
        "label": level.label,
        "description": level.description,
        "status": level.status,
        "badge": level.badge,
    }


def composite_score(indicators: Mapping[str, Any], weights: Mapping[str, Any]) -> int:
    """
    Promedio ponderado de indicadores (0–100), con pesos normalizados a 1.
    Peso faltante, inválido o negativo cuenta como 0; si todos son 0 el compuesto es 0.
    Redondeo hacia arriba en .5, como el semáforo del tablero.
    """
    clean_weights = {k: max(_as_finite(weights.get(k)) or 0.0, 0.0) for k in indicators}
    wsum = sum(clean_weights.values()) or 1.0
    total = 0.0
    for key, raw in indicators.items():
        value = _as_finite(raw) or 0.0
        total += value * (clean_weights[key] / wsum)
    return math.floor(total + 0.5)
