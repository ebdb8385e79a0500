# backend/asesoria/models/risk.py
"""
Nivel del semáforo de riesgo compartido por modelos y servicios.
"""
from enum import IntEnum


class RiskLevel(IntEnum):
    """Nivel del semáforo, ordenado de peor a mejor."""
    WORST = 0
    MIDDLE = 1
    BEST = 2

    @property
    def color(self) -> str:
        return _COLORS[self]

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]

    @property
    def status(self) -> str:
        # estados del componente semáforo
        return _STATUSES[self]

    @property
    def badge(self) -> str:
        return _BADGES[self]


_COLORS = {RiskLevel.WORST: "rojo", RiskLevel.MIDDLE: "amarillo", RiskLevel.BEST: "verde"}
_LABELS = {RiskLevel.WORST: "Alto", RiskLevel.MIDDLE: "Moderado", RiskLevel.BEST: "Bajo"}
_DESCRIPTIONS = {
    RiskLevel.WORST: "Su situación requiere atención inmediata.",
    RiskLevel.MIDDLE: "Su situación requiere algunas mejoras.",
    RiskLevel.BEST: "Su situación financiera es estable y saludable.",
}
_STATUSES = {RiskLevel.WORST: "bad", RiskLevel.MIDDLE: "warn", RiskLevel.BEST: "ok"}
_BADGES = {RiskLevel.WORST: "Crítico", RiskLevel.MIDDLE: "Atención", RiskLevel.BEST: "Óptimo"}
