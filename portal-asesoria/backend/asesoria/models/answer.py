# backend/asesoria/models/answer.py
"""
Respuestas, payload de envío y resultado del servicio de puntuación.
En el cable se usa camelCase (questionId, questionTitle...) como el backend del portal.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .question import QuestionType


class _Wire(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Answer(_Wire):
    question_id: int | str
    question_title: str = ""
    type: QuestionType = "open"
    # texto libre (open) o ids de opción (single/multiple)
    values: List[str] = Field(default_factory=list)
    # textos de las opciones elegidas, para el analista
    labels: List[str] = Field(default_factory=list)


class SubmissionMetadata(_Wire):
    category: str
    client_type: str = "N/A"
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class SubmissionPayload(_Wire):
    metadata: SubmissionMetadata
    answers: List[Answer] = Field(default_factory=list)


class ScoringResult(BaseModel):
    """
    Respuesta del servicio de puntuación.
    Acepta {summaryText, colorCode} o la forma del portal {resumenUsuario, colorSemaforo}.
    """
    model_config = ConfigDict(populate_by_name=True)

    summary_text: str = Field(
        default="",
        validation_alias=AliasChoices("summaryText", "summary_text", "resumenUsuario"),
        serialization_alias="summaryText",
    )
    color_code: str = Field(
        validation_alias=AliasChoices("colorCode", "color_code", "colorSemaforo"),
        serialization_alias="colorCode",
    )

    @field_validator("summary_text", mode="before")
    @classmethod
    def _none_summary(cls, v):
        return "" if v is None else v
