# backend/asesoria/models/question.py
"""
Contratos de preguntas del cuestionario.
Se validan en la frontera con el backend del portal (o con el banco JSON local);
el núcleo solo opera sobre estos tipos ya validados.

El backend entrega dos formas de la misma pregunta:
- REST de cuestionarios: {id, title, type, options, keywords}
- administración:        {id, question, questionType, options, keywords}
Ambas se aceptan vía AliasChoices.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, List, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

QuestionType = Literal["open", "single", "multiple"]
CHOICE_TYPES = ("single", "multiple")


class Keyword(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str = Field(min_length=1)
    description: str = ""

    @field_validator("title")
    @classmethod
    def _strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("El título de la palabra clave no puede estar vacío")
        return v

    @field_validator("description", mode="before")
    @classmethod
    def _none_description(cls, v: Any) -> Any:
        return "" if v is None else v


class QuestionOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    text: str = Field(validation_alias=AliasChoices("text", "answertext"))

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, v: Any) -> Any:
        # el backend mezcla ids numéricos y "q2o1"
        return str(v) if isinstance(v, (int, float)) and not isinstance(v, bool) else v


class Question(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int | str
    text: str = Field(validation_alias=AliasChoices("text", "title", "question"))
    type: QuestionType = Field(default="open", validation_alias=AliasChoices("type", "questionType"))
    options: List[QuestionOption] = Field(default_factory=list)
    keywords: List[Keyword] = Field(default_factory=list)

    @field_validator("options", mode="before")
    @classmethod
    def _none_options(cls, v: Any) -> Any:
        return v or []

    @field_validator("keywords", mode="before")
    @classmethod
    def _drop_blank_keywords(cls, v: Any) -> Any:
        """Palabras clave sin título se descartan en vez de invalidar la pregunta."""
        kept = []
        for item in v or []:
            title = item.get("title") if isinstance(item, Mapping) else getattr(item, "title", None)
            if isinstance(title, str) and title.strip():
                kept.append(item)
        return kept

    @model_validator(mode="after")
    def _check_options(self) -> "Question":
        if self.type in CHOICE_TYPES and not self.options:
            raise ValueError(f"La pregunta {self.id} es de opción y no tiene opciones")
        ids = [opt.id for opt in self.options]
        if len(ids) != len(set(ids)):
            raise ValueError(f"La pregunta {self.id} repite ids de opción")
        return self

    @property
    def key(self) -> str:
        return str(self.id)

    @property
    def is_choice(self) -> bool:
        return self.type in CHOICE_TYPES

    def option(self, option_id: str) -> QuestionOption | None:
        for opt in self.options:
            if opt.id == option_id:
                return opt
        return None


def parse_questions(raw: Any) -> list[Question]:
    """Valida la lista cruda de preguntas recibida de un colaborador."""
    if not isinstance(raw, list):
        raise ValueError("Se esperaba una lista de preguntas")
    return [Question.model_validate(item) for item in raw]
