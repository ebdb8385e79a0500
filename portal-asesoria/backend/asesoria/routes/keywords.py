from typing import List

from fastapi import APIRouter
from pydantic import BaseModel, Field

from ..models.question import Question
from ..services.keyword_allocation import Segment, allocate_question, render_question
from ..services.keyword_matcher import match

router = APIRouter()

class MatchIn(BaseModel):
    text: str = ""
    keyword: str = ""

class AllocationOut(BaseModel):
    question_id: int | str
    allocation: dict[str, List[str]] = Field(default_factory=dict)
    blocks: dict[str, List[Segment]] = Field(default_factory=dict)

@router.post("/match", summary="¿La palabra clave aparece como palabra completa en el texto?")
async def keyword_match(payload: MatchIn):
    return {"match": match(payload.text, payload.keyword)}

@router.post("/allocate", response_model=AllocationOut, summary="Asignar y resaltar palabras clave de una pregunta")
async def keyword_allocate(question: Question):
    allocation = allocate_question(question)
    return AllocationOut(
        question_id=question.id,
        allocation={k: list(v) for k, v in allocation.blocks.items()},
        blocks=render_question(question, allocation),
    )
