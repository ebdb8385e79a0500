"""
Banco de preguntas por categoría, con la asignación de palabras clave de cada pregunta
(vista previa para asesores y administradores).
"""
from fastapi import APIRouter, Depends, HTTPException, status

from ..core.deps import current_question_source
from ..services.errors import CategoryNotFoundError, QuestionSourceError
from ..services.keyword_allocation import allocate_question
from ..services.question_source import QuestionSource

router = APIRouter()

@router.get("/categories", summary="Categorías disponibles")
async def list_categories(source: QuestionSource = Depends(current_question_source)):
    try:
        return await source.categories()
    except QuestionSourceError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

@router.get("/{category}", summary="Preguntas de una categoría con sus palabras clave asignadas")
async def list_questions(category: str, source: QuestionSource = Depends(current_question_source)):
    try:
        questions = await source.fetch(category)
    except CategoryNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except QuestionSourceError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    out = []
    for q in questions:
        allocation = allocate_question(q)
        out.append({
            **q.model_dump(mode="json"),
            "allocation": {k: list(v) for k, v in allocation.blocks.items()},
        })
    return out
