# backend/asesoria/routes/flows.py
"""
Flujo de cuestionario por sesión: cargar → responder → siguiente/anterior → enviar.
Cada endpoint reconstruye el controlador sobre la sesión guardada.
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from ..core.deps import current_question_source, current_scorer, current_store
from ..models.session import SessionStore
from ..services.errors import (
    AnswerRequiredError,
    CategoryNotFoundError,
    FlowError,
    FlowTransitionError,
    InvalidAnswerError,
    QuestionSourceError,
    SubmissionError,
)
from ..services.question_source import QuestionSource
from ..services.questionnaire_flow import QuestionnaireFlow, QuestionView
from ..services.risk_classifier import describe
from ..services.scoring_client import Scorer

router = APIRouter()

# ------------------------- MODELOS -------------------------
class StartFlowIn(BaseModel):
    category: str = Field(min_length=1)
    client_type: str = "N/A"   # "persona" | "empresa"

class AnswerIn(BaseModel):
    # texto libre (open) o ids de opción (single/multiple)
    values: str | List[str] = Field(default_factory=list)

# ------------------------- HELPERS -------------------------
_STATUS_BY_ERROR = (
    (CategoryNotFoundError, status.HTTP_404_NOT_FOUND),
    (FlowTransitionError, status.HTTP_409_CONFLICT),
    (AnswerRequiredError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (InvalidAnswerError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (SubmissionError, status.HTTP_502_BAD_GATEWAY),
    (QuestionSourceError, status.HTTP_502_BAD_GATEWAY),
)

def _http_error(e: FlowError, session_id: str | None = None) -> HTTPException:
    code = next((c for kind, c in _STATUS_BY_ERROR if isinstance(e, kind)), status.HTTP_400_BAD_REQUEST)
    detail = {"message": str(e)}
    if session_id:
        detail["session_id"] = session_id
    return HTTPException(status_code=code, detail=detail)

def _flow(
    session_id: str,
    store: SessionStore,
    source: QuestionSource | None = None,
    scorer: Scorer | None = None,
) -> QuestionnaireFlow:
    session = store.get(session_id)
    if session is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Sesión no encontrada")
    return QuestionnaireFlow(session, source=source, scorer=scorer, store=store)

# ------------------------- ENDPOINTS -------------------------
@router.post("/questionnaire/start", response_model=QuestionView, summary="Iniciar cuestionario de una categoría")
async def start_questionnaire(
    payload: StartFlowIn,
    store: SessionStore = Depends(current_store),
    source: QuestionSource = Depends(current_question_source),
):
    flow = QuestionnaireFlow.start(payload.category, payload.client_type, source=source, store=store)
    try:
        return await flow.load()
    except FlowError as e:
        raise _http_error(e, flow.session.session_id)

@router.post("/{session_id}/load", response_model=QuestionView, summary="Reintentar la carga de preguntas")
async def load_questions(
    session_id: str,
    store: SessionStore = Depends(current_store),
    source: QuestionSource = Depends(current_question_source),
):
    flow = _flow(session_id, store, source=source)
    try:
        return await flow.load()
    except FlowError as e:
        raise _http_error(e, session_id)

@router.get("/{session_id}", response_model=QuestionView, summary="Pregunta actual con palabras clave resaltadas")
async def current_question(session_id: str, store: SessionStore = Depends(current_store)):
    return _flow(session_id, store).view()

@router.put("/{session_id}/answer", response_model=QuestionView, summary="Guardar respuesta de la pregunta actual")
async def set_answer(session_id: str, payload: AnswerIn, store: SessionStore = Depends(current_store)):
    flow = _flow(session_id, store)
    try:
        return flow.set_answer(payload.values)
    except FlowError as e:
        raise _http_error(e)

@router.post("/{session_id}/next", response_model=QuestionView, summary="Siguiente pregunta (o enviar en la última)")
async def next_question(
    session_id: str,
    store: SessionStore = Depends(current_store),
    scorer: Scorer = Depends(current_scorer),
):
    flow = _flow(session_id, store, scorer=scorer)
    try:
        return await flow.next()
    except FlowError as e:
        raise _http_error(e)

@router.post("/{session_id}/previous", response_model=QuestionView, summary="Pregunta anterior")
async def previous_question(session_id: str, store: SessionStore = Depends(current_store)):
    flow = _flow(session_id, store)
    try:
        return flow.previous()
    except FlowError as e:
        raise _http_error(e)

@router.post("/{session_id}/submit", response_model=QuestionView, summary="Enviar (o reenviar) respuestas")
async def submit_answers(
    session_id: str,
    store: SessionStore = Depends(current_store),
    scorer: Scorer = Depends(current_scorer),
):
    flow = _flow(session_id, store, scorer=scorer)
    try:
        return await flow.submit()
    except FlowError as e:
        raise _http_error(e)

@router.post("/{session_id}/resume", response_model=QuestionView, summary="Volver a la última pregunta tras un envío fallido")
async def resume_questionnaire(session_id: str, store: SessionStore = Depends(current_store)):
    flow = _flow(session_id, store)
    try:
        return flow.resume()
    except FlowError as e:
        raise _http_error(e)

@router.get("/{session_id}/review", summary="Último envío y su resultado")
async def review(session_id: str, store: SessionStore = Depends(current_store)):
    session = _flow(session_id, store).session
    if session.last_submission is None or session.last_result is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "No hay respuestas enviadas para revisar")
    result = session.last_result
    return {
        "session_id": session_id,
        "submission": session.last_submission.model_dump(mode="json", by_alias=True),
        "result": {
            "summary_text": result.summary_text,
            "color_code": result.color_code,
            "risk": describe(result.level),
        },
    }

@router.delete("/{session_id}", summary="Descartar sesión")
async def discard(session_id: str, store: SessionStore = Depends(current_store)):
    if not store.delete(session_id):
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Sesión no encontrada")
    return {"deleted": True}
