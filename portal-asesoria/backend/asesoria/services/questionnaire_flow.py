# backend/asesoria/services/questionnaire_flow.py
"""
Máquina de estados de un cuestionario:

    LOADING → READY(i) → SUBMITTING → COMPLETE | FAILED

- READY(i) → READY(i+1) solo con respuesta presente (y no vacía en preguntas de opción).
- READY(i) → READY(i-1) siempre que i > 0.
- READY(último) + siguiente → SUBMITTING; el servicio de puntuación decide COMPLETE o FAILED.
- FAILED conserva las respuestas: se reintenta con submit() o se vuelve con resume().

La asignación de palabras clave se recalcula cada vez que cambia el índice.
Todo el estado vive en FlowSession, que se guarda en el SessionStore tras cada transición.
"""
import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..models.answer import Answer, SubmissionMetadata, SubmissionPayload
from ..models.question import Question
from ..models.session import FlowResult, FlowSession, FlowState, SessionStore
from .errors import (
    AnswerRequiredError,
    FlowTransitionError,
    InvalidAnswerError,
    QuestionSourceError,
    SubmissionError,
    SubmissionInProgressError,
)
from .keyword_allocation import KeywordAllocation, Segment, allocate_question, render_question
from .question_source import QuestionSource
from .risk_classifier import classify_color_code
from .scoring_client import Scorer

log = logging.getLogger("asesoria.flows")

SUBMIT_ERROR_MESSAGE = "Error al procesar las respuestas. Por favor, intente nuevamente."


class QuestionView(BaseModel):
    session_id: str
    category: str
    state: FlowState
    index: int
    total: int
    progress: float
    is_last: bool
    question: Optional[Question] = None
    allocation: Dict[str, List[str]] = Field(default_factory=dict)
    blocks: Dict[str, List[Segment]] = Field(default_factory=dict)
    answer: List[str] = Field(default_factory=list)
    can_advance: bool = False
    error: Optional[str] = None
    result: Optional[FlowResult] = None


class QuestionnaireFlow:
    def __init__(
        self,
        session: FlowSession,
        source: QuestionSource | None = None,
        scorer: Scorer | None = None,
        store: SessionStore | None = None,
        min_keyword_length: int | None = None,
    ) -> None:
        self.session = session
        self.source = source
        self.scorer = scorer
        self.store = store
        self.min_keyword_length = min_keyword_length
        self._allocation: KeywordAllocation | None = None
        self._allocated_index: int | None = None

    # ---------------- construcción ----------------
    @classmethod
    def start(cls, category: str, client_type: str = "N/A", **kwargs: Any) -> "QuestionnaireFlow":
        flow = cls(FlowSession(category=category, client_type=client_type), **kwargs)
        flow._persist()
        return flow

    @classmethod
    def restore(cls, session: FlowSession, **kwargs: Any) -> "QuestionnaireFlow":
        """
        Reconstruye el flujo desde la última transición completada.
        Un envío abandonado (SUBMITTING) vuelve a READY en la última pregunta.
        """
        if not session.questions:
            session.state = FlowState.LOADING
            session.index = 0
        else:
            session.index = min(max(session.index, 0), len(session.questions) - 1)
            if session.state == FlowState.SUBMITTING:
                session.state = FlowState.READY
                session.index = len(session.questions) - 1
        return cls(session, **kwargs)

    def snapshot(self) -> FlowSession:
        """Copia independiente del estado; se restaura con restore()."""
        return self.session.model_copy(deep=True)

    # ---------------- lectura ----------------
    @property
    def state(self) -> FlowState:
        return self.session.state

    @property
    def index(self) -> int:
        return self.session.index

    @property
    def questions(self) -> list[Question]:
        return self.session.questions

    @property
    def current_question(self) -> Question | None:
        if not self.session.questions:
            return None
        return self.session.questions[self.session.index]

    @property
    def is_last(self) -> bool:
        return bool(self.session.questions) and self.session.index == len(self.session.questions) - 1

    @property
    def allocation(self) -> KeywordAllocation | None:
        q = self.current_question
        if q is None:
            return None
        if self._allocation is None or self._allocated_index != self.session.index:
            self._allocation = allocate_question(q, self.min_keyword_length)
            self._allocated_index = self.session.index
        return self._allocation

    def answer_for(self, question: Question) -> list[str]:
        return list(self.session.answers.get(question.key, []))

    def is_answered(self, question: Question) -> bool:
        values = self.session.answers.get(question.key) or []
        if question.type == "open":
            return bool(values) and bool(values[0].strip())
        if question.type == "single":
            return len(values) == 1
        return len(values) > 0

    # ---------------- transiciones ----------------
    async def load(self) -> QuestionView:
        self._require(FlowState.LOADING)
        if self.source is None:
            raise QuestionSourceError("No hay fuente de preguntas configurada")
        try:
            questions = await self.source.fetch(self.session.category)
        except QuestionSourceError as e:
            self._fail_load(str(e))
            raise
        except Exception as e:
            log.exception("Fuente de preguntas falló para %s", self.session.category)
            self._fail_load("Error al cargar las preguntas")
            raise QuestionSourceError("Error al cargar las preguntas") from e
        if not questions:
            self._fail_load("La categoría no tiene preguntas")
            raise QuestionSourceError("La categoría no tiene preguntas")

        self.session.questions = list(questions)
        self.session.error = None
        log.info("Cuestionario %s cargado (%d preguntas)", self.session.category, len(questions))
        self._enter_ready(0)
        return self.view()

    def set_answer(self, values: str | list[str] | None) -> QuestionView:
        self._require(FlowState.READY)
        q = self.current_question
        if values is None:
            values = []
        elif isinstance(values, str):
            values = [values]
        if not all(isinstance(v, (str, int)) and not isinstance(v, bool) for v in values):
            raise InvalidAnswerError("Formato de respuesta inválido")
        values = [str(v) for v in values]

        if q.type == "open":
            if len(values) > 1:
                raise InvalidAnswerError("Las preguntas abiertas admiten un único texto")
            stored = values
        else:
            ids = list(dict.fromkeys(values))
            unknown = [v for v in ids if q.option(v) is None]
            if unknown:
                raise InvalidAnswerError(f"Opción inválida: {', '.join(unknown)}")
            if q.type == "single" and len(ids) > 1:
                raise InvalidAnswerError("Seleccione una sola opción")
            # orden de despliegue, no de selección
            order = {opt.id: pos for pos, opt in enumerate(q.options)}
            stored = sorted(ids, key=order.__getitem__)

        self.session.answers[q.key] = stored
        self._persist()
        return self.view()

    async def next(self) -> QuestionView:
        self._require(FlowState.READY)
        if not self.is_answered(self.current_question):
            raise AnswerRequiredError("Debe responder la pregunta antes de continuar")
        if not self.is_last:
            self._enter_ready(self.session.index + 1)
            return self.view()
        return await self.submit()

    def previous(self) -> QuestionView:
        self._require(FlowState.READY)
        if self.session.index == 0:
            raise FlowTransitionError("Ya se encuentra en la primera pregunta")
        self._enter_ready(self.session.index - 1)
        return self.view()

    def resume(self) -> QuestionView:
        self._require(FlowState.FAILED)
        self._enter_ready(len(self.session.questions) - 1)
        return self.view()

    async def submit(self) -> QuestionView:
        state = self.session.state
        if state == FlowState.SUBMITTING:
            raise SubmissionInProgressError("Ya se están procesando las respuestas")
        if state == FlowState.READY and not self.is_last:
            raise FlowTransitionError("Debe llegar a la última pregunta para enviar")
        if state not in (FlowState.READY, FlowState.FAILED):
            raise FlowTransitionError(f"No se puede enviar en estado {state.value}")
        for pos, q in enumerate(self.session.questions):
            if not self.is_answered(q):
                raise AnswerRequiredError(f"Falta responder la pregunta {pos + 1}")
        if self.scorer is None:
            raise SubmissionError("No hay servicio de puntuación configurado")

        payload = self.build_payload()
        self.session.state = FlowState.SUBMITTING
        self.session.error = None
        self._persist()

        try:
            scored = await self.scorer.score(payload)
        except asyncio.CancelledError:
            # envío abandonado: se vuelve a la última transición completa
            log.info("Envío cancelado para sesión %s", self.session.session_id)
            self._enter_ready(len(self.session.questions) - 1)
            raise
        except Exception as e:
            log.warning("Envío fallido para sesión %s: %s", self.session.session_id, e)
            self.session.state = FlowState.FAILED
            self.session.error = SUBMIT_ERROR_MESSAGE
            self._persist()
            raise SubmissionError(SUBMIT_ERROR_MESSAGE) from e

        level = classify_color_code(scored.color_code)
        self.session.last_submission = payload
        self.session.last_result = FlowResult(
            summary_text=scored.summary_text,
            color_code=scored.color_code,
            level=level,
        )
        self.session.state = FlowState.COMPLETE
        self._persist()
        log.info("Sesión %s completa: riesgo %s", self.session.session_id, level.label)
        return self.view()

    # ---------------- salida ----------------
    def build_payload(self) -> SubmissionPayload:
        answers = []
        for q in self.session.questions:
            values = self.answer_for(q)
            if q.type == "open":
                labels = list(values)
            else:
                labels = [q.option(v).text for v in values if q.option(v) is not None]
            answers.append(Answer(
                question_id=q.id,
                question_title=q.text,
                type=q.type,
                values=values,
                labels=labels,
            ))
        return SubmissionPayload(
            metadata=SubmissionMetadata(
                category=self.session.category,
                client_type=self.session.client_type,
                timestamp=datetime.now(timezone.utc),
            ),
            answers=answers,
        )

    def view(self) -> QuestionView:
        q = self.current_question
        total = len(self.session.questions)
        allocation = self.allocation
        return QuestionView(
            session_id=self.session.session_id,
            category=self.session.category,
            state=self.session.state,
            index=self.session.index,
            total=total,
            progress=round((self.session.index + 1) / total * 100, 2) if total else 0.0,
            is_last=self.is_last,
            question=q,
            allocation={k: list(v) for k, v in allocation.blocks.items()} if allocation else {},
            blocks=render_question(q, allocation, self.min_keyword_length) if q else {},
            answer=self.answer_for(q) if q else [],
            can_advance=self.session.state == FlowState.READY and q is not None and self.is_answered(q),
            error=self.session.error,
            result=self.session.last_result,
        )

    # ---------------- internos ----------------
    def _require(self, state: FlowState) -> None:
        if self.session.state != state:
            if self.session.state == FlowState.SUBMITTING:
                raise SubmissionInProgressError("Ya se están procesando las respuestas")
            raise FlowTransitionError(
                f"Operación no permitida en estado {self.session.state.value}"
            )

    def _enter_ready(self, index: int) -> None:
        self.session.state = FlowState.READY
        self.session.index = index
        self._allocation = allocate_question(self.session.questions[index], self.min_keyword_length)
        self._allocated_index = index
        self._persist()

    def _fail_load(self, message: str) -> None:
        self.session.error = message
        self._persist()

    def _persist(self) -> None:
        if self.store is not None:
            self.store.save(self.session)
