# backend/asesoria/models/session.py
"""
Estado de sesión de un cuestionario y su repositorio en memoria.
Reemplaza el cache en localStorage del portal: el último envío y su resultado
viven en la sesión, que el controlador guarda tras cada transición.
"""
from __future__ import annotations

from collections import OrderedDict
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from .risk import RiskLevel
from .answer import SubmissionPayload
from .question import Question


class FlowState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    SUBMITTING = "submitting"
    COMPLETE = "complete"
    FAILED = "failed"


class FlowResult(BaseModel):
    summary_text: str = ""
    color_code: str
    level: RiskLevel


class FlowSession(BaseModel):
    session_id: str = Field(default_factory=lambda: uuid4().hex)
    category: str
    client_type: str = "N/A"
    state: FlowState = FlowState.LOADING
    index: int = 0
    questions: List[Question] = Field(default_factory=list)
    # question key → valores (texto libre o ids de opción)
    answers: Dict[str, List[str]] = Field(default_factory=dict)
    error: Optional[str] = None
    last_submission: Optional[SubmissionPayload] = None
    last_result: Optional[FlowResult] = None
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class SessionStore:
    """
    Sesiones activas en memoria, acotadas: al pasar de max_sessions se
    descarta la menos usada.
    """

    def __init__(self, max_sessions: int = 1000) -> None:
        self.max_sessions = max(1, max_sessions)
        self._items: "OrderedDict[str, FlowSession]" = OrderedDict()

    def get(self, session_id: str) -> FlowSession | None:
        session = self._items.get(session_id)
        if session is not None:
            self._items.move_to_end(session_id)
        return session

    def save(self, session: FlowSession) -> FlowSession:
        session.updated_at = datetime.now(timezone.utc)
        self._items[session.session_id] = session
        self._items.move_to_end(session.session_id)
        while len(self._items) > self.max_sessions:
            self._items.popitem(last=False)
        return session

    def delete(self, session_id: str) -> bool:
        return self._items.pop(session_id, None) is not None

    def __len__(self) -> int:
        return len(self._items)
