# backend/asesoria/tests/conftest.py
"""
Fixtures y helpers para pruebas con FastAPI + pytest-asyncio.
Levanta FastAPI con lifespan y reemplaza el servicio de puntuación por uno falso;
cada prueba usa su propio SessionStore.
"""
import sys
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from asgi_lifespan import LifespanManager

# ---- asegurar imports absolutos 'asesoria.*' ----
ROOT_DIR = Path(__file__).resolve().parents[1]   # .../backend/asesoria
sys.path.insert(0, str(ROOT_DIR.parent))         # .../backend
CONTENT_DIR = ROOT_DIR.parents[1] / "content"    # .../portal-asesoria/content

from asesoria.main import app  # noqa: E402
from asesoria.core.deps import current_question_source, current_scorer, current_store  # noqa: E402
from asesoria.models.question import Question  # noqa: E402
from asesoria.models.session import SessionStore  # noqa: E402
from asesoria.services.question_source import ContentQuestionSource  # noqa: E402
from asesoria.services.questionnaire_flow import QuestionnaireFlow  # noqa: E402
from asesoria.tests.fakes import FakeScorer, FakeSource  # noqa: E402


# -------- Datos --------
@pytest.fixture
def sample_questions() -> list[Question]:
    raw = [
        {
            "id": 1,
            "title": "¿Cuáles son sus objetivos financieros personales?",
            "type": "open",
            "keywords": [{"title": "Objetivos Financieros", "description": "Metas a largo plazo"}],
        },
        {
            "id": 2,
            "title": "¿Cuál es su situación financiera actual?",
            "type": "single",
            "options": [
                {"id": "q2o1", "text": "Tengo deudas significativas"},
                {"id": "q2o2", "text": "Estoy equilibrado financieramente"},
                {"id": "q2o3", "text": "Tengo ahorros moderados"},
            ],
            "keywords": [
                {"title": "Situación Financiera", "description": "Estado actual de sus finanzas"},
                {"title": "deudas", "description": "Obligaciones pendientes"},
                {"title": "ahorros", "description": "Dinero reservado"},
            ],
        },
        {
            "id": 3,
            "title": "¿Cuáles son sus metas financieras?",
            "type": "multiple",
            "options": [
                {"id": "q3o1", "text": "Ahorro para emergencias"},
                {"id": "q3o2", "text": "Inversión para jubilación"},
                {"id": "q3o3", "text": "Eliminación de deudas"},
            ],
            "keywords": [
                {"title": "Metas Financieras", "description": "Objetivos financieros"},
                {"title": "jubilación", "description": "Retiro laboral"},
                {"title": "deudas", "description": "Obligaciones pendientes"},
            ],
        },
    ]
    return [Question.model_validate(q) for q in raw]


@pytest.fixture
def make_flow(sample_questions):
    def _make(questions=None, scorer=None, source=None, store=None):
        source = source or FakeSource(sample_questions if questions is None else questions)
        return QuestionnaireFlow.start(
            "estrategia",
            source=source,
            scorer=scorer or FakeScorer(),
            store=store if store is not None else SessionStore(),
        )
    return _make


# -------- App --------
@pytest.fixture
def scorer() -> FakeScorer:
    return FakeScorer(color="rojo", summary="Su situación requiere atención inmediata.")


@pytest.fixture
def store() -> SessionStore:
    return SessionStore(max_sessions=50)


@pytest_asyncio.fixture
async def async_client(scorer, store):
    source = ContentQuestionSource(str(CONTENT_DIR), "es-CO", "2025-10-01")
    app.dependency_overrides[current_scorer] = lambda: scorer
    app.dependency_overrides[current_store] = lambda: store
    app.dependency_overrides[current_question_source] = lambda: source
    try:
        async with LifespanManager(app):
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://testserver") as client:
                yield client
    finally:
        app.dependency_overrides.clear()

