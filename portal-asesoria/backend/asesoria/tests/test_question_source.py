# backend/asesoria/tests/test_question_source.py
import json
from pathlib import Path

import httpx
import pytest

from asesoria.models.answer import SubmissionMetadata, SubmissionPayload, Answer
from asesoria.services.errors import CategoryNotFoundError, QuestionSourceError, ScoringError
from asesoria.services.question_source import ContentQuestionSource, HttpQuestionSource, category_slug
from asesoria.services.scoring_client import HttpScoringClient

pytestmark = pytest.mark.asyncio

CONTENT_DIR = Path(__file__).resolve().parents[3] / "content"


def _payload() -> SubmissionPayload:
    return SubmissionPayload(
        metadata=SubmissionMetadata(category="finanzas", client_type="persona"),
        answers=[Answer(question_id=1, question_title="¿Deudas?", type="single", values=["q1o1"], labels=["Sin deudas"])],
    )


async def test_category_slug():
    assert category_slug("Finanzas Corporativas") == "finanzas-corporativas"
    assert category_slug("  Tributaría ") == "tributaria"
    assert category_slug("") == ""


# ---------------- API de preguntas ----------------
async def test_list_categories(async_client):
    r = await async_client.get("/questions/categories")
    assert r.status_code == 200
    slugs = {c["slug"]: c["total"] for c in r.json()}
    assert slugs == {"estrategia": 3, "finanzas": 2, "presupuesto": 3, "finanzas-corporativas": 1}


async def test_list_questions_with_allocation(async_client):
    r = await async_client.get("/questions/finanzas")
    assert r.status_code == 200
    questions = r.json()
    assert [q["id"] for q in questions] == [1, 2]
    first = questions[0]
    assert first["allocation"]["title"] == ["nivel de endeudamiento"]
    # "ingresos" aparece en varias opciones pero solo la primera lo resalta
    assert first["allocation"]["option:q1o2"] == ["ingresos"]
    assert first["allocation"]["option:q1o3"] == []


async def test_unknown_category_is_404(async_client):
    r = await async_client.get("/questions/tributaria")
    assert r.status_code == 404


# ---------------- banco JSON ----------------
async def test_content_source_missing_file(tmp_path):
    source = ContentQuestionSource(str(tmp_path), "es-CO", "1999-01-01")
    with pytest.raises(QuestionSourceError):
        await source.fetch("estrategia")


async def test_content_source_invalid_questions(tmp_path):
    folder = tmp_path / "es-CO"
    folder.mkdir()
    bank = {"categorias": [{"slug": "rota", "nombre": "Rota", "preguntas": [{"id": 1, "type": "single"}]}]}
    (folder / "preguntas.v1.json").write_text(json.dumps(bank), encoding="utf-8")
    source = ContentQuestionSource(str(tmp_path), "es-CO", "1")
    with pytest.raises(QuestionSourceError):
        await source.fetch("rota")
    with pytest.raises(CategoryNotFoundError):
        await source.fetch("otra")


async def test_content_source_reads_repo_bank():
    source = ContentQuestionSource(str(CONTENT_DIR), "es-CO", "2025-10-01")
    questions = await source.fetch("Presupuesto")
    assert [q.type for q in questions] == ["single", "multiple", "open"]


# ---------------- API del portal ----------------
async def test_http_source_fetches_and_validates():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/preguntas/categoria/finanzas"
        return httpx.Response(200, json=[
            {"id": 5, "question": "¿Tiene deudas?", "questionType": "single",
             "options": [{"id": 9, "answertext": "Sí"}], "keywords": None},
        ])

    source = HttpQuestionSource("http://portal/api/", transport=httpx.MockTransport(handler))
    questions = await source.fetch("finanzas")
    assert questions[0].text == "¿Tiene deudas?"
    assert questions[0].options[0].id == "9"
    assert questions[0].keywords == []
    assert await source.categories() == []


async def test_http_source_encodes_category_in_path():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url)
        return httpx.Response(200, json=[])

    source = HttpQuestionSource("http://portal/api", transport=httpx.MockTransport(handler))
    await source.fetch("finanzas?admin=1#x/y")
    url = seen[0]
    assert url.query == b""
    assert url.fragment == ""
    assert url.raw_path == b"/api/preguntas/categoria/finanzas%3Fadmin%3D1%23x%2Fy"


@pytest.mark.parametrize(
    "response,error",
    [
        (httpx.Response(404), CategoryNotFoundError),
        (httpx.Response(500), QuestionSourceError),
        (httpx.Response(200, text="<html>"), QuestionSourceError),
        (httpx.Response(200, json={"no": "lista"}), QuestionSourceError),
    ],
)
async def test_http_source_errors(response, error):
    source = HttpQuestionSource("http://portal/api", transport=httpx.MockTransport(lambda request: response))
    with pytest.raises(error):
        await source.fetch("finanzas")


# ---------------- servicio de puntuación ----------------
async def test_scoring_client_posts_camel_case():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"resumenUsuario": "Todo bien", "colorSemaforo": "verde"})

    client = HttpScoringClient("http://scoring/api", transport=httpx.MockTransport(handler))
    result = await client.score(_payload())
    assert result.color_code == "verde"
    assert result.summary_text == "Todo bien"
    assert seen["path"] == "/api/respuestas"
    assert seen["body"]["metadata"]["clientType"] == "persona"
    assert seen["body"]["answers"][0]["questionTitle"] == "¿Deudas?"


@pytest.mark.parametrize(
    "handler",
    [
        lambda request: httpx.Response(503),
        lambda request: httpx.Response(200, text="no json"),
        lambda request: httpx.Response(200, json={"summaryText": "sin color"}),
    ],
)
async def test_scoring_client_errors(handler):
    client = HttpScoringClient("http://scoring/api", transport=httpx.MockTransport(handler))
    with pytest.raises(ScoringError):
        await client.score(_payload())


async def test_scoring_client_connection_error():
    def handler(request):
        raise httpx.ConnectError("sin red", request=request)

    client = HttpScoringClient("http://scoring/api", transport=httpx.MockTransport(handler))
    with pytest.raises(ScoringError):
        await client.score(_payload())
