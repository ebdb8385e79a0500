# backend/asesoria/tests/test_risk_keywords_api.py
import pytest

pytestmark = pytest.mark.asyncio


async def test_risk_from_score(async_client):
    r = await async_client.post("/risk/score", json={"score": 72})
    assert r.status_code == 200
    body = r.json()
    assert body["level"] == "middle"
    assert body["color"] == "amarillo"
    assert body["thresholds"] == {"warn": 60, "ok": 80}

    r = await async_client.post("/risk/score", json={"score": "n/a"})
    assert r.json()["level"] == "worst"

    r = await async_client.post("/risk/score", json={"score": 55, "thresholds": {"warn": 50, "ok": 90}})
    assert r.json()["status"] == "warn"


async def test_risk_thresholds_out_of_order_is_422(async_client):
    r = await async_client.post("/risk/score", json={"score": 70, "thresholds": {"warn": 90, "ok": 10}})
    assert r.status_code == 422


async def test_risk_composite(async_client):
    payload = {
        "indicators": {"liquidez": 90, "endeudamiento": 80},
        "weights": {"liquidez": 1, "endeudamiento": 1},
    }
    r = await async_client.post("/risk/composite", json=payload)
    assert r.status_code == 200
    body = r.json()
    assert body["score"] == 85
    assert body["level"] == "best"
    assert body["badge"] == "Óptimo"


async def test_risk_from_color(async_client):
    r = await async_client.get("/risk/color/VERDE")
    assert r.json()["level"] == "best"
    r = await async_client.get("/risk/color/morado")
    assert r.json()["level"] == "middle"
    assert r.json()["code"] == "morado"


async def test_analysis_card(async_client):
    r = await async_client.post("/risk/analysis-card", json={
        "categoria": "finanzas-corporativas",
        "conteo": 2,
        "colorSemaforo": "verde",
        "analisisAsesor": "Buen manejo de deuda",
    })
    assert r.status_code == 200
    card = r.json()
    assert card["title"] == "Finanzas corporativas #2"
    assert card["status"] == "completed"
    assert card["progress"] == 100
    assert card["risk"]["color"] == "verde"


async def test_keyword_match(async_client):
    r = await async_client.post("/keywords/match", json={"text": "Planificación financiera", "keyword": "financ"})
    assert r.json() == {"match": False}
    r = await async_client.post("/keywords/match", json={"text": "Planificación financiera", "keyword": "Financiera"})
    assert r.json() == {"match": True}


async def test_keyword_allocate(async_client):
    question = {
        "id": 10,
        "question": "¿Tiene deudas o ahorros?",
        "questionType": "single",
        "options": [
            {"id": 1, "text": "Solo deudas"},
            {"id": 2, "text": "Solo ahorros"},
        ],
        "keywords": [
            {"title": "deudas", "description": "Obligaciones"},
            {"title": "ahorros", "description": "Reservas"},
            {"title": "", "description": "vacía"},
        ],
    }
    r = await async_client.post("/keywords/allocate", json=question)
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["question_id"] == 10
    assert body["allocation"] == {"title": ["deudas", "ahorros"], "option:1": [], "option:2": []}
    assert "".join(s["text"] for s in body["blocks"]["title"]) == "¿Tiene deudas o ahorros?"
    assert all(s["keyword"] is None for s in body["blocks"]["option:1"])
