"""
Cliente del servicio externo de puntuación.
Envía el payload del cuestionario a POST /respuestas y recibe
{resumenUsuario, colorSemaforo} (o {summaryText, colorCode}).
"""
import logging
from typing import Protocol

import httpx

from ..models.answer import ScoringResult, SubmissionPayload
from .errors import ScoringError

log = logging.getLogger("asesoria.scoring")


class Scorer(Protocol):
    async def score(self, payload: SubmissionPayload) -> ScoringResult: ...


class HttpScoringClient:
    def __init__(self, base_url: str, timeout: float = 30.0, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def score(self, payload: SubmissionPayload) -> ScoringResult:
        body = payload.model_dump(mode="json", by_alias=True)
        try:
            async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self.transport) as client:
                res = await client.post("/respuestas", json=body)
                res.raise_for_status()
                data = res.json()
        except httpx.HTTPError as e:
            log.warning("Servicio de puntuación no disponible: %s", e)
            raise ScoringError("Error al enviar las respuestas del cuestionario") from e
        except ValueError as e:
            raise ScoringError("Respuesta del servicio de puntuación no es JSON") from e

        try:
            result = ScoringResult.model_validate(data)
        except ValueError as e:
            raise ScoringError("Respuesta del servicio de puntuación inválida") from e
        log.info("Puntuación recibida para %s: color=%s", payload.metadata.category, result.color_code)
        return result
