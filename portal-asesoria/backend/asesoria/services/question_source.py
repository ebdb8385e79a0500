# backend/asesoria/services/question_source.py
"""
Fuentes de preguntas por categoría.
- ContentQuestionSource: banco JSON versionado en CONTENT_DIR/<locale>/preguntas.v<version>.json
  (modo offline, igual que /content del portal).
- HttpQuestionSource: API del portal, GET /preguntas/categoria/{categoria}.
Ambas validan las preguntas en la frontera y devuelven list[Question].
"""
import json
import logging
import re
from pathlib import Path
from typing import Any, Protocol
from urllib.parse import quote

import httpx
from anyio import to_thread
from unidecode import unidecode

from ..models.question import Question, parse_questions
from .errors import CategoryNotFoundError, QuestionSourceError

log = logging.getLogger("asesoria.questions")


def category_slug(name: str) -> str:
    """'Finanzas Corporativas' → 'finanzas-corporativas'; 'Tributaría' → 'tributaria'."""
    text = unidecode(name or "").lower()
    return re.sub(r"[^a-z0-9]+", "-", text).strip("-")


class QuestionSource(Protocol):
    async def fetch(self, category: str) -> list[Question]: ...

    async def categories(self) -> list[dict]: ...


class ContentQuestionSource:
    def __init__(self, content_dir: str, locale: str, version: str) -> None:
        self.path = Path(content_dir) / locale / f"preguntas.v{version}.json"
        self._cache: dict[str, dict] | None = None

    def _read(self) -> dict[str, dict]:
        if not self.path.exists():
            raise QuestionSourceError(f"Banco de preguntas no encontrado: {self.path.name}")
        with self.path.open(encoding="utf-8") as fh:
            data = json.load(fh)
        by_slug: dict[str, dict] = {}
        for cat in data.get("categorias", []):
            slug = category_slug(cat.get("slug") or cat.get("nombre", ""))
            if slug:
                by_slug[slug] = cat
        return by_slug

    async def _load(self) -> dict[str, dict]:
        if self._cache is None:
            try:
                self._cache = await to_thread.run_sync(self._read)
            except ValueError as e:
                raise QuestionSourceError("Banco de preguntas inválido") from e
            log.info("Banco de preguntas cargado: %s (%d categorías)", self.path.name, len(self._cache))
        return self._cache

    async def categories(self) -> list[dict]:
        data = await self._load()
        return [
            {"slug": slug, "nombre": cat.get("nombre", slug), "total": len(cat.get("preguntas", []))}
            for slug, cat in data.items()
        ]

    async def fetch(self, category: str) -> list[Question]:
        data = await self._load()
        cat = data.get(category_slug(category))
        if cat is None:
            raise CategoryNotFoundError("Categoría no encontrada")
        try:
            return parse_questions(cat.get("preguntas", []))
        except ValueError as e:
            log.warning("Preguntas inválidas en categoría %s: %s", category, e)
            raise QuestionSourceError("Error al cargar las preguntas") from e


class HttpQuestionSource:
    def __init__(self, base_url: str, timeout: float = 30.0, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def _get(self, path: str) -> Any:
        async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self.transport) as client:
            res = await client.get(path, headers={"accept": "application/json"})
            res.raise_for_status()
            return res.json()

    async def categories(self) -> list[dict]:
        # el portal no publica un listado de categorías; se navega por slug conocido
        return []

    async def fetch(self, category: str) -> list[Question]:
        try:
            raw = await self._get(f"/preguntas/categoria/{quote(category, safe='')}")
            return parse_questions(raw)
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise CategoryNotFoundError("Categoría no encontrada") from e
            log.warning("Fallo al obtener preguntas de %s: %s", category, e)
            raise QuestionSourceError("Error al cargar las preguntas") from e
        except httpx.HTTPError as e:
            log.warning("Fallo al obtener preguntas de %s: %s", category, e)
            raise QuestionSourceError("Error al cargar las preguntas") from e
        except ValueError as e:
            log.warning("Respuesta inválida de preguntas para %s: %s", category, e)
            raise QuestionSourceError("Error al cargar las preguntas") from e
