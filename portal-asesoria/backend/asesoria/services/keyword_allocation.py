"""
Asignación de palabras clave a bloques de texto de una pregunta.

Cada palabra clave se resalta como máximo en UN bloque por pregunta:
se recorre el título y luego las opciones en orden de despliegue, y la
primera coincidencia se queda con la palabra (el título gana a las opciones,
las opciones anteriores a las posteriores).

Función total: palabras clave vacías o mal formadas se ignoran.
"""
from collections.abc import Iterable, Mapping
from typing import Any, Literal, NamedTuple

from pydantic import BaseModel, ConfigDict, Field

from ..models.question import Question
from .keyword_matcher import clean_token, is_word, keyword_terms, text_words, tokenize

TITLE_BLOCK_ID = "title"


def option_block_id(option_id: str) -> str:
    return f"option:{option_id}"


class TextBlock(BaseModel):
    model_config = ConfigDict(frozen=True)

    block_id: str
    role: Literal["title", "option"]
    text: str = ""


class KeywordAllocation(BaseModel):
    """block_id → títulos (en minúsculas) que ese bloque puede resaltar."""
    model_config = ConfigDict(frozen=True)

    blocks: dict[str, tuple[str, ...]] = Field(default_factory=dict)

    def for_block(self, block_id: str) -> frozenset[str]:
        return frozenset(self.blocks.get(block_id, ()))

    def owner(self, keyword_title: str) -> str | None:
        key = (keyword_title or "").strip().lower()
        for block_id, titles in self.blocks.items():
            if key in titles:
                return block_id
        return None

    @property
    def allocated(self) -> set[str]:
        return {t for titles in self.blocks.values() for t in titles}


class Segment(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    keyword: str | None = None
    description: str | None = None

    @property
    def highlighted(self) -> bool:
        return self.keyword is not None


class _Entry(NamedTuple):
    title: str
    description: str
    terms: frozenset[str]


def _field(item: Any, name: str) -> Any:
    """Lee un campo ya sea de un modelo o de un dict."""
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def _glossary(keywords: Iterable[Any] | None, min_length: int | None) -> dict[str, _Entry]:
    """Título normalizado → entrada; conserva el orden y la primera aparición."""
    out: dict[str, _Entry] = {}
    for item in keywords or ():
        title = _field(item, "title")
        if not isinstance(title, str) or not title.strip():
            continue
        key = title.strip().lower()
        if key in out:
            continue
        description = _field(item, "description")
        out[key] = _Entry(
            title=title.strip(),
            description=description if isinstance(description, str) else "",
            terms=keyword_terms(title, min_length),
        )
    return out


def question_blocks(question: Question) -> list[TextBlock]:
    blocks = [TextBlock(block_id=TITLE_BLOCK_ID, role="title", text=question.text or "")]
    for opt in question.options:
        blocks.append(TextBlock(block_id=option_block_id(opt.id), role="option", text=opt.text or ""))
    return blocks


def allocate_keywords(
    blocks: Iterable[TextBlock],
    keywords: Iterable[Any] | None,
    min_length: int | None = None,
) -> KeywordAllocation:
    glossary = _glossary(keywords, min_length)
    used: set[str] = set()
    out: dict[str, tuple[str, ...]] = {}

    for block in blocks:
        words = text_words(block.text)
        found = []
        for key, entry in glossary.items():
            if key in used or not entry.terms:
                continue
            if not entry.terms.isdisjoint(words):
                found.append(key)
                used.add(key)
        out[block.block_id] = out.get(block.block_id, ()) + tuple(found)

    return KeywordAllocation(blocks=out)


def allocate_question(question: Question, min_length: int | None = None) -> KeywordAllocation:
    return allocate_keywords(question_blocks(question), question.keywords, min_length)


def render_plan(
    text: str | None,
    allowed: Iterable[str],
    keywords: Iterable[Any] | None,
    min_length: int | None = None,
) -> list[Segment]:
    """
    Segmentos para el componente de resaltado.
    Solo los tokens de palabras clave permitidas en este bloque llevan descripción;
    el resto del texto queda intacto (''.join(s.text) == text).
    """
    allowed_keys = {a.strip().lower() for a in allowed if isinstance(a, str)}
    by_term: dict[str, _Entry] = {}
    for key, entry in _glossary(keywords, min_length).items():
        if key not in allowed_keys:
            continue
        for term in entry.terms:
            by_term.setdefault(term, entry)

    segments: list[Segment] = []
    plain: list[str] = []
    for tok in tokenize(text):
        entry = by_term.get(clean_token(tok)) if is_word(tok) else None
        if entry is None:
            plain.append(tok)
            continue
        if plain:
            segments.append(Segment(text="".join(plain)))
            plain = []
        segments.append(Segment(text=tok, keyword=entry.title, description=entry.description))
    if plain:
        segments.append(Segment(text="".join(plain)))
    return segments


def render_question(
    question: Question,
    allocation: KeywordAllocation | None = None,
    min_length: int | None = None,
) -> dict[str, list[Segment]]:
    if allocation is None:
        allocation = allocate_question(question, min_length)
    return {
        block.block_id: render_plan(block.text, allocation.for_block(block.block_id), question.keywords, min_length)
        for block in question_blocks(question)
    }
