"""
Coincidencia de palabras clave por palabra completa.
- Tokeniza conservando espacios y puntuación (. , ! ? ; : ( ) ") para reconstruir el texto.
- Compara sin distinguir mayúsculas, token contra título; nunca por subcadena
  ("financ" no coincide dentro de "financiera").
- Títulos compuestos ("Situación Financiera"): basta con que coincida alguna palabra
  suficientemente informativa (largo >= KEYWORD_MIN_WORD_LENGTH).
"""
import re

from ..core.config import settings

PUNCTUATION = '.,!?;:()"'
_SPLIT_RE = re.compile(r'(\s+|[.,!?;:()"])')
_STRIP_RE = re.compile(r'[.,!?;:()"]')


def tokenize(text: str | None) -> list[str]:
    """"".join(tokenize(t)) == t para cualquier texto."""
    if not text:
        return []
    return [tok for tok in _SPLIT_RE.split(text) if tok]


def clean_token(token: str) -> str:
    return _STRIP_RE.sub("", token.lower())


def is_word(token: str) -> bool:
    return bool(token) and not token.isspace() and bool(clean_token(token))


def keyword_terms(title: str | None, min_length: int | None = None) -> frozenset[str]:
    """Términos que activan la palabra clave, ya normalizados."""
    if not isinstance(title, str):
        return frozenset()
    parts = [clean_token(p) for p in title.split()]
    parts = [p for p in parts if p]
    if not parts:
        return frozenset()
    if len(parts) == 1:
        return frozenset(parts)
    min_len = settings.KEYWORD_MIN_WORD_LENGTH if min_length is None else min_length
    return frozenset(p for p in parts if len(p) >= min_len)


def text_words(text: str | None) -> set[str]:
    return {clean_token(tok) for tok in tokenize(text) if is_word(tok)}


def match(text: str | None, keyword_title: str | None, min_length: int | None = None) -> bool:
    terms = keyword_terms(keyword_title, min_length)
    if not terms or not text:
        return False
    return not terms.isdisjoint(text_words(text))
