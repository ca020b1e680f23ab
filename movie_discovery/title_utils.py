"""
movie_discovery/title_utils.py

Utilidades puras para títulos de vídeo:
- extract_title: pipeline ordenado de etapas con nombre (TITLE_STAGES)
  que convierte "Dil Chahta Hai (2001) [HD] Full Movie" en "Dil Chahta Hai".
- normalize_cache_key: clave estable para la caché ("Shah Rukh Khan!" == "shah rukh khan").
- shorten_title: primeros N tokens (reintento de enriquecimiento).
- looks_like_trailer: filtro de tráilers/teasers.

Es heurístico: el enriquecedor tolera candidatos erróneos reintentando con
un título acortado. Sin logging y sin I/O.
"""

from __future__ import annotations

import re
import unicodedata
from typing import Callable, Final, Iterable

# ============================================================================
# Regex/constantes
# ============================================================================

_BRACKETED_RE: Final[re.Pattern[str]] = re.compile(r"\s*(?:\[[^\]]*\]|\([^)]*\)|\{[^}]*\})")

_YEAR_TOKEN_RE: Final[re.Pattern[str]] = re.compile(r"\b(?:19|20)\d{2}\b")

_QUALITY_TAG_RE: Final[re.Pattern[str]] = re.compile(
    r"""
    \b(?:
        480p|576p|720p|1080p|1440p|2160p|
        4k|8k|f?hd|uhd|hdr|
        brrip|bdrip|webrip|web-?dl|hdrip|hdtv|blu-?ray|dvdrip|dvdscr|
        x264|x265|hevc
    )\b
    """,
    re.IGNORECASE | re.VERBOSE,
)

_PROMO_KEYWORD_RE: Final[re.Pattern[str]] = re.compile(
    r"\b(?:official\s+trailer|trailer|teaser|full\s+length\s+movie|full\s+movie)\b",
    re.IGNORECASE,
)

# Dos o más palabras Title-Case consecutivas ("Dil Chahta Hai").
_TITLE_CASE_RUN_RE: Final[re.Pattern[str]] = re.compile(r"\b([A-Z][a-z']+(?:\s+[A-Z][a-z']+)+)\b")

_DELIMITER_RE: Final[re.Pattern[str]] = re.compile(r"[-–—|:•]")

_WS_RE: Final[re.Pattern[str]] = re.compile(r"\s+")

DEFAULT_EXCLUDED_WORDS: Final[tuple[str, ...]] = ("trailer", "teaser")

# ============================================================================
# Helpers puros
# ============================================================================


def strip_accents(text: str) -> str:
    """Elimina diacríticos (NFKD)."""
    normalized = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in normalized if not unicodedata.combining(ch))


def collapse_whitespace(text: str) -> str:
    return _WS_RE.sub(" ", text or "").strip()


def normalize_cache_key(text: str) -> str:
    """Sin acentos, case-folded y solo alfanuméricos (también no latinos)."""
    folded = strip_accents(text or "").casefold()
    return "".join(ch for ch in folded if ch.isalnum())


def shorten_title(title: str, max_tokens: int = 3) -> str:
    tokens = (title or "").split()
    return " ".join(tokens[: max(1, int(max_tokens))])


def looks_like_trailer(title: str, words: Iterable[str] = DEFAULT_EXCLUDED_WORDS) -> bool:
    lowered = (title or "").lower()
    return any(w and w in lowered for w in words)


# ============================================================================
# Etapas del extractor (cada una str -> str, testeables por separado)
# ============================================================================


def strip_bracketed(text: str) -> str:
    return _BRACKETED_RE.sub(" ", text)


def strip_years(text: str) -> str:
    return _YEAR_TOKEN_RE.sub(" ", text)


def strip_quality_tags(text: str) -> str:
    return _QUALITY_TAG_RE.sub(" ", text)


def strip_promo_keywords(text: str) -> str:
    return _PROMO_KEYWORD_RE.sub(" ", text)


def _longest(items: Iterable[str]) -> str:
    best = ""
    for it in items:
        if len(it) > len(best):
            best = it
    return best


def pick_title_candidate(text: str) -> str:
    """
    Prefiere la racha Title-Case más larga (en empate gana la primera).
    Si no hay ninguna: parte por delimitadores y se queda con el segmento más largo.
    """
    runs = [collapse_whitespace(m.group(1)) for m in _TITLE_CASE_RUN_RE.finditer(text)]
    if runs:
        return _longest(runs)

    parts = [collapse_whitespace(p) for p in _DELIMITER_RE.split(text)]
    best = _longest(p for p in parts if p)
    return best or text


TitleStage = tuple[str, Callable[[str], str]]

_PRE_PICK_STAGES: Final[tuple[TitleStage, ...]] = (
    ("strip_bracketed", strip_bracketed),
    ("strip_years", strip_years),
    ("strip_quality_tags", strip_quality_tags),
    ("strip_promo_keywords", strip_promo_keywords),
)

TITLE_STAGES: Final[tuple[TitleStage, ...]] = _PRE_PICK_STAGES + (
    ("pick_title_candidate", pick_title_candidate),
    ("collapse_whitespace", collapse_whitespace),
)


def run_stages(text: str, stages: Iterable[TitleStage]) -> str:
    out = text
    for _name, fn in stages:
        out = fn(out)
    return out


def extract_title(raw_title: str) -> str:
    """
    Título candidato a partir de un título de vídeo "ruidoso".

    Nunca devuelve "" para una entrada no vacía: si las etapas lo vacían todo,
    cae al texto previo a pick_title_candidate y, en último caso, al original.
    """
    raw = raw_title or ""
    pre_pick = run_stages(raw, _PRE_PICK_STAGES)
    candidate = run_stages(pre_pick, TITLE_STAGES[len(_PRE_PICK_STAGES):])
    if candidate:
        return candidate

    pre_pick_clean = collapse_whitespace(pre_pick)
    if pre_pick_clean:
        return pre_pick_clean
    return raw.strip()


__all__ = [
    "TITLE_STAGES",
    "collapse_whitespace",
    "extract_title",
    "looks_like_trailer",
    "normalize_cache_key",
    "pick_title_candidate",
    "run_stages",
    "shorten_title",
    "strip_accents",
    "strip_bracketed",
    "strip_promo_keywords",
    "strip_quality_tags",
    "strip_years",
]
