from __future__ import annotations

"""
movie_discovery/models.py

Modelo de datos del core:

- Movie: registro canónico (vídeo de YouTube + metadatos OMDb opcionales).
  Inmutable: el enriquecimiento produce una copia (dataclasses.replace).
- Rating: {Source, Value} de OMDb.
- SearchParams: parámetros de la búsqueda avanzada.
- SearchResult: envoltorio "movies XOR error" que devuelve el orquestador.

Forma "wire" (to_dict/from_dict): claves camelCase compatibles con el
contrato JSON histórico (videoId, channelTitle, durationInMinutes, imdbID...).
"""

from dataclasses import dataclass, field, fields, replace
from typing import Any, Literal, Mapping

from movie_discovery.durations import to_minutes

ResultSource = Literal["youtube", "omdb", "cache"]

OMDB_NA = "N/A"


def clean_na(value: object) -> str | None:
    """'N/A' / vacío / None -> None; el resto como str recortado."""
    if value is None:
        return None
    s = str(value).strip()
    if not s or s == OMDB_NA:
        return None
    return s


@dataclass(frozen=True)
class Rating:
    source: str
    value: str

    def to_dict(self) -> dict[str, str]:
        return {"Source": self.source, "Value": self.value}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Rating | None":
        source = clean_na(data.get("Source"))
        value = clean_na(data.get("Value"))
        if source is None or value is None:
            return None
        return cls(source=source, value=value)


# Campos de metadatos: (atributo python, clave wire/OMDb-compat).
_META_WIRE_KEYS: tuple[tuple[str, str], ...] = (
    ("year", "year"),
    ("rated", "rated"),
    ("released", "released"),
    ("runtime", "runtime"),
    ("genre", "genre"),
    ("director", "director"),
    ("writer", "writer"),
    ("actors", "actors"),
    ("plot", "plot"),
    ("language", "language"),
    ("country", "country"),
    ("awards", "awards"),
    ("poster", "poster"),
    ("imdb_rating", "imdbRating"),
    ("imdb_id", "imdbID"),
    ("type", "type"),
)


@dataclass(frozen=True)
class Movie:
    id: str
    video_id: str = ""
    title: str = ""
    thumbnail: str = ""
    channel_title: str = ""
    published_at: str = ""
    duration: str = ""
    view_count: str = "0"

    year: str | None = None
    rated: str | None = None
    released: str | None = None
    runtime: str | None = None
    genre: str | None = None
    director: str | None = None
    writer: str | None = None
    actors: str | None = None
    plot: str | None = None
    language: str | None = None
    country: str | None = None
    awards: str | None = None
    poster: str | None = None
    ratings: tuple[Rating, ...] | None = None
    imdb_rating: str | None = None
    imdb_id: str | None = None
    type: str | None = None

    @property
    def duration_in_minutes(self) -> int:
        return to_minutes(self.duration)

    @property
    def is_enriched(self) -> bool:
        return bool(self.plot or self.imdb_rating)

    @property
    def is_fallback(self) -> bool:
        """Registro solo-metadatos (búsqueda de respaldo en OMDb): sin vídeo reproducible."""
        return not self.video_id

    def with_metadata(self, **changes: Any) -> "Movie":
        known = {f.name for f in fields(self)}
        return replace(self, **{k: v for k, v in changes.items() if k in known})

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "videoId": self.video_id,
            "title": self.title,
            "thumbnail": self.thumbnail,
            "channelTitle": self.channel_title,
            "publishedAt": self.published_at,
            "duration": self.duration,
            "durationInMinutes": self.duration_in_minutes,
            "viewCount": self.view_count,
        }
        for attr, key in _META_WIRE_KEYS:
            v = getattr(self, attr)
            if v is not None:
                out[key] = v
        if self.ratings is not None:
            out["ratings"] = [r.to_dict() for r in self.ratings]
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Movie":
        """
        Inverso de to_dict. `durationInMinutes` se ignora: siempre se deriva de `duration`.
        Lanza ValueError si falta `id`.
        """
        movie_id = str(data.get("id") or "").strip()
        if not movie_id:
            raise ValueError("Movie requires a non-empty 'id'")

        meta: dict[str, Any] = {}
        for attr, key in _META_WIRE_KEYS:
            meta[attr] = clean_na(data.get(key))

        raw_ratings = data.get("ratings")
        ratings: tuple[Rating, ...] | None = None
        if isinstance(raw_ratings, list):
            parsed = (Rating.from_dict(r) for r in raw_ratings if isinstance(r, Mapping))
            ratings = tuple(r for r in parsed if r is not None)

        return cls(
            id=movie_id,
            video_id=str(data.get("videoId") or ""),
            title=str(data.get("title") or ""),
            thumbnail=str(data.get("thumbnail") or ""),
            channel_title=str(data.get("channelTitle") or ""),
            published_at=str(data.get("publishedAt") or ""),
            duration=str(data.get("duration") or ""),
            view_count=str(data.get("viewCount") or "0"),
            ratings=ratings,
            **meta,
        )


@dataclass(frozen=True)
class SearchParams:
    query: str
    actor: str | None = None
    genre: str | None = None
    language: str | None = None
    year: str | None = None
    duration: int | None = None

    def composed_query(self) -> str:
        parts = (self.query, self.actor, self.genre, self.language, self.year)
        return " ".join(p.strip() for p in parts if p and p.strip())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SearchParams":
        def _opt(name: str) -> str | None:
            v = data.get(name)
            if v is None:
                return None
            s = str(v).strip()
            return s or None

        raw_duration = data.get("duration")
        duration: int | None
        try:
            duration = int(raw_duration) if raw_duration not in (None, "") else None
        except (TypeError, ValueError):
            duration = None

        return cls(
            query=str(data.get("query") or ""),
            actor=_opt("actor"),
            genre=_opt("genre"),
            language=_opt("language"),
            year=_opt("year"),
            duration=duration,
        )


@dataclass(frozen=True)
class SearchResult:
    movies: tuple[Movie, ...] | None = None
    error: str | None = None
    source: ResultSource = field(default="youtube", compare=False)

    def __post_init__(self) -> None:
        if (self.movies is None) == (self.error is None):
            raise ValueError("SearchResult must carry exactly one of movies/error")
        if self.error is not None and not self.error.strip():
            raise ValueError("SearchResult.error must be a non-empty message")

    @classmethod
    def of(cls, movies: "list[Movie] | tuple[Movie, ...]", *, source: ResultSource = "youtube") -> "SearchResult":
        return cls(movies=tuple(movies), source=source)

    @classmethod
    def failure(cls, message: str) -> "SearchResult":
        return cls(error=message)

    @property
    def ok(self) -> bool:
        return self.error is None

    def with_movies(self, movies: "list[Movie] | tuple[Movie, ...]") -> "SearchResult":
        return replace(self, movies=tuple(movies))

    def to_dict(self) -> dict[str, Any]:
        if self.error is not None:
            return {"error": self.error}
        return {"data": [m.to_dict() for m in self.movies or ()]}
