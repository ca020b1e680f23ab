from __future__ import annotations

"""
movie_discovery/main.py

CLI mínima sobre movie_discovery.api (console_scripts: movie-search).

    movie-search "Dil Chahta Hai"
    movie-search --trending
    movie-search --actor "Shah Rukh Khan" --json
    movie-search --genre Comedy

Reglas de consola (alineado con logger.py):
- Resultados: logger.progress(...) (siempre visibles, también con SILENT_MODE).
- Debug contextual: logger.debug_ctx("CLI", "...").
- Ctrl+C: salida limpia, sin stacktrace.

Código de salida 1 si el resultado es un error (YouTube y OMDb fallaron) o
los argumentos no permiten construir una búsqueda.
"""

import argparse
import json
from collections.abc import Sequence

from movie_discovery import api
from movie_discovery import logger as logger
from movie_discovery.models import Movie, SearchResult
from movie_discovery.run_metrics import log_metrics_summary

_TITLE_WIDTH = 48


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="movie-search",
        add_help=True,
        description="Busca películas completas en YouTube y las enriquece con OMDb.",
    )
    parser.add_argument("term", nargs="?", help="Título (o texto libre) a buscar")

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--trending", action="store_true", help="Películas en tendencia (semillas configuradas)")
    mode.add_argument("--actor", metavar="NAME", help="Películas de un actor o actriz")
    mode.add_argument("--genre", metavar="GENRE", help="Películas de un género")

    parser.add_argument("--json", action="store_true", help="Salida JSON ({\"data\": [...]} o {\"error\": ...})")
    return parser.parse_args(argv)


def _run_query(args: argparse.Namespace) -> SearchResult | None:
    if args.trending:
        return api.get_trending_movies()
    if args.actor:
        return api.get_movies_by_actor(args.actor)
    if args.genre:
        return api.get_movies_by_genre(args.genre)
    if args.term and args.term.strip():
        return api.search_movies(args.term)
    return None


def _format_row(idx: int, movie: Movie) -> str:
    title = movie.title if len(movie.title) <= _TITLE_WIDTH else movie.title[: _TITLE_WIDTH - 1] + "…"
    year = movie.year or "----"
    rating = movie.imdb_rating or "-"
    minutes = f"{movie.duration_in_minutes}m" if movie.duration else "-"
    where = f"https://youtu.be/{movie.video_id}" if movie.video_id else (movie.imdb_id or movie.id)
    return f"{idx:>2}. {title:<{_TITLE_WIDTH}} {year:>4}  {rating:>4}  {minutes:>5}  {where}"


def _print_result(result: SearchResult, *, as_json: bool) -> None:
    if as_json:
        logger.progress(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        return

    if result.error is not None:
        logger.progress(f"[movie-search] Error: {result.error}")
        return

    movies = result.movies or ()
    if not movies:
        logger.progress("[movie-search] Sin resultados.")
        return

    for idx, movie in enumerate(movies, start=1):
        logger.progress(_format_row(idx, movie))
    logger.progress(f"[movie-search] {len(movies)} película(s) (origen: {result.source})")


def run(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    logger.debug_ctx("CLI", f"args={vars(args)!r}")

    result = _run_query(args)
    if result is None:
        logger.info("[movie-search] Indica un término, --trending, --actor o --genre.", always=True)
        return 1

    _print_result(result, as_json=args.json)
    log_metrics_summary()
    return 0 if result.ok else 1


def start() -> None:
    """Entry-point (console_scripts)."""
    try:
        code = run()
    except KeyboardInterrupt:
        logger.info("\n[movie-search] Interrumpido por el usuario (Ctrl+C).", always=True)
        code = 130
    raise SystemExit(code)


if __name__ == "__main__":
    start()
