from __future__ import annotations

from movie_discovery import api as core_api
from movie_discovery.search_service import MovieSearchService
from server.api.settings import Settings

_SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return _SETTINGS


def get_service() -> MovieSearchService:
    return core_api.get_service()
