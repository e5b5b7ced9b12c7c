"""FastAPI 의존성 주입."""

from functools import lru_cache

from fastapi import Request

from botrecap.config import AppConfig
from botrecap.services.cache import MemoryCache


@lru_cache
def get_config() -> AppConfig:
    return AppConfig()


def get_memory_cache(request: Request) -> MemoryCache:
    return request.app.state.memory_cache
