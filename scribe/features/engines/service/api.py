# File: scribe/features/engines/service/api.py
from typing import Optional

from ..domain.interfaces import IEngineRepository
from .registry import EngineRegistry


def create_registry(repo: Optional[IEngineRepository] = None) -> EngineRegistry:
    """
    Process-start hook: builds the registry and seeds the built-in engines.
    The returned instance is what dispatch, polling and the worker get injected with.
    """
    registry = EngineRegistry(repo=repo)
    registry.load()
    return registry
