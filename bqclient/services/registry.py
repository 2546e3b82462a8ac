"""Service registry mapping config types to implementations."""

from __future__ import annotations

from typing import Dict, Type

from ..interfaces import Service
from .base import ServiceFactory
from .memory import InMemoryService
from .rest import RestService


def build_default_factory() -> ServiceFactory:
    registry: Dict[str, Type[Service]] = {
        "memory": InMemoryService,
        "rest": RestService,
    }
    return ServiceFactory(registry)
