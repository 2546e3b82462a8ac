"""Utilities shared across service backends."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Type

from ..config import ServiceConfig
from ..interfaces import Service


@dataclass
class ServiceFactory:
    """Registry-backed factory for service backends."""

    registry: Dict[str, Type[Service]]

    def create(self, config: ServiceConfig) -> Service:
        try:
            service_cls = self.registry[config.type]
        except KeyError as exc:
            raise ValueError(f"Unknown service type: {config.type}") from exc
        return service_cls(config)
