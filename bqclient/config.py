"""Configuration models and helpers for the client."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import json


@dataclass
class ServiceConfig:
    """Which service backend to talk to, and its parameters."""

    type: str
    params: Dict[str, Any] = field(default_factory=dict)


@dataclass
class IterationConfig:
    """Defaults applied to every list iterator the client creates."""

    # 0 lets the service choose
    page_size: int = 0


@dataclass
class ClientConfig:
    """Top-level configuration for a client."""

    project_id: str
    service: ServiceConfig
    iteration: IterationConfig = field(default_factory=IterationConfig)
    location: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClientConfig":
        if not data.get("project_id"):
            raise ValueError("ClientConfig requires project_id")
        service = ServiceConfig(**data["service"])
        iteration = IterationConfig(**data.get("iteration", {}))
        return cls(
            project_id=data["project_id"],
            service=service,
            iteration=iteration,
            location=data.get("location"),
        )

    @classmethod
    def from_json(cls, path: Path) -> "ClientConfig":
        data = json.loads(path.read_text())
        return cls.from_dict(data)


DEFAULT_CONFIG = ClientConfig(
    project_id="sample-project",
    service=ServiceConfig(
        type="memory",
        params={
            "projects": {
                "sample-project": {
                    "sales": {"tables": ["orders", "customers"], "labels": {"team": "finance"}},
                    "_staging": ["orders_raw"],
                }
            }
        },
    ),
)
