"""Service backends implementing the remote API boundary."""

from .base import ServiceFactory
from .registry import build_default_factory

__all__ = ["ServiceFactory", "build_default_factory"]
