"""Interface definitions for service collaborators and page fetchers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Tuple, TypeVar

from .models import DatasetReference, Page

T = TypeVar("T")


class Service(ABC):
    """The remote API: transport, auth and wire protocol live behind this boundary."""

    @abstractmethod
    def list_datasets(self, project_id: str, page_size: int, page_token: str, filter: str = "") -> Page:
        """Return one page of raw dataset list entries for ``project_id``."""

    @abstractmethod
    def list_tables(self, dataset: DatasetReference, page_size: int, page_token: str) -> Page:
        """Return one page of raw table list entries for ``dataset``."""

    @abstractmethod
    def insert_job(self, project_id: str, job: Dict[str, Any]) -> Dict[str, Any]:
        """Submit a job resource and return the server's view of it."""

    @abstractmethod
    def insert_dataset(self, project_id: str, dataset: Dict[str, Any]) -> Dict[str, Any]:
        """Create a dataset resource and return the server's view of it."""


class PageFetcher(ABC, Generic[T]):
    """Fetch-and-decode strategy for one resource kind, bound to a scope."""

    @abstractmethod
    def fetch(self, page_size: int, page_token: str) -> Tuple[List[T], str]:
        """Return decoded, filtered items of one page and the next page token."""
