"""Client entry point tying the service backend to iterators and jobs."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from .config import ClientConfig
from .fetchers import DatasetFetcher, TableFetcher
from .interfaces import Service
from .iterator import PageIterator
from .jobs import ExtractConfig, Extractor
from .models import Dataset, DatasetMetadata, DatasetReference, GCSReference, Job, Table
from .services import build_default_factory
from .translate import dataset_to_wire

logger = logging.getLogger(__name__)


class Client:
    def __init__(
        self,
        project_id: str,
        service: Service,
        page_size: int = 0,
        location: Optional[str] = None,
    ) -> None:
        self.project_id = project_id
        self.location = location
        self.page_size = page_size
        self._service = service

    @classmethod
    def from_config(cls, config: ClientConfig) -> "Client":
        service = build_default_factory().create(config.service)
        return cls(
            project_id=config.project_id,
            service=service,
            page_size=config.iteration.page_size,
            location=config.location,
        )

    def dataset(self, dataset_id: str) -> Dataset:
        return Dataset(self.project_id, dataset_id, client=self)

    def datasets(self, filter: str = "", list_hidden: bool = False) -> PageIterator[Dataset]:
        """Iterate over the datasets of the client's project.

        Args:
            filter: Label filter evaluated by the server, e.g. ``labels.team:finance``
            list_hidden: Include datasets whose ID starts with an underscore

        Returns:
            Iterator yielding Dataset instances
        """
        fetcher = DatasetFetcher(self, self._service, self.project_id, filter=filter, list_hidden=list_hidden)
        return PageIterator(fetcher, page_size=self.page_size)

    def list_tables(self, dataset: DatasetReference) -> PageIterator[Table]:
        fetcher = TableFetcher(self, self._service, dataset)
        return PageIterator(fetcher, page_size=self.page_size)

    def create_dataset(self, dataset: DatasetReference, metadata: Optional[DatasetMetadata] = None) -> Dict[str, Any]:
        body = dataset_to_wire(metadata)
        body["datasetReference"] = dataset.to_wire()
        if self.location and "location" not in body:
            body["location"] = self.location
        logger.info("Creating dataset %s:%s", dataset.project_id, dataset.dataset_id)
        return self._service.insert_dataset(dataset.project_id, body)

    def extractor(self, src: Table, dst: GCSReference) -> Extractor:
        return Extractor(self, ExtractConfig(src=src, dst=dst))

    def insert_job(self, job: Dict[str, Any]) -> Job:
        response = self._service.insert_job(self.project_id, job)
        handle = Job.from_wire(response)
        logger.info("Job %s accepted (state=%s)", handle.job_id, handle.state)
        return handle
