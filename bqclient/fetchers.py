"""Fetch-and-decode strategies for the resource kinds the client can list."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Tuple

from .errors import DecodeError, ScopeMismatchError
from .interfaces import PageFetcher, Service
from .models import Dataset, DatasetReference, Table

if TYPE_CHECKING:
    from .client import Client


def _reference(raw: Dict[str, Any], key: str, fields: Tuple[str, ...]) -> Dict[str, str]:
    reference = raw.get(key)
    if not isinstance(reference, dict):
        raise DecodeError(f"list entry is missing {key}: {raw!r}")
    missing = [name for name in fields if not reference.get(name)]
    if missing:
        raise DecodeError(f"{key} is missing {', '.join(missing)}: {reference!r}")
    return reference


class TableFetcher(PageFetcher[Table]):
    """Lists the tables of a single dataset."""

    def __init__(self, client: "Client", service: Service, dataset: DatasetReference) -> None:
        self._client = client
        self._service = service
        self._dataset = dataset

    def fetch(self, page_size: int, page_token: str) -> Tuple[List[Table], str]:
        page = self._service.list_tables(self._dataset, page_size, page_token)
        tables = [self._decode(raw) for raw in page.items]
        return tables, page.next_page_token

    def _decode(self, raw: Dict[str, Any]) -> Table:
        reference = _reference(raw, "tableReference", ("projectId", "datasetId", "tableId"))
        actual = DatasetReference(reference["projectId"], reference["datasetId"])
        if actual != self._dataset:
            raise ScopeMismatchError(
                f"table {reference['tableId']} belongs to {actual.project_id}:{actual.dataset_id}",
                expected=f"{self._dataset.project_id}:{self._dataset.dataset_id}",
                actual=f"{actual.project_id}:{actual.dataset_id}",
            )
        return Table(
            project_id=reference["projectId"],
            dataset_id=reference["datasetId"],
            table_id=reference["tableId"],
            client=self._client,
        )


class DatasetFetcher(PageFetcher[Dataset]):
    """Lists the datasets of a project.

    ``filter`` is passed to the server, which rejects what it cannot evaluate.
    Hidden datasets are always requested and dropped here when
    ``list_hidden`` is false.
    """

    def __init__(
        self,
        client: "Client",
        service: Service,
        project_id: str,
        filter: str = "",
        list_hidden: bool = False,
    ) -> None:
        self._client = client
        self._service = service
        self._project_id = project_id
        self._filter = filter
        self._list_hidden = list_hidden

    def fetch(self, page_size: int, page_token: str) -> Tuple[List[Dataset], str]:
        page = self._service.list_datasets(self._project_id, page_size, page_token, self._filter)
        datasets = [self._decode(raw) for raw in page.items]
        if not self._list_hidden:
            datasets = [dataset for dataset in datasets if not dataset.hidden]
        return datasets, page.next_page_token

    def _decode(self, raw: Dict[str, Any]) -> Dataset:
        reference = _reference(raw, "datasetReference", ("projectId", "datasetId"))
        if reference["projectId"] != self._project_id:
            raise ScopeMismatchError(
                f"dataset {reference['datasetId']} belongs to project {reference['projectId']}",
                expected=self._project_id,
                actual=reference["projectId"],
            )
        return Dataset(
            project_id=reference["projectId"],
            dataset_id=reference["datasetId"],
            client=self._client,
        )
