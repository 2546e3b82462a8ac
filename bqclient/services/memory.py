"""In-memory service producing deterministic list pages.

Datasets and tables are served in insertion order. Page tokens are the
decimal offset of the next entry.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, List

from ..config import ServiceConfig
from ..errors import ScopeMismatchError, TransportError
from ..interfaces import Service
from ..models import DatasetReference, Page

logger = logging.getLogger(__name__)


class InMemoryService(Service):
    """Service backed by plain dictionaries.

    Config params:
        projects: ``{project_id: {dataset_id: tables}}`` where ``tables`` is
            either a list of table IDs or a dict with ``tables`` and
            ``labels`` keys
        max_page_size: Largest page served (default: 50)
    """

    DEFAULT_MAX_PAGE_SIZE = 50

    def __init__(self, config: ServiceConfig) -> None:
        self._config = config
        self._max_page_size = int(config.params.get("max_page_size", self.DEFAULT_MAX_PAGE_SIZE))
        if self._max_page_size <= 0:
            raise ValueError("InMemoryService max_page_size must be positive")
        self._projects: Dict[str, Dict[str, Dict[str, Any]]] = {}
        for project_id, datasets in config.params.get("projects", {}).items():
            self._projects[project_id] = {}
            for dataset_id, spec in datasets.items():
                self._projects[project_id][dataset_id] = self._normalize(spec)
        self._jobs: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.calls: List[str] = []

    @staticmethod
    def _normalize(spec: Any) -> Dict[str, Any]:
        if isinstance(spec, dict):
            return {
                "tables": list(spec.get("tables", [])),
                "labels": dict(spec.get("labels", {})),
                "location": spec.get("location"),
            }
        return {"tables": list(spec), "labels": {}, "location": None}

    def _clamp(self, page_size: int) -> int:
        if page_size <= 0 or page_size > self._max_page_size:
            return self._max_page_size
        return page_size

    def _page(self, entries: List[Dict[str, Any]], page_size: int, page_token: str, operation: str) -> Page:
        start = 0
        if page_token:
            try:
                start = int(page_token)
            except ValueError as exc:
                raise TransportError(operation, f"invalid page token {page_token!r}") from exc
        end = min(start + self._clamp(page_size), len(entries))
        next_page_token = str(end) if end < len(entries) else ""
        return Page(items=entries[start:end], next_page_token=next_page_token)

    def _project(self, project_id: str) -> Dict[str, Dict[str, Any]]:
        try:
            return self._projects[project_id]
        except KeyError as exc:
            raise ScopeMismatchError(
                f"wrong project id {project_id!r}",
                expected=", ".join(self._projects),
                actual=project_id,
            ) from exc

    def list_datasets(self, project_id: str, page_size: int, page_token: str, filter: str = "") -> Page:
        self.calls.append("list_datasets")
        datasets = self._project(project_id)
        matches = self._label_matcher(filter)
        entries = [
            self._dataset_entry(project_id, dataset_id, spec)
            for dataset_id, spec in datasets.items()
            if matches(spec["labels"])
        ]
        return self._page(entries, page_size, page_token, "list_datasets")

    def list_tables(self, dataset: DatasetReference, page_size: int, page_token: str) -> Page:
        self.calls.append("list_tables")
        datasets = self._project(dataset.project_id)
        if dataset.dataset_id not in datasets:
            raise ScopeMismatchError(
                f"wrong dataset id {dataset.dataset_id!r}",
                expected=", ".join(datasets),
                actual=dataset.dataset_id,
            )
        entries = [
            {
                "kind": "bigquery#table",
                "id": f"{dataset.project_id}:{dataset.dataset_id}.{table_id}",
                "tableReference": {
                    "projectId": dataset.project_id,
                    "datasetId": dataset.dataset_id,
                    "tableId": table_id,
                },
            }
            for table_id in datasets[dataset.dataset_id]["tables"]
        ]
        return self._page(entries, page_size, page_token, "list_tables")

    def insert_job(self, project_id: str, job: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append("insert_job")
        self._project(project_id)
        job_id = job.get("jobReference", {}).get("jobId")
        if not job_id:
            raise TransportError("insert_job", "jobReference.jobId is required")
        jobs = self._jobs.setdefault(project_id, {})
        if job_id in jobs:
            raise TransportError("insert_job", f"Already Exists: job {project_id}:{job_id}")
        stored = copy.deepcopy(job)
        stored["id"] = f"{project_id}:{job_id}"
        stored["status"] = {"state": "PENDING"}
        jobs[job_id] = stored
        logger.debug("Stored job %s", stored["id"])
        return copy.deepcopy(stored)

    def insert_dataset(self, project_id: str, dataset: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append("insert_dataset")
        datasets = self._project(project_id)
        dataset_id = dataset.get("datasetReference", {}).get("datasetId")
        if not dataset_id:
            raise TransportError("insert_dataset", "datasetReference.datasetId is required")
        if dataset_id in datasets:
            raise TransportError("insert_dataset", f"Already Exists: dataset {project_id}:{dataset_id}")
        datasets[dataset_id] = {
            "tables": [],
            "labels": dict(dataset.get("labels", {})),
            "location": dataset.get("location"),
        }
        stored = copy.deepcopy(dataset)
        stored["id"] = f"{project_id}:{dataset_id}"
        return stored

    def jobs(self, project_id: str) -> List[Dict[str, Any]]:
        return [copy.deepcopy(job) for job in self._jobs.get(project_id, {}).values()]

    @staticmethod
    def _dataset_entry(project_id: str, dataset_id: str, spec: Dict[str, Any]) -> Dict[str, Any]:
        entry: Dict[str, Any] = {
            "kind": "bigquery#dataset",
            "id": f"{project_id}:{dataset_id}",
            "datasetReference": {"projectId": project_id, "datasetId": dataset_id},
        }
        if spec["labels"]:
            entry["labels"] = dict(spec["labels"])
        if spec["location"]:
            entry["location"] = spec["location"]
        return entry

    @staticmethod
    def _label_matcher(filter: str):
        """Compile a ``labels.<key>[:<value>]`` filter expression.

        Terms are separated by whitespace and must all match. Anything else is
        rejected the way the server rejects filters it cannot evaluate.
        """
        terms: List[tuple] = []
        for term in filter.split():
            if not term.startswith("labels.") or term == "labels.":
                raise TransportError("list_datasets", f"filter not supported: {term!r}")
            key, _, value = term[len("labels."):].partition(":")
            terms.append((key, value or None))

        def matches(labels: Dict[str, str]) -> bool:
            for key, value in terms:
                if key not in labels:
                    return False
                if value is not None and labels[key] != value:
                    return False
            return True

        return matches
