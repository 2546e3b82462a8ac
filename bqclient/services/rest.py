"""Service backend speaking the BigQuery v2 REST API.

This backend implements:
- Dataset and table listing with maxResults / pageToken
- Job and dataset insertion
- Operation-tagged transport errors

Authentication is not handled here: callers pass an already obtained
OAuth2 access token. Failed requests are not retried.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from ..config import ServiceConfig
from ..errors import DecodeError, TransportError
from ..interfaces import Service
from ..models import DatasetReference, Page

logger = logging.getLogger(__name__)


class RestService(Service):
    """Service talking to the REST endpoint over a ``requests`` session."""

    DEFAULT_ENDPOINT = "https://bigquery.googleapis.com/bigquery/v2"
    DEFAULT_TIMEOUT = 60.0

    def __init__(self, config: ServiceConfig, session: Optional[requests.Session] = None) -> None:
        """Initialize the REST backend.

        Required config params:
            access_token: OAuth2 bearer token

        Optional config params:
            endpoint: API root (default: the public v2 endpoint)
            timeout: Per-request timeout in seconds (default: 60)
        """
        self._config = config
        self._access_token = config.params.get("access_token")
        if not self._access_token:
            raise ValueError("RestService requires access_token")
        self._endpoint = config.params.get("endpoint", self.DEFAULT_ENDPOINT).rstrip("/")
        self._timeout = float(config.params.get("timeout", self.DEFAULT_TIMEOUT))
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {self._access_token}",
                "Accept": "application/json",
            }
        )

    def _request(self, operation: str, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        """Make one request and return the decoded JSON body.

        Args:
            operation: Name attached to any TransportError raised
            method: HTTP method
            path: Path relative to the API root
            **kwargs: Additional arguments passed to requests

        Returns:
            JSON response as dictionary
        """
        url = f"{self._endpoint}{path}"
        logger.debug("%s %s %s", operation, method, url)
        try:
            response = self._session.request(method, url, timeout=self._timeout, **kwargs)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise TransportError(operation, str(exc)) from exc
        try:
            payload = response.json()
        except ValueError as exc:
            raise DecodeError(f"{operation} returned a non-JSON body") from exc
        if not isinstance(payload, dict):
            raise DecodeError(f"{operation} returned {type(payload).__name__}, expected an object")
        return payload

    @staticmethod
    def _list_params(page_size: int, page_token: str) -> Dict[str, Any]:
        # The server applies its own default and maximum
        params: Dict[str, Any] = {}
        if page_size > 0:
            params["maxResults"] = page_size
        if page_token:
            params["pageToken"] = page_token
        return params

    @staticmethod
    def _to_page(payload: Dict[str, Any], items_key: str) -> Page:
        items = payload.get(items_key, [])
        if not isinstance(items, list):
            raise DecodeError(f"{items_key} is not a list")
        return Page(items=items, next_page_token=payload.get("nextPageToken", ""))

    def list_datasets(self, project_id: str, page_size: int, page_token: str, filter: str = "") -> Page:
        params = self._list_params(page_size, page_token)
        # Hidden datasets are filtered client side
        params["all"] = "true"
        if filter:
            params["filter"] = filter
        payload = self._request("list_datasets", "GET", f"/projects/{project_id}/datasets", params=params)
        return self._to_page(payload, "datasets")

    def list_tables(self, dataset: DatasetReference, page_size: int, page_token: str) -> Page:
        params = self._list_params(page_size, page_token)
        path = f"/projects/{dataset.project_id}/datasets/{dataset.dataset_id}/tables"
        payload = self._request("list_tables", "GET", path, params=params)
        return self._to_page(payload, "tables")

    def insert_job(self, project_id: str, job: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("insert_job", "POST", f"/projects/{project_id}/jobs", json=job)

    def insert_dataset(self, project_id: str, dataset: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("insert_dataset", "POST", f"/projects/{project_id}/datasets", json=dataset)
