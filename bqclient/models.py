"""Domain models shared by the iterator, translator and job layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from .client import Client
    from .iterator import PageIterator
    from .jobs import Extractor


class Compression(str, Enum):
    NONE = "NONE"
    GZIP = "GZIP"
    DEFLATE = "DEFLATE"
    SNAPPY = "SNAPPY"


class DestinationFormat(str, Enum):
    CSV = "CSV"
    AVRO = "AVRO"
    JSON = "NEWLINE_DELIMITED_JSON"
    PARQUET = "PARQUET"


@dataclass
class Page:
    """One page of raw list results plus the token for the page after it."""

    items: List[Dict[str, Any]] = field(default_factory=list)
    next_page_token: str = ""


@dataclass(frozen=True)
class DatasetReference:
    """Project-qualified dataset identifier."""

    project_id: str
    dataset_id: str

    def to_wire(self) -> Dict[str, str]:
        return {"projectId": self.project_id, "datasetId": self.dataset_id}


@dataclass(frozen=True)
class TableReference:
    """Fully qualified table identifier."""

    project_id: str
    dataset_id: str
    table_id: str

    @property
    def dataset(self) -> DatasetReference:
        return DatasetReference(self.project_id, self.dataset_id)

    def to_wire(self) -> Dict[str, str]:
        return {
            "projectId": self.project_id,
            "datasetId": self.dataset_id,
            "tableId": self.table_id,
        }


@dataclass
class DatasetMetadata:
    """Dataset properties sent on create/update and returned on read.

    ``None`` means unset. Which fields the server accepts is decided by
    ``bqclient.translate.DATASET_FIELDS``.
    """

    name: Optional[str] = None
    description: Optional[str] = None
    default_table_expiration: Optional[timedelta] = None
    location: Optional[str] = None
    labels: Optional[Dict[str, str]] = None
    # Populated by the server
    full_id: Optional[str] = None
    creation_time: Optional[datetime] = None
    last_modified_time: Optional[datetime] = None
    etag: Optional[str] = None


@dataclass
class GCSReference:
    """Cloud Storage destination for extract jobs."""

    uris: List[str] = field(default_factory=list)
    compression: Optional[Compression] = None
    destination_format: Optional[DestinationFormat] = None
    # Empty means the provider default
    field_delimiter: str = ""

    @classmethod
    def from_uris(cls, *uris: str) -> "GCSReference":
        return cls(uris=list(uris))


@dataclass
class Dataset:
    """Dataset handle bound to a client."""

    project_id: str
    dataset_id: str
    client: Optional["Client"] = field(default=None, repr=False, compare=False)

    @property
    def reference(self) -> DatasetReference:
        return DatasetReference(self.project_id, self.dataset_id)

    @property
    def hidden(self) -> bool:
        return self.dataset_id.startswith("_")

    def table(self, table_id: str) -> "Table":
        return Table(self.project_id, self.dataset_id, table_id, client=self.client)

    def tables(self) -> "PageIterator[Table]":
        """Iterate over the tables in this dataset."""
        return self._require_client().list_tables(self.reference)

    def create(self, metadata: Optional[DatasetMetadata] = None) -> Dict[str, Any]:
        return self._require_client().create_dataset(self.reference, metadata)

    def _require_client(self) -> "Client":
        if self.client is None:
            raise ValueError(f"Dataset {self.dataset_id} is not bound to a client")
        return self.client


@dataclass
class Table:
    """Table handle bound to a client."""

    project_id: str
    dataset_id: str
    table_id: str
    client: Optional["Client"] = field(default=None, repr=False, compare=False)

    @property
    def reference(self) -> TableReference:
        return TableReference(self.project_id, self.dataset_id, self.table_id)

    def extractor_to(self, dst: GCSReference) -> "Extractor":
        """Return an Extractor that copies this table into Cloud Storage.

        The Extractor may be configured further before ``run`` is called.
        """
        if self.client is None:
            raise ValueError(f"Table {self.table_id} is not bound to a client")
        return self.client.extractor(self, dst)


@dataclass
class Job:
    """Handle for a job accepted by the service."""

    project_id: str
    job_id: str
    location: Optional[str] = None
    state: Optional[str] = None
    configuration: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_wire(cls, payload: Dict[str, Any]) -> "Job":
        reference = payload.get("jobReference", {})
        return cls(
            project_id=reference.get("projectId", ""),
            job_id=reference.get("jobId", ""),
            location=reference.get("location"),
            state=payload.get("status", {}).get("state"),
            configuration=payload.get("configuration", {}),
        )
