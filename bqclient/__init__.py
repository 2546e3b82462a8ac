"""bqclient package exposing the public API."""

from .client import Client
from .config import ClientConfig
from .errors import BigQueryError, DecodeError, ScopeMismatchError, TransportError, ValidationError
from .iterator import PageIterator
from .jobs import ExtractConfig, Extractor
from .models import (
    Compression,
    Dataset,
    DatasetMetadata,
    DatasetReference,
    DestinationFormat,
    GCSReference,
    Job,
    Table,
    TableReference,
)

__all__ = [
    "BigQueryError",
    "Client",
    "ClientConfig",
    "Compression",
    "Dataset",
    "DatasetMetadata",
    "DatasetReference",
    "DecodeError",
    "DestinationFormat",
    "ExtractConfig",
    "Extractor",
    "GCSReference",
    "Job",
    "PageIterator",
    "ScopeMismatchError",
    "Table",
    "TableReference",
    "TransportError",
    "ValidationError",
]
