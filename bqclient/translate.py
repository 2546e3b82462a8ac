"""Translation of typed configuration objects into wire requests.

Each translator returns a JSON-ready ``dict`` in the provider's schema.
``None`` translates to an empty request. Which dataset fields the server
accepts is recorded in ``DATASET_FIELDS`` rather than on the dataclass.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional

from .errors import ValidationError
from .models import DatasetMetadata

if TYPE_CHECKING:
    from .jobs import ExtractConfig


def duration_to_ms(value: timedelta) -> int:
    return value // timedelta(milliseconds=1)


def _copy(value: Any) -> Any:
    if isinstance(value, dict):
        return dict(value)
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, Enum):
        return value.value
    return value


@dataclass(frozen=True)
class FieldSpec:
    wire_name: Optional[str]
    writable: bool
    convert: Callable[[Any], Any] = _copy


DATASET_FIELDS: Dict[str, FieldSpec] = {
    "name": FieldSpec("friendlyName", writable=True),
    "description": FieldSpec("description", writable=True),
    "default_table_expiration": FieldSpec("defaultTableExpirationMs", writable=True, convert=duration_to_ms),
    "location": FieldSpec("location", writable=True),
    "labels": FieldSpec("labels", writable=True),
    "full_id": FieldSpec(None, writable=False),
    "creation_time": FieldSpec(None, writable=False),
    "last_modified_time": FieldSpec(None, writable=False),
    "etag": FieldSpec(None, writable=False),
}


def dataset_to_wire(metadata: Optional[DatasetMetadata]) -> Dict[str, Any]:
    """Build the dataset resource for a create or update request.

    Args:
        metadata: Dataset properties, or ``None`` for an empty request

    Returns:
        Dataset resource with only the fields that were set

    Raises:
        ValidationError: A server-populated field carries a value
    """
    wire: Dict[str, Any] = {}
    if metadata is None:
        return wire
    for name, spec in DATASET_FIELDS.items():
        value = getattr(metadata, name)
        if not spec.writable:
            if value:
                raise ValidationError(name, "field is populated by the server and cannot be written")
            continue
        if value is None:
            continue
        wire[spec.wire_name] = spec.convert(value)
    return wire


def extract_to_wire(config: Optional["ExtractConfig"]) -> Dict[str, Any]:
    """Build the ``configuration.extract`` section of an extract job."""
    wire: Dict[str, Any] = {}
    if config is None or config == type(config)():
        return wire
    dst = config.dst
    if dst is None or not dst.uris:
        raise ValidationError("dst.uris", "at least one destination URI is required")
    if config.src is None:
        raise ValidationError("src", "a source table is required")
    wire["destinationUris"] = list(dst.uris)
    if dst.compression is not None:
        wire["compression"] = _copy(dst.compression)
    if dst.destination_format is not None:
        wire["destinationFormat"] = _copy(dst.destination_format)
    if dst.field_delimiter:
        wire["fieldDelimiter"] = dst.field_delimiter
    wire["sourceTable"] = config.src.reference.to_wire()
    # printHeader stays unset so the server default (true) applies
    if config.disable_header:
        wire["printHeader"] = False
    return wire
