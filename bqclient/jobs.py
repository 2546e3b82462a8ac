"""Job construction and submission."""

from __future__ import annotations

import logging
import secrets
import string
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional

from .models import GCSReference, Job, Table
from .translate import extract_to_wire

if TYPE_CHECKING:
    from .client import Client

logger = logging.getLogger(__name__)

JOB_ID_ALPHABET = string.ascii_letters + string.digits
JOB_ID_LENGTH = 27


def random_job_id() -> str:
    return "".join(secrets.choice(JOB_ID_ALPHABET) for _ in range(JOB_ID_LENGTH))


def create_job_reference(job_id: str, add_job_id_suffix: bool, project_id: str) -> Dict[str, str]:
    """Resolve the identity a job is submitted under.

    An explicit ID is used as given, or with a random suffix appended when
    ``add_job_id_suffix`` is set. Without an ID a random one is generated.
    """
    if not job_id:
        job_id = random_job_id()
    elif add_job_id_suffix:
        job_id = f"{job_id}-{random_job_id()}"
    return {"projectId": project_id, "jobId": job_id}


@dataclass
class ExtractConfig:
    """Configuration for an extract job."""

    # Empty means a random job ID is generated
    job_id: str = ""
    add_job_id_suffix: bool = False
    src: Optional[Table] = None
    dst: Optional[GCSReference] = None
    # Suppresses the header row in exported data
    disable_header: bool = False


class Extractor:
    """Extracts data from a table into Cloud Storage."""

    def __init__(self, client: "Client", config: ExtractConfig) -> None:
        self._client = client
        self.config = config

    def new_job(self) -> Dict[str, Any]:
        reference = create_job_reference(
            self.config.job_id,
            self.config.add_job_id_suffix,
            self._client.project_id,
        )
        if self._client.location:
            reference["location"] = self._client.location
        return {
            "jobReference": reference,
            "configuration": {"extract": extract_to_wire(self.config)},
        }

    def run(self) -> Job:
        """Start the extract job and return its handle."""
        job = self.new_job()
        logger.info(
            "Submitting extract job %s for %s",
            job["jobReference"]["jobId"],
            self.config.src.reference if self.config.src else None,
        )
        return self._client.insert_job(job)
