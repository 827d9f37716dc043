import json
import logging
from typing import Any, List, Tuple

from flowable_worker.client.transport import HttpTransport
from flowable_worker.errors import AcquisitionError, TransportError
from flowable_worker.worker.models import SubscriptionRequest

logger = logging.getLogger(__name__)

JOB_API = "/external-job-api"


def _is_success(status: int) -> bool:
    return 200 <= status < 300


class ExternalJobClient:
    """
    Thin client for the engine's external-job-api. No retries, no reordering:
    jobs come back exactly as the engine listed them.
    """
    def __init__(self, transport: HttpTransport):
        self.transport = transport

    def acquire(self, request: SubscriptionRequest) -> Tuple[int, List[Any]]:
        url = f"{request.normalized_base_url}{JOB_API}/acquire/jobs"
        payload = json.dumps(request.acquire_body()).encode("utf-8")

        try:
            status, body = self.transport.post(url, payload)
        except TransportError as e:
            raise AcquisitionError(str(e)) from e

        text = body.decode("utf-8", errors="replace")
        if not _is_success(status):
            raise AcquisitionError(f"acquire returned HTTP {status}", status_code=status, body=text)

        try:
            jobs = json.loads(body)
        except (ValueError, RecursionError) as e:
            raise AcquisitionError(f"acquire response is not JSON: {e}", status_code=status, body=text) from e

        if not isinstance(jobs, list):
            raise AcquisitionError(
                f"acquire response is not a JSON array but {type(jobs).__name__}",
                status_code=status,
                body=text,
            )
        return status, jobs

    def list_jobs(self, base_url: str) -> Tuple[int, str]:
        """GET the jobs listing. The body is handed back undecoded."""
        url = f"{base_url.rstrip('/')}{JOB_API}/jobs"
        status, body = self.transport.get(url)
        return status, body.decode("utf-8", errors="replace")

    def post_action(self, base_url: str, job_id: str, action: str, payload: bytes) -> Tuple[int, str]:
        """POST an already encoded JSON body to one of the terminal endpoints of `job_id`."""
        url = f"{base_url.rstrip('/')}{JOB_API}/acquire/jobs/{job_id}/{action}"
        status, resp_body = self.transport.post(url, payload)
        return status, resp_body.decode("utf-8", errors="replace")
