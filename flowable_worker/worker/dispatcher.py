import json
import logging
from typing import Any, List, Optional

from flowable_worker.client.acquisition import ExternalJobClient
from flowable_worker.worker.handlers import JobHandler, Verdict
from flowable_worker.worker.models import HandlerResult, HandlerStatus, SubscriptionRequest
from flowable_worker.worker.reducer import TerminalAction, handle_worker_response

logger = logging.getLogger(__name__)

SYNTHETIC_FAILURE_STATUS = 500


def extract_job_id(job: Any) -> str:
    """String `id`, then string `jobId`, then numeric `id`; "" when none applies."""
    if not isinstance(job, dict):
        return ""
    job_id = job.get("id")
    if isinstance(job_id, str) and job_id:
        return job_id
    alt = job.get("jobId")
    if isinstance(alt, str) and alt:
        return alt
    if isinstance(job_id, bool):
        return ""
    if isinstance(job_id, int):
        return str(job_id)
    if isinstance(job_id, float):
        return f"{job_id:.0f}"
    return ""


def serialize_job(job: Any) -> str:
    return json.dumps(job, separators=(",", ":"), allow_nan=False)


def _failed(error_code: str) -> Verdict:
    return HandlerStatus.FAIL, HandlerResult(status=HandlerStatus.FAIL, error_code=error_code)


def invoke_handler(handler: JobHandler, status: int, body: str) -> Verdict:
    """Calls the handler; a raise or a malformed verdict becomes a fail verdict."""
    try:
        verdict = handler.translate(status, body)
    except Exception as e:
        logger.exception("Handler raised, reporting the job as failed")
        return _failed(str(e) or type(e).__name__)

    if not isinstance(verdict, (tuple, list)) or len(verdict) != 2:
        logger.error(f"Handler returned {verdict!r} instead of a (status, result) pair")
        return _failed(f"invalid handler verdict: {type(verdict).__name__}")
    if verdict[1] is not None and not isinstance(verdict[1], HandlerResult):
        logger.error(f"Handler returned a {type(verdict[1]).__name__} result instead of a HandlerResult")
        return _failed(f"invalid handler result: {type(verdict[1]).__name__}")
    return verdict[0], verdict[1]


class JobDispatcher:
    """Runs the handler on each job of a batch, one at a time, and reduces each verdict."""
    def __init__(self, client: ExternalJobClient, request: SubscriptionRequest, handler: JobHandler):
        self.client = client
        self.request = request
        self.handler = handler

    def reduce(self, job_id: str, verdict: Verdict) -> Optional[TerminalAction]:
        status, result = verdict
        return handle_worker_response(
            self.client,
            self.request.normalized_base_url,
            self.request.worker_id,
            job_id,
            status,
            result,
        )

    def dispatch_one(self, acquire_status: int, job: Any) -> Optional[TerminalAction]:
        try:
            job_body = serialize_job(job)
        except (TypeError, ValueError, RecursionError) as e:
            # One unreadable job must not take the rest of the batch down with it
            logger.warning(f"Could not serialize job, treating it as failed: {e}")
            return self.reduce("", invoke_handler(self.handler, SYNTHETIC_FAILURE_STATUS, ""))

        job_id = extract_job_id(job)
        verdict = invoke_handler(self.handler, acquire_status, job_body)
        return self.reduce(job_id, verdict)

    def dispatch(self, acquire_status: int, jobs: List[Any]) -> List[Optional[TerminalAction]]:
        return [self.dispatch_one(acquire_status, job) for job in jobs]
