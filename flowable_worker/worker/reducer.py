import json
import logging
from typing import Any, Dict, Optional, Union

from flowable_worker.client.acquisition import ExternalJobClient
from flowable_worker.errors import TransportError
from flowable_worker.worker.models import HandlerResult, HandlerStatus

logger = logging.getLogger(__name__)


# --- TERMINAL ACTIONS ---
class TerminalAction:
    path: str = ""
    default_error_code: str = ""

    def prepare(self, result: HandlerResult):
        if self.default_error_code and not result.error_code:
            result.error_code = self.default_error_code

    def body(self, result: HandlerResult) -> Dict[str, Any]:
        return {
            "workerId": result.worker_id,
            "variables": result.wire_variables(),
            "errorCode": result.error_code,
        }

class CompleteAction(TerminalAction):
    path = "complete"

    def body(self, result: HandlerResult) -> Dict[str, Any]:
        return {"workerId": result.worker_id, "variables": result.wire_variables()}

class FailAction(TerminalAction):
    path = "fail"
    default_error_code = "failed"

class BpmnErrorAction(TerminalAction):
    path = "bpmnError"
    default_error_code = "bpmnError"

class CmmnTerminateAction(TerminalAction):
    path = "cmmnTerminate"
    default_error_code = "cmmnTerminate"


ACTIONS: Dict[HandlerStatus, TerminalAction] = {
    HandlerStatus.SUCCESS: CompleteAction(),
    HandlerStatus.FAIL: FailAction(),
    HandlerStatus.BPMN_ERROR: BpmnErrorAction(),
    HandlerStatus.CMMN_TERMINATE: CmmnTerminateAction(),
}


def _resolve(status: Union[HandlerStatus, str, None]) -> Optional[TerminalAction]:
    try:
        return ACTIONS[HandlerStatus(status)]
    except ValueError:
        return None


def handle_worker_response(
    client: ExternalJobClient,
    base_url: str,
    worker_id: str,
    job_id: str,
    status: Union[HandlerStatus, str, None],
    result: Optional[HandlerResult],
) -> Optional[TerminalAction]:
    """
    Turns a handler verdict into at most one terminal call for `job_id`.

    Returns the action that was posted, or None when nothing went out
    (unknown status, missing job id). POST failures are logged and dropped;
    they never reach the polling loop. Neither does a result that cannot
    be encoded as JSON.
    """
    if result is None:
        result = HandlerResult(worker_id=worker_id)
    elif not result.worker_id:
        result.worker_id = worker_id

    action = _resolve(status)
    if action is None:
        logger.warning(f"Unhandled handler status: {status!r}")
        return None

    action.prepare(result)

    if not job_id:
        logger.info(f"{action.path}: missing job id, skipping")
        return None

    try:
        payload = json.dumps(action.body(result), allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        logger.error(f"{action.path}: marshal error for job {job_id}: {e}")
        return None

    try:
        resp_status, resp_body = client.post_action(base_url, job_id, action.path, payload)
    except TransportError as e:
        logger.error(f"{action.path}: post error for job {job_id}: {e}")
        return None

    if not 200 <= resp_status < 300:
        logger.error(f"{action.path}: job {job_id} rejected, status={resp_status}, body={resp_body}")
        return None

    logger.info(f"{action.path}: job {job_id} status={resp_status}")
    return action
