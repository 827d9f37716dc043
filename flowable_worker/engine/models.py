import re
import time
import uuid
from typing import Any, Dict, List, Optional

ISO_DURATION = re.compile(
    r"^P(?:(?P<days>\d+)D)?(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+(?:\.\d+)?)S)?)?$"
)

def parse_lock_duration(value: str) -> float:
    """Seconds in an ISO-8601 day/time duration such as PT10M or P1DT2H."""
    m = ISO_DURATION.match(value or "")
    if not m or value in ("P", "PT") or value.endswith("T"):
        raise ValueError(f"invalid ISO-8601 duration: {value!r}")
    parts = {k: float(v) for k, v in m.groupdict().items() if v}
    return (
        parts.get("days", 0) * 86400
        + parts.get("hours", 0) * 3600
        + parts.get("minutes", 0) * 60
        + parts.get("seconds", 0)
    )


class ActionRejected(Exception):
    def __init__(self, status_code: int, detail: str):
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


class Intent:
    def apply(self, data: dict) -> Any:
        raise NotImplementedError

class CreateJobIntent(Intent):
    def __init__(self, topic: str, scope_type: str, variables: List[Dict[str, Any]], retries: int = 3, element_name: Optional[str] = None):
        self.topic = topic
        self.scope_type = scope_type
        self.variables = variables
        self.retries = retries
        self.element_name = element_name

    def apply(self, data: dict):
        job_id = str(uuid.uuid4())
        job = {
            "id": job_id,
            "topic": self.topic,
            "scopeType": self.scope_type,
            "scopeId": str(uuid.uuid4()),
            "elementName": self.element_name or "External Worker task",
            "retries": self.retries,
            "createTime": time.time(),
            "lockOwner": None,
            "lockExpirationTime": None,
            "variables": list(self.variables),
            "state": "pending",
            "errorCode": None,
            "resultVariables": [],
        }
        data.setdefault("jobs", []).append(job)
        return dict(job)

class AcquireIntent(Intent):
    def __init__(self, topic: str, scope_type: str, worker_id: str, lock_seconds: float, number_of_tasks: int):
        self.topic = topic
        self.scope_type = scope_type
        self.worker_id = worker_id
        self.lock_seconds = lock_seconds
        self.number_of_tasks = number_of_tasks

    def apply(self, data: dict):
        now = time.time()
        acquired = []
        for job in data.get("jobs", []):
            if len(acquired) >= self.number_of_tasks:
                break
            if job["topic"] != self.topic or job["scopeType"] != self.scope_type:
                continue
            if job["state"] != "pending":
                continue
            # Expired locks are up for grabs again
            if job["lockOwner"] and job["lockExpirationTime"] > now:
                continue
            job["lockOwner"] = self.worker_id
            job["lockExpirationTime"] = now + self.lock_seconds
            acquired.append(job_document(job))
        return acquired

class TerminalIntent(Intent):
    """Shared ownership check for complete/fail/bpmnError/cmmnTerminate."""
    def __init__(self, job_id: str, worker_id: str, variables: List[Dict[str, Any]], error_code: Optional[str] = None):
        self.job_id = job_id
        self.worker_id = worker_id
        self.variables = variables
        self.error_code = error_code

    def _locked_job(self, data: dict) -> dict:
        for job in data.get("jobs", []):
            if job["id"] == self.job_id:
                if job["state"] != "pending" or job["lockOwner"] != self.worker_id:
                    raise ActionRejected(400, f"Job {self.job_id} is not locked by worker {self.worker_id}")
                return job
        raise ActionRejected(404, f"Job {self.job_id} not found")

    def _finish(self, job: dict, state: str):
        job["state"] = state
        job["lockOwner"] = None
        job["lockExpirationTime"] = None
        job["resultVariables"] = list(self.variables)
        job["errorCode"] = self.error_code

    def apply(self, data: dict):
        raise NotImplementedError

class CompleteIntent(TerminalIntent):
    def apply(self, data: dict):
        self._finish(self._locked_job(data), "completed")
        return True

class FailIntent(TerminalIntent):
    def apply(self, data: dict):
        job = self._locked_job(data)
        job["retries"] -= 1
        if job["retries"] > 0:
            job["lockOwner"] = None
            job["lockExpirationTime"] = None
            job["errorCode"] = self.error_code
        else:
            self._finish(job, "dead")
        return True

class BpmnErrorIntent(TerminalIntent):
    def apply(self, data: dict):
        self._finish(self._locked_job(data), "bpmnError")
        return True

class CmmnTerminateIntent(TerminalIntent):
    def apply(self, data: dict):
        job = self._locked_job(data)
        if job["scopeType"] != "cmmn":
            raise ActionRejected(400, f"Job {self.job_id} is not a cmmn job")
        self._finish(job, "terminated")
        return True


def job_document(job: dict) -> dict:
    """The job as the engine hands it out, without the emulator's bookkeeping."""
    doc = {k: v for k, v in job.items() if k not in ("state", "resultVariables", "topic")}
    doc["variables"] = list(job["variables"])
    return doc
