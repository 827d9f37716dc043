import json
import logging
import threading
from typing import Any, Dict, List, Optional

from flowable_worker.engine.models import (
    AcquireIntent,
    BpmnErrorIntent,
    CmmnTerminateIntent,
    CompleteIntent,
    CreateJobIntent,
    FailIntent,
    Intent,
    TerminalIntent,
    job_document,
    parse_lock_duration,
)

logger = logging.getLogger(__name__)

TERMINAL_INTENTS = {
    "complete": CompleteIntent,
    "fail": FailIntent,
    "bpmnError": BpmnErrorIntent,
    "cmmnTerminate": CmmnTerminateIntent,
}

class JobStore:
    """
    In-memory stand-in for the engine's external job table.
    Every mutation is an Intent applied under one lock, since FastAPI runs
    the sync routes on a threadpool.
    """
    def __init__(self):
        self._data: Dict[str, Any] = {"jobs": []}
        self._lock = threading.Lock()
        self.metrics = {
            "acquired": 0,
            "complete": 0,
            "fail": 0,
            "bpmnError": 0,
            "cmmnTerminate": 0,
        }

    def _apply(self, intent: Intent) -> Any:
        with self._lock:
            return intent.apply(self._data)

    def create_job(self, topic: str, scope_type: str = "bpmn", variables: Optional[List[Dict[str, Any]]] = None, retries: int = 3, element_name: Optional[str] = None) -> dict:
        job = self._apply(CreateJobIntent(topic, scope_type, variables or [], retries, element_name))
        logger.info(json.dumps({"event": "job_created", "job_id": job["id"], "topic": topic}))
        return job

    def acquire(self, topic: str, scope_type: str, worker_id: str, lock_duration: str, number_of_tasks: int) -> List[dict]:
        intent = AcquireIntent(topic, scope_type, worker_id, parse_lock_duration(lock_duration), number_of_tasks)
        with self._lock:
            jobs = intent.apply(self._data)
            self.metrics["acquired"] += len(jobs)
        return jobs

    def finish(self, action: str, job_id: str, worker_id: str, variables: List[Dict[str, Any]], error_code: Optional[str] = None) -> bool:
        intent_cls = TERMINAL_INTENTS[action]
        intent: TerminalIntent = intent_cls(job_id, worker_id, variables, error_code)
        with self._lock:
            result = intent.apply(self._data)
            self.metrics[action] += 1
        logger.info(json.dumps({"event": "job_" + action, "job_id": job_id, "worker_id": worker_id}))
        return result

    def list_jobs(self) -> List[dict]:
        with self._lock:
            return [job_document(j) for j in self._data["jobs"] if j["state"] == "pending"]

    def get(self, job_id: str) -> Optional[dict]:
        with self._lock:
            for job in self._data["jobs"]:
                if job["id"] == job_id:
                    return json.loads(json.dumps(job))
        return None
