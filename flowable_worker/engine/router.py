from fastapi import APIRouter, Depends, HTTPException, Response
from flowable_worker.engine.schemas import AcquireJobsRequest, JobActionRequest, CreateJobRequest
from flowable_worker.engine.dependencies import get_job_store
from flowable_worker.engine.models import ActionRejected
from flowable_worker.engine.service import JobStore

router = APIRouter(prefix="/external-job-api", tags=["External Jobs"])
stub_router = APIRouter(prefix="/stub", tags=["Emulator"])

# Routes are plain `def`: the store takes a thread lock, so FastAPI runs
# them on its threadpool instead of the event loop.

@router.post("/acquire/jobs")
def acquire_jobs(req: AcquireJobsRequest, store: JobStore = Depends(get_job_store)):
    try:
        return store.acquire(req.topic, req.scopeType, req.workerId, req.lockDuration, req.numberOfTasks)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.get("/jobs")
def list_jobs(store: JobStore = Depends(get_job_store)):
    jobs = store.list_jobs()
    return {"data": jobs, "total": len(jobs)}

def _finish(action: str, job_id: str, req: JobActionRequest, store: JobStore) -> Response:
    try:
        store.finish(action, job_id, req.workerId, req.variables, req.errorCode)
    except ActionRejected as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    return Response(status_code=204)

@router.post("/acquire/jobs/{job_id}/complete", status_code=204)
def complete_job(job_id: str, req: JobActionRequest, store: JobStore = Depends(get_job_store)):
    return _finish("complete", job_id, req, store)

@router.post("/acquire/jobs/{job_id}/fail", status_code=204)
def fail_job(job_id: str, req: JobActionRequest, store: JobStore = Depends(get_job_store)):
    return _finish("fail", job_id, req, store)

@router.post("/acquire/jobs/{job_id}/bpmnError", status_code=204)
def bpmn_error_job(job_id: str, req: JobActionRequest, store: JobStore = Depends(get_job_store)):
    return _finish("bpmnError", job_id, req, store)

@router.post("/acquire/jobs/{job_id}/cmmnTerminate", status_code=204)
def cmmn_terminate_job(job_id: str, req: JobActionRequest, store: JobStore = Depends(get_job_store)):
    return _finish("cmmnTerminate", job_id, req, store)

@stub_router.post("/jobs")
def create_job(req: CreateJobRequest, store: JobStore = Depends(get_job_store)):
    return store.create_job(req.topic, req.scopeType, req.variables, req.retries, req.elementName)

@stub_router.get("/jobs/{job_id}")
def get_job(job_id: str, store: JobStore = Depends(get_job_store)):
    job = store.get(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="job not found")
    return job

@stub_router.get("/metrics")
def get_metrics(store: JobStore = Depends(get_job_store)):
    return {
        "status": "ok",
        "metrics": store.metrics
    }
