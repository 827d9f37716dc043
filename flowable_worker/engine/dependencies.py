from fastapi import Request

from flowable_worker.engine.service import JobStore

def get_job_store(request: Request) -> JobStore:
    """FastAPI Dependency for accessing the emulated job table of the serving app."""
    store = getattr(request.app.state, "job_store", None)
    if store is None:
        raise RuntimeError("Job store is not initialized.")
    return store
