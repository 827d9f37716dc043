import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from flowable_worker.engine.router import router as job_router, stub_router
from flowable_worker.engine.service import JobStore

logger = logging.getLogger(__name__)

def create_app(store: Optional[JobStore] = None) -> FastAPI:
    """
    Builds an emulator of the engine's external-job-api. Pass a store to
    seed or inspect it from the outside (tests do).
    """
    job_store = store or JobStore()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info({"event": "engine_startup"})
        yield
        logger.info({"event": "engine_shutdown", "metrics": job_store.metrics})

    app = FastAPI(title="External Job API emulator", lifespan=lifespan)
    app.state.job_store = job_store
    app.include_router(job_router)
    app.include_router(stub_router)
    return app

app = create_app()
