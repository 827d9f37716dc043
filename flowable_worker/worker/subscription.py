import logging
import threading
from typing import Optional

from flowable_worker.client.acquisition import ExternalJobClient
from flowable_worker.errors import AcquisitionError
from flowable_worker.worker.dispatcher import SYNTHETIC_FAILURE_STATUS, JobDispatcher, invoke_handler
from flowable_worker.worker.handlers import JobHandler
from flowable_worker.worker.models import SubscriptionRequest

logger = logging.getLogger(__name__)


class Subscription:
    """
    Polls one topic: acquire, dispatch the batch in order, sleep, repeat.

    The interval is the same after a failed acquire as after a successful
    one; there is no backoff, so an engine that is down gets polled at the
    normal rate.

    stop() is checked at the top of every cycle and also cuts the sleep short.
    """
    def __init__(
        self,
        request: SubscriptionRequest,
        client: ExternalJobClient,
        handler: JobHandler,
        stop_event: Optional[threading.Event] = None,
    ):
        self.request = request
        self.client = client
        self.handler = handler
        self.dispatcher = JobDispatcher(client, request, handler)

        self._stop_event = stop_event or threading.Event()
        self._thread: Optional[threading.Thread] = None

        self.metrics = {
            "cycles": 0,
            "jobs_dispatched": 0,
            "acquire_failures": 0,
        }

    def run_once(self) -> int:
        """One acquire/dispatch cycle without the trailing sleep. Returns the number of jobs dispatched."""
        self.metrics["cycles"] += 1
        try:
            status, jobs = self.client.acquire(self.request)
        except AcquisitionError as e:
            self.metrics["acquire_failures"] += 1
            logger.warning(f"Acquire failed for topic {self.request.topic}: {e}")
            self.dispatcher.reduce("", invoke_handler(self.handler, SYNTHETIC_FAILURE_STATUS, ""))
            return 0

        if not jobs:
            return 0

        self.dispatcher.dispatch(status, jobs)
        self.metrics["jobs_dispatched"] += len(jobs)
        return len(jobs)

    def run(self):
        """Blocks until stop() is called."""
        logger.info({"event": "subscription_started", "topic": self.request.topic, "worker_id": self.request.worker_id})
        while not self._stop_event.is_set():
            try:
                self.run_once()
            except Exception:
                # A broken cycle costs that cycle only
                logger.exception(f"Polling cycle failed for topic {self.request.topic}")
            self._stop_event.wait(self.request.interval)
        logger.info({"event": "subscription_stopped", "topic": self.request.topic, "metrics": self.metrics})

    def start(self) -> threading.Thread:
        self._thread = threading.Thread(
            target=self.run,
            name=f"subscription-{self.request.topic}",
            daemon=True,
        )
        self._thread.start()
        return self._thread

    def stop(self):
        self._stop_event.set()

    def join(self, timeout: Optional[float] = None):
        if self._thread is not None:
            self._thread.join(timeout)

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()
