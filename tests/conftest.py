import httpx
import pytest

from flowable_worker.client.acquisition import ExternalJobClient
from flowable_worker.client.transport import HttpTransport, TransportConfig
from flowable_worker.worker.models import SubscriptionRequest
from fakes import FakeEngine

BASE_URL = "http://engine.test"


@pytest.fixture
def engine():
    return FakeEngine()


@pytest.fixture
def make_client():
    def _make(fake: FakeEngine, config: TransportConfig = None) -> ExternalJobClient:
        http_client = httpx.Client(transport=httpx.MockTransport(fake))
        return ExternalJobClient(HttpTransport(config or TransportConfig(), client=http_client))
    return _make


@pytest.fixture
def request_params():
    return SubscriptionRequest(
        topic="myTopic",
        lock_duration="PT10M",
        number_of_tasks=2,
        number_of_retries=5,
        worker_id="worker1",
        scope_type="bpmn",
        base_url=BASE_URL + "/",
        interval=0.01,
    )
