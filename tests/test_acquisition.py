import json

import httpx
import pytest

from flowable_worker.errors import AcquisitionError, DecodeError, FlowableWorkerError, TransportError
from fakes import FakeEngine


def test_acquire_posts_body_to_normalized_url(make_client, request_params):
    fake = FakeEngine([httpx.Response(200, json=[{"id": "A"}, {"id": "B"}, {"id": 3}])])
    status, jobs = make_client(fake).acquire(request_params)

    assert status == 200
    assert jobs == [{"id": "A"}, {"id": "B"}, {"id": 3}]

    req = fake.requests[0]
    assert req.method == "POST"
    assert str(req.url) == "http://engine.test/external-job-api/acquire/jobs"
    assert json.loads(req.content) == {
        "topic": "myTopic",
        "lockDuration": "PT10M",
        "numberOfTasks": 2,
        "numberOfRetries": 5,
        "workerId": "worker1",
        "scopeType": "bpmn",
    }


@pytest.mark.parametrize("response", [
    httpx.Response(500, json=[]),
    httpx.Response(200, json={"data": []}),
    httpx.Response(200, text="not json"),
    httpx.Response(200, text="[" * 100000 + "]" * 100000),
])
def test_acquire_bad_responses_raise(make_client, request_params, response):
    with pytest.raises(AcquisitionError):
        make_client(FakeEngine([response])).acquire(request_params)


def test_acquire_transport_failure_raises(make_client, request_params):
    fake = FakeEngine([httpx.ConnectError("refused")])
    with pytest.raises(AcquisitionError):
        make_client(fake).acquire(request_params)


def test_list_jobs_is_passthrough(make_client):
    fake = FakeEngine()
    status, body = make_client(fake).list_jobs("http://engine.test//")
    assert status == 200
    assert body == '{"data": [], "total": 0}'
    assert str(fake.requests[0].url) == "http://engine.test/external-job-api/jobs"


def test_list_jobs_transport_failure(make_client):
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(TransportError):
        make_client(handler).list_jobs("http://engine.test")


def test_post_action_url(make_client):
    fake = FakeEngine()
    status, _ = make_client(fake).post_action("http://engine.test/", "J1", "complete", b'{"workerId": "w"}')
    assert status == 204
    assert fake.actions == [("/external-job-api/acquire/jobs/J1/complete", {"workerId": "w"})]


@pytest.mark.parametrize("error_cls", [TransportError, AcquisitionError, DecodeError])
def test_errors_share_a_documented_base(error_cls):
    assert issubclass(error_cls, FlowableWorkerError)
    assert FlowableWorkerError.__doc__
    assert error_cls.__doc__
