from flowable_worker.worker.handlers import ExternalWorker, FunctionHandler, JobHandler
from flowable_worker.worker.models import HandlerStatus
from flowable_worker.worker.variables import get_var

import pytest


def test_success_echoes_variables():
    status, res = ExternalWorker().translate(200, '{"id":"J","variables":[{"name":"inputVar","type":"string","value":"hi"}]}')
    assert status == HandlerStatus.SUCCESS
    assert get_var(res.variables, "inputVar") == "hi"
    assert get_var(res.variables, "inputVarEcho") == "hi"
    assert get_var(res.variables, "dummy") == "a simple string"
    assert res.error_code == ""


def test_body_without_variables_still_succeeds():
    status, res = ExternalWorker().translate(200, '{"foo":"bar"}')
    assert status == HandlerStatus.SUCCESS
    assert [v.name for v in res.variables] == ["dummy"]


def test_acquire_failure_is_fail_with_status_code():
    status, res = ExternalWorker().translate(500, "")
    assert status == HandlerStatus.FAIL
    assert res.error_code == "500"


def test_decode_error_text_becomes_error_code():
    status, res = ExternalWorker().translate(200, '{"variables":')
    assert status == HandlerStatus.FAIL
    assert res.error_code


def test_base_handler_is_abstract():
    with pytest.raises(NotImplementedError):
        JobHandler().translate(200, "{}")


def test_function_handler_delegates():
    handler = FunctionHandler(lambda s, b: ("custom", None))
    assert handler.translate(200, "{}") == ("custom", None)
