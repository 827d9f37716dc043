import logging

from flowable_worker.config import WorkerSettings, set_enable_logging


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("FLOWABLE_BASE_URL", "http://flowable:8080/")
    monkeypatch.setenv("FLOWABLE_TOPIC", "orders")
    monkeypatch.setenv("FLOWABLE_SCOPE_TYPE", "cmmn")
    monkeypatch.setenv("FLOWABLE_INTERVAL_SECONDS", "2.5")
    monkeypatch.setenv("FLOWABLE_BEARER_TOKEN", "tok")

    settings = WorkerSettings(_env_file=None)
    request = settings.subscription_request()

    assert request.topic == "orders"
    assert request.scope_type == "cmmn"
    assert request.interval == 2.5
    assert request.normalized_base_url == "http://flowable:8080"
    assert "baseUrl" not in request.acquire_body()
    assert settings.transport_config().request_headers()["Authorization"] == "Bearer tok"


def test_overrides_ignore_none():
    settings = WorkerSettings(_env_file=None)
    request = settings.subscription_request(topic="billing", worker_id=None)
    assert request.topic == "billing"
    assert request.worker_id == settings.worker_id


def test_set_enable_logging():
    pkg_logger = logging.getLogger("flowable_worker")
    child = logging.getLogger("flowable_worker.worker.reducer")
    try:
        set_enable_logging(False)
        assert not child.isEnabledFor(logging.CRITICAL)
        set_enable_logging(True)
        assert child.isEnabledFor(logging.WARNING) == logging.getLogger().isEnabledFor(logging.WARNING)
    finally:
        pkg_logger.setLevel(logging.NOTSET)
