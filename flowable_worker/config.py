import logging
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from flowable_worker.client.transport import TransportConfig
from flowable_worker.worker.models import SubscriptionRequest

class WorkerSettings(BaseSettings):
    base_url: str = "http://localhost:8090"
    username: str = "admin"
    password: str = "test"
    bearer_token: str = ""
    request_timeout_seconds: Optional[float] = None

    topic: str = "testing"
    lock_duration: str = "PT10M"
    number_of_tasks: int = 1
    number_of_retries: int = 5
    worker_id: str = "worker1"
    scope_type: Literal["bpmn", "cmmn"] = "bpmn"
    interval_seconds: float = 10.0

    enable_logging: bool = True
    engine_port: int = 8090

    model_config = SettingsConfigDict(env_prefix="FLOWABLE_", env_file=".env", env_file_encoding="utf-8", extra="ignore")

    def transport_config(self) -> TransportConfig:
        return TransportConfig(
            username=self.username,
            password=self.password,
            bearer_token=self.bearer_token,
            timeout_seconds=self.request_timeout_seconds,
        )

    def subscription_request(self, **overrides) -> SubscriptionRequest:
        params = {
            "topic": self.topic,
            "lock_duration": self.lock_duration,
            "number_of_tasks": self.number_of_tasks,
            "number_of_retries": self.number_of_retries,
            "worker_id": self.worker_id,
            "scope_type": self.scope_type,
            "base_url": self.base_url,
            "interval": self.interval_seconds,
        }
        params.update({k: v for k, v in overrides.items() if v is not None})
        return SubscriptionRequest(**params)


def set_enable_logging(enabled: bool):
    """Mutes or unmutes every logger under the flowable_worker package."""
    logging.getLogger("flowable_worker").setLevel(logging.NOTSET if enabled else logging.CRITICAL + 1)
