from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class HandlerStatus(str, Enum):
    SUCCESS = "success"
    FAIL = "fail"
    BPMN_ERROR = "bpmnError"
    CMMN_TERMINATE = "cmmnTerminate"


class HandlerVariable(BaseModel):
    """A single typed variable, as exchanged with the engine and with handlers."""
    name: str
    type: str = ""
    value: Any = None


class HandlerResult(BaseModel):
    """
    What a handler hands back for one job. The reducer only ever touches
    worker_id (backfill when empty) and error_code (default when empty).
    """
    model_config = ConfigDict(populate_by_name=True)

    status: Optional[HandlerStatus] = None
    worker_id: str = Field(default="", alias="workerId")
    variables: List[HandlerVariable] = Field(default_factory=list)
    error_code: str = Field(default="", alias="errorCode")

    def wire_variables(self) -> List[Dict[str, Any]]:
        return [v.model_dump(mode="json") for v in self.variables]


class SubscriptionRequest(BaseModel):
    """
    Parameters of one subscription. Immutable for the lifetime of the
    subscription. Only the acquire fields are sent to the engine; base_url
    and interval stay local.
    """
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    topic: str
    lock_duration: str = "PT10M"
    number_of_tasks: int = Field(default=1, ge=1)
    number_of_retries: int = Field(default=5, ge=0)
    worker_id: str
    scope_type: Literal["bpmn", "cmmn"] = "bpmn"
    base_url: str
    interval: float = Field(default=10.0, ge=0)

    @property
    def normalized_base_url(self) -> str:
        return self.base_url.rstrip("/")

    def acquire_body(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude={"base_url", "interval"})
