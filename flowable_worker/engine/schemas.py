from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field

class AcquireJobsRequest(BaseModel):
    topic: str
    lockDuration: str
    numberOfTasks: int = Field(default=1, ge=1)
    numberOfRetries: int = 5
    workerId: str
    scopeType: Literal["bpmn", "cmmn"] = "bpmn"

class JobActionRequest(BaseModel):
    workerId: str
    variables: List[Dict[str, Any]] = Field(default_factory=list)
    errorCode: Optional[str] = None

class CreateJobRequest(BaseModel):
    topic: str
    scopeType: Literal["bpmn", "cmmn"] = "bpmn"
    variables: List[Dict[str, Any]] = Field(default_factory=list)
    retries: int = Field(default=3, ge=1)
    elementName: Optional[str] = None
