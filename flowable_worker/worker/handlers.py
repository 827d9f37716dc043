from typing import Callable, Optional, Tuple, Union

from flowable_worker.errors import DecodeError
from flowable_worker.worker.models import HandlerResult, HandlerStatus, HandlerVariable
from flowable_worker.worker.variables import decode_variables, get_var

Verdict = Tuple[Union[HandlerStatus, str], Optional[HandlerResult]]


class JobHandler:
    """
    Business logic plugged into a subscription.

    translate() receives the HTTP status of the acquire call and one job
    serialized as JSON text. When acquisition failed it is called with
    (500, "") instead, so it can log or alert.
    """
    def translate(self, status: int, body: str) -> Verdict:
        raise NotImplementedError


class FunctionHandler(JobHandler):
    def __init__(self, fn: Callable[[int, str], Verdict]):
        self.fn = fn

    def translate(self, status: int, body: str) -> Verdict:
        return self.fn(status, body)


class ExternalWorker(JobHandler):
    """Sample handler: echoes the job's variables back and adds a marker variable."""
    def translate(self, status: int, body: str) -> Verdict:
        res = HandlerResult(status=HandlerStatus.SUCCESS)

        # Either the acquire call or the job itself could not be read
        if status >= 400:
            res.error_code = str(status)
            res.status = HandlerStatus.FAIL

        if body:
            try:
                variables = decode_variables(body)
            except DecodeError as e:
                res.error_code = str(e)
                res.status = HandlerStatus.FAIL
            else:
                res.variables.extend(variables)
                input_var = get_var(variables, "inputVar")
                if input_var:
                    res.variables.append(HandlerVariable(name="inputVarEcho", type="string", value=input_var))
                res.variables.append(HandlerVariable(name="dummy", type="string", value="a simple string"))
                res.status = HandlerStatus.SUCCESS

        return res.status, res
