class FlowableWorkerError(Exception):
    """Base class for every error raised by flowable_worker."""
    pass

class TransportError(FlowableWorkerError):
    """The HTTP call itself failed (connection refused, timeout, protocol error)."""
    pass

class AcquisitionError(FlowableWorkerError):
    """
    Acquiring jobs failed. Covers transport failures, non-2xx responses and
    response bodies that are not a JSON array; callers do not need to tell
    them apart.
    """
    def __init__(self, message: str, status_code: int = -1, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body

class DecodeError(FlowableWorkerError, ValueError):
    """The job body (or its variables field) is not valid JSON."""
    pass
