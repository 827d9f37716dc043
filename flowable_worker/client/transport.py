import logging
from typing import Dict, Optional, Tuple

import httpx
from pydantic import BaseModel, ConfigDict, Field

from flowable_worker.errors import TransportError

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


class TransportConfig(BaseModel):
    """
    Connection settings shared by every subscription in the process.
    Built once before any subscription starts and never mutated afterwards.
    A bearer token, when set, takes precedence over basic credentials.
    """
    model_config = ConfigDict(frozen=True)

    username: str = ""
    password: str = ""
    bearer_token: str = ""
    headers: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_HEADERS))
    timeout_seconds: Optional[float] = None

    def auth(self) -> Optional[httpx.Auth]:
        if self.bearer_token:
            return None
        if self.username or self.password:
            return httpx.BasicAuth(self.username, self.password)
        return None

    def request_headers(self) -> Dict[str, str]:
        headers = dict(self.headers)
        if self.bearer_token:
            headers["Authorization"] = f"Bearer {self.bearer_token}"
        return headers


class HttpTransport:
    """
    Blocking GET/POST against the engine. Returns (status, body) for any
    HTTP response, including non-2xx ones; only failures to get a response
    at all raise TransportError.
    """
    def __init__(self, config: Optional[TransportConfig] = None, client: Optional[httpx.Client] = None):
        self.config = config or TransportConfig()
        self._owns_client = client is None
        if client is None:
            timeout = self.config.timeout_seconds if self.config.timeout_seconds is not None else 5.0
            client = httpx.Client(timeout=timeout)
        self.http_client = client

    def _send(self, method: str, url: str, content: Optional[bytes] = None) -> Tuple[int, bytes]:
        try:
            resp = self.http_client.request(
                method,
                url,
                content=content,
                headers=self.config.request_headers(),
                auth=self.config.auth(),
            )
        except httpx.HTTPError as e:
            logger.debug(f"{method} {url} failed: {e}")
            raise TransportError(f"{method} {url} failed: {e}") from e
        return resp.status_code, resp.content

    def get(self, url: str) -> Tuple[int, bytes]:
        return self._send("GET", url)

    def post(self, url: str, payload: bytes) -> Tuple[int, bytes]:
        return self._send("POST", url, content=payload)

    def close(self):
        if self._owns_client:
            self.http_client.close()

    def __enter__(self) -> "HttpTransport":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()
