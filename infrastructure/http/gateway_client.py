"""
Gateway client for the GiftRedeem HTTP API.

Every call goes through :class:`GatewayClient`, which:

* attaches ``Authorization: Bearer <token>`` when a token provider returns one,
* unwraps the ``{code, data, msg}`` envelope (``code == 0`` means success),
* classifies failures into :mod:`infrastructure.http.errors`,
* tells registered listeners about failures and 401 responses.

The client keeps no session state of its own. Blocking ``requests`` calls run
in a worker thread so that awaiting callers suspend only here.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import requests

from infrastructure.http.errors import DomainError, GatewayError, NetworkError, UnauthorizedError

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 20
UNKNOWN_ERROR_MESSAGE = "Unknown error"
NETWORK_ERROR_MESSAGE = "Network error"

FailureListener = Callable[[GatewayError], None]
UnauthorizedListener = Callable[[UnauthorizedError], None]


@dataclass(frozen=True)
class ApiRequest:
    method: str
    path: str
    params: Optional[Dict[str, Any]] = None
    json: Optional[Any] = None


@dataclass(frozen=True)
class GatewayResult:
    """Outcome of a single gateway call: either ``payload`` or ``error``."""

    payload: Any = None
    error: Optional[GatewayError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        if self.error is not None:
            raise self.error
        return self.payload


def _envelope(response: requests.Response) -> Optional[Dict[str, Any]]:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and "code" in body:
        return body
    return None


class GatewayClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._token_provider: Callable[[], Optional[str]] = lambda: None
        self._failure_listeners: List[FailureListener] = []
        self._unauthorized_listeners: List[UnauthorizedListener] = []

    def use_token_provider(self, provider: Callable[[], Optional[str]]) -> None:
        self._token_provider = provider

    def add_failure_listener(self, listener: FailureListener) -> None:
        self._failure_listeners.append(listener)

    def add_unauthorized_listener(self, listener: UnauthorizedListener) -> None:
        self._unauthorized_listeners.append(listener)

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self._token_provider()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _perform(self, request: ApiRequest) -> GatewayResult:
        url = f"{self.base_url}/{request.path.lstrip('/')}"
        log.debug(f"{request.method} {url}")
        try:
            response = self._session.request(
                request.method,
                url,
                params=request.params,
                json=request.json,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            return GatewayResult(error=NetworkError(str(e) or NETWORK_ERROR_MESSAGE))

        envelope = _envelope(response)
        status = response.status_code

        if status == 401:
            message = (envelope or {}).get("msg") or "Unauthorized"
            return GatewayResult(error=UnauthorizedError(message, status=status))

        if not 200 <= status < 300:
            if envelope is not None:
                return GatewayResult(
                    error=DomainError(
                        envelope.get("msg") or UNKNOWN_ERROR_MESSAGE,
                        status=status,
                        code=envelope.get("code"),
                    )
                )
            return GatewayResult(error=NetworkError(f"Request failed with status code {status}", status=status))

        if envelope is None:
            return GatewayResult(error=DomainError(UNKNOWN_ERROR_MESSAGE, status=status))

        if envelope["code"] == 0:
            return GatewayResult(payload=envelope.get("data"))

        return GatewayResult(
            error=DomainError(
                envelope.get("msg") or UNKNOWN_ERROR_MESSAGE,
                status=status,
                code=envelope["code"],
            )
        )

    def _dispatch(self, request: ApiRequest, error: GatewayError) -> None:
        log.warning(f"{request.method} {request.path} failed ({type(error).__name__}): {error.message}")
        for listener in self._failure_listeners:
            listener(error)
        if isinstance(error, UnauthorizedError):
            for listener in self._unauthorized_listeners:
                listener(error)

    async def send(self, request: ApiRequest) -> GatewayResult:
        result = await asyncio.to_thread(self._perform, request)
        if result.error is not None:
            self._dispatch(request, result.error)
        return result

    async def execute(self, request: ApiRequest) -> Any:
        result = await self.send(request)
        return result.unwrap()
