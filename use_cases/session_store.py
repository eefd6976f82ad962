"""
Session store: authentication state of the current browser session.

Owns the bearer token, the user profile and the list of login providers.
Token and profile are read from the storage port on construction and written
back on every change. A 401 seen by the gateway clears everything through
:meth:`SessionStore._on_unauthorized`.
"""

import json
import logging
from typing import Any, Callable, Dict, List, Optional

from infrastructure.api.auth_api import AuthApi
from infrastructure.http.errors import UnauthorizedError
from infrastructure.http.gateway_client import GatewayClient
from infrastructure.storage.key_value_storage import KeyValueStorage
from use_cases.async_state import AsyncOperationState
from use_cases.session_models import Provider, UserProfile

log = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"


def _load_user(raw: Optional[str]) -> Optional[UserProfile]:
    if not raw:
        return None
    try:
        data = json.loads(raw)
    except ValueError:
        log.warning("Stored user profile is not valid JSON, ignoring it")
        return None
    if not isinstance(data, dict):
        return None
    return UserProfile.from_api(data)


def _profile_from(response: Dict[str, Any]) -> Optional[UserProfile]:
    user = response.get("user")
    return UserProfile.from_api(user) if user else None


class SessionStore:
    def __init__(self, gateway: GatewayClient, storage: KeyValueStorage):
        self._api = AuthApi(gateway)
        self._storage = storage
        self._invalidation_listeners: List[Callable[[], None]] = []

        self.token: str = storage.get(TOKEN_KEY) or ""
        self.user: Optional[UserProfile] = _load_user(storage.get(USER_KEY))
        self.providers: List[Provider] = []
        self.state = AsyncOperationState()

        gateway.use_token_provider(lambda: self.token)
        gateway.add_unauthorized_listener(self._on_unauthorized)

    @property
    def loading(self) -> bool:
        return self.state.loading

    @property
    def error(self) -> Optional[str]:
        return self.state.error

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @property
    def user_profile(self) -> Optional[UserProfile]:
        return self.user

    def add_invalidation_listener(self, listener: Callable[[], None]) -> None:
        self._invalidation_listeners.append(listener)

    async def fetch_providers(self) -> List[Provider]:
        async with self.state.track("Failed to fetch login providers"):
            response = await self._api.get_providers()
            self.providers = [Provider.from_api(p) for p in (response or {}).get("providers") or []]
            return self.providers

    async def get_login_url(self, provider_id: str) -> str:
        async with self.state.track("Failed to get login URL"):
            response = await self._api.get_login_url(provider_id)
            return response["auth_url"]

    async def handle_callback(self, provider_id: str, code: str, state: str) -> Dict[str, Any]:
        async with self.state.track("Login verification failed"):
            response = await self._api.handle_callback(provider_id, code, state)
            self.set_auth(response["token"], _profile_from(response))
            return response

    async def verify_code(self, provider_id: str, code: str) -> Dict[str, Any]:
        async with self.state.track("Login verification failed"):
            response = await self._api.verify_code(provider_id, code)
            self.set_auth(response["token"], _profile_from(response))
            return response

    async def fetch_user_profile(self) -> Optional[UserProfile]:
        if not self.is_authenticated:
            return None

        async with self.state.track("Failed to fetch user profile"):
            response = await self._api.get_user_profile()
            self.user = UserProfile.from_api(response["user"])
            self._storage.set(USER_KEY, json.dumps(self.user.to_dict()))
            return self.user

    def set_auth(self, token: str, user: Optional[UserProfile]) -> None:
        self.token = token
        self.user = user
        self._storage.set(TOKEN_KEY, token)
        self._storage.set(USER_KEY, json.dumps(user.to_dict() if user is not None else None))

    def logout(self) -> None:
        self._clear()
        log.info("Session cleared by logout")

    def _clear(self) -> None:
        self.token = ""
        self.user = None
        self._storage.remove(TOKEN_KEY)
        self._storage.remove(USER_KEY)

    def _on_unauthorized(self, error: UnauthorizedError) -> None:
        log.warning(f"Session invalidated by server: {error.message}")
        self._clear()
        for listener in self._invalidation_listeners:
            listener()
