"""Startup orchestration: wire the gateway client and the stores."""

from dataclasses import dataclass
from typing import Callable, Literal, Optional, Tuple

import requests

from infrastructure.http.errors import GatewayError
from infrastructure.http.gateway_client import GatewayClient
from infrastructure.storage.key_value_storage import KeyValueStorage
from settings import Settings
from use_cases.benefit_store import BenefitStore
from use_cases.session_store import SessionStore

StartupStatus = Literal["CONTINUE", "STOP"]


@dataclass(frozen=True)
class ClientContext:
    gateway: GatewayClient
    session_store: SessionStore
    benefit_store: BenefitStore


@dataclass(frozen=True)
class StartupResult:
    """Result contract for startup/bootstrap orchestration."""

    status: StartupStatus
    planned_steps: Tuple[str, ...]
    client: Optional[ClientContext] = None


def run_startup(
    settings: Settings,
    storage: KeyValueStorage,
    *,
    http_session: Optional[requests.Session] = None,
    notify: Optional[Callable[[GatewayError], None]] = None,
    on_invalidated: Optional[Callable[[], None]] = None,
) -> StartupResult:
    """Build the client stack for one browser session."""
    executed_steps = []

    gateway = GatewayClient(settings.api_base_url, timeout=settings.request_timeout, session=http_session)
    executed_steps.append("build_gateway")

    # Session store registers first so a 401 clears state before the UI reacts.
    session_store = SessionStore(gateway, storage)
    executed_steps.append("restore_session")

    benefit_store = BenefitStore(gateway)
    executed_steps.append("build_benefit_store")

    # Data of the invalidated user is dropped before the UI navigates away.
    session_store.add_invalidation_listener(benefit_store.reset)
    executed_steps.append("subscribe_store_reset")

    if notify is not None:
        gateway.add_failure_listener(notify)
        executed_steps.append("subscribe_notifications")

    if on_invalidated is not None:
        session_store.add_invalidation_listener(on_invalidated)
        executed_steps.append("subscribe_invalidation")

    return StartupResult(
        status="CONTINUE",
        planned_steps=tuple(executed_steps),
        client=ClientContext(gateway=gateway, session_store=session_store, benefit_store=benefit_store),
    )
