"""OAuth callback orchestration (application layer)."""

import logging
from dataclasses import dataclass
from typing import Literal, Optional

from infrastructure.http.errors import GatewayError
from use_cases.route_guard import safe_redirect
from use_cases.session_store import SessionStore

log = logging.getLogger(__name__)

AuthFlowStatus = Literal["CONTINUE", "STOP"]


@dataclass(frozen=True)
class AuthFlowResult:
    """Result contract for auth flow orchestration."""

    status: AuthFlowStatus
    reason: str
    redirect_to: Optional[str] = None


async def complete_oauth_callback(
    session_store: SessionStore,
    provider: str,
    code: Optional[str],
    state: Optional[str] = None,
    redirect: Optional[str] = None,
) -> AuthFlowResult:
    """Exchange the provider's code for a session and pick where to go next.

    With a ``state`` the server-side exchange is used; without one the code is
    verified directly. Failures are already on ``session_store.error``.
    """
    if not code:
        return AuthFlowResult(status="STOP", reason="code_missing")

    try:
        if state:
            await session_store.handle_callback(provider, code, state)
        else:
            await session_store.verify_code(provider, code)
    except GatewayError as e:
        log.info(f"OAuth callback for {provider} failed: {e.message}")
        return AuthFlowResult(status="STOP", reason="callback_failed")

    return AuthFlowResult(status="CONTINUE", reason="authenticated", redirect_to=safe_redirect(redirect))
