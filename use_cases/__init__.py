"""Application layer contracts for orchestrating high-level flows."""

from .async_state import AsyncOperationState
from .auth_flow import AuthFlowResult, AuthFlowStatus, complete_oauth_callback
from .benefit_store import BenefitStore
from .bootstrap import ClientContext, StartupResult, StartupStatus, run_startup
from .domain_models import Benefit, BenefitDraft, Claim, ErrorCode, active_benefits, expired_benefits
from .route_guard import ROUTES, NavigationDecision, Route, RouteMatch, guard, navigate, resolve, safe_redirect
from .session_models import Provider, UserProfile
from .session_store import SessionStore

__all__ = [
    "AsyncOperationState",
    "AuthFlowResult",
    "AuthFlowStatus",
    "Benefit",
    "BenefitDraft",
    "BenefitStore",
    "Claim",
    "ClientContext",
    "ErrorCode",
    "NavigationDecision",
    "Provider",
    "ROUTES",
    "Route",
    "RouteMatch",
    "SessionStore",
    "StartupResult",
    "StartupStatus",
    "UserProfile",
    "active_benefits",
    "complete_oauth_callback",
    "expired_benefits",
    "guard",
    "navigate",
    "resolve",
    "run_startup",
    "safe_redirect",
]
