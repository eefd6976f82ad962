"""Route table and the navigation guard that ties routes to authentication."""

import re
from dataclasses import dataclass, field
from typing import Dict, Literal, Optional, Tuple
from urllib.parse import parse_qsl, urlencode, urlsplit

NavigationStatus = Literal["ALLOW", "REDIRECT"]

APP_NAME = "GiftRedeem"
DEFAULT_TITLE = "Benefit Redemption"
LOGIN_PATH = "/login"
DEFAULT_AFTER_LOGIN = "/dashboard"


@dataclass(frozen=True)
class Route:
    path: str
    name: str
    title: Optional[str] = None
    requires_auth: bool = False
    children: Tuple["Route", ...] = ()


ROUTES: Tuple[Route, ...] = (
    Route("/", "home", "Home"),
    Route("/login", "login", "Login"),
    Route("/auth/callback/:provider", "callback", "Login callback"),
    Route(
        "/dashboard",
        "dashboard",
        "Dashboard",
        requires_auth=True,
        children=(
            Route("benefits", "my-benefits", "My benefits", requires_auth=True),
            Route("benefits/create", "create-benefit", "Create benefit", requires_auth=True),
            Route("benefits/:uuid", "benefit-detail", "Benefit details", requires_auth=True),
            Route("claims", "my-claims", "My claims", requires_auth=True),
        ),
    ),
    Route("/claim/:uuid", "claim-benefit", "Claim benefit"),
    Route("*", "not-found", "Page not found"),
)


@dataclass(frozen=True)
class RouteMatch:
    chain: Tuple[Route, ...]
    full_path: str
    params: Dict[str, str] = field(default_factory=dict)
    query: Dict[str, str] = field(default_factory=dict)

    @property
    def route(self) -> Route:
        return self.chain[-1]

    @property
    def name(self) -> str:
        return self.route.name

    @property
    def requires_auth(self) -> bool:
        return any(r.requires_auth for r in self.chain)


@dataclass(frozen=True)
class NavigationDecision:
    status: NavigationStatus
    match: RouteMatch
    title: str
    redirect_to: Optional[str] = None


def _pattern(path: str) -> "re.Pattern[str]":
    parts = []
    for segment in path.strip("/").split("/"):
        if segment.startswith(":"):
            parts.append(f"(?P<{segment[1:]}>[^/]+)")
        elif segment:
            parts.append(re.escape(segment))
    return re.compile("^/" + "/".join(parts) + "/?$")


def _join(parent: str, child: str) -> str:
    return parent.rstrip("/") + "/" + child.lstrip("/")


def _flatten(routes, parents=(), prefix=""):
    for route in routes:
        path = route.path if route.path.startswith("/") or route.path == "*" else _join(prefix, route.path)
        chain = parents + (route,)
        yield path, chain
        if route.children:
            yield from _flatten(route.children, chain, path)


def resolve(full_path: str, routes: Tuple[Route, ...] = ROUTES) -> RouteMatch:
    parts = urlsplit(full_path or "/")
    path = parts.path or "/"
    query = dict(parse_qsl(parts.query))

    fallback = None
    for route_path, chain in _flatten(routes):
        if route_path == "*":
            fallback = fallback or chain
            continue
        m = _pattern(route_path).match(path)
        if m:
            return RouteMatch(chain=chain, full_path=full_path, params=m.groupdict(), query=query)

    if fallback is None:
        raise LookupError(f"No route matches {path!r}")
    return RouteMatch(chain=fallback, full_path=full_path, query=query)


def document_title(match: RouteMatch) -> str:
    return f"{match.route.title or DEFAULT_TITLE} - {APP_NAME}"


def login_location(full_path: str) -> str:
    return f"{LOGIN_PATH}?{urlencode({'redirect': full_path})}"


def safe_redirect(target: Optional[str]) -> str:
    """Return ``target`` if it is an in-app path, else the dashboard."""
    if not target or not target.startswith("/") or target.startswith("//"):
        return DEFAULT_AFTER_LOGIN
    return target


def guard(match: RouteMatch, is_authenticated: bool) -> NavigationDecision:
    title = document_title(match)
    if match.requires_auth and not is_authenticated:
        return NavigationDecision(
            status="REDIRECT",
            match=match,
            title=title,
            redirect_to=login_location(match.full_path),
        )
    return NavigationDecision(status="ALLOW", match=match, title=title)


def navigate(full_path: str, is_authenticated: bool) -> NavigationDecision:
    return guard(resolve(full_path), is_authenticated)
