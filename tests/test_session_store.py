import asyncio
import json
from unittest.mock import MagicMock

import pytest

from conftest import BASE_URL, envelope, fake_http
from infrastructure.http.errors import DomainError, UnauthorizedError
from infrastructure.http.gateway_client import GatewayClient
from infrastructure.storage.key_value_storage import InMemoryStorage
from use_cases.benefit_store import BenefitStore
from use_cases.session_models import UserProfile
from use_cases.session_store import TOKEN_KEY, USER_KEY, SessionStore


def build(routes, storage=None):
    http = fake_http(routes)
    gateway = GatewayClient(BASE_URL, session=http)
    store = SessionStore(gateway, storage if storage is not None else InMemoryStorage())
    return store, gateway, http


def test_restores_token_and_user_from_storage():
    storage = InMemoryStorage({TOKEN_KEY: "t0", USER_KEY: json.dumps({"id": 7, "username": "neo"})})

    store, _, _ = build({}, storage)

    assert store.is_authenticated is True
    assert store.user_profile.id == 7
    assert store.user_profile.name == "neo"


def test_corrupt_stored_user_is_ignored():
    storage = InMemoryStorage({TOKEN_KEY: "t0", USER_KEY: "{not json"})

    store, _, _ = build({}, storage)

    assert store.is_authenticated is True
    assert store.user_profile is None


def test_fetch_providers_keeps_server_order():
    store, _, _ = build({
        ("GET", "/auth/providers"): envelope({"providers": [
            {"name": "google", "display_name": "Google"},
            {"name": "github", "display_name": "GitHub"},
        ]}),
    })

    providers = asyncio.run(store.fetch_providers())

    assert [p.id for p in providers] == ["google", "github"]
    assert store.providers == providers
    assert store.loading is False
    assert store.error is None


def test_fetch_providers_single_provider_scenario():
    store, _, _ = build({
        ("GET", "/auth/providers"): envelope({"providers": [{"name": "google", "display_name": "Google"}]}),
    })

    asyncio.run(store.fetch_providers())

    assert len(store.providers) == 1
    assert store.providers[0].id == "google"


def test_get_login_url_does_not_touch_session():
    store, _, _ = build({
        ("GET", "/auth/login/github"): envelope({"auth_url": "https://github.com/login/oauth/authorize?state=s"}),
    })

    url = asyncio.run(store.get_login_url("github"))

    assert url.startswith("https://github.com/")
    assert store.providers == []
    assert store.is_authenticated is False


def test_handle_callback_sets_and_persists_session():
    storage = InMemoryStorage()
    store, _, http = build({
        ("GET", "/auth/callback/google"): envelope({"token": "t1", "user": {"id": 1, "name": "A"}}),
    }, storage)

    response = asyncio.run(store.handle_callback("google", "CODE", "STATE"))

    assert response["token"] == "t1"
    assert store.is_authenticated is True
    assert store.user_profile.name == "A"
    assert storage.get(TOKEN_KEY) == "t1"
    assert json.loads(storage.get(USER_KEY))["name"] == "A"
    params = http.request.call_args.kwargs["params"]
    assert params == {"code": "CODE", "state": "STATE", "response_type": "json"}


def test_verify_code_posts_code():
    store, _, http = build({
        ("POST", "/auth/verify/linuxdo"): envelope({"token": "t2", "user": {"id": 2, "username": "B"}}),
    })

    asyncio.run(store.verify_code("linuxdo", "CODE"))

    assert http.request.call_args.kwargs["json"] == {"code": "CODE"}
    assert store.token == "t2"
    assert store.user_profile.name == "B"


def test_callback_without_user_leaves_profile_to_be_fetched():
    storage = InMemoryStorage()
    store, _, _ = build({("POST", "/auth/verify/github"): envelope({"token": "t3"})}, storage)

    asyncio.run(store.verify_code("github", "CODE"))

    assert store.is_authenticated is True
    assert store.user_profile is None
    assert json.loads(storage.get(USER_KEY)) is None


def test_callback_failure_records_error_and_reraises():
    store, _, _ = build({
        ("GET", "/auth/callback/google"): envelope(None, code=1002, msg="Authentication failed"),
    })

    with pytest.raises(DomainError):
        asyncio.run(store.handle_callback("google", "CODE", "STATE"))

    assert store.error == "Authentication failed"
    assert store.loading is False
    assert store.is_authenticated is False


def test_fetch_user_profile_is_noop_when_unauthenticated():
    store, _, http = build({})

    assert asyncio.run(store.fetch_user_profile()) is None
    http.request.assert_not_called()


def test_fetch_user_profile_overwrites_and_persists_user():
    storage = InMemoryStorage({TOKEN_KEY: "t0"})
    store, _, http = build({
        ("GET", "/auth/profile"): envelope({"user": {"id": 3, "username": "C", "accounts": [{"provider": "github"}]}}),
    }, storage)

    user = asyncio.run(store.fetch_user_profile())

    assert user.name == "C"
    assert user.providers == ["github"]
    assert json.loads(storage.get(USER_KEY))["username"] == "C"
    assert http.request.call_args.kwargs["headers"]["Authorization"] == "Bearer t0"


def test_set_auth_persists_both_entries():
    storage = InMemoryStorage()
    store, _, _ = build({}, storage)

    store.set_auth("t9", UserProfile.from_api({"id": 9, "username": "nine"}))

    assert store.is_authenticated is True
    assert storage.get(TOKEN_KEY) == "t9"
    assert json.loads(storage.get(USER_KEY))["id"] == 9


def test_logout_is_local():
    storage = InMemoryStorage({TOKEN_KEY: "t0", USER_KEY: json.dumps({"id": 1})})
    store, _, http = build({}, storage)

    store.logout()

    assert store.is_authenticated is False
    assert store.user_profile is None
    assert storage.keys() == set()
    http.request.assert_not_called()


def test_unauthorized_from_benefit_store_clears_session():
    storage = InMemoryStorage({TOKEN_KEY: "stale", USER_KEY: json.dumps({"id": 1})})
    store, gateway, _ = build({
        ("GET", "/benefits/my"): envelope(None, code=1004, msg="Invalid token", status=401),
    }, storage)
    benefits = BenefitStore(gateway)
    on_invalidated = MagicMock()
    store.add_invalidation_listener(on_invalidated)

    with pytest.raises(UnauthorizedError):
        asyncio.run(benefits.fetch_my_benefits())

    assert store.is_authenticated is False
    assert store.user_profile is None
    assert storage.keys() == set()
    on_invalidated.assert_called_once_with()
    assert benefits.error == "Invalid token"


def test_unauthorized_is_applied_even_if_caller_ignores_it():
    storage = InMemoryStorage({TOKEN_KEY: "stale"})
    store, _, _ = build({("GET", "/auth/profile"): envelope(None, status=401, msg="")}, storage)

    async def ignore_failure():
        try:
            await store.fetch_user_profile()
        except UnauthorizedError:
            pass

    asyncio.run(ignore_failure())

    assert store.is_authenticated is False
    assert storage.get(TOKEN_KEY) is None
    assert store.error == "Unauthorized"
