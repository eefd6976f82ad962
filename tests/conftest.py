from unittest.mock import MagicMock

import pytest

from infrastructure.http.gateway_client import GatewayClient
from infrastructure.storage.key_value_storage import InMemoryStorage

BASE_URL = "http://api.test/api"


def make_response(status=200, body=None):
    resp = MagicMock()
    resp.status_code = status
    if body is None:
        resp.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        resp.json.return_value = body
    return resp


def envelope(data=None, code=0, msg="success", status=200):
    return make_response(status, {"code": code, "msg": msg, "data": data})


def fake_http(routes):
    """requests.Session double answering by (method, path)."""
    session = MagicMock()

    def request(method, url, **kwargs):
        answer = routes[(method, url[len(BASE_URL):])]
        if isinstance(answer, Exception):
            raise answer
        return answer

    session.request.side_effect = request
    return session


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def http_session():
    return MagicMock()


@pytest.fixture
def gateway(http_session):
    return GatewayClient(BASE_URL, timeout=5, session=http_session)
