from typing import Any

from infrastructure.http.gateway_client import ApiRequest, GatewayClient


class AuthApi:
    """Authentication endpoints."""

    def __init__(self, gateway: GatewayClient):
        self.gateway = gateway

    async def get_providers(self) -> Any:
        return await self.gateway.execute(ApiRequest("GET", "/auth/providers"))

    async def get_login_url(self, provider: str) -> Any:
        return await self.gateway.execute(ApiRequest("GET", f"/auth/login/{provider}"))

    async def handle_callback(self, provider: str, code: str, state: str) -> Any:
        # Server-side exchange; response_type=json asks for the envelope instead of a redirect.
        return await self.gateway.execute(
            ApiRequest(
                "GET",
                f"/auth/callback/{provider}",
                params={"code": code, "state": state, "response_type": "json"},
            )
        )

    async def verify_code(self, provider: str, code: str) -> Any:
        return await self.gateway.execute(ApiRequest("POST", f"/auth/verify/{provider}", json={"code": code}))

    async def get_user_profile(self) -> Any:
        return await self.gateway.execute(ApiRequest("GET", "/auth/profile"))
