from typing import Any, Mapping

from infrastructure.http.gateway_client import ApiRequest, GatewayClient


class BenefitApi:
    """Benefit and claim endpoints."""

    def __init__(self, gateway: GatewayClient):
        self.gateway = gateway

    async def create_benefit(self, data: Mapping[str, Any]) -> Any:
        return await self.gateway.execute(ApiRequest("POST", "/benefits", json=dict(data)))

    async def get_user_benefits(self) -> Any:
        return await self.gateway.execute(ApiRequest("GET", "/benefits/my"))

    async def update_benefit_status(self, uuid: str, status: str) -> Any:
        return await self.gateway.execute(ApiRequest("PUT", f"/benefits/{uuid}/status", json={"status": status}))

    async def get_benefit_claims(self, uuid: str) -> Any:
        return await self.gateway.execute(ApiRequest("GET", f"/benefits/{uuid}/claims"))

    async def get_benefit_by_uuid(self, uuid: str) -> Any:
        return await self.gateway.execute(ApiRequest("GET", f"/claim/{uuid}"))

    async def claim_benefit(self, uuid: str) -> Any:
        return await self.gateway.execute(ApiRequest("POST", f"/claim/{uuid}"))

    async def get_user_claims(self) -> Any:
        return await self.gateway.execute(ApiRequest("GET", "/claims/my"))
