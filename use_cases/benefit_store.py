"""
Domain state store: the benefits and claims of the current user.

Collections are replaced wholesale by fetches. A created benefit is put at the
front of ``my_benefits`` (newest first). Status updates patch the local entry
only after the server confirmed them. Claiming a benefit does not touch
``my_claims``; call :meth:`BenefitStore.fetch_my_claims` to see it.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from infrastructure.api.benefit_api import BenefitApi
from infrastructure.http.gateway_client import GatewayClient
from use_cases.async_state import AsyncOperationState
from use_cases.domain_models import Benefit, BenefitDraft, Claim, active_benefits, expired_benefits

log = logging.getLogger(__name__)


class BenefitStore:
    def __init__(self, gateway: GatewayClient):
        self._api = BenefitApi(gateway)
        self.my_benefits: List[Benefit] = []
        self.my_claims: List[Claim] = []
        self.current_benefit: Optional[Benefit] = None
        self.state = AsyncOperationState()

    def reset(self) -> None:
        """Forget everything loaded for the previous user."""
        self.my_benefits = []
        self.my_claims = []
        self.current_benefit = None

    @property
    def loading(self) -> bool:
        return self.state.loading

    @property
    def error(self) -> Optional[str]:
        return self.state.error

    @property
    def active_benefits(self) -> List[Benefit]:
        return active_benefits(self.my_benefits)

    @property
    def expired_benefits(self) -> List[Benefit]:
        return expired_benefits(self.my_benefits)

    async def create_benefit(self, data: Union[BenefitDraft, Mapping[str, Any]]) -> Dict[str, Any]:
        async with self.state.track("Failed to create benefit"):
            payload = data.to_payload() if isinstance(data, BenefitDraft) else data
            response = await self._api.create_benefit(payload)
            self.my_benefits.insert(0, Benefit.from_api(response["benefit"]))
            return response

    async def fetch_my_benefits(self) -> List[Benefit]:
        async with self.state.track("Failed to fetch benefits"):
            response = await self._api.get_user_benefits()
            self.my_benefits = [Benefit.from_api(b) for b in (response or {}).get("benefits") or []]
            return self.my_benefits

    async def update_benefit_status(self, uuid: str, status: str) -> bool:
        async with self.state.track("Failed to update benefit status"):
            await self._api.update_benefit_status(uuid, status)

            for benefit in self.my_benefits:
                if benefit.uuid == uuid:
                    benefit.status = status
                    break
            else:
                log.debug(f"Benefit {uuid} is not loaded locally, nothing to patch")
            return True

    async def fetch_benefit_claims(self, uuid: str) -> List[Claim]:
        async with self.state.track("Failed to fetch claim records"):
            response = await self._api.get_benefit_claims(uuid)
            return [Claim.from_api(c) for c in (response or {}).get("claims") or []]

    async def get_benefit_by_uuid(self, uuid: str) -> Benefit:
        async with self.state.track("Failed to fetch benefit details"):
            response = await self._api.get_benefit_by_uuid(uuid)
            self.current_benefit = Benefit.from_api(response["benefit"])
            return self.current_benefit

    async def claim_benefit(self, uuid: str) -> Any:
        async with self.state.track("Failed to claim benefit"):
            return await self._api.claim_benefit(uuid)

    async def fetch_my_claims(self) -> List[Claim]:
        async with self.state.track("Failed to fetch claimed benefits"):
            response = await self._api.get_user_claims()
            self.my_claims = [Claim.from_api(c) for c in (response or {}).get("claims") or []]
            return self.my_claims
