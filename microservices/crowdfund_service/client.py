"""
Crowdfund Service Client

Client for other services to call crowdfund_service.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, Optional, Union

import httpx

from .models import CampaignResponse, DeadlineResponse

logger = logging.getLogger(__name__)

Number = Union[int, float, Decimal]


def _encode_number(value: Optional[Number]) -> Any:
    """JSON has no decimal type; send Decimals as strings to keep precision"""
    return str(value) if isinstance(value, Decimal) else value


class CrowdfundClient:
    """Client for crowdfund_service"""

    def __init__(
        self,
        base_url: str = "http://localhost:8260",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def _request(
        self, method: str, path: str, json: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Send a request and return the decoded result envelope"""
        async with httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=self._transport
        ) as client:
            response = await client.request(method, path, json=json)

        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict) and "success" in body:
            return body

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"{method} {path} failed: {e.response.text}")
            raise
        raise ValueError(f"Unexpected response from crowdfund_service: {response.text}")

    async def create_campaign(
        self,
        proposer: str,
        title: str,
        description: str,
        goal: Number,
        deadline_days: Number,
    ) -> CampaignResponse:
        """
        Create a campaign.

        Args:
            proposer: Creator identity
            title: Campaign title
            description: Campaign description
            goal: Funding goal
            deadline_days: Days from now until the deadline

        Returns:
            Result envelope with the created campaign
        """
        body = await self._request(
            "POST",
            "/api/v1/campaigns",
            json={
                "proposer": proposer,
                "title": title,
                "description": description,
                "goal": _encode_number(goal),
                "deadline_days": _encode_number(deadline_days),
            },
        )
        return CampaignResponse.model_validate(body)

    async def get_campaign(self, campaign_id: str) -> CampaignResponse:
        """Get campaign by ID"""
        body = await self._request("GET", f"/api/v1/campaigns/{campaign_id}")
        return CampaignResponse.model_validate(body)

    async def get_deadline(self, campaign_id: str) -> DeadlineResponse:
        """Get campaign deadline"""
        body = await self._request("GET", f"/api/v1/campaigns/{campaign_id}/deadline")
        return DeadlineResponse.model_validate(body)

    async def update_campaign_metadata(
        self, campaign_id: str, title: str, description: str
    ) -> CampaignResponse:
        """Update campaign title and description"""
        body = await self._request(
            "PATCH",
            f"/api/v1/campaigns/{campaign_id}",
            json={"title": title, "description": description},
        )
        return CampaignResponse.model_validate(body)

    async def donate(self, campaign_id: str, donor_id: str, amount: Number) -> CampaignResponse:
        """Donate to a campaign"""
        body = await self._request(
            "POST",
            f"/api/v1/campaigns/{campaign_id}/donations",
            json={"donor_id": donor_id, "amount": _encode_number(amount)},
        )
        return CampaignResponse.model_validate(body)

    async def delete_campaign(self, campaign_id: str) -> CampaignResponse:
        """Delete a campaign"""
        body = await self._request("DELETE", f"/api/v1/campaigns/{campaign_id}")
        return CampaignResponse.model_validate(body)

    async def health_check(self) -> bool:
        """Check service health"""
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.get("/health")
                return response.status_code == 200
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return False


__all__ = ["CrowdfundClient"]
