"""
Crowdfund Service Data Contract

Re-exports the crowdfund models and provides test data factories
for the Crowdfund Service.

All tests SHOULD build campaigns and donors through these factories.
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import uuid4

from microservices.crowdfund_service.clock import NANOS_PER_DAY, NANOS_PER_SECOND
from microservices.crowdfund_service.models import (
    CAMPAIGN_ID_PATTERN,
    Campaign,
    CampaignCreateRequest,
    CampaignResponse,
    CampaignState,
    CampaignUpdateRequest,
    DeadlineResponse,
    DonationRequest,
    Donor,
    ErrorKind,
    LedgerError,
    LedgerErrorCode,
    is_valid_campaign_id,
    new_campaign_id,
)

# 2023-11-14T22:13:20Z, in nanoseconds
DEFAULT_START_NS = 1_700_000_000 * NANOS_PER_SECOND


# =============================================================================
# TEST DATA FACTORY
# =============================================================================

class CrowdfundTestDataFactory:
    """Factory for generating test data for crowdfund service tests

    Usage:
        factory = CrowdfundTestDataFactory()
        campaign = factory.make_campaign(goal=Decimal("100"))
        kwargs = factory.make_create_kwargs(deadline_days=0)
    """

    @staticmethod
    def make_campaign_id() -> str:
        """Generate campaign ID"""
        return new_campaign_id()

    @staticmethod
    def make_proposer() -> str:
        """Generate proposer identity"""
        return f"usr_test_{uuid4().hex[:12]}"

    @staticmethod
    def make_donor_id() -> str:
        """Generate donor identity"""
        return f"donor_test_{uuid4().hex[:12]}"

    @staticmethod
    def make_title() -> str:
        return f"Test Campaign {uuid4().hex[:6]}"

    @classmethod
    def make_donor(cls, amount: Decimal = Decimal("10"), donor_id: Optional[str] = None) -> Donor:
        return Donor(donor_id=donor_id or cls.make_donor_id(), amount=amount)

    @classmethod
    def make_campaign(
        cls,
        goal: Decimal = Decimal("100"),
        donors: Optional[List[Donor]] = None,
        created_at: int = DEFAULT_START_NS,
        deadline_days: int = 1,
        **overrides: Any,
    ) -> Campaign:
        """Generate complete campaign; total_donations follows the donors"""
        donors = donors or []
        data: Dict[str, Any] = {
            "campaign_id": cls.make_campaign_id(),
            "proposer": cls.make_proposer(),
            "title": cls.make_title(),
            "description": "Test campaign description",
            "goal": goal,
            "total_donations": sum((d.amount for d in donors), Decimal("0")),
            "deadline": created_at + deadline_days * NANOS_PER_DAY,
            "created_at": created_at,
            "donors": donors,
        }
        data.update(overrides)
        return Campaign(**data)

    @classmethod
    def make_create_kwargs(cls, **overrides: Any) -> Dict[str, Any]:
        """Keyword arguments for CampaignLedger.create_campaign"""
        kwargs: Dict[str, Any] = {
            "proposer": cls.make_proposer(),
            "title": cls.make_title(),
            "description": "Raise funds for a community project",
            "goal": 100,
            "deadline_days": 1,
        }
        kwargs.update(overrides)
        return kwargs

    @classmethod
    def make_create_request(cls, **overrides: Any) -> CampaignCreateRequest:
        return CampaignCreateRequest(**cls.make_create_kwargs(**overrides))

    @classmethod
    def make_create_payload(cls, **overrides: Any) -> Dict[str, Any]:
        """JSON body for POST /api/v1/campaigns"""
        return cls.make_create_kwargs(**overrides)


# =============================================================================
# EXPORTS
# =============================================================================

__all__ = [
    # Constants
    "CAMPAIGN_ID_PATTERN",
    "DEFAULT_START_NS",
    "NANOS_PER_DAY",
    "NANOS_PER_SECOND",
    # Enums
    "CampaignState",
    "ErrorKind",
    "LedgerErrorCode",
    # Models
    "Campaign",
    "Donor",
    "CampaignCreateRequest",
    "CampaignUpdateRequest",
    "DonationRequest",
    "LedgerError",
    "CampaignResponse",
    "DeadlineResponse",
    # Helpers
    "is_valid_campaign_id",
    "new_campaign_id",
    # Factory
    "CrowdfundTestDataFactory",
]
