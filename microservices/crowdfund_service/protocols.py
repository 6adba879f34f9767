"""
Crowdfund Service Protocols

Defines interfaces for dependency injection and testing.
Following the protocol-based architecture pattern.
"""

from decimal import Decimal
from typing import Optional, Protocol

from .models import Campaign, LedgerError, LedgerErrorCode


# ====================
# Durable Map Protocol
# ====================


class CampaignStoreProtocol(Protocol):
    """Protocol for the durable campaign map keyed by campaign id"""

    async def initialize(self) -> None:
        """Initialize store connection"""
        ...

    async def close(self) -> None:
        """Close store connection"""
        ...

    async def health_check(self) -> bool:
        """Check store health"""
        ...

    async def get(self, key: str) -> Optional[Campaign]:
        """Get campaign by ID"""
        ...

    async def insert(self, key: str, value: Campaign) -> None:
        """Insert or replace the campaign stored under key"""
        ...

    async def remove(self, key: str) -> Optional[Campaign]:
        """Remove and return the campaign stored under key"""
        ...


# ====================
# Clock Protocol
# ====================


class ClockProtocol(Protocol):
    """Protocol for the time source"""

    def now(self) -> int:
        """Current time in nanoseconds; never decreases"""
        ...


# ====================
# Custom Exceptions
# ====================


class CrowdfundServiceError(Exception):
    """Base exception for crowdfund service errors"""

    code: LedgerErrorCode = LedgerErrorCode.STORAGE_FAILURE

    def __init__(
        self,
        message: str,
        campaign_id: Optional[str] = None,
        field: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.campaign_id = campaign_id
        self.field = field

    def to_error(self) -> LedgerError:
        """Convert to the error value returned across the ledger boundary"""
        return LedgerError(
            code=self.code,
            kind=self.code.kind,
            message=self.message,
            campaign_id=self.campaign_id,
            field=self.field,
        )


class CampaignValidationError(CrowdfundServiceError):
    """Raised when an input fails validation"""

    def __init__(
        self,
        message: str,
        code: LedgerErrorCode,
        field: Optional[str] = None,
        campaign_id: Optional[str] = None,
    ):
        super().__init__(message, campaign_id=campaign_id, field=field)
        self.code = code


class CampaignNotFoundError(CrowdfundServiceError):
    """Raised when campaign is not found"""

    code = LedgerErrorCode.NOT_FOUND

    def __init__(self, campaign_id: str):
        super().__init__(
            f"The campaign with id={campaign_id} is not found",
            campaign_id=campaign_id,
        )


class CampaignEndedError(CrowdfundServiceError):
    """Raised when a donation arrives after the campaign deadline"""

    code = LedgerErrorCode.CAMPAIGN_ENDED

    def __init__(self, campaign_id: str, deadline: int, now: int):
        super().__init__(
            f"The campaign with id={campaign_id} has ended",
            campaign_id=campaign_id,
        )
        self.deadline = deadline
        self.now = now


class GoalExceededError(CrowdfundServiceError):
    """Raised when a donation would push total donations past the goal"""

    code = LedgerErrorCode.GOAL_EXCEEDED

    def __init__(self, campaign_id: str, goal: Decimal, total: Decimal, amount: Decimal):
        super().__init__(
            f"Donation of {amount} to campaign id={campaign_id} exceeds the goal "
            f"({total} of {goal} raised, {goal - total} remaining)",
            campaign_id=campaign_id,
            field="amount",
        )
        self.goal = goal
        self.total = total
        self.amount = amount


class StorageFailureError(CrowdfundServiceError):
    """Raised when the store or clock fails underneath an operation"""

    code = LedgerErrorCode.STORAGE_FAILURE

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        campaign_id: Optional[str] = None,
    ):
        super().__init__(message, campaign_id=campaign_id)
        self.operation = operation


__all__ = [
    "CampaignStoreProtocol",
    "ClockProtocol",
    "CrowdfundServiceError",
    "CampaignValidationError",
    "CampaignNotFoundError",
    "CampaignEndedError",
    "GoalExceededError",
    "StorageFailureError",
]
