"""
Crowdfund Service Data Models

Canonical data structures for the crowdfund service: campaign records,
embedded donor entries, request bodies and result envelopes.
"""

import re
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator, model_validator


# =============================================================================
# IDENTIFIERS
# =============================================================================

CAMPAIGN_ID_PREFIX = "cmp_"
CAMPAIGN_ID_PATTERN = re.compile(r"^cmp_[0-9a-f]{32}$")


def new_campaign_id() -> str:
    """Generate a campaign ID from a random 128-bit token"""
    return f"{CAMPAIGN_ID_PREFIX}{uuid4().hex}"


def is_valid_campaign_id(campaign_id) -> bool:
    """Check a value against the generated campaign ID format"""
    return isinstance(campaign_id, str) and bool(CAMPAIGN_ID_PATTERN.match(campaign_id))


# =============================================================================
# ENUMS
# =============================================================================

class CampaignState(str, Enum):
    """Derived campaign state; never stored"""
    OPEN = "open"
    ENDED = "ended"


class ErrorKind(str, Enum):
    """Error taxonomy"""
    VALIDATION_ERROR = "validation_error"
    NOT_FOUND = "not_found"
    CAMPAIGN_ENDED = "campaign_ended"
    GOAL_EXCEEDED = "goal_exceeded"
    STORAGE_FAILURE = "storage_failure"


class LedgerErrorCode(str, Enum):
    """Specific failure codes returned by ledger operations"""
    INVALID_PROPOSER = "INVALID_PROPOSER"
    MISSING_TITLE = "MISSING_TITLE"
    MISSING_DESCRIPTION = "MISSING_DESCRIPTION"
    INVALID_GOAL = "INVALID_GOAL"
    INVALID_DEADLINE = "INVALID_DEADLINE"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    INVALID_DONOR = "INVALID_DONOR"
    INVALID_ID = "INVALID_ID"
    NOT_FOUND = "NOT_FOUND"
    CAMPAIGN_ENDED = "CAMPAIGN_ENDED"
    GOAL_EXCEEDED = "GOAL_EXCEEDED"
    STORAGE_FAILURE = "STORAGE_FAILURE"

    @property
    def kind(self) -> ErrorKind:
        return ERROR_KINDS[self]


ERROR_KINDS: Dict[LedgerErrorCode, ErrorKind] = {
    LedgerErrorCode.INVALID_PROPOSER: ErrorKind.VALIDATION_ERROR,
    LedgerErrorCode.MISSING_TITLE: ErrorKind.VALIDATION_ERROR,
    LedgerErrorCode.MISSING_DESCRIPTION: ErrorKind.VALIDATION_ERROR,
    LedgerErrorCode.INVALID_GOAL: ErrorKind.VALIDATION_ERROR,
    LedgerErrorCode.INVALID_DEADLINE: ErrorKind.VALIDATION_ERROR,
    LedgerErrorCode.INVALID_AMOUNT: ErrorKind.VALIDATION_ERROR,
    LedgerErrorCode.INVALID_DONOR: ErrorKind.VALIDATION_ERROR,
    LedgerErrorCode.INVALID_ID: ErrorKind.VALIDATION_ERROR,
    LedgerErrorCode.NOT_FOUND: ErrorKind.NOT_FOUND,
    LedgerErrorCode.CAMPAIGN_ENDED: ErrorKind.CAMPAIGN_ENDED,
    LedgerErrorCode.GOAL_EXCEEDED: ErrorKind.GOAL_EXCEEDED,
    LedgerErrorCode.STORAGE_FAILURE: ErrorKind.STORAGE_FAILURE,
}


# =============================================================================
# BASE MODELS
# =============================================================================

class BaseContract(BaseModel):
    """Base model for all contracts"""

    model_config = {
        "from_attributes": True,
        # Enums stay enum objects on the model; dumps in json mode emit their values.
    }


# =============================================================================
# CAMPAIGN MODELS
# =============================================================================

class Donor(BaseContract):
    """One accepted contribution attached to a campaign"""
    donor_id: str = Field(..., min_length=1, description="Donor identity")
    amount: Decimal = Field(..., gt=0, description="Contribution amount")


class Campaign(BaseContract):
    """Core Campaign model

    ``deadline`` and ``created_at`` are absolute timestamps in nanoseconds as
    reported by the injected clock.
    """
    campaign_id: str
    proposer: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)

    # Funding
    goal: Decimal = Field(..., gt=0)
    total_donations: Decimal = Field(default=Decimal("0"), ge=0)

    # Timing
    deadline: int = Field(..., ge=0)
    created_at: int = Field(..., ge=0)

    # Donations in arrival order
    donors: List[Donor] = Field(default_factory=list)

    @field_validator("campaign_id")
    @classmethod
    def validate_campaign_id(cls, v):
        if not is_valid_campaign_id(v):
            raise ValueError(f"Malformed campaign id: {v!r}")
        return v

    @model_validator(mode="after")
    def validate_donation_totals(self):
        """total_donations never exceeds goal and always matches the donor entries"""
        if self.total_donations > self.goal:
            raise ValueError(
                f"total_donations {self.total_donations} exceeds goal {self.goal}"
            )
        donor_sum = sum((d.amount for d in self.donors), Decimal("0"))
        if donor_sum != self.total_donations:
            raise ValueError(
                f"total_donations {self.total_donations} does not match donor sum {donor_sum}"
            )
        if self.deadline < self.created_at:
            raise ValueError("deadline precedes created_at")
        return self

    @property
    def remaining_goal(self) -> Decimal:
        return self.goal - self.total_donations

    def state_at(self, now: int) -> CampaignState:
        return CampaignState.ENDED if now > self.deadline else CampaignState.OPEN

    def is_open(self, now: int) -> bool:
        return self.state_at(now) == CampaignState.OPEN


# =============================================================================
# REQUEST MODELS
# =============================================================================
# Fields are optional so that missing values reach the ledger and come back
# as typed ledger errors instead of framework validation errors.

class CampaignCreateRequest(BaseContract):
    """Campaign creation request"""
    proposer: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    goal: Optional[Decimal] = None
    deadline_days: Optional[Decimal] = Field(None, description="Days from now until the deadline")


class CampaignUpdateRequest(BaseContract):
    """Campaign metadata update request"""
    title: Optional[str] = None
    description: Optional[str] = None


class DonationRequest(BaseContract):
    """Donation request"""
    donor_id: Optional[str] = None
    amount: Optional[Decimal] = None


# =============================================================================
# RESULT MODELS
# =============================================================================

class LedgerError(BaseContract):
    """Failure details carried by a result envelope"""
    code: LedgerErrorCode
    kind: ErrorKind
    message: str
    campaign_id: Optional[str] = None
    field: Optional[str] = None


class CampaignResponse(BaseContract):
    """Standard campaign operation result"""
    success: bool
    message: str
    campaign: Optional[Campaign] = None
    error: Optional[LedgerError] = None


class DeadlineResponse(BaseContract):
    """Deadline lookup result"""
    success: bool
    message: str
    campaign_id: Optional[str] = None
    deadline: Optional[int] = None
    error: Optional[LedgerError] = None


# =============================================================================
# HEALTH MODELS
# =============================================================================

class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    service: str
    port: int
    version: str
    dependencies: Dict[str, str] = Field(default_factory=dict)


class ReadinessResponse(BaseModel):
    """Readiness check response"""
    ready: bool
    checks: Dict[str, bool] = Field(default_factory=dict)
    details: Dict[str, str] = Field(default_factory=dict)


class LivenessResponse(BaseModel):
    """Liveness check response"""
    alive: bool
    uptime_seconds: float


__all__ = [
    "CAMPAIGN_ID_PREFIX",
    "CAMPAIGN_ID_PATTERN",
    "new_campaign_id",
    "is_valid_campaign_id",
    "CampaignState",
    "ErrorKind",
    "LedgerErrorCode",
    "ERROR_KINDS",
    "BaseContract",
    "Donor",
    "Campaign",
    "CampaignCreateRequest",
    "CampaignUpdateRequest",
    "DonationRequest",
    "LedgerError",
    "CampaignResponse",
    "DeadlineResponse",
    "HealthResponse",
    "ReadinessResponse",
    "LivenessResponse",
]
