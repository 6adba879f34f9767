"""
Crowdfund Service Business Logic

Campaign ledger: creates campaigns, accepts donations against the goal until
the deadline, and reads, updates or deletes campaign records held in the
injected campaign store.
"""

import asyncio
import logging
from decimal import Decimal, Inexact, InvalidOperation, getcontext, localcontext
from typing import Any, Callable, Optional

from .clock import MAX_TIMESTAMP_NS, NANOS_PER_DAY
from .models import (
    Campaign,
    CampaignResponse,
    DeadlineResponse,
    Donor,
    ErrorKind,
    LedgerErrorCode,
    is_valid_campaign_id,
    new_campaign_id,
)
from .protocols import (
    CampaignStoreProtocol,
    ClockProtocol,
    CrowdfundServiceError,
    CampaignValidationError,
    CampaignNotFoundError,
    CampaignEndedError,
    GoalExceededError,
    StorageFailureError,
)

logger = logging.getLogger(__name__)

# Largest deadline offset that keeps a deadline inside the signed 64-bit
# nanosecond range
MAX_DEADLINE_DAYS = Decimal(MAX_TIMESTAMP_NS) // NANOS_PER_DAY


def _require_text(value: Any, field: str, code: LedgerErrorCode, message: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise CampaignValidationError(message, code=code, field=field)
    return value


def _to_decimal(
    value: Any,
    field: str,
    code: LedgerErrorCode,
    message: str,
    allow_zero: bool = False,
) -> Decimal:
    """Coerce a finite non-negative number to Decimal (bools and strings are rejected)"""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise CampaignValidationError(message, code=code, field=field)
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise CampaignValidationError(message, code=code, field=field)
    if not number.is_finite() or number < 0 or (number == 0 and not allow_zero):
        raise CampaignValidationError(message, code=code, field=field)
    precision = getcontext().prec
    if len(number.as_tuple().digits) > precision:
        raise CampaignValidationError(
            f"{field} has more than {precision} significant digits", code=code, field=field
        )
    return number


def _exact_add(left: Decimal, right: Decimal) -> Decimal:
    """Add without rounding; raises Inexact when the sum does not fit the context"""
    with localcontext() as ctx:
        ctx.traps[Inexact] = True
        return left + right


def _require_campaign_id(campaign_id: Any) -> str:
    if not is_valid_campaign_id(campaign_id):
        raise CampaignValidationError(
            f"Invalid campaign ID: {campaign_id!r}",
            code=LedgerErrorCode.INVALID_ID,
            field="campaign_id",
            campaign_id=campaign_id if isinstance(campaign_id, str) else None,
        )
    return campaign_id


class CampaignLedger:
    """Campaign ledger business logic layer

    Every public operation returns a result envelope; no exception escapes.
    Mutating operations are serialised so each read-modify-write cycle runs
    without interleaving, as it would under a one-call-at-a-time host.
    """

    DEFAULT_ID_MAX_ATTEMPTS = 5

    def __init__(
        self,
        store: CampaignStoreProtocol,
        clock: ClockProtocol,
        id_max_attempts: int = DEFAULT_ID_MAX_ATTEMPTS,
        id_generator: Callable[[], str] = new_campaign_id,
    ):
        self.store = store
        self.clock = clock
        self.id_max_attempts = id_max_attempts
        self._id_generator = id_generator
        self._mutation_lock = asyncio.Lock()

    # ====================
    # Operations
    # ====================

    async def create_campaign(
        self,
        proposer: Any,
        title: Any,
        description: Any,
        goal: Any,
        deadline_days: Any,
    ) -> CampaignResponse:
        """
        Create a new campaign.

        The deadline is ``now + deadline_days`` days, in clock nanoseconds.
        """
        try:
            async with self._mutation_lock:
                campaign = await self._create_campaign(
                    proposer, title, description, goal, deadline_days
                )
        except Exception as e:
            return self._campaign_failure("create_campaign", e)

        logger.info(
            f"Campaign {campaign.campaign_id} created by {campaign.proposer} "
            f"(goal={campaign.goal}, deadline={campaign.deadline})"
        )
        return CampaignResponse(
            success=True,
            message="Campaign created successfully",
            campaign=campaign,
        )

    async def update_campaign_metadata(
        self, campaign_id: Any, title: Any, description: Any
    ) -> CampaignResponse:
        """Replace title and description; all other fields are left untouched."""
        try:
            async with self._mutation_lock:
                campaign = await self._update_campaign_metadata(campaign_id, title, description)
        except Exception as e:
            return self._campaign_failure("update_campaign_metadata", e, campaign_id)

        logger.info(f"Campaign {campaign.campaign_id} metadata updated")
        return CampaignResponse(
            success=True,
            message="Campaign updated successfully",
            campaign=campaign,
        )

    async def donate(self, campaign_id: Any, donor_id: Any, amount: Any) -> CampaignResponse:
        """
        Donate to an open campaign.

        Rejected donations (ended campaign, goal overshoot, bad input) leave the
        stored record unchanged; accepted ones append the donor and bump the
        total in a single persist.
        """
        try:
            async with self._mutation_lock:
                campaign = await self._donate(campaign_id, donor_id, amount)
        except Exception as e:
            return self._campaign_failure("donate", e, campaign_id)

        logger.info(
            f"Donation of {amount} by {donor_id} accepted for campaign {campaign.campaign_id} "
            f"({campaign.total_donations}/{campaign.goal})"
        )
        return CampaignResponse(
            success=True,
            message="Donation accepted",
            campaign=campaign,
        )

    async def get_campaign(self, campaign_id: Any) -> CampaignResponse:
        """Get campaign by ID"""
        try:
            campaign = await self._load(_require_campaign_id(campaign_id), "get campaign")
        except Exception as e:
            return self._campaign_failure("get_campaign", e, campaign_id)

        return CampaignResponse(
            success=True,
            message="Campaign retrieved successfully",
            campaign=campaign,
        )

    async def get_deadline(self, campaign_id: Any) -> DeadlineResponse:
        """Get only the deadline of a campaign"""
        try:
            campaign = await self._load(_require_campaign_id(campaign_id), "get campaign deadline")
        except Exception as e:
            error = self._to_service_error("get_deadline", e, campaign_id)
            return DeadlineResponse(
                success=False,
                message=error.message,
                campaign_id=campaign_id if isinstance(campaign_id, str) else None,
                error=error.to_error(),
            )

        return DeadlineResponse(
            success=True,
            message="Deadline retrieved successfully",
            campaign_id=campaign.campaign_id,
            deadline=campaign.deadline,
        )

    async def delete_campaign(self, campaign_id: Any) -> CampaignResponse:
        """Remove a campaign and return the removed record"""
        try:
            async with self._mutation_lock:
                campaign = await self._delete_campaign(campaign_id)
        except Exception as e:
            return self._campaign_failure("delete_campaign", e, campaign_id)

        logger.info(f"Campaign {campaign.campaign_id} deleted")
        return CampaignResponse(
            success=True,
            message="Campaign deleted successfully",
            campaign=campaign,
        )

    # ====================
    # Operation bodies
    # ====================

    async def _create_campaign(self, proposer, title, description, goal, deadline_days) -> Campaign:
        proposer = _require_text(
            proposer, "proposer", LedgerErrorCode.INVALID_PROPOSER, "Invalid proposer"
        )
        title = _require_text(title, "title", LedgerErrorCode.MISSING_TITLE, "Title is required")
        description = _require_text(
            description, "description", LedgerErrorCode.MISSING_DESCRIPTION, "Description is required"
        )
        goal = _to_decimal(
            goal, "goal", LedgerErrorCode.INVALID_GOAL, "Goal should be greater than 0"
        )
        days = _to_decimal(
            deadline_days,
            "deadline_days",
            LedgerErrorCode.INVALID_DEADLINE,
            "Deadline must be a non-negative number of days",
            allow_zero=True,
        )
        if days > MAX_DEADLINE_DAYS:
            raise CampaignValidationError(
                f"Deadline must be at most {MAX_DEADLINE_DAYS} days away",
                code=LedgerErrorCode.INVALID_DEADLINE,
                field="deadline_days",
            )

        now = self._now("create campaign")
        deadline = now + int(days * NANOS_PER_DAY)
        if deadline > MAX_TIMESTAMP_NS:
            raise CampaignValidationError(
                "Deadline is beyond the supported time range",
                code=LedgerErrorCode.INVALID_DEADLINE,
                field="deadline_days",
            )
        campaign_id = await self._allocate_id()

        campaign = Campaign(
            campaign_id=campaign_id,
            proposer=proposer,
            title=title,
            description=description,
            goal=goal,
            total_donations=Decimal("0"),
            deadline=deadline,
            created_at=now,
            donors=[],
        )
        await self._persist(campaign, "create campaign")
        return campaign

    async def _update_campaign_metadata(self, campaign_id, title, description) -> Campaign:
        campaign_id = _require_campaign_id(campaign_id)
        title = _require_text(title, "title", LedgerErrorCode.MISSING_TITLE, "Title is required")
        description = _require_text(
            description, "description", LedgerErrorCode.MISSING_DESCRIPTION, "Description is required"
        )

        campaign = await self._load(campaign_id, "update campaign")
        updated = campaign.model_copy(update={"title": title, "description": description})
        await self._persist(updated, "update campaign")
        return updated

    async def _donate(self, campaign_id, donor_id, amount) -> Campaign:
        campaign_id = _require_campaign_id(campaign_id)
        donor_id = _require_text(
            donor_id, "donor_id", LedgerErrorCode.INVALID_DONOR, "Donor is required"
        )
        amount = _to_decimal(
            amount, "amount", LedgerErrorCode.INVALID_AMOUNT, "Donation amount should be greater than 0"
        )

        campaign = await self._load(campaign_id, "donate to campaign")

        now = self._now("donate to campaign")
        if now > campaign.deadline:
            raise CampaignEndedError(campaign_id, campaign.deadline, now)

        try:
            new_total = _exact_add(campaign.total_donations, amount)
        except Inexact:
            raise CampaignValidationError(
                "Donation amount cannot be added to the total without rounding",
                code=LedgerErrorCode.INVALID_AMOUNT,
                field="amount",
                campaign_id=campaign_id,
            )
        if new_total > campaign.goal:
            raise GoalExceededError(campaign_id, campaign.goal, campaign.total_donations, amount)

        updated = Campaign.model_validate(
            {
                **campaign.model_dump(),
                "donors": [*campaign.donors, Donor(donor_id=donor_id, amount=amount)],
                "total_donations": new_total,
            }
        )
        await self._persist(updated, "donate to campaign")
        return updated

    async def _delete_campaign(self, campaign_id) -> Campaign:
        campaign_id = _require_campaign_id(campaign_id)
        try:
            removed = await self.store.remove(campaign_id)
        except Exception as e:
            raise StorageFailureError(
                f"Failed to delete campaign: {e}", operation="remove", campaign_id=campaign_id
            ) from e
        if removed is None:
            raise CampaignNotFoundError(campaign_id)
        return removed

    # ====================
    # Collaborator access
    # ====================

    async def _fetch(self, campaign_id: str, action: str) -> Optional[Campaign]:
        try:
            return await self.store.get(campaign_id)
        except Exception as e:
            raise StorageFailureError(
                f"Failed to {action}: {e}", operation="get", campaign_id=campaign_id
            ) from e

    async def _load(self, campaign_id: str, action: str) -> Campaign:
        campaign = await self._fetch(campaign_id, action)
        if campaign is None:
            raise CampaignNotFoundError(campaign_id)
        return campaign

    async def _persist(self, campaign: Campaign, action: str) -> None:
        try:
            await self.store.insert(campaign.campaign_id, campaign)
        except Exception as e:
            raise StorageFailureError(
                f"Failed to {action}: {e}", operation="insert", campaign_id=campaign.campaign_id
            ) from e

    def _now(self, action: str) -> int:
        try:
            return int(self.clock.now())
        except Exception as e:
            raise StorageFailureError(f"Failed to {action}: clock unavailable ({e})", operation="now") from e

    async def _allocate_id(self) -> str:
        """Draw ids until one is not present in the store"""
        for attempt in range(1, self.id_max_attempts + 1):
            candidate = self._id_generator()
            if await self._fetch(candidate, "allocate campaign id") is None:
                return candidate
            logger.warning(f"Campaign id collision on attempt {attempt}: {candidate}")
        raise StorageFailureError(
            f"Failed to create campaign: no unique id after {self.id_max_attempts} attempts",
            operation="allocate_id",
        )

    # ====================
    # Failure conversion
    # ====================

    def _to_service_error(
        self, operation: str, exc: Exception, campaign_id: Any = None
    ) -> CrowdfundServiceError:
        if isinstance(exc, CrowdfundServiceError):
            error = exc
        else:
            logger.exception(f"Unexpected error in {operation}")
            error = StorageFailureError(
                f"Failed to {operation.replace('_', ' ')}: {exc}",
                operation=operation,
                campaign_id=campaign_id if isinstance(campaign_id, str) else None,
            )

        if error.code.kind == ErrorKind.STORAGE_FAILURE:
            logger.error(f"{operation} failed: {error.message}")
        else:
            logger.warning(f"{operation} rejected [{error.code.value}]: {error.message}")
        return error

    def _campaign_failure(
        self, operation: str, exc: Exception, campaign_id: Any = None
    ) -> CampaignResponse:
        error = self._to_service_error(operation, exc, campaign_id)
        return CampaignResponse(
            success=False,
            message=error.message,
            error=error.to_error(),
        )


__all__ = ["CampaignLedger"]
