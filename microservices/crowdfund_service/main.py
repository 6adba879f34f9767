"""
Crowdfund Service Main Application

Thin FastAPI transport over the campaign ledger.
Port: 8260
"""

import time
from contextlib import asynccontextmanager
from typing import Optional, Union

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.config import get_settings
from core.logger import setup_service_logger

from . import __version__
from .campaign_ledger import CampaignLedger
from .factory import CrowdfundServiceFactory
from .models import (
    CampaignCreateRequest,
    CampaignResponse,
    CampaignUpdateRequest,
    DeadlineResponse,
    DonationRequest,
    ErrorKind,
    HealthResponse,
    LedgerError,
    LedgerErrorCode,
    LivenessResponse,
    ReadinessResponse,
)

settings = get_settings()

# Service configuration
SERVICE_NAME = settings.service.service_name
SERVICE_PORT = settings.service.service_port
SERVICE_VERSION = __version__

logger = setup_service_logger(SERVICE_NAME, config=settings.logging)

# Track startup time for uptime calculation
startup_time = time.time()

# Global factory instance
factory: Optional[CrowdfundServiceFactory] = None

STATUS_BY_KIND = {
    ErrorKind.VALIDATION_ERROR: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CAMPAIGN_ENDED: status.HTTP_409_CONFLICT,
    ErrorKind.GOAL_EXCEEDED: status.HTTP_409_CONFLICT,
    ErrorKind.STORAGE_FAILURE: status.HTTP_503_SERVICE_UNAVAILABLE,
}

# Body fields whose malformed values map onto ledger error codes
CODE_BY_FIELD = {
    "proposer": LedgerErrorCode.INVALID_PROPOSER,
    "title": LedgerErrorCode.MISSING_TITLE,
    "description": LedgerErrorCode.MISSING_DESCRIPTION,
    "goal": LedgerErrorCode.INVALID_GOAL,
    "deadline_days": LedgerErrorCode.INVALID_DEADLINE,
    "donor_id": LedgerErrorCode.INVALID_DONOR,
    "amount": LedgerErrorCode.INVALID_AMOUNT,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    global factory

    logger.info(f"Starting {SERVICE_NAME} on port {SERVICE_PORT}")

    owns_factory = factory is None
    if owns_factory:
        factory = CrowdfundServiceFactory(settings)
        await factory.initialize()

    yield

    logger.info(f"Shutting down {SERVICE_NAME}")
    if owns_factory and factory:
        await factory.close()
        factory = None


# Create FastAPI application
app = FastAPI(
    title="Crowdfund Service",
    description="Fundraising campaigns with goal and deadline enforced donations",
    version=SERVICE_VERSION,
    debug=settings.service.debug,
    lifespan=lifespan,
)


# ====================
# Exception Handlers
# ====================


@app.exception_handler(RequestValidationError)
async def body_validation_handler(request: Request, exc: RequestValidationError):
    """Report malformed body fields as ledger validation errors"""
    for err in exc.errors():
        loc = err.get("loc", ())
        field = loc[-1] if loc else None
        code = CODE_BY_FIELD.get(field)
        if code is None:
            continue
        message = f"Invalid {field}: {err.get('msg', 'invalid value')}"
        result = CampaignResponse(
            success=False,
            message=message,
            error=LedgerError(code=code, kind=code.kind, message=message, field=field),
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=result.model_dump(mode="json"),
        )
    return await request_validation_exception_handler(request, exc)


# ====================
# Dependencies
# ====================


def get_ledger() -> CampaignLedger:
    """Get campaign ledger from factory"""
    if not factory:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialized",
        )
    return factory.ledger


def to_response(
    result: Union[CampaignResponse, DeadlineResponse],
    success_status: int = status.HTTP_200_OK,
) -> JSONResponse:
    """Render a ledger result with the HTTP status for its outcome"""
    status_code = success_status if result.success else STATUS_BY_KIND[result.error.kind]
    return JSONResponse(status_code=status_code, content=result.model_dump(mode="json"))


# ====================
# Health Endpoints
# ====================


@app.get("/api/v1/campaigns/health")
@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Health check endpoint"""
    dependencies = {}

    if factory:
        try:
            store_healthy = await factory.store.health_check()
            dependencies["storage"] = "healthy" if store_healthy else "unhealthy"
        except Exception:
            dependencies["storage"] = "unhealthy"

    return HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        port=SERVICE_PORT,
        version=SERVICE_VERSION,
        dependencies=dependencies,
    )


@app.get("/health/ready", response_model=ReadinessResponse, tags=["Health"])
async def readiness_check():
    """Readiness check endpoint"""
    checks = {}
    details = {}

    if factory:
        try:
            store_healthy = await factory.store.health_check()
            checks["storage"] = store_healthy
            details["storage"] = "Connected" if store_healthy else "Connection failed"
        except Exception as e:
            checks["storage"] = False
            details["storage"] = str(e)
    else:
        checks["factory"] = False
        details["factory"] = "Factory not initialized"

    ready = all(checks.get(k, False) for k in ["storage"])

    return ReadinessResponse(
        ready=ready,
        checks=checks,
        details=details,
    )


@app.get("/health/live", response_model=LivenessResponse, tags=["Health"])
async def liveness_check():
    """Liveness check endpoint"""
    return LivenessResponse(
        alive=True,
        uptime_seconds=time.time() - startup_time,
    )


# ====================
# Campaign Endpoints
# ====================


@app.post("/api/v1/campaigns", response_model=CampaignResponse, tags=["Campaigns"])
async def create_campaign(
    request: CampaignCreateRequest,
    ledger: CampaignLedger = Depends(get_ledger),
):
    """Create a new campaign"""
    result = await ledger.create_campaign(
        proposer=request.proposer,
        title=request.title,
        description=request.description,
        goal=request.goal,
        deadline_days=request.deadline_days,
    )
    return to_response(result, success_status=status.HTTP_201_CREATED)


@app.get("/api/v1/campaigns/{campaign_id}", response_model=CampaignResponse, tags=["Campaigns"])
async def get_campaign(campaign_id: str, ledger: CampaignLedger = Depends(get_ledger)):
    """Get campaign by ID"""
    return to_response(await ledger.get_campaign(campaign_id))


@app.get(
    "/api/v1/campaigns/{campaign_id}/deadline",
    response_model=DeadlineResponse,
    tags=["Campaigns"],
)
async def get_deadline(campaign_id: str, ledger: CampaignLedger = Depends(get_ledger)):
    """Get campaign deadline (nanoseconds)"""
    return to_response(await ledger.get_deadline(campaign_id))


@app.patch("/api/v1/campaigns/{campaign_id}", response_model=CampaignResponse, tags=["Campaigns"])
async def update_campaign(
    campaign_id: str,
    request: CampaignUpdateRequest,
    ledger: CampaignLedger = Depends(get_ledger),
):
    """Update campaign title and description"""
    result = await ledger.update_campaign_metadata(
        campaign_id=campaign_id,
        title=request.title,
        description=request.description,
    )
    return to_response(result)


@app.post(
    "/api/v1/campaigns/{campaign_id}/donations",
    response_model=CampaignResponse,
    tags=["Donations"],
)
async def donate(
    campaign_id: str,
    request: DonationRequest,
    ledger: CampaignLedger = Depends(get_ledger),
):
    """Donate to a campaign"""
    result = await ledger.donate(
        campaign_id=campaign_id,
        donor_id=request.donor_id,
        amount=request.amount,
    )
    return to_response(result)


@app.delete("/api/v1/campaigns/{campaign_id}", response_model=CampaignResponse, tags=["Campaigns"])
async def delete_campaign(campaign_id: str, ledger: CampaignLedger = Depends(get_ledger)):
    """Delete a campaign"""
    return to_response(await ledger.delete_campaign(campaign_id))


def main():
    """Run the service"""
    import uvicorn

    uvicorn.run(
        "microservices.crowdfund_service.main:app",
        host="0.0.0.0",
        port=SERVICE_PORT,
        log_level=settings.logging.log_level.lower(),
    )


if __name__ == "__main__":
    main()
