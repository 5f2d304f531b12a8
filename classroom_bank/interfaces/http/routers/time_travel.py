"""Time travel endpoints operating on the shadow ledger."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from classroom_bank.core.container import ApplicationContainer
from classroom_bank.core.errors import ClassroomBankError, ValidationError
from classroom_bank.interfaces.http.common import account_response, to_http_exception
from classroom_bank.interfaces.http.deps import get_container, get_db_session
from classroom_bank.modules.ledger.service import publish_account_updates
from classroom_bank.modules.time_travel import ShadowProfileNotFoundError
from classroom_bank.modules.time_travel.simulator import TIME_TRAVEL_UPDATE_EVENT, TimeTravelService
from classroom_bank.schemas import (
    AccountResponse,
    SimulateTimeTravelRequest,
    SuccessResponse,
    TimeTravelProfileRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()

SIMULATION_FAILED = "Time travel simulation failed."


@router.post(
    "/timeTravelProfiles",
    response_model=list[AccountResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create or fetch the time travel profile",
)
async def ensure_time_travel_profile(
    payload: TimeTravelProfileRequest,
    response: Response,
    container: ApplicationContainer = Depends(get_container),
    db: AsyncSession = Depends(get_db_session),
) -> list[AccountResponse]:
    service = TimeTravelService.with_session(db, container.db_timeout)
    try:
        accounts, created = await service.ensure_profile(payload.member_name)
        await db.commit()
    except ClassroomBankError as exc:
        raise to_http_exception(exc) from exc
    if not created:
        response.status_code = status.HTTP_200_OK
    return [account_response(account) for account in accounts]


@router.get(
    "/timeTravelProfiles/{member_name}",
    response_model=list[AccountResponse],
    summary="Get the time travel profile",
)
async def get_time_travel_profile(
    member_name: str,
    container: ApplicationContainer = Depends(get_container),
    db: AsyncSession = Depends(get_db_session),
) -> list[AccountResponse]:
    service = TimeTravelService.with_session(db, container.db_timeout)
    try:
        accounts = await service.get_profile(member_name)
    except ClassroomBankError as exc:
        raise to_http_exception(exc) from exc
    return [account_response(account) for account in accounts]


@router.post(
    "/timeTravelProfiles/{member_name}/reset",
    response_model=list[AccountResponse],
    summary="Discard simulated history and clone the live profile again",
)
async def reset_time_travel_profile(
    member_name: str,
    container: ApplicationContainer = Depends(get_container),
    db: AsyncSession = Depends(get_db_session),
) -> list[AccountResponse]:
    service = TimeTravelService.with_session(db, container.db_timeout)
    try:
        accounts = await service.reset_profile(member_name)
        await db.commit()
    except ClassroomBankError as exc:
        raise to_http_exception(exc) from exc
    await publish_account_updates(container.presence, accounts, TIME_TRAVEL_UPDATE_EVENT)
    return [account_response(account) for account in accounts]


@router.post("/simulateTimeTravel", response_model=SuccessResponse, summary="Fast-forward recurring obligations")
async def simulate_time_travel(
    payload: SimulateTimeTravelRequest,
    container: ApplicationContainer = Depends(get_container),
    db: AsyncSession = Depends(get_db_session),
) -> SuccessResponse:
    max_days = container.settings.time_travel.max_days
    if payload.days > max_days:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"days must not exceed {max_days}",
        )

    service = TimeTravelService.with_session(db, container.db_timeout)
    try:
        accounts = await service.simulate(payload.user_name, payload.days, container.clock())
        await db.commit()
    except ShadowProfileNotFoundError as exc:
        # a missing shadow profile is reported as a simulation failure
        logger.warning("Time travel simulation for %s failed: %s", payload.user_name, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Time travel simulation failed: {exc}",
        ) from exc
    except ValidationError as exc:
        raise to_http_exception(exc) from exc
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("Time travel simulation for %s failed", payload.user_name)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=SIMULATION_FAILED,
        ) from exc

    await publish_account_updates(container.presence, accounts, TIME_TRAVEL_UPDATE_EVENT)
    return SuccessResponse(
        message=f"Simulated {payload.days} days of time travel for {payload.user_name}.",
    )
