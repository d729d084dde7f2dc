"""
Financial summary endpoints for API v1.

Only users holding ``can_view_financials`` (administrators) may read
earnings data.
"""

from fastapi import APIRouter, Depends

from dj_agency_api.app.api.v1.errors import service_errors
from dj_agency_api.app.core.security import require_permission
from dj_agency_api.app.schemas.financial import DJFinancials, PlatformStats
from dj_agency_api.app.services.financial_service import FinancialService


router = APIRouter()


@router.get("/overview", response_model=PlatformStats)
async def platform_overview(
    current_user: dict = Depends(require_permission("can_view_financials")),
) -> PlatformStats:
    return await FinancialService.platform_stats()


@router.get("/djs/{dj_id}", response_model=DJFinancials)
async def dj_financials(
    dj_id: int,
    current_user: dict = Depends(require_permission("can_view_financials")),
) -> DJFinancials:
    """Earnings, pending payments, commission and the last six months for one DJ."""
    with service_errors():
        return await FinancialService.dj_financials(dj_id)
