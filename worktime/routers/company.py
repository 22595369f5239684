from fastapi import APIRouter, Depends

from worktime.errors import NotFound
from worktime.geo import check_location
from worktime.models import Company
from worktime.routers import deps
from worktime.schemas import LocationCheckRequest

router = APIRouter(prefix="/company", tags=["company"])


def _location(company: Company):
    if company.location is None:
        raise NotFound("Lokalizacja firmy nie jest skonfigurowana")
    return company.location


@router.get("")
async def get_company(company: Company = Depends(deps.get_company)) -> Company:
    return company


@router.get("/location")
async def get_company_location(company: Company = Depends(deps.get_company)):
    return _location(company)


@router.post("/check-location")
async def check_company_location(
    payload: LocationCheckRequest, company: Company = Depends(deps.get_company)
) -> dict:
    return check_location(payload.latitude, payload.longitude, _location(company))
