"""
Публичное чтение портфолио: секции с элементами в порядке display_order.
"""
from fastapi import APIRouter, Depends

from folio.core.backend import Backend
from folio.core.database import get_backend
from folio.routers.errors import raise_for_failure
from folio.schemas.common import ErrorResponse, SuccessResponse
from folio.schemas.content import PortfolioSection
from folio.services import content

router = APIRouter(prefix="/portfolio", tags=["portfolio"])


@router.get(
    "/sections",
    response_model=SuccessResponse[list[PortfolioSection]],
    responses={503: {"model": ErrorResponse}},
)
def list_sections(backend: Backend = Depends(get_backend)):
    result = content.fetch_portfolio_sections(backend)
    raise_for_failure(result)
    return SuccessResponse(data=result.data)
